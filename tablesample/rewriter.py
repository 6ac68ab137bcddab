# rewriter.py
from typing import Any, Dict, Optional, Union
import logging

from sqlglot import exp

from tablesample.errors import TableSampleError, UnsupportedJoinTarget
from tablesample.parser import DEFAULT_DIALECT, FromTarget, find_from, from_target, parse_statement
from tablesample.sampler import SqlCase, normalize, render, upper_case

logger = logging.getLogger(__name__)

ATTR_TABLESAMPLE = "tablesample"
ATTR_FROM = "from"


def attach_to_from(from_fragment: Union[str, FromTarget], clause: str) -> str:
    """
    Append clause text to a single-table FROM fragment.

    A plain string is treated as an already-rendered single table reference and is
    not re-parsed. A FromTarget describing a join, or a table that is already
    sampled, is rejected.
    """
    if isinstance(from_fragment, FromTarget):
        if from_fragment.is_join:
            names = ", ".join(t.alias or t.name for t in from_fragment.tables)
            raise UnsupportedJoinTarget(f"tablesample on joins is not supported (from: {names})")
        if from_fragment.sampled:
            raise TableSampleError(f"{from_fragment.sql} already has a tablesample clause")
        from_fragment = from_fragment.sql
    return from_fragment + clause


def apply_tablesample(sql: str,
                      spec: Any,
                      dialect: Optional[str] = DEFAULT_DIALECT,
                      sql_case: SqlCase = upper_case,
                      strict: bool = False) -> str:
    """
    Rewrite a SELECT so that its FROM table is read through TABLESAMPLE.

    Run this before the statement is handed to the database: the options are validated
    and the join check happens before anything is changed, so a failure leaves no
    partially rewritten statement behind.
    """
    select = parse_statement(sql, dialect)
    target = from_target(select, dialect)
    request = normalize(spec, strict=strict)
    clause = render(request, sql_case=sql_case, dialect=dialect)

    sampled_from = attach_to_from(target, " " + clause)
    # the sampled fragment goes back in verbatim; sqlglot does not re-render it
    find_from(select).set("this", exp.Var(this=sampled_from))

    final_sql = select.sql(dialect=dialect)
    logger.debug("tablesample rewrite: %s -> %s", sql, final_sql)
    return final_sql


def resolve_attrs(attrs: Dict[str, Any],
                  from_sql: Union[str, FromTarget],
                  dialect: Optional[str] = DEFAULT_DIALECT,
                  sql_case: SqlCase = upper_case,
                  strict: bool = False) -> Dict[str, Any]:
    """
    Query-attribute hook: consume attrs["tablesample"] and store the sampled FROM
    fragment in attrs["from"]. Attrs without a tablesample entry pass through untouched,
    and attrs are left as they were when the tablesample entry is rejected.
    """
    spec = attrs.get(ATTR_TABLESAMPLE)
    if spec is None:
        attrs.pop(ATTR_TABLESAMPLE, None)
        return attrs

    if isinstance(from_sql, FromTarget) and from_sql.is_join:
        raise UnsupportedJoinTarget("tablesample on joins is not supported")

    request = normalize(spec, strict=strict)
    sampled_from = attach_to_from(from_sql, " " + render(request, sql_case=sql_case, dialect=dialect))

    del attrs[ATTR_TABLESAMPLE]
    attrs[ATTR_FROM] = sampled_from
    return attrs
