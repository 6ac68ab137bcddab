from dataclasses import dataclass, field
from typing import List, Optional, Type
import logging

import sqlglot
from sqlglot import exp
from sqlglot.errors import ParseError

from tablesample.errors import TableSampleError

logger = logging.getLogger(__name__)

DEFAULT_DIALECT = "postgres"


@dataclass
class TableInfo:
    name: str
    alias: Optional[str]


@dataclass
class JoinInfo:
    left_table: Optional[str]
    right_table: Optional[str]
    condition: Optional[str]


@dataclass
class FromTarget:
    """What the query builder is selecting from: one table reference, or a join."""
    sql: str
    tables: List[TableInfo] = field(default_factory=list)
    joins: List[JoinInfo] = field(default_factory=list)
    sampled: bool = False

    @property
    def is_join(self) -> bool:
        return len(self.tables) > 1 or bool(self.joins)


def parse_statement(sql: str, dialect: Optional[str] = DEFAULT_DIALECT) -> exp.Select:
    try:
        ast = sqlglot.parse_one(sql, read=dialect)
    except ParseError as e:
        raise TableSampleError(f"could not parse SQL: {e}") from e
    if not isinstance(ast, exp.Select):
        kind = type(ast).__name__.upper() if ast is not None else "nothing"
        raise TableSampleError(f"tablesample needs a SELECT statement, got {kind}")
    return ast


def _top_level(select: exp.Select, kind: Type[exp.Expression]) -> List[exp.Expression]:
    # direct children only; FROMs of nested sub-selects belong to those sub-selects
    return [node for node in select.iter_expressions() if isinstance(node, kind)]


def _table_info(source: exp.Expression, dialect: Optional[str]) -> TableInfo:
    if isinstance(source, exp.Table):
        return TableInfo(name=source.name, alias=source.alias or None)
    return TableInfo(name=source.sql(dialect=dialect), alias=source.alias or None)


def find_from(select: exp.Select) -> exp.From:
    froms = _top_level(select, exp.From)
    if not froms:
        raise TableSampleError("tablesample needs a statement with a FROM clause")
    return froms[0]


def from_target(select: exp.Select, dialect: Optional[str] = DEFAULT_DIALECT) -> FromTarget:
    from_ = find_from(select)
    source = from_.this
    tables = [_table_info(source, dialect)]
    joins = []
    for j in _top_level(select, exp.Join):
        right = _table_info(j.this, dialect)
        tables.append(right)
        on = j.args.get("on")
        joins.append(JoinInfo(left_table=tables[0].name, right_table=right.name,
                              condition=on.sql(dialect=dialect) if on is not None else None))

    # sqlglot keeps an existing TABLESAMPLE either on the table or as a wrapper around it
    sampled = isinstance(source, exp.TableSample) or source.args.get("sample") is not None
    target = FromTarget(sql=source.sql(dialect=dialect), tables=tables, joins=joins, sampled=sampled)
    logger.debug("from target: %s (%d table(s))", target.sql, len(tables))
    return target
