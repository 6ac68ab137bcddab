from typing import Any, Dict, Optional
import logging

from rich.console import Console
from rich.table import Table

from tablesample.db_connect import PSQL
from tablesample.parser import DEFAULT_DIALECT
from tablesample.rewriter import apply_tablesample
from tablesample.sampler import SqlCase, upper_case

console = Console()
logger = logging.getLogger(__name__)


def print_table(rows):
    headers = [desc[0] for desc in rows.description]
    table = Table(show_header=True, header_style="bold magenta")
    for h in headers:
        table.add_column(h, style="dim", overflow="fold")

    for row in rows.fetchall():
        table.add_row(*[str(r) for r in row])

    console.print(table)


def execute_sampled(raw_sql: str,
                    spec: Any,
                    db: PSQL,
                    dialect: Optional[str] = DEFAULT_DIALECT,
                    sql_case: SqlCase = upper_case,
                    strict: bool = False) -> Dict[str, Any]:
    final_sql = apply_tablesample(raw_sql, spec, dialect=dialect, sql_case=sql_case, strict=strict)
    logger.info("executing sampled query: %s", final_sql)
    rows = db.execute(final_sql)
    return {'final_sql': final_sql, 'rows': rows}
