import functools
import logging
import timeit

import click
from rich.console import Console
from rich.logging import RichHandler

from tablesample.db_connect import PSQL, TableSampleEnv
from tablesample.execute import execute_sampled, print_table
from tablesample.rewriter import apply_tablesample
from tablesample.sampler import SQL_CASES, Raw, normalize, render, sql_case_for

console = Console()


def _build_spec(fraction, method, legacy_type, repeatable, raw):
    spec = {"fraction": Raw(fraction) if raw else fraction}
    if method:
        spec["method"] = method
    if legacy_type:
        spec["type"] = legacy_type
    if repeatable:
        spec["repeatable"] = Raw(repeatable) if raw else repeatable
    return spec


def sampling_options(fn):
    @click.argument("fraction")
    @click.option("--method", help="Sampling method, e.g. system or bernoulli")
    @click.option("--type", "legacy_type", help="Legacy name for --method")
    @click.option("--repeatable", help="Seed for a REPEATABLE clause")
    @click.option("--raw", is_flag=True, help="Pass FRACTION and the seed through verbatim")
    @click.option("--case", "sql_case", type=click.Choice(list(SQL_CASES)), help="Keyword casing")
    @click.option("--strict/--no-strict", default=None, help="Require --raw for non-numeric values")
    @functools.wraps(fn)
    def wrapper(*args, fraction, method, legacy_type, repeatable, raw, sql_case, strict, **kwargs):
        env = TableSampleEnv()
        spec = _build_spec(fraction, method, legacy_type, repeatable, raw)
        strict = env.strict if strict is None else strict
        try:
            case = sql_case_for(sql_case or env.sql_case)
            return fn(*args, spec=spec, case=case, strict=strict, env=env, **kwargs)
        # TableSampleError, or a bad TABLESAMPLE_SQL_CASE value
        except ValueError as e:
            raise click.ClickException(str(e))
    return wrapper


@click.group()
@click.option("--verbose", is_flag=True, help="Log at DEBUG level")
def cli(verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@cli.command("render")
@sampling_options
def render_cmd(spec, case, strict, env):
    """Print the TABLESAMPLE clause for FRACTION."""
    click.echo(render(normalize(spec, strict=strict), sql_case=case))


@cli.command("rewrite")
@click.argument("sql")
@sampling_options
@click.option("--dialect", help="sqlglot dialect to read and write")
def rewrite_cmd(sql, dialect, spec, case, strict, env):
    """Print SQL with TABLESAMPLE applied to its FROM table."""
    click.echo(apply_tablesample(sql, spec, dialect=dialect or env.dialect, sql_case=case, strict=strict))


@cli.command("run")
@click.argument("sql")
@sampling_options
@click.option("--username", help="Database username")
@click.option("--password", help="Database password")
@click.option("--dbname", help="Database name")
@click.option("--host", help="Database host")
@click.option("--port", type=int, help="Database port")
@click.option("--save", is_flag=True, help="Remember the connection settings")
def run_cmd(sql, username, password, dbname, host, port, save, spec, case, strict, env):
    """Execute SQL against Postgres with TABLESAMPLE applied."""
    username = username or env.username
    password = password or env.password
    dbname = dbname or env.dbname
    host = host or env.host
    port = port or env.port

    if not username:
        username = click.prompt("Enter database username")
    if not password:
        password = click.prompt("Enter database password", hide_input=True)
    if not dbname:
        dbname = click.prompt("Enter database name")

    if save:
        env.save(username, password, dbname=dbname, host=host, port=port)

    db = PSQL(dbname=dbname, user=username, password=password, host=host, port=port)
    try:
        result = {}

        def _run():
            result.update(execute_sampled(sql, spec, db, dialect=env.dialect, sql_case=case, strict=strict))

        exec_time = timeit.timeit(_run, number=1)
        console.print(f"[bold cyan]Sampled SQL:[/bold cyan] {result['final_sql']}")
        print_table(result['rows'])
        console.print(f"[bold green]Execution Time:[/bold green] {exec_time*1000:.3f} ms")
    finally:
        db.close()


if __name__ == "__main__":
    cli()
