import pytest

from tablesample.errors import TableSampleError
from tablesample.parser import FromTarget, TableInfo, from_target, parse_statement


def test_single_table():
    target = from_target(parse_statement("SELECT id FROM foo AS me WHERE id > 1"))
    assert target.sql == "foo AS me"
    assert target.tables == [TableInfo(name="foo", alias="me")]
    assert target.joins == []
    assert not target.is_join


def test_table_without_alias():
    target = from_target(parse_statement("SELECT * FROM foo"))
    assert target.tables == [TableInfo(name="foo", alias=None)]
    assert target.sql == "foo"


def test_join():
    target = from_target(parse_statement("SELECT * FROM foo AS f JOIN bar AS b ON f.id = b.foo_id"))
    assert target.is_join
    assert [t.name for t in target.tables] == ["foo", "bar"]
    assert target.joins[0].left_table == "foo"
    assert target.joins[0].right_table == "bar"
    assert target.joins[0].condition == "f.id = b.foo_id"


def test_comma_join():
    assert from_target(parse_statement("SELECT * FROM foo, bar")).is_join


def test_nested_select_is_not_inspected():
    target = from_target(parse_statement("SELECT * FROM foo WHERE id IN (SELECT foo_id FROM bar JOIN baz ON bar.id = baz.id)"))
    assert not target.is_join
    assert target.tables == [TableInfo(name="foo", alias=None)]


def test_from_target_is_join_flag():
    assert FromTarget(sql="foo", tables=[TableInfo("foo", None), TableInfo("bar", None)]).is_join
    assert not FromTarget(sql="foo", tables=[TableInfo("foo", None)]).is_join


@pytest.mark.parametrize("sql", [
    "INSERT INTO foo VALUES (1)",
    "SELECT 1",
    "SELECT * FROM foo UNION SELECT * FROM bar",
])
def test_rejected_statements(sql):
    with pytest.raises(TableSampleError):
        from_target(parse_statement(sql))


def test_unparseable_sql():
    with pytest.raises(TableSampleError):
        parse_statement("SELECT * FROM (")


def test_sampled_table():
    target = from_target(parse_statement("SELECT * FROM foo TABLESAMPLE SYSTEM (1)"))
    assert target.sampled
    assert not target.is_join


def test_unsampled_table():
    assert not from_target(parse_statement("SELECT * FROM foo")).sampled
