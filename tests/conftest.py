import pytest

from tablesample import db_connect
from tablesample.db_connect import TableSampleEnv

ENV_KEYS = (
    "DB_USERNAME",
    "DB_PASSWORD",
    "DB_NAME",
    "DB_HOST",
    "DB_PORT",
    "TABLESAMPLE_DIALECT",
    "TABLESAMPLE_SQL_CASE",
    "TABLESAMPLE_STRICT",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    # TableSampleEnv.load writes straight into os.environ; register every key so it is restored
    for key in ENV_KEYS:
        monkeypatch.setenv(key, "placeholder")
        monkeypatch.delenv(key)
    env_file = tmp_path / "tablesample_env"
    monkeypatch.setattr(TableSampleEnv, "ENV_FILE", env_file)
    return env_file


class FakeCursor:
    def __init__(self, description=None, rows=None):
        self.description = description or []
        self.rows = rows or []
        self.executed = []

    def execute(self, query, params=None):
        self.executed.append((query, params))

    def fetchall(self):
        return list(self.rows)

    def close(self):
        pass


@pytest.fixture
def fake_cursor():
    return FakeCursor(description=[("pizza_type",), ("qty",)], rows=[("margherita", 3), ("funghi", 1)])


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self):
        return self._cursor

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


@pytest.fixture
def fake_connection(monkeypatch, fake_cursor):
    conn = FakeConnection(fake_cursor)
    monkeypatch.setattr(db_connect.psycopg2, "connect", lambda **kwargs: conn)
    return conn
