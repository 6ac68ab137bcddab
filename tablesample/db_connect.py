import os
from pathlib import Path

import psycopg2

from tablesample.parser import DEFAULT_DIALECT

_TRUTHY = {"1", "true", "yes", "on"}


class PSQL:
    def __init__(self, dbname, user, password, host, port):
        self.conn = psycopg2.connect(
            dbname=dbname,
            user=user,
            password=password,
            host=host,
            port=port
        )
        self.cur = self.conn.cursor()

    def execute(self, query, params=None):
        try:
            self.conn.rollback()
            self.cur.execute(query, params or ())
            self.conn.commit()
            return self.cur
        except Exception:
            self.conn.rollback()
            raise

    def close(self):
        self.cur.close()
        self.conn.close()


class TableSampleEnv:
    ENV_FILE = Path.home() / ".tablesample_env"

    def __init__(self, env_file=None):
        if env_file is not None:
            self.ENV_FILE = Path(env_file)
        self.username = None
        self.password = None
        self.dbname = None
        self.host = "localhost"
        self.port = 5432
        self.dialect = DEFAULT_DIALECT
        self.sql_case = "upper"
        self.strict = False
        self.load()

    def load(self):
        if self.ENV_FILE.exists():
            with open(self.ENV_FILE) as f:
                for line in f:
                    if "=" in line:
                        key, val = line.strip().split("=", 1)
                        os.environ[key] = val

        self.username = os.environ.get("DB_USERNAME")
        self.password = os.environ.get("DB_PASSWORD")
        self.dbname = os.environ.get("DB_NAME")
        self.host = os.environ.get("DB_HOST", "localhost")
        port = os.environ.get("DB_PORT")
        self.port = int(port) if port else 5432
        self.dialect = os.environ.get("TABLESAMPLE_DIALECT", DEFAULT_DIALECT)
        self.sql_case = os.environ.get("TABLESAMPLE_SQL_CASE", "upper")
        self.strict = os.environ.get("TABLESAMPLE_STRICT", "").strip().lower() in _TRUTHY

    def save(self, username, password, dbname=None, host=None, port=None):
        dbname = dbname or self.dbname
        host = host or self.host
        port = port or self.port

        values = {
            "DB_USERNAME": username,
            "DB_PASSWORD": password,
            "DB_NAME": dbname,
            "DB_HOST": host,
            "DB_PORT": port,
            "TABLESAMPLE_DIALECT": self.dialect,
            "TABLESAMPLE_SQL_CASE": self.sql_case,
            "TABLESAMPLE_STRICT": "1" if self.strict else None,
        }
        with open(self.ENV_FILE, "w") as f:
            for key, val in values.items():
                if val:
                    f.write(f"{key}={val}\n")
                    os.environ[key] = str(val)

        self.username = username
        self.password = password
        self.dbname = dbname
        self.host = host
        self.port = port
