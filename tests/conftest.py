"""Shared fixtures for QBEView tests"""

import os

# Qt widgets are created without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from sqlalchemy import create_engine, text

from qbeview.core.connection_manager import ConnectionManager
from qbeview.core.query_executor import QueryOutcome, QueryResult
from qbeview.models.qbe_column import ColumnInfo


@pytest.fixture
def sample_db_url(tmp_path):
    """SQLite file with users and orders tables"""
    url = f"sqlite:///{tmp_path / 'sample.db'}"
    engine = create_engine(url)
    with engine.begin() as conn:
        conn.execute(text("""
            CREATE TABLE users (
                id INTEGER PRIMARY KEY,
                name TEXT NOT NULL,
                email TEXT,
                age INTEGER DEFAULT 0,
                UNIQUE (email)
            )
        """))
        conn.execute(text("""
            CREATE TABLE orders (
                id INTEGER PRIMARY KEY,
                user_id INTEGER,
                total REAL
            )
        """))
        conn.execute(text("CREATE INDEX ix_orders_user_id ON orders (user_id)"))
        conn.execute(text("""
            INSERT INTO users (id, name, email, age) VALUES
                (1, 'alice', 'alice@example.com', 31),
                (2, 'bob', NULL, 45),
                (3, 'carla', 'carla@example.com', 27)
        """))
        conn.execute(text("""
            INSERT INTO orders (id, user_id, total) VALUES
                (10, 1, 99.5),
                (11, 2, 12.0)
        """))
    engine.dispose()
    return url


@pytest.fixture
def conn_manager(sample_db_url):
    manager = ConnectionManager(sample_db_url)
    yield manager
    manager.close_all_connections()


class FakeSchemaDiscovery:
    """Stands in for SchemaDiscovery; records fetch calls"""

    def __init__(self, columns_by_table, failing=()):
        self.columns_by_table = columns_by_table
        self.failing = set(failing)
        self.default_database = None
        self.fetch_calls = []

    def get_tables(self, database=None):
        return [{'table_name': name, 'schema_name': database} for name in sorted(self.columns_by_table)]

    def fetch_columns(self, table_ref):
        self.fetch_calls.append(table_ref)
        if table_ref in self.failing:
            raise RuntimeError(f"no such table: {table_ref}")
        return [ColumnInfo(field=name, type="INTEGER") for name in self.columns_by_table[table_ref]]


class FakeExecutor:
    """Stands in for QueryExecutor; records the SQL it is handed"""

    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def run_sql(self, sql, database=None):
        self.calls.append((sql, database))
        if self.error:
            return QueryOutcome(error=self.error, sql=sql, database=database)
        return QueryOutcome(result=QueryResult(columns=['id'], rows=[[1], [2]], sql=sql),
                            sql=sql, database=database)


@pytest.fixture
def fake_discovery():
    return FakeSchemaDiscovery({
        'users': ['id', 'name', 'email'],
        'orders': ['id', 'user_id', 'total'],
        'broken': [],
    }, failing={'broken'})


@pytest.fixture
def fake_executor():
    return FakeExecutor()
