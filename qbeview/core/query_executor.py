"""Query Executor - Executes generated SQL and returns tabular results"""

import logging
import time
import warnings
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd

from qbeview.core.connection_manager import ConnectionManager, get_connection_manager

logger = logging.getLogger(__name__)


@dataclass
class QueryResult:
    """Ordered column names and rows of scalar values"""
    columns: List[str]
    rows: List[List[Any]]
    sql: str = ""
    execution_time_ms: int = 0

    @property
    def record_count(self) -> int:
        return len(self.rows)

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame, sql: str = "", execution_time_ms: int = 0) -> 'QueryResult':
        # NaN/NaT become None so rows hold plain scalars
        cleaned = df.astype(object).where(df.notna(), None)
        return cls(
            columns=[str(c) for c in df.columns],
            rows=cleaned.values.tolist(),
            sql=sql,
            execution_time_ms=execution_time_ms
        )

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows, columns=self.columns)


@dataclass
class QueryOutcome:
    """Either a result or an error description"""
    result: Optional[QueryResult] = None
    error: Optional[str] = None
    sql: str = ""
    database: Optional[str] = field(default=None)

    @property
    def ok(self) -> bool:
        return self.error is None


class QueryExecutor:
    """Executes SQL text against the configured server"""

    def __init__(self, conn_manager: Optional[ConnectionManager] = None):
        self.conn_manager = conn_manager or get_connection_manager()

        # Track execution metadata
        self.last_execution_time = 0
        self.last_record_count = 0
        self.last_sql = None

    def execute_sql(self, sql: str, database: Optional[str] = None) -> QueryResult:
        """
        Execute a SQL query string

        Args:
            sql: SQL query string, run as given
            database: Target database (optional)

        Returns:
            QueryResult with the rows returned

        Raises:
            Exception: If query execution fails
        """
        start_time = time.time()
        self.last_sql = sql

        try:
            logger.info(f"Executing SQL (database: {database or 'default'}):\n{sql}")

            engine = self.conn_manager.get_engine(database)

            # Raw DBAPI connection so '%' in LIKE patterns is not read as a placeholder
            raw_conn = engine.raw_connection()
            try:
                with warnings.catch_warnings():
                    warnings.filterwarnings('ignore', message='pandas only supports SQLAlchemy')
                    df = pd.read_sql_query(sql, raw_conn)
            finally:
                raw_conn.close()

            # Update metadata
            self.last_execution_time = int((time.time() - start_time) * 1000)  # milliseconds
            self.last_record_count = len(df)

            logger.info(f"Query executed successfully: {self.last_record_count} rows in {self.last_execution_time}ms")

            return QueryResult.from_dataframe(df, sql, self.last_execution_time)

        except Exception as e:
            logger.error(f"Query execution failed: {e}")
            logger.error(f"SQL: {sql}")
            raise

    def run_sql(self, sql: str, database: Optional[str] = None) -> QueryOutcome:
        """
        Execute SQL and report failure as an error description instead of raising

        Args:
            sql: Generated SQL text, forwarded unmodified
            database: Target database (optional)

        Returns:
            QueryOutcome holding either the result or the error message
        """
        try:
            result = self.execute_sql(sql, database)
        except Exception as e:
            return QueryOutcome(error=f"SQL Error: {e}", sql=sql, database=database)
        return QueryOutcome(result=result, sql=sql, database=database)

    def get_execution_metadata(self) -> Dict[str, Any]:
        """
        Get metadata about the last query execution

        Returns:
            Dictionary with execution_time_ms, record_count, sql
        """
        return {
            'execution_time_ms': self.last_execution_time,
            'record_count': self.last_record_count,
            'sql': self.last_sql
        }
