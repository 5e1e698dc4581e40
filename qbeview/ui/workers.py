"""Background threads for metadata fetches and query runs"""

import logging

from PyQt6.QtCore import QThread, pyqtSignal

logger = logging.getLogger(__name__)


class ColumnFetchThread(QThread):
    """Background thread that loads the columns of one table"""
    columns_loaded = pyqtSignal(str, int, list)  # table_ref, request_id, columns
    fetch_failed = pyqtSignal(str, int, str)  # table_ref, request_id, error message

    def __init__(self, schema_discovery, table_ref: str, request_id: int, parent=None):
        super().__init__(parent)
        self.schema_discovery = schema_discovery
        self.table_ref = table_ref
        self.request_id = request_id

    def run(self):
        """Fetch columns in background"""
        try:
            columns = self.schema_discovery.fetch_columns(self.table_ref)
            self.columns_loaded.emit(self.table_ref, self.request_id, columns)
        except Exception as e:
            logger.error(f"Column fetch error for {self.table_ref}: {e}")
            self.fetch_failed.emit(self.table_ref, self.request_id, str(e))


class QueryRunThread(QThread):
    """Background thread that hands SQL to the executor"""
    query_completed = pyqtSignal(object)  # QueryOutcome

    def __init__(self, executor, sql: str, database: str = None, parent=None):
        super().__init__(parent)
        self.executor = executor
        self.sql = sql
        self.database = database

    def run(self):
        # run_sql reports failures inside the outcome
        outcome = self.executor.run_sql(self.sql, self.database)
        self.query_completed.emit(outcome)
