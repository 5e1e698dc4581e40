"""Query builder controller - Connects the QBE state to Qt widgets and threads"""

import logging
from typing import List, Optional, Set

from PyQt6.QtCore import QObject, QThread, pyqtSignal

from qbeview.core.query_builder import QueryBuilder, QBEState
from qbeview.models.qbe_column import QBEColumn
from qbeview.ui.workers import ColumnFetchThread, QueryRunThread
from qbeview.utils.constants import IdentifierQuote

logger = logging.getLogger(__name__)


class QueryBuilderController(QObject):
    """
    Owns the QueryBuilder for one screen

    Every grid or selection change re-emits sql_changed with the freshly
    compiled text. Column fetches and query runs happen on QThreads and their
    results are applied back on the UI thread.
    """

    sql_changed = pyqtSignal(str)
    grid_changed = pyqtSignal()  # rows added, removed or cleared
    tables_loaded = pyqtSignal(list)  # table names of the current database
    selection_changed = pyqtSignal(str, bool)  # table_ref, selected
    columns_loaded = pyqtSignal(str)  # table_ref
    columns_failed = pyqtSignal(str, str)  # table_ref, error message
    query_completed = pyqtSignal(object)  # QueryOutcome

    def __init__(self, schema_discovery, query_executor,
                 quote: str = IdentifierQuote.BACKTICK, parent=None):
        super().__init__(parent)
        self.schema_discovery = schema_discovery
        self.query_executor = query_executor
        self.builder = QueryBuilder(QBEState(), quote=quote,
                                    fetch_requester=self._start_column_fetch)
        self.builder.subscribe(self.sql_changed.emit)
        self.current_database: Optional[str] = getattr(schema_discovery, 'default_database', None)
        self._threads: Set[QThread] = set()

    @property
    def sql(self) -> str:
        return self.builder.sql

    @property
    def columns(self) -> List[QBEColumn]:
        return list(self.builder.grid)

    def load_tables(self, database: Optional[str] = None) -> List[str]:
        """Load the table list of a database into the selection panel"""
        if database:
            self.current_database = database
            self.schema_discovery.default_database = database
        tables = [t['table_name'] for t in self.schema_discovery.get_tables(self.current_database)]
        self.builder.selection.set_available_tables(tables)
        # Selected table refs are unqualified, so their metadata follows the database
        self.builder.selection.reload_columns()
        self.tables_loaded.emit(tables)
        logger.info(f"Loaded {len(tables)} tables for {self.current_database or 'default database'}")
        return tables

    def filter_tables(self, search_text: str) -> List[str]:
        return self.builder.selection.filter_tables(search_text)

    def toggle_table(self, table_ref: str) -> bool:
        selected = self.builder.toggle_table(table_ref)
        self.selection_changed.emit(table_ref, selected)
        return selected

    def add_column(self, table: str, field: str) -> QBEColumn:
        column = self.builder.add_column(table, field)
        self.grid_changed.emit()
        return column

    def remove_column(self, column_id: str) -> bool:
        removed = self.builder.remove_column(column_id)
        self.grid_changed.emit()
        return removed

    def clear_grid(self):
        self.builder.clear_grid()
        self.grid_changed.emit()

    def update_column(self, column_id: str, **changes) -> bool:
        return self.builder.update_column(column_id, **changes)

    def toggle_sort(self, column_id: str, order) -> bool:
        return self.builder.toggle_sort(column_id, order)

    def run_query(self) -> Optional[QueryRunThread]:
        """Run the generated SQL in the background; no-op for an empty grid"""
        sql = self.builder.sql
        if not sql:
            logger.warning("Run requested with no query")
            return None

        thread = QueryRunThread(self.query_executor, sql, self.current_database)
        thread.query_completed.connect(self._on_query_completed)
        self._track(thread)
        thread.start()
        return thread

    def _start_column_fetch(self, table_ref: str, request_id: int):
        thread = ColumnFetchThread(self.schema_discovery, table_ref, request_id)
        thread.columns_loaded.connect(self._on_columns_loaded)
        thread.fetch_failed.connect(self._on_fetch_failed)
        self._track(thread)
        thread.start()

    def _track(self, thread: QThread):
        self._threads.add(thread)
        thread.finished.connect(lambda t=thread: self._release(t))

    def _release(self, thread: QThread):
        self._threads.discard(thread)
        thread.deleteLater()

    def _on_columns_loaded(self, table_ref: str, request_id: int, columns: list):
        if self.builder.selection.accept_columns(table_ref, request_id, columns):
            self.columns_loaded.emit(table_ref)

    def _on_fetch_failed(self, table_ref: str, request_id: int, error: str):
        if self.builder.selection.fetch_failed(table_ref, request_id, error):
            self.columns_failed.emit(table_ref, error)

    def _on_query_completed(self, outcome):
        if outcome.ok:
            logger.info(f"Query returned {outcome.result.record_count} rows")
        self.query_completed.emit(outcome)

    def shutdown(self):
        """Wait for outstanding background work"""
        for thread in list(self._threads):
            thread.wait()
