"""Query Builder - Holds the QBE state and republishes SQL on every change"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from qbeview.core.qbe_grid import QBEGrid
from qbeview.core.sql_compiler import compile_query, tables_in_use
from qbeview.core.table_selection import FetchRequester, TableSelection
from qbeview.models.qbe_column import QBEColumn
from qbeview.utils.constants import IdentifierQuote

logger = logging.getLogger(__name__)

SqlListener = Callable[[str], None]


@dataclass
class QBEState:
    """Everything the compiler and the selection panel read"""
    grid: QBEGrid = field(default_factory=QBEGrid)
    selection: TableSelection = field(default_factory=TableSelection)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'columns': [c.to_dict() for c in self.grid],
            'selected_tables': self.selection.selected_tables
        }


class QueryBuilder:
    """Applies user edits to a QBEState and publishes the regenerated SQL"""

    def __init__(self, state: Optional[QBEState] = None,
                 quote: str = IdentifierQuote.BACKTICK,
                 fetch_requester: Optional[FetchRequester] = None):
        """
        Args:
            state: State to edit; a fresh one is created if omitted
            quote: IdentifierQuote style used by the compiler
            fetch_requester: Called with (table_ref, request_id) for each table toggled on
        """
        self.state = state or QBEState()
        self.quote = quote
        if fetch_requester is not None:
            self.state.selection.fetch_requester = fetch_requester
        self._listeners: List[SqlListener] = []

    @property
    def grid(self) -> QBEGrid:
        return self.state.grid

    @property
    def selection(self) -> TableSelection:
        return self.state.selection

    @property
    def sql(self) -> str:
        """SQL for the current grid"""
        return compile_query(self.state.grid.columns, self.quote)

    @property
    def can_run(self) -> bool:
        return bool(self.sql)

    def subscribe(self, listener: SqlListener):
        """Register a callback that receives the SQL text after each change"""
        self._listeners.append(listener)

    def unsubscribe(self, listener: SqlListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _publish(self) -> str:
        sql = self.sql
        for listener in list(self._listeners):
            listener(sql)
        return sql

    def toggle_table(self, table_ref: str) -> bool:
        """
        Select or deselect a table

        Grid rows that reference a deselected table are kept.
        """
        selected = self.state.selection.toggle_table(table_ref)
        self._publish()
        return selected

    def add_column(self, table: str, field: str) -> QBEColumn:
        column = self.state.grid.add_column(table, field)
        self._publish()
        return column

    def remove_column(self, column_id: str) -> bool:
        removed = self.state.grid.remove_column(column_id)
        self._publish()
        return removed

    def clear_grid(self):
        self.state.grid.clear()
        self._publish()

    def update_column(self, column_id: str, **changes) -> bool:
        """
        Edit a grid row

        Args:
            column_id: Row id
            **changes: Any of alias, show, sort, criteria, or_criteria
        """
        updated = self.state.grid.update_column(column_id, **changes)
        if updated:
            self._publish()
        return updated

    def toggle_sort(self, column_id: str, order) -> bool:
        updated = self.state.grid.toggle_sort(column_id, order)
        if updated:
            self._publish()
        return updated

    def get_tables_involved(self) -> List[str]:
        """Tables the generated FROM clause lists"""
        return tables_in_use(self.state.grid)

    def run(self, executor, database: Optional[str] = None):
        """
        Hand the current SQL to an executor

        Args:
            executor: Object with run_sql(sql, database) (see QueryExecutor)
            database: Target database, if any

        Returns:
            Whatever the executor returns, uninterpreted
        """
        sql = self.sql
        logger.info(f"Handing off query ({len(sql)} chars) to executor")
        return executor.run_sql(sql, database)
