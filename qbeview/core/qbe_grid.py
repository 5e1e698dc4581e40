"""QBE Grid - Ordered collection of query columns"""

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from qbeview.models.qbe_column import QBEColumn, SortOrder

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('alias', 'show', 'sort', 'criteria', 'or_criteria')


class QBEGrid:
    """Grid rows in insertion order. Duplicate table/field pairs are allowed."""

    def __init__(self):
        self._columns: List[QBEColumn] = []

    def __len__(self) -> int:
        return len(self._columns)

    def __iter__(self) -> Iterator[QBEColumn]:
        return iter(self._columns)

    @property
    def columns(self) -> Tuple[QBEColumn, ...]:
        """Snapshot of the grid rows"""
        return tuple(self._columns)

    def get(self, column_id: str) -> Optional[QBEColumn]:
        for column in self._columns:
            if column.id == column_id:
                return column
        return None

    def add_column(self, table: str, field: str) -> QBEColumn:
        """
        Append a column with default settings

        Args:
            table: Table reference, optionally 'database.table'
            field: Column name

        Returns:
            The new grid row
        """
        column = QBEColumn(table=table, field=field)
        self._columns.append(column)
        logger.info(f"Added grid column: {table}.{field}")
        return column

    def remove_column(self, column_id: str) -> bool:
        """Remove a row by id. Returns False if no row matched."""
        before = len(self._columns)
        self._columns = [c for c in self._columns if c.id != column_id]
        removed = len(self._columns) < before
        if not removed:
            logger.warning(f"No grid column with id {column_id}")
        return removed

    def clear(self):
        self._columns.clear()
        logger.info("Cleared grid")

    def update_column(self, column_id: str, **changes) -> bool:
        """
        Edit a row in place

        Args:
            column_id: Row id
            **changes: Any of alias, show, sort, criteria, or_criteria

        Returns:
            True if the row exists and was updated

        Raises:
            ValueError: For a field that cannot be edited or an invalid sort
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot edit grid column field(s): {', '.join(sorted(unknown))}")

        values: Dict[str, object] = dict(changes)
        if 'sort' in values:
            values['sort'] = SortOrder.coerce(values['sort'])
        if 'show' in values:
            values['show'] = bool(values['show'])
        for text_field in ('alias', 'criteria', 'or_criteria'):
            if text_field in values and values[text_field] is None:
                values[text_field] = ""

        column = self.get(column_id)
        if column is None:
            logger.warning(f"No grid column with id {column_id}")
            return False

        for name, value in values.items():
            setattr(column, name, value)
        logger.debug(f"Updated grid column {column.table}.{column.field}: {values}")
        return True

    def toggle_sort(self, column_id: str, order) -> bool:
        """Set the sort order, or clear it when the row already sorts that way"""
        order = SortOrder.coerce(order)
        column = self.get(column_id)
        if column is None:
            logger.warning(f"No grid column with id {column_id}")
            return False
        return self.update_column(column_id, sort=None if column.sort == order else order)
