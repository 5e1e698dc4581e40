"""Table Selection - Tracks selected tables and their loaded column metadata"""

import itertools
import logging
from typing import Callable, Dict, Iterable, List, Optional

from qbeview.models.qbe_column import ColumnInfo

logger = logging.getLogger(__name__)

# Called with (table_ref, request_id) once for every table toggled on
FetchRequester = Callable[[str, int], None]


class TableSelection:
    """
    Ordered set of selected table references

    Selecting a table asks the fetch requester for its columns. Responses are
    handed back through accept_columns() together with the request id, and are
    dropped when the table was deselected or re-requested in the meantime.
    """

    def __init__(self, fetch_requester: Optional[FetchRequester] = None):
        self.fetch_requester = fetch_requester
        self._selected: Dict[str, int] = {}  # table_ref -> latest request id
        self._columns: Dict[str, List[ColumnInfo]] = {}
        self._available_tables: List[str] = []
        self._request_ids = itertools.count(1)

    @property
    def selected_tables(self) -> List[str]:
        """Selected table references in toggle order"""
        return list(self._selected)

    def is_selected(self, table_ref: str) -> bool:
        return table_ref in self._selected

    def toggle_table(self, table_ref: str) -> bool:
        """
        Select or deselect a table

        Args:
            table_ref: Table reference, optionally 'database.table'

        Returns:
            True if the table is selected after the call
        """
        if table_ref in self._selected:
            del self._selected[table_ref]
            self._columns.pop(table_ref, None)
            logger.info(f"Deselected table: {table_ref}")
            return False

        request_id = next(self._request_ids)
        self._selected[table_ref] = request_id
        logger.info(f"Selected table: {table_ref}")

        if self.fetch_requester is not None:
            logger.debug(f"Requesting columns for {table_ref} (request {request_id})")
            self.fetch_requester(table_ref, request_id)
        return True

    def reload_columns(self) -> List[str]:
        """
        Re-request columns for every selected table with fresh request ids

        Loaded metadata is dropped first, and responses to earlier requests
        become stale.

        Returns:
            The table references re-requested, in selection order
        """
        refs = list(self._selected)
        for table_ref in refs:
            self._columns.pop(table_ref, None)
            request_id = next(self._request_ids)
            self._selected[table_ref] = request_id
            if self.fetch_requester is not None:
                logger.debug(f"Re-requesting columns for {table_ref} (request {request_id})")
                self.fetch_requester(table_ref, request_id)
        return refs

    def accept_columns(self, table_ref: str, request_id: int, columns: Iterable[ColumnInfo]) -> bool:
        """
        Store a column-metadata response

        Returns:
            False if the response is stale and was discarded
        """
        if self._selected.get(table_ref) != request_id:
            logger.debug(f"Discarding stale columns for {table_ref} (request {request_id})")
            return False

        self._columns[table_ref] = list(columns)
        logger.info(f"Loaded {len(self._columns[table_ref])} columns for {table_ref}")
        return True

    def fetch_failed(self, table_ref: str, request_id: int, error: str) -> bool:
        """Record a failed fetch; the table stays selected without columns"""
        if self._selected.get(table_ref) != request_id:
            logger.debug(f"Ignoring stale fetch failure for {table_ref}")
            return False
        logger.error(f"Failed to load columns for {table_ref}: {error}")
        return True

    def columns_for(self, table_ref: str) -> List[ColumnInfo]:
        return list(self._columns.get(table_ref, []))

    def set_available_tables(self, table_refs: Iterable[str]):
        """Set the table list shown for the current database"""
        self._available_tables = list(table_refs)

    @property
    def available_tables(self) -> List[str]:
        return list(self._available_tables)

    def filter_tables(self, search_text: str) -> List[str]:
        """Available tables whose name contains the search text, case-insensitively"""
        search_text = (search_text or "").lower()
        return [t for t in self._available_tables if search_text in t.lower()]
