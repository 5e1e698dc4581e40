"""SQL Compiler - Assembles SELECT/FROM/WHERE/ORDER BY text from the QBE grid"""

import logging
from typing import Iterable, List, Optional, Sequence

from qbeview.core.condition_builder import build_row_condition
from qbeview.models.qbe_column import QBEColumn
from qbeview.utils.constants import IdentifierQuote

logger = logging.getLogger(__name__)


def quote_identifier(name: str, quote: str = IdentifierQuote.BACKTICK) -> str:
    """
    Wrap a single identifier segment in quote characters

    Args:
        name: Database, table, column or alias name
        quote: IdentifierQuote style

    Returns:
        The quoted identifier, with embedded closing quotes doubled
    """
    open_char, close_char = IdentifierQuote.pair(quote)
    return f"{open_char}{name.replace(close_char, close_char * 2)}{close_char}"


def quote_table_ref(table_ref: str, quote: str = IdentifierQuote.BACKTICK) -> str:
    """
    Quote a table reference, splitting 'database.table' into its segments

    'users'       -> `users`
    'shop.users'  -> `shop`.`users`
    """
    if "." in table_ref:
        database, table = table_ref.split(".", 1)
        return f"{quote_identifier(database, quote)}.{quote_identifier(table, quote)}"
    return quote_identifier(table_ref, quote)


def column_reference(column: QBEColumn, quote: str = IdentifierQuote.BACKTICK) -> str:
    """Quoted, table-qualified reference to a grid column"""
    return f"{quote_table_ref(column.table, quote)}.{quote_identifier(column.field, quote)}"


def build_projection(columns: Sequence[QBEColumn], quote: str = IdentifierQuote.BACKTICK) -> str:
    """SELECT list of the shown columns, or '*' when none is shown"""
    parts = []
    for column in columns:
        if not column.show:
            continue
        part = column_reference(column, quote)
        alias = column.alias.strip() if column.alias else ""
        if alias:
            part += f" AS {quote_identifier(alias, quote)}"
        parts.append(part)
    return ", ".join(parts) if parts else "*"


def tables_in_use(columns: Iterable[QBEColumn]) -> List[str]:
    """Distinct table references of all grid columns, in first-seen order"""
    seen = {}
    for column in columns:
        seen.setdefault(column.table, None)
    return list(seen)


def build_from(columns: Sequence[QBEColumn], quote: str = IdentifierQuote.BACKTICK) -> str:
    return ", ".join(quote_table_ref(t, quote) for t in tables_in_use(columns))


def build_where(columns: Sequence[QBEColumn], quote: str = IdentifierQuote.BACKTICK) -> str:
    """AND-joined criteria fragments; empty string when no column filters"""
    fragments = []
    for column in columns:
        fragment = build_row_condition(column_reference(column, quote),
                                       column.criteria, column.or_criteria)
        if fragment:
            fragments.append(fragment)
    return " AND ".join(fragments)


def build_order_by(columns: Sequence[QBEColumn], quote: str = IdentifierQuote.BACKTICK) -> str:
    return ", ".join(
        f"{column_reference(column, quote)} {column.sort.value}"
        for column in columns if column.sort is not None
    )


def compile_query(columns: Sequence[QBEColumn], quote: Optional[str] = None) -> str:
    """
    Compile grid columns into SQL text

    Args:
        columns: Grid rows in grid order
        quote: IdentifierQuote style (defaults to backticks)

    Returns:
        One clause per line, or an empty string for an empty grid
    """
    if not columns:
        return ""

    quote = quote or IdentifierQuote.BACKTICK

    clauses = [
        f"SELECT {build_projection(columns, quote)}",
        f"FROM {build_from(columns, quote)}"
    ]

    where = build_where(columns, quote)
    if where:
        clauses.append(f"WHERE {where}")

    order_by = build_order_by(columns, quote)
    if order_by:
        clauses.append(f"ORDER BY {order_by}")

    sql = "\n".join(clauses)
    logger.debug(f"Compiled {len(columns)} grid column(s) into {len(clauses)} clause(s)")
    return sql
