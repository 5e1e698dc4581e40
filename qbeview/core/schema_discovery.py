"""Schema Discovery - Discovers and caches database metadata"""

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import inspect

from qbeview.core.connection_manager import ConnectionManager, get_connection_manager
from qbeview.models.qbe_column import ColumnInfo
from qbeview.utils.constants import ColumnKey, SYSTEM_SCHEMAS

logger = logging.getLogger(__name__)


def split_table_ref(table_ref: str) -> Tuple[Optional[str], str]:
    """'shop.users' -> ('shop', 'users'); 'users' -> (None, 'users')"""
    if "." in table_ref:
        database, table = table_ref.split(".", 1)
        return database, table
    return None, table_ref


class SchemaDiscovery:
    """Discovers and caches database metadata using SQLAlchemy reflection"""

    def __init__(self, conn_manager: Optional[ConnectionManager] = None,
                 default_database: Optional[str] = None):
        self.conn_manager = conn_manager or get_connection_manager()
        self.default_database = default_database
        # Simple in-memory cache for columns
        self._columns_cache: Dict[Tuple[Optional[str], str], List[ColumnInfo]] = {}

    def _inspector(self):
        return inspect(self.conn_manager.get_engine())

    def get_databases(self) -> List[str]:
        """
        Get the databases (schemas) visible on the server

        Returns:
            Sorted schema names, system schemas excluded
        """
        try:
            schemas = self._inspector().get_schema_names()
        except Exception as e:
            logger.error(f"Failed to list databases: {e}")
            raise

        databases = sorted(s for s in schemas if s not in SYSTEM_SCHEMAS)
        logger.info(f"Discovered {len(databases)} databases")
        return databases

    def get_tables(self, database: Optional[str] = None) -> List[Dict]:
        """
        Get all tables of a database

        Args:
            database: Database/schema name; defaults to default_database

        Returns:
            List of table dictionaries with name and schema
        """
        schema = database or self.default_database
        try:
            inspector = self._inspector()
            table_names = inspector.get_table_names(schema=schema)

            tables = []
            for table_name in table_names:
                tables.append({
                    'table_name': table_name,
                    'schema_name': schema,
                    'full_name': f"{schema}.{table_name}" if schema else table_name,
                    'type': 'TABLE'
                })

            logger.info(f"Discovered {len(tables)} tables in {schema or 'default database'}")
            return sorted(tables, key=lambda x: x['table_name'])

        except Exception as e:
            logger.error(f"Failed to discover tables: {e}")
            raise

    def fetch_columns(self, table_ref: str) -> List[ColumnInfo]:
        """
        Get column metadata for a table reference

        Args:
            table_ref: 'table' (current database) or 'database.table'

        Returns:
            Ordered list of ColumnInfo
        """
        database, table = split_table_ref(table_ref)
        return self.get_columns(table, database or self.default_database)

    def get_columns(self, table_name: str, schema_name: Optional[str] = None) -> List[ColumnInfo]:
        """
        Get columns for a table

        Args:
            table_name: Name of the table
            schema_name: Schema/database name (optional)

        Returns:
            List of ColumnInfo in table order
        """
        # Check cache first
        cache_key = (schema_name, table_name)
        if cache_key in self._columns_cache:
            logger.debug(f"Using cached columns for {schema_name}.{table_name}")
            return list(self._columns_cache[cache_key])

        try:
            inspector = self._inspector()

            columns_info = inspector.get_columns(table_name, schema=schema_name)
            keys = self._get_column_keys(inspector, table_name, schema_name)

            columns = []
            for col_info in columns_info:
                default = col_info.get('default')
                columns.append(ColumnInfo(
                    field=col_info['name'],
                    type=str(col_info['type']),
                    nullable=bool(col_info.get('nullable', True)),
                    key=keys.get(col_info['name'], ColumnKey.NONE),
                    default=None if default is None else str(default),
                    extra='auto_increment' if col_info.get('autoincrement') is True else ''
                ))

            logger.debug(f"Discovered {len(columns)} columns for {table_name}")

            self._columns_cache[cache_key] = columns
            return list(columns)

        except Exception as e:
            logger.error(f"Failed to discover columns for {table_name}: {e}")
            raise

    def _get_column_keys(self, inspector, table_name: str, schema_name: Optional[str]) -> Dict[str, str]:
        """Map column names to PRI / UNI / MUL, primary key taking precedence"""
        keys: Dict[str, str] = {}

        try:
            for index in inspector.get_indexes(table_name, schema=schema_name):
                names = [c for c in index.get('column_names', []) if c]
                if not names:
                    continue
                if index.get('unique') and len(names) == 1:
                    keys[names[0]] = ColumnKey.UNIQUE
                else:
                    keys.setdefault(names[0], ColumnKey.MULTIPLE)
        except NotImplementedError:
            logger.debug(f"Index reflection not supported for {table_name}")

        try:
            for constraint in inspector.get_unique_constraints(table_name, schema=schema_name):
                names = constraint.get('column_names', [])
                if len(names) == 1:
                    keys[names[0]] = ColumnKey.UNIQUE
        except NotImplementedError:
            logger.debug(f"Unique constraint reflection not supported for {table_name}")

        pk_constraint = inspector.get_pk_constraint(table_name, schema=schema_name)
        for name in (pk_constraint or {}).get('constrained_columns', []):
            keys[name] = ColumnKey.PRIMARY

        return keys

    def refresh(self):
        """Drop cached metadata so the next lookup reflects the database again"""
        self._columns_cache.clear()
        logger.info("Cleared schema metadata cache")
