"""Connection Manager - Manages SQLAlchemy engines for the configured server"""

import logging
from typing import Dict, Optional, Tuple

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Creates and caches one engine per target database"""

    def __init__(self, database_url: Optional[str] = None):
        self.database_url = database_url
        self._engines: Dict[Optional[str], Engine] = {}  # Cache of SQLAlchemy engines

    @property
    def dialect_name(self) -> Optional[str]:
        if not self.database_url:
            return None
        return make_url(self.database_url).get_backend_name()

    def set_database_url(self, database_url: str):
        """Point the manager at another server, dropping cached engines"""
        self.close_all_connections()
        self.database_url = database_url
        logger.info(f"Database URL set for backend: {self.dialect_name}")

    def get_engine(self, database: Optional[str] = None) -> Engine:
        """
        Get SQLAlchemy engine for a database on the configured server

        Args:
            database: Database to connect to; None uses the URL as configured

        Returns:
            SQLAlchemy Engine instance
        """
        if not self.database_url:
            raise ValueError("No database URL configured")

        url = make_url(self.database_url)

        # SQLite has no server-side databases to switch between
        if database and url.get_backend_name() == 'sqlite':
            logger.debug(f"Ignoring database '{database}' for SQLite connection")
            database = None

        if database in self._engines:
            return self._engines[database]

        if database:
            url = url.set(database=database)

        engine = create_engine(url, echo=False)
        self._engines[database] = engine

        logger.debug(f"Created engine for database: {database or url.database}")
        return engine

    def test_connection(self) -> Tuple[bool, str]:
        """
        Test the configured connection

        Returns:
            Tuple of (success: bool, message: str)
        """
        try:
            engine = self.get_engine()
            with engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()

            logger.info("Connection test successful")
            return True, "Connection successful!"

        except Exception as e:
            error_msg = str(e)
            logger.error(f"Connection test failed: {error_msg}")
            return False, f"Connection failed: {error_msg}"

    def close_all_connections(self):
        """Close all cached engine connections"""
        for database, engine in self._engines.items():
            try:
                engine.dispose()
                logger.debug(f"Disposed engine for database {database}")
            except Exception as e:
                logger.error(f"Error disposing engine {database}: {e}")

        self._engines.clear()


# Singleton instance
_connection_manager: Optional[ConnectionManager] = None


def get_connection_manager(database_url: Optional[str] = None) -> ConnectionManager:
    """Get or create singleton connection manager instance"""
    global _connection_manager
    if _connection_manager is None:
        _connection_manager = ConnectionManager(database_url)
    elif database_url and database_url != _connection_manager.database_url:
        _connection_manager.set_database_url(database_url)
    return _connection_manager
