"""Main Window - QBEView"""

import logging
from PyQt6.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel,
                             QComboBox, QPushButton, QStatusBar, QMessageBox)

from qbeview.core.connection_manager import ConnectionManager
from qbeview.core.query_executor import QueryExecutor
from qbeview.core.schema_discovery import SchemaDiscovery
from qbeview.ui.qbe_controller import QueryBuilderController
from qbeview.ui.query_builder_screen import QueryBuilderScreen

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Main application window hosting the visual query builder"""

    def __init__(self, config, conn_manager: ConnectionManager = None):
        super().__init__()
        self.config = config
        self.conn_manager = conn_manager or ConnectionManager(config.database_url)
        self.schema_discovery = SchemaDiscovery(self.conn_manager, config.default_database)
        self.query_executor = QueryExecutor(self.conn_manager)
        self.controller = QueryBuilderController(
            self.schema_discovery, self.query_executor, quote=config.identifier_quote, parent=self
        )
        self.init_ui()
        logger.info("Main window initialized")

    def init_ui(self):
        """Initialize the UI"""
        self.setWindowTitle(self.config.app_name)
        self.resize(self.config.window_width, self.config.window_height)
        self.setMinimumSize(self.config.window_min_width, self.config.window_min_height)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        layout = QVBoxLayout(central_widget)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        # Database picker
        db_bar = QHBoxLayout()
        db_bar.setContentsMargins(5, 5, 5, 5)
        db_bar.addWidget(QLabel("Database:"))
        self.database_combo = QComboBox()
        self.database_combo.setMinimumWidth(200)
        self.database_combo.currentTextChanged.connect(self._on_database_changed)
        db_bar.addWidget(self.database_combo)
        refresh_btn = QPushButton("Refresh")
        refresh_btn.clicked.connect(self.refresh_metadata)
        db_bar.addWidget(refresh_btn)
        db_bar.addStretch()
        layout.addLayout(db_bar)

        self.query_screen = QueryBuilderScreen(self.controller, self.config.tables_panel_width)
        layout.addWidget(self.query_screen)

        self.setStatusBar(QStatusBar())
        self.controller.sql_changed.connect(self._on_sql_changed)

    def load_databases(self):
        """Populate the database picker from the server"""
        if not self.conn_manager.database_url:
            self.statusBar().showMessage("No database configured (set QBEVIEW_DATABASE_URL)")
            return

        try:
            databases = self.schema_discovery.get_databases()
        except Exception as e:
            logger.error(f"Failed to load databases: {e}", exc_info=True)
            QMessageBox.critical(self, "Connection Failed", f"Could not read databases:\n\n{str(e)}")
            return

        self.database_combo.blockSignals(True)
        self.database_combo.clear()
        self.database_combo.addItems(databases)
        if self.config.default_database in databases:
            self.database_combo.setCurrentText(self.config.default_database)
        self.database_combo.blockSignals(False)

        self._on_database_changed(self.database_combo.currentText())

    def _on_database_changed(self, database: str):
        if not database:
            return
        try:
            tables = self.controller.load_tables(database)
            self.statusBar().showMessage(f"{database}: {len(tables)} table(s)")
        except Exception as e:
            logger.error(f"Failed to load tables for {database}: {e}", exc_info=True)
            QMessageBox.critical(self, "Load Failed", f"Could not load tables:\n\n{str(e)}")

    def refresh_metadata(self):
        self.schema_discovery.refresh()
        self.load_databases()

    def _on_sql_changed(self, sql: str):
        tables = self.controller.builder.get_tables_involved()
        self.statusBar().showMessage(f"{len(tables)} table(s) in query" if tables else "Empty query")

    def closeEvent(self, event):
        """Wait for background work and release engines"""
        self.controller.shutdown()
        self.conn_manager.close_all_connections()
        super().closeEvent(event)
