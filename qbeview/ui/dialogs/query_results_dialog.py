"""Query Results Dialog - Display query results in a table"""

import logging
from pathlib import Path

from PyQt6.QtWidgets import (QDialog, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
                             QMessageBox, QFileDialog, QMenu, QApplication,
                             QTableWidget, QTableWidgetItem, QAbstractItemView)
from PyQt6.QtCore import Qt

from qbeview.core.query_executor import QueryResult

logger = logging.getLogger(__name__)


def export_result(result: QueryResult, file_path: str) -> Path:
    """
    Write a query result to .xlsx (openpyxl) or .csv

    Args:
        result: Rows to export
        file_path: Target path; '.xlsx' is appended when no known suffix is given

    Returns:
        The path written
    """
    path = Path(file_path)
    if path.suffix.lower() not in ('.xlsx', '.csv'):
        path = path.with_name(path.name + '.xlsx')

    df = result.to_dataframe()
    if path.suffix.lower() == '.csv':
        df.to_csv(path, index=False)
    else:
        df.to_excel(path, index=False, engine='openpyxl')

    logger.info(f"Exported {len(df)} rows to {path}")
    return path


class QueryResultsDialog(QDialog):
    """Dialog for displaying query results"""

    def __init__(self, result: QueryResult, parent=None):
        super().__init__(parent)
        self.result = result
        self.init_ui()

    def init_ui(self):
        """Initialize the UI"""
        self.setWindowTitle("Query Results")
        self.setMinimumSize(900, 550)

        layout = QVBoxLayout(self)

        # Header with stats
        header_layout = QHBoxLayout()

        stats_label = QLabel(
            f"<b>{self.result.record_count:,}</b> records returned in "
            f"<b>{self.result.execution_time_ms}ms</b>"
        )
        stats_label.setObjectName("stats_label")
        header_layout.addWidget(stats_label)

        header_layout.addStretch()

        export_btn = QPushButton("Save")
        export_btn.setObjectName("gold_button")
        export_btn.clicked.connect(self.export_to_file)
        header_layout.addWidget(export_btn)

        layout.addLayout(header_layout)

        self.results_table = QTableWidget(self.result.record_count, len(self.result.columns))
        self.results_table.setHorizontalHeaderLabels(self.result.columns)
        self.results_table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.results_table.verticalHeader().setDefaultSectionSize(20)
        for row_index, row in enumerate(self.result.rows):
            for col_index, value in enumerate(row):
                text = "NULL" if value is None else str(value)
                self.results_table.setItem(row_index, col_index, QTableWidgetItem(text))
        self.results_table.resizeColumnsToContents()
        layout.addWidget(self.results_table)

        # SQL display with context menu
        sql_label = QLabel("<b>Generated SQL:</b>")
        layout.addWidget(sql_label)

        self.sql_display = QLabel(self.result.sql)
        self.sql_display.setObjectName("sql_display")
        self.sql_display.setWordWrap(True)
        self.sql_display.setMaximumHeight(100)
        self.sql_display.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        self.sql_display.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.sql_display.customContextMenuRequested.connect(self.show_sql_context_menu)
        layout.addWidget(self.sql_display)

    def show_sql_context_menu(self, position):
        """Show context menu for SQL display"""
        menu = QMenu(self)

        copy_action = menu.addAction("Copy SQL")
        copy_action.triggered.connect(self.copy_sql)

        menu.exec(self.sql_display.mapToGlobal(position))

    def copy_sql(self):
        """Copy SQL to clipboard"""
        QApplication.clipboard().setText(self.result.sql)
        logger.info("SQL copied to clipboard")

    def export_to_file(self):
        """Export results to Excel or CSV file (save as)"""
        file_path, _ = QFileDialog.getSaveFileName(
            self,
            "Save Results",
            "",
            "Excel Files (*.xlsx);;CSV Files (*.csv);;All Files (*)"
        )
        if not file_path:
            return

        try:
            path = export_result(self.result, file_path)
        except Exception as e:
            logger.error(f"Export to file failed: {e}")
            QMessageBox.critical(
                self,
                "Export Failed",
                f"Failed to export data:\n{str(e)}"
            )
            return

        QMessageBox.information(
            self,
            "Export Successful",
            f"Data exported successfully to:\n{path}\n\n"
            f"{self.result.record_count:,} rows exported."
        )
