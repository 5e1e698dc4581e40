"""Visual Query Builder screen - table picker, criteria grid and live SQL preview"""

import logging
from typing import Dict, Optional

from PyQt6.QtWidgets import (QWidget, QVBoxLayout, QHBoxLayout, QSplitter, QLabel,
                             QLineEdit, QPushButton, QTreeWidget, QTreeWidgetItem,
                             QTableWidget, QTableWidgetItem, QPlainTextEdit, QMenu,
                             QMessageBox, QHeaderView)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont

from qbeview.models.qbe_column import SortOrder
from qbeview.ui import theme
from qbeview.ui.dialogs.query_results_dialog import QueryResultsDialog
from qbeview.ui.qbe_controller import QueryBuilderController
from qbeview.utils.constants import GridRow, ItemType

logger = logging.getLogger(__name__)

TEXT_ROWS = {
    GridRow.ALIAS: 'alias',
    GridRow.CRITERIA: 'criteria',
    GridRow.OR_CRITERIA: 'or_criteria',
}


class SortToggleWidget(QWidget):
    """ASC / DESC buttons for one grid column; clicking the active one clears it"""

    def __init__(self, controller: QueryBuilderController, column_id: str,
                 sort: Optional[SortOrder], parent=None):
        super().__init__(parent)
        self.controller = controller
        self.column_id = column_id

        layout = QHBoxLayout(self)
        layout.setContentsMargins(2, 0, 2, 0)
        layout.setSpacing(2)

        self.asc_btn = QPushButton("ASC")
        self.desc_btn = QPushButton("DESC")
        for btn, order in ((self.asc_btn, SortOrder.ASC), (self.desc_btn, SortOrder.DESC)):
            btn.setCheckable(True)
            btn.setObjectName("sort_toggle")
            btn.clicked.connect(lambda _checked, o=order: self._on_clicked(o))
            layout.addWidget(btn)

        self._sync(sort)

    def _on_clicked(self, order: SortOrder):
        self.controller.toggle_sort(self.column_id, order)
        column = self.controller.builder.grid.get(self.column_id)
        self._sync(column.sort if column else None)

    def _sync(self, sort: Optional[SortOrder]):
        self.asc_btn.setChecked(sort == SortOrder.ASC)
        self.desc_btn.setChecked(sort == SortOrder.DESC)


class QueryBuilderScreen(QWidget):
    """Visual query builder with table list, criteria grid and SQL preview"""

    def __init__(self, controller: QueryBuilderController, tables_panel_width: int = 300, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.tables_panel_width = tables_panel_width
        self._table_items: Dict[str, QTreeWidgetItem] = {}
        self._updating = False

        self.init_ui()

        controller.sql_changed.connect(self._on_sql_changed)
        controller.grid_changed.connect(self.refresh_grid)
        controller.tables_loaded.connect(self.populate_tables)
        controller.selection_changed.connect(self._on_selection_changed)
        controller.columns_loaded.connect(self._on_columns_loaded)
        controller.columns_failed.connect(self._on_columns_failed)
        controller.query_completed.connect(self._on_query_completed)

        self._on_sql_changed(controller.sql)

    def init_ui(self):
        """Initialize the UI"""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.setChildrenCollapsible(False)
        splitter.addWidget(self._create_tables_panel())
        splitter.addWidget(self._create_builder_panel())
        splitter.setSizes([self.tables_panel_width, 900])

        layout.addWidget(splitter)

    def _create_tables_panel(self) -> QWidget:
        """Create left panel with searchable tables and their columns"""
        panel = QWidget()
        panel_layout = QVBoxLayout(panel)
        panel_layout.setContentsMargins(5, 5, 5, 5)

        header = QLabel("TABLES")
        theme.apply_panel_header(header)
        panel_layout.addWidget(header)

        self.tables_search_box = QLineEdit()
        self.tables_search_box.setPlaceholderText("Search tables...")
        self.tables_search_box.textChanged.connect(self._filter_tables)
        panel_layout.addWidget(self.tables_search_box)

        self.tables_tree = QTreeWidget()
        self.tables_tree.setHeaderHidden(True)
        self.tables_tree.setIndentation(15)
        self.tables_tree.itemChanged.connect(self._on_table_item_changed)
        self.tables_tree.itemDoubleClicked.connect(self.on_field_double_clicked)
        panel_layout.addWidget(self.tables_tree)

        self.table_info_label = QLabel("Check a table, then double-click its columns")
        self.table_info_label.setObjectName("info_label")
        self.table_info_label.setWordWrap(True)
        panel_layout.addWidget(self.table_info_label)

        return panel

    def _create_builder_panel(self) -> QWidget:
        """Create right panel with toolbar, criteria grid and SQL preview"""
        panel = QWidget()
        panel_layout = QVBoxLayout(panel)
        panel_layout.setContentsMargins(5, 5, 5, 5)

        toolbar = QHBoxLayout()
        title = QLabel("VISUAL QUERY BUILDER")
        theme.apply_panel_header(title)
        toolbar.addWidget(title)
        toolbar.addStretch()

        self.remove_btn = QPushButton("Remove Column")
        self.remove_btn.clicked.connect(self.remove_current_column)
        toolbar.addWidget(self.remove_btn)

        self.clear_btn = QPushButton("Clear")
        self.clear_btn.setObjectName("danger_button")
        self.clear_btn.clicked.connect(self.controller.clear_grid)
        toolbar.addWidget(self.clear_btn)

        self.run_btn = QPushButton("Run Query")
        self.run_btn.setObjectName("primary_button")
        self.run_btn.clicked.connect(self.run_query)
        toolbar.addWidget(self.run_btn)

        panel_layout.addLayout(toolbar)

        # Criteria grid: one table column per QBE column, one row per attribute
        self.grid_table = QTableWidget(len(GridRow.LABELS), 0)
        self.grid_table.setVerticalHeaderLabels(GridRow.LABELS)
        self.grid_table.horizontalHeader().setVisible(False)
        self.grid_table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Interactive)
        self.grid_table.horizontalHeader().setDefaultSectionSize(160)
        self.grid_table.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.grid_table.customContextMenuRequested.connect(self._show_grid_context_menu)
        self.grid_table.itemChanged.connect(self._on_grid_item_changed)
        panel_layout.addWidget(self.grid_table, stretch=1)

        self.grid_hint_label = QLabel("Double-click columns from the list on the left to add them to the grid.")
        self.grid_hint_label.setObjectName("info_label")
        self.grid_hint_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        panel_layout.addWidget(self.grid_hint_label)

        preview_header = QLabel("LIVE SQL PREVIEW")
        theme.apply_panel_header(preview_header)
        panel_layout.addWidget(preview_header)

        self.sql_preview = QPlainTextEdit()
        self.sql_preview.setReadOnly(True)
        self.sql_preview.setFont(QFont("Consolas", 10))
        self.sql_preview.setMaximumHeight(150)
        panel_layout.addWidget(self.sql_preview)

        return panel

    # ------------------------------------------------------------------
    # Tables panel
    # ------------------------------------------------------------------

    def populate_tables(self, table_names: list):
        """Fill the tables tree, keeping check marks of selected tables"""
        self._updating = True
        try:
            self.tables_tree.clear()
            self._table_items.clear()
            selection = self.controller.builder.selection
            for name in table_names:
                item = QTreeWidgetItem([name])
                item.setData(0, Qt.ItemDataRole.UserRole, ItemType.TABLE)
                item.setData(0, Qt.ItemDataRole.UserRole + 1, name)
                item.setFlags(item.flags() | Qt.ItemFlag.ItemIsUserCheckable)
                item.setCheckState(0, Qt.CheckState.Checked if selection.is_selected(name)
                                   else Qt.CheckState.Unchecked)
                self.tables_tree.addTopLevelItem(item)
                self._table_items[name] = item
                if selection.is_selected(name):
                    self._fill_fields(name)
        finally:
            self._updating = False

        self.table_info_label.setText(f"{len(table_names)} table(s)")
        self._filter_tables(self.tables_search_box.text())

    def _filter_tables(self, search_text: str):
        """Filter tables based on search text"""
        visible = set(self.controller.filter_tables(search_text))
        for name, item in self._table_items.items():
            item.setHidden(name not in visible)

    def _on_table_item_changed(self, item: QTreeWidgetItem, column: int):
        if self._updating or item.data(0, Qt.ItemDataRole.UserRole) != ItemType.TABLE:
            return
        table_ref = item.data(0, Qt.ItemDataRole.UserRole + 1)
        checked = item.checkState(0) == Qt.CheckState.Checked
        if checked != self.controller.builder.selection.is_selected(table_ref):
            self.controller.toggle_table(table_ref)

    def _on_selection_changed(self, table_ref: str, selected: bool):
        item = self._table_items.get(table_ref)
        if item is None:
            return
        self._updating = True
        try:
            item.setCheckState(0, Qt.CheckState.Checked if selected else Qt.CheckState.Unchecked)
            if not selected:
                item.takeChildren()
        finally:
            self._updating = False

    def _on_columns_loaded(self, table_ref: str):
        self._fill_fields(table_ref)

    def _on_columns_failed(self, table_ref: str, error: str):
        self.table_info_label.setText(f"Error loading {table_ref}: {error}")

    def _fill_fields(self, table_ref: str):
        item = self._table_items.get(table_ref)
        if item is None:
            return
        was_updating = self._updating
        self._updating = True
        try:
            item.takeChildren()
            for info in self.controller.builder.selection.columns_for(table_ref):
                label = f"{info.field} ({info.type})" if info.type else info.field
                if info.key:
                    label += f" [{info.key}]"
                field_item = QTreeWidgetItem([label])
                field_item.setData(0, Qt.ItemDataRole.UserRole, ItemType.FIELD)
                field_item.setData(0, Qt.ItemDataRole.UserRole + 1, info.field)
                field_item.setData(0, Qt.ItemDataRole.UserRole + 2, table_ref)
                item.addChild(field_item)
            item.setExpanded(True)
        finally:
            self._updating = was_updating

    def on_field_double_clicked(self, item: QTreeWidgetItem, column: int):
        """Handle double-click on field to add it to the grid"""
        if item.data(0, Qt.ItemDataRole.UserRole) != ItemType.FIELD:
            return
        field = item.data(0, Qt.ItemDataRole.UserRole + 1)
        table_ref = item.data(0, Qt.ItemDataRole.UserRole + 2)
        self.controller.add_column(table_ref, field)

    # ------------------------------------------------------------------
    # Criteria grid
    # ------------------------------------------------------------------

    def refresh_grid(self):
        """Rebuild the grid from the controller's columns"""
        self._updating = True
        try:
            columns = self.controller.columns
            self.grid_table.setColumnCount(0)
            self.grid_table.setColumnCount(len(columns))

            for index, column in enumerate(columns):
                for row in (GridRow.FIELD, GridRow.TABLE):
                    text = column.field if row == GridRow.FIELD else column.table
                    item = QTableWidgetItem(text)
                    item.setFlags(item.flags() & ~Qt.ItemFlag.ItemIsEditable)
                    item.setData(Qt.ItemDataRole.UserRole, column.id)
                    self.grid_table.setItem(row, index, item)

                for row, attr in TEXT_ROWS.items():
                    item = QTableWidgetItem(getattr(column, attr))
                    item.setData(Qt.ItemDataRole.UserRole, column.id)
                    self.grid_table.setItem(row, index, item)

                show_item = QTableWidgetItem()
                show_item.setFlags((show_item.flags() | Qt.ItemFlag.ItemIsUserCheckable)
                                   & ~Qt.ItemFlag.ItemIsEditable)
                show_item.setCheckState(Qt.CheckState.Checked if column.show else Qt.CheckState.Unchecked)
                show_item.setData(Qt.ItemDataRole.UserRole, column.id)
                self.grid_table.setItem(GridRow.SHOW, index, show_item)

                self.grid_table.setCellWidget(
                    GridRow.SORT, index, SortToggleWidget(self.controller, column.id, column.sort)
                )
        finally:
            self._updating = False

        has_columns = bool(columns)
        self.grid_hint_label.setVisible(not has_columns)
        self.clear_btn.setEnabled(has_columns)
        self.remove_btn.setEnabled(has_columns)

    def _on_grid_item_changed(self, item: QTableWidgetItem):
        if self._updating:
            return
        column_id = item.data(Qt.ItemDataRole.UserRole)
        if column_id is None:
            return

        row = item.row()
        if row in TEXT_ROWS:
            self.controller.update_column(column_id, **{TEXT_ROWS[row]: item.text()})
        elif row == GridRow.SHOW:
            self.controller.update_column(column_id, show=item.checkState() == Qt.CheckState.Checked)

    def _column_id_at(self, index: int) -> Optional[str]:
        item = self.grid_table.item(GridRow.FIELD, index)
        return item.data(Qt.ItemDataRole.UserRole) if item else None

    def remove_current_column(self):
        column_id = self._column_id_at(self.grid_table.currentColumn())
        if column_id:
            self.controller.remove_column(column_id)

    def _show_grid_context_menu(self, position):
        index = self.grid_table.columnAt(position.x())
        column_id = self._column_id_at(index)
        if not column_id:
            return
        menu = QMenu(self)
        remove_action = menu.addAction("Remove Column")
        if menu.exec(self.grid_table.viewport().mapToGlobal(position)) == remove_action:
            self.controller.remove_column(column_id)

    # ------------------------------------------------------------------
    # SQL preview and execution
    # ------------------------------------------------------------------

    def _on_sql_changed(self, sql: str):
        self.sql_preview.setPlainText(sql)
        self.run_btn.setEnabled(bool(sql))

    def run_query(self):
        """Execute the generated query in the background"""
        if self.controller.run_query() is not None:
            self.run_btn.setEnabled(False)
            self.run_btn.setText("Running...")

    def _on_query_completed(self, outcome):
        self.run_btn.setText("Run Query")
        self.run_btn.setEnabled(bool(self.controller.sql))

        if not outcome.ok:
            QMessageBox.critical(
                self,
                "Query Execution Failed",
                f"Failed to execute query:\n\n{outcome.error}"
            )
            return

        results_dialog = QueryResultsDialog(outcome.result, self)
        results_dialog.exec()
