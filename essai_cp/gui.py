#!/usr/bin/env python3
from PyQt6.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
                           QListWidget, QListWidgetItem, QLabel, QPushButton,
                           QLineEdit, QGridLayout, QTabWidget, QScrollArea,
                           QMessageBox, QGroupBox, QMenu, QTableWidget,
                           QTableWidgetItem, QHeaderView, QAbstractItemView)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QActionGroup
import logging

from .config import APP_NAME
from .core import Schema
from .loader import DBSource
from .state import ViewState

LOCAL_WARNING = "⚠️ You are using the LOCAL database. Data may be outdated. Use only for testing."

CHIP_STYLE = """
    QLabel {
        background-color: #e6e6e6;
        border-radius: 8px;
        padding: 2px 8px;
        color: #333333;
    }
"""

CLEAR_BUTTON_STYLE = """
    QPushButton {
        background-color: #dddddd;
        border: none;
        border-radius: 9px;
        color: #666666;
        font-weight: bold;
    }
    QPushButton:hover {
        background-color: #cccccc;
    }
"""


def _clear_button():
    button = QPushButton("×")
    button.setFixedSize(18, 18)
    button.setStyleSheet(CLEAR_BUTTON_STYLE)
    return button


class ToolListPanel(QWidget):
    """Left panel: search box, tool filter chip, tool list and refresh button."""

    def __init__(self, window):
        super().__init__()
        self.main_window = window
        self.setMinimumWidth(220)

        layout = QVBoxLayout()
        layout.setContentsMargins(5, 5, 5, 5)
        self.setLayout(layout)

        heading = QLabel("Tool List")
        heading.setStyleSheet("font-weight: bold; font-size: 16px;")
        layout.addWidget(heading)

        search_layout = QHBoxLayout()
        search_layout.addWidget(QLabel("🔍"))
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search tools")
        self.search_input.textChanged.connect(window.on_search_changed)
        search_layout.addWidget(self.search_input)
        layout.addLayout(search_layout)

        chip_layout = QHBoxLayout()
        self.chip_label = QLabel("")
        self.chip_label.setStyleSheet(CHIP_STYLE)
        chip_layout.addWidget(self.chip_label)
        self.chip_clear = _clear_button()
        self.chip_clear.clicked.connect(window.on_clear_tool_filter)
        chip_layout.addWidget(self.chip_clear)
        chip_layout.addStretch()
        layout.addLayout(chip_layout)

        self.tool_list = QListWidget()
        self.tool_list.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.tool_list.customContextMenuRequested.connect(self._show_context_menu)
        self.tool_list.itemClicked.connect(self._on_item_clicked)
        self.tool_list.setStyleSheet("""
            QListWidget {
                background-color: white;
                border: 1px solid #dddddd;
                border-radius: 3px;
                color: #333333;
            }
            QListWidget::item:selected {
                background-color: #e6e6e6;
                color: #333333;
            }
            QListWidget::item:hover {
                background-color: #f0f0f0;
            }
        """)
        layout.addWidget(self.tool_list, stretch=1)

        self.refresh_button = QPushButton("🔄 Refresh")
        self.refresh_button.clicked.connect(window.on_refresh)
        layout.addWidget(self.refresh_button)

    def populate(self, state: ViewState):
        self.tool_list.blockSignals(True)
        self.tool_list.clear()
        for index, item in state.visible_items():
            list_item = QListWidgetItem(item.name)
            list_item.setData(Qt.ItemDataRole.UserRole, index)
            self.tool_list.addItem(list_item)
            if state.selected == index:
                list_item.setSelected(True)
        self.tool_list.blockSignals(False)

        chip = state.tool_filter_label()
        self.chip_label.setText(chip or "")
        self.chip_label.setVisible(chip is not None)
        self.chip_clear.setVisible(chip is not None)

    def _on_item_clicked(self, list_item):
        self.main_window.on_tool_clicked(list_item.data(Qt.ItemDataRole.UserRole))

    def menu_position(self, pos):
        """Global position for a context menu requested at pos (viewport coordinates)."""
        return self.tool_list.viewport().mapToGlobal(pos)

    def _show_context_menu(self, pos):
        list_item = self.tool_list.itemAt(pos)
        if list_item is None:
            return
        index = list_item.data(Qt.ItemDataRole.UserRole)

        menu = QMenu(self)
        family_action = menu.addAction("Show Tool Family")
        class_action = menu.addAction("Show Tool Class")
        chosen = menu.exec(self.menu_position(pos))
        if chosen is family_action:
            self.main_window.on_filter_family(index)
        elif chosen is class_action:
            self.main_window.on_filter_class(index)


class DetailPanel(QScrollArea):
    """Right panel with the normalized fields of the selected tool."""

    def __init__(self):
        super().__init__()
        self.setMinimumWidth(280)
        self.setWidgetResizable(True)
        self.content = None

    def show_details(self, state: ViewState):
        content = QWidget()
        layout = QVBoxLayout(content)

        groups = state.detail_groups()
        if not groups:
            layout.addWidget(QLabel("Select a tool from the list"))

        for title, rows in groups:
            group = QGroupBox(title)
            grid = QGridLayout()
            group.setLayout(grid)
            for row, (label, value) in enumerate(rows):
                name_label = QLabel(label)
                name_label.setStyleSheet("color: #666666;")
                value_label = QLabel(value)
                value_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
                grid.addWidget(name_label, row, 0)
                grid.addWidget(value_label, row, 1)
            layout.addWidget(group)

        layout.addStretch()
        self.setWidget(content)
        self.content = content


class SchemaTable(QTableWidget):
    """Key/value table of one attribute schema."""

    def __init__(self):
        super().__init__(0, 2)
        self.setHorizontalHeaderLabels(["Key", "Value"])
        self.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.setAlternatingRowColors(True)
        self.verticalHeader().setVisible(False)
        self.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.ResizeToContents)
        self.horizontalHeader().setStretchLastSection(True)

    def show_rows(self, rows):
        self.setRowCount(len(rows))
        for row, (key, value) in enumerate(rows):
            self.setItem(row, 0, QTableWidgetItem(key))
            self.setItem(row, 1, QTableWidgetItem(value))


class MainWindow(QMainWindow):
    def __init__(self, state: ViewState):
        super().__init__()
        self.state = state
        self.setWindowTitle(APP_NAME)
        self.setMinimumSize(1100, 650)

        self._setup_menubar()

        main_widget = QWidget()
        self.setCentralWidget(main_widget)
        main_layout = QHBoxLayout()
        main_widget.setLayout(main_layout)

        self.tool_panel = ToolListPanel(self)
        main_layout.addWidget(self.tool_panel)

        self.schema_tabs = QTabWidget()
        self.schema_tables = {}
        for schema in Schema:
            table = SchemaTable()
            self.schema_tables[schema] = table
            self.schema_tabs.addTab(table, schema.label)
        self.schema_tabs.currentChanged.connect(self._on_tab_changed)
        main_layout.addWidget(self.schema_tabs, stretch=1)

        self.detail_panel = DetailPanel()
        main_layout.addWidget(self.detail_panel)

        self.status_label = QLabel("")
        self.statusBar().addWidget(self.status_label)

        self._reloaded()

    def _setup_menubar(self):
        menubar = self.menuBar()

        database_menu = menubar.addMenu("Database")
        self.source_group = QActionGroup(self)
        self.source_group.setExclusive(True)
        self.source_actions = {}
        for source in DBSource:
            action = QAction(source.label, self)
            action.setCheckable(True)
            action.setChecked(source is self.state.source)
            action.triggered.connect(lambda checked, s=source: self.on_source_selected(s))
            self.source_group.addAction(action)
            database_menu.addAction(action)
            self.source_actions[source] = action

        self.manufacturer_menu = menubar.addMenu("Manufacturer")

        corner = QWidget()
        corner_layout = QHBoxLayout(corner)
        corner_layout.setContentsMargins(0, 0, 8, 0)
        self.manufacturer_label = QLabel("")
        self.manufacturer_label.setStyleSheet(CHIP_STYLE)
        corner_layout.addWidget(self.manufacturer_label)
        self.manufacturer_clear = _clear_button()
        self.manufacturer_clear.clicked.connect(lambda: self.on_manufacturer_selected(None))
        corner_layout.addWidget(self.manufacturer_clear)
        menubar.setCornerWidget(corner, Qt.Corner.TopRightCorner)

    def _rebuild_manufacturer_menu(self):
        self.manufacturer_menu.clear()
        all_action = self.manufacturer_menu.addAction("All")
        all_action.triggered.connect(lambda: self.on_manufacturer_selected(None))
        for manufacturer in self.state.manufacturers:
            action = self.manufacturer_menu.addAction(manufacturer)
            action.triggered.connect(lambda checked, m=manufacturer: self.on_manufacturer_selected(m))

    def refresh(self):
        """Redraw every panel from the view state."""
        label = self.state.manufacturer_label()
        self.manufacturer_label.setText(label or "")
        self.manufacturer_label.setVisible(label is not None)
        self.manufacturer_clear.setVisible(label is not None)

        self.tool_panel.populate(self.state)
        self._refresh_selection()

        if self.state.load_failed:
            self.status_label.setText(f"✗ No tools loaded ({self.state.last_result.reason})")
            self.status_label.setStyleSheet("color: #F44336; font-weight: bold;")
        else:
            self.status_label.setText(f"{len(self.state.items)} tools from the {self.state.source.label} database")
            self.status_label.setStyleSheet("color: #4CAF50;")

    def _refresh_selection(self):
        self.detail_panel.show_details(self.state)
        for schema, table in self.schema_tables.items():
            table.show_rows(self.state.schema_table(schema))

    def _reloaded(self):
        self._rebuild_manufacturer_menu()
        self.refresh()

    def on_source_selected(self, source: DBSource):
        logging.info(f"Switching to the {source.label.lower()} database")
        self.state.set_source(source)
        self._reloaded()
        if self.state.show_local_warning:
            QMessageBox.warning(self, "Warning", LOCAL_WARNING)
            self.state.acknowledge_local_warning()

    def on_manufacturer_selected(self, manufacturer):
        self.state.set_manufacturer_filter(manufacturer)
        self.refresh()

    def on_search_changed(self, text):
        self.state.set_search(text)
        self.tool_panel.populate(self.state)

    def on_clear_tool_filter(self):
        self.state.clear_tool_filter()
        self.tool_panel.populate(self.state)

    def on_filter_family(self, index):
        self.state.filter_by_family(index)
        self.tool_panel.populate(self.state)

    def on_filter_class(self, index):
        self.state.filter_by_class(index)
        self.tool_panel.populate(self.state)

    def on_tool_clicked(self, index):
        self.state.select(index)
        # Clicking the selected tool again deselects it
        if self.state.selected is None:
            self.tool_panel.tool_list.clearSelection()
        self._refresh_selection()

    def on_refresh(self):
        self.state.reload()
        self._reloaded()

    def _on_tab_changed(self, tab_index):
        self.state.set_active_tab(list(Schema)[tab_index])
