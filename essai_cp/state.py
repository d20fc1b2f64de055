#!/usr/bin/env python3
"""
View state of the tool browser: loaded catalog, filters, selection and tabs.

Everything here is plain data driven by the window's event handlers, so it can
be exercised without a display.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple, Union

from .core import Schema, ToolItem, collect_schema_keys, scalar_to_string, unique_manufacturers
from .loader import DBSource, LoadResult, LoadStatus


@dataclass(frozen=True)
class FamilyFilter:
    essai_part: str

    @property
    def label(self) -> str:
        return f"Family: {self.essai_part}"

    def accepts(self, item: ToolItem) -> bool:
        return item.essai_part == self.essai_part


@dataclass(frozen=True)
class ClassFilter:
    essai_part: str
    holder_name: str

    @property
    def label(self) -> str:
        return f"Class: {self.essai_part} | {self.holder_name}"

    def accepts(self, item: ToolItem) -> bool:
        return item.essai_part == self.essai_part and item.holder_name == self.holder_name


ToolFilter = Union[FamilyFilter, ClassFilter]


def passes(item: ToolItem, manufacturer_filter: Optional[str], tool_filter: Optional[ToolFilter],
           search_text: str) -> bool:
    """Whether item is shown in the tool list.

    A manufacturer filter rejects first. A tool filter then decides on its own;
    only without one is the free-text search applied to the tool name.
    """
    if manufacturer_filter is not None and item.manufacturer != manufacturer_filter:
        return False
    if tool_filter is not None:
        return tool_filter.accepts(item)
    return not search_text or search_text.lower() in item.name.lower()


@dataclass(frozen=True)
class Catalog:
    """Everything derived from one load, replaced as a whole on reload."""
    items: Tuple[ToolItem, ...] = ()
    manufacturers: Tuple[str, ...] = ()
    keys: Dict[Schema, List[str]] = field(default_factory=lambda: {schema: [] for schema in Schema})

    @classmethod
    def from_items(cls, items: List[ToolItem]) -> "Catalog":
        return cls(tuple(items), tuple(unique_manufacturers(items)), collect_schema_keys(items))


DETAIL_GROUPS: List[Tuple[str, List[Tuple[str, str]]]] = [
    ("Assembly Details", [
        ("Tool Name", "name"),
        ("Holder", "holder_name"),
        ("Outside Holder L", "outside_len"),
        ("Gage Length", "gage_len"),
    ]),
    ("Tool Details", [
        ("Essai Part #", "essai_part"),
        ("Manufacturer", "manufacturer"),
        ("EDP #", "edp_num"),
    ]),
    ("Tool Details Extended", [
        ("Description", "description"),
        ("Diameter", "diameter"),
        ("Length of Cut", "length_of_cut"),
    ]),
]


class ViewState:
    def __init__(self, loader: Callable[[DBSource], LoadResult], source: DBSource = DBSource.ONLINE,
                 load_now: bool = True):
        self.loader = loader
        self.source = source
        self.catalog = Catalog()
        self.last_result: Optional[LoadResult] = None
        self.search = ""
        self.manufacturer_filter: Optional[str] = None
        self.tool_filter: Optional[ToolFilter] = None
        self.selected: Optional[int] = None
        self.active_tab = Schema.SOLFEX
        self.show_local_warning = False

        if load_now:
            self.reload()

    @property
    def items(self) -> Tuple[ToolItem, ...]:
        return self.catalog.items

    @property
    def manufacturers(self) -> Tuple[str, ...]:
        return self.catalog.manufacturers

    @property
    def load_failed(self) -> bool:
        return self.last_result is not None and self.last_result.status is LoadStatus.EMPTY

    def reload(self) -> LoadResult:
        result = self.loader(self.source)
        self.catalog = Catalog.from_items(result.items)
        self.last_result = result
        self.selected = None
        self.manufacturer_filter = None
        self.tool_filter = None
        if not result.loaded:
            logging.warning(f"No tools loaded: {result.reason}")
        return result

    def set_source(self, source: DBSource) -> None:
        if source is DBSource.LOCAL:
            self.show_local_warning = True
        if source is not self.source:
            self.source = source
            self.reload()

    def acknowledge_local_warning(self) -> None:
        self.show_local_warning = False

    def set_search(self, text: str) -> None:
        self.search = text

    def set_manufacturer_filter(self, manufacturer: Optional[str]) -> None:
        self.manufacturer_filter = manufacturer

    def clear_tool_filter(self) -> None:
        self.tool_filter = None

    def _item_at(self, index: int) -> Optional[ToolItem]:
        if 0 <= index < len(self.items):
            return self.items[index]
        return None

    def filter_by_family(self, index: int) -> None:
        item = self._item_at(index)
        if item is not None and item.essai_part:
            self.tool_filter = FamilyFilter(item.essai_part)

    def filter_by_class(self, index: int) -> None:
        item = self._item_at(index)
        if item is not None and item.essai_part:
            self.tool_filter = ClassFilter(item.essai_part, item.holder_name)

    def select(self, index: int) -> None:
        """Select the tool at index, or clear the selection if it is already selected."""
        if self._item_at(index) is None:
            return
        self.selected = None if self.selected == index else index

    def selected_item(self) -> Optional[ToolItem]:
        if self.selected is None:
            return None
        return self._item_at(self.selected)

    def visible_items(self) -> List[Tuple[int, ToolItem]]:
        return [
            (i, item) for i, item in enumerate(self.items)
            if passes(item, self.manufacturer_filter, self.tool_filter, self.search)
        ]

    def tool_filter_label(self) -> Optional[str]:
        return self.tool_filter.label if self.tool_filter is not None else None

    def manufacturer_label(self) -> Optional[str]:
        if self.manufacturer_filter is None:
            return None
        return f"Manufacturer: {self.manufacturer_filter}"

    def set_active_tab(self, schema: Schema) -> None:
        self.active_tab = schema

    def active_keys(self) -> List[str]:
        return self.catalog.keys[self.active_tab]

    def schema_table(self, schema: Optional[Schema] = None) -> List[Tuple[str, str]]:
        """Key/value rows of the selected tool for schema (the active tab by default).

        Rows always follow the key set collected over the whole catalog, keys
        the selected tool does not have are shown blank.
        """
        schema = schema or self.active_tab
        item = self.selected_item()
        section = item.section(schema) if item is not None else None
        if not isinstance(section, dict):
            section = {}
        return [(key, scalar_to_string(section.get(key))) for key in self.catalog.keys[schema]]

    def detail_groups(self) -> List[Tuple[str, List[Tuple[str, str]]]]:
        item = self.selected_item()
        if item is None:
            return []
        return [
            (title, [(label, getattr(item, attr)) for label, attr in rows])
            for title, rows in DETAIL_GROUPS
        ]
