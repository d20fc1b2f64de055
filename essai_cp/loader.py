#!/usr/bin/env python3
"""
Fetching and parsing of the tool database.

A database that cannot be read, downloaded or parsed is never an error for
the caller: it loads as an empty tool list and the result is marked EMPTY.
"""
import enum
import json
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

import requests

from .config import AppConfig
from .core import ToolItem, ToolRecord, normalize

SECTION_FIELDS = {
    "solfex": "Solfex",
    "milling": "milling_tool",
    "drilling": "drilling_tool",
}


class DBSource(enum.Enum):
    LOCAL = "local"
    ONLINE = "online"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class LoadStatus(enum.Enum):
    LOADED = "loaded"
    EMPTY = "empty"


class DatabaseFormatError(ValueError):
    """The database text is not a valid tool database document."""


@dataclass
class LoadResult:
    source: DBSource
    status: LoadStatus
    items: List[ToolItem] = field(default_factory=list)
    reason: Optional[str] = None

    @property
    def loaded(self) -> bool:
        return self.status is LoadStatus.LOADED


def read_local(config: AppConfig) -> str:
    try:
        with open(config.local_path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logging.warning(f"Could not read local database {config.local_path}: {e}")
        return ""


def fetch_online(config: AppConfig) -> str:
    try:
        response = requests.get(config.online_url, timeout=config.timeout)
        response.raise_for_status()
        return response.text
    except requests.RequestException as e:
        logging.warning(f"Could not fetch online database {config.online_url}: {e}")
        return ""


def fetch_text(source: DBSource, config: AppConfig) -> str:
    """Return the raw database text for source, "" when it is unavailable."""
    if source is DBSource.LOCAL:
        return read_local(config)
    return fetch_online(config)


def _parse_entry(index: int, entry: Any) -> ToolRecord:
    if not isinstance(entry, dict):
        raise DatabaseFormatError(f"tools[{index}] is not an object")
    for key in ("tool_name", "sc_tool_type"):
        if not isinstance(entry.get(key), str):
            raise DatabaseFormatError(f"tools[{index}].{key} is missing or not a string")

    sections = {name: entry.get(json_key) for name, json_key in SECTION_FIELDS.items()}
    return ToolRecord(name=entry["tool_name"], tool_type=entry["sc_tool_type"], **sections)


def _reject_constant(name: str) -> Any:
    raise DatabaseFormatError(f"{name} is not a JSON value")


def parse_database(text: str) -> List[ToolRecord]:
    """Parse a tool database document.

    Args:
        text: JSON text of the form {"tools": [{"tool_name": ..., ...}, ...]}.

    Returns:
        The raw records in document order.

    Raises:
        DatabaseFormatError: If the text is not JSON or does not have the
            expected shape.
    """
    try:
        document = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        raise DatabaseFormatError(f"invalid JSON: {e}") from e

    if not isinstance(document, dict) or not isinstance(document.get("tools"), list):
        raise DatabaseFormatError("expected an object with a 'tools' list")

    return [_parse_entry(i, entry) for i, entry in enumerate(document["tools"])]


def parse_items(text: str) -> List[ToolItem]:
    try:
        records = parse_database(text)
    except DatabaseFormatError as e:
        if text:
            logging.warning(f"Could not parse tool database: {e}")
        return []
    return [normalize(record) for record in records]


def load(source: DBSource, config: AppConfig) -> LoadResult:
    """Load and normalize the database from source."""
    logging.info(f"Loading {source.label.lower()} tool database")
    text = fetch_text(source, config)
    if not text:
        return LoadResult(source, LoadStatus.EMPTY, reason=f"{source.label} database unavailable")

    items = parse_items(text)
    if not items:
        return LoadResult(source, LoadStatus.EMPTY, reason=f"{source.label} database contains no tools")

    logging.info(f"Loaded {len(items)} tools from the {source.label.lower()} database")
    return LoadResult(source, LoadStatus.LOADED, items)


def load_items(source: DBSource, config: AppConfig) -> List[ToolItem]:
    return load(source, config).items
