"""
Essai Control Panel - A viewer for the Essai machine-shop tool database.
"""

__version__ = "2.0.0"

from .core import (
    FIELD_KEYS,
    Schema,
    ToolRecord,
    ToolItem,
    scalar_to_string,
    normalize,
    collect_keys,
    collect_schema_keys,
    unique_manufacturers,
)
from .loader import (
    DBSource,
    LoadStatus,
    LoadResult,
    DatabaseFormatError,
    fetch_text,
    parse_database,
    parse_items,
    load,
    load_items,
)
from .config import AppConfig, ConfigError, load_config
