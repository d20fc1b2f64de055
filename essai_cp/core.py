#!/usr/bin/env python3
"""
Tool record model and the normalization helpers shared by the GUI and the CLI.
"""
import enum
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

DRILLING_TYPE = "drilling"

# Display field -> key looked up in the milling/drilling sections
FIELD_KEYS: Dict[str, str] = {
    "essai_part": "Message2",
    "edp_num": "Message1",
    "manufacturer": "Message3",
    "holder_name": "HolderName",
    "outside_len": "Length",
    "gage_len": "HLength",
    "description": "Description",
    "diameter": "Diameter",
    "length_of_cut": "CuttingLength",
}


class Schema(enum.Enum):
    SOLFEX = "solfex"
    MILLING = "milling"
    DRILLING = "drilling"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass
class ToolRecord:
    """A tool entry exactly as it appears in the database document."""
    name: str
    tool_type: str
    solfex: Any = None
    milling: Any = None
    drilling: Any = None


@dataclass(frozen=True)
class ToolItem:
    """A tool record with its display fields resolved."""
    name: str
    essai_part: str = ""
    edp_num: str = ""
    manufacturer: str = ""
    holder_name: str = ""
    outside_len: str = ""
    gage_len: str = ""
    description: str = ""
    diameter: str = ""
    length_of_cut: str = ""
    solfex: Any = None
    milling: Any = None
    drilling: Any = None

    def section(self, schema: Schema) -> Any:
        return getattr(self, schema.value)


def scalar_to_string(value: Any) -> str:
    """Render a JSON scalar for display.

    Strings pass through, numbers use their shortest decimal form and
    booleans become "true"/"false". Arrays, objects and null give "".
    """
    if isinstance(value, str):
        return value
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        text = repr(value)
        if "e" in text:
            # 1e+20 -> 1e20, 1e-07 -> 1e-7
            mantissa, exponent = text.split("e")
            text = f"{mantissa}e{int(exponent)}"
        return text
    return ""


def section_value(section: Any, key: str) -> Optional[str]:
    """Look up key in a raw section, None when the section has no such key."""
    if not isinstance(section, dict) or key not in section:
        return None
    return scalar_to_string(section[key])


def primary_secondary(record: ToolRecord) -> Tuple[Any, Any]:
    if record.tool_type == DRILLING_TYPE:
        return record.drilling, record.milling
    return record.milling, record.drilling


def normalize(record: ToolRecord) -> ToolItem:
    """Build the display item for a raw record.

    Every display field is taken from the primary section (drilling for
    drilling tools, milling otherwise) and falls back to the other one.
    The Solfex section is only carried along for its own table.
    """
    primary, secondary = primary_secondary(record)
    fields = {}
    for field_name, key in FIELD_KEYS.items():
        value = section_value(primary, key)
        if value is None:
            value = section_value(secondary, key)
        fields[field_name] = value if value is not None else ""

    return ToolItem(
        name=record.name,
        solfex=record.solfex,
        milling=record.milling,
        drilling=record.drilling,
        **fields,
    )


def collect_keys(items: Iterable[ToolItem], selector: Callable[[ToolItem], Any]) -> List[str]:
    """Sorted union of the keys of every selected section that is a mapping."""
    keys = set()
    for item in items:
        section = selector(item)
        if isinstance(section, dict):
            keys.update(section.keys())
    return sorted(keys)


def collect_schema_keys(items: List[ToolItem]) -> Dict[Schema, List[str]]:
    return {schema: collect_keys(items, lambda item, s=schema: item.section(s)) for schema in Schema}


def unique_manufacturers(items: Iterable[ToolItem]) -> List[str]:
    return sorted({item.manufacturer for item in items if item.manufacturer})
