import json

import pytest

from essai_cp.config import AppConfig
from essai_cp.core import ToolRecord, normalize
from essai_cp.loader import DBSource, LoadResult, LoadStatus


SAMPLE_DOCUMENT = {
    "tools": [
        {
            "tool_name": "T1 Drill",
            "sc_tool_type": "drilling",
            "Solfex": {"A": 1, "B": "x"},
            "drilling_tool": {"Length": "10", "Message2": "P-100", "Message3": "Guhring"},
            "milling_tool": {"Length": "99", "HolderName": "H1"},
        },
        {
            "tool_name": "T2 End Mill",
            "sc_tool_type": "milling",
            "Solfex": {"B": "y", "C": True},
            "milling_tool": {"Message2": "P-100", "Message3": "Harvey", "HolderName": "H1", "Diameter": 0.5},
            "drilling_tool": {"Diameter": 0.25, "PointAngle": 140},
        },
        {
            "tool_name": "T3 Chamfer",
            "sc_tool_type": "milling",
            "milling_tool": {"Message2": "P-100", "Message3": "Harvey", "HolderName": "H2"},
        },
        {
            "tool_name": "T4 Spot",
            "sc_tool_type": "spotting",
            "milling_tool": {"Message2": "P-200", "Message3": "Guhring"},
        },
    ]
}


def make_item(name="Tool", tool_type="milling", solfex=None, milling=None, drilling=None):
    return normalize(ToolRecord(name=name, tool_type=tool_type, solfex=solfex, milling=milling, drilling=drilling))


@pytest.fixture
def sample_document():
    return json.loads(json.dumps(SAMPLE_DOCUMENT))


@pytest.fixture
def sample_text():
    return json.dumps(SAMPLE_DOCUMENT)


@pytest.fixture
def config(tmp_path):
    return AppConfig(online_url="https://example.invalid/db.txt", local_path=tmp_path / "MasterToolDatabase.txt")


@pytest.fixture
def local_db(config, sample_text):
    config.local_path.write_text(sample_text, encoding="utf-8")
    return config.local_path


class StubLoader:
    """Loader stand-in returning prepared results per source and counting calls."""

    def __init__(self, results=None):
        self.results = results or {}
        self.calls = []

    def __call__(self, source):
        self.calls.append(source)
        items = self.results.get(source, [])
        status = LoadStatus.LOADED if items else LoadStatus.EMPTY
        return LoadResult(source, status, list(items), None if items else "unavailable")


@pytest.fixture
def sample_items(sample_text):
    from essai_cp.loader import parse_items
    return parse_items(sample_text)


@pytest.fixture
def stub_loader(sample_items):
    return StubLoader({DBSource.ONLINE: sample_items})
