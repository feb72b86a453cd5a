import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest


ROOT = Path(__file__).resolve().parents[1]

# Prepend the workspace root for deterministic imports when the package isn't installed
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from dashgraph.config.settings import clear_settings_cache  # noqa: E402


class FakeDataset:
    """
    In-memory stand-in for the dimensional dataset.

    ``rows`` is what ``breakdown`` returns; every call is recorded so tests can
    check which dimension was measured and which breakdown was requested.
    """

    def __init__(self, rows: List[Dict[str, Any]]):
        self.rows = rows
        self.calls: List[tuple] = []

    def measure(self, dimension: str) -> None:
        self.calls.append(("measure", dimension))

    def breakdown(self, value_field: str, breakdown_dimension: Optional[str] = None) -> List[Dict[str, Any]]:
        self.calls.append(("breakdown", value_field, breakdown_dimension))
        return self.rows


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate every test from DASHGRAPH_* variables and cached settings"""
    for name in list(os.environ):
        if name.startswith("DASHGRAPH_"):
            monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def make_dataset():
    """Factory for FakeDataset instances"""
    return FakeDataset


@pytest.fixture
def month_of():
    """Deterministic bucketing for tests: 'm<timestamp>'"""
    return lambda ts: f"m{ts}"


@pytest.fixture
def region_breakdown() -> Dict[str, Any]:
    return {
        "name": "Region",
        "breakdownName": "region",
        "values": [
            {"name": "Europe", "key": "eu", "on": True},
            {"name": "Americas", "key": "am", "on": True},
            {"name": "Asia", "key": "as", "on": True},
        ],
    }
