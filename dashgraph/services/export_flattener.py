"""
Export Flattener - nested chart points -> flat key/value rows for CSV export

{"month": "2024-01", "total": {"a": 1, "b": 2}}
    -> {"month": "2024-01", "total.a": 1, "total.b": 2}

Two key schemes:
- "path": keys carry the full dotted path ({"a": {"b": {"c": 1}}} -> "a.b.c")
- "parent": keys carry only the immediate parent ({"a": {"b": {"c": 1}}} -> "b.c").
  Kept for consumers of the older export format; it can collide on deep nesting.
"""

import copy
from typing import Any, Dict, List, Mapping, Optional, Sequence

FLATTEN_PATH = "path"
FLATTEN_PARENT = "parent"
SEPARATOR = "."


def _flatten_path(obj: Mapping[str, Any], prefix: Optional[str], out: Dict[str, Any]) -> None:
    for key, value in obj.items():
        name = f"{prefix}{SEPARATOR}{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            _flatten_path(value, name, out)
        else:
            out[name] = value


def _flatten_parent(obj: Mapping[str, Any], parent: Optional[str], out: Dict[str, Any]) -> None:
    for key, value in obj.items():
        if isinstance(value, Mapping):
            _flatten_parent(value, str(key), out)
        else:
            out[f"{parent}{SEPARATOR}{key}" if parent else str(key)] = value


def flatten(record: Mapping[str, Any], mode: str = FLATTEN_PATH) -> Dict[str, Any]:
    """
    Flatten one nested record.

    Only mappings are descended into; lists, None and scalars are leaf values.

    Raises:
        ValueError: unknown mode
    """
    out: Dict[str, Any] = {}
    if mode == FLATTEN_PATH:
        _flatten_path(record, None, out)
    elif mode == FLATTEN_PARENT:
        _flatten_parent(record, None, out)
    else:
        raise ValueError(f"Unknown flatten mode: {mode}")
    return out


def flatten_records(records: Sequence[Mapping[str, Any]], mode: str = FLATTEN_PATH) -> List[Dict[str, Any]]:
    """Deep-copy ``records`` and flatten each one"""
    return [flatten(record, mode) for record in copy.deepcopy(list(records))]
