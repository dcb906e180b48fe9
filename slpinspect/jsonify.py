"""Renders the replay model (or query results over it) as JSON.

Records render as objects in field declaration order, absent values as null. With `names`, values whose field
declares a label category render as "<code>:<LABEL>" strings; the model itself is never changed.
"""
from __future__ import annotations

import enum
import json
from datetime import datetime

from .labels import annotate
from .layout import Record
from .query import Node

__all__ = ["plain", "to_json", "dump_game", "dumps"]


def plain(value, names: bool = False, label: str | None = None):
    """Converts a model value into JSON-compatible python objects."""
    if value is None or isinstance(value, (bool, str)):
        return value

    if isinstance(value, Node):
        return plain(value.value, names, value.label)

    if isinstance(value, int):
        if names and label is not None:
            return annotate(label, value)
        return int(value)

    if isinstance(value, float):
        return value

    if isinstance(value, Record):
        return {name: plain(getattr(value, name), names, value._field(name).label) for name in value._names}

    if isinstance(value, (tuple, list)):
        return [plain(v, names, label) for v in value]

    if isinstance(value, dict):
        # a label on a mapping applies to its keys, e.g. the character histogram
        return {
            str(annotate(label, k) if names and label is not None else k): plain(v, names) for k, v in value.items()
        }

    if isinstance(value, enum.Enum):
        return value.name

    if isinstance(value, datetime):
        return value.isoformat()

    if isinstance(value, (bytes, bytearray)):
        return value.hex()

    if hasattr(value, "_names"):
        return {name: plain(getattr(value, name), names) for name in value._names}

    raise TypeError(f"cannot render {type(value).__name__} as JSON")


def dumps(obj, indent: int | None = None) -> str:
    return json.dumps(obj, indent=indent, ensure_ascii=False)


def to_json(value, names: bool = False, indent: int | None = None) -> str:
    return dumps(plain(value, names), indent)


def dump_game(game, frames: bool = True, names: bool = False) -> dict:
    """The whole game as JSON-compatible objects: the file `hash`, `start`, `end`, `metadata` and, optionally, `frames`."""
    out = {
        "hash": game.hash,
        "start": plain(game.start, names),
        "end": plain(game.end, names),
        "metadata": plain(game.metadata, names),
    }
    if frames:
        out["frames"] = plain(game.frames, names)
    return out
