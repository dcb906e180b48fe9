"""Path queries over a decoded game.

A query is a chain of segments: `name` selects a field of a record, `[n]` selects an element of a sequence (negative
indices count from the end), and `[]` applies the rest of the query to every element of a sequence::

    frames[-1].ports[].leader.post.state

The model is viewed through small wrapper nodes, created only for the values a query actually walks through.
"""
from __future__ import annotations

import re
from typing import Any, NamedTuple

from .layout import Field, Record
from .util import Base


class QueryError(Exception):
    def __init__(self, message: str, path: str, segment: str):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.segment = segment


class QuerySyntaxError(QueryError):
    pass


class NoSuchField(QueryError):
    pass


class IndexOutOfRange(QueryError):
    pass


class NotASequence(QueryError):
    pass


# ---------------------------------------------------------------------------- #
#                                    Nodes                                     #
# ---------------------------------------------------------------------------- #


class Node(Base):
    """A value from the model, plus what its owner declares about it: a label category, and for records and
    sequences of records, the record type."""

    __slots__ = "value", "label", "record"

    def __init__(self, value, label: str | None = None, record: type | None = None):
        self.value = value
        self.label = label
        self.record = record

    def __repr__(self):
        return f"{self.__class__.__name__}({self.value!r})"


class ScalarNode(Node):
    __slots__ = ()


class AbsentNode(Node):
    """A value that wasn't recorded. Queries can still walk through it, as far as its declared type allows."""

    __slots__ = ()

    def __init__(self, label: str | None = None, record: type | None = None):
        super().__init__(None, label, record)


class RecordNode(Node):
    __slots__ = ()

    def names(self) -> tuple[str, ...]:
        value = self.value
        if isinstance(value, dict):
            return tuple(str(k) for k in value)
        return value._names

    def field(self, name: str) -> Node:
        """Raises KeyError if the record has no such field."""
        value = self.value
        if isinstance(value, dict):
            for key in value:
                if str(key) == name:
                    return wrap(value[key])
            raise KeyError(name)
        if name not in value._names:
            raise KeyError(name)
        declared = declared_field(type(value), name)
        if declared is None:
            return wrap(getattr(value, name))
        return wrap(getattr(value, name), declared.label, declared.record)


class SequenceNode(Node):
    __slots__ = ()

    def __len__(self):
        return len(self.value)

    def item(self, index: int) -> Node:
        """Raises IndexError if `index` is out of range. Negative indices count from the end."""
        if index < -len(self.value) or index >= len(self.value):
            raise IndexError(index)
        return wrap(self.value[index], self.label, self.record)

    def items(self):
        for value in self.value:
            yield wrap(value, self.label, self.record)


def declared_field(record: type | None, name: str) -> Field | None:
    for f in getattr(record, "_fields", ()):
        if f.name == name:
            return f
    return None


def wrap(value, label: str | None = None, record: type | None = None) -> Node:
    """Views a model value as a node."""
    if value is None:
        return AbsentNode(label, record)
    if isinstance(value, (Record, dict)) or hasattr(value, "_names"):
        return RecordNode(value, label, record)
    if isinstance(value, (tuple, list)):
        return SequenceNode(value, label, record)
    return ScalarNode(value, label, record)


# ---------------------------------------------------------------------------- #
#                                   Parsing                                    #
# ---------------------------------------------------------------------------- #


class Segment(NamedTuple):
    kind: str  # "field", "index" or "each"
    key: str | int | None
    text: str


_NAME = re.compile(r"[A-Za-z0-9_]+")
_INDEX = re.compile(r"\[\s*(-?\d+)?\s*\]")


def parse_path(path: str) -> tuple[Segment, ...]:
    segments = []
    pos = 0
    while pos < len(path):
        start = pos
        if path[pos] == "[":
            match = _INDEX.match(path, pos)
            if match is None:
                raise QuerySyntaxError("expected an index or `[]`", path[: pos + 1], path[pos:])
            index = match.group(1)
            if index is None:
                segments.append(Segment("each", None, match.group()))
            else:
                segments.append(Segment("index", int(index), match.group()))
        else:
            if segments:
                if path[pos] != ".":
                    raise QuerySyntaxError(f"unexpected {path[pos]!r}", path[: pos + 1], path[pos:])
                pos += 1
            match = _NAME.match(path, pos)
            if match is None:
                raise QuerySyntaxError("expected a field name", path[: pos + 1], path[start:])
            segments.append(Segment("field", match.group(), path[start : match.end()]))
        pos = match.end()

    if not segments:
        raise QuerySyntaxError("empty query", path, path)
    return tuple(segments)


# ---------------------------------------------------------------------------- #
#                                  Evaluation                                  #
# ---------------------------------------------------------------------------- #


def _evaluate(node: Node, segments: tuple[Segment, ...], i: int, prefix: str):
    if i == len(segments):
        return None if isinstance(node, AbsentNode) else node

    segment = segments[i]
    path = prefix + segment.text

    if isinstance(node, AbsentNode):
        # nothing to walk, but the names still have to exist
        if segment.kind == "field":
            declared = declared_field(node.record, segment.key)
            if declared is None:
                raise NoSuchField(f"no field named {segment.key!r}", path, segment.text)
            node = AbsentNode(declared.label, declared.record)
        return _evaluate(node, segments, i + 1, path)

    match segment.kind:
        case "field":
            if not isinstance(node, RecordNode):
                raise NoSuchField(f"{type(node.value).__name__} value has no fields", path, segment.text)
            try:
                child = node.field(segment.key)
            except KeyError:
                raise NoSuchField(f"no field named {segment.key!r}", path, segment.text) from None
            return _evaluate(child, segments, i + 1, path)

        case "index":
            if not isinstance(node, SequenceNode):
                raise NotASequence(f"cannot index into {type(node.value).__name__}", path, segment.text)
            try:
                child = node.item(segment.key)
            except IndexError:
                raise IndexOutOfRange(
                    f"index {segment.key} out of range for sequence of length {len(node)}", path, segment.text
                ) from None
            return _evaluate(child, segments, i + 1, path)

        case "each":
            if not isinstance(node, SequenceNode):
                raise NotASequence(f"cannot iterate over {type(node.value).__name__}", path, segment.text)
            return [_evaluate(child, segments, i + 1, path) for child in node.items()]


def select(root, path: str):
    """Evaluates `path` against `root`.

    Returns a `Node` (or None for absent values), or for queries containing `[]`, a list of results mirroring the
    nesting of the wildcards. Raises a `QueryError` subclass if the path doesn't fit the data.
    """
    return _evaluate(wrap(root), parse_path(path), 0, "")


def unwrap(result) -> Any:
    """Strips the nodes from a `select` result, leaving the model's own values."""
    if isinstance(result, list):
        return [unwrap(r) for r in result]
    if isinstance(result, Node):
        return result.value
    return result


def query(root, path: str) -> Any:
    return unwrap(select(root, path))


def flatten(result):
    """Collapses single-element lists at every depth, for terse output."""
    if isinstance(result, list):
        items = [flatten(r) for r in result]
        return items[0] if len(items) == 1 else items
    return result
