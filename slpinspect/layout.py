"""Field tables shared by every versioned record.

A record declares its wire layout as an ordered tuple of `Field`s. The same table is used to decode a payload, to
encode a record back into bytes, to order JSON output, to find the label category of a value, and to derive the
columnar schema. Fields introduced after the stream's format version are never read; they are set to None.
"""
from __future__ import annotations

import struct
from functools import lru_cache
from typing import Any, Iterator

from .util import Base, Cursor, decode_string

VersionTuple = tuple[int, int, int]


class Field:
    """One entry of a record's layout.

    name: attribute name, None for padding
    codec: how the value is laid out, None for values that are derived rather than decoded
    since: format version that introduced the field
    label: label-table category used when annotating the value
    wire: False for fields that are filled in by the owning record rather than read from its own layout
    per_port: the field is read as part of this layout but belongs to the per-port player records, not to this one
    record: record type of the value (or of its elements, for sequences). Taken from the codec when there is one
    """

    __slots__ = "name", "codec", "since", "label", "wire", "per_port", "record"

    def __init__(
        self,
        name: str | None,
        codec: Codec | None = None,
        since: VersionTuple | None = None,
        label: str | None = None,
        wire: bool = True,
        per_port: bool = False,
        record: type[Record] | None = None,
    ):
        self.name = name
        self.codec = codec
        self.since = since
        self.label = label
        self.wire = wire and codec is not None
        self.per_port = per_port
        self.record = record if record is not None else _record_of(codec)

    def __repr__(self):
        return f"Field({self.name!r}, since={self.since})"


def _record_of(codec: Codec | None) -> type[Record] | None:
    while isinstance(codec, Array):
        codec = codec.codec
    return codec.record if isinstance(codec, Group) else None


def pad(size: int) -> Field:
    return Field(None, Pad(size))


# ---------------------------------------------------------------------------- #
#                                    Codecs                                    #
# ---------------------------------------------------------------------------- #


class Codec:
    fmt: str = ""

    def decode(self, values: Iterator) -> Any:
        raise NotImplementedError

    def encode(self, value, out: list):
        raise NotImplementedError

    def from_json(self, value):
        return value


class Prim(Codec):
    """A single big-endian scalar: B H I b h i f ?"""

    def __init__(self, fmt: str):
        self.fmt = fmt

    def decode(self, values):
        return next(values)

    def encode(self, value, out):
        out.append(value)


class Pad(Codec):
    def __init__(self, size: int):
        self.fmt = f"{size}x"

    def decode(self, values):
        return None

    def encode(self, value, out):
        pass


class Str(Codec):
    """Fixed-width, NUL-padded string."""

    def __init__(self, size: int, encoding: str = "utf-8"):
        self.fmt = f"{size}s"
        self.size = size
        self.encoding = encoding

    def decode(self, values):
        return decode_string(next(values), self.encoding)

    def encode(self, value, out):
        out.append((value or "").encode(self.encoding)[: self.size])


class BigInt(Codec):
    """Unsigned integer spread over an odd number of bytes (e.g. the 5 post-frame state bitfields)."""

    def __init__(self, size: int):
        self.fmt = f"{size}s"
        self.size = size

    def decode(self, values):
        return int.from_bytes(next(values), "big")

    def encode(self, value, out):
        out.append(value.to_bytes(self.size, "big"))


class OptionalPort(Codec):
    """Signed port byte where a negative value means "nobody"."""

    fmt = "b"

    def decode(self, values):
        value = next(values)
        return value if value >= 0 else None

    def encode(self, value, out):
        out.append(-1 if value is None else value)


class Group(Codec):
    """A nested record laid out inline."""

    def __init__(self, record: type[Record]):
        self.record = record
        self.fmt = "".join(f.codec.fmt for f in record._fields if f.wire)

    def decode(self, values):
        decoded = {}
        for f in self.record._fields:
            if f.wire:
                value = f.codec.decode(values)
                if f.name:
                    decoded[f.name] = value
        return self.record(**decoded)

    def encode(self, value, out):
        for f in self.record._fields:
            if f.wire:
                f.codec.encode(getattr(value, f.name) if f.name else None, out)

    def from_json(self, value):
        return None if value is None else self.record.from_json(value)


class Array(Codec):
    def __init__(self, codec: Codec, count: int):
        self.codec = codec
        self.count = count
        self.fmt = codec.fmt * count

    def decode(self, values):
        return tuple(self.codec.decode(values) for _ in range(self.count))

    def encode(self, value, out):
        for v in value:
            self.codec.encode(v, out)

    def from_json(self, value):
        return None if value is None else tuple(self.codec.from_json(v) for v in value)


# ---------------------------------------------------------------------------- #
#                                    Records                                   #
# ---------------------------------------------------------------------------- #


def names(fields: tuple[Field, ...]) -> tuple[str, ...]:
    """Attribute names of a field table, for use as `__slots__`."""
    return tuple(f.name for f in fields if f.name and not f.per_port)


def fields(*names: str, **labels: str) -> tuple[Field, ...]:
    """Field table for a record that is assembled rather than decoded."""
    return tuple(Field(name, label=labels.get(name)) for name in names)


def version_at_least(version: VersionTuple, since: VersionTuple | None) -> bool:
    return since is None or tuple(version) >= since


class Layout:
    """The part of a record's field table that is present at one format version, compiled into a single struct."""

    __slots__ = "fields", "absent", "struct"

    def __init__(self, record: type[Record], version: VersionTuple):
        present = []
        absent = []
        for f in record._fields:
            if not f.wire:
                continue
            if version_at_least(version, f.since):
                present.append(f)
            elif f.name:
                absent.append(f.name)
        self.fields = tuple(present)
        self.absent = tuple(absent)
        self.struct = struct.Struct(">" + "".join(f.codec.fmt for f in present))

    @property
    def size(self) -> int:
        return self.struct.size


@lru_cache(maxsize=128)
def layout(record: type[Record], version: VersionTuple) -> Layout:
    return Layout(record, version)


class Record(Base):
    """Base for values described by a field table.

    Subclasses set `_fields` and `__slots__ = names(_fields)`. Every field defaults to None, which is also how a
    version-gated field that the stream predates is represented.
    """

    __slots__ = ()
    _fields: tuple[Field, ...] = ()
    _names: tuple[str, ...] = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._names = names(cls._fields)

    def __init__(self, *args, **kwargs):
        if len(args) > len(self._names):
            raise TypeError(f"{self.__class__.__name__} takes at most {len(self._names)} values")
        for name, value in zip(self._names, args):
            setattr(self, name, value)
        for name in self._names[len(args) :]:
            setattr(self, name, kwargs.pop(name, None))
        if kwargs:
            raise TypeError(f"unexpected fields for {self.__class__.__name__}: {', '.join(kwargs)}")

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented
        return all(getattr(self, n) == getattr(other, n) for n in self._names)

    __hash__ = None

    @classmethod
    def _field(cls, name: str) -> Field:
        for f in cls._fields:
            if f.name == name:
                return f
        raise KeyError(name)

    @classmethod
    def _decode(cls, cursor: Cursor, version: VersionTuple):
        """Reads this record from `cursor`. Raises `util.EOFError` if the payload is too short for `version`."""
        lay = layout(cls, version)
        values = iter(cursor.unpack(lay.struct))
        decoded = {}
        for f in lay.fields:
            value = f.codec.decode(values)
            if f.name:
                decoded[f.name] = value
        for name in lay.absent:
            decoded[name] = None
        return cls._from_wire(decoded)

    @classmethod
    def _from_wire(cls, values: dict):
        return cls(**values)

    def _to_wire(self) -> dict:
        return {n: getattr(self, n) for n in self._names}

    def _encode(self, version: VersionTuple) -> bytes:
        """Packs this record with the layout of `version`. Inverse of `_decode`."""
        lay = layout(self.__class__, version)
        wire = self._to_wire()
        out: list = []
        for f in lay.fields:
            f.codec.encode(wire[f.name] if f.name else None, out)
        return lay.struct.pack(*out)

    @classmethod
    def from_json(cls, obj: dict):
        """Rebuilds a record from the plain (un-annotated) JSON rendering of one."""
        values = {}
        for f in cls._fields:
            if f.name and f.name in obj:
                values[f.name] = f.codec.from_json(obj[f.name]) if f.codec else obj[f.name]
        return cls._from_json(values)

    @classmethod
    def _from_json(cls, values: dict):
        return cls(**values)
