import enum
import re
import struct
from functools import lru_cache
from typing import Any

from .log import log


class Port(enum.IntEnum):
    NONE = -1
    P1 = 0
    P2 = 1
    P3 = 2
    P4 = 3


def _indent(s):
    return re.sub(r"^", "    ", s, flags=re.MULTILINE)


def _format_collection(coll, delim_open, delim_close):
    elements = [_format(x) for x in coll]
    if elements and "\n" in elements[0]:
        return delim_open + "\n" + ",\n".join(_indent(e) for e in elements) + delim_close
    else:
        return delim_open + ", ".join(elements) + delim_close


def _format(obj):
    if isinstance(obj, float):
        return "%.02f" % obj
    elif isinstance(obj, tuple):
        return _format_collection(obj, "(", ")")
    elif isinstance(obj, list):
        return _format_collection(obj, "[", "]")
    elif isinstance(obj, enum.Enum):
        return repr(obj)
    else:
        return str(obj)


class Base:
    __slots__ = ()

    def _attr_repr(self, attr):
        return attr + "=" + _format(getattr(self, attr))

    def __repr__(self):
        attrs = []
        for attr in dir(self):
            # uppercase names are nested classes
            if not callable(getattr(self, attr)) and not (attr.startswith("_") or attr[0].isupper()):
                s = self._attr_repr(attr)
                if s:
                    attrs.append(_indent(s))

        return "%s(\n%s)" % (self.__class__.__name__, ",\n".join(attrs))


class Enum(enum.Enum):
    def __repr__(self):
        return f"{self.value}:{self.name}"


class IntEnum(enum.IntEnum):
    def __repr__(self):
        return f"{self._value_}:{self._name_}"

    @classmethod
    def _missing_(cls, value):
        val_desc = f"0x{value:x}" if isinstance(value, int) else f"{value}"
        raise ValueError(f"{val_desc} is not a valid {cls.__name__}") from None


class EOFError(IOError):
    def __init__(self, pos: int | None = None, wanted: int | None = None):
        if pos is None:
            super().__init__("unexpected end of file")
        else:
            super().__init__(f"unexpected end of file (wanted {wanted} bytes at offset {pos})")
        self.pos = pos
        self.wanted = wanted


@lru_cache(maxsize=512)
def try_enum(enum_type, val) -> Enum | Any:
    """Attempts Enum(val). If the value is invalid, returns the given value."""
    try:
        return enum_type(val)
    except ValueError:
        log.info("unknown %s: %s" % (enum_type.__name__, val))
        return val


class Cursor:
    """Big-endian reader over an in-memory buffer.

    Every read advances `pos`. Reading past the end of the buffer raises `EOFError` and leaves `pos` untouched, so
    the caller can report the offset of the read that failed.
    """

    __slots__ = "buf", "pos", "end"

    def __init__(self, buf: bytes | bytearray | memoryview, pos: int = 0, end: int | None = None):
        self.buf = buf
        self.pos = pos
        self.end = len(buf) if end is None else end

    @property
    def remaining(self) -> int:
        return self.end - self.pos

    def _check(self, size: int):
        if self.pos + size > self.end:
            raise EOFError(self.pos, size)

    def unpack(self, fmt: struct.Struct) -> tuple:
        self._check(fmt.size)
        values = fmt.unpack_from(self.buf, self.pos)
        self.pos += fmt.size
        return values

    def uint8(self) -> int:
        return self.unpack(_UINT8)[0]

    def uint16(self) -> int:
        return self.unpack(_UINT16)[0]

    def int32(self) -> int:
        return self.unpack(_INT32)[0]

    def read(self, size: int) -> bytes:
        self._check(size)
        data = bytes(self.buf[self.pos : self.pos + size])
        self.pos += size
        return data

    def expect(self, expected: bytes):
        actual = self.read(len(expected))
        if actual != expected:
            raise AssertionError(f"expected {expected}, but got: {actual}")


_UINT8 = struct.Struct(">B")
_UINT16 = struct.Struct(">H")
_INT32 = struct.Struct(">i")


def decode_string(raw: bytes, encoding: str = "utf-8") -> str:
    """Decodes a fixed-width, NUL-terminated string field."""
    try:
        raw = raw[: raw.index(0)]
    except ValueError:
        pass
    return raw.decode(encoding, errors="replace").rstrip()

