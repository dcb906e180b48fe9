from __future__ import annotations

from .layout import Field, Prim, Record, names


class Triggers(Record):
    """Physical analog trigger positions (useful for APM)"""

    _fields = (
        Field("l", Prim("f")),
        Field("r", Prim("f")),
    )
    __slots__ = names(_fields)


class Buttons(Record):
    """Processed (logical) and physical button-state bitmasks."""

    _fields = (
        Field("logical", Prim("I")),
        Field("physical", Prim("H")),
    )
    __slots__ = names(_fields)
