from __future__ import annotations

import os
from typing import BinaryIO

from .builder import ReplayBuilder
from .event import End, Frame, Start
from .layout import Field, names
from .metadata import Metadata, MetadataError
from .parse import ParseError, parse
from .util import Base


class Game(Base):
    """Replay data from a game of Super Smash Brothers Melee."""

    hash: str | None  #: "xxh3:<hex>" hash of the replay file
    start: Start | None  #: Information about the start of the game
    frames: tuple[Frame, ...]  #: Every frame of the game, in frame order
    end: End | None  #: Information about the end of the game. None if the replay ended before the game did
    metadata: Metadata | None  #: Derived data, including what little the recorder adds on its own
    metadata_raw: dict | None  #: Raw JSON metadata, for debugging and forward-compatibility
    payload_sizes: dict[int, int]  #: Payload size of each event code, as the replay declared them
    partial: bool  #: True if the replay was cut off or could not be read to the end
    errors: list[ParseError | MetadataError]  #: Problems that were recovered from while reading the replay

    _fields = (
        Field("hash"),
        Field("start", record=Start),
        Field("end", record=End),
        Field("metadata", record=Metadata),
        Field("frames", record=Frame),
    )
    _names = names(_fields)

    def __init__(self, source: BinaryIO | bytes | str | os.PathLike, skip_frames: bool = False, strict: bool = False):
        """Parse a Slippi replay.

        :param source: replay file object, path, or bytes
        :param skip_frames: jump past all frame data
        :param strict: raise the first recovered error instead of keeping it in `errors`. The partially built game
            is attached to the exception as `game`."""
        self.hash = None
        self.start = None
        self.frames = ()
        self.end = None
        self.metadata = None
        self.metadata_raw = None
        self.payload_sizes = {}
        self.partial = False
        self.errors = []

        builder = ReplayBuilder(self)
        parse(source, builder, skip_frames)
        builder.finish()

        if strict and self.errors:
            error = self.errors[0]
            error.game = self
            raise error

    def _attr_repr(self, attr):
        self_attr = getattr(self, attr)
        if isinstance(self_attr, tuple) and attr == "frames":
            return f"{attr}=(...)({len(self_attr)})"
        elif attr in ("metadata_raw", "payload_sizes"):
            return None
        else:
            return super()._attr_repr(attr)
