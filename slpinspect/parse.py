from __future__ import annotations

import io
import mmap
import os
from pathlib import Path
from typing import BinaryIO, Protocol

import ubjson
import xxhash

from . import util
from .event import EVENT_DECODERS, IGNORED_EVENTS, Event, EventType, decode_event
from .log import log
from .util import Cursor

RAW_PREFIX = b"{U\x03raw[$U#l"
METADATA_KEY = b"U\x08metadata"


class ParseError(IOError):
    def __init__(self, message, filename=None, pos=None, code=None):
        super().__init__(message)
        self.message = message
        self.filename = filename
        self.pos = pos
        self.code = code

    def __str__(self):
        where = f"{self.filename or '?'} {self.pos if self.pos is not None else '?'}"
        if self.code is not None:
            where += f" event 0x{self.code:02x}"
        return f"Parse error ({where}): {self.message}"


class MalformedHeader(ParseError):
    """The file is not a recognizable replay."""


class MalformedEvent(ParseError):
    """An event payload is too short for the layout its replay version requires."""


class UnknownEventCode(ParseError):
    """An event code that the payload size table doesn't declare, so the stream can't be resynchronized."""


class TruncatedStream(ParseError):
    """The data ends in the middle of an event."""


class Handler(Protocol):
    """Receives everything the reader decodes, in stream order."""

    def add(self, event: Event) -> None: ...

    def error(self, error: ParseError) -> None: ...

    def metadata(self, raw: dict) -> None: ...

    def payload_sizes(self, sizes: dict[int, int]) -> None: ...

    def hash(self, digest: str) -> None: ...


def _parse_event_payloads(cursor: Cursor) -> dict[int, int]:
    pos = cursor.pos
    code = cursor.uint8()
    if code != EventType.EVENT_PAYLOADS:
        raise MalformedHeader(f"expected event payloads (0x35), but got 0x{code:02x}", pos=pos, code=code)

    this_size = cursor.uint8() - 1  # includes size byte for some reason
    command_count = this_size // 3
    if this_size < 0 or command_count * 3 != this_size:
        raise MalformedHeader(f"payload size not divisible by 3: {this_size}", pos=pos, code=code)

    sizes = {}
    for _ in range(command_count):
        code = cursor.uint8()
        sizes[code] = cursor.uint16()
        try:
            EventType(code)
        except ValueError:
            log.info("ignoring unknown event type: 0x%02x" % code)

    log.debug(f"event payload sizes: {sizes}")
    return sizes


def _parse_events(cursor: Cursor, sizes: dict[int, int], raw_length: int, handler: Handler, skip_frames: bool):
    # `raw_length` will be zero for in-progress replays, in which case we read until Game End or the end of the data
    end = cursor.end if raw_length == 0 else min(cursor.pos + raw_length, cursor.end)
    declared_end = cursor.pos + raw_length
    version = None

    while cursor.pos < end:
        pos = cursor.pos
        code = cursor.uint8()

        try:
            size = sizes[code]
        except KeyError:
            error = UnknownEventCode(f"event code 0x{code:02x} is not in the payload size table", pos=pos, code=code)
            if version is None:
                raise error from None
            handler.error(error)
            if raw_length == 0:
                # nothing to resynchronize on
                cursor.pos = cursor.end
            break

        if cursor.remaining < size or pos + 1 + size > end:
            handler.error(
                TruncatedStream(
                    f"wanted {size} bytes of payload, {min(cursor.remaining, end - pos - 1)} available",
                    pos=pos,
                    code=code,
                )
            )
            cursor.pos = cursor.end
            return

        payload = cursor.read(size)

        if code not in EVENT_DECODERS and code not in IGNORED_EVENTS:
            log.info("skipping unknown event type: 0x%02x" % code)
            continue

        if version is None and code != EventType.GAME_START and code not in IGNORED_EVENTS:
            raise MalformedHeader(f"expected Game Start, but got 0x{code:02x}", pos=pos, code=code)

        try:
            event = decode_event(code, payload, version)
        except util.EOFError as exc:
            error = MalformedEvent(
                f"{EventType(code).name} payload of {size} bytes is too short for version "
                f"{'.'.join(map(str, version or ()))}",
                pos=pos + 1 + (exc.pos or 0),
                code=code,
            )
            if code == EventType.GAME_START:
                raise error from exc
            log.warning(str(error))
            handler.error(error)
            continue

        if event is None:
            continue

        handler.add(event)

        match event.type:
            case EventType.GAME_START:
                version = event.data.version
                end_size = sizes.get(EventType.GAME_END)
                if skip_frames and raw_length != 0 and end_size is not None:
                    skip = declared_end - end_size - 1
                    if cursor.pos < skip <= end:
                        log.debug(f"skipping frame events: {cursor.pos} -> {skip}")
                        cursor.pos = skip
            case EventType.GAME_END:
                break

    # Events may trail Game End (e.g. message splitters), and the metadata block comes after all of them.
    if raw_length != 0:
        cursor.pos = max(cursor.pos, min(declared_end, cursor.end))


def _parse_metadata(cursor: Cursor, handler: Handler):
    if cursor.remaining < len(METADATA_KEY):
        log.info("no metadata block, replay may still have been in progress")
        return

    pos = cursor.pos
    try:
        cursor.expect(METADATA_KEY)
        # For efficiency the event stream doesn't go through ubjson, but the metadata is a normal ubjson object.
        stream = io.BytesIO(bytes(cursor.buf[cursor.pos : cursor.end]))
        json = ubjson.load(stream)
        cursor.pos += stream.tell()
        cursor.expect(b"}")
    except (AssertionError, ubjson.DecoderException, util.EOFError) as exc:
        error = ParseError(f"malformed metadata block: {exc}", pos=pos)
        log.warning(str(error))
        handler.error(error)
        return

    handler.metadata(json)


def _parse(cursor: Cursor, handler: Handler, skip_frames: bool):
    # For efficiency, don't send the whole file through ubjson.
    # Instead, assume `raw` is the first element. This is brittle and
    # ugly, but it's what the official parser does so it should be OK.
    try:
        cursor.expect(RAW_PREFIX)
        raw_length = cursor.int32()
        start = cursor.pos
        sizes = _parse_event_payloads(cursor)
    except (AssertionError, util.EOFError) as exc:
        raise MalformedHeader(f"not a replay: {exc}", pos=cursor.pos) from exc

    handler.payload_sizes(sizes)

    if raw_length != 0:
        raw_length -= cursor.pos - start

    _parse_events(cursor, sizes, raw_length, handler, skip_frames)

    if cursor.remaining:
        _parse_metadata(cursor, handler)


def digest(buf) -> str:
    """Hash of a whole replay file, in the "xxh3:<hex>" form other Slippi tools print."""
    return "xxh3:" + xxhash.xxh3_64_hexdigest(buf)


def _parse_try(buf, handler: Handler, skip_frames: bool, filename=None):
    """Wrap parsing exceptions with additional information."""
    handler.hash(digest(buf))
    cursor = Cursor(buf)
    try:
        _parse(cursor, handler, skip_frames)
    except ParseError as exc:
        exc.filename = exc.filename or filename
        raise
    except Exception as exc:
        raise ParseError(str(exc), filename, cursor.pos) from exc


def _parse_open(source: os.PathLike, handler: Handler, skip_frames: bool):
    with open(source, "rb") as f:
        if os.fstat(f.fileno()).st_size == 0:
            raise MalformedHeader("empty file", filename=str(source), pos=0)
        with mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ) as buf:
            _parse_try(buf, handler, skip_frames, str(source))


def parse(source: BinaryIO | bytes | str | os.PathLike, handler: Handler, skip_frames: bool = False) -> None:
    """Parse a Slippi replay.

    :param source: replay file object, path, or the replay's bytes
    :param handler: receives each decoded event, each recovered error, and the metadata block
    :param skip_frames: when true, jump past all frame data. Only possible when the replay declares its length.
    """
    if isinstance(source, str):
        _parse_open(Path(source), handler, skip_frames)
    elif isinstance(source, os.PathLike):
        _parse_open(source, handler, skip_frames)
    elif isinstance(source, (bytes, bytearray, memoryview)):
        _parse_try(source, handler, skip_frames)
    else:
        _parse_try(source.read(), handler, skip_frames, getattr(source, "name", None))
