"""Writes a decoded game back out as a .slp replay.

Events are laid out the way the console sends them: for each frame, the frame start, every pre-frame update (leader
before follower, in port order), every post-frame update, the items, then the bookend. Events the model doesn't keep
(gecko codes, message splitters) are not written.
"""
from __future__ import annotations

import struct
import time

import ubjson

from .event import FRAME_HEADER, PORT_HEADER, End, EventType, Frame, Start
from .game import Game
from .jsonify import dump_game, dumps
from .layout import VersionTuple, layout
from .log import log
from .parse import METADATA_KEY, RAW_PREFIX

_SIZE_ENTRY = struct.Struct(">BH")
_LENGTH = struct.Struct(">i")


class RoundTripError(ValueError):
    """A written replay doesn't read back as the game it was written from."""


def payload_sizes(version: VersionTuple) -> dict[int, int]:
    """Payload sizes of the modelled events, as laid out at `version`."""
    return {
        EventType.GAME_START: layout(Start, version).size,
        EventType.FRAME_PRE: PORT_HEADER.size + layout(Frame.Port.Data.Pre, version).size,
        EventType.FRAME_POST: PORT_HEADER.size + layout(Frame.Port.Data.Post, version).size,
        EventType.GAME_END: layout(End, version).size,
        EventType.FRAME_START: FRAME_HEADER.size + layout(Frame.Start, version).size,
        EventType.ITEM: FRAME_HEADER.size + layout(Frame.Item, version).size,
        EventType.FRAME_END: FRAME_HEADER.size + layout(Frame.End, version).size,
    }


def _event(out: bytearray, sizes: dict[int, int], code: EventType, payload: bytes):
    try:
        size = sizes[code]
    except KeyError:
        raise ValueError(f"{code.name} is not in the payload size table") from None
    if len(payload) > size:
        raise ValueError(f"{code.name} payload is {len(payload)} bytes, but the size table allows {size}")
    out.append(code)
    out += payload
    # payloads from newer replay versions carry fields the layout doesn't know about
    out += bytes(size - len(payload))


def _frame(out: bytearray, sizes: dict[int, int], frame: Frame, version: VersionTuple):
    index = frame.index
    if frame.start is not None:
        _event(out, sizes, EventType.FRAME_START, FRAME_HEADER.pack(index) + frame.start._encode(version))

    for code, part in ((EventType.FRAME_PRE, "pre"), (EventType.FRAME_POST, "post")):
        for port in frame.ports:
            for is_follower, data in ((False, port.leader), (True, port.follower)):
                record = getattr(data, part) if data is not None else None
                if record is not None:
                    header = PORT_HEADER.pack(index, port.port, is_follower)
                    _event(out, sizes, code, header + record._encode(version))

    for item in frame.items:
        _event(out, sizes, EventType.ITEM, FRAME_HEADER.pack(index) + item._encode(version))

    if frame.end is not None:
        _event(out, sizes, EventType.FRAME_END, FRAME_HEADER.pack(index) + frame.end._encode(version))


def write_replay(game: Game) -> bytes:
    """Lays `game` out as a replay file.

    The payload size table is the one the game was read with, so Game Start and Game End are written back from their
    raw payloads unchanged. Raises ValueError if the game has no Game Start."""
    start = game.start
    if start is None:
        raise ValueError("can't write a replay without a Game Start")
    version = start.version
    sizes = dict(game.payload_sizes) or payload_sizes(version)

    events = bytearray()
    _event(events, sizes, EventType.GAME_START, start.raw if start.raw is not None else start._encode(version))
    for frame in game.frames:
        _frame(events, sizes, frame, version)
    if game.end is not None:
        end = game.end
        _event(events, sizes, EventType.GAME_END, end.raw if end.raw is not None else end._encode(version))

    table = b"".join(_SIZE_ENTRY.pack(code, size) for code, size in sizes.items())
    raw = bytes([EventType.EVENT_PAYLOADS, len(table) + 1]) + table + events

    out = bytearray(RAW_PREFIX)
    out += _LENGTH.pack(len(raw))
    out += raw
    if game.metadata_raw is not None:
        out += METADATA_KEY
        out += ubjson.dumpb(game.metadata_raw)
    out += b"}"
    return bytes(out)


def verify(game: Game, data: bytes):
    """Reads `data` back and checks that it holds the same game. Raises `RoundTripError` if it doesn't."""
    start = time.perf_counter()
    copy = Game(data)

    log.debug(f"original hash: {game.hash}")
    log.debug(f"round-trip hash: {copy.hash}")
    expected = dump_game(game)
    actual = dump_game(copy)
    del expected["hash"], actual["hash"]
    if dumps(expected) != dumps(actual):
        raise RoundTripError(f"round-trip verification error (hash: {game.hash})")
    log.info(f"Verified output in {(time.perf_counter() - start) * 1e6:.0f} μs")
