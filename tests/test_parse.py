from __future__ import annotations

import struct
from datetime import datetime, timezone

import pytest
import xxhash

from slpinspect import (
    Game,
    MalformedEvent,
    MalformedHeader,
    ParseError,
    TruncatedStream,
    UnknownEventCode,
)
from slpinspect.event import FIRST_FRAME_INDEX, EventType

from synth import ReplayWriter, metadata, simple_game


def test_simple_game() -> None:
    game = Game(simple_game(100))

    assert not game.partial
    assert game.errors == []
    assert len(game.frames) == 100
    assert game.frames[0].index == FIRST_FRAME_INDEX
    assert game.frames[-1].index == FIRST_FRAME_INDEX + 99
    assert [p.port for p in game.frames[0].ports] == [0, 1]
    assert game.end.method == 2
    assert game.metadata_raw["playedOn"] == "dolphin"


def test_read_from_path_and_file(tmp_path) -> None:
    path = tmp_path / "game.slp"
    path.write_bytes(simple_game(10))

    assert len(Game(path).frames) == 10
    assert len(Game(str(path)).frames) == 10
    with open(path, "rb") as f:
        assert len(Game(f).frames) == 10


def test_not_a_replay() -> None:
    with pytest.raises(MalformedHeader):
        Game(b"this is not a replay at all")


def test_empty_file(tmp_path) -> None:
    path = tmp_path / "empty.slp"
    path.write_bytes(b"")
    with pytest.raises(MalformedHeader) as info:
        Game(path)
    assert info.value.filename == str(path)


def test_bad_payload_size_table() -> None:
    data = b"{U\x03raw[$U#l" + struct.pack(">i", 4) + bytes([0x35, 3, 0x36, 0])
    with pytest.raises(MalformedHeader) as info:
        Game(data)
    assert "divisible by 3" in str(info.value)


def test_first_event_must_be_game_start() -> None:
    writer = ReplayWriter()
    writer.frames(1)
    with pytest.raises(MalformedHeader) as info:
        Game(writer.build())
    assert info.value.code == EventType.FRAME_START


def test_short_start_aborts() -> None:
    writer = ReplayWriter()
    writer.sizes[EventType.GAME_START] = 0x100
    writer.event(EventType.GAME_START, bytes([3, 16, 0, 0]) + b"\x00" * 0xFC)
    with pytest.raises(MalformedEvent) as info:
        Game(writer.build())
    assert info.value.code == EventType.GAME_START
    assert "too short" in str(info.value)


def test_truncated_stream_keeps_decoded_frames() -> None:
    writer = ReplayWriter()
    writer.start()
    writer.frames(600)
    writer.end()
    data = writer.build(metadata(FIRST_FRAME_INDEX + 599))

    # cut 10 bytes into the payload of the 501st frame's first event
    cut = writer.header_size() + writer.frame_offsets[FIRST_FRAME_INDEX + 500] + 1 + 10
    game = Game(data[:cut])

    assert len(game.frames) == 500
    assert game.frames[-1].index == FIRST_FRAME_INDEX + 499
    assert all(frame.is_complete for frame in game.frames)
    assert all(len(frame.ports) == 2 for frame in game.frames)
    assert game.partial
    assert game.end is None
    assert len(game.errors) == 1
    error = game.errors[0]
    assert isinstance(error, TruncatedStream)
    assert error.pos == writer.header_size() + writer.frame_offsets[FIRST_FRAME_INDEX + 500]
    assert error.code == EventType.FRAME_START


def test_truncated_stream_strict() -> None:
    writer = ReplayWriter()
    writer.start()
    writer.frames(50)
    data = writer.build()
    cut = writer.header_size() + writer.frame_offsets[FIRST_FRAME_INDEX + 30] + 5
    with pytest.raises(TruncatedStream) as info:
        Game(data[:cut], strict=True)
    assert info.value.game.partial
    assert len(info.value.game.frames) > 0


def test_in_progress_replay() -> None:
    writer = ReplayWriter()
    writer.start()
    writer.frames(20)
    game = Game(writer.build(declare_length=False, closed=False))

    assert len(game.frames) == 20
    assert game.errors == []
    assert game.end is None
    assert game.partial
    assert game.metadata_raw is None


def test_undeclared_length_with_end_and_metadata() -> None:
    writer = ReplayWriter()
    writer.start()
    writer.frames(20)
    writer.end()
    game = Game(writer.build(metadata(FIRST_FRAME_INDEX + 19), declare_length=False))

    assert not game.partial
    assert game.metadata_raw["lastFrame"] == FIRST_FRAME_INDEX + 19


def test_unknown_code_in_size_table_is_skipped() -> None:
    writer = ReplayWriter()
    writer.sizes[0x50] = 3
    writer.start()
    writer.frames(2)
    writer.event(0x50, b"\x01\x02\x03")
    writer.event(EventType.GECKO_LIST, b"")
    writer.frames(2, first=FIRST_FRAME_INDEX + 2)
    writer.end()
    writer.sizes[EventType.GECKO_LIST] = 0
    game = Game(writer.build(metadata(FIRST_FRAME_INDEX + 3)))

    assert game.errors == []
    assert len(game.frames) == 4


def test_code_missing_from_size_table_stops_decoding() -> None:
    writer = ReplayWriter()
    writer.start()
    writer.frames(5)
    offset = writer.size
    writer.event(0x50, b"\x01\x02\x03")
    writer.frames(5, first=FIRST_FRAME_INDEX + 5)
    writer.end()
    game = Game(writer.build(metadata(FIRST_FRAME_INDEX + 9)))

    assert len(game.frames) == 5
    assert game.partial
    (error,) = game.errors
    assert isinstance(error, UnknownEventCode)
    assert error.code == 0x50
    assert error.pos == writer.header_size() + offset
    # the declared length lets the metadata be found anyway
    assert game.metadata_raw is not None

    with pytest.raises(UnknownEventCode):
        Game(writer.build(), strict=True)


def test_short_frame_event_is_skipped() -> None:
    writer = ReplayWriter()
    writer.sizes[EventType.ITEM] = 8
    writer.start()
    writer.frames(3)
    writer.event(EventType.ITEM, struct.pack(">i", FIRST_FRAME_INDEX + 2) + b"\x00" * 4)
    writer.end()
    game = Game(writer.build(metadata(FIRST_FRAME_INDEX + 2)))

    assert len(game.frames) == 3
    assert game.frames[-1].items == ()
    assert not game.partial
    (error,) = game.errors
    assert isinstance(error, MalformedEvent)
    assert error.code == EventType.ITEM


def test_skip_frames() -> None:
    game = Game(simple_game(100), skip_frames=True)

    assert game.frames == ()
    assert game.start is not None
    assert game.end is not None
    assert game.metadata.duration == 100


def test_metadata() -> None:
    game = Game(simple_game(100))
    meta = game.metadata

    assert meta.date == datetime(2023, 1, 12, 0, 43, 55, tzinfo=timezone.utc)
    assert meta.first_frame == FIRST_FRAME_INDEX
    assert meta.last_frame == FIRST_FRAME_INDEX + 99
    assert meta.duration == 100
    assert meta.platform is meta.Platform.DOLPHIN
    assert meta.console_name == "Test Console"
    assert [p.connect_code for p in meta.players] == ["TEST#1", "TEST#2"]
    assert [p.display_name for p in meta.players] == ["Netplay 1", "Netplay 2"]


def test_metadata_falls_back_to_start() -> None:
    writer = ReplayWriter()
    writer.start()
    writer.frames(3)
    writer.end()
    game = Game(writer.build({"lastFrame": FIRST_FRAME_INDEX + 2}))

    assert game.metadata.date is None
    assert game.metadata.platform is None
    assert [p.connect_code for p in game.metadata.players] == ["PLYR#1", "PLYR#2"]


def test_parse_error_str() -> None:
    error = ParseError("boom", filename="game.slp", pos=12, code=0x37)
    assert str(error) == "Parse error (game.slp 12 event 0x37): boom"


def test_parse_error_str_without_location() -> None:
    assert str(ParseError("boom")) == "Parse error (? ?): boom"
    assert str(MalformedEvent("too short", pos=3)) == "Parse error (? 3): too short"


def test_hash_and_payload_sizes() -> None:
    data = simple_game(10)
    game = Game(data)

    assert game.hash == "xxh3:" + xxhash.xxh3_64_hexdigest(data)
    assert len(game.hash) == len("xxh3:") + 16
    assert game.hash == Game(data, skip_frames=True).hash
    assert game.hash != Game(simple_game(11)).hash
    assert game.payload_sizes == ReplayWriter().sizes
