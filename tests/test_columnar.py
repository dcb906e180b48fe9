from __future__ import annotations

import io

import polars as pl
import pytest

from slpinspect import Game
from slpinspect.columnar import frame_table, item_table, leaves, serialize, to_columnar
from slpinspect.enums import CSSCharacter, InGameCharacter
from slpinspect.event import Frame

from synth import ReplayWriter, make_item, make_start, metadata, simple_game

FOX = InGameCharacter.FOX


@pytest.fixture(scope="module")
def game() -> Game:
    return Game(simple_game(50))


def test_frame_columns(game) -> None:
    df = frame_table(game)

    assert df.height == 50
    assert df.columns[0] == "index"
    assert df["index"].dtype == pl.Int32
    assert df["index"].to_list() == [frame.index for frame in game.frames]

    assert "P1.leader.pre.state" in df.columns
    assert "P2.leader.post.position.x" in df.columns
    assert "P1.leader.pre.buttons.physical" in df.columns
    assert "start.random_seed" in df.columns
    assert df.columns[-1] == "end.latest_finalized_frame"
    assert not any(name.startswith(("P3.", "P4.")) for name in df.columns)
    assert not any(".follower." in name for name in df.columns)

    assert df["P1.leader.post.state"].dtype == pl.UInt16
    assert df["P1.leader.post.percent"].dtype == pl.Float32
    assert df["P1.leader.post.flags"].dtype == pl.UInt64
    assert df["P2.leader.post.character"].to_list() == [InGameCharacter.MARTH] * 50


def test_column_order_follows_ports_and_fields(game) -> None:
    columns = frame_table(game).columns
    p1 = [c for c in columns if c.startswith("P1.")]
    assert columns.index(p1[-1]) < columns.index("P2.leader.pre.random_seed")
    assert p1[:3] == ["P1.leader.pre.random_seed", "P1.leader.pre.state", "P1.leader.pre.position.x"]


def test_version_gated_fields_are_left_out() -> None:
    version = (2, 0, 0)
    paths = [".".join(map(str, path)) for path, _ in leaves(Frame.Port.Data.Post, version)]
    assert "l_cancel" in paths
    assert "hurtbox_status" not in paths
    assert "self_air_speed.x" not in paths


def test_followers_and_missing_values_are_null() -> None:
    writer = ReplayWriter()
    writer.start(make_start(characters=(CSSCharacter.ICE_CLIMBERS, CSSCharacter.FOX)))
    popo, nana = InGameCharacter.POPO, InGameCharacter.NANA
    writer.frame(0, {0: (14, 14, popo), 1: (14, 14, FOX)}, followers={0: (14, 14, nana)})
    writer.frame(1, {0: (14, 14, popo), 1: (14, 14, FOX)})
    writer.frame(2, {0: (14, 14, popo), 1: (14, 14, FOX)}, followers={0: (14, 14, nana)})
    writer.end()
    df = frame_table(Game(writer.build(metadata(2))))

    assert df["P1.follower.post.character"].to_list() == [nana, None, nana]
    assert df["P1.follower.pre.position.x"].null_count() == 1
    assert "P2.follower.post.state" not in df.columns


def test_items_table() -> None:
    writer = ReplayWriter()
    writer.start()
    writer.frames(3, first=0)
    writer.frame(3, {0: (14, 14, FOX), 1: (14, 14, FOX)}, items=[make_item(0), make_item(1, owner=1)])
    writer.frame(4, {0: (14, 14, FOX), 1: (14, 14, FOX)}, items=[make_item(1, owner=1)])
    writer.end()
    df = item_table(Game(writer.build(metadata(4))))

    assert df.columns[:3] == ["index", "type", "state"]
    assert df["index"].to_list() == [3, 3, 4]
    assert df["spawn_id"].to_list() == [0, 1, 1]
    assert df["owner"].to_list() == [0, 1, 1]
    assert df["velocity.x"].to_list() == [1.5, 1.5, 1.5]


def test_no_items(game) -> None:
    df = item_table(game)
    assert df.height == 0
    assert "spawn_id" in df.columns


def test_output_is_byte_identical(game) -> None:
    assert to_columnar(game) == to_columnar(game)
    assert to_columnar(Game(simple_game(50))) == to_columnar(game)


def test_workers_do_not_change_output(game) -> None:
    assert frame_table(game, workers=4).columns == frame_table(game).columns
    assert to_columnar(game, workers=4) == to_columnar(game)


@pytest.mark.parametrize("compression", [None, "lz4", "zstd"])
def test_ipc_round_trip(game, compression) -> None:
    blobs = to_columnar(game, compression=compression)
    assert sorted(blobs) == ["frames.arrow", "items.arrow"]
    df = pl.read_ipc(io.BytesIO(blobs["frames.arrow"]))
    assert df.equals(frame_table(game))


def test_parquet(game) -> None:
    blobs = to_columnar(game, table_format="parquet", compression="zstd")
    assert sorted(blobs) == ["frames.parquet", "items.parquet"]
    df = pl.read_parquet(io.BytesIO(blobs["frames.parquet"]))
    assert df["P1.leader.post.state"].to_list() == [14] * 50


def test_bad_options(game) -> None:
    with pytest.raises(ValueError):
        serialize(frame_table(game), compression="gzip")
    with pytest.raises(ValueError):
        serialize(frame_table(game), table_format="csv")
