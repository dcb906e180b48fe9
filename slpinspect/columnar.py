"""Column-oriented tables of a game's frame data.

The frames table has one row per frame: `index`, then for each occupied port (leader before follower) one column per
pre-frame and post-frame field, named like `P1.leader.post.position.x`, then the frame start and bookend fields. The
items table has one row per item per frame it appears on. Values that weren't recorded are nulls.

Column order only depends on the replay's version and which ports were occupied, so converting the same replay always
yields the same bytes.
"""
from __future__ import annotations

import io
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, NamedTuple

import polars as pl

from .enums import CSSCharacter
from .event import Frame
from .game import Game
from .layout import Array, BigInt, Codec, Group, OptionalPort, Prim, Record, Str, VersionTuple, layout
from .log import log

_PRIM_DTYPES = {
    "B": pl.UInt8,
    "H": pl.UInt16,
    "I": pl.UInt32,
    "b": pl.Int8,
    "h": pl.Int16,
    "i": pl.Int32,
    "f": pl.Float32,
    "?": pl.Boolean,
}

TABLE_FORMATS = {"ipc": "arrow", "parquet": "parquet"}
COMPRESSIONS = ("lz4", "zstd")


class Column(NamedTuple):
    name: str
    rows: int  # which entry of the row sources this column reads
    path: tuple[str | int, ...]
    dtype: type[pl.DataType]


def _dtype(codec: Codec):
    match codec:
        case Prim():
            return _PRIM_DTYPES[codec.fmt]
        case Str():
            return pl.Utf8
        case BigInt():
            return pl.UInt64
        case OptionalPort():
            return pl.Int8
        case _:
            raise TypeError(f"no column type for {codec!r}")


def _codec_leaves(codec: Codec, path: tuple):
    if isinstance(codec, Group):
        yield from leaves(codec.record, None, path)
    elif isinstance(codec, Array):
        for i in range(codec.count):
            yield from _codec_leaves(codec.codec, path + (i,))
    else:
        yield path, _dtype(codec)


def leaves(record: type[Record], version: VersionTuple | None, path: tuple = ()):
    """(path, dtype) for every scalar reachable from `record`'s fields, in declaration order.

    With `version`, fields that the version predates are left out."""
    if version is None:
        fields = [f for f in record._fields if f.wire]
    else:
        fields = layout(record, version).fields
    for f in fields:
        if f.name:
            yield from _codec_leaves(f.codec, path + (f.name,))


def _dig(value, path: tuple):
    for key in path:
        if value is None:
            return None
        value = value[key] if isinstance(key, int) else getattr(value, key)
    return value


def _slot_rows(frames: tuple[Frame, ...], port: int, slot: str, kind: str) -> list:
    rows = []
    for frame in frames:
        data = frame.port(port)
        data = getattr(data, slot) if data is not None else None
        rows.append(getattr(data, kind) if data is not None else None)
    return rows


def _frame_columns(game: Game) -> tuple[list[list], list[Column]]:
    """Row sources (one list of records per slot, each spanning all frames) and the columns read from them."""
    version = game.start.version
    frames = game.frames
    sources: list[list] = []
    columns: list[Column] = []

    def add(prefix: str, rows: list, record: type[Record]):
        sources.append(rows)
        for path, dtype in leaves(record, version):
            columns.append(Column(".".join([prefix, *map(str, path)]), len(sources) - 1, path, dtype))

    for player in game.start.players:
        port = player.port
        slots = ["leader"]
        # followers are only expected for ice climbers, but take them wherever they show up
        if player.character == CSSCharacter.ICE_CLIMBERS or any(
            (data := frame.port(port)) is not None and data.follower is not None for frame in frames
        ):
            slots.append("follower")
        for slot in slots:
            add(f"P{port + 1}.{slot}.pre", _slot_rows(frames, port, slot, "pre"), Frame.Port.Data.Pre)
            add(f"P{port + 1}.{slot}.post", _slot_rows(frames, port, slot, "post"), Frame.Port.Data.Post)

    add("start", [frame.start for frame in frames], Frame.Start)
    add("end", [frame.end for frame in frames], Frame.End)
    return sources, columns


def _materialize(sources: list[list], columns: list[Column], workers: int | None) -> list[pl.Series]:
    def build(column: Column) -> pl.Series:
        return pl.Series(column.name, [_dig(row, column.path) for row in sources[column.rows]], dtype=column.dtype)

    if workers is not None and workers > 1:
        # `map` yields in submission order, whatever order the columns finish in
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(build, columns))
    return [build(column) for column in columns]


def frame_table(game: Game, workers: int | None = None) -> pl.DataFrame:
    """One row per frame, one column per field per occupied port/character."""
    index = pl.Series("index", [frame.index for frame in game.frames], dtype=pl.Int32)
    if game.start is None:
        return pl.DataFrame([index])

    sources, columns = _frame_columns(game)
    log.debug(f"building {len(columns)} frame columns over {len(game.frames)} frames")
    return pl.DataFrame([index, *_materialize(sources, columns, workers)])


def item_table(game: Game, workers: int | None = None) -> pl.DataFrame:
    """One row per item appearance, keyed by the index of the frame it appeared on."""
    rows = [(frame.index, item) for frame in game.frames for item in frame.items]
    index = pl.Series("index", [i for i, _ in rows], dtype=pl.Int32)
    if game.start is None:
        return pl.DataFrame([index])

    items = [item for _, item in rows]
    columns = [
        Column(".".join(map(str, path)), 0, path, dtype) for path, dtype in leaves(Frame.Item, game.start.version)
    ]
    return pl.DataFrame([index, *_materialize([items], columns, workers)])


def serialize(df: pl.DataFrame, table_format: str = "ipc", compression: str | None = None) -> bytes:
    if compression is not None and compression not in COMPRESSIONS:
        raise ValueError(f"unsupported compression: {compression}")

    buf = io.BytesIO()
    match table_format:
        case "ipc":
            df.write_ipc(buf, compression=compression or "uncompressed")
        case "parquet":
            df.write_parquet(buf, compression=compression or "uncompressed")
        case _:
            raise ValueError(f"unsupported table format: {table_format}")
    return buf.getvalue()


def to_columnar(
    game: Game,
    table_format: str = "ipc",
    compression: str | None = None,
    workers: int | None = None,
) -> dict[str, bytes]:
    """Serialized frame and item tables, keyed by file name (e.g. `frames.arrow`)."""
    ext = TABLE_FORMATS[table_format]
    tables: dict[str, Callable[..., pl.DataFrame]] = {"frames": frame_table, "items": item_table}
    return {
        f"{name}.{ext}": serialize(build(game, workers), table_format, compression) for name, build in tables.items()
    }
