from __future__ import annotations

import json
import tarfile

import pytest

from slpinspect import Game
from slpinspect.archive import Archive, DirectoryArchive, TarArchive, write_archive

from synth import ReplayWriter, simple_game

EXPECTED = [
    "end.json",
    "end.raw",
    "frames.arrow",
    "items.arrow",
    "metadata.json",
    "start.json",
    "start.raw",
]


class MemoryArchive(Archive):
    def __init__(self):
        self.blobs = {}
        self.finalized = False

    def add_blob(self, name, data):
        self.blobs[name] = data

    def finalize(self):
        self.finalized = True


def test_write_archive_blobs() -> None:
    game = Game(simple_game(10))
    with MemoryArchive() as archive:
        write_archive(game, archive)

    assert archive.finalized
    assert sorted(archive.blobs) == EXPECTED
    assert archive.blobs["start.raw"] == game.start.raw
    assert archive.blobs["end.raw"] == game.end.raw
    assert json.loads(archive.blobs["start.json"])["stage"] == 31
    assert json.loads(archive.blobs["metadata.json"])["duration"] == 10


def test_archive_not_finalized_on_error() -> None:
    archive = MemoryArchive()
    try:
        with archive:
            raise RuntimeError
    except RuntimeError:
        pass
    assert not archive.finalized


def test_missing_end_gives_empty_blobs() -> None:
    writer = ReplayWriter()
    writer.start()
    writer.frames(3)
    with MemoryArchive() as archive:
        write_archive(Game(writer.build()), archive, names=True)

    assert archive.blobs["end.raw"] == b""
    assert json.loads(archive.blobs["end.json"]) is None
    assert json.loads(archive.blobs["start.json"])["stage"] == "31:BATTLEFIELD"


def test_directory_archive(tmp_path) -> None:
    game = Game(simple_game(10))
    with DirectoryArchive(tmp_path / "out") as archive:
        write_archive(game, archive, table_format="parquet")

    names = sorted(p.name for p in (tmp_path / "out").iterdir())
    assert names == sorted(n.replace(".arrow", ".parquet") for n in EXPECTED)
    assert (tmp_path / "out" / "start.raw").read_bytes() == game.start.raw


def test_tar_archive_is_reproducible(tmp_path) -> None:
    data = simple_game(10)
    for name in ("a.tar", "b.tar"):
        with TarArchive(tmp_path / name) as archive:
            write_archive(Game(data), archive, compression="zstd")

    assert (tmp_path / "a.tar").read_bytes() == (tmp_path / "b.tar").read_bytes()
    with tarfile.open(tmp_path / "a.tar") as tar:
        assert sorted(tar.getnames()) == EXPECTED
        assert all(member.mtime == 0 for member in tar.getmembers())


def test_tar_archive_is_closed_on_error(tmp_path) -> None:
    archive = TarArchive(tmp_path / "a.tar")
    with pytest.raises(RuntimeError):
        with archive:
            archive.add_blob("start.raw", b"\x00")
            raise RuntimeError
    assert archive._tar.closed
