"""Destinations for the files a converted replay is made of."""
from __future__ import annotations

import io
import os
import tarfile
from pathlib import Path

from .columnar import to_columnar
from .game import Game
from .jsonify import dump_game, dumps
from .log import log


class Archive:
    """Receives named blobs, then is finalized exactly once."""

    def add_blob(self, name: str, data: bytes):
        raise NotImplementedError

    def finalize(self):
        pass

    def abort(self):
        """Releases the destination without completing it."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.finalize()
        else:
            self.abort()


class DirectoryArchive(Archive):
    """Writes each blob to its own file under `path`."""

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)
        self.path.mkdir(parents=True, exist_ok=True)

    def add_blob(self, name: str, data: bytes):
        target = self.path / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        log.debug(f"wrote {target} ({len(data)} bytes)")


class TarArchive(Archive):
    """Writes blobs into a single tar file. Member metadata is fixed, so identical blobs give identical archives."""

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)
        self._tar = tarfile.open(self.path, "w", format=tarfile.PAX_FORMAT)

    def add_blob(self, name: str, data: bytes):
        info = tarfile.TarInfo(name)
        info.size = len(data)
        info.mtime = 0
        info.mode = 0o644
        info.uid = info.gid = 0
        info.uname = info.gname = ""
        self._tar.addfile(info, io.BytesIO(data))

    def finalize(self):
        self._tar.close()
        log.debug(f"wrote {self.path}")

    def abort(self):
        self._tar.close()
        log.warning(f"left {self.path} incomplete")


def write_archive(
    game: Game,
    archive: Archive,
    table_format: str = "ipc",
    compression: str | None = None,
    workers: int | None = None,
    names: bool = False,
):
    """Hands every part of a converted game to `archive`: JSON side files, the raw start/end payloads, and the frame
    and item tables. Does not finalize the archive."""
    json = dump_game(game, frames=False, names=names)
    for part in ("start", "end"):
        archive.add_blob(f"{part}.json", dumps(json[part]).encode())
        record = getattr(game, part)
        archive.add_blob(f"{part}.raw", record.raw if record is not None and record.raw is not None else b"")
    archive.add_blob("metadata.json", dumps(json["metadata"]).encode())

    for name, data in to_columnar(game, table_format, compression, workers).items():
        archive.add_blob(name, data)
