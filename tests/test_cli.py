from __future__ import annotations

import json

import pytest

from slpinspect import cli
from slpinspect.cli import main

from synth import simple_game


@pytest.fixture
def replay(tmp_path):
    path = tmp_path / "game.slp"
    path.write_bytes(simple_game(20))
    return str(path)


def test_json_output(replay, capsys) -> None:
    assert main([replay]) == 0
    out = json.loads(capsys.readouterr().out)
    assert list(out) == ["hash", "start", "end", "metadata", "frames"]
    assert out["hash"].startswith("xxh3:")
    assert len(out["frames"]) == 20


def test_short_json_output(replay, capsys) -> None:
    assert main(["-s", "-n", replay]) == 0
    out = json.loads(capsys.readouterr().out)
    assert "frames" not in out
    assert out["start"]["stage"] == "31:BATTLEFIELD"


def test_json_to_file(replay, tmp_path) -> None:
    outfile = tmp_path / "game.json"
    assert main(["-o", str(outfile), replay]) == 0
    assert json.loads(outfile.read_text())["end"]["method"] == 2


def test_queries(replay, capsys) -> None:
    path = "frames[-1].ports[].leader.post.state"
    assert main(["-q", path, "-q", "start.stage", replay]) == 0
    assert json.loads(capsys.readouterr().out) == {path: [14, 14], "start.stage": 31}


def test_quiet_queries(replay, capsys) -> None:
    args = ["--quiet", "-n", "-q", "frames[-1].ports[0].leader.post.state", "-q", "start.players[].port", replay]
    assert main(args) == 0
    lines = capsys.readouterr().out.splitlines()
    assert [json.loads(line) for line in lines] == ["14:WAIT", ["0:P1", "1:P2"]]


def test_failed_query_does_not_stop_the_others(replay, capsys) -> None:
    assert main(["-q", "frames[99999]", "-q", "start.stage", replay]) == 1
    captured = capsys.readouterr()
    assert json.loads(captured.out) == {"start.stage": 31}
    assert "frames[99999]" in captured.err


def test_columnar_output(replay, tmp_path) -> None:
    out = tmp_path / "out"
    assert main(["-f", "columnar", "-o", str(out), "--table-format", "parquet", "-c", "zstd", replay]) == 0
    assert (out / "frames.parquet").exists()
    assert (out / "metadata.json").exists()

    tar = tmp_path / "out.tar"
    assert main(["-f", "columnar", "-o", str(tar), "-j", "2", replay]) == 0
    assert tar.stat().st_size > 0


def test_columnar_needs_outfile(replay) -> None:
    with pytest.raises(SystemExit):
        main(["-f", "columnar", replay])


def test_null_output(replay, capsys) -> None:
    assert main(["-f", "null", replay]) == 0
    assert capsys.readouterr().out == ""


def test_not_a_replay(tmp_path) -> None:
    path = tmp_path / "bogus.slp"
    path.write_bytes(b"not a replay")
    assert main([str(path)]) == 2


def test_slippi_output(replay, tmp_path) -> None:
    outfile = tmp_path / "copy.slp"
    assert main(["-f", "slippi", "-o", str(outfile), replay]) == 0
    with open(replay, "rb") as f:
        assert outfile.read_bytes() == f.read()


def test_slippi_output_failing_verification(replay, tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(cli, "write_replay", lambda game: simple_game(5))
    outfile = tmp_path / "copy.slp"
    assert main(["-f", "slippi", "-o", str(outfile), replay]) == 2
    assert not outfile.exists()

    assert main(["-f", "slippi", "--no-verify", "-o", str(outfile), replay]) == 0
    assert outfile.read_bytes() == simple_game(5)
