from __future__ import annotations

import argparse
import sys
import time

from .archive import DirectoryArchive, TarArchive, write_archive
from .columnar import COMPRESSIONS, TABLE_FORMATS
from .game import Game
from .jsonify import dump_game, dumps, plain, to_json
from .log import log, set_verbosity
from .parse import ParseError
from .query import QueryError, flatten, select
from .writer import RoundTripError, verify, write_replay


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="slp", description="Inspector for Slippi SSBM replay files")
    parser.add_argument("replay", nargs="?", help="Replay file to parse (`-` for STDIN)")
    parser.add_argument("-o", "--outfile", help="Output path. For columnar output, a directory or a .tar file")
    parser.add_argument("-f", "--format", choices=["json", "columnar", "slippi", "null"], default="json", help="Output format")
    parser.add_argument(
        "-q", "--query", action="append", default=[], help="Print only the part of the game at this path (repeatable)"
    )
    parser.add_argument("--quiet", action="store_true", help="Print bare query results, flattening single elements")
    parser.add_argument("-n", "--names", action="store_true", help="Annotate numeric codes with their names")
    parser.add_argument("-s", "--short", action="store_true", help="Don't output frame data")
    parser.add_argument("-c", "--compression", choices=COMPRESSIONS, help="Compression method for columnar output")
    parser.add_argument("--table-format", choices=list(TABLE_FORMATS), default="ipc", help="Columnar table format")
    parser.add_argument("-j", "--workers", type=int, help="Threads used to build columns")
    parser.add_argument("--no-verify", action="store_true", help="Don't verify slippi output by reading it back")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Be more verbose")
    return parser


def _read(args) -> Game:
    start = time.perf_counter()
    if args.replay is None or args.replay == "-":
        # don't check for "-", to allow the user to force reading from STDIN
        if args.replay is None and sys.stdin.isatty():
            raise SystemExit("refusing to read from a TTY (`slp -h` for usage)")
        game = Game(sys.stdin.buffer.read(), skip_frames=args.short)
    else:
        game = Game(args.replay, skip_frames=args.short)
    log.info(f"Parsed replay in {(time.perf_counter() - start) * 1e6:.0f} μs")

    for error in game.errors:
        log.info(str(error))
    if game.partial:
        log.warning(f"replay is incomplete ({len(game.errors)} problems recovered)")
    return game


def _write_text(text: str, outfile: str | None):
    if outfile is None:
        sys.stdout.write(text + "\n")
    else:
        with open(outfile, "w", encoding="utf-8") as f:
            f.write(text + "\n")


def _write_binary(data: bytes, outfile: str | None):
    if outfile is None:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    else:
        with open(outfile, "wb") as f:
            f.write(data)


def _run_queries(game: Game, args) -> bool:
    ok = True
    results = {}
    lines = []
    for path in args.query:
        try:
            result = select(game, path)
        except QueryError as exc:
            print(f"error: {exc}", file=sys.stderr)
            ok = False
            continue
        if args.quiet:
            lines.append(to_json(flatten(result), names=args.names))
        else:
            results[path] = plain(result, args.names)

    if lines:
        _write_text("\n".join(lines), args.outfile)
    elif results:
        _write_text(dumps(results), args.outfile)
    return ok


def _convert(game: Game, args):
    start = time.perf_counter()
    match args.format:
        case "json":
            _write_text(dumps(dump_game(game, frames=not args.short, names=args.names)), args.outfile)
        case "columnar":
            if args.outfile is None:
                raise SystemExit("columnar output needs an output path (-o)")
            archive = TarArchive(args.outfile) if args.outfile.endswith(".tar") else DirectoryArchive(args.outfile)
            with archive:
                write_archive(game, archive, args.table_format, args.compression, args.workers, args.names)
        case "slippi":
            data = write_replay(game)
            if args.no_verify:
                log.info("Skipping round-trip verification (`--no-verify`)")
            elif args.short:
                log.warning("Skipping round-trip verification (`--short`)")
            else:
                verify(game, data)
            _write_binary(data, args.outfile)
        case "null":
            return
    log.info(f"Wrote replay in {(time.perf_counter() - start) * 1e6:.0f} μs")


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    set_verbosity(args.verbose)

    if args.format == "slippi" and args.outfile is None and sys.stdout.isatty():
        raise SystemExit("refusing to write binary data to a TTY (`slp -h` for usage)")

    try:
        game = _read(args)
    except ParseError as exc:
        log.error(str(exc))
        return 2

    if args.query:
        return 0 if _run_queries(game, args) else 1

    try:
        _convert(game, args)
    except RoundTripError as exc:
        log.error(str(exc))
        return 2
    return 0
