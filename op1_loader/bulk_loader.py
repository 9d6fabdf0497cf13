#!/usr/bin/env python3
"""Load gigantic JSON streams into a database with constant RAM."""

import argparse, logging, pathlib, sys
from typing import BinaryIO, List, Optional

from sqlizer.errors import SqlizerError
from sqlizer.pipeline import LoadStats, StreamLoader
from sqlizer.settings import LoaderSettings
from sqlizer.sinks import SqliteStatementSink, SqlScriptSink, StatementSink
from sqlizer.streaming_parser import StreamingJSONParser

logger = logging.getLogger(__name__)
parser = StreamingJSONParser()

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def describe_input(path: Optional[pathlib.Path]) -> str:
    if path is None:
        return "stdin"
    layout = parser.auto_detect_json_structure(str(path))
    if layout == 'array':
        return f"{path} (array of documents)"
    if layout == 'object':
        return f"{path} (concatenated documents)"
    return f"{path} (unknown layout)"


def process(stream: BinaryIO, sink: StatementSink, settings: LoaderSettings) -> LoadStats:
    with sink:
        return StreamLoader(sink, settings).load(stream)


def build_sink(args, settings: LoaderSettings) -> StatementSink:
    if args.dry_run:
        return SqlScriptSink(sys.stdout, name="stdout")
    return SqliteStatementSink(settings.database)


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="bulk-loader",
        description="Stream JSON documents into SQL tables named by their $type field.",
    )
    ap.add_argument("file", nargs="?", type=pathlib.Path, help="JSON input (default: stdin)")
    ap.add_argument("--database", help="SQLite database file (env SQLIZER_DATABASE)")
    ap.add_argument("--dry-run", action="store_true", help="print INSERT statements instead of executing them")
    rows = ap.add_mutually_exclusive_group()
    rows.add_argument("--max-rows", type=int, help="rows per INSERT statement (env SQLIZER_MAX_ROWS)")
    rows.add_argument("--single-row", action="store_true", help="one INSERT per document")
    ap.add_argument("--buffer-size", type=int, help="read chunk size in bytes (env SQLIZER_BUFFER_SIZE)")
    ap.add_argument("--type-key", help="field naming the destination table (env SQLIZER_TYPE_KEY)")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def cli(argv: Optional[List[str]] = None) -> int:
    ap = build_arg_parser()
    args = ap.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        settings = LoaderSettings.from_env().override(
            database=args.database,
            max_rows_per_batch=1 if args.single_row else args.max_rows,
            buffer_size=args.buffer_size,
            type_key=args.type_key,
        )
    except ValueError as e:
        logger.error(f"invalid settings: {e}")
        return EXIT_USAGE

    if args.file is None and sys.stdin.isatty():
        logger.error("You must provide a file to read or pipe input to this script")
        ap.print_usage(sys.stderr)
        return EXIT_USAGE
    if args.file is not None and not args.file.exists():
        logger.error(f"File passed '{args.file}' does not exist")
        return EXIT_USAGE

    logger.info("Loading %s, %d rows per statement", describe_input(args.file), settings.max_rows_per_batch)
    sink = build_sink(args, settings)
    try:
        if args.file is None:
            process(sys.stdin.buffer, sink, settings)
        else:
            with open(args.file, 'rb') as f:
                process(f, sink, settings)
    except SqlizerError:
        # already logged with its document position by the loader
        return EXIT_FAILED
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_INTERRUPTED
    return EXIT_OK


def main():
    sys.exit(cli())


if __name__ == "__main__":
    main()
