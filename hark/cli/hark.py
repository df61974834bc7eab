"""Hark CLI entrypoint."""

import argparse
import json
import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional

from hark.core import InvalidArgumentError, StringParsingOptions, StringParsingStream

logger = logging.getLogger(__name__)


def parse_separator(text: str) -> str:
    """Interpret backslash escapes such as ``\\n`` or ``\\r\\n``."""
    try:
        return text.encode("latin-1", "backslashreplace").decode("unicode_escape")
    except UnicodeDecodeError as exc:
        raise InvalidArgumentError(
            "separator", f"Invalid escape in separator {text!r}: {exc.reason}."
        ) from exc


def build_options(args: argparse.Namespace) -> StringParsingOptions:
    separator = parse_separator(args.separator) if args.separator is not None else None
    return StringParsingOptions.create(
        encoding=args.encoding,
        separator=separator,
        buffer_size=args.buffer_size,
        decode_replacement=args.replacement,
    )


def pump(source: BinaryIO, stream: StringParsingStream, read_size: int) -> int:
    """Copy ``source`` into ``stream`` chunk by chunk; return the byte count."""
    total = 0
    while True:
        chunk = source.read(read_size)
        if not chunk:
            break
        total += stream.write(chunk)
    return total


def _open_source(stack: ExitStack, path: Optional[str]) -> BinaryIO:
    if path is None or path == "-":
        return sys.stdin.buffer
    return stack.enter_context(Path(path).open("rb"))


def _run(args: argparse.Namespace, listener: Callable[[str], None]) -> None:
    options = build_options(args)
    with ExitStack() as stack:
        source = _open_source(stack, args.input)
        tee = stack.enter_context(Path(args.tee).open("wb")) if args.tee else None
        stream = StringParsingStream(listener, tee, options)
        total = pump(source, stream, args.read_size)
        stream.close()
    logger.debug("Read %d bytes from %s", total, args.input or "stdin")


def split_input(args: argparse.Namespace) -> None:
    if args.json:
        def listener(unit: str) -> None:
            print(json.dumps(unit, ensure_ascii=False))
    else:
        def listener(unit: str) -> None:
            print(unit)

    _run(args, listener)


def count_input(args: argparse.Namespace) -> None:
    units: List[str] = []
    _run(args, units.append)
    print(len(units))


def _add_stream_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", nargs="?", help="Input file, stdin if omitted or '-'")
    parser.add_argument("--encoding", default=None, help="Character encoding of the input")
    parser.add_argument(
        "--separator",
        default=None,
        help="Separator between strings, backslash escapes allowed (default: os.linesep)",
    )
    parser.add_argument(
        "--buffer-size", type=int, default=None, help="Decoding byte buffer size (min 4)"
    )
    parser.add_argument(
        "--replacement", default=None, help="Replacement for malformed input (default '?')"
    )
    parser.add_argument("--tee", default=None, help="Write a raw copy of the input to this path")
    parser.add_argument(
        "--read-size", type=int, default=4096, help="Bytes read from the input per write"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Split a byte stream into decoded strings")
    subparsers = parser.add_subparsers(dest="command", required=True)

    split_parser = subparsers.add_parser("split", help="Print every separated string")
    _add_stream_arguments(split_parser)
    split_parser.add_argument(
        "--json", action="store_true", help="Print strings as JSON lines"
    )
    split_parser.set_defaults(func=split_input)

    count_parser = subparsers.add_parser("count", help="Print the number of separated strings")
    _add_stream_arguments(count_parser)
    count_parser.set_defaults(func=count_input)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    if args.read_size < 1:
        parser.error("--read-size must be at least 1")
    try:
        args.func(args)
    except InvalidArgumentError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
