import sys
import argparse
import logging

from rich.console import Console
from rich.logging import RichHandler

from hexconf.errors import ConfigError
from hexconf.evaluator import resolve
from hexconf.parser import parse
from hexconf.serializer import FORMATS

logger = logging.getLogger("hexconf.main")

EXIT_OK = 0
# argparse also exits with 2 on a bad command line
EXIT_CONFIG_ERROR = 2
EXIT_IO_ERROR = 3


def setup_logging(verbose=False):
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(name)s] %(message)s",
        handlers=[handler],
    )


def translate(text, fmt="xml"):
    """Translate a hexconf document into ``fmt`` (``"xml"`` or ``"yaml"``).

    Raises:
        ConfigError: on the first lexing, parsing or resolution failure, or
            when the resolved values nest too deeply to be written out.
    """
    if fmt not in FORMATS:
        raise ValueError(f"Unknown output format: {fmt}")
    env = parse(text)
    resolved = resolve(env)
    logger.debug("Resolved %d bindings", len(resolved))
    try:
        output = FORMATS[fmt](resolved)
    except RecursionError as e:
        raise ConfigError(0, 0, f"Values nested too deeply to write as {fmt}") from e
    logger.debug("Wrote %d characters of %s", len(output), fmt)
    return output


def read_source(path):
    if path is None or path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def write_output(text, path):
    if path is None:
        sys.stdout.write(text)
        return
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="hexconf",
        description="Translate a hexconf document into XML with every constant reference resolved.",
    )
    parser.add_argument("input", nargs="?", help="source document (default: standard input)")
    parser.add_argument("-o", "--output", help="write the result to this file instead of standard output")
    parser.add_argument("-f", "--format", choices=sorted(FORMATS), default="xml", help="output format")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        source = read_source(args.input)
    except (OSError, UnicodeDecodeError) as e:
        print(f"I/O error: {e}", file=sys.stderr)
        return EXIT_IO_ERROR

    try:
        result = translate(source, args.format)
    except ConfigError as e:
        print(e, file=sys.stderr)
        return EXIT_CONFIG_ERROR

    try:
        write_output(result, args.output)
    except OSError as e:
        print(f"I/O error: {e}", file=sys.stderr)
        return EXIT_IO_ERROR

    logger.debug("Translation finished")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
