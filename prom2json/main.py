"""Main entry point for the prom2json converter."""
import argparse
import logging
import sys

from prom2json.config import load_config
from prom2json.converter import Converter
from prom2json.errors import ConfigError, FetchError, ParseError


def setup_logging(log_level: str, log_format: str):
    """Setup logging configuration."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    if log_format == "json":
        fmt = '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'
    else:
        fmt = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

    # Logs go to stderr so stdout carries only the JSON document
    logging.basicConfig(
        level=level,
        format=fmt,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr
    )

    # Reduce noise from some libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="prom2json - Convert Prometheus exposition text to JSON"
    )
    parser.add_argument(
        "url",
        nargs="?",
        help="Metrics endpoint to fetch (defaults to fetch.url from the config)"
    )
    parser.add_argument(
        "--file",
        "-f",
        help="Read exposition text from a file instead of a URL ('-' for stdin)"
    )
    parser.add_argument(
        "--config",
        "-c",
        help="Path to configuration YAML file"
    )
    parser.add_argument(
        "--indent",
        type=int,
        help="Indent the JSON output by this many spaces"
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the HTTP API instead of converting once"
    )
    return parser


def read_input(path: str) -> str:
    """Read exposition text from a file path or stdin."""
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def main(argv=None) -> int:
    """Main function."""
    args = build_parser().parse_args(argv)

    # Load configuration
    try:
        config = load_config(args.config)
    except (FileNotFoundError, ConfigError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 2

    if args.indent is not None:
        config.output.indent = args.indent

    setup_logging(config.global_.log_level, config.global_.log_format)
    logger = logging.getLogger(__name__)

    converter = Converter(config)

    if args.serve:
        from prom2json.api import ConverterAPI

        ConverterAPI(converter).run(host=config.api.host, port=config.api.port)
        return 0

    try:
        if args.file:
            logger.info(f"Reading exposition text from: {args.file}")
            document = converter.parse(read_input(args.file))
        else:
            document = converter.convert(args.url)
    except FetchError as e:
        logger.error(f"Fetch failed: {e}")
        return 2
    except OSError as e:
        logger.error(f"Failed to read input: {e}")
        return 2
    except ParseError as e:
        logger.error(f"Parse failed: {e}")
        return 1

    print(converter.render(document))
    return 0


if __name__ == "__main__":
    sys.exit(main())
