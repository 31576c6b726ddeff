"""ansilog — command-line entry point: render a CI log as structured JSON."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import ParserConfig
from .session import SerializationError, Session

logger = logging.getLogger("ansilog")


def read_log(source: str, encoding: str) -> str:
    """Read the log from a file path, or from stdin when ``source`` is ``-``."""
    if source == "-":
        return sys.stdin.buffer.read().decode(encoding, errors="replace")
    return Path(source).read_text(encoding=encoding, errors="replace")


def render(raw: str, config: ParserConfig, matches_only: bool = False) -> str:
    """Parse ``raw`` and return the JSON document (or the match count)."""
    session = Session()
    session.set_raw(raw)
    if config.search:
        session.set_search(config.search)

    total = session.total_matches()
    logger.info(
        "Parsed %d line(s) into %d top-level node(s), %d match(es)",
        session.next_line_number - 1,
        len(session.lines),
        total,
    )
    if matches_only:
        return str(total)
    return session.serialize(pretty=config.pretty)


def cli_main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point — parse args, render the log, print the result."""
    parser = argparse.ArgumentParser(description="Render CI log output as structured, styled JSON")
    parser.add_argument("file", nargs="?", default="-", help="Log file ('-' for stdin)")
    parser.add_argument("--search", default=None, help="Highlight occurrences of this term")
    parser.add_argument("--pretty", action="store_true", default=None, help="Pretty-print the JSON")
    parser.add_argument("--matches", action="store_true", help="Print only the number of search matches")
    parser.add_argument("--config", type=Path, default=None, help="Config file path")
    parser.add_argument("--write-config", action="store_true", help="Save the effective config and exit")
    parser.add_argument("--log-level", default=None, help="Log level")
    args = parser.parse_args(argv)

    config = ParserConfig.load(args.config)
    if args.search is not None:
        config.search = args.search
    if args.pretty:
        config.pretty = True
    if args.log_level:
        config.log_level = args.log_level

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.write_config:
        config.save(args.config)
        logger.info("Config written")
        return 0

    try:
        raw = read_log(args.file, config.encoding)
    except OSError as exc:
        logger.error("Cannot read %s: %s", args.file, exc)
        return 1

    try:
        output = render(raw, config, matches_only=args.matches)
    except SerializationError:
        logger.exception("Failed to render %s", args.file)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(cli_main())
