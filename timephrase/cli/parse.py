#!/usr/bin/env python3
"""
CLI for resolving time expressions.

Usage:
    # Resolve relative to the current local time
    python -m timephrase.cli.parse last week

    # Resolve relative to a fixed instant
    python -m timephrase.cli.parse --now 2024-06-15T10:00:00 since yesterday

    # Prefer future matches for under-specified phrases
    python -m timephrase.cli.parse --future friday the 13th
"""

import argparse
import json
import logging
import sys
from datetime import datetime

from timephrase.config import configure_logging, get_settings
from timephrase.models import Interval
from timephrase.services import TimeError, parse_time_range

logger = logging.getLogger(__name__)


def interval_to_dict(phrase: str, interval: Interval) -> dict:
    """Convert a resolved interval to a JSON-serializable dict."""
    return {
        "phrase": phrase,
        "start": interval.start.isoformat(),
        "end": interval.end.isoformat(),
        "duration": str(interval.duration),
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resolve an English time expression to a [start, end) range",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("phrase", nargs="+", help="Time expression, e.g. 'the ides of March'")
    parser.add_argument(
        "--now",
        type=datetime.fromisoformat,
        help="Reference instant in ISO 8601 (default: current local time)",
    )
    parser.add_argument(
        "--future",
        action="store_true",
        help="Resolve under-specified phrases to the nearest future match",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entrypoint."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings)

    phrase = " ".join(args.phrase)
    config = settings.resolver_config(False if args.future else None)
    now = args.now or datetime.now()

    try:
        interval = parse_time_range(phrase, now, config)
    except TimeError as e:
        logger.error("%s error: %s", e.kind.value, e.message)
        sys.exit(1)

    print(json.dumps(interval_to_dict(phrase, interval), indent=2))


if __name__ == "__main__":
    main()
