"""
Hive entry point.

This file handles startup concerns (arg-parsing, logging, worker registration) and launches the
interactive CLI with the Queen as coordinator.
"""

import argparse
import logging
import sys

from hive.client.cli import run_cli
from hive.config import settings
from hive.queen import Queen
from hive.workers import build_registry

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _init_logging(level: str) -> None:
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        stream=sys.stderr,  # stdout belongs to the REPL
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    """Command-line options."""
    parser = argparse.ArgumentParser(description="Run the Hive multi-agent shell")
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        type=str.lower,
        default=settings.LOG_LEVEL,
        help="Logging level (default from env: %(default)s)",
    )
    return parser


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def main(argv: list[str] | None = None) -> None:
    """
    Main entry point for the Hive application.

    Registers the workers, builds the Queen on top of them and hands control to the REPL.
    """
    if argv is None:
        argv = sys.argv[1:]

    args = build_parser().parse_args(argv)

    # Override log level setting with command-line argument
    settings.LOG_LEVEL = args.log_level

    _init_logging(settings.LOG_LEVEL)

    logger.info("Starting Hive")
    logger.debug("Settings: %s", settings.model_dump())

    registry = build_registry()
    queen = Queen(registry)
    run_cli(queen)


if __name__ == "__main__":
    main()
