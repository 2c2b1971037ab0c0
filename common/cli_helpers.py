"""Shared CLI utilities for consistent argument parsing."""

from __future__ import annotations

import argparse
import logging
import sys


def add_log_level_argument(parser: argparse.ArgumentParser) -> None:
    """Add standard --log-level argument.

    Args:
        parser: ArgumentParser to add the argument to
    """
    parser.add_argument(
        "--log-level",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        default="INFO",
        help="Logging verbosity",
    )


def add_dry_run_argument(parser: argparse.ArgumentParser) -> None:
    """Add standard --dry-run flag.

    Args:
        parser: ArgumentParser to add the argument to
    """
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be written without saving anything",
    )


def setup_logging(level: str) -> None:
    """Configure root logging for a single CLI run.

    Args:
        level: Logging level (CRITICAL, ERROR, WARNING, INFO, DEBUG)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        stream=sys.stdout,
        force=True,
    )
