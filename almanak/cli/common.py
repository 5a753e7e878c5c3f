import logging
from argparse import ArgumentParser
from pathlib import Path

from almanak.constants import DEFAULT_EVENTS_FILE


def add_common_args(parser: ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        help="Verbose mode",
        action="store_true",
    )
    parser.add_argument(
        "-f",
        "--file",
        help=f"Events file to use, default: {DEFAULT_EVENTS_FILE}",
        type=Path,
        default=DEFAULT_EVENTS_FILE,
    )


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
