"""
Command-line entry point.

Usage:
    python -m fire_model --number-of-years 40 --base-year 2024 --config-file config.toml

Prints the projection as CSV on stdout.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from .config import load_config
from .errors import ConfigurationError
from .reporting import ProjectionReport
from .simulation import Simulation

logger = logging.getLogger(__name__)


def non_negative_int(value: str) -> int:
    """argparse type for counts that may be zero but not negative."""
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be zero or more, got {number}")
    return number


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="firesim",
        description="Project savings, taxes and retirement readiness year by year.",
    )
    parser.add_argument("-n", "--number-of-years", type=non_negative_int, default=20,
                        help="Number of years to project")
    parser.add_argument("-b", "--base-year", type=int, default=0,
                        help="Offset added to the period index in the Year column")
    parser.add_argument("-c", "--config-file", default="config.toml",
                        help="TOML configuration file")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log every projected period")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        config = load_config(args.config_file)
    except FileNotFoundError:
        logger.error(f"Couldn't open config file `{args.config_file}`")
        return 1
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    report = ProjectionReport(Simulation(config), args.number_of_years, args.base_year)
    sys.stdout.write(report.to_csv())
    return 0


if __name__ == "__main__":
    sys.exit(main())
