"""Shared argument builders for CLI commands."""

import argparse

from lifequote.core.types import Gender, HealthClass, SmokerStatus
from lifequote.rates.tables import RateTable


def add_format_arg(parser: argparse.ArgumentParser) -> None:
    """Add --format argument for output format selection."""
    parser.add_argument(
        "--format",
        "-f",
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )


def add_verbose_arg(parser: argparse.ArgumentParser) -> None:
    """Add --verbose argument for debug logging."""
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output (debug logging)",
    )


def add_profile_args(parser: argparse.ArgumentParser, rate_table: RateTable) -> None:
    """Add the risk profile flags used by `quote`.

    Coverage and term choices come from the rate table so only priced
    combinations can be requested.
    """
    parser.add_argument("--age", "-a", type=int, required=True, help="Age of the insured (18-85)")
    parser.add_argument(
        "--gender",
        "-g",
        choices=[g.value for g in Gender],
        default=Gender.MALE.value,
        help="Gender (default: male)",
    )
    parser.add_argument(
        "--smoker",
        choices=[s.value for s in SmokerStatus],
        default=SmokerStatus.NEVER.value,
        help="Tobacco use (default: never)",
    )
    parser.add_argument(
        "--health",
        choices=[h.value for h in HealthClass],
        default=HealthClass.PREFERRED.value,
        help="Health class (default: preferred)",
    )
    parser.add_argument(
        "--coverage",
        "-c",
        type=int,
        choices=rate_table.coverage_amounts(),
        default=None,
        help="Coverage amount in dollars (default: from config)",
    )
    parser.add_argument(
        "--term",
        "-t",
        type=int,
        choices=rate_table.term_lengths(),
        default=None,
        help="Term length in years (default: from config)",
    )
