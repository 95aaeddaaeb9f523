"""Output formatting utilities for CLI commands.

JSON is printed as-is; tables are rendered with rich.
"""

import json
from typing import Any, Callable, Optional, Sequence

from rich.console import Console
from rich.table import Table

from lifequote.core.types import CarrierQuote


class OutputFormatter:
    """Handles consistent output formatting across CLI commands."""

    def __init__(self, format_type: str = "table", console: Optional[Console] = None):
        """Initialize formatter.

        Args:
            format_type: Output format - 'json' or 'table'.
            console: Console to render to (defaults to stdout).
        """
        self.format_type = format_type
        self.console = console or Console()

    @property
    def is_json(self) -> bool:
        """Check if output should be JSON."""
        return self.format_type == "json"

    def output(self, data: Any, table_fn: Callable[[], None]) -> None:
        """Output data in the configured format.

        Args:
            data: Data to output (used directly for JSON).
            table_fn: Function to call for table output (no args).
        """
        if self.is_json:
            self.print_json(data)
        else:
            table_fn()

    def print_json(self, data: Any) -> None:
        """Print data as JSON."""
        print(json.dumps(data, indent=2))


def quotes_table(quotes: Sequence[CarrierQuote], title: str = "Estimated Monthly Rates") -> Table:
    """Build a rich table of quotes, cheapest first."""
    table = Table(title=title)
    table.add_column("", style="green")
    table.add_column("Carrier", style="bold")
    table.add_column("AM Best")
    table.add_column("Monthly", justify="right")
    table.add_column("Annual", justify="right")

    for idx, quote in enumerate(quotes):
        table.add_row(
            "Best" if idx == 0 else "",
            quote.carrier_name,
            quote.am_best_rating,
            f"${quote.monthly_rate:,.2f}",
            f"${quote.annual_rate:,.2f}",
        )
    return table


NO_QUOTES_MESSAGE = (
    "Sorry, I couldn't find rates for your specific profile. "
    "A licensed agent can help you explore options."
)

ESTIMATE_DISCLAIMER = (
    "Estimates based on published rate data. Final rates may vary based on full underwriting."
)


def print_quotes(console: Console, quotes: Sequence[CarrierQuote]) -> None:
    """Render quotes, or the fallback message when there are none."""
    if not quotes:
        console.print(f"[yellow]{NO_QUOTES_MESSAGE}[/yellow]")
        return
    console.print(quotes_table(quotes))
    console.print(f"[dim]{ESTIMATE_DISCLAIMER}[/dim]")
