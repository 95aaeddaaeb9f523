"""CLI entrypoint for LifeQuote.

Commands:
- quote: Estimate carrier rates for a profile
- carriers: List carriers in the rate table
- flow: Show the conversation step graph
- chat: Walk through the quote conversation in the terminal
"""

import argparse
import json
import logging
import sys
from typing import Callable, Optional

from dotenv import load_dotenv
from rich.console import Console

from lifequote.cli.arguments import add_format_arg, add_profile_args, add_verbose_arg
from lifequote.cli.formatting import OutputFormatter, print_quotes
from lifequote.core.config import LifeQuoteConfig
from lifequote.core.errors import ConfigurationError, LifeQuoteError
from lifequote.core.types import Gender, HealthClass, SmokerStatus, UserProfile
from lifequote.rates import default_rate_table

# Load .env file from current directory
load_dotenv()

logger = logging.getLogger(__name__)


def _load_config(args: argparse.Namespace) -> LifeQuoteConfig:
    config = LifeQuoteConfig()
    if getattr(args, "verbose", False):
        config.log_level = "DEBUG"
    try:
        config.validate()
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return config


def quote_command(args: argparse.Namespace) -> int:
    """Estimate quotes for a profile.

    Args:
        args: Command line arguments.

    Returns:
        Exit code.
    """
    from lifequote.rates import RateEstimator

    config = _load_config(args)
    console = Console()
    formatter = OutputFormatter(args.format, console)

    if not config.min_age <= args.age <= config.max_age:
        console.print(f"Invalid age: {args.age} (must be {config.min_age}-{config.max_age})")
        return 1

    profile = UserProfile(
        age=args.age,
        gender=Gender(args.gender),
        smoker_status=SmokerStatus(args.smoker),
        health_class=HealthClass(args.health),
        coverage_amount=args.coverage or config.default_coverage,
        term_length=args.term or config.default_term,
    )

    quotes = RateEstimator(default_rate_table()).estimate(profile)

    def table() -> None:
        console.print(
            f"\n{profile.term_length}-year term, ${profile.coverage_amount:,} coverage, "
            f"age {profile.age} {profile.gender.value}, {profile.health_class.value}, "
            f"smoker: {profile.smoker_status.value}"
        )
        print_quotes(console, quotes)

    formatter.output(
        {"profile": profile.to_dict(), "quotes": [q.to_dict() for q in quotes]},
        table,
    )
    return 0


def carriers_command(args: argparse.Namespace) -> int:
    """List carriers and the term lengths they write."""
    from rich.table import Table

    _load_config(args)
    console = Console()
    formatter = OutputFormatter(args.format, console)
    rate_table = default_rate_table()

    rows = []
    for carrier in rate_table.carriers:
        terms = sorted(
            {
                term
                for term in rate_table.term_lengths()
                for gender in Gender
                if rate_table.bucket(carrier.carrier_id, gender, term)
            }
        )
        rows.append({**carrier.to_dict(), "term_lengths": terms})

    def table() -> None:
        t = Table(title="Carriers")
        t.add_column("ID")
        t.add_column("Name", style="bold")
        t.add_column("AM Best")
        t.add_column("Terms")
        for row in rows:
            t.add_row(
                row["carrier_id"],
                row["name"],
                row["am_best_rating"],
                ", ".join(str(term) for term in row["term_lengths"]),
            )
        console.print(t)

    formatter.output(rows, table)
    return 0


def flow_command(args: argparse.Namespace) -> int:
    """Validate and print the conversation step graph."""
    from rich.table import Table

    from lifequote.conversation import build_default_graph

    config = _load_config(args)
    console = Console()
    formatter = OutputFormatter(args.format, console)

    graph = build_default_graph(config=config)
    steps = [step.to_dict() for step in graph]

    def table() -> None:
        t = Table(title=f"Conversation ({len(graph)} steps)")
        t.add_column("#", justify="right")
        t.add_column("Step", style="bold")
        t.add_column("Input")
        t.add_column("Next")
        t.add_column("Notes")
        for step in graph:
            completed, total = graph.progress(step.id)
            notes = []
            if step.id not in graph.main_path:
                notes.append("branch")
            if step.shows_quotes:
                notes.append("shows quotes")
            if step.terminal:
                notes.append("terminal")
            t.add_row(
                f"{completed + 1}/{total}",
                step.id,
                step.input_type.value,
                " | ".join(step.next.possible_values()),
                ", ".join(notes),
            )
        console.print(t)

    formatter.output(steps, table)
    return 0


def run_chat(
    console: Console,
    input_fn: Callable[[str], str],
    config: Optional[LifeQuoteConfig] = None,
) -> dict:
    """Drive the conversation until it ends.

    Args:
        console: Where prompts and quotes are printed.
        input_fn: Reads one answer given a prompt string.
        config: Application config.

    Returns:
        The lead payload (as a dict) captured at the end.
    """
    from lifequote.conversation import DONE, create_engine
    from lifequote.leads import CONSENT_TEXT, LeadRecord, format_lead_notification

    engine = create_engine(config=config)
    step_id = engine.start()
    answers: dict[str, str] = {}
    quotes: tuple = ()

    while step_id != DONE:
        completed, total = engine.progress(step_id)
        prompt = engine.prompt_for(step_id, answers)
        console.print(f"\n[dim]({completed}/{total})[/dim] [bold]{prompt}[/bold]")

        if step_id == "verify_phone":
            console.print("[dim]SMS is not sent from the terminal; answer yes if verified.[/dim]")
        if step_id == "consent":
            console.print(f"[dim]{CONSENT_TEXT}[/dim]")

        options = engine.options_for(step_id, answers)
        for option in options:
            console.print(f"  [cyan]{option.value}[/cyan]  {option.label}")

        raw = input_fn("> ")
        result = engine.advance(step_id, answers, raw)
        if result.error is not None:
            console.print(f"[red]{result.error.message}[/red]")
            continue

        step_id, answers = result.next_step_id, result.answers
        if result.quotes is not None:
            quotes = result.quotes
            print_quotes(console, quotes)

    lead = LeadRecord.from_answers(answers, quotes)
    console.print("\n[green]Lead captured[/green]")
    console.print(format_lead_notification(lead), markup=False)
    return lead.to_dict()


def chat_command(args: argparse.Namespace) -> int:
    """Run the conversation interactively."""
    config = _load_config(args)
    # Keep stdout for the lead JSON
    console = Console(stderr=args.format == "json")
    try:
        lead = run_chat(console, console.input, config)
    except (KeyboardInterrupt, EOFError):
        console.print("\nBye!")
        return 130

    if args.format == "json":
        print(json.dumps(lead, indent=2))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command line arguments (defaults to sys.argv).

    Returns:
        Exit code.
    """
    parser = argparse.ArgumentParser(
        prog="lifequote",
        description="LifeQuote - term life rate estimates and quote conversation",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    quote_parser = subparsers.add_parser("quote", help="Estimate carrier rates for a profile")
    add_profile_args(quote_parser, default_rate_table())
    add_format_arg(quote_parser)
    add_verbose_arg(quote_parser)

    carriers_parser = subparsers.add_parser("carriers", help="List carriers in the rate table")
    add_format_arg(carriers_parser)
    add_verbose_arg(carriers_parser)

    flow_parser = subparsers.add_parser("flow", help="Show the conversation step graph")
    add_format_arg(flow_parser)
    add_verbose_arg(flow_parser)

    chat_parser = subparsers.add_parser("chat", help="Walk through the quote conversation")
    add_format_arg(chat_parser)
    add_verbose_arg(chat_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        if args.command == "quote":
            return quote_command(args)
        elif args.command == "carriers":
            return carriers_command(args)
        elif args.command == "flow":
            return flow_command(args)
        elif args.command == "chat":
            return chat_command(args)
        else:
            parser.print_help()
            return 1
    except LifeQuoteError as e:
        logger.error(f"[CLI] {e.message}")
        print(f"Error: {e.message}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
