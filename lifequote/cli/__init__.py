"""Command-line interface for LifeQuote."""

from lifequote.cli.main import main

__all__ = ["main"]
