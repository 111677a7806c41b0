"""
Output formatting utilities for the CLI.

Provides consistent output formatting across all CLI commands.
"""

import json
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown

from codesense.providers.models import Response

# Global console instances
console = Console()
err_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[yellow]![/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]i[/blue] {message}")


def print_response(response: Response, json_output: bool = False) -> None:
    """
    Print an exchange Response.

    Args:
        response: The Response to print.
        json_output: Emit ``{"text": ..., "error": ...}`` instead of rendered Markdown.
    """
    if json_output:
        console.print_json(json.dumps(response.model_dump()))
        return

    console.print(Markdown(response.text))
    if response.error:
        print_warning(response.error)


def setup_logging(verbose: bool) -> None:
    """Route library logging to stderr through Rich when verbose."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
    )
