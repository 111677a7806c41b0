"""
Main Typer application for the codesense CLI.

Usage:
    codesense summary octocat/hello-world
    codesense ask octocat/hello-world "Where is the entry point?"
    codesense ask octocat/hello-world "And the tests?" --history chat.json --json
"""

import asyncio
import json
from pathlib import Path
from typing import Annotated, Any

import typer

from codesense import __version__
from codesense.cli.output import print_error, print_info, print_response, setup_logging
from codesense.config import ConfigurationError, get_config
from codesense.github import GitHubClient, GitHubError
from codesense.prompts.builder import turns_from_client_history
from codesense.providers.models import Response
from codesense.service import CodeSenseService

app = typer.Typer(
    name="codesense",
    help="Summarize GitHub repositories and answer questions about them.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        print_info(f"codesense version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log exchange progress to stderr."),
    ] = False,
) -> None:
    """
    [bold blue]codesense[/bold blue] - repository analysis with a language model
    """
    setup_logging(verbose)


def parse_repository(value: str) -> tuple[str, str]:
    """Split ``OWNER/REPO`` into its parts."""
    owner, sep, repo = value.strip().strip("/").partition("/")
    if not sep or not owner or not repo or "/" in repo:
        raise typer.BadParameter(f"Expected OWNER/REPO, got {value!r}", param_hint="REPOSITORY")
    return owner, repo


def load_history(path: Path) -> list[dict[str, Any]]:
    """Read chat history records from a JSON file."""
    try:
        entries = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise typer.BadParameter(f"Cannot read history file: {e}", param_hint="--history")

    if not isinstance(entries, list) or not all(isinstance(entry, dict) for entry in entries):
        raise typer.BadParameter(
            'History must be a JSON list of {"sender", "content"} objects',
            param_hint="--history",
        )
    return entries


async def _summary(owner: str, repo: str) -> Response:
    config = get_config()
    client = GitHubClient(config.github)
    metadata = await client.fetch_metadata(owner, repo)
    service = CodeSenseService(config, fetcher=client.fetch_content)
    return await service.generate_summary(metadata)


async def _ask(owner: str, repo: str, question: str, history: list[dict[str, Any]]) -> Response:
    config = get_config()
    client = GitHubClient(config.github)
    metadata = await client.fetch_metadata(owner, repo)
    service = CodeSenseService(config, fetcher=client.fetch_content)
    return await service.answer_question(metadata, turns_from_client_history(history), question)


def _run(coro: Any) -> Response:
    """Run an exchange, turning data source and config failures into exit code 1."""
    try:
        return asyncio.run(coro)
    except GitHubError as e:
        print_error(str(e))
        raise typer.Exit(1)
    except ConfigurationError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(1)


@app.command()
def summary(
    repository: Annotated[str, typer.Argument(help="Repository as OWNER/REPO.")],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output the response as JSON."),
    ] = False,
) -> None:
    """Generate a Markdown analysis of a repository."""
    owner, repo = parse_repository(repository)
    print_response(_run(_summary(owner, repo)), json_output)


@app.command()
def ask(
    repository: Annotated[str, typer.Argument(help="Repository as OWNER/REPO.")],
    question: Annotated[str, typer.Argument(help="Question about the repository.")],
    history: Annotated[
        Path | None,
        typer.Option(
            "--history",
            "-H",
            help='JSON file of earlier turns: [{"sender": "user"|"bot", "content": "..."}].',
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output the response as JSON."),
    ] = False,
) -> None:
    """Answer a question about a repository."""
    owner, repo = parse_repository(repository)
    entries = load_history(history) if history else []
    print_response(_run(_ask(owner, repo, question, entries)), json_output)


if __name__ == "__main__":
    app()
