"""CLI entry point for Scribe."""

import logging
import sys
from functools import wraps
from pathlib import Path
from typing import Any, Callable

# Configure logging early
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr),
    ],
)
logger = logging.getLogger(__name__)

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from scribe import __version__
from scribe.agent import Agent, ConversationError, ConversationStore, ToolExecutionError
from scribe.config import ScribeSettings, get_settings
from scribe.llm.client import GatewayError
from scribe.tools.registry import ToolNotFoundError, build_default_registry

console = Console(safe_box=True)

EXIT_COMMAND = "exit"

# Errors that end a turn but not the session
TURN_ERRORS = (GatewayError, ToolNotFoundError, ToolExecutionError)


def context_file_option(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add a --context-file option resolving to ScribeSettings."""

    @click.option(
        "--context-file",
        "-f",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="Conversation file (defaults to SCRIBE_CONTEXT_FILE or conversation.json)",
    )
    @wraps(func)
    def wrapper(*args: Any, context_file: Path | None, **kwargs: Any) -> Any:
        overrides = {"context_file": context_file} if context_file else {}
        return func(*args, settings=get_settings(**overrides), **kwargs)

    return wrapper


def _load_agent(settings: ScribeSettings) -> Agent:
    try:
        return Agent(settings=settings)
    except ConversationError as e:
        console.print(f"[red]Failed to initialize agent:[/red] {escape(str(e))}")
        sys.exit(1)


def _run_turn(agent: Agent, user_input: str) -> bool:
    """Process one input and print the reply. Returns False if the turn failed."""
    try:
        response = agent.process(user_input)
    except TURN_ERRORS as e:
        logger.debug("Turn failed", exc_info=True)
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return False
    console.print(response, markup=False, highlight=False)
    return True


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="scribe")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Scribe - conversational agent with file tools.

    Talks to Claude and lets it search the web, find, read and edit files.
    """
    if verbose:
        logging.getLogger("scribe").setLevel(logging.DEBUG)

    if ctx.invoked_subcommand is None:
        console.print(
            Panel.fit(
                "[bold blue]Scribe[/bold blue] ready\n\n"
                "[dim]Conversational agent with file tools[/dim]\n\n"
                f"Version: {__version__}\n\n"
                "Commands:\n"
                "  [green]scribe chat[/green]          - Start an interactive conversation\n"
                "  [green]scribe ask[/green] \"...\"     - Ask a single question\n"
                "  [green]scribe history[/green]       - Show the saved conversation\n"
                "  [green]scribe tools[/green]         - List available tools\n"
                "  [green]scribe reset[/green]         - Delete the saved conversation\n",
                title="Welcome to Scribe",
                border_style="blue",
            )
        )


@cli.command()
@context_file_option
def chat(settings: ScribeSettings) -> None:
    """Start an interactive conversation. Type 'exit' to quit."""
    agent = _load_agent(settings)
    console.print(
        f"[bold green]Welcome to Scribe (powered by Claude)![/bold green] "
        f"Type '{EXIT_COMMAND}' to quit."
    )

    try:
        while True:
            try:
                line = console.input("[bold cyan]> [/bold cyan]")
            except EOFError:
                break
            user_input = line.strip()
            if user_input == EXIT_COMMAND:
                break
            if not user_input:
                continue
            _run_turn(agent, user_input)
    except KeyboardInterrupt:
        console.print()
    finally:
        agent.save()
        console.print(f"[dim]Conversation saved to {settings.context_file}[/dim]")


@cli.command()
@click.argument("prompt")
@context_file_option
def ask(prompt: str, settings: ScribeSettings) -> None:
    """Ask a single question and save the conversation."""
    agent = _load_agent(settings)
    try:
        ok = _run_turn(agent, prompt)
    finally:
        agent.save()
    if not ok:
        sys.exit(1)


@cli.command()
@click.option("--limit", "-n", default=0, help="Show only the last N messages")
@context_file_option
def history(limit: int, settings: ScribeSettings) -> None:
    """Show the saved conversation."""
    store = ConversationStore(settings.context_file)
    try:
        messages = store.load()
    except ConversationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

    if not messages:
        console.print("[yellow]No saved conversation. Start one with 'scribe chat'.[/yellow]")
        return

    rows = list(enumerate(messages, 1))
    if limit > 0:
        rows = rows[-limit:]

    table = Table(title=f"Conversation ({len(messages)} messages)")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Role", style="cyan")
    table.add_column("Content", style="white")

    role_styles = {"user": "green", "assistant": "blue", "tool": "magenta", "system": "dim"}
    for index, message in rows:
        role = message.role.value
        style = role_styles[role]
        table.add_row(str(index), f"[{style}]{role}[/{style}]", escape(message.content))

    console.print(table)


@cli.command()
@context_file_option
def tools(settings: ScribeSettings) -> None:
    """List the tools the model can use."""
    registry = build_default_registry(
        search_root=settings.search_root,
        strict_line_range=settings.strict_line_range,
    )

    table = Table(title="Available Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description", style="white")
    for tool in registry:
        table.add_row(tool.name, tool.description)

    console.print(table)


@cli.command()
@context_file_option
def reset(settings: ScribeSettings) -> None:
    """Delete the saved conversation."""
    store = ConversationStore(settings.context_file)
    if store.clear():
        console.print(f"[green]Deleted {settings.context_file}[/green]")
    else:
        console.print("[dim]No saved conversation to delete.[/dim]")


if __name__ == "__main__":
    cli()
