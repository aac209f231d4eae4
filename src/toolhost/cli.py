"""CLI entry point for toolhost."""

import asyncio
import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from toolhost import __version__
from toolhost.config import resolve_settings
from toolhost.config.schema import HostSettings
from toolhost.dispatcher import ToolCall, ToolDispatcher
from toolhost.exceptions import ConfigurationError
from toolhost.logging_config import setup_logging

app = typer.Typer(help="toolhost - tool execution server for coding agents")

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


class ExitCodes:
    """Standard exit codes."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    CONFIG_ERROR = 2
    INTERRUPTED = 130


def _load_settings(config: Path | None, cwd: Path | None) -> HostSettings:
    try:
        settings = resolve_settings(config_path=config, working_directory=cwd)
    except ConfigurationError as e:
        err_console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(ExitCodes.CONFIG_ERROR)
    if not settings.working_directory.is_dir():
        err_console.print(
            f"[red]Working directory does not exist:[/red] {settings.working_directory}"
        )
        raise typer.Exit(ExitCodes.CONFIG_ERROR)
    return settings


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version_flag: bool = typer.Option(False, "--version", help="Show version"),
) -> None:
    """toolhost - file, search, shell and web tools for a coding agent.

    \b
    Examples:
        toolhost serve                          # Serve tools over MCP stdio
        toolhost serve --cwd ~/src/project      # Serve a specific project
        toolhost tools                          # Show the tool catalogue
        toolhost call LS                        # Run one tool call
        toolhost call Read --args '{"file_path": "README.md"}'
    """
    if version_flag:
        console.print(f"toolhost version {__version__}")
        raise typer.Exit(ExitCodes.SUCCESS)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def serve(
    config: Path = typer.Option(None, "--config", help="Path to settings.json"),
    cwd: Path = typer.Option(None, "--cwd", help="Working directory for tool calls"),
) -> None:
    """Serve the tool catalogue over MCP stdio."""
    from toolhost.server import ToolHostServer

    settings = _load_settings(config, cwd)
    setup_logging(settings)

    try:
        asyncio.run(ToolHostServer(settings).run())
    except KeyboardInterrupt:
        raise typer.Exit(ExitCodes.INTERRUPTED)


@app.command()
def tools(
    config: Path = typer.Option(None, "--config", help="Path to settings.json"),
) -> None:
    """Show the tool catalogue."""
    settings = _load_settings(config, None)
    dispatcher = ToolDispatcher(settings)

    table = Table(title="toolhost tools", show_header=True, header_style="bold cyan")
    table.add_column("Tool", style="bold")
    table.add_column("Required")
    table.add_column("Description")
    for descriptor in dispatcher.descriptors():
        table.add_row(
            descriptor.name.value,
            ", ".join(descriptor.required) or "-",
            descriptor.description,
        )
    console.print(table)


@app.command()
def call(
    name: str = typer.Argument(..., help="Tool name, e.g. Read"),
    args: str = typer.Option("{}", "--args", help="Tool arguments as a JSON object"),
    config: Path = typer.Option(None, "--config", help="Path to settings.json"),
    cwd: Path = typer.Option(None, "--cwd", help="Working directory for the call"),
) -> None:
    """Run a single tool call and print its result."""
    try:
        arguments = json.loads(args)
    except json.JSONDecodeError as e:
        err_console.print(f"[red]--args is not valid JSON:[/red] {e}")
        raise typer.Exit(ExitCodes.GENERAL_ERROR)
    if not isinstance(arguments, dict):
        err_console.print("[red]--args must be a JSON object[/red]")
        raise typer.Exit(ExitCodes.GENERAL_ERROR)

    settings = _load_settings(config, cwd)
    setup_logging(settings)
    dispatcher = ToolDispatcher(settings)

    result = asyncio.run(dispatcher.dispatch(ToolCall(name=name, arguments=arguments)))
    # Tool output is printed verbatim: no markup, no wrapping
    typer.echo(result.text)
    if result.is_error:
        raise typer.Exit(ExitCodes.GENERAL_ERROR)


if __name__ == "__main__":
    app()
