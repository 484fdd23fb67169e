"""CLI entry point for thought."""

import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.table import Table

from thought import __version__
from thought.cli.constants import ExitCodes
from thought.cli.session import setup_logging
from thought.cli.utils import get_console
from thought.config import (
    ConfigurationError,
    ThoughtSettings,
    get_config_path,
    load_config,
    merge_with_env,
    save_config,
)
from thought.config.manager import deep_merge
from thought.exceptions import ThoughtError
from thought.workspace.guard import is_critical_path
from thought.workspace.paths import PathResolver

app = typer.Typer(help="thought - workspace-scoped file operations over MCP")

console = get_console()
# stdout belongs to the stdio transport while serving
err_console = get_console(stderr=True)

logger = logging.getLogger(__name__)

ConfigOption = typer.Option(None, "--config", "-c", help="Path to settings file")


def _load_settings(config_path: Path | None) -> ThoughtSettings:
    try:
        return merge_with_env(load_config(config_path))
    except ConfigurationError as e:
        err_console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(ExitCodes.GENERAL_ERROR) from e


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version_flag: bool = typer.Option(False, "--version", help="Show version"),
) -> None:
    """thought - turn notes into todolists and work through them with real file operations.

    \b
    Examples:
        thought serve                                # Serve MCP over stdio
        thought serve --transport sse --port 8000    # Serve MCP over SSE
        thought config show                          # Show effective settings
        thought check-path /home/me/project .env     # Check a path before using it
    """
    if version_flag:
        console.print(f"thought version {__version__}")
        raise typer.Exit(ExitCodes.SUCCESS)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command("serve")
def serve_command(
    transport: str = typer.Option(
        None, "--transport", "-t", help="Transport (stdio, sse, streamable-http)"
    ),
    host: str = typer.Option(None, "--host", help="Bind host for HTTP transports"),
    port: int = typer.Option(None, "--port", help="Bind port for HTTP transports"),
    log_level: str = typer.Option(None, "--log-level", help="Log level (debug, info, ...)"),
    config_path: Path = ConfigOption,
) -> None:
    """Start the MCP server."""
    from thought.server import run_server

    settings = _load_settings(config_path)

    overrides = {
        key: value
        for key, value in {
            "transport": transport,
            "host": host,
            "port": port,
            "log_level": log_level,
        }.items()
        if value is not None
    }
    if overrides:
        try:
            settings = ThoughtSettings(**deep_merge(settings.model_dump(), {"server": overrides}))
        except ValidationError as e:
            err_console.print(f"[red]Invalid option:[/red] {e}")
            raise typer.Exit(ExitCodes.GENERAL_ERROR) from e

    log_file = setup_logging(settings)
    if settings.server.transport != "stdio":
        err_console.print(
            f"[bold]thought[/bold] serving over {settings.server.transport} on "
            f"{settings.server.host}:{settings.server.port} [dim](log: {log_file})[/dim]"
        )

    try:
        run_server(settings)
    except KeyboardInterrupt:
        logger.info("Server interrupted")
        raise typer.Exit(ExitCodes.INTERRUPTED) from None


@app.command("check-path")
def check_path_command(
    workspace_root: str = typer.Argument(..., help="Absolute workspace root"),
    path: str = typer.Argument(..., help="Path to check, relative or absolute"),
    config_path: Path = ConfigOption,
) -> None:
    """Resolve a path the way the tools do and report whether it is critical."""
    settings = _load_settings(config_path)
    resolver = PathResolver(settings.workspace.allow_escape_workspace)

    try:
        resolved = resolver.resolve(workspace_root, path)
    except ThoughtError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(ExitCodes.GENERAL_ERROR) from e

    console.print(f"[bold]Resolved:[/bold] {resolved}")
    if is_critical_path(path):
        console.print("[red]✗ Critical path - tools will refuse to operate on it[/red]")
        raise typer.Exit(ExitCodes.GENERAL_ERROR)
    console.print("[green]✓ Not a critical path[/green]")


config_app = typer.Typer(help="Manage thought configuration")
app.add_typer(config_app, name="config")


@config_app.callback(invoke_without_command=True)
def config_callback(ctx: typer.Context) -> None:
    """Config command callback - shows help if no subcommand given."""
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@config_app.command("show")
def config_show_command(
    config_path: Path = ConfigOption,
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
) -> None:
    """Display current effective configuration (file + environment)."""
    path = config_path or get_config_path()
    settings = _load_settings(config_path)

    if as_json:
        console.print_json(settings.model_dump_json())
        return

    source = str(path) if path.exists() else f"{path} [dim](not found, using defaults)[/dim]"
    console.print(f"[bold cyan]Configuration[/bold cyan] {source}\n")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting")
    table.add_column("Value")
    table.add_row("server.name", settings.server.name)
    table.add_row("server.transport", settings.server.transport)
    table.add_row("server.host", settings.server.host)
    table.add_row("server.port", str(settings.server.port))
    table.add_row("server.log_level", settings.server.log_level)
    table.add_row("server.data_dir", settings.server.data_dir)
    table.add_row(
        "workspace.allow_escape_workspace", str(settings.workspace.allow_escape_workspace)
    )
    table.add_row("workspace.backup_suffix", settings.workspace.backup_suffix)
    table.add_row(
        "project.tool_directories", ", ".join(settings.project.tool_directories) or "-"
    )
    console.print(table)


@config_app.command("init")
def config_init_command(
    config_path: Path = ConfigOption,
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """Write a default settings file."""
    path = config_path or get_config_path()

    if path.exists() and not force:
        console.print(f"[yellow]Configuration file already exists at {path}[/yellow]")
        console.print("[dim]Use --force to overwrite it.[/dim]")
        raise typer.Exit(ExitCodes.GENERAL_ERROR)

    try:
        save_config(ThoughtSettings(), path)
    except ConfigurationError as e:
        err_console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(ExitCodes.GENERAL_ERROR) from e

    console.print(f"[green]✓[/green] Configuration written to {path}")
