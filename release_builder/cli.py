"""CLI interface for the release builder."""

import signal
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .builders import client_build_command, server_build_command
from .config import Settings, load_settings
from .exceptions import ConfigurationError, ReleaseError
from .logging_config import get_logger, setup_logging
from .orchestrator import STEPS, run_release

logger = get_logger("release_builder.cli")

EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="release-builder",
    help="Build the client and server in release mode and assemble dist/",
)
console = Console()


def settings_from_options(
    public_url: Optional[str] = None,
    project_root: Optional[Path] = None,
) -> Settings:
    """Build settings from the environment plus command line overrides."""
    overrides = {}
    if public_url is not None:
        overrides["public_url"] = public_url
    if project_root is not None:
        overrides["project_root"] = project_root

    try:
        return load_settings(**overrides)
    except ConfigurationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=EXIT_FAILURE)


def _raise_interrupt(signum, frame):
    raise KeyboardInterrupt


@contextmanager
def terminate_as_interrupt():
    """Treat SIGTERM like Ctrl+C so a running build tool gets killed."""
    if sys.platform == "win32":
        yield
        return

    previous = signal.signal(signal.SIGTERM, _raise_interrupt)
    try:
        yield
    finally:
        signal.signal(signal.SIGTERM, previous)


def print_step(number: int, name: str) -> None:
    """Print a step indicator."""
    console.print(f"\n[bold blue][Step {number}/{len(STEPS)}][/bold blue] {name}")


@app.command()
def build(
    public_url: Optional[str] = typer.Option(
        None,
        "--public-url",
        "-p",
        help="Public base path the client bundle is served under (e.g. /app/)",
    ),
    project_root: Optional[Path] = typer.Option(
        None,
        "--project-root",
        "-C",
        help="Repository root containing the client and server projects",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: bool = typer.Option(False, "--log-file", help="Also write a log file"),
):
    """Build client and server, then assemble the distribution directory."""
    settings = settings_from_options(public_url, project_root)
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_to_file=log_file or settings.log_to_file,
        log_dir=settings.log_path,
    )

    console.print(f"[bold]Release build[/bold] in {settings.root_path}")
    console.print(f"Public URL: [cyan]{settings.public_url}[/cyan]")

    try:
        with terminate_as_interrupt():
            result = run_release(settings, on_step=print_step)
    except ReleaseError as e:
        logger.error(f"Release failed: {e}")
        console.print(f"\n[bold red]Release failed:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=EXIT_FAILURE)
    except KeyboardInterrupt:
        logger.warning("Release interrupted")
        console.print("\n[bold yellow]Release interrupted[/bold yellow]")
        raise typer.Exit(code=EXIT_INTERRUPTED)

    table = Table(title="Release Complete", show_header=False)
    table.add_column("Item", style="bold")
    table.add_column("Value")
    table.add_row("Distribution", str(result.distribution.path))
    table.add_row("Files", str(result.distribution.file_count))
    table.add_row("Size", f"{result.distribution.total_mb:.2f} MB")
    table.add_row("Server artifact", str(result.server_artifact))
    table.add_row("Duration", f"{result.duration_seconds:.1f}s")

    console.print()
    console.print(table)


@app.command()
def config(
    public_url: Optional[str] = typer.Option(None, "--public-url", "-p"),
    project_root: Optional[Path] = typer.Option(None, "--project-root", "-C"),
):
    """Show the resolved configuration and the commands a build would run."""
    settings = settings_from_options(public_url, project_root)

    table = Table(title="Release Configuration", show_header=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    table.add_row("Project root", str(settings.root_path))
    table.add_row("Public URL", settings.public_url)
    table.add_row("Client project", str(settings.client_path))
    table.add_row("Client output", str(settings.client_output_path))
    table.add_row("Server project", str(settings.server_path))
    table.add_row("Server artifact", str(settings.server_artifact_path))
    table.add_row("Distribution", str(settings.dist_path))
    console.print(table)

    console.print("\n[bold]Commands:[/bold]")
    console.print(f"  {' '.join(client_build_command(settings))}", markup=False)
    console.print(f"  {' '.join(server_build_command(settings))}", markup=False)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
