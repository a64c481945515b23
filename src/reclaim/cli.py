"""CLI interface for reclaim."""

import logging
from typing import Optional

import typer
from rich.logging import RichHandler

from reclaim import __version__
from reclaim.cleaner import DELETE_OPERATIONS, run_batch_delete
from reclaim.commands import invoke
from reclaim.config import load_settings
from reclaim.display import (
    confirm_action,
    console,
    show_app_data,
    show_batch_summary,
    show_caches,
    show_cleanup_progress,
    show_delete_progress,
    show_developer_caches,
    show_duplicates,
    show_large_files,
    show_orphans,
    show_scanning_progress,
    show_status,
)
from reclaim.models import BatchProgress, CommandResult

# Create Typer app
app = typer.Typer(
    name="reclaim",
    help="Find and safely remove reclaimable disk space on macOS",
    add_completion=False,
)


def setup_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"reclaim version {__version__}")
        raise typer.Exit()


def _run(description: str, command: str, **params) -> CommandResult:
    """Invoke a command behind a spinner and exit on failure."""
    with show_scanning_progress() as progress:
        progress.add_task(description, total=None)
        result = invoke(command, **params)

    if not result.ok:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(1)
    return result


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    """reclaim - find caches, leftovers, large files and duplicates."""
    setup_logging(verbose)
    if ctx.invoked_subcommand is None:
        ctx.invoke(status)


@app.command()
def status() -> None:
    """Show host and disk usage summary."""
    result = invoke("get_system_info")
    if not result.ok:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(1)
    show_status(result.data)


@app.command()
def caches(
    user_only: bool = typer.Option(False, "--user", help="Only scan the user cache folder"),
) -> None:
    """List cache folders and whether they are safe to delete."""
    command = "scan_user_caches" if user_only else "scan_all_caches"
    result = _run("Scanning caches...", command)
    show_caches(result.data)


@app.command()
def dev() -> None:
    """List developer tool caches."""
    is_developer = invoke("is_developer_user").data
    result = _run("Scanning developer caches...", "scan_developer_caches")
    show_developer_caches(result.data, bool(is_developer))


@app.command()
def orphans() -> None:
    """List data left behind by uninstalled applications."""
    result = _run("Matching app data against installed apps...", "scan_orphan_files")
    show_orphans(result.data)


@app.command(name="app-data")
def app_data(
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=1, help="Maximum folders to list"),
) -> None:
    """List the largest application data folders."""
    result = _run("Measuring app data...", "scan_large_app_data", limit=limit)
    show_app_data(result.data)


@app.command()
def large(
    directory: Optional[str] = typer.Argument(None, help="Directory to scan (default: common folders)"),
    min_size: Optional[int] = typer.Option(None, "--min-size", "-m", help="Minimum size in MB"),
) -> None:
    """List large files."""
    min_size_mb = load_settings().default_large_file_mb if min_size is None else min_size
    if directory:
        result = _run(
            f"Scanning {directory}...", "scan_large_files", directory=directory, min_size_mb=min_size_mb
        )
    else:
        result = _run("Scanning common folders...", "scan_common_large_files", min_size_mb=min_size_mb)
    show_large_files(result.data)


@app.command()
def duplicates(
    directory: Optional[str] = typer.Argument(None, help="Directory to scan (default: common folders)"),
    min_size: Optional[int] = typer.Option(None, "--min-size", "-m", help="Minimum size in MB"),
) -> None:
    """List groups of identical files."""
    min_size_mb = load_settings().default_duplicate_mb if min_size is None else min_size
    if directory:
        result = _run(
            f"Hashing files in {directory}...", "scan_duplicates", directory=directory, min_size_mb=min_size_mb
        )
    else:
        result = _run("Hashing files...", "scan_common_duplicates", min_size_mb=min_size_mb)
    show_duplicates(result.data)


@app.command()
def clean(
    kind: str = typer.Argument(..., help=f"What to clean: {', '.join(DELETE_OPERATIONS)}"),
    paths: list[str] = typer.Argument(..., help="Paths to delete"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompts"),
) -> None:
    """Delete paths one by one, reporting each result."""
    operation = DELETE_OPERATIONS.get(kind)
    if operation is None:
        console.print(f"[red]Unknown kind: {kind}[/red]")
        console.print("\nAvailable kinds:")
        for name in DELETE_OPERATIONS:
            console.print(f"  • {name}")
        raise typer.Exit(1)

    console.print(f"[bold]Cleaning {len(paths)} {kind} item(s)[/bold]")
    if not yes:
        if not confirm_action("Proceed with cleanup?"):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    with show_cleanup_progress() as progress:
        task = progress.add_task("Cleaning...", total=len(paths))

        def on_progress(event: BatchProgress) -> None:
            progress.update(task, completed=event.index, description=f"Cleaning {event.item}...")
            show_delete_progress(event)

        summary = run_batch_delete(paths, operation, progress_callback=on_progress)

    show_batch_summary(summary)
    if summary.fail_count:
        raise typer.Exit(1)


@app.command()
def reveal(path: str = typer.Argument(..., help="Path to show")) -> None:
    """Show a path in the file browser."""
    result = invoke("reveal_in_finder", path=path)
    if not result.ok:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
