"""Rich terminal display for reclaim."""

from datetime import datetime

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from reclaim.models import (
    BatchProgress,
    BatchSummary,
    CacheEntry,
    CacheType,
    DeveloperCache,
    DuplicateGroup,
    LargeAppData,
    LargeFile,
    OrphanFile,
    SystemInfo,
    format_size,
)

console = Console()


def cache_type_label(cache_type: CacheType) -> str:
    """Get styled label for a cache type."""
    labels = {
        CacheType.BROWSER: "[cyan]Browser[/cyan]",
        CacheType.DEVELOPER: "[magenta]Developer[/magenta]",
        CacheType.SYSTEM: "[red]System[/red]",
        CacheType.APPLICATION: "[blue]Application[/blue]",
        CacheType.UNKNOWN: "[dim]Unknown[/dim]",
    }
    return labels.get(cache_type, "?")


def safe_icon(safe: bool) -> str:
    return "[green]✓[/green]" if safe else "[yellow]![/yellow]"


def _usage_style(used_percent: float) -> tuple[str, str]:
    """Color and status word for a disk usage percentage."""
    if used_percent >= 90:
        return "red", "CRITICAL"
    if used_percent >= 75:
        return "yellow", "WARNING"
    return "green", "OK"


def show_status(info: SystemInfo) -> None:
    """Display host and disk status."""
    disk = info.disk_usage
    color, status = _usage_style(disk.used_percentage)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Host", f"{info.username}@{info.hostname}")
    table.add_row("System", info.os_version)
    table.add_row("Home", info.home_directory)
    table.add_row("Capacity", f"{disk.total_gb:.0f} GB")
    table.add_row("In use", f"{disk.used_gb:.0f} GB ([{color}]{disk.used_percentage:.0f}%[/{color}])")
    table.add_row("Available", f"[bold]{disk.free_gb:.0f} GB[/bold]")

    console.print(Panel(table, title=f"Disk Status: [{color}]{status}[/{color}]", expand=False))


def show_caches(entries: list[CacheEntry]) -> None:
    """Display cache scan results."""
    if not entries:
        console.print("[yellow]No caches found.[/yellow]")
        return

    table = Table(title="Caches", show_header=True, header_style="bold")
    table.add_column("", width=3)
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Size", justify="right")
    table.add_column("Description")

    for entry in entries:
        table.add_row(
            safe_icon(entry.is_safe_to_delete),
            entry.name,
            cache_type_label(entry.cache_type),
            format_size(entry.size),
            entry.description,
        )

    console.print(table)
    safe_total = sum(e.size for e in entries if e.is_safe_to_delete)
    console.print(f"[green]Total safe to clean: {format_size(safe_total)}[/green]")


def show_developer_caches(caches: list[DeveloperCache], is_developer: bool) -> None:
    """Display developer cache scan results."""
    if not is_developer:
        console.print("[dim]No developer tooling detected.[/dim]")

    table = Table(title="Developer Caches", show_header=True, header_style="bold magenta")
    table.add_column("", width=3)
    table.add_column("Name", style="magenta")
    table.add_column("Size", justify="right")
    table.add_column("Path")

    for cache in caches:
        if not cache.exists:
            continue
        table.add_row(safe_icon(cache.safe_to_clean), cache.name, format_size(cache.size), cache.path)

    console.print(table)
    missing = sum(1 for c in caches if not c.exists)
    if missing:
        console.print(f"[dim]{missing} known cache locations not present[/dim]")


def show_orphans(orphans: list[OrphanFile]) -> None:
    """Display leftover application data."""
    if not orphans:
        console.print("[green]No leftover files found.[/green]")
        return

    table = Table(title="Leftover Files", show_header=True, header_style="bold yellow")
    table.add_column("Name", style="yellow")
    table.add_column("Location")
    table.add_column("Possible App")
    table.add_column("Size", justify="right")

    for orphan in orphans:
        table.add_row(
            orphan.name,
            orphan.orphan_type.value,
            orphan.possible_app_name,
            format_size(orphan.size),
        )

    console.print(table)
    console.print(f"[yellow]Total: {format_size(sum(o.size for o in orphans))}[/yellow]")


def show_app_data(folders: list[LargeAppData]) -> None:
    """Display the largest application data folders."""
    table = Table(title="Large App Data", show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Location")
    table.add_column("Size", justify="right")

    for folder in folders:
        table.add_row(folder.name, folder.location, format_size(folder.size))

    console.print(table)


def show_large_files(files: list[LargeFile]) -> None:
    """Display large files."""
    if not files:
        console.print("[green]No large files found.[/green]")
        return

    table = Table(title="Large Files", show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Size", justify="right")
    table.add_column("Modified")
    table.add_column("Path")

    for f in files:
        modified = (
            datetime.fromtimestamp(f.last_modified).strftime("%Y-%m-%d")
            if f.last_modified is not None
            else "-"
        )
        table.add_row(f.name, f.category.value, format_size(f.size), modified, f.path)

    console.print(table)
    console.print(f"[bold]{len(files)} large file(s), {format_size(sum(f.size for f in files))}[/bold]")


def show_duplicates(groups: list[DuplicateGroup]) -> None:
    """Display duplicate groups; the first file of each group is kept."""
    if not groups:
        console.print("[green]No duplicates found.[/green]")
        return

    for group in groups:
        lines = [f"[green]keep[/green]  {group.original.path}"]
        lines += [f"[red]dup[/red]   {f.path}" for f in group.wasted_files]
        console.print(
            Panel(
                "\n".join(lines),
                title=f"{format_size(group.file_size)} each, {format_size(group.total_wasted)} wasted",
                border_style="blue",
            )
        )

    total = sum(g.total_wasted for g in groups)
    console.print(f"[bold]Total wasted: {format_size(total)}[/bold]")


def show_delete_progress(progress: BatchProgress) -> None:
    """Display result of a single delete inside a batch."""
    result = progress.result
    prefix = f"[{progress.index}/{progress.total}]"
    if result.success:
        console.print(
            f"  {prefix} [green]✓[/green] {escape(progress.item)}: {format_size(result.bytes_freed)} {result.outcome.value}"
        )
    else:
        console.print(f"  {prefix} [red]✗[/red] {escape(progress.item)}: {escape(result.error or '')}")


def show_batch_summary(summary: BatchSummary) -> None:
    """Display batch delete summary."""
    console.print()
    if summary.fail_count == 0:
        console.print("[bold green]Cleanup Complete![/bold green]")
    elif summary.success_count > 0:
        console.print("[bold yellow]Partial Cleanup[/bold yellow]")
    else:
        console.print("[bold red]Cleanup Failed[/bold red]")

    table = Table(show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Space freed", format_size(summary.bytes_freed))
    table.add_row("Items cleaned", str(summary.success_count))
    if summary.fail_count > 0:
        table.add_row("[red]Failed[/red]", str(summary.fail_count))
    if summary.cancelled:
        table.add_row("[yellow]Cancelled[/yellow]", "yes")

    console.print(table)


def show_scanning_progress() -> Progress:
    """Create a spinner for a scan that reports no intermediate progress."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def show_cleanup_progress() -> Progress:
    """Create and return a progress bar for cleanup."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        console=console,
    )


def confirm_action(message: str) -> bool:
    """Ask for confirmation."""
    from rich.prompt import Confirm

    return Confirm.ask(message)
