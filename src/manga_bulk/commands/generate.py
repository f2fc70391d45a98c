"""Generate command implementation."""

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from manga_bulk.core.extractor import ExtractionPatterns
from manga_bulk.core.scanner import scan_directory
from manga_bulk.core.template_builder import BuildResult, build_manifest, write_manifest
from manga_bulk.models.manifest import UNSET, GroupDefaults, ManifestEntry

PREVIEW_ROWS = 20


def display_template(entries: list[ManifestEntry], console: Console) -> None:
    """Show the first rows of a generated template."""
    table = Table(title="Upload Template", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=5)
    table.add_column("Vol", justify="right")
    table.add_column("Ch", justify="right", style="green")
    table.add_column("Title", style="white")
    table.add_column("File", style="dim")

    for i, entry in enumerate(entries[:PREVIEW_ROWS]):
        table.add_row(
            str(i + 1),
            str(entry.volume) if entry.volume != UNSET else "-",
            entry.chapter,
            escape(entry.title),
            escape(Path(entry.file).name),
        )
    console.print(table)
    if len(entries) > PREVIEW_ROWS:
        console.print(f"[dim]... and {len(entries) - PREVIEW_ROWS} more[/]")


def execute_generate(
    directory: Path,
    template: Path,
    volume_pattern: str | None,
    chapter_pattern: str | None,
    title_pattern: str | None,
    defaults: GroupDefaults,
    extensions: list[str],
    quiet: bool,
    console: Console,
) -> BuildResult:
    """Execute the generate command."""
    # Compile everything before touching the disk
    patterns = ExtractionPatterns.compile(
        volume=volume_pattern, chapter=chapter_pattern, title=title_pattern
    )
    if not quiet:
        for name, pattern in (
            ("volume", patterns.volume),
            ("chapter", patterns.chapter),
            ("title", patterns.title),
        ):
            if pattern is not None:
                console.print(f"[dim]Using {name} pattern:[/] {escape(pattern.pattern)}")

    if not quiet:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task(f"Scanning {directory}...", total=None)
            files = scan_directory(directory, extensions)
    else:
        files = scan_directory(directory, extensions)

    result = build_manifest(files, patterns, defaults, root=directory)
    write_manifest(template, result.entries)

    if not quiet:
        console.print()
        if result.entries:
            display_template(result.entries, console)
        else:
            console.print(f"[yellow]No archives found in {escape(str(directory))}[/]")

        for warning in result.warnings:
            console.print(f"[yellow]⚠ {escape(warning)}[/]")

        console.print()
        console.print(
            Panel(
                f"[green]Template generation complete![/]\n\n"
                f"[dim]Entries:[/] {len(result.entries)}\n"
                f"[dim]Template:[/] {escape(str(template))}\n\n"
                "Review the template and fill in missing fields before uploading.",
                title="Done",
                border_style="green",
            )
        )

    return result
