"""Group update and search command implementations."""

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from manga_bulk.cache.manager import GroupCacheManager
from manga_bulk.core.transport import RemoteSession
from manga_bulk.models.group import GroupMatch, GroupRecord


def execute_group_update(
    session: RemoteSession,
    cache: GroupCacheManager,
    console: Console,
) -> list[GroupRecord]:
    """Rebuild the group cache from the upload page."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("Retrieving group list...", total=None)
        page = session.fetch_group_listing()

    groups = cache.update_from_listing(page)
    if not groups:
        console.print(
            "[yellow]No groups found. The list is only shown to logged in users.[/]"
        )
    console.print(f"[green]Group cache updated[/] [dim]({len(groups)} groups)[/]")
    return groups


def execute_group_search(
    cache: GroupCacheManager,
    term: str,
    console: Console,
) -> list[GroupMatch]:
    """Search the cached groups and print the best matches."""
    matches = cache.search(term)
    if not matches:
        console.print("No matches found.")
        return matches

    table = Table(
        title=f"Best matches (max. {cache.MAX_RESULTS})",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="white")
    table.add_column("Score", justify="right", style="green")
    for match in matches:
        table.add_row(str(match.group.id), escape(match.group.name), f"{match.score:.2f}")

    console.print(table)
    return matches
