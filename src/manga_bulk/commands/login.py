"""Login command implementation."""

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from manga_bulk.core.transport import RemoteSession
from manga_bulk.errors import MissingCredentialsError


def execute_login(
    session: RemoteSession,
    username: str | None,
    password: str | None,
    console: Console,
) -> None:
    """Execute the login command."""
    if not username:
        raise MissingCredentialsError("username")
    if not password:
        raise MissingCredentialsError("password")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(f'Logging in as "{username}"...', total=None)
        session.login(username, password)

    console.print("[green]Login successful![/]")
