"""Main CLI application."""

import logging
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from manga_bulk.cache.manager import GroupCacheManager
from manga_bulk.config import AppConfig, load_config
from manga_bulk.core.scanner import use_system_collation
from manga_bulk.core.transport import RemoteSession
from manga_bulk.errors import (
    DirectoryScanError,
    ExitCode,
    InvalidLanguageError,
    InvalidGroupIdError,
    InvalidResumePositionError,
    InvalidWorkIdError,
    MangaBulkError,
    TemplateAccessError,
)
from manga_bulk.models.manifest import GroupDefaults

app = typer.Typer(
    name="manga-bulk",
    help="Generate upload templates from chapter archives and bulk-upload them.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()

# Group subcommand group
group_app = typer.Typer(help="Search for groups inside a local cache", no_args_is_help=True)
app.add_typer(group_app, name="group")


def _version_callback(value: bool) -> None:
    if value:
        try:
            console.print(version("manga-bulk"))
        except PackageNotFoundError:
            console.print("unknown")
        raise typer.Exit()


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def fail(error: MangaBulkError) -> typer.Exit:
    """Print an error and build the matching exit."""
    console.print(f"[red]Error: {escape(error.message)}[/]")
    return typer.Exit(int(error.exit_code))


def _config(ctx: typer.Context) -> AppConfig:
    return ctx.obj


def _session(config: AppConfig) -> RemoteSession:
    return RemoteSession(
        base_url=config.base_url,
        cookie_file=config.cookie_file,
        user_agent=config.user_agent,
        timeout=config.request_timeout,
    )


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            help="Path to config.json (default: ./config.json)",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-V", help="Show debug logging"),
    ] = False,
    show_version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Generate upload templates from chapter archives and bulk-upload them.

    Workflow: (1) generate a template, (2) review and fill in missing fields,
    (3) log in, (4) upload.
    """
    setup_logging(verbose)
    use_system_collation()
    ctx.obj = load_config(config_path)


@app.command()
def generate(
    ctx: typer.Context,
    directory: Annotated[
        Optional[Path],
        typer.Option(
            "--directory",
            "-d",
            help="Directory to scan for archives",
        ),
    ] = None,
    template: Annotated[
        Optional[Path],
        typer.Option(
            "--template",
            "-t",
            help="Where to write the template (e.g. /path/template.json)",
        ),
    ] = None,
    volume_regex: Annotated[
        Optional[str],
        typer.Option(
            "--volume-regex",
            "-v",
            help="Case-insensitive pattern capturing the volume number",
        ),
    ] = None,
    chapter_regex: Annotated[
        Optional[str],
        typer.Option(
            "--chapter-regex",
            "-c",
            help="Case-insensitive pattern capturing the chapter number",
        ),
    ] = None,
    title_regex: Annotated[
        Optional[str],
        typer.Option(
            "--title-regex",
            "-n",
            help="Case-insensitive pattern; its last group is the title (no default)",
        ),
    ] = None,
    group: Annotated[
        Optional[str],
        typer.Option(
            "--group",
            "-g",
            help="Up to three comma-separated group ids (e.g. 657,12)",
        ),
    ] = None,
    language: Annotated[
        Optional[str],
        typer.Option(
            "--language",
            "-l",
            help="Language id (default: 1, English)",
        ),
    ] = None,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress progress output"),
    ] = False,
) -> None:
    """Generate an upload template from a directory of archives."""
    config = _config(ctx)
    try:
        if directory is None:
            raise DirectoryScanError("No directory to scan has been specified")
        if template is None:
            raise TemplateAccessError("No template file has been specified")

        try:
            language_id = int(language) if language is not None else config.language
        except ValueError:
            raise InvalidLanguageError(f"Invalid language id: {language}") from None
        try:
            defaults = GroupDefaults.from_option(group, language=language_id)
        except ValueError:
            raise InvalidGroupIdError(
                f"Invalid group id in --group: {group} (expected e.g. 657,12)"
            ) from None

        from manga_bulk.commands.generate import execute_generate

        execute_generate(
            directory=directory,
            template=template,
            volume_pattern=volume_regex or config.volume_pattern,
            chapter_pattern=chapter_regex or config.chapter_pattern,
            title_pattern=title_regex or config.title_pattern,
            defaults=defaults,
            extensions=config.archive_extensions,
            quiet=quiet,
            console=console,
        )
    except MangaBulkError as e:
        raise fail(e)


@app.command()
def login(
    ctx: typer.Context,
    username: Annotated[
        Optional[str],
        typer.Option("--username", "-u", help="Account name (default: from config)"),
    ] = None,
    password: Annotated[
        Optional[str],
        typer.Option("--password", "-p", help="Account password (default: from config)"),
    ] = None,
) -> None:
    """Log in and store the session cookies."""
    config = _config(ctx)
    try:
        from manga_bulk.commands.login import execute_login

        execute_login(
            session=_session(config),
            username=username or config.username,
            password=password or config.password,
            console=console,
        )
    except MangaBulkError as e:
        raise fail(e)


@app.command()
def upload(
    ctx: typer.Context,
    template: Annotated[
        Optional[str],
        typer.Option(
            "--template",
            "-t",
            help="Template to upload; a pattern containing * uploads every match",
        ),
    ] = None,
    manga: Annotated[
        Optional[str],
        typer.Option("--manga", "-m", help="Id of the manga (e.g. 412)"),
    ] = None,
    resume: Annotated[
        Optional[str],
        typer.Option(
            "--resume",
            "-r",
            help="1-based template position to start at (default: 1)",
        ),
    ] = None,
) -> None:
    """Upload chapters according to a template. Log in first."""
    config = _config(ctx)
    try:
        try:
            work_id = int(manga) if manga is not None else None
        except ValueError:
            work_id = None
        if work_id is None:
            raise InvalidWorkIdError("No valid manga id was specified")
        if not template:
            raise TemplateAccessError("No template file has been specified")
        try:
            start = int(resume) if resume is not None else 1
        except ValueError:
            raise InvalidResumePositionError(f"Invalid resume position: {resume}") from None
        if start < 1:
            raise InvalidResumePositionError("Resume position must be 1 or greater")

        from manga_bulk.commands.upload import execute_upload

        results = execute_upload(
            session=_session(config),
            template=template,
            work_id=work_id,
            resume=start,
            fallback_group_id=config.fallback_group_id,
            console=console,
        )
    except MangaBulkError as e:
        raise fail(e)

    if any(not r.done for r in results):
        raise typer.Exit(int(ExitCode.UPLOAD_HALTED))


@group_app.command("update")
def group_update(ctx: typer.Context) -> None:
    """Rebuild the group cache (must be logged in or the list is empty)."""
    config = _config(ctx)
    try:
        from manga_bulk.commands.group import execute_group_update

        execute_group_update(
            session=_session(config),
            cache=GroupCacheManager(config.group_cache_file),
            console=console,
        )
    except MangaBulkError as e:
        raise fail(e)
    except OSError as e:
        console.print(f"[red]Error: Failed to write group cache: {escape(str(e))}[/]")
        raise typer.Exit(int(ExitCode.SCAN_FAILED))


@group_app.command("search")
def group_search(
    ctx: typer.Context,
    term: Annotated[
        list[str],
        typer.Argument(help="Group name to look for"),
    ],
) -> None:
    """Search cached groups by name."""
    config = _config(ctx)
    search = " ".join(term).strip()
    if not search:
        console.print("[red]Not enough search terms specified.[/]")
        raise typer.Exit(int(ExitCode.SCAN_FAILED))

    try:
        from manga_bulk.commands.group import execute_group_search

        execute_group_search(
            cache=GroupCacheManager(config.group_cache_file),
            term=search,
            console=console,
        )
    except MangaBulkError as e:
        raise fail(e)


if __name__ == "__main__":
    app()
