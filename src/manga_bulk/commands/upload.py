"""Upload command implementation."""

import glob
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TextColumn,
    TransferSpeedColumn,
)

from manga_bulk.core.template_builder import read_manifest
from manga_bulk.core.transport import RemoteSession
from manga_bulk.core.uploader import UploadPipeline
from manga_bulk.errors import (
    InputError,
    NotAuthenticatedError,
    TemplateAccessError,
    TemplateBrokenError,
)
from manga_bulk.models.manifest import ManifestEntry
from manga_bulk.models.upload import FailureKind, PipelineResult, UploadOutcome

FAILURE_TITLES = {
    FailureKind.TRANSPORT: "Network error",
    FailureKind.PROTOCOL: "Unexpected HTTP status",
    FailureKind.REJECTED: "Rejected by server",
    FailureKind.ARCHIVE: "Archive unreadable",
    FailureKind.OTHER: "Upload failed",
}


def resolve_templates(template: str) -> list[Path]:
    """Expand a template argument. A "*" makes it a glob, sorted by path.

    Raises:
        TemplateAccessError: If a glob matches nothing
    """
    if "*" not in template:
        return [Path(template)]

    matches = sorted(glob.glob(template))
    if not matches:
        raise TemplateAccessError(f"No template files have been found for {template}")
    return [Path(m) for m in matches]


def display_failure(outcome: UploadOutcome, console: Console) -> None:
    """Explain a failed submission and how to resume."""
    lines = [
        f"[bold]{outcome.label}[/] (position {outcome.retry_position})",
        f"[dim]Reason:[/] {escape(outcome.message or '')}",
    ]
    if outcome.status_code is not None:
        lines.append(f"[dim]Status code:[/] {outcome.status_code}")
    lines += [
        "",
        f"To retry this chapter later, use [cyan]--resume {outcome.retry_position}[/]",
        f"To skip this chapter, use [cyan]--resume {outcome.skip_position}[/]",
    ]
    kind = outcome.kind or FailureKind.OTHER
    console.print(
        Panel("\n".join(lines), title=FAILURE_TITLES[kind], border_style="red")
    )


def upload_template(
    session: RemoteSession,
    template: Path,
    work_id: int,
    resume: int,
    fallback_group_id: int,
    console: Console,
) -> PipelineResult:
    """Upload every entry of one template from the resume position on."""
    manifest = read_manifest(template)
    console.print(
        f"[bold]Processing template[/] {escape(str(template))} "
        f"[dim]({len(manifest)} entries, starting at {resume})[/]"
    )

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        DownloadColumn(),
        TransferSpeedColumn(),
        console=console,
    ) as progress:
        task_id = progress.add_task("Waiting...", total=None)

        def on_submit(index: int, entry: ManifestEntry) -> None:
            progress.reset(
                task_id,
                description=f"[{index + 1}/{len(manifest)}] {entry.label}",
                total=None,
            )

        def on_bytes(sent: int, total: int) -> None:
            progress.update(task_id, completed=sent, total=total)

        def on_outcome(outcome: UploadOutcome) -> None:
            if outcome.success:
                progress.console.print(f"[green]✓[/] {outcome.label}")
            else:
                progress.console.print(f"[red]✗[/] {outcome.label}")

        pipeline = UploadPipeline(
            session,
            work_id,
            fallback_group_id=fallback_group_id,
            on_submit=on_submit,
            progress=on_bytes,
        )
        result = pipeline.run_all(
            manifest, resume, template=str(template), on_outcome=on_outcome
        )

    if result.failure is not None:
        display_failure(result.failure, console)
    else:
        console.print(f"[green]All done![/] [dim]{result.uploaded} chapter(s) uploaded[/]")
    return result


def execute_upload(
    session: RemoteSession,
    template: str,
    work_id: int,
    resume: int,
    fallback_group_id: int,
    console: Console,
) -> list[PipelineResult]:
    """Execute the upload command.

    Templates of a batch run one after another, each to completion or
    failure; a failed template does not stop the ones after it.

    Raises:
        TemplateAccessError, TemplateBrokenError: For a single template, or
            once a batch has run, for the first batch template that could
            not be read
    """
    if not session.is_logged_in():
        raise NotAuthenticatedError("You are not logged in, run 'login' first")
    session.save_cookies()

    templates = resolve_templates(template)
    if len(templates) > 1:
        console.print(f"Batch-uploading {len(templates)} template files:")
        for path in templates:
            console.print(f"  [dim]{escape(str(path))}[/]")
        console.print()

    results = []
    unreadable: list[InputError] = []
    for path in templates:
        try:
            results.append(
                upload_template(
                    session, path, work_id, resume, fallback_group_id, console
                )
            )
        except (TemplateAccessError, TemplateBrokenError) as e:
            if len(templates) == 1:
                raise
            console.print(f"[red]Skipping template: {escape(e.message)}[/]")
            unreadable.append(e)
        console.print()

    if len(templates) > 1:
        failed = [r for r in results if not r.done]
        if failed or unreadable:
            console.print(
                f"[red]{len(failed)} of {len(templates)} template(s) halted, "
                f"{len(unreadable)} could not be read[/]"
            )
        else:
            console.print("[green]All templates processed![/]")
        if unreadable:
            raise unreadable[0]
    return results
