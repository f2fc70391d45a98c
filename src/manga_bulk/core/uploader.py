"""Submit template entries one at a time, stopping at the first failure."""

import logging
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path

from manga_bulk.core.transport import ChapterTransport, ProgressCallback
from manga_bulk.errors import InvalidResumePositionError, SubmissionError
from manga_bulk.models.manifest import UNSET, ManifestEntry
from manga_bulk.models.upload import FailureKind, PipelineResult, UploadOutcome

log = logging.getLogger(__name__)

DEFAULT_FALLBACK_GROUP_ID = 2


def submission_fields(
    entry: ManifestEntry,
    work_id: int,
    fallback_group_id: int = DEFAULT_FALLBACK_GROUP_ID,
) -> dict[str, str]:
    """Form fields for one chapter, with sentinels mapped for the remote.

    An unset volume is sent blank ("no volume" is not "volume 0"). An unset
    primary group becomes the fallback group; unset extra groups are omitted.
    """
    fields = {
        "manga_id": str(work_id),
        "chapter_name": entry.title,
        "volume_number": "" if entry.volume == UNSET else str(entry.volume),
        "chapter_number": entry.chapter,
        "group_id": str(
            fallback_group_id if entry.group_primary == UNSET else entry.group_primary
        ),
    }
    if entry.group_secondary != UNSET:
        fields["group_id_2"] = str(entry.group_secondary)
    if entry.group_tertiary != UNSET:
        fields["group_id_3"] = str(entry.group_tertiary)
    fields["lang_id"] = str(entry.language)
    return fields


class UploadPipeline:
    """Sequential single-flight uploader for one work.

    Entry i+1 is never submitted before entry i has finished.
    """

    def __init__(
        self,
        transport: ChapterTransport,
        work_id: int,
        fallback_group_id: int = DEFAULT_FALLBACK_GROUP_ID,
        on_submit: Callable[[int, ManifestEntry], None] | None = None,
        progress: ProgressCallback | None = None,
    ):
        self.transport = transport
        self.work_id = work_id
        self.fallback_group_id = fallback_group_id
        self.on_submit = on_submit
        self.progress = progress

    def run(
        self,
        manifest: Sequence[ManifestEntry],
        start_position: int = 1,
    ) -> Iterator[UploadOutcome]:
        """Yield one outcome per submitted entry.

        Args:
            manifest: Template entries in upload order
            start_position: 1-based position of the first entry to submit

        Raises:
            InvalidResumePositionError: If start_position is below 1
        """
        if start_position < 1:
            raise InvalidResumePositionError(
                f"Resume position must be 1 or greater, got {start_position}"
            )

        for index in range(start_position - 1, len(manifest)):
            entry = manifest[index]
            if self.on_submit is not None:
                self.on_submit(index, entry)

            outcome = self._submit(index, entry)
            yield outcome
            if not outcome.success:
                return

    def _submit(self, index: int, entry: ManifestEntry) -> UploadOutcome:
        log.info("Uploading %s (%s)", entry.label, entry.file)
        fields = submission_fields(entry, self.work_id, self.fallback_group_id)
        try:
            self.transport.submit_chapter(
                self.work_id, fields, Path(entry.file), progress=self.progress
            )
        except SubmissionError as e:
            log.error("Upload of %s failed at position %d: %s", entry.file, index + 1, e)
            return UploadOutcome(
                position=index,
                label=entry.label,
                success=False,
                kind=FailureKind(e.kind),
                message=e.message,
                status_code=getattr(e, "status_code", None),
            )
        return UploadOutcome(position=index, label=entry.label, success=True)

    def run_all(
        self,
        manifest: Sequence[ManifestEntry],
        start_position: int = 1,
        template: str = "",
        on_outcome: Callable[[UploadOutcome], None] | None = None,
    ) -> PipelineResult:
        """Drive run() to completion and summarize."""
        result = PipelineResult(
            template=template,
            start_position=start_position,
            total_entries=len(manifest),
        )
        for outcome in self.run(manifest, start_position):
            result.outcomes.append(outcome)
            if on_outcome is not None:
                on_outcome(outcome)
        return result
