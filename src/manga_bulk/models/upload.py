"""Data models for upload results."""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Why a submission failed."""

    TRANSPORT = "transport"
    PROTOCOL = "protocol"
    REJECTED = "rejected"
    ARCHIVE = "archive"
    OTHER = "submission"


class UploadOutcome(BaseModel):
    """Result of submitting one manifest entry."""

    position: int  # zero-based index into the manifest
    label: str
    success: bool
    kind: FailureKind | None = None
    message: str | None = None
    status_code: int | None = None

    @property
    def retry_position(self) -> int:
        """1-based resume value that retries this entry."""
        return self.position + 1

    @property
    def skip_position(self) -> int:
        """1-based resume value that skips this entry."""
        return self.position + 2


class PipelineResult(BaseModel):
    """Summary of one manifest run."""

    template: str
    start_position: int
    total_entries: int
    outcomes: list[UploadOutcome] = Field(default_factory=list)

    @property
    def failure(self) -> UploadOutcome | None:
        if self.outcomes and not self.outcomes[-1].success:
            return self.outcomes[-1]
        return None

    @property
    def done(self) -> bool:
        return self.failure is None

    @property
    def uploaded(self) -> int:
        return sum(1 for o in self.outcomes if o.success)
