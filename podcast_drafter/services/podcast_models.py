"""Data models for the episode publishing workflow."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from ..platforms import DraftResult


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class PipelineStage(str, Enum):
    VALIDATING = "validating"
    NORMALIZING = "normalizing"
    UPLOADING = "uploading"
    PUBLISHING = "publishing"
    CLEANUP = "cleanup"
    DONE = "done"
    FAILED = "failed"


@dataclass(slots=True)
class JobSubmission:
    """One uploaded recording; ``source_path`` belongs to the job and is always deleted."""

    source_path: Path | None
    date: str | None
    title: str | None
    job_id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass(slots=True)
class JobResult:
    """Everything reported back once the draft exists."""

    filename: str
    remote_url: str
    podcast_url: str
    year: int
    draft: DraftResult


@dataclass(slots=True)
class JobState:
    """In-memory record of the stages a single job passed through."""

    job_id: str
    stage: PipelineStage = PipelineStage.VALIDATING
    history: list[PipelineStage] = field(default_factory=lambda: [PipelineStage.VALIDATING])
    updated_at: str = field(default_factory=_now)
    failed_stage: PipelineStage | None = None

    def advance(self, stage: PipelineStage) -> None:
        self.stage = stage
        self.history.append(stage)
        self.updated_at = _now()

    def mark_failed(self) -> None:
        self.failed_stage = self.stage

    @property
    def finished(self) -> bool:
        return self.stage in (PipelineStage.DONE, PipelineStage.FAILED)

    def to_dict(self) -> dict[str, object]:
        return {
            "job_id": self.job_id,
            "stage": self.stage.value,
            "history": [item.value for item in self.history],
            "failed_stage": self.failed_stage.value if self.failed_stage else None,
            "updated_at": self.updated_at,
        }


__all__ = ["JobResult", "JobState", "JobSubmission", "PipelineStage"]
