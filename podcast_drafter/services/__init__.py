"""Workflow services: orchestration, progress delivery and credential checks."""

from __future__ import annotations

from .credential_check import CredentialTester, CredentialTestReport
from .job_runner import JobRunner
from .podcast_events import (
    CompleteEvent,
    ErrorEvent,
    ProgressEvent,
    StatusEvent,
    event_to_payload,
    format_sse,
    format_sse_done,
)
from .podcast_models import JobResult, JobState, JobSubmission, PipelineStage
from .podcast_workflow import PodcastPublishingWorkflow
from .progress_channel import ProgressChannel

__all__ = [
    "CompleteEvent",
    "CredentialTestReport",
    "CredentialTester",
    "ErrorEvent",
    "JobResult",
    "JobRunner",
    "JobState",
    "JobSubmission",
    "PipelineStage",
    "PodcastPublishingWorkflow",
    "ProgressChannel",
    "ProgressEvent",
    "StatusEvent",
    "event_to_payload",
    "format_sse",
    "format_sse_done",
]
