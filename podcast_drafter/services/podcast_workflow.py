"""Sequential normalise → upload → publish workflow for one submitted recording."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Sequence

from ..audio import AudioNormalizer
from ..errors import ConfigError, PipelineError, ValidationError
from ..platforms import DraftPublisher, DraftResult, StorageUploader
from ..security import CredentialsBundle, CredentialStore
from ..settings import AudioSettings
from ..utils.file_helper import remove_quietly
from ..utils.naming import container_name, output_filename, parse_recording_date, podcast_url
from .podcast_events import CompleteEvent, ErrorEvent, ProgressEvent, StatusEvent
from .podcast_models import JobResult, JobState, JobSubmission, PipelineStage
from .progress_channel import ProgressChannel

LOGGER = logging.getLogger(__name__)

Emit = Callable[[str], None]


@dataclass(slots=True)
class JobContext:
    """Mutable context shared between the steps of one job."""

    submission: JobSubmission
    credentials: CredentialsBundle | None = None
    recording_date: date | None = None
    filename: str = ""
    output_path: Path | None = None
    remote_url: str | None = None
    podcast_url: str | None = None
    draft: DraftResult | None = None

    @property
    def year(self) -> int:
        assert self.recording_date is not None
        return self.recording_date.year


@dataclass(slots=True)
class PipelineStep:
    stage: PipelineStage
    handler: Callable[[JobContext, Emit], None]


class PodcastPublishingWorkflow:
    """Runs one job end to end and reports through a :class:`ProgressChannel`.

    Exactly one terminal event is published per run, always after the
    temporary files have been removed.
    """

    def __init__(
        self,
        credential_store: CredentialStore,
        normalizer: AudioNormalizer,
        uploader: StorageUploader,
        publisher: DraftPublisher,
        *,
        outputs_dir: Path,
        audio_settings: AudioSettings | None = None,
    ) -> None:
        self._credential_store = credential_store
        self._normalizer = normalizer
        self._uploader = uploader
        self._publisher = publisher
        self._outputs_dir = outputs_dir
        self._audio_settings = audio_settings or AudioSettings()
        self._steps: Sequence[PipelineStep] = (
            PipelineStep(PipelineStage.NORMALIZING, self._normalize),
            PipelineStep(PipelineStage.UPLOADING, self._upload),
            PipelineStep(PipelineStage.PUBLISHING, self._publish),
        )

    @property
    def step_names(self) -> list[str]:
        return [step.stage.value for step in self._steps]

    def run(self, submission: JobSubmission, channel: ProgressChannel) -> JobState:
        state = JobState(job_id=submission.job_id)
        context = JobContext(submission=submission)

        def emit(status: str) -> None:
            channel.publish(StatusEvent(status))

        terminal: ProgressEvent | None = None
        try:
            terminal = self._execute(context, state, emit)
        finally:
            state.advance(PipelineStage.CLEANUP)
            self._cleanup(context)
            if terminal is None:
                terminal = ErrorEvent(error="Job interrupted", code="internal_error")
            state.advance(
                PipelineStage.DONE if isinstance(terminal, CompleteEvent) else PipelineStage.FAILED
            )
            channel.publish(terminal)
            channel.close()
            LOGGER.info(
                "Job finished",
                extra={"event": "job.finished", **state.to_dict()},
            )
        return state

    def _execute(self, context: JobContext, state: JobState, emit: Emit) -> ProgressEvent:
        job_id = context.submission.job_id
        try:
            self._validate(context)
            for step in self._steps:
                state.advance(step.stage)
                LOGGER.info(
                    "Running pipeline step: %s",
                    step.stage.value,
                    extra={"event": "job.step", "job_id": job_id, "stage": step.stage.value},
                )
                step.handler(context, emit)
        except PipelineError as exc:
            state.mark_failed()
            LOGGER.error(
                "Job failed",
                extra={
                    "event": "job.failed",
                    "job_id": job_id,
                    "stage": state.stage.value,
                    "code": exc.code,
                    "reason": str(exc),
                },
            )
            return ErrorEvent.from_exception(exc)
        except Exception as exc:
            state.mark_failed()
            LOGGER.exception(
                "Unexpected error while processing job",
                extra={"event": "job.crashed", "job_id": job_id, "stage": state.stage.value},
            )
            return ErrorEvent.from_exception(exc)

        return CompleteEvent(
            JobResult(
                filename=context.filename,
                remote_url=context.remote_url or "",
                podcast_url=context.podcast_url or "",
                year=context.year,
                draft=context.draft,  # type: ignore[arg-type]
            )
        )

    def _validate(self, context: JobContext) -> None:
        credentials = self._credential_store.load()
        if credentials is None:
            raise ConfigError("Credentials not configured. Please configure credentials first.")
        context.credentials = credentials

        submission = context.submission
        if submission.source_path is None or not submission.source_path.is_file():
            raise ValidationError("No file uploaded")
        if not (submission.date or "").strip() or not (submission.title or "").strip():
            raise ValidationError("Date and title are required")

        context.recording_date = parse_recording_date(submission.date or "")
        context.filename = output_filename(context.recording_date, submission.title or "")
        # One directory per job keeps concurrent jobs with the same title apart.
        context.output_path = self._outputs_dir / submission.job_id / context.filename

    def _normalize(self, context: JobContext, emit: Emit) -> None:
        assert context.output_path is not None and context.submission.source_path is not None
        emit("Processing audio: applying compression...")
        self._normalizer.normalize(context.submission.source_path, context.output_path)
        lufs = f"{self._audio_settings.target_lufs:g}"
        emit(f"Audio processing complete: normalized to {lufs} LUFS")

    def _upload(self, context: JobContext, emit: Emit) -> None:
        assert context.credentials is not None and context.output_path is not None
        assert context.recording_date is not None
        context.remote_url = self._uploader.upload(
            context.output_path,
            context.filename,
            container_name(context.recording_date),
            context.credentials.remote_storage,
            emit,
        )
        emit("File uploaded to FileBrowser")

        context.podcast_url = podcast_url(
            context.credentials.public_base_url, context.recording_date, context.filename
        )
        emit(f"Podcast URL generated: {context.podcast_url}")

    def _publish(self, context: JobContext, emit: Emit) -> None:
        assert context.credentials is not None and context.podcast_url is not None
        context.draft = self._publisher.publish(
            context.submission.title or "",
            context.podcast_url,
            context.submission.date or "",
            context.credentials.cms,
            emit,
        )
        emit("WordPress draft created successfully")

    def _cleanup(self, context: JobContext) -> None:
        remove_quietly(context.submission.source_path)
        if context.output_path is not None:
            remove_quietly(context.output_path)
            try:
                context.output_path.parent.rmdir()
            except OSError:
                pass


__all__ = ["JobContext", "PipelineStep", "PodcastPublishingWorkflow"]
