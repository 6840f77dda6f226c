"""Background execution of workflow jobs, one worker thread per job."""

from __future__ import annotations

import logging
import threading
from typing import Protocol

from .podcast_models import JobState, JobSubmission
from .progress_channel import ProgressChannel

LOGGER = logging.getLogger(__name__)


class Workflow(Protocol):
    def run(self, submission: JobSubmission, channel: ProgressChannel) -> JobState:
        """Process one job, publishing progress into ``channel`` and closing it."""


class JobRunner:
    """Starts each job on its own daemon thread and hands back its channel."""

    def __init__(self, workflow: Workflow) -> None:
        self._workflow = workflow
        self._threads: dict[str, threading.Thread] = {}
        self._lock = threading.Lock()

    def start(self, submission: JobSubmission) -> ProgressChannel:
        channel = ProgressChannel(job_id=submission.job_id)
        thread = threading.Thread(
            target=self._run,
            args=(submission, channel),
            name=f"job-{submission.job_id}",
            daemon=True,
        )
        with self._lock:
            self._threads[submission.job_id] = thread
        LOGGER.info("Job accepted", extra={"event": "job.accepted", "job_id": submission.job_id})
        thread.start()
        return channel

    def active_jobs(self) -> list[str]:
        with self._lock:
            return [job_id for job_id, thread in self._threads.items() if thread.is_alive()]

    def join(self, timeout: float | None = None) -> None:
        with self._lock:
            threads = list(self._threads.values())
        for thread in threads:
            thread.join(timeout)

    def _run(self, submission: JobSubmission, channel: ProgressChannel) -> None:
        try:
            self._workflow.run(submission, channel)
        except Exception:
            LOGGER.exception(
                "Workflow raised outside of its own error handling",
                extra={"event": "job.crashed", "job_id": submission.job_id},
            )
        finally:
            channel.close()
            with self._lock:
                self._threads.pop(submission.job_id, None)


__all__ = ["JobRunner", "Workflow"]
