"""One-way, per-job channel carrying progress events from the pipeline to a transport."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Iterator

from .podcast_events import ProgressEvent, is_terminal

LOGGER = logging.getLogger(__name__)

_CLOSED = object()


class ProgressChannel:
    """Thread-safe queue with a single producer and a single consumer.

    After the terminal event nothing else is accepted. A consumer that goes
    away calls :meth:`detach`; from then on events are dropped and the
    producer keeps running.
    """

    def __init__(self, job_id: str = "") -> None:
        self.job_id = job_id
        self._queue: queue.Queue[object] = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False
        self._detached = False
        self._terminal_sent = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def detached(self) -> bool:
        return self._detached

    def publish(self, event: ProgressEvent) -> bool:
        """Queue ``event``; returns ``False`` when it was dropped."""
        with self._lock:
            if self._closed or self._terminal_sent:
                LOGGER.debug(
                    "Dropping event after terminal event",
                    extra={"event": "channel.drop", "job_id": self.job_id},
                )
                return False
            if is_terminal(event):
                self._terminal_sent = True
            if self._detached:
                return False
            self._queue.put(event)
            return True

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._queue.put(_CLOSED)

    def detach(self) -> None:
        """Called by the consumer when the client disconnects."""
        with self._lock:
            if self._detached:
                return
            self._detached = True
        if not self._closed:
            LOGGER.info(
                "Client disconnected; job continues without a listener",
                extra={"event": "channel.detached", "job_id": self.job_id},
            )

    def get(self, timeout: float | None = None) -> ProgressEvent | None:
        """Next event, or ``None`` once the channel is closed and drained."""
        item = self._queue.get(timeout=timeout)
        if item is _CLOSED:
            # Leave the marker in place so repeated reads keep returning None.
            self._queue.put(_CLOSED)
            return None
        return item  # type: ignore[return-value]

    def __iter__(self) -> Iterator[ProgressEvent]:
        while True:
            event = self.get()
            if event is None:
                return
            yield event


__all__ = ["ProgressChannel"]
