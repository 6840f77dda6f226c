"""Live connectivity check for a candidate credentials bundle."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from ..errors import ValidationError
from ..platforms import DraftPublisher, ProbeResult, StorageUploader
from ..security import ServiceCredentials
from ..security.models import CMS_SECTION, STORAGE_SECTION

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class CredentialTestReport:
    tests: dict[str, ProbeResult] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return bool(self.tests) and all(result.success for result in self.tests.values())

    def as_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "tests": {name: result.as_dict() for name, result in self.tests.items()},
        }


class CredentialTester:
    """Probes FileBrowser and WordPress without persisting anything."""

    def __init__(self, uploader: StorageUploader, publisher: DraftPublisher) -> None:
        self._uploader = uploader
        self._publisher = publisher

    def run(self, payload: Mapping[str, Any]) -> CredentialTestReport:
        report = CredentialTestReport()
        report.tests[STORAGE_SECTION] = self._probe(
            payload.get(STORAGE_SECTION), STORAGE_SECTION, self._uploader.probe
        )
        report.tests[CMS_SECTION] = self._probe(
            payload.get(CMS_SECTION), CMS_SECTION, self._publisher.probe
        )
        LOGGER.info(
            "Credential test finished",
            extra={
                "event": "credentials.tested",
                "results": {name: result.success for name, result in report.tests.items()},
            },
        )
        return report

    def _probe(
        self, section: Any, name: str, probe: Callable[[ServiceCredentials], ProbeResult]
    ) -> ProbeResult:
        try:
            credentials = ServiceCredentials.from_mapping(section, section=name)
        except ValidationError as exc:
            return ProbeResult(success=False, message=str(exc))
        return probe(credentials)


__all__ = ["CredentialTestReport", "CredentialTester"]
