"""Credentials bundle shared by the storage and publishing stages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..errors import ValidationError

STORAGE_SECTION = "fileBrowser"
CMS_SECTION = "wordpress"
PODCAST_SECTION = "podcast"


@dataclass(slots=True, frozen=True)
class ServiceCredentials:
    """URL and login for one remote service."""

    url: str
    username: str
    password: str

    @classmethod
    def from_mapping(cls, data: Any, *, section: str) -> "ServiceCredentials":
        if not isinstance(data, Mapping):
            raise ValidationError("Missing required credentials", details=section)
        missing = [key for key in ("url", "username", "password") if data.get(key) is None]
        if missing:
            raise ValidationError(
                "Missing required credentials",
                details=f"{section}: {', '.join(missing)}",
            )
        return cls(
            url=str(data["url"]).strip().rstrip("/"),
            username=str(data["username"]),
            password=str(data["password"]),
        )

    def public_view(self) -> dict[str, str]:
        return {"url": self.url, "username": self.username}

    def __repr__(self) -> str:
        return f"ServiceCredentials(url={self.url!r}, username={self.username!r}, password='***')"


@dataclass(slots=True, frozen=True)
class CredentialsBundle:
    """All three sections must be present together; a partial bundle is not configured."""

    remote_storage: ServiceCredentials
    cms: ServiceCredentials
    public_base_url: str

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> "CredentialsBundle":
        sections = [data.get(STORAGE_SECTION), data.get(CMS_SECTION), data.get(PODCAST_SECTION)]
        if not all(sections):
            raise ValidationError("Missing required credentials")
        podcast = data[PODCAST_SECTION]
        base_url = podcast.get("baseUrl") if isinstance(podcast, Mapping) else None
        if not base_url:
            raise ValidationError("Missing required credentials", details="podcast: baseUrl")
        return cls(
            remote_storage=ServiceCredentials.from_mapping(
                data[STORAGE_SECTION], section=STORAGE_SECTION
            ),
            cms=ServiceCredentials.from_mapping(data[CMS_SECTION], section=CMS_SECTION),
            public_base_url=str(base_url).strip().rstrip("/"),
        )

    def public_view(self) -> dict[str, Any]:
        """Status payload without any password."""
        return {
            STORAGE_SECTION: self.remote_storage.public_view(),
            CMS_SECTION: self.cms.public_view(),
            PODCAST_SECTION: {"baseUrl": self.public_base_url},
        }


__all__ = [
    "CMS_SECTION",
    "CredentialsBundle",
    "PODCAST_SECTION",
    "STORAGE_SECTION",
    "ServiceCredentials",
]
