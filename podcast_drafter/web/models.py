"""Request and response schemas for the HTTP API."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ServiceCredentialsModel(BaseModel):
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class PodcastSettingsModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    base_url: Optional[str] = Field(default=None, alias="baseUrl")


class CredentialsPayload(BaseModel):
    """All sections are optional here so a missing one yields a 400, not a 422."""

    model_config = ConfigDict(populate_by_name=True)

    file_browser: Optional[ServiceCredentialsModel] = Field(default=None, alias="fileBrowser")
    wordpress: Optional[ServiceCredentialsModel] = None
    podcast: Optional[PodcastSettingsModel] = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class SaveCredentialsResponse(BaseModel):
    success: bool
    message: str


class ProbeResponse(BaseModel):
    success: bool
    message: str


class CredentialTestResponse(BaseModel):
    success: bool
    tests: dict[str, ProbeResponse]


class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    timestamp: str
    credentials_configured: bool = Field(alias="credentialsConfigured")


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
