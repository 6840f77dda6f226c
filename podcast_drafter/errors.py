"""Error taxonomy for the upload/publish pipeline."""

from __future__ import annotations


class PipelineError(RuntimeError):
    """Base class for failures surfaced to the caller as an error event."""

    code = "pipeline_error"

    def __init__(self, message: str, *, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message}: {self.details}"


class ConfigError(PipelineError):
    """Credentials are not configured or the secret key policy is violated."""

    code = "config_error"


class ValidationError(PipelineError):
    """The submitted job is missing input or carries malformed metadata."""

    code = "validation_error"


class TransformError(PipelineError):
    """The external audio tool failed."""

    code = "transform_error"


class UploadError(PipelineError):
    """Login to or upload into the remote file host failed."""

    code = "upload_error"


class PublishError(PipelineError):
    """The draft post could not be created."""

    code = "publish_error"


__all__ = [
    "ConfigError",
    "PipelineError",
    "PublishError",
    "TransformError",
    "UploadError",
    "ValidationError",
]
