"""Wiring of configuration into the concrete workflow components."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from ..audio import FfmpegNormalizer
from ..platforms.filebrowser import FileBrowserUploader
from ..platforms.wordpress import WordPressDraftPublisher
from ..security import CredentialStore, SecretCipher, resolve_secret_key
from ..services import CredentialTester, JobRunner, PodcastPublishingWorkflow
from ..settings import AppConfig, load_config
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class ServiceContainer:
    """Long-lived objects shared by every request of one process."""

    config: AppConfig
    credential_store: CredentialStore
    workflow: PodcastPublishingWorkflow
    job_runner: JobRunner
    credential_tester: CredentialTester


def build_services(
    config: AppConfig | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> ServiceContainer:
    """Resolve the encryption key once at startup and assemble the workflow."""
    app_config = config or load_config()

    secret = resolve_secret_key(app_config.security, env=env)
    credential_store = CredentialStore(app_config.paths.credentials_file, SecretCipher(secret))

    timeout = app_config.http.timeout if app_config.http.timeout > 0 else None
    uploader = FileBrowserUploader(timeout=timeout)
    publisher = WordPressDraftPublisher(app_config.publishing, timeout=timeout)
    workflow = PodcastPublishingWorkflow(
        credential_store,
        FfmpegNormalizer(app_config.audio),
        uploader,
        publisher,
        outputs_dir=app_config.paths.outputs_dir,
        audio_settings=app_config.audio,
    )

    LOGGER.info(
        "Services ready",
        extra={
            "event": "app.ready",
            "credentials_configured": credential_store.is_configured(),
            "steps": workflow.step_names,
        },
    )
    return ServiceContainer(
        config=app_config,
        credential_store=credential_store,
        workflow=workflow,
        job_runner=JobRunner(workflow),
        credential_tester=CredentialTester(uploader, publisher),
    )


__all__ = ["ServiceContainer", "build_services"]
