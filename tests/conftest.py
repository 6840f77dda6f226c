"""Shared fixtures and fakes for the publishing workflow tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Union

import pytest
import requests

from podcast_drafter.errors import TransformError
from podcast_drafter.platforms import DraftResult, ProbeResult
from podcast_drafter.security import (
    CredentialsBundle,
    CredentialStore,
    SecretCipher,
    ServiceCredentials,
)


class FakeResponse:
    """Just enough of ``requests.Response`` for the platform clients."""

    def __init__(
        self,
        status_code: int = 200,
        json_data: Any = None,
        text: str | None = None,
    ) -> None:
        self.status_code = status_code
        self._json = json_data
        if text is None:
            text = json.dumps(json_data) if json_data is not None else ""
        self.text = text

    def json(self) -> Any:
        if self._json is None:
            raise ValueError("response body is not JSON")
        return self._json

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


Route = Union[FakeResponse, Exception, Callable[..., FakeResponse]]


class FakeSession:
    """Records every call and answers from a ``(method, path suffix)`` route table."""

    def __init__(self, routes: dict[tuple[str, str], Route] | None = None) -> None:
        self.routes = dict(routes or {})
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self.bodies: dict[str, bytes] = {}
        self.auth: Any = None
        self.closed = False

    def __enter__(self) -> "FakeSession":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.closed = True

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        data = kwargs.get("data")
        if hasattr(data, "read"):
            self.bodies[url] = data.read()
        self.calls.append((method, url, kwargs))
        for (route_method, suffix), outcome in self.routes.items():
            if route_method == method and url.endswith(suffix):
                if isinstance(outcome, Exception):
                    raise outcome
                if callable(outcome) and not isinstance(outcome, FakeResponse):
                    return outcome(url, **kwargs)
                return outcome
        return FakeResponse(404, {"message": f"no route for {method} {url}"})

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self.request("POST", url, **kwargs)

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self.request("GET", url, **kwargs)

    def called(self, method: str, suffix: str) -> bool:
        return any(m == method and url.endswith(suffix) for m, url, _ in self.calls)

    def kwargs_for(self, method: str, suffix: str) -> dict[str, Any]:
        for m, url, kwargs in self.calls:
            if m == method and url.endswith(suffix):
                return kwargs
        raise AssertionError(f"{method} {suffix} was not called")


class StubNormalizer:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[Path, Path]] = []

    def normalize(self, input_path: Path, output_path: Path) -> bool:
        self.calls.append((input_path, output_path))
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(b"ID3-normalised")
        if self.fail:
            raise TransformError("Audio processing failed", details="ffmpeg exited with code 1")
        return True


class StubUploader:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[Path, str, str]] = []
        self.artifact_existed = False

    def upload(self, file_path, filename, container, config, on_progress) -> str:
        self.calls.append((file_path, filename, container))
        self.artifact_existed = file_path.exists()
        on_progress("Logging into FileBrowser...")
        if self.error is not None:
            raise self.error
        on_progress("Uploading to FileBrowser...")
        return f"{config.url}/api/public/dl/{container}/{filename}"

    def probe(self, config: ServiceCredentials) -> ProbeResult:
        return ProbeResult(success=True, message="Connected successfully")


class StubPublisher:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[str, str, str]] = []

    def publish(self, title, media_url, date, config, on_progress) -> DraftResult:
        self.calls.append((title, media_url, date))
        on_progress("Creating WordPress draft...")
        if self.error is not None:
            raise self.error
        return DraftResult(
            post_id=42,
            edit_link=f"{config.url}/wp-admin/post.php?post=42&action=edit",
            preview_link=f"{config.url}/?p=42",
        )

    def probe(self, config: ServiceCredentials) -> ProbeResult:
        return ProbeResult(success=False, message="Sorry, you are not allowed to do that.")


class StubCredentialStore:
    def __init__(self, bundle: CredentialsBundle | None) -> None:
        self.bundle = bundle
        self.load_calls = 0

    def is_configured(self) -> bool:
        return self.bundle is not None

    def load(self) -> CredentialsBundle | None:
        self.load_calls += 1
        return self.bundle

    def save(self, bundle: CredentialsBundle) -> None:
        self.bundle = bundle


@pytest.fixture
def bundle() -> CredentialsBundle:
    return CredentialsBundle(
        remote_storage=ServiceCredentials(
            url="https://files.example.org", username="uploader", password="fb-secret"
        ),
        cms=ServiceCredentials(
            url="https://church.example.org", username="editor", password="abcd efgh ijkl mnop"
        ),
        public_base_url="https://podcast.example.org",
    )


@pytest.fixture
def cipher() -> SecretCipher:
    return SecretCipher("test-secret-key")


@pytest.fixture
def credential_store(tmp_path: Path, cipher: SecretCipher) -> CredentialStore:
    return CredentialStore(tmp_path / "data" / "credentials.json", cipher)


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    uploads = tmp_path / "uploads"
    uploads.mkdir()
    path = uploads / "1710000000000-service.wav"
    path.write_bytes(b"RIFF....WAVEfmt ")
    return path
