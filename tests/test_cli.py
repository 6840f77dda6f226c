from __future__ import annotations

import json
from pathlib import Path

import pytest

from podcast_drafter.app import cli
from podcast_drafter.app.pipeline import ServiceContainer
from podcast_drafter.security import CredentialsBundle, CredentialStore, SecretCipher
from podcast_drafter.services import CredentialTester, JobRunner, PodcastPublishingWorkflow
from podcast_drafter.settings import AppConfig, load_config

from conftest import StubCredentialStore, StubNormalizer, StubPublisher, StubUploader


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.delenv("PODCAST_DRAFTER_SECRET_KEY", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    path = tmp_path / "config.toml"
    path.write_text(
        "\n".join(
            [
                "[paths]",
                f'data_dir = "{(tmp_path / "data").as_posix()}"',
                "[security]",
                'secret_key = "cli-test-key"',
                "allow_ephemeral_key = false",
            ]
        ),
        encoding="utf-8",
    )
    return path


def _stub_services(config: AppConfig, bundle: CredentialsBundle) -> ServiceContainer:
    store = StubCredentialStore(bundle)
    uploader, publisher = StubUploader(), StubPublisher()
    workflow = PodcastPublishingWorkflow(
        store, StubNormalizer(), uploader, publisher, outputs_dir=config.paths.outputs_dir
    )
    return ServiceContainer(
        config=config,
        credential_store=store,
        workflow=workflow,
        job_runner=JobRunner(workflow),
        credential_tester=CredentialTester(uploader, publisher),
    )


def test_no_command_prints_help(config_file: Path) -> None:
    assert cli.main(["--config", str(config_file)]) == 1


def test_credentials_status_when_unconfigured(
    config_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code = cli.main(["--config", str(config_file), "--log-plain", "credentials", "status"])

    assert code == 1
    assert json.loads(capsys.readouterr().out) == {"configured": False}


def test_credentials_status_reads_store_with_configured_key(
    config_file: Path, bundle: CredentialsBundle, capsys: pytest.CaptureFixture[str]
) -> None:
    config = load_config(config_file)
    CredentialStore(config.paths.credentials_file, SecretCipher("cli-test-key")).save(bundle)

    code = cli.main(["--config", str(config_file), "--log-plain", "credentials", "status"])

    assert code == 0
    output = capsys.readouterr().out
    assert json.loads(output)["wordpress"] == {"url": "https://church.example.org", "username": "editor"}
    assert "fb-secret" not in output


def test_credentials_test_without_credentials_is_config_error(config_file: Path) -> None:
    assert cli.main(["--config", str(config_file), "--log-plain", "credentials", "test"]) == 2


def test_missing_secret_key_is_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PODCAST_DRAFTER_SECRET_KEY", raising=False)
    path = tmp_path / "strict.toml"
    path.write_text(
        f'[paths]\ndata_dir = "{(tmp_path / "data").as_posix()}"\n'
        "[security]\nallow_ephemeral_key = false\n",
        encoding="utf-8",
    )

    assert cli.main(["--config", str(path), "--log-plain", "credentials", "status"]) == 2


def test_process_prints_event_lines(
    config_file: Path,
    tmp_path: Path,
    bundle: CredentialsBundle,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr(cli, "build_services", lambda config: _stub_services(config, bundle))
    recording = tmp_path / "sermon.wav"
    recording.write_bytes(b"RIFF")

    code = cli.main(
        [
            "--config",
            str(config_file),
            "--log-plain",
            "process",
            "--file",
            str(recording),
            "--date",
            "2024-03-10",
            "--title",
            "Easter Service!",
        ]
    )

    assert code == 0
    lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert lines[0] == {"status": "Processing audio: applying compression..."}
    assert lines[-1]["complete"] is True
    assert lines[-1]["mp3Name"] == "2024-03-10_easter_service_.mp3"
    assert recording.exists()


def test_process_failure_exit_code(
    config_file: Path,
    tmp_path: Path,
    bundle: CredentialsBundle,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr(cli, "build_services", lambda config: _stub_services(config, bundle))
    recording = tmp_path / "sermon.wav"
    recording.write_bytes(b"RIFF")

    code = cli.main(
        [
            "--config",
            str(config_file),
            "process",
            "--file",
            str(recording),
            "--date",
            "not-a-date",
            "--title",
            "Easter",
        ]
    )

    assert code == 1
    lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert lines == [{"error": "Invalid recording date", "code": "validation_error", "details": "not-a-date"}]
    assert recording.exists()


def test_process_leaves_input_file_and_removes_working_copy(
    config_file: Path,
    tmp_path: Path,
    bundle: CredentialsBundle,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr(cli, "build_services", lambda config: _stub_services(config, bundle))
    recording = tmp_path / "sermon.wav"
    recording.write_bytes(b"RIFF-original")

    code = cli.main(
        [
            "--config",
            str(config_file),
            "process",
            "--file",
            str(recording),
            "--date",
            "2024-03-10",
            "--title",
            "Easter",
        ]
    )

    assert code == 0
    assert recording.read_bytes() == b"RIFF-original"
    uploads_dir = load_config(config_file).paths.uploads_dir
    assert list(uploads_dir.iterdir()) == []


def test_process_missing_file(config_file: Path, tmp_path: Path) -> None:
    code = cli.main(
        [
            "--config",
            str(config_file),
            "process",
            "--file",
            str(tmp_path / "absent.wav"),
            "--date",
            "2024-03-10",
            "--title",
            "Easter",
        ]
    )

    assert code == 2
