"""Command-line interface for serving the API and running jobs in the foreground."""

from __future__ import annotations

import argparse
import json
import shutil
import sys
import tempfile
import time
from pathlib import Path
from typing import Callable, Sequence

from ..errors import ConfigError
from ..services import CompleteEvent, JobSubmission, ProgressChannel, event_to_payload
from ..settings import AppConfig, load_config
from ..utils.file_helper import safe_upload_name
from ..utils.logging import configure_logging, get_logger
from .pipeline import build_services

LOGGER = get_logger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    handler: Callable[[argparse.Namespace], int] | None = getattr(args, "handler", None)
    if handler is None:
        parser.print_help(sys.stderr)
        return 1

    config = load_config(args.config)
    configure_logging(structured=not args.log_plain, log_dir=config.paths.log_dir)
    args.app_config = config
    try:
        return handler(args)
    except ConfigError as exc:
        LOGGER.error(str(exc), extra={"event": "cli.error", "code": exc.code})
        return 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="podcast-drafter",
        description="Normalise a recording, upload it to FileBrowser and draft a WordPress post",
    )
    parser.add_argument("--config", help="Path to configuration file", default=None)
    parser.add_argument(
        "--log-plain",
        action="store_true",
        help="Use plain-text logs instead of JSON",
    )

    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=None, help="Bind address (defaults to config)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (defaults to config)")
    serve_parser.set_defaults(handler=_handle_serve)

    process_parser = subparsers.add_parser("process", help="Run one job and print its events")
    process_parser.add_argument("--file", required=True, type=Path, help="Audio file to process")
    process_parser.add_argument("--date", required=True, help="Recording date, YYYY-MM-DD")
    process_parser.add_argument("--title", required=True, help="Episode title")
    process_parser.set_defaults(handler=_handle_process)

    credentials_parser = subparsers.add_parser("credentials", help="Inspect stored credentials")
    credentials_subparsers = credentials_parser.add_subparsers(dest="credentials_command", required=True)
    status_parser = credentials_subparsers.add_parser("status", help="Show stored URLs and usernames")
    status_parser.set_defaults(handler=_handle_credentials_status)
    test_parser = credentials_subparsers.add_parser("test", help="Probe both services with stored credentials")
    test_parser.set_defaults(handler=_handle_credentials_test)

    return parser


def _handle_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from ..web import create_app

    config: AppConfig = args.app_config
    host = args.host or config.server.host
    port = args.port or config.server.port
    LOGGER.info(
        "Starting HTTP API",
        extra={"event": "cli.command", "command": "serve", "host": host, "port": port},
    )
    uvicorn.run(create_app(config), host=host, port=port, log_config=None)
    return 0


def _handle_process(args: argparse.Namespace) -> int:
    services = build_services(args.app_config)
    source: Path = args.file
    if not source.is_file():
        LOGGER.error("Input file not found", extra={"event": "cli.error", "path": str(source)})
        return 2

    # Jobs delete their source file when they finish.
    services.config.paths.uploads_dir.mkdir(parents=True, exist_ok=True)
    workdir = Path(tempfile.mkdtemp(dir=services.config.paths.uploads_dir))
    working_copy = workdir / safe_upload_name(source.name, stamp=time.time_ns())
    shutil.copy2(source, working_copy)

    submission = JobSubmission(source_path=working_copy, date=args.date, title=args.title)
    LOGGER.info(
        "Processing recording",
        extra={"event": "cli.command", "command": "process", "job_id": submission.job_id},
    )
    channel = ProgressChannel(job_id=submission.job_id)
    try:
        services.workflow.run(submission, channel)
    finally:
        shutil.rmtree(workdir, ignore_errors=True)

    succeeded = False
    for event in channel:
        print(json.dumps(event_to_payload(event), ensure_ascii=False))
        succeeded = succeeded or isinstance(event, CompleteEvent)
    return 0 if succeeded else 1


def _handle_credentials_status(args: argparse.Namespace) -> int:
    services = build_services(args.app_config)
    bundle = services.credential_store.load()
    if bundle is None:
        print(json.dumps({"configured": False}))
        return 1
    print(json.dumps({"configured": True, **bundle.public_view()}, ensure_ascii=False, indent=2))
    return 0


def _handle_credentials_test(args: argparse.Namespace) -> int:
    services = build_services(args.app_config)
    bundle = services.credential_store.load()
    if bundle is None:
        raise ConfigError("Credentials not configured. Please configure credentials first.")
    payload = {
        "fileBrowser": {
            "url": bundle.remote_storage.url,
            "username": bundle.remote_storage.username,
            "password": bundle.remote_storage.password,
        },
        "wordpress": {
            "url": bundle.cms.url,
            "username": bundle.cms.username,
            "password": bundle.cms.password,
        },
    }
    report = services.credential_tester.run(payload)
    print(json.dumps(report.as_dict(), ensure_ascii=False, indent=2))
    return 0 if report.success else 1


__all__ = ["main"]
