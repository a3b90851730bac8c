from __future__ import annotations

import asyncio
import sys

import uvicorn

from hashfile_service.app.mcp_server import serve_stdio
from hashfile_service.app.settings import settings
from hashfile_service.bootstrap.container import build_runtime_components, build_stdio_server
from libs.common.logging import configure_logging


def _run(*, reload_enabled: bool) -> None:
    # HASHFILE_HOST, HASHFILE_PORT는 Settings가 이미 읽어 둬요.
    uvicorn.run(
        "hashfile_service.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=reload_enabled,
    )


def main() -> None:
    _run(reload_enabled=False)


def main_dev() -> None:
    _run(reload_enabled=True)


def main_stdio() -> None:
    # stdout은 JSON-RPC 전용이라 로그는 stderr로 보내요.
    configure_logging(stream=sys.stderr, json_output=settings.log_json)
    runtime = build_runtime_components(settings)
    asyncio.run(serve_stdio(build_stdio_server(settings, runtime)))
