from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from hashfile_service.app.settings import Settings
from hashfile_service.bootstrap.container import build_runtime_components


def create_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # HTTP API의 roots는 설정과 /v1/roots로만 바뀌어요. MCP는 stdio로만 제공해요.
        runtime = build_runtime_components(settings)

        app.state.roots_manager = runtime.roots_manager
        app.state.tool_registry = runtime.tool_registry
        app.state.settings = settings

        yield

    return lifespan
