from __future__ import annotations

from fastapi import FastAPI

from hashfile_service.app.settings import Settings, settings
from hashfile_service.bootstrap.lifespan import create_lifespan
from hashfile_service.modules import build_api_router
from libs.common.http_handlers import register_exception_handlers
from libs.common.logging import configure_logging


def create_app(app_settings: Settings | None = None) -> FastAPI:
    resolved = app_settings or settings
    app = FastAPI(title=resolved.service_name, lifespan=create_lifespan(resolved))
    app.include_router(build_api_router())
    register_exception_handlers(app, "hashfile_service.errors")
    return app


configure_logging(json_output=settings.log_json)
app = create_app()
