from __future__ import annotations

from fastapi import APIRouter


def build_api_router() -> APIRouter:
    from hashfile_service.modules.files.api import router as files_router
    from hashfile_service.modules.health.api import router as health_router
    from hashfile_service.modules.roots.api import router as roots_router

    api_router = APIRouter(prefix="/v1")
    api_router.include_router(files_router)
    api_router.include_router(roots_router)
    api_router.include_router(health_router)
    return api_router


__all__ = ["build_api_router"]
