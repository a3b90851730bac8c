from __future__ import annotations

from fastapi import HTTPException, Request, status

from hashfile_service.app.roots import RootsManager
from hashfile_service.app.settings import Settings, settings
from hashfile_service.app.tools.registry import ToolRegistry


def get_settings(request: Request) -> Settings:
    configured = getattr(request.app.state, "settings", None)
    if isinstance(configured, Settings):
        return configured
    return settings


def require_auth(request: Request, authorization: str) -> None:
    if authorization != f"Bearer {get_settings(request).api_token}":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="인증에 실패했어요.")


def get_tool_registry(request: Request) -> ToolRegistry:
    registry = getattr(request.app.state, "tool_registry", None)
    if not isinstance(registry, ToolRegistry):
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="도구 레지스트리를 사용할 수 없어요.")
    return registry


def get_roots_manager(request: Request) -> RootsManager:
    return request.app.state.roots_manager  # type: ignore[no-any-return]
