from __future__ import annotations

from dataclasses import dataclass

from mcp.server.lowlevel import Server

from hashfile_service.app.mcp_server import build_mcp_server
from hashfile_service.app.roots import RootsManager
from hashfile_service.app.settings import Settings
from hashfile_service.app.tools.defaults import build_default_tool_registry
from hashfile_service.app.tools.registry import ToolRegistry
from libs.common.logging import get_logger

logger = get_logger("hashfile_service.bootstrap")


@dataclass(slots=True)
class RuntimeComponents:
    roots_manager: RootsManager
    tool_registry: ToolRegistry


def build_runtime_components(settings: Settings) -> RuntimeComponents:
    roots_manager = RootsManager(settings.allowed_roots)
    if not roots_manager.is_enforced():
        logger.warning("scope_unrestricted", reason="allowed_roots가 비어 있어서 모든 절대 경로를 허용해요.")

    tool_registry = build_default_tool_registry(roots_manager=roots_manager)
    return RuntimeComponents(
        roots_manager=roots_manager,
        tool_registry=tool_registry,
    )


def build_stdio_server(settings: Settings, runtime: RuntimeComponents) -> Server:
    return build_mcp_server(
        tool_registry=runtime.tool_registry,
        roots_manager=runtime.roots_manager,
        name=settings.server_name,
        version=settings.server_version,
        instructions=settings.server_instructions,
    )
