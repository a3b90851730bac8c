"""MCP SDK의 저수준 `Server`로 파일 도구를 노출하는 모듈이에요.

``tools/list``와 ``tools/call``은 `ToolRegistry`에 그대로 위임해요.
클라이언트가 ``roots`` capability를 선언했으면 첫 도구 호출 전과
``notifications/roots/list_changed``를 받은 뒤에 ``roots/list``로
루트를 다시 받아서 `RootsManager`에 반영해요.
"""

from __future__ import annotations

from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.session import ServerSession
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from hashfile_service.app.roots import RootsManager
from hashfile_service.app.tools.registry import ToolRegistry
from libs.common.logging import get_logger

logger = get_logger("hashfile_service.mcp_server")


class ClientRootsSync:
    """클라이언트 루트가 오래됐는지 기억했다가 필요할 때만 다시 받아와요."""

    def __init__(self, roots_manager: RootsManager) -> None:
        self._roots_manager = roots_manager
        self._stale = True

    @property
    def stale(self) -> bool:
        return self._stale

    def mark_stale(self) -> None:
        self._stale = True

    async def refresh(self, session: ServerSession) -> None:
        if not self._stale:
            return
        if not session.check_client_capability(types.ClientCapabilities(roots=types.RootsCapability())):
            # roots를 모르는 클라이언트면 운영자 루트만 적용돼요.
            self._stale = False
            return

        try:
            result = await session.list_roots()
        except McpError as exc:
            # 다음 호출에서 다시 시도해요. 그동안은 기존 루트가 그대로 적용돼요.
            logger.warning("roots_list_failed", error=str(exc))
            return

        self._stale = False
        self._roots_manager.set_client_roots(str(root.uri) for root in result.roots)
        logger.info("roots_updated", source="client", roots=self._roots_manager.list_client_roots())


def build_mcp_server(
    *,
    tool_registry: ToolRegistry,
    roots_manager: RootsManager,
    name: str,
    version: str,
    instructions: str | None = None,
) -> Server:
    """레지스트리의 도구를 제공하는 MCP `Server`를 만들어요."""
    server: Server = Server(name, version=version, instructions=instructions)
    roots_sync = ClientRootsSync(roots_manager)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return tool_registry.to_mcp_tools()

    # 입력 검증은 도구가 직접 해서 "Error: " 형식의 메시지로 돌려줘요.
    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        await roots_sync.refresh(server.request_context.session)
        result = await tool_registry.call(name, arguments or {})
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=result.render_text())],
            isError=not result.ok,
        )

    async def handle_roots_list_changed(notification: types.RootsListChangedNotification) -> None:
        del notification
        roots_sync.mark_stale()

    server.notification_handlers[types.RootsListChangedNotification] = handle_roots_list_changed
    return server


async def serve_stdio(server: Server) -> None:
    """stdin/stdout으로 MCP 세션 하나를 끝까지 처리해요. 로그는 stderr로 보내야 해요."""
    logger.info("stdio_started")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
    logger.info("stdio_stopped")
