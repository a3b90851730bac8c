"""파일 도구를 등록하고 조회하는 레지스트리예요."""

from __future__ import annotations

from typing import Any

import mcp.types as types

from hashfile_service.app.tools.base import BaseTool, ToolResult
from libs.common.logging import get_logger

logger = get_logger("hashfile_service.tools.registry")


class ToolRegistry:
    """도구를 이름으로 관리하는 중앙 레지스트리예요.

    사용법::

        registry = ToolRegistry()
        registry.register(ReadTextFileTool(roots_manager=roots))

        # tools/list 응답에 쓸 스펙 목록
        tools = registry.to_mcp_tools()

        # 이름으로 도구 실행
        result = await registry.call("read_text_file", {"path": "/tmp/a.txt"})
    """

    def __init__(self) -> None:
        self._tools: dict[str, BaseTool] = {}

    def register(self, tool: BaseTool) -> None:
        """도구를 레지스트리에 등록해요. 같은 이름이면 덮어씌워요."""
        self._tools[tool.name] = tool

    def unregister(self, name: str) -> bool:
        """도구를 레지스트리에서 제거해요. 제거 성공 시 True를 반환해요."""
        return self._tools.pop(name, None) is not None

    def get(self, name: str) -> BaseTool | None:
        return self._tools.get(name)

    def list_names(self) -> list[str]:
        return list(self._tools.keys())

    def list_tools(self) -> list[BaseTool]:
        return list(self._tools.values())

    def to_mcp_tools(self) -> list[types.Tool]:
        """``tools/list``에 전달할 MCP `Tool` 목록을 생성해요."""
        return [
            types.Tool(
                name=tool.name,
                description=tool.description,
                inputSchema=tool.input_schema,
            )
            for tool in self._tools.values()
        ]

    async def call(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        """이름으로 도구를 찾아 실행해요.

        등록되지 않은 도구거나 도구가 예상하지 못한 예외를 던지면
        실패 `ToolResult`를 반환해요.
        """
        tool = self._tools.get(name)
        if tool is None:
            return ToolResult(ok=False, error=f"Unknown tool: {name}", error_code="UNKNOWN_TOOL")
        try:
            return await tool.execute(arguments)
        except Exception as exc:
            logger.exception("tool_execution_failed", tool=name, error=str(exc))
            return ToolResult(ok=False, error=f"Tool execution failed: {exc}", error_code="INTERNAL_ERROR")

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools
