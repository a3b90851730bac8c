from hashfile_service.app.tools.base import BaseTool, ToolResult
from hashfile_service.app.tools.registry import ToolRegistry

__all__ = [
    "BaseTool",
    "ToolRegistry",
    "ToolResult",
]
