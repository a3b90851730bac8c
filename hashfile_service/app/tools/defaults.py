"""기본 파일 도구를 등록한 ToolRegistry를 생성하는 팩토리예요."""

from __future__ import annotations

from hashfile_service.app.roots import RootsManager
from hashfile_service.app.tools.edit_text_file import EditTextFileTool
from hashfile_service.app.tools.read_text_file import ReadTextFileTool
from hashfile_service.app.tools.registry import ToolRegistry


def build_default_tool_registry(*, roots_manager: RootsManager | None = None) -> ToolRegistry:
    """``read_text_file``과 ``edit_text_file``이 등록된 `ToolRegistry`를 생성해요.

    Args:
        roots_manager: 두 도구가 공유하는 허용 루트 목록이에요. ``None``이면
            경로 범위를 검사하지 않아요.
    """
    registry = ToolRegistry()
    # 두 도구가 같은 RootsManager를 봐야 roots 갱신이 읽기/편집에 함께 반영돼요.
    registry.register(ReadTextFileTool(roots_manager=roots_manager))
    registry.register(EditTextFileTool(roots_manager=roots_manager))
    return registry
