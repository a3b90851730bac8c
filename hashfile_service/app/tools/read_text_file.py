"""파일 내용을 hashline 포맷으로 읽는 도구예요.

각 라인에 ``줄번호:해시|내용`` 태그를 붙이고, 마지막에 ``---`` 구분선과
메타데이터(버전, 총 줄 수, 파일 해시)를 덧붙여요. 여기서 얻은 앵커와
``file_hash``를 ``edit_text_file``에 그대로 넘기면 돼요.
"""

from __future__ import annotations

from typing import Any

from hashfile_service.app.hashline import (
    HASHLINE_VERSION,
    compute_file_hash,
    split_lines,
    tag_content,
)
from hashfile_service.app.roots import RootsManager
from hashfile_service.app.tools.base import BaseTool, ToolResult
from hashfile_service.app.tools.file_access import read_text, resolve_target
from libs.common.errors import DomainError
from libs.common.logging import get_logger

logger = get_logger("hashfile_service.tools.read_text_file")


def render_read_output(content: str) -> tuple[str, dict[str, Any]]:
    """읽기 결과 텍스트와 메타데이터를 만들어요."""
    total_lines = len(split_lines(content))
    file_hash = compute_file_hash(content)
    tagged = tag_content(content)

    parts = [tagged] if tagged else []
    parts.extend(
        [
            "---",
            f"hashline_version: {HASHLINE_VERSION}",
            f"total_lines: {total_lines}",
            f"file_hash: {file_hash}",
        ]
    )
    metadata = {
        "total_lines": total_lines,
        "file_hash": file_hash,
        "byte_count": len(content.encode("utf-8")),
    }
    return "\n".join(parts) + "\n", metadata


class ReadTextFileTool(BaseTool):
    """텍스트 파일을 hashline 태그와 함께 읽는 도구예요."""

    def __init__(self, *, roots_manager: RootsManager | None = None) -> None:
        self._roots_manager = roots_manager

    @property
    def name(self) -> str:
        return "read_text_file"

    @property
    def description(self) -> str:
        return (
            "파일을 읽어서 각 줄을 '줄번호:해시|내용' 형식으로 반환해요. "
            "출력 끝의 file_hash와 각 줄의 '줄번호:해시' 앵커를 "
            "edit_text_file 도구에 그대로 사용해요."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "Absolute path to the file to read",
                },
            },
            "required": ["path"],
        }

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        try:
            target = resolve_target(arguments.get("path"), self._roots_manager)
            content = read_text(target)
        except DomainError as exc:
            logger.warning("file_read_failed", path=arguments.get("path"), error_code=exc.error_code)
            return ToolResult(ok=False, error=exc.message, error_code=exc.error_code)

        output, metadata = render_read_output(content)
        logger.info(
            "file_read",
            path=str(target),
            total_lines=metadata["total_lines"],
            file_hash=metadata["file_hash"],
        )
        return ToolResult(ok=True, output=output, metadata=metadata)
