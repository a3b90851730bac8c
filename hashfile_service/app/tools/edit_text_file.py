"""Hashline 앵커 기반 파일 편집 도구예요.

``read_text_file``이 출력한 ``줄번호:해시`` 앵커로 편집 위치를 지정하고,
같은 출력의 ``file_hash``로 파일이 그 사이에 바뀌지 않았는지 확인해요.

사용 흐름:
    1. ``read_text_file``로 파일을 읽어서 앵커와 ``file_hash``를 확인해요.
    2. ``operations``에 replace / insert_after / insert_before / delete 연산을 담아요.
    3. ``file_hash``가 현재 파일과 다르면 아무것도 쓰지 않고 거부돼요.
    4. 모든 앵커가 해석되면 한 번에 적용하고 파일을 써요.

주의: 실패하면 어떤 경우에도 파일을 쓰지 않아요. 성공한 뒤에는 다시 읽어서
      새 ``file_hash``를 받아야 해요.
"""

from __future__ import annotations

from typing import Any

from hashfile_service.app.hashline import compute_file_hash, split_lines
from hashfile_service.app.operations import OP_TYPES, EditOperation, apply_operations, parse_operation
from hashfile_service.app.roots import RootsManager
from hashfile_service.app.tools.base import BaseTool, ToolResult
from hashfile_service.app.tools.file_access import read_text, resolve_target, write_text
from libs.common.errors import DomainError, FileConflictError, ValidationError
from libs.common.logging import get_logger

logger = get_logger("hashfile_service.tools.edit_text_file")


def _optional_str(item: dict[str, Any], key: str, position: int) -> str | None:
    value = item.get(key)
    if value is None or isinstance(value, str):
        return value
    raise ValidationError(f"operations[{position}].{key} must be a string")


def parse_operations(raw_operations: object) -> list[EditOperation]:
    """요청의 ``operations`` 목록을 편집 연산 목록으로 바꿔요."""
    if not isinstance(raw_operations, list):
        raise ValidationError("operations parameter must be a list")

    operations: list[EditOperation] = []
    for position, item in enumerate(raw_operations):
        if not isinstance(item, dict):
            raise ValidationError(f"operations[{position}] must be an object")
        op_type = item.get("op_type")
        anchor = item.get("anchor")
        if not isinstance(op_type, str):
            raise ValidationError(f"operations[{position}].op_type is required")
        if not isinstance(anchor, str):
            raise ValidationError(f"operations[{position}].anchor is required")
        operations.append(
            parse_operation(
                op_type,
                anchor,
                end_anchor=_optional_str(item, "end_anchor", position),
                content=_optional_str(item, "content", position),
            )
        )
    return operations


class EditTextFileTool(BaseTool):
    """해시 앵커 연산 묶음을 파일에 원자적으로 적용하는 도구예요."""

    def __init__(self, *, roots_manager: RootsManager | None = None) -> None:
        self._roots_manager = roots_manager

    @property
    def name(self) -> str:
        return "edit_text_file"

    @property
    def description(self) -> str:
        return (
            "read_text_file에서 받은 '줄번호:해시' 앵커로 파일을 편집해요. "
            "file_hash는 마지막으로 읽었을 때의 값이어야 하고, 파일이 그 뒤로 "
            "바뀌었으면 거부돼요. replace와 delete는 end_anchor로 범위를 지정할 수 있어요. "
            "모든 앵커는 편집 전 원본 기준으로 해석되므로 한 번의 호출에 여러 연산을 담아도 돼요."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "Absolute path to the file to edit",
                },
                "file_hash": {
                    "type": "string",
                    "description": "6-character file_hash from the last read_text_file output",
                },
                "operations": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "op_type": {
                                "type": "string",
                                "enum": list(OP_TYPES),
                                "description": "Type of operation: replace, insert_after, insert_before, or delete",
                            },
                            "anchor": {
                                "type": "string",
                                "description": "Anchor in lineNum:hash format",
                            },
                            "end_anchor": {
                                "type": "string",
                                "description": "Optional end anchor in lineNum:hash format for range operations",
                            },
                            "content": {
                                "type": "string",
                                "description": "New content for replace or insert operations",
                            },
                        },
                        "required": ["op_type", "anchor"],
                    },
                },
            },
            "required": ["path", "file_hash", "operations"],
        }

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        path_value = arguments.get("path")
        try:
            target = resolve_target(path_value, self._roots_manager)
            expected_hash = arguments.get("file_hash")
            if not isinstance(expected_hash, str) or not expected_hash.strip():
                raise ValidationError("file_hash parameter is required")

            current_content = read_text(target)
            current_hash = compute_file_hash(current_content)
            if current_hash != expected_hash.strip().lower():
                logger.warning(
                    "file_edit_conflict",
                    path=str(target),
                    expected_hash=expected_hash,
                    current_hash=current_hash,
                )
                raise FileConflictError(str(target))

            operations = parse_operations(arguments.get("operations"))
            new_content = apply_operations(current_content, operations)
            write_text(target, new_content)
        except DomainError as exc:
            logger.warning("file_edit_rejected", path=path_value, error_code=exc.error_code, error=exc.message)
            return ToolResult(ok=False, error=exc.message, error_code=exc.error_code)

        total_lines = len(split_lines(new_content))
        logger.info(
            "file_edited",
            path=str(target),
            operations_applied=len(operations),
            total_lines=total_lines,
        )
        return ToolResult(
            ok=True,
            output=f"Successfully edited {target}",
            metadata={
                "operations_applied": len(operations),
                "total_lines": total_lines,
            },
        )
