"""해시 앵커 기반 편집 연산과 일괄 적용 로직이에요.

연산 종류는 닫힌 집합이라 종류마다 하나의 불변 데이터클래스로 표현하고
``EditOperation`` 유니언으로 묶어요. 적용 시에는 ``isinstance`` 분기를
``assert_never``로 끝내서 처리되지 않은 종류가 남지 않게 해요.

적용 순서:
    1. 모든 앵커를 **원본** 라인 목록 기준으로 해석해요.
    2. 역방향 범위와 겹치는 대상을 검증해요. 실패하면 아무것도 바꾸지 않아요.
    3. 시작 인덱스 내림차순으로 정렬해서 한 번에 적용해요. 뒤쪽부터 바꾸므로
       아직 적용하지 않은 앞쪽 연산의 인덱스는 밀리지 않아요.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import assert_never

from hashfile_service.app.hashline import (
    LineAnchor,
    compute_line_hashes,
    detect_newline,
    has_trailing_newline,
    resolve_anchor,
    split_lines,
)
from libs.common.errors import (
    OverlappingOperationsError,
    RangeInversionError,
    UnknownOperationError,
)

OP_TYPES = ("replace", "insert_after", "insert_before", "delete")


@dataclass(frozen=True, slots=True)
class ReplaceOp:
    """``anchor``부터 ``end_anchor``까지(없으면 한 줄)를 ``content``로 교체해요."""

    anchor: LineAnchor
    end_anchor: LineAnchor | None = None
    content: str | None = None


@dataclass(frozen=True, slots=True)
class DeleteOp:
    """``anchor``부터 ``end_anchor``까지(없으면 한 줄)를 삭제해요."""

    anchor: LineAnchor
    end_anchor: LineAnchor | None = None


@dataclass(frozen=True, slots=True)
class InsertAfterOp:
    """``anchor`` 라인 바로 뒤에 ``content``를 삽입해요."""

    anchor: LineAnchor
    content: str | None = None


@dataclass(frozen=True, slots=True)
class InsertBeforeOp:
    """``anchor`` 라인 바로 앞에 ``content``를 삽입해요."""

    anchor: LineAnchor
    content: str | None = None


EditOperation = ReplaceOp | DeleteOp | InsertAfterOp | InsertBeforeOp


def parse_operation(
    op_type: str,
    anchor: str,
    end_anchor: str | None = None,
    content: str | None = None,
) -> EditOperation:
    """외부 입력 필드로부터 편집 연산을 만들어요.

    삽입 연산에 전달된 ``end_anchor``는 무시해요.

    Raises:
        UnknownOperationError: ``op_type``이 네 가지 중 하나가 아닐 때예요.
        AnchorParseError: 앵커 문자열 형식이 잘못됐을 때예요.
    """
    kind = op_type.strip()
    if kind not in OP_TYPES:
        raise UnknownOperationError(op_type)

    start = LineAnchor.parse(anchor)
    end = LineAnchor.parse(end_anchor) if end_anchor is not None and end_anchor.strip() else None

    if kind == "replace":
        return ReplaceOp(anchor=start, end_anchor=end, content=content)
    if kind == "delete":
        return DeleteOp(anchor=start, end_anchor=end)
    if kind == "insert_after":
        return InsertAfterOp(anchor=start, content=content)
    return InsertBeforeOp(anchor=start, content=content)


@dataclass(slots=True)
class ResolvedOperation:
    operation: EditOperation
    start: int
    # 포함 끝 인덱스예요. 삽입 연산은 start와 같아요.
    end: int
    order: int

    @property
    def removes_lines(self) -> bool:
        return isinstance(self.operation, (ReplaceOp, DeleteOp))

    @property
    def label(self) -> str:
        return str(self.operation.anchor)

    def sort_key(self) -> tuple[int, int, int]:
        # 같은 줄이면 insert_after를 insert_before보다 먼저 적용해요.
        rank = 1 if isinstance(self.operation, InsertAfterOp) else 0
        return (self.start, rank, self.order)


def _resolve(
    lines: Sequence[str],
    line_hashes: Sequence[str],
    operation: EditOperation,
    order: int,
) -> ResolvedOperation:
    start = resolve_anchor(lines, operation.anchor, line_hashes=line_hashes)
    end = start
    if isinstance(operation, (ReplaceOp, DeleteOp)) and operation.end_anchor is not None:
        end = resolve_anchor(lines, operation.end_anchor, line_hashes=line_hashes)
        if end < start:
            raise RangeInversionError(str(operation.anchor), str(operation.end_anchor))
    return ResolvedOperation(operation=operation, start=start, end=end, order=order)


def _check_overlaps(resolved: Sequence[ResolvedOperation]) -> None:
    ranges = [item for item in resolved if item.removes_lines]
    for position, first in enumerate(ranges):
        for second in ranges[position + 1 :]:
            if first.start <= second.end and second.start <= first.end:
                raise OverlappingOperationsError(first.label, second.label)

    for item in resolved:
        if item.removes_lines:
            continue
        for span in ranges:
            if span.start <= item.start <= span.end:
                raise OverlappingOperationsError(span.label, item.label)


def resolve_operations(lines: Sequence[str], operations: Sequence[EditOperation]) -> list[ResolvedOperation]:
    """모든 연산을 원본 기준으로 해석하고 적용 순서대로 정렬해서 반환해요."""
    line_hashes = compute_line_hashes(lines)
    resolved = [_resolve(lines, line_hashes, operation, order) for order, operation in enumerate(operations)]
    _check_overlaps(resolved)
    return sorted(resolved, key=ResolvedOperation.sort_key, reverse=True)


def apply_operations(content: str, operations: Sequence[EditOperation]) -> str:
    """편집 연산 묶음을 내용에 적용한 새 내용을 반환해요.

    원본이 줄 종결자로 끝났다면 결과에도 다시 붙여요. 파일 시스템은
    건드리지 않아요.

    Raises:
        AnchorNotFoundError: 앵커에 해당하는 라인이 없을 때예요.
        AnchorAmbiguousError: 앵커가 여러 줄과 일치할 때예요.
        RangeInversionError: 끝 앵커가 시작 앵커보다 앞에 있을 때예요.
        OverlappingOperationsError: 두 연산의 대상 범위가 겹칠 때예요.
    """
    lines = split_lines(content)
    newline = detect_newline(content)

    for item in resolve_operations(lines, operations):
        operation = item.operation
        if isinstance(operation, ReplaceOp):
            lines[item.start : item.end + 1] = split_lines(operation.content or "")
        elif isinstance(operation, DeleteOp):
            del lines[item.start : item.end + 1]
        elif isinstance(operation, InsertAfterOp):
            lines[item.start + 1 : item.start + 1] = split_lines(operation.content or "")
        elif isinstance(operation, InsertBeforeOp):
            lines[item.start : item.start] = split_lines(operation.content or "")
        else:
            assert_never(operation)

    result = newline.join(lines)
    if has_trailing_newline(content):
        result += newline
    return result
