from __future__ import annotations

import uuid
from dataclasses import dataclass


@dataclass(slots=True)
class ErrorEnvelope:
    error_code: str
    message: str
    trace_id: str
    retryable: bool


class DomainError(Exception):
    def __init__(self, error_code: str, message: str, retryable: bool = False) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.retryable = retryable


class ValidationError(DomainError):
    def __init__(self, message: str = "검증에 실패했어요.") -> None:
        super().__init__("VALIDATION_FAILED", message, retryable=False)


class FileAccessError(DomainError):
    def __init__(self, message: str = "파일 입출력에 실패했어요.") -> None:
        super().__init__("FILE_IO_FAILED", message, retryable=False)


class ScopeViolationError(DomainError):
    def __init__(self, message: str = "허용된 루트 밖의 경로예요.") -> None:
        super().__init__("PATH_OUT_OF_SCOPE", message, retryable=False)


class AnchorParseError(DomainError):
    def __init__(self, message: str = "Invalid anchor format. Expected 'line_num:hash'") -> None:
        super().__init__("INVALID_ANCHOR", message, retryable=False)


class UnknownOperationError(DomainError):
    def __init__(self, op_type: str) -> None:
        super().__init__("UNKNOWN_OPERATION", f"Invalid operation type: {op_type}", retryable=False)
        self.op_type = op_type


class FileConflictError(DomainError):
    # 다시 읽은 뒤 재시도하면 성공할 수 있어서 retryable이에요.
    def __init__(self, path: str) -> None:
        super().__init__(
            "FILE_CONFLICT",
            f"File {path} has been modified since last read. Please re-read the file.",
            retryable=True,
        )
        self.path = path


class AnchorNotFoundError(DomainError):
    def __init__(self, anchor: str) -> None:
        super().__init__("ANCHOR_NOT_FOUND", f"Anchor {anchor} not found", retryable=False)
        self.anchor = anchor


class AnchorAmbiguousError(DomainError):
    def __init__(self, anchor: str, match_count: int) -> None:
        super().__init__(
            "ANCHOR_AMBIGUOUS",
            f"Anchor {anchor} is ambiguous ({match_count} matches found)",
            retryable=False,
        )
        self.anchor = anchor
        self.match_count = match_count


class RangeInversionError(DomainError):
    def __init__(self, start_anchor: str, end_anchor: str) -> None:
        super().__init__(
            "RANGE_INVERTED",
            f"End anchor {end_anchor} is before start anchor {start_anchor}",
            retryable=False,
        )
        self.start_anchor = start_anchor
        self.end_anchor = end_anchor


class OverlappingOperationsError(DomainError):
    def __init__(self, first_anchor: str, second_anchor: str) -> None:
        super().__init__(
            "OPERATION_OVERLAP",
            f"Operations at {first_anchor} and {second_anchor} target overlapping lines",
            retryable=False,
        )
        self.first_anchor = first_anchor
        self.second_anchor = second_anchor


def build_error_envelope(error_code: str, message: str, retryable: bool) -> ErrorEnvelope:
    return ErrorEnvelope(
        error_code=error_code,
        message=message,
        trace_id=str(uuid.uuid4()),
        retryable=retryable,
    )
