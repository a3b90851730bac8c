"""파일 도구가 공유하는 경로 검증과 읽기/쓰기 헬퍼예요."""

from __future__ import annotations

from pathlib import Path

from hashfile_service.app.roots import RootsManager
from libs.common.errors import FileAccessError, ScopeViolationError, ValidationError


def resolve_target(raw_path: object, roots_manager: RootsManager | None) -> Path:
    """요청의 ``path`` 값을 검증해서 `Path`로 반환해요.

    `RootsManager`가 있으면 범위 검사를 거쳐요. 루트가 설정된 적이 없으면 통과해요.
    """
    if not isinstance(raw_path, str) or not raw_path.strip():
        raise ValidationError("path parameter is required")

    path_str = raw_path.strip()
    target = Path(path_str)
    if not target.is_absolute():
        raise ScopeViolationError(f"Path must be absolute: {path_str}")

    if roots_manager is not None:
        roots_manager.check_path(path_str)
    return target


def read_text(target: Path) -> str:
    # 줄바꿈 변환 없이 원문 그대로 읽어야 다이제스트가 디스크 내용과 일치해요.
    try:
        raw = target.read_bytes()
    except FileNotFoundError as exc:
        raise FileAccessError(f"File not found: {target}") from exc
    except IsADirectoryError as exc:
        raise FileAccessError(f"Path is a directory: {target}") from exc
    except PermissionError as exc:
        raise FileAccessError(f"Permission denied: {target}") from exc
    except OSError as exc:
        raise FileAccessError(f"Failed to read {target}: {exc}") from exc

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FileAccessError(f"File is not valid UTF-8 text: {target}") from exc


def write_text(target: Path, content: str) -> None:
    try:
        target.write_bytes(content.encode("utf-8"))
    except PermissionError as exc:
        raise FileAccessError(f"Permission denied: {target}") from exc
    except OSError as exc:
        raise FileAccessError(f"Failed to write {target}: {exc}") from exc
