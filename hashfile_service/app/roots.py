"""허용된 루트 디렉터리 안의 경로인지 검사하는 모듈이에요."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path
from urllib.parse import unquote, urlparse

from libs.common.errors import ScopeViolationError


def root_to_path(root: str) -> Path | None:
    """``file://`` URI 또는 절대 경로 문자열을 `Path`로 바꿔요.

    다른 스킴의 URI나 상대 경로면 ``None``을 반환해요.
    """
    value = root.strip()
    if not value:
        return None
    if "://" in value:
        parsed = urlparse(value)
        if parsed.scheme != "file":
            return None
        path = Path(unquote(parsed.path))
    else:
        path = Path(value)
    return path if path.is_absolute() else None


def _usable_roots(roots: Iterable[str]) -> list[str]:
    return [root.strip() for root in roots if root_to_path(root) is not None]


def _is_within(path: Path, root: Path) -> bool:
    return path == root or root in path.parents


def _within_any(resolved: Path, roots: Sequence[str]) -> bool:
    for root in roots:
        root_path = root_to_path(root)
        if root_path is not None and _is_within(resolved, root_path.resolve()):
            return True
    return False


class RootsManager:
    """허용 루트를 두 겹으로 보관하고 경로를 검사해요.

    운영자 루트(``HASHFILE_ALLOWED_ROOTS``, ``PUT /v1/roots``)가 상한이고,
    MCP 클라이언트가 알려 준 루트는 그 안에서 범위를 더 좁히기만 해요.
    두 목록 중 설정된 것마다 경로가 그 안에 있어야 허용돼요. 설정된
    목록이 비어 있으면 모든 경로를 거부하고, 어느 쪽도 설정된 적이
    없을 때만 경로를 제한하지 않아요.
    """

    def __init__(self, roots: Iterable[str] = ()) -> None:
        configured = list(roots)
        self._roots: list[str] | None = _usable_roots(configured) if configured else None
        self._client_roots: list[str] | None = None

    def set_roots(self, roots: Iterable[str]) -> None:
        """운영자 루트를 통째로 교체해요. 해석할 수 없는 항목은 버려요."""
        self._roots = _usable_roots(roots)

    def set_client_roots(self, roots: Iterable[str]) -> None:
        """클라이언트가 알려 준 루트로 교체해요. 운영자 루트를 넓히지는 못해요."""
        self._client_roots = _usable_roots(roots)

    def list_roots(self) -> list[str]:
        return list(self._roots or [])

    def list_client_roots(self) -> list[str] | None:
        return None if self._client_roots is None else list(self._client_roots)

    def is_enforced(self) -> bool:
        return self._roots is not None or self._client_roots is not None

    def is_path_allowed(self, path_str: str) -> bool:
        """경로가 설정된 모든 루트 목록의 범위 안에 있으면 True를 반환해요.

        심볼릭 링크와 ``..``를 해석한 실제 경로로 비교해요. 아직 없는 경로는
        존재하는 가장 가까운 상위 디렉터리까지 해석하고 나머지를 붙여요.

        Raises:
            ScopeViolationError: 절대 경로가 아닐 때예요.
        """
        path = Path(path_str)
        if not path.is_absolute():
            raise ScopeViolationError(f"Path must be absolute: {path_str}")
        if not self.is_enforced():
            return True

        resolved = path.resolve()
        for layer in (self._roots, self._client_roots):
            if layer is not None and not _within_any(resolved, layer):
                return False
        return True

    def check_path(self, path_str: str) -> None:
        if not self.is_path_allowed(path_str):
            raise ScopeViolationError(f"Path is outside the permitted roots: {path_str}")
