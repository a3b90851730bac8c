"""Hashline 유틸리티예요.

각 라인에 내용 기반 짧은 해시를 붙여서 호출자가 줄 번호가 밀려도
정확한 위치를 지정할 수 있게 해 줘요. 파일 전체에는 6자리 다이제스트를
붙여서 낙관적 동시성 토큰으로 사용해요.

형식: ``줄번호:해시|코드내용``
예시: ``1:a3|def hello():``

해시는 FNV-1a 64비트예요. 보안용이 아니라 편의용 체크섬이에요.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from libs.common.errors import AnchorAmbiguousError, AnchorNotFoundError, AnchorParseError

FNV_OFFSET_BASIS = 0xCBF29CE484222325
FNV_PRIME = 0x100000001B3
_MASK_64 = 0xFFFFFFFFFFFFFFFF

HASHLINE_VERSION = 1

_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


def _fnv1a_64(data: bytes) -> int:
    value = FNV_OFFSET_BASIS
    for byte in data:
        value ^= byte
        value = (value * FNV_PRIME) & _MASK_64
    return value


def hash_line(content: str) -> str:
    """라인 내용으로부터 2글자 해시를 생성해요.

    끝쪽 공백만 제거(rstrip)한 텍스트를 해싱하므로 줄 끝 공백 변경에는
    해시가 바뀌지 않아요. 들여쓰기는 해시에 반영돼요.

    Args:
        content: 원본 라인 텍스트예요.

    Returns:
        하위 8비트를 나타내는 소문자 16진 문자열 2글자예요 (256가지).
    """
    trimmed = content.rstrip()
    return f"{_fnv1a_64(trimmed.encode('utf-8')) & 0xFF:02x}"


def compute_file_hash(content: str) -> str:
    """파일 전체 내용의 6글자 다이제스트를 계산해요.

    공백을 포함한 원문 그대로를 해싱하고 하위 24비트만 사용해요.
    편집 요청마다 디스크의 현재 내용으로 다시 계산해서 비교해요.
    """
    return f"{_fnv1a_64(content.encode('utf-8')) & 0xFFFFFF:06x}"


def split_lines(content: str) -> list[str]:
    """내용을 ``\\n`` 기준으로 라인 목록으로 나눠요.

    각 라인 끝의 ``\\r``은 제거하고, 마지막 종결자 뒤의 빈 조각은 버려요.
    빈 문자열이면 빈 목록을 반환해요.
    """
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def has_trailing_newline(content: str) -> bool:
    return content.endswith("\n")


def detect_newline(content: str) -> str:
    """첫 번째 줄 종결자가 CRLF면 ``\\r\\n``, 아니면 ``\\n``을 반환해요."""
    index = content.find("\n")
    if index > 0 and content[index - 1] == "\r":
        return "\r\n"
    return "\n"


def format_lines_with_hash(lines: Sequence[str], *, start: int = 1) -> list[str]:
    """라인 목록에 ``줄번호:해시|내용`` 형식을 적용해요.

    Args:
        lines: 원본 라인 문자열 리스트예요.
        start: 시작 줄 번호(1-indexed)예요.

    Returns:
        hashline 포맷이 적용된 문자열 리스트예요.
    """
    return [f"{i}:{hash_line(line)}|{line}" for i, line in enumerate(lines, start=start)]


def tag_content(content: str) -> str:
    """파일 내용 전체를 hashline 포맷으로 렌더링해요. 아무것도 변경하지 않아요."""
    return "\n".join(format_lines_with_hash(split_lines(content)))


@dataclass(frozen=True, slots=True)
class LineAnchor:
    """``줄번호:해시`` 형태의 라인 앵커예요.

    호출자가 마지막으로 파일을 읽었을 때 ``line_num`` 위치에 있었고
    내용 해시가 ``hash``였던 라인을 가리켜요.
    """

    line_num: int
    hash: str

    @classmethod
    def parse(cls, text: str) -> LineAnchor:
        parts = text.strip().split(":")
        if len(parts) != 2:
            raise AnchorParseError(f"Invalid anchor format '{text}'. Expected 'line_num:hash'")

        line_part, hash_part = parts[0].strip(), parts[1].strip()
        if not (line_part.isascii() and line_part.isdigit()):
            raise AnchorParseError(f"Invalid line number in anchor '{text}'")
        line_num = int(line_part)
        if line_num < 1:
            raise AnchorParseError(f"Line number must be 1 or greater in anchor '{text}'")
        if not _HEX_RE.match(hash_part):
            raise AnchorParseError(f"Invalid hash in anchor '{text}'")

        return cls(line_num=line_num, hash=hash_part.lower())

    def __str__(self) -> str:
        return f"{self.line_num}:{self.hash}"


def compute_line_hashes(lines: Sequence[str]) -> list[str]:
    """라인마다 `hash_line` 결과를 한 번씩 계산해요."""
    return [hash_line(line) for line in lines]


def resolve_anchor(
    lines: Sequence[str],
    anchor: LineAnchor,
    *,
    line_hashes: Sequence[str] | None = None,
) -> int:
    """앵커를 현재 라인 목록의 0-indexed 인덱스로 변환해요.

    1. 줄 번호 위치의 해시가 일치하면 그 인덱스를 바로 반환해요.
    2. 아니면 전체 라인을 훑어 같은 해시를 가진 인덱스를 모아요.
    3. 정확히 하나면 그 인덱스를 반환해요 (줄 번호가 밀린 경우).

    여러 앵커를 같은 라인 목록에 해석할 때는 `compute_line_hashes` 결과를
    ``line_hashes``로 넘겨서 라인을 다시 해싱하지 않게 해요.

    Raises:
        AnchorNotFoundError: 같은 해시를 가진 라인이 없을 때예요.
        AnchorAmbiguousError: 줄 번호가 빗나갔고 같은 해시가 여러 줄에 있을 때예요.
    """
    idx = anchor.line_num - 1
    if 0 <= idx < len(lines):
        current = line_hashes[idx] if line_hashes is not None else hash_line(lines[idx])
        if current == anchor.hash:
            return idx

    hashes = line_hashes if line_hashes is not None else compute_line_hashes(lines)
    matches = [i for i, value in enumerate(hashes) if value == anchor.hash]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise AnchorNotFoundError(str(anchor))
    raise AnchorAmbiguousError(str(anchor), len(matches))
