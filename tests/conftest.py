from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from hashfile_service.app.hashline import hash_line, split_lines
from hashfile_service.app.settings import Settings


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """tmp_path 아래에 바이트 그대로 파일을 만드는 헬퍼예요."""

    def _write(name: str, content: str) -> Path:
        target = tmp_path / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content.encode("utf-8"))
        return target

    return _write


@pytest.fixture
def test_settings() -> Settings:
    return Settings(api_token="test-token", allowed_roots=[], log_json=True)


def anchor_for(content: str, line_num: int) -> str:
    """내용의 ``line_num``번째 줄(1-indexed)에 대한 ``줄번호:해시`` 앵커를 만들어요."""
    lines = split_lines(content)
    return f"{line_num}:{hash_line(lines[line_num - 1])}"


def parse_file_hash(read_output: str) -> str:
    """read_text_file 출력의 메타데이터에서 file_hash 값을 꺼내요."""
    for line in read_output.splitlines():
        if line.startswith("file_hash: "):
            return line.removeprefix("file_hash: ")
    raise AssertionError("file_hash가 출력에 없어요.")
