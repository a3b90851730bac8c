from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ReadFileRequest(BaseModel):
    path: str = Field(min_length=1)


class EditOperationInput(BaseModel):
    # op_type은 자유 문자열로 받아야 알 수 없는 값을 편집 오류로 돌려줄 수 있어요.
    op_type: str
    anchor: str
    end_anchor: str | None = None
    content: str | None = None


class EditFileRequest(BaseModel):
    path: str = Field(min_length=1)
    file_hash: str
    operations: list[EditOperationInput] = Field(default_factory=list)


class ToolResponse(BaseModel):
    ok: bool
    text: str
    error_code: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class RootsUpdateRequest(BaseModel):
    roots: list[str]


class RootsResponse(BaseModel):
    roots: list[str]
