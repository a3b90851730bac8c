from __future__ import annotations

from fastapi import APIRouter, Header, Request

from hashfile_service.app.models import EditFileRequest, ReadFileRequest, ToolResponse
from hashfile_service.app.tools.base import ToolResult
from hashfile_service.modules.common.deps import get_tool_registry, require_auth

router = APIRouter()


def _to_response(result: ToolResult) -> ToolResponse:
    # 실패도 200으로 돌려줘요. 본문의 ok와 "Error: " 텍스트로 구분해요.
    return ToolResponse(
        ok=result.ok,
        text=result.render_text(),
        error_code=result.error_code,
        metadata=result.metadata,
    )


@router.post("/files/read", response_model=ToolResponse)
async def read_file(
    request: Request,
    req: ReadFileRequest,
    authorization: str = Header(default=""),
) -> ToolResponse:
    require_auth(request, authorization)
    result = await get_tool_registry(request).call("read_text_file", req.model_dump())
    return _to_response(result)


@router.post("/files/edit", response_model=ToolResponse)
async def edit_file(
    request: Request,
    req: EditFileRequest,
    authorization: str = Header(default=""),
) -> ToolResponse:
    require_auth(request, authorization)
    result = await get_tool_registry(request).call("edit_text_file", req.model_dump())
    return _to_response(result)
