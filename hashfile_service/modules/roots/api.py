from __future__ import annotations

from fastapi import APIRouter, Header, Request

from hashfile_service.app.models import RootsResponse, RootsUpdateRequest
from hashfile_service.app.roots import root_to_path
from hashfile_service.modules.common.deps import get_roots_manager, require_auth
from libs.common.errors import ValidationError
from libs.common.logging import get_logger

router = APIRouter()
logger = get_logger("hashfile_service.modules.roots")


@router.get("/roots", response_model=RootsResponse)
async def list_roots(
    request: Request,
    authorization: str = Header(default=""),
) -> RootsResponse:
    require_auth(request, authorization)
    return RootsResponse(roots=get_roots_manager(request).list_roots())


@router.put("/roots", response_model=RootsResponse)
async def replace_roots(
    request: Request,
    req: RootsUpdateRequest,
    authorization: str = Header(default=""),
) -> RootsResponse:
    require_auth(request, authorization)
    invalid = [root for root in req.roots if root_to_path(root) is None]
    if invalid:
        raise ValidationError(f"Roots must be absolute paths or file:// URIs: {', '.join(invalid)}")

    roots_manager = get_roots_manager(request)
    roots_manager.set_roots(req.roots)
    logger.info("roots_updated", source="api", roots=roots_manager.list_roots())
    return RootsResponse(roots=roots_manager.list_roots())
