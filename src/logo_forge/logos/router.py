"""Saved-logo API router."""

from fastapi import APIRouter, Depends, HTTPException

from logo_forge.common.exceptions import LogoNotFoundError
from logo_forge.common.security import CallerContext, require_user
from logo_forge.logos.schemas import (
    LogoDeleteResponse,
    LogoListResponse,
    LogoResponse,
    LogoSaveRequest,
    LogoSaveResponse,
)

router = APIRouter(prefix="/logos", tags=["logos"])


def _get_service():
    from logo_forge.deps import get_logo_service
    return get_logo_service()


def _get_accounts():
    from logo_forge.deps import get_account_service
    return get_account_service()


def _get_db():
    from logo_forge.deps import get_db
    return get_db()


@router.get("/saved", response_model=LogoListResponse)
async def list_saved_logos(caller: CallerContext = Depends(require_user)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        user = await _get_accounts().get_by_external_id(session, caller.user_id)
        if user is None:
            return LogoListResponse(logos=[])
        logos = await svc.list_logos(session, user.id)
        return LogoListResponse(logos=[LogoResponse.model_validate(l) for l in logos])


@router.post("/save", response_model=LogoSaveResponse, status_code=201)
async def save_logo(body: LogoSaveRequest, caller: CallerContext = Depends(require_user)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        user = await _get_accounts().sync_user(session, caller.user_id)
        logo = await svc.save_logo(
            session, user.id, body.url,
            prompt=body.prompt,
            is_premium=body.is_premium,
            file_format=body.file_format,
        )
        return LogoSaveResponse(logo=LogoResponse.model_validate(logo))


@router.delete("/clear", response_model=LogoDeleteResponse)
async def clear_logos(caller: CallerContext = Depends(require_user)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        user = await _get_accounts().get_by_external_id(session, caller.user_id)
        if user is None:
            return LogoDeleteResponse(removed=0)
        removed = await svc.clear_logos(session, user.id)
        return LogoDeleteResponse(removed=removed)


@router.delete("/{logo_id}", response_model=LogoDeleteResponse)
async def remove_logo(logo_id: str, caller: CallerContext = Depends(require_user)):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            user = await _get_accounts().get_by_external_id(session, caller.user_id)
            if user is None:
                raise LogoNotFoundError()
            await svc.remove_logo(session, user.id, logo_id)
    except LogoNotFoundError:
        raise HTTPException(status_code=404, detail="Logo not found")
    return LogoDeleteResponse(removed=1)
