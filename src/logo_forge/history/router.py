"""Generation history API router."""

from fastapi import APIRouter, Depends, Query

from logo_forge.common.security import CallerContext, require_user
from logo_forge.history.schemas import GenerationHistoryResponse, GenerationRecordResponse

router = APIRouter(prefix="/generations", tags=["generations"])


def _get_service():
    from logo_forge.deps import get_history_service
    return get_history_service()


def _get_accounts():
    from logo_forge.deps import get_account_service
    return get_account_service()


def _get_db():
    from logo_forge.deps import get_db
    return get_db()


@router.get("/history", response_model=GenerationHistoryResponse)
async def list_generation_history(
    limit: int = Query(50, ge=1, le=200),
    caller: CallerContext = Depends(require_user),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        user = await _get_accounts().get_by_external_id(session, caller.user_id)
        if user is None:
            return GenerationHistoryResponse(generations=[], total_rounds=0, total_logos=0)
        rounds = await svc.list_rounds(session, user.id, limit=limit)
        total_rounds, total_logos = await svc.summary(session, user.id)
        return GenerationHistoryResponse(
            generations=[GenerationRecordResponse.model_validate(r) for r in rounds],
            total_rounds=total_rounds,
            total_logos=total_logos,
        )
