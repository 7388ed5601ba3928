"""Account API router."""

from fastapi import APIRouter, Depends

from logo_forge.accounts.schemas import (
    EntitlementUpdate,
    MigrationRequest,
    MigrationResponse,
    ProfileResponse,
    UserResponse,
    UserSyncRequest,
)
from logo_forge.common.exceptions import UserNotFoundError
from logo_forge.common.security import CallerContext, require_api_key, require_user
from logo_forge.usage.schemas import UsageResponse

router = APIRouter(prefix="/users", tags=["users"])


def _get_service():
    from logo_forge.deps import get_account_service
    return get_account_service()


def _get_usage_service():
    from logo_forge.deps import get_usage_service
    return get_usage_service()


def _get_db():
    from logo_forge.deps import get_db
    return get_db()


@router.post("/sync", response_model=UserResponse)
async def sync_user(body: UserSyncRequest, caller: CallerContext = Depends(require_user)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        user = await svc.sync_user(session, caller.user_id, body.email)
        return UserResponse.model_validate(user)


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(caller: CallerContext = Depends(require_user)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        user = await svc.get_by_external_id(session, caller.user_id)
        if user is None:
            raise UserNotFoundError()
        saved = await svc.logo_service.count_logos(session, user.id)
        user_out = UserResponse.model_validate(user)

    snapshot = await _get_usage_service().get_usage(caller)
    return ProfileResponse(
        user=user_out,
        usage=UsageResponse(**snapshot.as_dict()),
        saved_logos=saved,
    )


@router.post("/migrate", response_model=MigrationResponse)
async def migrate_local_data(
    body: MigrationRequest, caller: CallerContext = Depends(require_user),
):
    svc = _get_service()
    db = _get_db()
    data = body.localStorageData
    async with db.get_session() as session:
        _, imported = await svc.migrate_local_data(
            session, caller.user_id, body.email, data.savedLogos,
        )

    snapshot = await _get_usage_service().record_migrated_usage(caller, data.generations)
    return MigrationResponse(
        success=True,
        message="Migration completed",
        logos_imported=imported,
        usage=UsageResponse(**snapshot.as_dict()),
    )


@router.put("/{external_id}/entitlement", response_model=UserResponse)
async def update_entitlement(
    external_id: str, body: EntitlementUpdate, _=Depends(require_api_key),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        user = await svc.set_unlimited(
            session, external_id,
            enabled=body.unlimited,
            payment_reference=body.payment_reference,
        )
        return UserResponse.model_validate(user)
