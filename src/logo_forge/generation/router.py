"""Premium logo upscaling router."""

import logging

from fastapi import APIRouter, Depends

from logo_forge.common.exceptions import InvalidRequestError, PremiumRequiredError
from logo_forge.common.security import CallerContext, require_user
from logo_forge.generation.schemas import UpscaleRequest, UpscaleResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["generation"])

_IMAGE_URL_PREFIXES = ("https://", "http://", "data:image/")


def _get_upscaler():
    from logo_forge.deps import get_upscaler
    return get_upscaler()


def _get_accounts():
    from logo_forge.deps import get_account_service
    return get_account_service()


def _get_db():
    from logo_forge.deps import get_db
    return get_db()


@router.post("/upscale", response_model=UpscaleResponse)
async def upscale_logo(
    body: UpscaleRequest,
    caller: CallerContext = Depends(require_user),
):
    """Upscale a generated logo. Unlimited accounts only."""
    image_url = body.image_url.strip()
    if not image_url:
        raise InvalidRequestError("Image URL is required")
    if not image_url.startswith(_IMAGE_URL_PREFIXES):
        raise InvalidRequestError("Image URL must be http(s) or a data:image URL")

    async with _get_db().get_session() as session:
        payment = await _get_accounts().payment_state(session, caller.user_id)
    if not payment.has_unlimited:
        logger.info("Upscale denied for user %s without unlimited access", caller.user_id)
        raise PremiumRequiredError("Upscaling is available with unlimited access")

    result = await _get_upscaler().upscale(image_url, body.scale)
    return UpscaleResponse(
        originalUrl=result.original_url,
        upscaledUrl=result.upscaled_url,
        scale=result.scale,
        processingTime=result.processing_time_ms,
    )
