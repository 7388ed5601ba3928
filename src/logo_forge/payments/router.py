"""Payment endpoints: PaymentIntent creation and the Stripe webhook."""

import json
import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from logo_forge.common.config import get_settings
from logo_forge.common.exceptions import PaymentProviderError, status_for
from logo_forge.common.security import CallerContext, require_user
from logo_forge.payments.schemas import PaymentIntentResponse, WebhookResult
from logo_forge.payments.stripe_webhook import (
    parse_payment_succeeded,
    verify_stripe_signature,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["payments"])
payments_router = APIRouter(prefix="/payments", tags=["payments"])


def _get_service():
    from logo_forge.deps import get_payment_service
    return get_payment_service()


def _get_db():
    from logo_forge.deps import get_db
    return get_db()


@payments_router.post("/create-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(caller: CallerContext = Depends(require_user)):
    """Create a Stripe PaymentIntent for unlimited access."""
    svc = _get_service()
    try:
        result = svc.create_payment_intent(caller.user_id)
    except PaymentProviderError as e:
        raise HTTPException(status_code=status_for(e), detail=e.message)
    return PaymentIntentResponse(**result)


@router.post("/stripe", response_model=WebhookResult)
async def stripe_webhook(
    request: Request,
    stripe_signature: str = Header("", alias="Stripe-Signature"),
):
    """Handle Stripe payment_intent.succeeded webhook."""
    body = await request.body()

    stripe_secret = get_settings().stripe_webhook_secret
    if not stripe_secret:
        logger.error("Stripe webhook received but LOGOFORGE_STRIPE_WEBHOOK_SECRET is not set")
        raise HTTPException(status_code=503, detail="Stripe webhook not configured")
    if not verify_stripe_signature(body, stripe_signature, stripe_secret):
        logger.warning("Invalid Stripe webhook signature")
        raise HTTPException(status_code=400, detail="Invalid signature")

    try:
        event_data = json.loads(body)
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Invalid JSON")

    grant = parse_payment_succeeded(event_data)
    if grant is None:
        # Acknowledge so Stripe does not retry events we do not act on
        return WebhookResult(success=False, error="Unhandled event type or missing metadata")

    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        user = await svc.apply_grant(session, grant)
        external_id = user.external_id

    return WebhookResult(success=True, external_id=external_id)
