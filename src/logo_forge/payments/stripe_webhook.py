"""Stripe payment_intent.succeeded webhook parsing."""

import hashlib
import hmac
import logging
import time
from typing import Any, Optional

from logo_forge.payments.schemas import EntitlementGrant

logger = logging.getLogger(__name__)

UNLIMITED_PRODUCT = "unlimited"
SIGNATURE_TOLERANCE = 300  # seconds


def verify_stripe_signature(
    payload: bytes,
    signature_header: str,
    webhook_secret: str,
    tolerance: int | None = SIGNATURE_TOLERANCE,
    now: float | None = None,
) -> bool:
    """Verify Stripe webhook signature (v1 scheme).

    Stripe sends: t=<timestamp>,v1=<signature>[,v1=<signature>...]
    """
    if not signature_header or not webhook_secret:
        return False

    timestamp = ""
    signatures = []
    for item in signature_header.split(","):
        key, _, value = item.partition("=")
        key = key.strip()
        if key == "t":
            timestamp = value.strip()
        elif key == "v1":
            signatures.append(value.strip())
    if not timestamp or not signatures:
        return False

    if tolerance is not None:
        try:
            age = (now if now is not None else time.time()) - int(timestamp)
        except ValueError:
            return False
        if abs(age) > tolerance:
            return False

    signed_payload = f"{timestamp}.".encode() + payload
    computed = hmac.new(
        webhook_secret.encode(),
        signed_payload,
        hashlib.sha256,
    ).hexdigest()

    return any(hmac.compare_digest(computed, sig) for sig in signatures)


def parse_payment_succeeded(event_data: dict[str, Any]) -> Optional[EntitlementGrant]:
    """Extract an unlimited-access grant from payment_intent.succeeded.

    Expected metadata on the PaymentIntent (set by create_payment_intent):
    - external_id: the buyer's auth-provider user id
    - product: "unlimited"
    """
    event_type = event_data.get("type", "")
    if event_type != "payment_intent.succeeded":
        logger.debug("Ignoring Stripe event type: %s", event_type)
        return None

    intent = event_data.get("data", {}).get("object", {})
    metadata = intent.get("metadata") or {}

    external_id = metadata.get("external_id", "")
    if not external_id or metadata.get("product") != UNLIMITED_PRODUCT:
        logger.warning("Stripe payment missing external_id/product in metadata")
        return None

    return EntitlementGrant(
        external_id=external_id,
        payment_reference=intent.get("id", ""),
        amount=intent.get("amount_received", intent.get("amount", 0)) or 0,
        currency=intent.get("currency", ""),
    )
