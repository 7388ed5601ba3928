"""Pydantic schemas for payment endpoints."""

from typing import Optional

from pydantic import BaseModel


class EntitlementGrant(BaseModel):
    """A confirmed purchase of unlimited access."""

    external_id: str
    payment_reference: str = ""
    amount: int = 0
    currency: str = ""


class PaymentIntentResponse(BaseModel):
    clientSecret: str
    amount: int
    currency: str


class WebhookResult(BaseModel):
    success: bool
    external_id: Optional[str] = None
    error: Optional[str] = None
