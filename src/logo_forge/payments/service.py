"""Payment service: one-time Stripe payment for unlimited generations."""

import logging

import stripe
from sqlalchemy.ext.asyncio import AsyncSession

from logo_forge.accounts.models import UserModel
from logo_forge.accounts.service import AccountService
from logo_forge.common.config import LogoForgeSettings
from logo_forge.common.exceptions import PaymentProviderError
from logo_forge.payments.schemas import EntitlementGrant
from logo_forge.payments.stripe_webhook import UNLIMITED_PRODUCT

logger = logging.getLogger(__name__)


class PaymentService:
    def __init__(self, settings: LogoForgeSettings, accounts: AccountService):
        self.settings = settings
        self.accounts = accounts

    @property
    def configured(self) -> bool:
        return bool(self.settings.stripe_secret_key)

    def create_payment_intent(self, external_id: str) -> dict:
        """Create a PaymentIntent tagged with the buyer so the webhook can grant access."""
        if not self.configured:
            raise PaymentProviderError("Stripe not configured", configured=False)

        try:
            intent = stripe.PaymentIntent.create(
                amount=self.settings.unlimited_price_amount,
                currency=self.settings.unlimited_price_currency,
                automatic_payment_methods={"enabled": True},
                metadata={"external_id": external_id, "product": UNLIMITED_PRODUCT},
                api_key=self.settings.stripe_secret_key,
            )
        except stripe.StripeError as e:
            logger.error("Stripe payment intent creation failed: %s", e)
            raise PaymentProviderError("Stripe payment intent creation failed") from e

        return {
            "clientSecret": intent.client_secret,
            "amount": self.settings.unlimited_price_amount,
            "currency": self.settings.unlimited_price_currency,
        }

    async def apply_grant(
        self, session: AsyncSession, grant: EntitlementGrant,
    ) -> UserModel:
        logger.info("Payment %s confirmed for %s", grant.payment_reference, grant.external_id)
        return await self.accounts.set_unlimited(
            session, grant.external_id,
            enabled=True,
            payment_reference=grant.payment_reference,
        )
