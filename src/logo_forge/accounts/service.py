"""Account service: profiles, unlimited entitlement, local-data migration."""

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from logo_forge.accounts.models import UserModel
from logo_forge.common.config import LogoForgeSettings
from logo_forge.logos.service import LogoService
from logo_forge.usage.policy import PaymentState

logger = logging.getLogger(__name__)


class AccountService:
    """User records keyed by the authentication provider's user id."""

    def __init__(self, settings: LogoForgeSettings, logo_service: LogoService | None = None):
        self.settings = settings
        self.logo_service = logo_service or LogoService()

    async def get_by_external_id(
        self, session: AsyncSession, external_id: str,
    ) -> UserModel | None:
        result = await session.execute(
            select(UserModel).where(UserModel.external_id == external_id)
        )
        return result.scalar_one_or_none()

    async def sync_user(
        self, session: AsyncSession, external_id: str, email: str | None = None,
    ) -> UserModel:
        """Create the user on first sight; refresh the email when a new one is given."""
        user = await self.get_by_external_id(session, external_id)
        if user is None:
            try:
                async with session.begin_nested():
                    user = UserModel(external_id=external_id, email=email or None)
                    session.add(user)
                logger.info("Created user %s", user.id)
                return user
            except IntegrityError:
                # Lost an insert race with a concurrent first request.
                user = await self.get_by_external_id(session, external_id)
                if user is None:
                    raise
        if email and user.email != email:
            user.email = email
            await session.flush()
        return user

    async def set_unlimited(
        self,
        session: AsyncSession,
        external_id: str,
        enabled: bool = True,
        payment_reference: str = "",
    ) -> UserModel:
        user = await self.sync_user(session, external_id)
        if enabled and not user.has_unlimited:
            user.unlimited_since = datetime.now(timezone.utc)
        if not enabled:
            user.unlimited_since = None
        user.has_unlimited = enabled
        if payment_reference:
            user.payment_reference = payment_reference
        await session.flush()
        logger.info("Unlimited access %s for user %s",
                    "granted" if enabled else "revoked", user.id)
        return user

    async def payment_state(
        self, session: AsyncSession, external_id: str,
    ) -> PaymentState:
        user = await self.get_by_external_id(session, external_id)
        return PaymentState(has_unlimited=bool(user and user.has_unlimited))

    async def migrate_local_data(
        self,
        session: AsyncSession,
        external_id: str,
        email: str | None = None,
        saved_logos: list[dict[str, Any]] | None = None,
    ) -> tuple[UserModel, int]:
        """Import logos kept in the browser before sign-in.

        Logos whose URL is already saved are skipped. Returns (user, imported).
        The generation count is migrated separately by the usage service.
        """
        user = await self.sync_user(session, external_id, email)
        imported = 0
        for logo in saved_logos or []:
            url = logo.get("url") or logo.get("logo_url")
            if not url or await self.logo_service.has_url(session, user.id, url):
                continue
            await self.logo_service.save_logo(
                session, user.id, url,
                prompt=logo.get("prompt") or "",
                is_premium=bool(logo.get("is_premium", False)),
                file_format=logo.get("file_format") or "png",
            )
            imported += 1
        return user, imported
