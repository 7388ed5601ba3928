"""Saved-logo collection service."""

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from logo_forge.common.exceptions import LogoNotFoundError
from logo_forge.logos.models import SavedLogoModel


class LogoService:
    """Per-user saved logos."""

    async def save_logo(
        self,
        session: AsyncSession,
        user_id: str,
        url: str,
        prompt: str = "",
        is_premium: bool = False,
        file_format: str = "png",
    ) -> SavedLogoModel:
        logo = SavedLogoModel(
            user_id=user_id,
            logo_url=url,
            prompt=prompt or "",
            is_premium=is_premium,
            file_format=file_format or "png",
        )
        session.add(logo)
        await session.flush()
        return logo

    async def list_logos(
        self, session: AsyncSession, user_id: str,
    ) -> list[SavedLogoModel]:
        result = await session.execute(
            select(SavedLogoModel)
            .where(SavedLogoModel.user_id == user_id)
            .order_by(SavedLogoModel.created_at.desc())
        )
        return list(result.scalars().all())

    async def count_logos(self, session: AsyncSession, user_id: str) -> int:
        result = await session.execute(
            select(func.count(SavedLogoModel.id)).where(SavedLogoModel.user_id == user_id)
        )
        return result.scalar() or 0

    async def has_url(self, session: AsyncSession, user_id: str, url: str) -> bool:
        result = await session.execute(
            select(SavedLogoModel.id).where(
                SavedLogoModel.user_id == user_id,
                SavedLogoModel.logo_url == url,
            ).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def remove_logo(
        self, session: AsyncSession, user_id: str, logo_id: str,
    ) -> None:
        """Delete one logo owned by ``user_id``."""
        result = await session.execute(
            select(SavedLogoModel).where(
                SavedLogoModel.id == logo_id,
                SavedLogoModel.user_id == user_id,
            )
        )
        logo = result.scalar_one_or_none()
        if logo is None:
            raise LogoNotFoundError()
        await session.delete(logo)
        await session.flush()

    async def clear_logos(self, session: AsyncSession, user_id: str) -> int:
        """Delete every logo of a user. Returns how many were removed."""
        result = await session.execute(
            delete(SavedLogoModel).where(SavedLogoModel.user_id == user_id)
        )
        return result.rowcount or 0
