"""Generation history service."""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from logo_forge.history.models import GenerationRecordModel

logger = logging.getLogger(__name__)


class HistoryService:
    """Charged rounds per account, newest first."""

    async def record_round(
        self,
        session: AsyncSession,
        user_id: str,
        prompts: list[str],
        logos_generated: int,
        logos_failed: int = 0,
        tier: str = "free",
    ) -> GenerationRecordModel:
        record = GenerationRecordModel(
            user_id=user_id,
            prompts=list(prompts),
            logos_generated=logos_generated,
            logos_failed=logos_failed,
            tier=tier,
            is_premium=tier == "premium",
        )
        session.add(record)
        await session.flush()
        logger.info("Generation round %s recorded for user %s", record.id, user_id)
        return record

    async def list_rounds(
        self, session: AsyncSession, user_id: str, limit: int = 50,
    ) -> list[GenerationRecordModel]:
        result = await session.execute(
            select(GenerationRecordModel)
            .where(GenerationRecordModel.user_id == user_id)
            .order_by(GenerationRecordModel.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def summary(self, session: AsyncSession, user_id: str) -> tuple[int, int]:
        """(rounds, logos generated) over the account's whole history."""
        result = await session.execute(
            select(
                func.count(GenerationRecordModel.id),
                func.coalesce(func.sum(GenerationRecordModel.logos_generated), 0),
            ).where(GenerationRecordModel.user_id == user_id)
        )
        rounds, logos = result.one()
        return rounds or 0, logos or 0
