"""Usage ledgers: per-identity generation counters.

Two backends share one interface:

- ``InMemoryUsageLedger``: process-local dict. Used for anonymous callers and
  development; counts are lost on restart.
- ``DatabaseUsageLedger``: ``usage_counters`` table. Authoritative for
  accounts; storage errors surface as ``LedgerPersistenceError``.

``increment(..., limit=n)`` is a compare-and-increment: the counter only moves
if it is still below ``n`` for the current period, otherwise
``QuotaExceededError`` is raised and nothing is written.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import case, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from logo_forge.common.exceptions import LedgerPersistenceError, QuotaExceededError
from logo_forge.usage.models import UsageCounterModel
from logo_forge.usage.period import PeriodKey
from logo_forge.usage.policy import Tier

logger = logging.getLogger(__name__)


@dataclass
class UsageRecord:
    identity: str
    count: int
    period_key: PeriodKey
    tier: Tier


class UsageLedger(ABC):
    """Counts generation rounds per identity and period."""

    @abstractmethod
    async def get_count(self, identity: str, period_key: PeriodKey) -> int:
        """Rounds used in ``period_key``; 0 if unknown or from another period."""

    @abstractmethod
    async def increment(
        self,
        identity: str,
        period_key: PeriodKey,
        tier: Tier,
        limit: Optional[int] = None,
    ) -> int:
        """Add one round and return the new count."""

    @abstractmethod
    async def get_record(self, identity: str) -> Optional[UsageRecord]:
        """Stored record as-is, without period reset."""

    @abstractmethod
    async def set_count(
        self, identity: str, period_key: PeriodKey, tier: Tier, count: int,
    ) -> None:
        """Overwrite the counter (data migration)."""


def _quota_error(limit: int) -> QuotaExceededError:
    return QuotaExceededError(total=limit, used=limit)


class InMemoryUsageLedger(UsageLedger):
    """Process-local ledger. No awaits inside operations, so each is atomic."""

    def __init__(self):
        self._records: dict[str, UsageRecord] = {}

    async def get_count(self, identity: str, period_key: PeriodKey) -> int:
        record = self._records.get(identity)
        if record is None or record.period_key != period_key:
            return 0
        return record.count

    async def increment(
        self,
        identity: str,
        period_key: PeriodKey,
        tier: Tier,
        limit: Optional[int] = None,
    ) -> int:
        current = await self.get_count(identity, period_key)
        if limit is not None and current >= limit:
            raise _quota_error(limit)
        record = self._records.get(identity)
        if record is None:
            record = UsageRecord(identity=identity, count=0, period_key=period_key, tier=tier)
            self._records[identity] = record
        elif record.period_key != period_key:
            record.period_key = period_key
            record.count = 0
        record.count += 1
        record.tier = tier
        return record.count

    async def get_record(self, identity: str) -> Optional[UsageRecord]:
        return self._records.get(identity)

    async def set_count(
        self, identity: str, period_key: PeriodKey, tier: Tier, count: int,
    ) -> None:
        self._records[identity] = UsageRecord(
            identity=identity, count=max(0, count), period_key=period_key, tier=tier,
        )


class DatabaseUsageLedger(UsageLedger):
    """Ledger backed by the ``usage_counters`` table."""

    def __init__(self, db):
        self.db = db

    async def get_count(self, identity: str, period_key: PeriodKey) -> int:
        try:
            async with self.db.get_session() as session:
                row = await session.get(UsageCounterModel, identity)
                if row is None or row.period_key != str(period_key):
                    return 0
                return row.count
        except SQLAlchemyError as e:
            logger.error("Usage read failed for %s: %s", identity, e)
            raise LedgerPersistenceError("Usage could not be read") from e

    async def increment(
        self,
        identity: str,
        period_key: PeriodKey,
        tier: Tier,
        limit: Optional[int] = None,
    ) -> int:
        if limit is not None and limit <= 0:
            raise _quota_error(limit)
        key = str(period_key)
        try:
            async with self.db.get_session() as session:
                if not await self._conditional_update(session, identity, key, tier, limit):
                    existing = await session.execute(
                        select(UsageCounterModel.identity).where(
                            UsageCounterModel.identity == identity
                        )
                    )
                    if existing.scalar_one_or_none() is not None:
                        raise _quota_error(limit)
                    try:
                        async with session.begin_nested():
                            session.add(UsageCounterModel(
                                identity=identity, period_key=key, count=1, tier=tier.value,
                            ))
                    except IntegrityError:
                        # Lost an insert race; the row exists now.
                        if not await self._conditional_update(session, identity, key, tier, limit):
                            raise _quota_error(limit)

                result = await session.execute(
                    select(UsageCounterModel.count).where(
                        UsageCounterModel.identity == identity
                    )
                )
                return result.scalar_one()
        except SQLAlchemyError as e:
            logger.error("Usage increment failed for %s: %s", identity, e)
            raise LedgerPersistenceError() from e

    @staticmethod
    async def _conditional_update(session, identity, key, tier, limit) -> bool:
        stmt = (
            update(UsageCounterModel)
            .where(UsageCounterModel.identity == identity)
            .values(
                count=case(
                    (UsageCounterModel.period_key == key, UsageCounterModel.count + 1),
                    else_=1,
                ),
                period_key=key,
                tier=tier.value,
            )
            .execution_options(synchronize_session=False)
        )
        if limit is not None:
            stmt = stmt.where(or_(
                UsageCounterModel.period_key != key,
                UsageCounterModel.count < limit,
            ))
        result = await session.execute(stmt)
        return result.rowcount > 0

    async def get_record(self, identity: str) -> Optional[UsageRecord]:
        try:
            async with self.db.get_session() as session:
                row = await session.get(UsageCounterModel, identity)
                if row is None:
                    return None
                return UsageRecord(
                    identity=row.identity,
                    count=row.count,
                    period_key=PeriodKey.parse(row.period_key),
                    tier=Tier(row.tier),
                )
        except SQLAlchemyError as e:
            logger.error("Usage read failed for %s: %s", identity, e)
            raise LedgerPersistenceError("Usage could not be read") from e

    async def set_count(
        self, identity: str, period_key: PeriodKey, tier: Tier, count: int,
    ) -> None:
        try:
            async with self.db.get_session() as session:
                row = await session.get(UsageCounterModel, identity)
                if row is None:
                    session.add(UsageCounterModel(
                        identity=identity, period_key=str(period_key),
                        count=max(0, count), tier=tier.value,
                    ))
                else:
                    row.period_key = str(period_key)
                    row.count = max(0, count)
                    row.tier = tier.value
        except SQLAlchemyError as e:
            logger.error("Usage write failed for %s: %s", identity, e)
            raise LedgerPersistenceError() from e
