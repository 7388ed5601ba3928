"""Tests for the in-memory and database usage ledgers."""

from contextlib import asynccontextmanager

import pytest
from sqlalchemy.exc import OperationalError

from logo_forge.common.config import LogoForgeSettings
from logo_forge.common.database import DatabaseManager
from logo_forge.common.exceptions import LedgerPersistenceError, QuotaExceededError
from logo_forge.usage.ledger import DatabaseUsageLedger, InMemoryUsageLedger
from logo_forge.usage.period import PeriodKey, PeriodKind
from logo_forge.usage.policy import Tier


TODAY = PeriodKey(PeriodKind.DAILY, "2026-10-19")
TOMORROW = PeriodKey(PeriodKind.DAILY, "2026-10-20")
LIFETIME = PeriodKey.current(PeriodKind.LIFETIME)


@pytest.fixture
async def db():
    manager = DatabaseManager(LogoForgeSettings(db_url="sqlite+aiosqlite://"))
    await manager.init()
    await manager.create_all()
    yield manager
    await manager.close()


@pytest.fixture(params=["memory", "database"])
async def ledger(request, db):
    if request.param == "memory":
        return InMemoryUsageLedger()
    return DatabaseUsageLedger(db)


class TestLedgerContract:
    async def test_unknown_identity_is_zero(self, ledger):
        assert await ledger.get_count("ip:1.1.1.1", TODAY) == 0
        assert await ledger.get_record("ip:1.1.1.1") is None

    async def test_increment_counts_up(self, ledger):
        assert await ledger.increment("ip:1.1.1.1", TODAY, Tier.ANONYMOUS) == 1
        assert await ledger.increment("ip:1.1.1.1", TODAY, Tier.ANONYMOUS) == 2
        assert await ledger.get_count("ip:1.1.1.1", TODAY) == 2

    async def test_identities_are_independent(self, ledger):
        await ledger.increment("ip:1.1.1.1", TODAY, Tier.ANONYMOUS)
        await ledger.increment("ip:2.2.2.2", TODAY, Tier.ANONYMOUS)
        await ledger.increment("ip:2.2.2.2", TODAY, Tier.ANONYMOUS)
        assert await ledger.get_count("ip:1.1.1.1", TODAY) == 1
        assert await ledger.get_count("ip:2.2.2.2", TODAY) == 2

    async def test_stale_period_reads_as_zero(self, ledger):
        await ledger.increment("ip:1.1.1.1", TODAY, Tier.ANONYMOUS)
        await ledger.increment("ip:1.1.1.1", TODAY, Tier.ANONYMOUS)
        assert await ledger.get_count("ip:1.1.1.1", TOMORROW) == 0

    async def test_increment_in_new_period_restarts_at_one(self, ledger):
        for _ in range(3):
            await ledger.increment("ip:1.1.1.1", TODAY, Tier.ANONYMOUS, limit=3)
        assert await ledger.increment("ip:1.1.1.1", TOMORROW, Tier.ANONYMOUS, limit=3) == 1
        record = await ledger.get_record("ip:1.1.1.1")
        assert record.period_key == TOMORROW
        assert record.count == 1

    async def test_limit_blocks_increment(self, ledger):
        await ledger.increment("user:u1", LIFETIME, Tier.FREE, limit=2)
        await ledger.increment("user:u1", LIFETIME, Tier.FREE, limit=2)
        with pytest.raises(QuotaExceededError) as exc:
            await ledger.increment("user:u1", LIFETIME, Tier.FREE, limit=2)
        assert exc.value.total == 2
        assert await ledger.get_count("user:u1", LIFETIME) == 2

    async def test_zero_limit_blocks_first_increment(self, ledger):
        with pytest.raises(QuotaExceededError):
            await ledger.increment("user:u1", LIFETIME, Tier.FREE, limit=0)
        assert await ledger.get_count("user:u1", LIFETIME) == 0

    async def test_unlimited_increment(self, ledger):
        for _ in range(10):
            await ledger.increment("user:vip", LIFETIME, Tier.PREMIUM)
        assert await ledger.get_count("user:vip", LIFETIME) == 10

    async def test_record_tracks_tier(self, ledger):
        await ledger.increment("user:u1", LIFETIME, Tier.FREE)
        await ledger.increment("user:u1", LIFETIME, Tier.PREMIUM)
        record = await ledger.get_record("user:u1")
        assert record.tier is Tier.PREMIUM
        assert record.count == 2

    async def test_set_count_overwrites(self, ledger):
        await ledger.increment("user:u1", LIFETIME, Tier.FREE)
        await ledger.set_count("user:u1", LIFETIME, Tier.FREE, 3)
        assert await ledger.get_count("user:u1", LIFETIME) == 3

    async def test_set_count_creates_and_clamps(self, ledger):
        await ledger.set_count("user:new", LIFETIME, Tier.FREE, -4)
        record = await ledger.get_record("user:new")
        assert record is not None
        assert record.count == 0


class _BrokenDB:
    """Database manager whose sessions always fail."""

    @asynccontextmanager
    async def get_session(self):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))
        yield  # pragma: no cover


class TestDatabaseLedgerFailures:
    async def test_read_failure(self):
        ledger = DatabaseUsageLedger(_BrokenDB())
        with pytest.raises(LedgerPersistenceError):
            await ledger.get_count("user:u1", LIFETIME)

    async def test_increment_failure(self):
        ledger = DatabaseUsageLedger(_BrokenDB())
        with pytest.raises(LedgerPersistenceError) as exc:
            await ledger.increment("user:u1", LIFETIME, Tier.FREE, limit=3)
        assert exc.value.code == "LEDGER_UNAVAILABLE"

    async def test_write_failure(self):
        ledger = DatabaseUsageLedger(_BrokenDB())
        with pytest.raises(LedgerPersistenceError):
            await ledger.set_count("user:u1", LIFETIME, Tier.FREE, 2)

    async def test_counts_survive_new_ledger_instance(self, db):
        await DatabaseUsageLedger(db).increment("user:u1", LIFETIME, Tier.FREE)
        assert await DatabaseUsageLedger(db).get_count("user:u1", LIFETIME) == 1
