"""Usage service: gate, dispatch and meter generation rounds.

One request moves through:

    RECEIVED -> GATE_CHECKED -> DENIED
                             -> DISPATCHED -> ALL_FAILED (placeholders, not charged)
                                           -> COMPLETED -> LEDGER_INCREMENTED -> RESPONDED

The gate check, the dispatch and the increment for one identity run under a
per-identity lock, so concurrent rounds from the same caller (two tabs) are
serialised within a process. Across processes the ledger's conditional
increment enforces the cap.
"""

import asyncio
import logging
import weakref
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from logo_forge.accounts.service import AccountService
from logo_forge.common.config import LogoForgeSettings
from logo_forge.common.exceptions import LedgerPersistenceError, QuotaExceededError
from logo_forge.common.security import CallerContext
from logo_forge.generation.dispatcher import GenerationDispatcher, validate_prompts
from logo_forge.generation.provider import ReferenceImage
from logo_forge.history.service import HistoryService
from logo_forge.usage.ledger import UsageLedger
from logo_forge.usage.policy import (
    AuthState,
    PaymentState,
    QuotaPolicy,
    Tier,
    TierResolution,
    check_gate,
    resolve_tier,
)

logger = logging.getLogger(__name__)

DENIAL_MESSAGES = {
    Tier.ANONYMOUS: "Daily limit reached. Sign in to get more free generations.",
    Tier.FREE: "You have used all your free generations. Upgrade for unlimited logos.",
}


@dataclass
class UsageSnapshot:
    tier: Tier
    remaining: int
    total: int
    used: int

    def as_dict(self) -> dict:
        return {
            "tier": self.tier.value,
            "remaining": self.remaining,
            "total": self.total,
            "used": self.used,
        }


@dataclass
class GenerationOutcome:
    logos: list[str]
    usage: UsageSnapshot
    charged: bool


class UsageService:
    """Freemium metering for logo generation."""

    def __init__(
        self,
        settings: LogoForgeSettings,
        db,
        accounts: AccountService,
        dispatcher: GenerationDispatcher,
        anonymous_ledger: UsageLedger,
        account_ledger: UsageLedger,
        policy: QuotaPolicy | None = None,
        history: HistoryService | None = None,
    ):
        self.settings = settings
        self.db = db
        self.accounts = accounts
        self.dispatcher = dispatcher
        self.anonymous_ledger = anonymous_ledger
        self.account_ledger = account_ledger
        self.policy = policy or QuotaPolicy.from_settings(settings)
        self.history = history
        # Entries disappear once no request holds or waits on the lock.
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def ledger_for(self, tier: Tier) -> UsageLedger:
        if tier is Tier.ANONYMOUS:
            return self.anonymous_ledger
        return self.account_ledger

    def _lock_for(self, identity: str) -> asyncio.Lock:
        lock = self._locks.get(identity)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[identity] = lock
        return lock

    def snapshot(self, tier: Tier, count: int) -> UsageSnapshot:
        decision = check_gate(tier, count, self.policy)
        return UsageSnapshot(
            tier=tier, remaining=decision.remaining, total=decision.total, used=count,
        )

    async def resolve(
        self, caller: CallerContext, now: datetime | None = None,
    ) -> TierResolution:
        """Tier, ledger identity and period for a caller."""
        auth = AuthState(
            authenticated=caller.is_authenticated,
            ip_address=caller.ip_address,
            account_id=caller.user_id,
        )
        payment = PaymentState()
        if caller.is_authenticated:
            try:
                async with self.db.get_session() as session:
                    payment = await self.accounts.payment_state(session, caller.user_id)
            except SQLAlchemyError as e:
                logger.error("Entitlement lookup failed for %s: %s", caller.user_id, e)
                raise LedgerPersistenceError("Account could not be read") from e
        return resolve_tier(auth, payment, self.policy, now)

    async def get_usage(self, caller: CallerContext) -> UsageSnapshot:
        resolution = await self.resolve(caller)
        count = await self.ledger_for(resolution.tier).get_count(
            resolution.identity, resolution.period_key,
        )
        return self.snapshot(resolution.tier, count)

    async def generate_batch(
        self,
        caller: CallerContext,
        prompts: list[str],
        reference_images: Optional[list[ReferenceImage]] = None,
    ) -> GenerationOutcome:
        """Gate, generate and meter one round.

        Raises InvalidRequestError before touching the ledger, QuotaExceededError
        before any provider call, and LedgerPersistenceError when the round
        could not be recorded (the round then counts as not consumed).
        """
        validate_prompts(prompts, self.settings.max_prompts)
        resolution = await self.resolve(caller)
        tier, identity, period_key = (
            resolution.tier, resolution.identity, resolution.period_key,
        )
        ledger = self.ledger_for(tier)

        async with self._lock_for(identity):
            count = await ledger.get_count(identity, period_key)
            decision = check_gate(tier, count, self.policy)
            if not decision.allowed:
                logger.info("Generation denied for %s (%s, %d/%d)",
                            identity, tier.value, count, decision.total)
                raise QuotaExceededError(
                    DENIAL_MESSAGES.get(tier, "Generation limit reached"),
                    total=decision.total,
                    used=count,
                )

            batch = await self.dispatcher.dispatch(prompts, reference_images)
            if batch.all_failed:
                logger.warning("All %d prompts failed for %s; round not charged",
                               len(prompts), identity)
                return GenerationOutcome(
                    logos=batch.logos, usage=self.snapshot(tier, count), charged=False,
                )

            limit = None if tier is Tier.PREMIUM else decision.total
            new_count = await ledger.increment(identity, period_key, tier, limit=limit)

        logger.info("Round recorded for %s (%s): %d used, %d/%d prompts succeeded",
                    identity, tier.value, new_count, batch.succeeded, len(prompts))
        if caller.is_authenticated:
            await self._record_history(caller, prompts, batch.succeeded, batch.failed, tier)
        return GenerationOutcome(
            logos=batch.logos, usage=self.snapshot(tier, new_count), charged=True,
        )

    async def _record_history(
        self,
        caller: CallerContext,
        prompts: list[str],
        succeeded: int,
        failed: int,
        tier: Tier,
    ) -> None:
        """Append a charged round to the account history. Best effort."""
        if self.history is None:
            return
        try:
            async with self.db.get_session() as session:
                user = await self.accounts.sync_user(session, caller.user_id)
                await self.history.record_round(
                    session, user.id, prompts, succeeded, failed, tier.value,
                )
        except SQLAlchemyError as e:
            logger.error("Generation history write failed for %s: %s", caller.user_id, e)

    async def record_migrated_usage(
        self, caller: CallerContext, generations_used: int,
    ) -> UsageSnapshot:
        """Carry a browser-side generation count into the account.

        Never lowers the stored count and never raises it past the tier's cap.
        """
        resolution = await self.resolve(caller)
        ledger = self.ledger_for(resolution.tier)
        async with self._lock_for(resolution.identity):
            count = await ledger.get_count(resolution.identity, resolution.period_key)
            target = generations_used
            if resolution.tier is not Tier.PREMIUM:
                target = min(target, self.policy.limit_for(resolution.tier))
            if target > count:
                await ledger.set_count(
                    resolution.identity, resolution.period_key, resolution.tier, target,
                )
                count = target
        return self.snapshot(resolution.tier, count)
