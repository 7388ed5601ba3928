"""Tier resolution and the allow/deny gate for generation rounds.

Tiers:
- anonymous: keyed by network address, small daily allowance
- free:      signed-in account without payment, lifetime allowance
- premium:   signed-in account with the unlimited entitlement, never gated

Quota is counted in generation rounds. A round of five logo variations costs
one unit, the same as a round of one.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from logo_forge.common.exceptions import InvalidRequestError
from logo_forge.usage.period import PeriodKey, PeriodKind

# Reported as both remaining and total for premium callers.
UNLIMITED = 2**31 - 1


class Tier(str, Enum):
    ANONYMOUS = "anonymous"
    FREE = "free"
    PREMIUM = "premium"


@dataclass(frozen=True)
class QuotaPolicy:
    """Static per-tier limits. Premium is always unlimited."""

    anonymous_limit: int = 3
    free_limit: int = 3
    anonymous_period: PeriodKind = PeriodKind.DAILY
    free_period: PeriodKind = PeriodKind.LIFETIME

    @classmethod
    def from_settings(cls, settings) -> "QuotaPolicy":
        return cls(
            anonymous_limit=settings.anonymous_limit,
            free_limit=settings.free_limit,
            anonymous_period=PeriodKind(settings.anonymous_period),
            free_period=PeriodKind(settings.free_period),
        )

    def limit_for(self, tier: Tier) -> int:
        if tier is Tier.ANONYMOUS:
            return self.anonymous_limit
        if tier is Tier.FREE:
            return self.free_limit
        return UNLIMITED

    def period_for(self, tier: Tier) -> PeriodKind:
        if tier is Tier.ANONYMOUS:
            return self.anonymous_period
        if tier is Tier.FREE:
            return self.free_period
        return PeriodKind.LIFETIME


@dataclass(frozen=True)
class AuthState:
    """What the authentication provider told us about the caller."""

    authenticated: bool
    ip_address: str = "unknown"
    account_id: Optional[str] = None


@dataclass(frozen=True)
class PaymentState:
    """Entitlement flag read from the account record."""

    has_unlimited: bool = False


@dataclass(frozen=True)
class TierResolution:
    tier: Tier
    identity: str
    period_key: PeriodKey


@dataclass(frozen=True)
class GateDecision:
    allowed: bool
    remaining: int
    total: int


def anonymous_identity(ip_address: str) -> str:
    return f"ip:{ip_address}"


def account_identity(account_id: str) -> str:
    return f"user:{account_id}"


def resolve_tier(
    auth: AuthState,
    payment: PaymentState,
    policy: QuotaPolicy,
    now: datetime | None = None,
) -> TierResolution:
    """Map authentication and payment state to tier, ledger identity and period."""
    if not auth.authenticated:
        tier = Tier.ANONYMOUS
        identity = anonymous_identity(auth.ip_address)
    else:
        if not auth.account_id:
            raise InvalidRequestError("Authenticated caller without an account id")
        tier = Tier.PREMIUM if payment.has_unlimited else Tier.FREE
        identity = account_identity(auth.account_id)
    return TierResolution(
        tier=tier,
        identity=identity,
        period_key=PeriodKey.current(policy.period_for(tier), now),
    )


def check_gate(tier: Tier, count: int, policy: QuotaPolicy) -> GateDecision:
    """
    Decide whether one more generation round is allowed.

    ``count`` is the number of rounds already consumed in the current period,
    not including the round being asked about. With a limit of 3, counts 0-2
    are allowed and a count of 3 is denied.
    """
    if tier is Tier.PREMIUM:
        return GateDecision(allowed=True, remaining=UNLIMITED, total=UNLIMITED)
    total = policy.limit_for(tier)
    remaining = max(0, total - count)
    return GateDecision(allowed=remaining > 0, remaining=remaining, total=total)
