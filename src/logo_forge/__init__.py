"""Logo Forge: freemium AI logo generation backend."""

from logo_forge.usage.period import PeriodKey, PeriodKind
from logo_forge.usage.policy import QuotaPolicy, Tier, check_gate, resolve_tier

__all__ = [
    "PeriodKey",
    "PeriodKind",
    "QuotaPolicy",
    "Tier",
    "check_gate",
    "resolve_tier",
]
__version__ = "0.1.0"
