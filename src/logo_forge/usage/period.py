"""Quota periods.

A usage count is only meaningful together with the period it was counted in.
``PeriodKey`` names that period explicitly (``daily:2026-10-19``,
``monthly:2026-10``, ``lifetime:lifetime``) so a stored record can be checked
against the current time instead of comparing ad-hoc date strings. All keys are
derived from UTC.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

LIFETIME = "lifetime"


class PeriodKind(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"
    LIFETIME = "lifetime"


def _utc(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def _value_for(kind: PeriodKind, now: datetime) -> str:
    if kind is PeriodKind.DAILY:
        return now.strftime("%Y-%m-%d")
    if kind is PeriodKind.MONTHLY:
        return now.strftime("%Y-%m")
    return LIFETIME


@dataclass(frozen=True)
class PeriodKey:
    """Identifies the window a usage count belongs to."""

    kind: PeriodKind
    value: str

    @classmethod
    def current(cls, kind: PeriodKind | str, now: datetime | None = None) -> "PeriodKey":
        kind = PeriodKind(kind)
        return cls(kind=kind, value=_value_for(kind, _utc(now)))

    @classmethod
    def parse(cls, text: str) -> "PeriodKey":
        """Inverse of ``str(key)``."""
        kind, sep, value = text.partition(":")
        if not sep or not value:
            raise ValueError(f"Malformed period key: {text!r}")
        return cls(kind=PeriodKind(kind), value=value)

    def is_current(self, now: datetime | None = None) -> bool:
        return self.value == _value_for(self.kind, _utc(now))

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.value}"
