"""SQLAlchemy models for usage tracking."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from logo_forge.common.models import Base, TimestampMixin


class UsageCounterModel(Base, TimestampMixin):
    """One row per identity; overwritten in place when the period rolls over."""

    __tablename__ = "usage_counters"

    identity: Mapped[str] = mapped_column(String(255), primary_key=True)
    period_key: Mapped[str] = mapped_column(String(64), nullable=False)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tier: Mapped[str] = mapped_column(String(20), nullable=False, default="anonymous")
