"""SQLAlchemy model for per-account generation history."""

from sqlalchemy import Boolean, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from logo_forge.common.models import Base, TimestampMixin, generate_uuid


class GenerationRecordModel(Base, TimestampMixin):
    """One charged generation round of a signed-in user."""

    __tablename__ = "generations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False, index=True
    )
    prompts: Mapped[list] = mapped_column(JSON, default=list)
    logos_generated: Mapped[int] = mapped_column(Integer, nullable=False)
    logos_failed: Mapped[int] = mapped_column(Integer, default=0)
    tier: Mapped[str] = mapped_column(String(20), nullable=False)
    is_premium: Mapped[bool] = mapped_column(Boolean, default=False)
