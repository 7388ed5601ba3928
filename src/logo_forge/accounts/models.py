"""SQLAlchemy model for user accounts."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from logo_forge.common.models import Base, TimestampMixin, generate_uuid


class UserModel(Base, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    # Subject id issued by the external authentication provider
    external_id: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    has_unlimited: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    unlimited_since: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    payment_reference: Mapped[str] = mapped_column(String(255), default="")

    logos: Mapped[list["SavedLogoModel"]] = relationship(  # noqa: F821
        back_populates="user", cascade="all, delete-orphan"
    )
