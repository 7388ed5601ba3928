"""SQLAlchemy model for the saved-logo collection."""

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from logo_forge.common.models import Base, TimestampMixin, generate_uuid


class SavedLogoModel(Base, TimestampMixin):
    __tablename__ = "saved_logos"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False, index=True
    )
    # Data URLs can be large
    logo_url: Mapped[str] = mapped_column(Text, nullable=False)
    prompt: Mapped[str] = mapped_column(Text, default="")
    is_premium: Mapped[bool] = mapped_column(Boolean, default=False)
    file_format: Mapped[str] = mapped_column(String(10), default="png")

    user: Mapped["UserModel"] = relationship(back_populates="logos")  # noqa: F821
