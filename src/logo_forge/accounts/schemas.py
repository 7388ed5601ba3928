"""Pydantic schemas for account endpoints."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from logo_forge.usage.schemas import UsageResponse


class UserSyncRequest(BaseModel):
    email: Optional[str] = Field(default=None, max_length=255)


class UserResponse(BaseModel):
    id: str
    external_id: str
    email: Optional[str] = None
    has_unlimited: bool
    unlimited_since: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ProfileResponse(BaseModel):
    user: UserResponse
    usage: UsageResponse
    saved_logos: int = 0


class LocalStorageData(BaseModel):
    savedLogos: list[dict[str, Any]] = Field(default_factory=list)
    generationsUsed: int = Field(default=0, ge=0)
    creditsUsed: Optional[int] = Field(default=None, ge=0)

    @property
    def generations(self) -> int:
        if self.creditsUsed is not None:
            return self.creditsUsed
        return self.generationsUsed


class MigrationRequest(BaseModel):
    email: Optional[str] = Field(default=None, max_length=255)
    localStorageData: LocalStorageData = Field(default_factory=LocalStorageData)


class MigrationResponse(BaseModel):
    success: bool
    message: str = ""
    logos_imported: int = 0
    usage: Optional[UsageResponse] = None


class EntitlementUpdate(BaseModel):
    unlimited: bool = True
    payment_reference: str = ""
