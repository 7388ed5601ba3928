"""Pydantic schemas for generation and usage endpoints."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ReferenceImagePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    data: str = Field(..., min_length=1)
    mime_type: str = Field(default="image/png", alias="mimeType", pattern=r"^image/[\w.+-]+$")


class GenerateBatchRequest(BaseModel):
    """Batch bounds are checked by the service so they answer 400, not 422."""

    model_config = ConfigDict(populate_by_name=True)

    prompts: list[str] = Field(default_factory=list)
    reference_images: Optional[list[ReferenceImagePayload]] = Field(
        default=None, alias="referenceImages",
    )


class UsageResponse(BaseModel):
    remaining: int
    total: int
    used: int
    tier: str = ""


class GenerateBatchResponse(BaseModel):
    logos: list[str]
    usage: UsageResponse


class QuotaExceededResponse(BaseModel):
    error: str
    limitExceeded: bool = True
    remaining: int = 0
    total: int
