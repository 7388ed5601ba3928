"""Pydantic schemas for saved-logo endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class LogoSaveRequest(BaseModel):
    url: str = Field(..., min_length=1)
    prompt: str = ""
    is_premium: bool = False
    file_format: str = Field(default="png", pattern=r"^(png|jpg|jpeg|webp|svg)$")


class LogoResponse(BaseModel):
    id: str
    logo_url: str
    prompt: str
    is_premium: bool
    file_format: str
    created_at: datetime

    model_config = {"from_attributes": True}


class LogoListResponse(BaseModel):
    logos: list[LogoResponse]


class LogoSaveResponse(BaseModel):
    success: bool = True
    logo: LogoResponse


class LogoDeleteResponse(BaseModel):
    success: bool = True
    removed: int = 1
