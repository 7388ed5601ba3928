"""Shared Pydantic schemas for Logo Forge."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    service: str = "logo-forge"


class ErrorResponse(BaseModel):
    error: str
    code: str
    detail: str = ""
