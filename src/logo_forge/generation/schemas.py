"""Pydantic schemas for the upscale endpoint."""

from pydantic import BaseModel, ConfigDict, Field

from logo_forge.generation.upscale import DEFAULT_SCALE


class UpscaleRequest(BaseModel):
    """The image URL is checked by the router so a missing one answers 400."""

    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(default="", alias="imageUrl")
    scale: int = Field(default=DEFAULT_SCALE, ge=1, le=10)


class UpscaleResponse(BaseModel):
    originalUrl: str
    upscaledUrl: str
    scale: int
    processingTime: int  # ms
