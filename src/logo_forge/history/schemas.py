"""Pydantic schemas for generation history."""

from datetime import datetime

from pydantic import BaseModel


class GenerationRecordResponse(BaseModel):
    id: str
    prompts: list[str]
    logos_generated: int
    logos_failed: int
    tier: str
    is_premium: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class GenerationHistoryResponse(BaseModel):
    generations: list[GenerationRecordResponse]
    total_rounds: int
    total_logos: int
