"""Pydantic schemas for the applications API."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from agents.types import Application, ScoringWeights, Tone
from storage.job_settings import JobAISettings


class HealthResp(BaseModel):
    status: str = "ok"


class ApplicationList(BaseModel):
    job_id: str
    applications: List[Application] = Field(default_factory=list)


class AISettingsReq(BaseModel):
    tone: Tone = "Professional"
    priority_questions: List[str] = Field(default_factory=list)
    auto_follow_up: bool = True
    scoring_weights: Optional[ScoringWeights] = None


class AISettingsResp(BaseModel):
    settings: JobAISettings
    recalculated: Optional[int] = None
    preview: bool = False


class RecalculateResp(BaseModel):
    updated_count: int
    preview: bool = False
