"""Per-job AI interview settings."""
from __future__ import annotations

import datetime as dt
import json
import uuid
from typing import List, Optional

from pydantic import BaseModel, Field

from agents.types import ScoringWeights, Tone
from config.settings import settings

from .sqlite import get_conn


class JobAISettings(BaseModel):
    id: str
    job_id: str
    tone: Tone = "Professional"
    priority_questions: List[str] = Field(default_factory=list)
    auto_follow_up: bool = True
    scoring_weights: ScoringWeights
    updated_at: str


class JobAISettingsUpdate(BaseModel):
    tone: Tone = "Professional"
    priority_questions: List[str] = Field(default_factory=list)
    auto_follow_up: bool = True
    scoring_weights: Optional[ScoringWeights] = None


def default_weights() -> ScoringWeights:
    return ScoringWeights(
        transcript=settings.DEFAULT_TRANSCRIPT_WEIGHT,
        video=settings.DEFAULT_VIDEO_WEIGHT,
    )


def _now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


def get_job_settings(job_id: str) -> JobAISettings:
    """Return stored settings for ``job_id`` or the defaults when none exist."""

    with get_conn() as conn:
        row = conn.execute("SELECT * FROM job_ai_settings WHERE job_id = ?", (job_id,)).fetchone()
    if row is None:
        return JobAISettings(id=str(uuid.uuid4()), job_id=job_id, scoring_weights=default_weights(), updated_at=_now())
    return JobAISettings(
        id=row["id"],
        job_id=row["job_id"],
        tone=row["tone"],
        priority_questions=json.loads(row["priority_questions"]),
        auto_follow_up=bool(row["auto_follow_up"]),
        scoring_weights=ScoringWeights(transcript=row["transcript_weight"], video=row["video_weight"]),
        updated_at=row["updated_at"],
    )


def save_job_settings(job_id: str, update: JobAISettingsUpdate) -> JobAISettings:
    current = get_job_settings(job_id)
    saved = JobAISettings(
        id=current.id,
        job_id=job_id,
        tone=update.tone,
        priority_questions=list(update.priority_questions),
        auto_follow_up=update.auto_follow_up,
        scoring_weights=update.scoring_weights or current.scoring_weights,
        updated_at=_now(),
    )
    with get_conn() as conn:
        conn.execute(
            """INSERT OR REPLACE INTO job_ai_settings
               (job_id, id, tone, priority_questions, auto_follow_up,
                transcript_weight, video_weight, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                saved.job_id,
                saved.id,
                saved.tone,
                json.dumps(saved.priority_questions),
                int(saved.auto_follow_up),
                saved.scoring_weights.transcript,
                saved.scoring_weights.video,
                saved.updated_at,
            ),
        )
    return saved
