"""Match score aggregation and retroactive rescoring."""
from __future__ import annotations

from typing import Optional, Sequence

from pydantic import BaseModel, computed_field

from agents.common import round_half_up
from agents.types import ExecutionLevel, ScoringWeights, VideoAnalysis, level_for
from observability import log_event
from storage.applications import list_applications, update_match_score
from storage.sqlite import get_conn

DEFAULT_VIDEO_SCORE = 50
DEFAULT_TRANSCRIPT_SCORE = 50


class ScoreBreakdown(BaseModel):
    transcript_match_score: int
    video_match_score: int
    weights: ScoringWeights
    final_score: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def execution_level(self) -> ExecutionLevel:
        return level_for(self.final_score)


def video_match_score(analyses: Sequence[VideoAnalysis]) -> int:
    """Rounded mean confidence, or the default when nothing was analyzed."""

    if not analyses:
        return DEFAULT_VIDEO_SCORE
    return round_half_up(sum(a.confidence for a in analyses) / len(analyses))


def final_score(transcript_score: int, video_score: int, weights: ScoringWeights) -> int:
    """Weighted match score. Weights are independent percentages and are not normalized."""

    return round_half_up((transcript_score * weights.transcript + video_score * weights.video) / 100)


def execution_level(score: int) -> ExecutionLevel:
    return level_for(score)


def score_session(
    transcript_match_score: int,
    analyses: Sequence[VideoAnalysis],
    weights: ScoringWeights,
) -> ScoreBreakdown:
    video = video_match_score(analyses)
    return ScoreBreakdown(
        transcript_match_score=transcript_match_score,
        video_match_score=video,
        weights=weights,
        final_score=final_score(transcript_match_score, video, weights),
    )


def _stored_transcript_score(transcript: Optional[int], match: Optional[int]) -> int:
    if transcript is not None:
        return transcript
    if match is not None:
        return match
    return DEFAULT_TRANSCRIPT_SCORE


def recalculate_job_scores(job_id: str, weights: ScoringWeights) -> int:
    """Re-derive ``match_score`` for every application under ``job_id``.

    Only stored fields are read; no collaborator is contacted. Returns the
    number of applications updated.
    """

    applications = list_applications(job_id)
    with get_conn() as conn:
        for app in applications:
            transcript = _stored_transcript_score(app.transcript_match_score, app.match_score)
            video = app.video_match_score if app.video_match_score is not None else DEFAULT_VIDEO_SCORE
            update_match_score(app.id, final_score(transcript, video, weights), weights, conn=conn)
    log_event(
        "scores_recalculated",
        job_id,
        job_id=job_id,
        updated=len(applications),
        weights=weights.model_dump(),
    )
    return len(applications)


__all__ = [
    "DEFAULT_VIDEO_SCORE",
    "ScoreBreakdown",
    "execution_level",
    "final_score",
    "recalculate_job_scores",
    "score_session",
    "video_match_score",
]
