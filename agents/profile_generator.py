"""Holistic candidate profile from the full interview transcript."""
from __future__ import annotations

import logging
from typing import Sequence

from config.prompts import current_prompts, render
from config.registry import PROFILE_KEY

from .common import invoke, round_half_up
from .types import CandidateProfile, JobContext, ProfilePayload, QAPair

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY = "Could not generate profile."
FALLBACK_RESUME = "# Profile Generation Failed\nPlease try again."
NEUTRAL_SCORE = 50


def average_quality(qa_pairs: Sequence[QAPair]) -> int:
    if not qa_pairs:
        return NEUTRAL_SCORE
    return round_half_up(sum(qa.score for qa in qa_pairs) / len(qa_pairs))


def format_transcript(qa_pairs: Sequence[QAPair]) -> str:
    return "\n\n".join(f"Q{i + 1}: {qa.question}\nA: {qa.answer}" for i, qa in enumerate(qa_pairs))


def fallback_profile(job: JobContext, avg_score: int) -> CandidateProfile:
    return CandidateProfile(
        summary=FALLBACK_SUMMARY,
        skills=[],
        strengths=[],
        suggested_role=job.title,
        transcript_match_score=avg_score,
        formatted_resume=FALLBACK_RESUME,
    )


async def generate_profile(job: JobContext, qa_pairs: Sequence[QAPair]) -> CandidateProfile:
    """Build the candidate profile, seeding the prompt with the average quality score.

    The returned ``transcript_match_score`` comes from the collaborator and is
    not derived from the per-answer scores; the average only seeds the prompt
    and the fallback.
    """

    avg_score = average_quality(qa_pairs)
    prompt = render(
        current_prompts().profile_generation,
        jobTitle=job.title,
        requirements=job.requirements,
        avgScore=avg_score,
        transcript=format_transcript(qa_pairs),
    )
    try:
        raw = await invoke(
            PROFILE_KEY,
            prompt=prompt,
            fallbackRole=job.title,
            fallbackScore=avg_score,
        )
        payload = ProfilePayload.model_validate(raw)
    except Exception as exc:  # noqa: BLE001
        logger.error("Profile generation failed for job=%s: %s", job.job_id, exc)
        return fallback_profile(job, avg_score)
    return CandidateProfile(**payload.model_dump())
