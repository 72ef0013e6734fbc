import pytest

from agents.profile_generator import (
    FALLBACK_RESUME,
    FALLBACK_SUMMARY,
    average_quality,
    format_transcript,
    generate_profile,
)
from agents.types import JobContext, QAPair
from config.registry import PROFILE_KEY, bind_model


JOB = JobContext(job_id="j1", title="QA Lead", requirements="Automation")
PAIRS = [QAPair(question="Why QA?", answer="I like breaking things.", score=70), QAPair(question="Tools?", answer="pytest", score=85)]


def test_average_quality_rounds_half_up():
    assert average_quality(PAIRS) == 78
    assert average_quality([]) == 50


def test_format_transcript():
    text = format_transcript(PAIRS)
    assert text.startswith("Q1: Why QA?\nA: I like breaking things.")
    assert "\n\nQ2: Tools?\nA: pytest" in text


@pytest.mark.asyncio
async def test_profile_from_collaborator(fake_collaborators):
    seen = {}

    def profile(**kwargs):
        seen.update(kwargs)
        return {
            "summary": "Detail oriented.",
            "skills": ["pytest"],
            "strengths": ["focus"],
            "suggestedRole": "Senior QA",
            "finalMatchScore": 88,
            "formattedResume": "# CV",
        }

    bind_model(PROFILE_KEY, profile)
    result = await generate_profile(JOB, PAIRS)
    assert result.transcript_match_score == 88
    assert result.suggested_role == "Senior QA"
    assert "(78)" in seen["prompt"]
    assert "Q2: Tools?" in seen["prompt"]


@pytest.mark.asyncio
async def test_profile_failure_uses_fallback(failing_collaborators):
    result = await generate_profile(JOB, PAIRS)
    assert result.summary == FALLBACK_SUMMARY
    assert result.formatted_resume == FALLBACK_RESUME
    assert result.suggested_role == "QA Lead"
    assert result.transcript_match_score == 78
    assert result.skills == [] and result.strengths == []
