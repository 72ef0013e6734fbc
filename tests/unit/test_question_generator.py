import pytest

from agents.question_generator import FALLBACK_QUESTIONS, build_prompt, generate_questions
from agents.types import JobContext
from config.registry import QUESTIONS_KEY, bind_model


JOB = JobContext(job_id="j1", title="Data Engineer", requirements="Spark, SQL")


@pytest.mark.asyncio
async def test_questions_are_indexed_in_order(fake_collaborators):
    result = await generate_questions(JOB)
    assert not result.fallback
    assert [q.index for q in result.questions] == [0, 1, 2]
    assert result.questions[0].text == "Q one?"


@pytest.mark.asyncio
async def test_bare_list_reply_is_accepted():
    bind_model(QUESTIONS_KEY, lambda **_: ["  First?  ", "", "Second?"])
    result = await generate_questions(JOB)
    assert [q.text for q in result.questions] == ["First?", "Second?"]


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", [{"questions": []}, {"unexpected": True}, "not json"])
async def test_unusable_reply_falls_back(reply):
    bind_model(QUESTIONS_KEY, lambda **_: reply)
    result = await generate_questions(JOB)
    assert result.fallback
    assert [q.text for q in result.questions] == list(FALLBACK_QUESTIONS)


@pytest.mark.asyncio
async def test_unbound_collaborator_falls_back():
    result = await generate_questions(JOB)
    assert result.fallback
    assert len(result.questions) == 3


def test_prompt_carries_tone_and_priority_questions():
    job = JOB.model_copy(update={"tone": "Friendly", "priority_questions": ["Are you willing to relocate?"]})
    prompt = build_prompt(job)
    assert '"Data Engineer"' in prompt
    assert "Spark, SQL" in prompt
    assert "friendly tone" in prompt
    assert "- Are you willing to relocate?" in prompt
