"""Question generation with a fixed fallback set."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from config.prompts import current_prompts, render
from config.registry import QUESTIONS_KEY

from .common import invoke
from .types import JobContext, Question, QuestionsPayload

logger = logging.getLogger(__name__)

FALLBACK_QUESTIONS = (
    "Tell us about your experience relevant to this role.",
    "Describe a challenge you faced and how you overcame it.",
    "Why do you want to work with us?",
)


@dataclass
class QuestionSet:
    questions: List[Question]
    fallback: bool = False


def build_prompt(job: JobContext) -> str:
    prompt = render(current_prompts().question_generation, jobTitle=job.title, requirements=job.requirements)
    lines = [prompt, "", f"Use a {job.tone.lower()} tone."]
    if job.priority_questions:
        lines.append("Always include these questions first, verbatim:")
        lines.extend(f"- {item}" for item in job.priority_questions)
    return "\n".join(lines)


def _fallback() -> QuestionSet:
    return QuestionSet(
        questions=[Question(index=i, text=text) for i, text in enumerate(FALLBACK_QUESTIONS)],
        fallback=True,
    )


async def generate_questions(job: JobContext) -> QuestionSet:
    """Fetch the ordered question list for ``job``.

    Any failure (transport, malformed payload, empty list) yields the
    built-in fallback list instead of an error.
    """

    try:
        raw = await invoke(
            QUESTIONS_KEY,
            prompt=build_prompt(job),
            jobTitle=job.title,
            requirements=job.requirements,
            tone=job.tone,
            priorityQuestions=list(job.priority_questions),
        )
        if isinstance(raw, list):
            raw = {"questions": raw}
        payload = QuestionsPayload.model_validate(raw)
        texts = [text.strip() for text in payload.questions if text and text.strip()]
        if not texts:
            raise ValueError("no questions returned")
    except Exception as exc:  # noqa: BLE001
        logger.error("Failed to generate questions for job=%s: %s", job.job_id, exc)
        return _fallback()
    return QuestionSet(questions=[Question(index=i, text=text) for i, text in enumerate(texts)])
