"""Helpers for creating interview sessions and wiring their completion."""
from __future__ import annotations

from typing import Dict, Optional

from agents.evaluator import EvaluatorClient
from agents.profile_generator import generate_profile
from agents.types import Applicant, Application, JobContext, SessionResults
from capture import MediaDevices, RecorderFactory
from config.settings import Settings, settings as default_settings
from interview_session import CompletionHandler, InterviewSession, SessionState
from storage.job_settings import get_job_settings

from .persister import ApplicationPersister

_SESSIONS: Dict[str, InterviewSession] = {}


def job_context(job_id: str, title: str, requirements: str = "") -> JobContext:
    """Build the job context, seeding tone and priority questions from stored AI settings."""

    stored = get_job_settings(job_id)
    return JobContext(
        job_id=job_id,
        title=title,
        requirements=requirements,
        tone=stored.tone,
        priority_questions=list(stored.priority_questions),
    )


def completion_handler(
    job: JobContext,
    applicant: Applicant,
    persister: Optional[ApplicationPersister] = None,
) -> CompletionHandler:
    """Profile the transcript, score with the job's weights, then persist."""

    persister = persister or ApplicationPersister()

    async def _complete(results: SessionResults) -> Application:
        profile = await generate_profile(job, results.transcripts)
        weights = get_job_settings(job.job_id).scoring_weights
        return persister.persist(job, applicant, results, profile, weights)

    return _complete


def new_session(
    job: JobContext,
    applicant: Applicant,
    *,
    devices: Optional[MediaDevices] = None,
    recorder_factory: Optional[RecorderFactory] = None,
    evaluator: Optional[EvaluatorClient] = None,
    persister: Optional[ApplicationPersister] = None,
    settings: Settings = default_settings,
) -> InterviewSession:
    """Create a session whose completion persists an application."""

    session = InterviewSession(
        job,
        on_complete=completion_handler(job, applicant, persister),
        devices=devices,
        recorder_factory=recorder_factory,
        evaluator=evaluator,
        settings=settings,
    )
    _SESSIONS[session.session_id] = session
    session.add_done_callback(lambda settled: drop_session(settled.session_id))
    return session


def load_session(session_id: str) -> Optional[InterviewSession]:
    """Return a session that has neither finished nor been cancelled."""

    return _SESSIONS.get(session_id)


def drop_session(session_id: str) -> None:
    _SESSIONS.pop(session_id, None)


async def run_simulated_interview(
    job: JobContext,
    applicant: Applicant,
    *,
    persister: Optional[ApplicationPersister] = None,
    settings: Settings = default_settings,
) -> Optional[Application]:
    """Answer every question without a camera and return the stored application."""

    session = new_session(job, applicant, persister=persister, settings=settings)
    try:
        await session.start()
        while session.state is SessionState.QUESTION:
            await session.start_answer()
            await session.finish_answer()
        return await session.wait()
    finally:
        drop_session(session.session_id)
