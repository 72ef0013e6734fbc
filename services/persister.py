"""Turn a finished interview into a stored application."""
from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from agents.types import Applicant, Application, CandidateProfile, JobContext, ScoringWeights, SessionResults
from observability import log_event
from storage.applications import ApplicationRecord, insert_application, new_application
from storage.artifacts import ArtifactStore
from storage.errors import PersistenceError
from storage.sqlite import get_conn

from .scoring import score_session

logger = logging.getLogger(__name__)


class ApplicationPersister:
    """Creates one application (plus its artifacts) per call.

    Calling ``persist`` twice with the same results creates two records;
    callers own exactly-once delivery. Demo applicants get a preview built
    from the same inputs and nothing is written.
    """

    def __init__(self, artifacts: Optional[ArtifactStore] = None) -> None:
        self.artifacts = artifacts or ArtifactStore()

    def build_record(
        self,
        job: JobContext,
        applicant: Applicant,
        results: SessionResults,
        profile: CandidateProfile,
        weights: ScoringWeights,
    ) -> ApplicationRecord:
        breakdown = score_session(profile.transcript_match_score, results.video_analyses, weights)
        return ApplicationRecord(
            job_id=job.job_id,
            applicant_id=applicant.applicant_id,
            applicant_name=applicant.name,
            match_score=breakdown.final_score,
            transcript_match_score=breakdown.transcript_match_score,
            video_match_score=breakdown.video_match_score,
            scoring_weights=weights,
            transcripts=list(results.transcripts),
            video_analyses=list(results.video_analyses),
            ai_resume=profile,
        )

    def persist(
        self,
        job: JobContext,
        applicant: Applicant,
        results: SessionResults,
        profile: CandidateProfile,
        weights: ScoringWeights,
    ) -> Application:
        record = self.build_record(job, applicant, results, profile, weights)
        if applicant.is_demo:
            preview = new_application(record)
            log_event(
                "application_persisted",
                preview.id,
                job_id=job.job_id,
                application_id=preview.id,
                outcome="preview",
            )
            return preview

        try:
            with get_conn() as conn:
                application = insert_application(record, conn=conn)
                self.artifacts.put_all(application.id, results.artifacts, conn)
        except PersistenceError:
            raise
        except sqlite3.Error as exc:
            logger.error("Failed to persist application for job=%s: %s", job.job_id, exc)
            raise PersistenceError(f"could not store application: {exc}") from exc

        log_event(
            "application_persisted",
            application.id,
            job_id=job.job_id,
            application_id=application.id,
            outcome="stored",
            match_score=application.match_score,
            artifacts=len(results.artifacts),
        )
        return application


__all__ = ["ApplicationPersister"]
