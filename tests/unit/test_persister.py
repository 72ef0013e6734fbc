import sqlite3

import pytest

from agents.types import (
    Applicant,
    AnswerArtifact,
    CandidateProfile,
    JobContext,
    QAPair,
    ScoringWeights,
    SessionResults,
    VideoAnalysis,
)
from services.persister import ApplicationPersister
from storage.applications import get_application, list_applications
from storage.artifacts import ArtifactStore
from storage.errors import ArtifactStoreError, PersistenceError
from storage.sqlite import get_conn


JOB = JobContext(job_id="job-9", title="SRE")
WEIGHTS = ScoringWeights(transcript=85, video=15)


def _results(confidences=(40, 60, 80)):
    return SessionResults(
        transcripts=[QAPair(question=f"Q{i}?", answer=f"A{i}", score=70) for i in range(len(confidences))],
        video_analyses=[VideoAnalysis(question=f"Q{i}?", summary="fine", confidence=c) for i, c in enumerate(confidences)],
        artifacts=[
            AnswerArtifact(question_index=i, content=f"clip-{i}".encode(), content_type="video/webm")
            for i in range(len(confidences))
        ],
    )


def _profile(score=90):
    return CandidateProfile(
        summary="Solid operator.",
        skills=["k8s"],
        strengths=["calm"],
        suggested_role="SRE II",
        transcript_match_score=score,
        formatted_resume="# SRE",
    )


def test_persist_stores_application_and_artifacts():
    app = ApplicationPersister().persist(JOB, Applicant(applicant_id="a1", name="Lin"), _results(), _profile(), WEIGHTS)

    assert app.match_score == 86
    assert app.video_match_score == 60
    assert app.transcript_match_score == 90
    assert app.execution_level == "high"
    assert app.status == "completed"

    stored = get_application(app.id)
    assert stored is not None
    assert stored.applicant_name == "Lin"
    assert stored.scoring_weights == WEIGHTS
    assert stored.ai_resume.suggested_role == "SRE II"
    assert [qa.answer for qa in stored.transcripts] == ["A0", "A1", "A2"]

    store = ArtifactStore()
    assert store.count(app.id) == 3
    clip = store.get(app.id, 1)
    assert clip.content == b"clip-1"
    assert clip.content_type == "video/webm"
    assert store.get(app.id, 7) is None


def test_persist_twice_creates_two_records():
    persister = ApplicationPersister()
    applicant = Applicant(applicant_id="a1", name="Lin")
    first = persister.persist(JOB, applicant, _results(), _profile(), WEIGHTS)
    second = persister.persist(JOB, applicant, _results(), _profile(), WEIGHTS)
    assert first.id != second.id
    assert len(list_applications(JOB.job_id)) == 2


def test_demo_account_returns_preview_without_side_effects():
    preview = ApplicationPersister().persist(
        JOB, Applicant(applicant_id="demo", name="Demo", is_demo=True), _results(), _profile(), WEIGHTS
    )
    assert preview.match_score == 86
    assert list_applications(JOB.job_id) == []
    assert ArtifactStore().count(preview.id) == 0


def test_artifact_slots_are_write_once():
    app = ApplicationPersister().persist(JOB, Applicant(applicant_id="a1", name="Lin"), _results(), _profile(), WEIGHTS)
    with pytest.raises(ArtifactStoreError):
        with get_conn() as conn:
            ArtifactStore().put_all(app.id, [AnswerArtifact(question_index=0, content=b"x", content_type="video/webm")], conn)
    assert ArtifactStore().get(app.id, 0).content == b"clip-0"


def test_storage_failure_surfaces_and_rolls_back(monkeypatch):
    def broken(self, application_id, artifacts, conn):
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(ArtifactStore, "put_all", broken)
    with pytest.raises(PersistenceError):
        ApplicationPersister().persist(JOB, Applicant(applicant_id="a1", name="Lin"), _results(), _profile(), WEIGHTS)
    assert list_applications(JOB.job_id) == []


def test_list_applications_newest_first():
    persister = ApplicationPersister()
    ids = [
        persister.persist(JOB, Applicant(applicant_id=f"a{i}", name=f"N{i}"), _results(), _profile(), WEIGHTS).id
        for i in range(3)
    ]
    assert [a.id for a in list_applications(JOB.job_id)] == list(reversed(ids))
    assert list_applications("other-job") == []
