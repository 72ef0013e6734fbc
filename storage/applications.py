"""Persistence helpers for interview applications."""
from __future__ import annotations

import datetime as dt
import json
import sqlite3
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, Field

from agents.types import Application, ApplicationStatus, CandidateProfile, QAPair, ScoringWeights, VideoAnalysis

from .sqlite import get_conn


class ApplicationRecord(BaseModel):
    job_id: str
    applicant_id: str
    applicant_name: str
    status: ApplicationStatus = "completed"
    match_score: int
    transcript_match_score: Optional[int] = None
    video_match_score: Optional[int] = None
    scoring_weights: Optional[ScoringWeights] = None
    transcripts: List[QAPair] = Field(default_factory=list)
    video_analyses: List[VideoAnalysis] = Field(default_factory=list)
    ai_resume: Optional[CandidateProfile] = None


@contextmanager
def _connection(conn: Optional[sqlite3.Connection]) -> Iterator[sqlite3.Connection]:
    if conn is not None:
        yield conn
        return
    with get_conn() as owned:
        yield owned


def _dumps(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    return json.dumps([item.model_dump() for item in value])


def _row_to_application(row: sqlite3.Row) -> Application:
    data: Dict[str, Any] = dict(row)
    for key in ("scoring_weights", "ai_resume", "transcripts", "video_analyses"):
        raw = data.get(key)
        data[key] = json.loads(raw) if raw else None
    data["transcripts"] = data["transcripts"] or []
    data["video_analyses"] = data["video_analyses"] or []
    return Application.model_validate(data)


def new_application(record: ApplicationRecord) -> Application:
    """Materialize a record into an application without storing it."""

    return Application(
        id=str(uuid.uuid4()),
        created_at=dt.datetime.now(dt.timezone.utc).isoformat(),
        **record.model_dump(),
    )


def insert_application(record: ApplicationRecord, *, conn: Optional[sqlite3.Connection] = None) -> Application:
    """Insert an application row and return the stored model."""

    app = new_application(record)
    with _connection(conn) as db:
        db.execute(
            """INSERT INTO applications
               (id, job_id, applicant_id, applicant_name, status, match_score,
                transcript_match_score, video_match_score, scoring_weights,
                transcripts, video_analyses, ai_resume, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                app.id,
                app.job_id,
                app.applicant_id,
                app.applicant_name,
                app.status,
                app.match_score,
                app.transcript_match_score,
                app.video_match_score,
                _dumps(app.scoring_weights),
                _dumps(app.transcripts),
                _dumps(app.video_analyses),
                _dumps(app.ai_resume),
                app.created_at,
            ),
        )
    return app


def get_application(application_id: str) -> Optional[Application]:
    with get_conn() as conn:
        row = conn.execute("SELECT * FROM applications WHERE id = ?", (application_id,)).fetchone()
    return _row_to_application(row) if row else None


def list_applications(job_id: Optional[str] = None) -> List[Application]:
    """Return applications newest first, optionally filtered to one job."""

    query = "SELECT * FROM applications"
    params: tuple = ()
    if job_id is not None:
        query += " WHERE job_id = ?"
        params = (job_id,)
    query += " ORDER BY created_at DESC, rowid DESC"
    with get_conn() as conn:
        rows = conn.execute(query, params).fetchall()
    return [_row_to_application(row) for row in rows]


def update_match_score(
    application_id: str,
    match_score: int,
    weights: ScoringWeights,
    *,
    conn: Optional[sqlite3.Connection] = None,
) -> None:
    with _connection(conn) as db:
        db.execute(
            "UPDATE applications SET match_score = ?, scoring_weights = ? WHERE id = ?",
            (match_score, weights.model_dump_json(), application_id),
        )
