"""SQLite schema migrations."""
from __future__ import annotations

import os
import sqlite3
from typing import Iterable

SCHEMA: Iterable[str] = [
    """
CREATE TABLE IF NOT EXISTS applications (
  id TEXT PRIMARY KEY,
  job_id TEXT NOT NULL,
  applicant_id TEXT NOT NULL,
  applicant_name TEXT NOT NULL,
  status TEXT NOT NULL,
  match_score INTEGER NOT NULL,
  transcript_match_score INTEGER,
  video_match_score INTEGER,
  scoring_weights TEXT,
  transcripts TEXT NOT NULL,
  video_analyses TEXT NOT NULL,
  ai_resume TEXT,
  created_at TEXT NOT NULL
);
""",
    """
CREATE INDEX IF NOT EXISTS idx_applications_job ON applications (job_id);
""",
    """
CREATE TABLE IF NOT EXISTS application_artifacts (
  application_id TEXT NOT NULL,
  question_index INTEGER NOT NULL,
  content_type TEXT NOT NULL,
  simulated INTEGER NOT NULL DEFAULT 0,
  content BLOB NOT NULL,
  PRIMARY KEY (application_id, question_index),
  FOREIGN KEY (application_id) REFERENCES applications(id) ON DELETE CASCADE
);
""",
    """
CREATE TABLE IF NOT EXISTS job_ai_settings (
  job_id TEXT PRIMARY KEY,
  id TEXT NOT NULL,
  tone TEXT NOT NULL,
  priority_questions TEXT NOT NULL,
  auto_follow_up INTEGER NOT NULL,
  transcript_weight INTEGER NOT NULL,
  video_weight INTEGER NOT NULL,
  updated_at TEXT NOT NULL
);
""",
]


def migrate(db_path: str = "data/talent.db") -> None:
    """Apply schema migrations to the SQLite database."""

    directory = os.path.dirname(db_path) or "."
    os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        for stmt in SCHEMA:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


if __name__ == "__main__":
    from config.settings import settings

    migrate(settings.DB_PATH)
