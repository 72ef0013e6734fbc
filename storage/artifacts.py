"""Answer artifacts keyed by (application id, question index).

Slots are written once, together with their application, and are read-only
afterwards.
"""
from __future__ import annotations

import sqlite3
from typing import Optional, Sequence

from agents.types import AnswerArtifact

from .errors import ArtifactStoreError
from .sqlite import get_conn


class ArtifactStore:
    def __init__(self, db_path: Optional[str] = None) -> None:
        self._db_path = db_path

    def put_all(self, application_id: str, artifacts: Sequence[AnswerArtifact], conn: sqlite3.Connection) -> int:
        """Write every artifact for a freshly created application inside ``conn``'s transaction."""

        try:
            conn.executemany(
                """INSERT INTO application_artifacts
                   (application_id, question_index, content_type, simulated, content)
                   VALUES (?, ?, ?, ?, ?)""",
                [
                    (application_id, item.question_index, item.content_type, int(item.simulated), item.content)
                    for item in artifacts
                ],
            )
        except sqlite3.IntegrityError as exc:
            raise ArtifactStoreError(f"artifacts already stored for application {application_id}") from exc
        return len(artifacts)

    def get(self, application_id: str, question_index: int) -> Optional[AnswerArtifact]:
        with get_conn(self._db_path) as conn:
            row = conn.execute(
                """SELECT question_index, content_type, simulated, content
                   FROM application_artifacts
                   WHERE application_id = ? AND question_index = ?""",
                (application_id, question_index),
            ).fetchone()
        if row is None:
            return None
        return AnswerArtifact(
            question_index=row["question_index"],
            content=bytes(row["content"]),
            content_type=row["content_type"],
            simulated=bool(row["simulated"]),
        )

    def count(self, application_id: str) -> int:
        with get_conn(self._db_path) as conn:
            row = conn.execute(
                "SELECT COUNT(*) FROM application_artifacts WHERE application_id = ?",
                (application_id,),
            ).fetchone()
        return int(row[0])
