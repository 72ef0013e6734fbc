import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from storage.migrate import migrate
from config.settings import settings
from config.registry import (
    PROFILE_KEY,
    QUALITY_KEY,
    QUESTIONS_KEY,
    TRANSCRIBE_KEY,
    VIDEO_KEY,
    bind_model,
    clear_models,
)


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    migrate(db_path)
    try:
        yield db_path
    finally:
        td.cleanup()


@pytest.fixture(autouse=True)
def fast_settings(monkeypatch):
    monkeypatch.setattr(settings, "SIMULATED_PROCESSING_SECONDS", 0.0, raising=False)
    yield settings
    clear_models()


@pytest.fixture
def calls():
    return {key: 0 for key in (QUESTIONS_KEY, TRANSCRIBE_KEY, QUALITY_KEY, VIDEO_KEY, PROFILE_KEY)}


@pytest.fixture
def fake_collaborators(calls):
    def counted(key, reply):
        def _fn(**inputs):
            calls[key] += 1
            return reply(**inputs) if callable(reply) else reply

        return _fn

    bind_model(QUESTIONS_KEY, counted(QUESTIONS_KEY, {"questions": ["Q one?", "Q two?", "Q three?"]}))
    bind_model(TRANSCRIBE_KEY, counted(TRANSCRIBE_KEY, lambda **kw: {"transcript": f"answer to {kw['question']}"}))
    bind_model(QUALITY_KEY, counted(QUALITY_KEY, {"qualityScore": 80}))
    bind_model(VIDEO_KEY, counted(VIDEO_KEY, {"summary": "Steady eye contact.", "confidence": 60}))
    bind_model(
        PROFILE_KEY,
        counted(
            PROFILE_KEY,
            {
                "summary": "Pragmatic engineer.",
                "skills": ["python", "sql"],
                "strengths": ["clarity"],
                "suggestedRole": "Backend Engineer",
                "transcriptMatchScore": 90,
                "formattedResume": "# Resume",
            },
        ),
    )
    return calls


@pytest.fixture
def failing_collaborators(calls):
    def boom(key):
        def _fn(**_):
            calls[key] += 1
            raise RuntimeError(f"{key} unavailable")

        return _fn

    for key in calls:
        bind_model(key, boom(key))
    return calls
