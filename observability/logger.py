"""Structured logging utilities for interview sessions and scoring."""
from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
import time
import uuid
from typing import Any

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
ENABLE_FILE_LOGS = os.getenv("ENABLE_FILE_LOGS", "1") in ("1", "true", "True")
LOG_FILE = os.getenv("LOG_FILE", "logs/talent.log")
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", "5242880"))
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "5"))

HUMAN_FORMAT = "[%(asctime)s] %(levelname)s %(name)s :: %(message)s"
HUMAN_KEYS = ("state", "question_index", "capture_mode", "trigger", "job_id", "application_id", "ms", "outcome")

_logger = logging.getLogger("talent.events")
_logger.setLevel(LOG_LEVEL)
_logger.propagate = False


class _JsonFilter(logging.Filter):
    def __init__(self, want_json: bool) -> None:
        super().__init__()
        self.want_json = want_json

    def filter(self, record: logging.LogRecord) -> bool:
        return (getattr(record, "is_json", False) is True) == self.want_json


def _rotating(path: str, formatter: logging.Formatter, want_json: bool) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT)
    handler.setLevel(LOG_LEVEL)
    handler.setFormatter(formatter)
    handler.addFilter(_JsonFilter(want_json))
    return handler


def _ensure_handlers() -> None:
    if _logger.handlers:
        return

    human = logging.Formatter(HUMAN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    console = logging.StreamHandler(stream=sys.stdout)
    console.setLevel(LOG_LEVEL)
    console.setFormatter(human)
    console.addFilter(_JsonFilter(False))
    _logger.addHandler(console)

    if not ENABLE_FILE_LOGS:
        return

    log_dir = os.path.dirname(LOG_FILE)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    stem = LOG_FILE[:-4] if LOG_FILE.endswith(".log") else LOG_FILE
    _logger.addHandler(_rotating(f"{stem}.log", logging.Formatter("%(message)s"), want_json=True))
    _logger.addHandler(_rotating(f"{stem}-human.log", human, want_json=False))


def _format_human(evt: dict[str, Any]) -> str:
    parts = [f"session={evt.get('session_id')}", f"kind={evt.get('kind')}"]
    parts.extend(f"{key}={evt[key]}" for key in HUMAN_KEYS if key in evt)
    return " ".join(parts)


def _emit(level: int, msg: str, is_json: bool) -> None:
    record = _logger.makeRecord(_logger.name, level, fn="", lno=0, msg=msg, args=(), exc_info=None)
    record.is_json = is_json  # type: ignore[attr-defined]
    _logger.handle(record)


def log_event(kind: str, session_id: str, *, level: int = logging.INFO, **fields: Any) -> None:
    """Emit a human line to the console and JSON/human lines to the log files."""

    _ensure_handlers()
    payload: dict[str, Any] = {
        "ts": time.time(),
        "trace": str(uuid.uuid4()),
        "kind": kind,
        "session_id": session_id,
    }
    payload.update(fields)

    _emit(level, _format_human(payload), is_json=False)
    if ENABLE_FILE_LOGS:
        _emit(level, json.dumps(payload, ensure_ascii=False, default=str), is_json=True)


__all__ = ["log_event"]
