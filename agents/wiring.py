"""Bind HTTP-backed collaborators into the model registry."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Type

from pydantic import BaseModel

from config import AppConfig, load_config, resolve_routes
from config.registry import PROFILE_KEY, QUALITY_KEY, QUESTIONS_KEY, TRANSCRIBE_KEY, VIDEO_KEY, bind_model
from llm_gateway import runnable

from .types import ProfilePayload, QualityPayload, QuestionsPayload, TranscriptPayload, VideoPayload

SCHEMAS: Dict[str, Type[BaseModel]] = {
    QUESTIONS_KEY: QuestionsPayload,
    TRANSCRIBE_KEY: TranscriptPayload,
    QUALITY_KEY: QualityPayload,
    VIDEO_KEY: VideoPayload,
    PROFILE_KEY: ProfilePayload,
}


def bind_collaborators(cfg: AppConfig) -> None:
    """Bind every collaborator key to its configured HTTP route."""

    routes = resolve_routes(cfg, SCHEMAS)
    for key, route in routes.items():
        bind_model(key, runnable(route, SCHEMAS[key]))


def bind_from_file(path: Path) -> AppConfig:
    cfg = load_config(path)
    bind_collaborators(cfg)
    return cfg
