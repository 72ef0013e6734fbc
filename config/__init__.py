"""Configuration package for the interview scoring services."""
from .routes import AppConfig, CollaboratorRoute, load_config, resolve_routes
from .registry import (
    COLLABORATOR_KEYS,
    PROFILE_KEY,
    QUALITY_KEY,
    QUESTIONS_KEY,
    TRANSCRIBE_KEY,
    VIDEO_KEY,
    bind_model,
    clear_models,
    get_model,
)
from .settings import Settings, settings

__all__ = [
    "AppConfig",
    "CollaboratorRoute",
    "load_config",
    "resolve_routes",
    "COLLABORATOR_KEYS",
    "PROFILE_KEY",
    "QUALITY_KEY",
    "QUESTIONS_KEY",
    "TRANSCRIBE_KEY",
    "VIDEO_KEY",
    "bind_model",
    "clear_models",
    "get_model",
    "Settings",
    "settings",
]
