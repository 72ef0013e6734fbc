"""In-memory registry of external collaborator callables."""
from typing import Any, Callable, Dict

_REGISTRY: Dict[str, Callable[..., Any]] = {}


def bind_model(key: str, fn: Callable[..., Any]) -> None:
    """Bind a callable implementation to a registry key."""
    _REGISTRY[key] = fn


def get_model(key: str) -> Callable[..., Any]:
    """Retrieve a callable from the registry.

    Raises:
        KeyError: If no callable has been bound for ``key``.
    """

    if key not in _REGISTRY:
        raise KeyError(f"Model not bound in registry: {key}")
    return _REGISTRY[key]


def clear_models() -> None:
    _REGISTRY.clear()


QUESTIONS_KEY = "models.question_generator"
TRANSCRIBE_KEY = "models.transcriber"
QUALITY_KEY = "models.transcript_evaluator"
VIDEO_KEY = "models.video_analyzer"
PROFILE_KEY = "models.profile_generator"

COLLABORATOR_KEYS = (QUESTIONS_KEY, TRANSCRIBE_KEY, QUALITY_KEY, VIDEO_KEY, PROFILE_KEY)
