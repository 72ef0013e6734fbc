"""Helpers shared by the collaborator-backed agents."""
from __future__ import annotations

import base64
import inspect
import math
from typing import Any, Dict

from config.registry import get_model

from .types import AnswerArtifact

DEFAULT_ARTIFACT_MIME = "video/webm"


async def invoke(key: str, **inputs: Any) -> Any:
    """Call the collaborator bound to ``key``; sync and async callables both work."""

    result = get_model(key)(**inputs)
    if inspect.isawaitable(result):
        result = await result
    return result


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def encode_artifact(artifact: AnswerArtifact) -> Dict[str, str]:
    return {
        "mimeType": artifact.content_type or DEFAULT_ARTIFACT_MIME,
        "base64Audio": base64.b64encode(artifact.content).decode("ascii"),
    }
