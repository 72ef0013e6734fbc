"""YAML-driven prompt templates for the question and profile collaborators."""
from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import Dict, Optional

from .settings import settings

DEFAULT_TEMPLATES: Dict[str, str] = {
    "question_generation": (
        'Generate 3 distinct, challenging, and relevant interview questions for a candidate applying '
        'for the position of "{{jobTitle}}".\n'
        'The requirements are: "{{requirements}}".\n\n'
        "Question 1 should be about technical/hard skills.\n"
        "Question 2 should be situational (STAR method).\n"
        "Question 3 should be about culture fit or soft skills.\n\n"
        "Return ONLY the questions as a JSON array of strings."
    ),
    "profile_generation": (
        "Role: {{jobTitle}}\n"
        "Requirements: {{requirements}}\n\n"
        "Interview Transcript:\n{{transcript}}\n\n"
        "Based ONLY on the interview answers, generate a detailed candidate profile JSON.\n"
        '1. "summary": A professional summary of the candidate suitable for a resume.\n'
        '2. "skills": A list of hard and soft skills demonstrated.\n'
        '3. "strengths": Key strengths observed.\n'
        '4. "suggestedRole": A specific niche/level (e.g., "Senior Backend Dev").\n'
        '5. "finalMatchScore": Adjust the average score ({{avgScore}}) based on fit.\n'
        '6. "formattedResume": A clean, professional Resume/CV string in Markdown format. '
        'Structure it with sections: "Professional Summary", "Key Skills", '
        '"Interview Performance Highlights". Infer details where logical but stay true to the transcript.'
    ),
}


@dataclass
class PromptSet:
    """Templates currently in effect."""

    question_generation: str
    profile_generation: str


def _load_yaml(path: str) -> dict:
    import yaml

    with open(path, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def render(template: str, **values: object) -> str:
    """Substitute ``{{name}}`` placeholders; unknown placeholders are left as-is."""

    text = template
    for key, value in values.items():
        text = text.replace("{{" + key + "}}", str(value))
    return text


class PromptLibrary:
    """Load templates from YAML and reload them when the file changes."""

    def __init__(self, path: Optional[str] = None):
        self.path = path or settings.PROMPTS_PATH
        self._mtime = 0.0
        self._templates: Dict[str, str] = dict(DEFAULT_TEMPLATES)
        self.reload_if_changed(force=True)

    def reload_if_changed(self, force: bool = False) -> None:
        """Reload YAML configuration when the file timestamp changes."""

        try:
            stat = os.stat(self.path)
            if not force and stat.st_mtime <= self._mtime:
                return
            cfg = _load_yaml(self.path)
            self._mtime = stat.st_mtime
        except FileNotFoundError:
            cfg = {}
            self._mtime = time.time()

        templates = dict(DEFAULT_TEMPLATES)
        for name, value in (cfg.get("templates") or {}).items():
            if name in templates and isinstance(value, str) and value.strip():
                templates[name] = value
        self._templates = templates

    def current(self) -> PromptSet:
        self.reload_if_changed()
        return PromptSet(
            question_generation=self._templates["question_generation"],
            profile_generation=self._templates["profile_generation"],
        )


_library: Optional[PromptLibrary] = None


def prompt_library() -> PromptLibrary:
    global _library
    if _library is None:
        _library = PromptLibrary()
    return _library


def current_prompts() -> PromptSet:
    """Convenience wrapper returning the active templates."""

    return prompt_library().current()


__all__ = [
    "DEFAULT_TEMPLATES",
    "PromptLibrary",
    "PromptSet",
    "current_prompts",
    "prompt_library",
    "render",
]
