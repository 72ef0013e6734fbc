from __future__ import annotations  # Configuration schema for collaborator routing

from pathlib import Path
from typing import Dict, Iterable

from pydantic import BaseModel, Field


class CollaboratorRoute(BaseModel):  # HTTP endpoint configuration
    name: str
    base_url: str
    endpoint: str
    timeout_s: float = Field(default=30.0, ge=0.1)
    api_key_env: str | None = None
    extra_headers: Dict[str, str] = Field(default_factory=dict)


class AppConfig(BaseModel):  # Application configuration root
    routes: Dict[str, CollaboratorRoute]
    registry: Dict[str, str]


def load_config(path: Path) -> AppConfig:  # Load configuration from disk
    data = path.read_text(encoding="utf-8")
    return AppConfig.model_validate_json(data)


def resolve_routes(cfg: AppConfig, keys: Iterable[str]) -> Dict[str, CollaboratorRoute]:  # Map registry keys to routes
    resolved: Dict[str, CollaboratorRoute] = {}
    for target in keys:
        if target not in cfg.registry:
            raise KeyError(f"Registry entry missing for '{target}'")
        route_id = cfg.registry[target]
        if route_id not in cfg.routes:
            raise KeyError(f"Route '{route_id}' missing for '{target}'")
        resolved[target] = cfg.routes[route_id]
    return resolved
