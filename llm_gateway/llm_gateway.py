from __future__ import annotations  # Collaborator request gateway module

import json
import logging
import os
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, Tuple, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from config import CollaboratorRoute


logger = logging.getLogger(__name__)  # Module logger setup


class HttpClient(Protocol):  # Minimal async HTTP client protocol
    async def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> "HttpResponse": ...


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...


class LlmGatewayError(RuntimeError):  # Base gateway error
    pass


T = TypeVar("T", bound=BaseModel)


async def call(
    payload: Dict[str, Any],
    schema: Type[T],
    *,
    route: CollaboratorRoute,
    client: Optional[HttpClient] = None,
) -> T:  # POST a payload to a configured route and validate the reply
    headers = {"Content-Type": "application/json"}
    if route.api_key_env:
        api_key = os.getenv(route.api_key_env)
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
    headers.update(route.extra_headers)
    url = f"{route.base_url}{route.endpoint}"
    logger.info("Collaborator request start route=%s url=%s", route.name, url)
    try:
        response, close_cb = await _post(url, payload, headers, route.timeout_s, client)
    except Exception as exc:  # noqa: BLE001
        logger.error("Collaborator transport failure route=%s: %s", route.name, exc)
        raise LlmGatewayError("collaborator transport failed") from exc
    try:
        if response.status_code >= 400:
            logger.error("Collaborator error status route=%s: %s", route.name, response.status_code)
            raise LlmGatewayError(f"collaborator returned status {response.status_code}")
        try:
            data = response.json()
        except Exception as exc:  # noqa: BLE001
            logger.error("Invalid JSON payload route=%s: %s", route.name, exc)
            raise LlmGatewayError("collaborator payload was not JSON") from exc
        try:
            parsed = _validate(schema, _extract_content(data))
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.warning("Collaborator output validation failed route=%s: %s", route.name, exc)
            raise LlmGatewayError("collaborator output validation failed") from exc
    finally:
        await _close_safely(close_cb)
    logger.info("Collaborator request done route=%s", route.name)
    return parsed


def runnable(route: CollaboratorRoute, schema: Type[T]) -> Callable[..., Awaitable[Dict[str, Any]]]:  # Registry-compatible callable for a route
    async def _invoke(**payload: Any) -> Dict[str, Any]:
        parsed = await call(payload, schema, route=route)
        return parsed.model_dump()

    return _invoke


async def _post(url: str, payload: Dict[str, Any], headers: Dict[str, str], timeout: float, client: Optional[HttpClient]) -> Tuple[HttpResponse, Optional[Callable[[], Any]]]:  # Dispatch HTTP request
    if client is not None:
        response = await client.post(url, json=payload, headers=headers, timeout=timeout)
        return response, None
    http_client = httpx.AsyncClient(timeout=timeout)
    try:
        response = await http_client.post(url, json=payload, headers=headers)
    except BaseException:
        await http_client.aclose()
        raise
    return response, http_client.aclose


async def _close_safely(close_cb: Optional[Callable[[], Any]]) -> None:  # Close HTTP client callback when provided
    if close_cb is not None:
        await close_cb()


def _extract_content(data: Any) -> Any:  # Unwrap chat-style envelopes, pass plain JSON through
    if isinstance(data, dict):
        choices = data.get("choices")
        if isinstance(choices, list) and choices:
            message = choices[0].get("message") if isinstance(choices[0], dict) else None
            content = message.get("content") if isinstance(message, dict) else None
            if isinstance(content, str):
                return content
        return data
    if isinstance(data, (str, list)):
        return data
    raise LlmGatewayError("collaborator response missing content")


def _validate(schema: Type[T], content: Any) -> T:  # Parse JSON content with schema
    if isinstance(content, str):
        content = json.loads(_strip_code_fences(content))
    if isinstance(content, list):
        # bare arrays are accepted for single-list payloads
        fields = list(schema.model_fields)
        if len(fields) == 1:
            return schema.model_validate({fields[0]: content})
    return schema.model_validate(content)


def _strip_code_fences(content: str) -> str:  # Remove common markdown fences from model output
    text = content.strip()
    if text.startswith("```"):
        lines = text.splitlines()
        if lines:
            lines = lines[1:]
            while lines and lines[0].strip() == "":
                lines = lines[1:]
            while lines and lines[-1].strip() == "":
                lines = lines[:-1]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            text = "\n".join(lines).strip()
    return text
