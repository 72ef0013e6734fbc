import json

import pytest

from agents.types import QualityPayload, QuestionsPayload, VideoPayload
from config import CollaboratorRoute
from llm_gateway import LlmGatewayError, call


ROUTE = CollaboratorRoute(name="video", base_url="http://collab", endpoint="/analyze", api_key_env="COLLAB_KEY")


class _Resp:
    def __init__(self, status_code=200, body=None, raw=None):
        self.status_code = status_code
        self._body = body
        self._raw = raw

    def json(self):
        if self._raw is not None:
            return json.loads(self._raw)
        return self._body

    @property
    def text(self):
        return self._raw or json.dumps(self._body)


class _Client:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    async def post(self, url, *, json, headers, timeout):
        self.requests.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.mark.asyncio
async def test_plain_json_reply(monkeypatch):
    monkeypatch.setenv("COLLAB_KEY", "secret")
    client = _Client(_Resp(body={"summary": "calm", "confidence": 77}))
    parsed = await call({"question": "q"}, VideoPayload, route=ROUTE, client=client)
    assert parsed.confidence == 77
    request = client.requests[0]
    assert request["url"] == "http://collab/analyze"
    assert request["headers"]["Authorization"] == "Bearer secret"
    assert request["timeout"] == 30.0


@pytest.mark.asyncio
async def test_chat_envelope_with_fenced_json():
    content = "```json\n{\"qualityScore\": 64}\n```"
    client = _Client(_Resp(body={"choices": [{"message": {"content": content}}]}))
    parsed = await call({}, QualityPayload, route=ROUTE, client=client)
    assert parsed.quality_score == 64


@pytest.mark.asyncio
async def test_bare_array_for_single_field_schema():
    client = _Client(_Resp(body=["a?", "b?"]))
    parsed = await call({}, QuestionsPayload, route=ROUTE, client=client)
    assert parsed.questions == ["a?", "b?"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "client",
    [
        _Client(error=ConnectionError("refused")),
        _Client(_Resp(status_code=503, body={"error": "busy"})),
        _Client(_Resp(raw="<html>oops</html>")),
        _Client(_Resp(body={"summary": "x", "confidence": 0})),
    ],
)
async def test_failures_raise_gateway_error(client):
    with pytest.raises(LlmGatewayError):
        await call({}, VideoPayload, route=ROUTE, client=client)
    assert len(client.requests) == 1
