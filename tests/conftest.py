import json
from typing import Any

import pytest
import requests

from chat_relay.app import config as config_module
from chat_relay.app.config import RelaySettings

ENV_NAMES = [
    "OPEN_AI_KEY",
    "OPENAI_API_KEY",
    "MODEL",
    "ALLOWED_ORIGINS",
    "UPSTREAM_API_STYLE",
    "UPSTREAM_BASE_URL",
    "REASONING_EFFORT",
    "TEMPERATURE",
    "UPSTREAM_TIMEOUT",
    "LOG_LEVEL",
    "RELAY_PARAMETER_PATH",
]

ALLOWED = ("https://app.example.com", "http://localhost:5173")


class FakeResponse:
    def __init__(self, status_code: int, body: Any) -> None:
        self.status_code = status_code
        self._body = body
        self.text = body if isinstance(body, str) else json.dumps(body)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if isinstance(self._body, str):
            raise ValueError("No JSON object could be decoded")
        return self._body


class FakeUpstream:
    """Stands in for requests.Session.post and records every call."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.status_code = 200
        self.body: Any = {"output_text": "hello"}
        self.error: Exception | None = None

    def respond(self, status_code: int, body: Any) -> None:
        self.status_code = status_code
        self.body = body

    def post(self, session: requests.Session, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status_code, self.body)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module.config, "_settings", None)


@pytest.fixture
def settings() -> RelaySettings:
    return RelaySettings(api_key="sk-test", model="gpt-5", allowed_origins=ALLOWED)


@pytest.fixture
def upstream(monkeypatch: pytest.MonkeyPatch) -> FakeUpstream:
    fake = FakeUpstream()

    def post(self: requests.Session, url: str, **kwargs: Any) -> FakeResponse:
        return fake.post(self, url, **kwargs)

    monkeypatch.setattr(requests.Session, "post", post)
    return fake


def _make_event(
    method: str = "POST",
    body: Any = "",
    origin: str | None = "https://app.example.com",
    is_base64: bool = False,
) -> dict[str, Any]:
    """Build an API Gateway HTTP API (v2) proxy event."""
    headers = {"content-type": "application/json"}
    if origin is not None:
        headers["origin"] = origin
    if not isinstance(body, str | bytes):
        body = json.dumps(body)
    return {
        "version": "2.0",
        "routeKey": f"{method} /chat",
        "rawPath": "/chat",
        "headers": headers,
        "body": body,
        "isBase64Encoded": is_base64,
        "requestContext": {"http": {"method": method, "path": "/chat"}},
    }


@pytest.fixture
def make_event() -> Any:
    return _make_event
