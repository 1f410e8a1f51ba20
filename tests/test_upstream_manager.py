import pytest
import requests

from chat_relay.infrastructure.data_models import ContentPart, Message
from chat_relay.infrastructure.upstream_manager import UpstreamCallError, UpstreamChat


def test_requires_api_key():
    with pytest.raises(ValueError):
        UpstreamChat("", "gpt-5")


def test_rejects_unknown_style():
    with pytest.raises(ValueError, match="Unsupported API style"):
        UpstreamChat("sk-test", "gpt-5", api_style="completions")


def test_url_strips_trailing_slash():
    llm = UpstreamChat("sk-test", "m", api_style="chat_completions", base_url="http://llm:8080/")
    assert llm.url == "http://llm:8080/v1/chat/completions"


def test_structured_content_is_flattened():
    llm = UpstreamChat("sk-test", "gpt-5")
    message = Message(
        role="user",
        content=(
            ContentPart(type="text", text="one"),
            ContentPart(type="image_url"),
            ContentPart(type="text", text="two"),
        ),
    )
    assert llm.build_payload([message])["input"] == [{"role": "user", "content": "one\ntwo"}]


def test_generate_returns_error_statuses(upstream):
    upstream.respond(429, {"error": {"message": "slow down"}})
    result = UpstreamChat("sk-test", "gpt-5", timeout=5.0).generate(
        [Message(role="user", content="hi")]
    )

    assert result.status_code == 429
    assert result.ok is False
    assert result.body == {"error": {"message": "slow down"}}
    assert upstream.calls[0]["timeout"] == 5.0


def test_generate_wraps_transport_errors(upstream):
    upstream.error = requests.Timeout("read timed out")

    with pytest.raises(UpstreamCallError, match="read timed out"):
        UpstreamChat("sk-test", "gpt-5").generate([Message(role="user", content="hi")])

    assert len(upstream.calls) == 1


def test_created_session_is_closed(upstream, monkeypatch):
    closed = []
    monkeypatch.setattr(requests.Session, "close", lambda self: closed.append(self))

    UpstreamChat("sk-test", "gpt-5").generate([Message(role="user", content="hi")])

    assert len(closed) == 1


def test_injected_session_is_left_open(upstream, monkeypatch):
    closed = []
    monkeypatch.setattr(requests.Session, "close", lambda self: closed.append(self))
    session = requests.Session()

    llm = UpstreamChat("sk-test", "gpt-5", session=session)
    llm.generate([Message(role="user", content="hi")])
    llm.generate([Message(role="user", content="again")])

    assert closed == []
    assert len(upstream.calls) == 2
