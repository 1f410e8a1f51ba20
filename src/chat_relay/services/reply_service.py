from collections.abc import Callable
from typing import Any

from chat_relay.app.config import NO_TEXT_REPLY

ReplyExtractor = Callable[[Any], str | None]


def _clean(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def from_output_text(data: Any) -> str | None:
    """Responses API convenience field: {"output_text": "..."}."""
    if not isinstance(data, dict):
        return None
    return _clean(data.get("output_text"))


def from_output_items(data: Any) -> str | None:
    """Responses API items: the first `output_text` part in `output[].content[]`."""
    if not isinstance(data, dict):
        return None
    output = data.get("output")
    if not isinstance(output, list):
        return None

    # Items are scanned in order; reasoning items carry no content
    for item in output:
        content = item.get("content") if isinstance(item, dict) else None
        if not isinstance(content, list):
            continue
        for part in content:
            if isinstance(part, dict) and part.get("type") == "output_text":
                text = _clean(part.get("text"))
                if text:
                    return text
    return None


def from_chat_choices(data: Any) -> str | None:
    """Chat Completions API: {"choices": [{"message": {"content": "..."}}]}."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message")
    if not isinstance(message, dict):
        return None
    return _clean(message.get("content"))


REPLY_EXTRACTORS: tuple[ReplyExtractor, ...] = (
    from_output_text,
    from_output_items,
    from_chat_choices,
)


def extract_reply(data: Any, extractors: tuple[ReplyExtractor, ...] = REPLY_EXTRACTORS) -> str:
    """
    Extract the reply text from an upstream response body.

    Extractors are tried in priority order; the first non-empty text wins.

    Returns:
        The reply text, or a placeholder when no extractor finds any.
    """
    for extractor in extractors:
        text = extractor(data)
        if text:
            return text
    return NO_TEXT_REPLY
