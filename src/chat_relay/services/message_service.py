from typing import Any

from chat_relay.app.config import PERSONA
from chat_relay.infrastructure.data_models import (
    ROLES,
    ChatPayload,
    ContentPart,
    ConversationPayload,
    EmptyPayload,
    Message,
    SingleMessagePayload,
)

USAGE_HINT = (
    'Send {"message": "..."} or {"messages": [{"role": "user", "content": "..."}]}'
)


def _parse_content(raw: Any) -> str | tuple[ContentPart, ...] | None:
    """Parse message content: a string, or a list of {"type", "text"} parts."""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, list):
        parts = []
        for item in raw:
            if not isinstance(item, dict) or not isinstance(item.get("type"), str):
                continue
            text = item.get("text")
            if not isinstance(text, str):
                text = None
            parts.append(ContentPart(type=item["type"], text=text))
        return tuple(parts)
    return None


def _parse_message(raw: Any) -> Message | None:
    if not isinstance(raw, dict):
        return None
    role = raw.get("role")
    if role not in ROLES:
        return None
    content = _parse_content(raw.get("content"))
    if content is None:
        return None
    return Message(role=role, content=content)


def parse_payload(body_json: Any) -> ChatPayload:
    """
    Resolve the request body into one of the accepted payload shapes.

    A non-empty `message` string takes precedence over `messages`.

    Args:
        body_json: The parsed JSON body (any JSON value).

    Returns:
        SingleMessagePayload, ConversationPayload or EmptyPayload.
    """
    if not isinstance(body_json, dict):
        return EmptyPayload()

    message = body_json.get("message")
    if isinstance(message, str) and message.strip():
        return SingleMessagePayload(message=message.strip())

    raw_messages = body_json.get("messages")
    if isinstance(raw_messages, list) and raw_messages:
        messages = tuple(m for m in (_parse_message(raw) for raw in raw_messages) if m)
        if messages:
            return ConversationPayload(messages=messages)

    return EmptyPayload()


def _user_text(message: Message) -> str:
    """Return usable text from a user message: the content, or its first non-empty text part."""
    if message.role != "user":
        return ""
    if isinstance(message.content, str):
        return message.content.strip()
    for part in message.content:
        if part.type == "text" and part.text and part.text.strip():
            return part.text.strip()
    return ""


def extract_user_message(payload: ChatPayload) -> str:
    """
    Resolve the user message for a payload.

    For a conversation the messages are scanned from the end, so the latest user
    entry with usable text wins.

    Returns:
        The trimmed user message, or "" when there is none.
    """
    if isinstance(payload, SingleMessagePayload):
        return payload.message

    if isinstance(payload, ConversationPayload):
        for message in reversed(payload.messages):
            text = _user_text(message)
            if text:
                return text

    return ""


def build_conversation(payload: ChatPayload, instruction_role: str) -> list[Message]:
    """
    Build the upstream message list: the persona instruction followed by the
    caller's messages that carry usable text.

    Structured content is sent with all of its text parts joined, while
    `extract_user_message` resolves only the first non-empty text part.

    Args:
        payload: The resolved request payload.
        instruction_role: "developer" or "system", depending on the upstream API.

    Returns:
        The list of messages to send upstream.
    """
    conversation = [Message(role=instruction_role, content=PERSONA)]

    if isinstance(payload, SingleMessagePayload):
        conversation.append(Message(role="user", content=payload.message))
    elif isinstance(payload, ConversationPayload):
        conversation.extend(m for m in payload.messages if m.text())

    return conversation
