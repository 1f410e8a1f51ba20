"""
Shared data models.
"""

from dataclasses import dataclass, field
from typing import Any

ROLES = ("user", "system", "developer", "assistant")


@dataclass(frozen=True)
class ContentPart:
    type: str  # "text" | "image_url" | ...
    text: str | None = None


@dataclass(frozen=True)
class Message:
    role: str  # "user" | "system" | "developer" | "assistant"
    content: str | tuple[ContentPart, ...]

    def text(self) -> str:
        """Return the message text: string content, or the joined text parts."""
        if isinstance(self.content, str):
            return self.content.strip()
        texts = [
            part.text.strip()
            for part in self.content
            if part.type == "text" and part.text and part.text.strip()
        ]
        return "\n".join(texts)


@dataclass(frozen=True)
class SingleMessagePayload:
    """{"message": "..."}"""

    message: str


@dataclass(frozen=True)
class ConversationPayload:
    """{"messages": [{"role": "...", "content": ...}, ...]}"""

    messages: tuple[Message, ...]


@dataclass(frozen=True)
class EmptyPayload:
    """Neither request shape was present."""


ChatPayload = SingleMessagePayload | ConversationPayload | EmptyPayload


@dataclass(frozen=True)
class IncomingRequest:
    method: str
    headers: dict[str, str] = field(default_factory=dict)  # lower-cased names
    body: str | bytes = ""
    is_base64_encoded: bool = False

    @property
    def origin(self) -> str:
        return self.headers.get("origin", "")


@dataclass(frozen=True)
class UpstreamResult:
    status_code: int
    ok: bool
    body: Any  # parsed JSON, or the raw text when the upstream did not send JSON
