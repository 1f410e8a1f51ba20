from __future__ import annotations

from typing import Any

import requests

from chat_relay.infrastructure.data_models import Message, UpstreamResult

RESPONSES_PATH = "/v1/responses"
CHAT_COMPLETIONS_PATH = "/v1/chat/completions"


class UpstreamCallError(RuntimeError):
    """The request to the model provider could not be completed."""


class UpstreamChat:
    """
    A client for a model provider's HTTP API.

    Supports the Responses API (`/v1/responses`) and the Chat Completions API
    (`/v1/chat/completions`). Exactly one POST is made per `generate()` call;
    there is no retry and no streaming.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        api_style: str = "responses",
        base_url: str = "https://api.openai.com",
        reasoning_effort: str = "low",
        temperature: float = 0.7,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """
        Initialize the upstream client.

        Args:
            api_key: Bearer credential for the provider.
            model: The model identifier (e.g., 'gpt-5').
            api_style: "responses" or "chat_completions".
            base_url: Provider base URL, without the API path.
            reasoning_effort: Effort hint sent with the Responses API.
            temperature: Sampling temperature sent with the Chat Completions API.
            timeout: Request timeout in seconds; None leaves the platform default.
            session: Optional requests session to reuse. Left open; a session created
                per call is closed after the request.

        Raises:
            ValueError: If the API key is empty or the API style is not supported
        """
        if not api_key:
            raise ValueError("Upstream API key is required")
        if api_style not in ("responses", "chat_completions"):
            raise ValueError(f"Unsupported API style: {api_style}")

        self.api_key = api_key
        self.model = model
        self.api_style = api_style
        self.base_url = base_url.rstrip("/")
        self.reasoning_effort = reasoning_effort
        self.temperature = temperature
        self.timeout = timeout
        self.session = session

    @property
    def url(self) -> str:
        path = RESPONSES_PATH if self.api_style == "responses" else CHAT_COMPLETIONS_PATH
        return f"{self.base_url}{path}"

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def build_payload(self, messages: list[Message]) -> dict[str, Any]:
        """
        Build the JSON request body for the configured API style.

        Args:
            messages: Messages to send, instruction first.

        Returns:
            The request body as a dictionary.
        """
        formatted = [{"role": m.role, "content": m.text()} for m in messages]

        if self.api_style == "responses":
            return {
                "model": self.model,
                "reasoning": {"effort": self.reasoning_effort},
                "input": formatted,
            }

        return {
            "model": self.model,
            "temperature": self.temperature,
            "messages": formatted,
        }

    def _post(self, session: requests.Session, payload: dict[str, Any]) -> requests.Response:
        return session.post(
            self.url,
            json=payload,
            headers=self._headers(),
            timeout=self.timeout,
        )

    def generate(self, messages: list[Message]) -> UpstreamResult:
        """
        Send the messages to the provider and return its response.

        Args:
            messages: Messages to send, instruction first.

        Returns:
            UpstreamResult with the HTTP status and the decoded body. Non-2xx
            statuses are returned, not raised.

        Raises:
            UpstreamCallError: If the request fails in transport
        """
        payload = self.build_payload(messages)

        try:
            if self.session is not None:
                resp = self._post(self.session, payload)
            else:
                with requests.Session() as session:
                    resp = self._post(session, payload)
        except requests.RequestException as e:
            raise UpstreamCallError(f"Request to {self.url} failed: {e}") from e

        try:
            body: Any = resp.json()
        except ValueError:
            body = resp.text

        return UpstreamResult(status_code=resp.status_code, ok=resp.ok, body=body)
