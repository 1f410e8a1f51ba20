import base64
import binascii
import json
from typing import Any

from chat_relay.infrastructure.data_models import IncomingRequest


class BodyParseError(ValueError):
    """The request body could not be decoded as JSON."""


def _get_method(event: dict[str, Any]) -> str:
    """Read the HTTP method from an HTTP API (v2), REST (v1) or FastAPI-built event."""
    request_context = event.get("requestContext", {}) or {}
    method = (
        request_context.get("http", {}).get("method")
        or event.get("httpMethod")
        or event.get("routeKey", "").partition(" ")[0]
    )
    return str(method or "").upper()


def process_event_data(event: dict[str, Any]) -> IncomingRequest:
    """
    Convert a Lambda proxy event into an IncomingRequest.

    The body is kept as received; it is only decoded by `parse_json_body`.
    """
    headers = event.get("headers", {}) or {}
    body_raw = event.get("body") or ""

    if isinstance(body_raw, dict | list):
        # Possibly pre-parsed during testing
        body_raw = json.dumps(body_raw)

    # AWS API Gateway sends body as a string but FastAPI sends as bytes
    assert isinstance(body_raw, str | bytes)

    return IncomingRequest(
        method=_get_method(event),
        headers={str(k).lower(): str(v) for k, v in dict(headers).items()},
        body=body_raw,
        is_base64_encoded=bool(event.get("isBase64Encoded")),
    )


def read_body(request: IncomingRequest) -> str:
    """
    Return the request body as text, decoding base64 and bytes as needed.

    Raises:
        BodyParseError: If the body cannot be decoded
    """
    body = request.body
    try:
        if request.is_base64_encoded:
            body = base64.b64decode(body, validate=True)
        if isinstance(body, bytes):
            body = body.decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise BodyParseError(f"Error decoding body: {e}") from e
    return body


def parse_json_body(body_text: str) -> Any:
    """
    Parse the request body as JSON. An empty body is treated as {}.

    Raises:
        BodyParseError: If the body is not valid JSON
    """
    if not body_text.strip():
        return {}
    try:
        return json.loads(body_text)
    except (json.JSONDecodeError, RecursionError) as e:
        raise BodyParseError(f"Invalid JSON: {e}") from e
