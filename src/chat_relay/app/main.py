import json
from typing import Any

import requests

from chat_relay.app.config import RelaySettings, get_settings
from chat_relay.app.process_event import (
    BodyParseError,
    parse_json_body,
    process_event_data,
    read_body,
)
from chat_relay.infrastructure.data_models import IncomingRequest
from chat_relay.infrastructure.platform_manager import create_logger
from chat_relay.infrastructure.upstream_manager import UpstreamCallError, UpstreamChat
from chat_relay.services.cors_service import cors_headers
from chat_relay.services.message_service import (
    USAGE_HINT,
    build_conversation,
    extract_user_message,
    parse_payload,
)
from chat_relay.services.reply_service import extract_reply

LOGGER_NAME = "chat-relay"

MISSING_KEY_FIX = (
    "Set OPEN_AI_KEY (or OPENAI_API_KEY) in the function environment, "
    "or under RELAY_PARAMETER_PATH in Parameter Store."
)


def create_response(
    status_code: int,
    body: str,
    content_type: str = "application/json",
    headers: dict[str, str] | None = None,
) -> dict[str, Any]:
    """
    Create a standard HTTP response.

    Args:
        status_code (int): HTTP status code.
        body (str): Response body.
        content_type (str, optional): Content-Type header. Defaults to "application/json".
        headers (dict[str, str] | None, optional): Additional headers. Defaults to None.

    Returns:
        dict: Standardized response dictionary.
    """
    response_headers = {"Content-Type": content_type}
    if headers:
        response_headers.update(headers)

    return {
        "statusCode": status_code,
        "body": body,
        "headers": response_headers,
        "isBase64Encoded": False,
    }


def json_response(
    request: IncomingRequest, settings: RelaySettings, status_code: int, data: dict[str, Any]
) -> dict[str, Any]:
    """Create a JSON response carrying the CORS headers for the request origin."""
    return create_response(
        status_code,
        json.dumps(data, indent=2),
        headers=cors_headers(request.origin, settings.allowed_origins),
    )


def process(
    event: dict[str, Any],
    settings: RelaySettings | None = None,
    session: requests.Session | None = None,
) -> dict[str, Any]:
    """
    Process the incoming HTTP Gateway event.

    Args:
        event: Lambda proxy event.
        settings: Relay settings; loaded from the environment when omitted.
        session: Optional requests session for the upstream call.

    Returns:
        dict: Lambda proxy response.
    """
    settings = settings or get_settings()
    logger = create_logger(log_level=settings.log_level, logger_name=LOGGER_NAME)

    request = process_event_data(event)
    logger.info(f"Processing request: {request.method}")

    # 1. CORS preflight
    if request.method == "OPTIONS":
        return {
            "statusCode": 204,
            "body": "",
            "headers": cors_headers(request.origin, settings.allowed_origins),
            "isBase64Encoded": False,
        }

    # 2. Method gate
    if request.method != "POST":
        logger.error(f"Method not allowed: {request.method}")
        return json_response(request, settings, 405, {"error": "POST only"})

    # 3. Parse the body
    try:
        body_text = read_body(request)
        body_json = parse_json_body(body_text)
    except BodyParseError as e:
        logger.error(f"Bad JSON body: {e}")
        return json_response(request, settings, 400, {"error": "Body must be valid JSON."})

    logger.info(f"Incoming body: {body_text}")

    # 4. Resolve the user message
    payload = parse_payload(body_json)
    user_message = extract_user_message(payload)
    logger.info(f"Resolved user message: {user_message}")

    if not user_message:
        return json_response(
            request,
            settings,
            400,
            {"error": "I didn't receive a message.", "hint": USAGE_HINT, "got": body_json},
        )

    # 5. Resolve the upstream credential
    if not settings.api_key:
        logger.error("Missing upstream API key")
        return json_response(
            request,
            settings,
            500,
            {"error": "Missing upstream API key.", "fix": MISSING_KEY_FIX},
        )

    # 6. Call the upstream model
    llm = UpstreamChat(
        settings.api_key,
        settings.model,
        api_style=settings.api_style,
        base_url=settings.base_url,
        reasoning_effort=settings.reasoning_effort,
        temperature=settings.temperature,
        timeout=settings.timeout,
        session=session,
    )
    instruction_role = "developer" if settings.api_style == "responses" else "system"
    messages = build_conversation(payload, instruction_role)

    try:
        result = llm.generate(messages)
    except UpstreamCallError as e:
        logger.error(f"Upstream call failed: {e}")
        return json_response(
            request, settings, 500, {"error": "Upstream call failed", "details": str(e)}
        )

    # 7. Upstream returned an error status
    if not result.ok:
        logger.error(f"Upstream error {result.status_code}: {result.body}")
        return json_response(
            request,
            settings,
            502,
            {"error": "Upstream error", "status": result.status_code, "details": result.body},
        )

    # 8. Extract the reply
    reply = extract_reply(result.body)
    logger.info(f"Reply: {reply}")

    return json_response(request, settings, 200, {"reply": reply, "ok": True})
