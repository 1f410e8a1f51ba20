from typing import Any

from chat_relay.app.main import process


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """AWS Lambda entry point for Chat Relay."""
    try:
        result = process(event)
        # Type assertion: process() returns dict[str, Any] as declared
        assert isinstance(result, dict)
        return result
    except Exception as e:
        raise Exception(f"Error in processing Chat Relay: {e}") from e
