# This is a simple local server for the relay.
# Run with: chat-relay --port 8787
# or:       uvicorn chat_relay.fast_api_server:app --reload --port 8787
import argparse
import base64
from typing import Any

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from chat_relay.relay_handler import lambda_handler

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8787


def _lambda_to_fastapi_response(lambda_resp: dict[str, Any]) -> Response | JSONResponse:
    """
    Convert an AWS Lambda-style proxy response into a FastAPI Response.

    Args:
        lambda_resp (dict): A dict like:
            {
                "statusCode": int,
                "headers": {"Content-Type": str, ...},
                "body": str,
                "isBase64Encoded": bool
            }

    Returns:
        Response: A FastAPI-compatible Response object.
    """
    status_code = lambda_resp.get("statusCode", 200)
    headers = dict(lambda_resp.get("headers", {}))
    content_type = headers.pop("Content-Type", None)
    body = lambda_resp.get("body", "")

    if lambda_resp.get("isBase64Encoded", False):
        body = base64.b64decode(body)

    # Handle dict content as JSON
    if isinstance(body, dict):
        return JSONResponse(content=body, status_code=status_code, headers=headers)

    return Response(content=body, status_code=status_code, media_type=content_type, headers=headers)


def _process_request(body: bytes, request: Request) -> Response | JSONResponse:
    """Convert a FastAPI request to a Lambda-style event."""
    headers = dict(request.headers)
    query_params = dict(request.query_params)
    path = request.url.path
    method = request.method
    route_key = f"{method} {path}"

    event = {
        "routeKey": route_key,
        "rawPath": path,
        "body": body,
        "isBase64Encoded": False,
        "headers": headers,
        "queryStringParameters": query_params,
        "requestContext": {"routeKey": route_key, "http": {"method": method, "path": path}},
    }
    # Response is a Lambda-style response. Set a direct HTTP response in FastAPI
    lambda_response = lambda_handler(event, None)
    return _lambda_to_fastapi_response(lambda_response)


app: FastAPI = FastAPI(title="Chat Relay")


@app.get("/healthz")
def healthz() -> dict[str, bool]:
    return {"ok": True}


# --- every other route goes to the relay, which answers non-POST methods itself ---
@app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
async def relay(request: Request) -> Response:
    body = await request.body()
    return _process_request(body, request)


def main() -> None:
    parser = argparse.ArgumentParser(description="Chat Relay local server")
    parser.add_argument("--host", default=DEFAULT_HOST, help=f"Host (default: {DEFAULT_HOST})")
    parser.add_argument(
        "-p", "--port", type=int, default=DEFAULT_PORT, help=f"Port (default: {DEFAULT_PORT})"
    )
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    uvicorn.run(
        "chat_relay.fast_api_server:app", host=args.host, port=args.port, reload=args.reload
    )


if __name__ == "__main__":
    main()
