ALLOW_METHODS = "POST, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"
MAX_AGE_SECONDS = 86400


def allowed_origin(origin: str, allowed_origins: tuple[str, ...]) -> str:
    """
    Pick the Access-Control-Allow-Origin value for a request.

    The request origin is echoed when it is on the allow-list, otherwise the first
    allowed origin is returned so the browser rejects the response.
    """
    if "*" in allowed_origins:
        return "*"
    if origin and origin in allowed_origins:
        return origin
    return allowed_origins[0] if allowed_origins else ""


def cors_headers(origin: str, allowed_origins: tuple[str, ...]) -> dict[str, str]:
    """Build the CORS headers sent with every relay response."""
    headers = {
        "Access-Control-Allow-Origin": allowed_origin(origin, allowed_origins),
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Max-Age": str(MAX_AGE_SECONDS),
    }
    if "*" not in allowed_origins:
        headers["Vary"] = "Origin"
    return headers
