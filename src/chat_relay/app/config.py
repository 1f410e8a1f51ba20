import os
from dataclasses import dataclass

from chat_relay.infrastructure.platform_manager import get_parameters

# Constants that don't change
API_KEY_NAMES = ("open_ai_key", "openai_api_key")  # primary, fallback
API_STYLES = ("responses", "chat_completions")

DEFAULT_API_STYLE = "responses"
DEFAULT_BASE_URL = "https://api.openai.com"
DEFAULT_MODELS = {
    "responses": "gpt-5",
    "chat_completions": "gpt-4o-mini",
}
DEFAULT_REASONING_EFFORT = "low"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_ALLOWED_ORIGINS = (
    "https://willshacklett.github.io",
    "http://localhost:5500",
    "http://localhost:5173",
    "http://localhost:3000",
)

PERSONA = (
    "You are a calm, concise and helpful assistant. Be safety-minded: refuse harmful "
    "or illegal requests and offer a safe alternative instead."
)

NO_TEXT_REPLY = "(No text returned)"


@dataclass(frozen=True)
class RelaySettings:
    """Relay configuration settings loaded from the environment or parameter store."""

    # Upstream credential; None is reported per request, never at load time
    api_key: str | None

    # Upstream settings
    model: str
    api_style: str = DEFAULT_API_STYLE
    base_url: str = DEFAULT_BASE_URL
    reasoning_effort: str = DEFAULT_REASONING_EFFORT
    temperature: float = DEFAULT_TEMPERATURE
    timeout: float | None = None

    # CORS
    allowed_origins: tuple[str, ...] = DEFAULT_ALLOWED_ORIGINS

    # Logging
    log_level: str = "INFO"


def _parse_origins(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated origin list, falling back to the default allow-list."""
    if not raw:
        return DEFAULT_ALLOWED_ORIGINS
    origins = tuple(origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip())
    return origins or DEFAULT_ALLOWED_ORIGINS


def _parse_float(name: str, raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"Configuration value is invalid: {name.upper()}") from e


def load_settings() -> RelaySettings:
    """
    Load settings from the environment, with Parameter Store as a fallback when
    RELAY_PARAMETER_PATH is set.

    Raises:
        ValueError: If a configured value cannot be used
    """
    base_path = os.getenv("RELAY_PARAMETER_PATH") or None

    # Load secrets (encrypted)
    secrets = get_parameters(list(API_KEY_NAMES), base_path, decrypt=True)
    api_key = next((secrets[name] for name in API_KEY_NAMES if secrets[name]), None)

    # Load relay parameters (not encrypted)
    params = get_parameters(
        [
            "model",
            "allowed_origins",
            "upstream_api_style",
            "upstream_base_url",
            "reasoning_effort",
            "temperature",
            "upstream_timeout",
            "log_level",
        ],
        base_path,
    )

    api_style = (params["upstream_api_style"] or DEFAULT_API_STYLE).strip().lower()
    if api_style not in API_STYLES:
        raise ValueError("Configuration value is invalid: UPSTREAM_API_STYLE")

    temperature = _parse_float("temperature", params["temperature"])

    return RelaySettings(
        api_key=api_key,
        model=params["model"] or DEFAULT_MODELS[api_style],
        api_style=api_style,
        base_url=params["upstream_base_url"] or DEFAULT_BASE_URL,
        reasoning_effort=params["reasoning_effort"] or DEFAULT_REASONING_EFFORT,
        temperature=DEFAULT_TEMPERATURE if temperature is None else temperature,
        timeout=_parse_float("upstream_timeout", params["upstream_timeout"]),
        allowed_origins=_parse_origins(params["allowed_origins"]),
        log_level=(params["log_level"] or "INFO").upper(),
    )


class Config:
    """Singleton configuration manager for the relay."""

    _instance = None
    _settings = None

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def get_settings(self) -> RelaySettings:
        """Get relay settings, loading them on first use."""
        if self._settings is None:
            self._settings = load_settings()
        return self._settings


# Create singleton instance
config = Config()


# Convenience functions
def get_settings() -> RelaySettings:
    """Get relay settings from the singleton config."""
    return config.get_settings()
