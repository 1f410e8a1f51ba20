"""Chat Relay: a CORS-enabled relay from browser chat clients to a model provider API."""

__version__ = "0.1.0"
