"""Gateway HTTP client."""

from .client import GatewayClient, ACTION_PATHS

__all__ = ["GatewayClient", "ACTION_PATHS"]
