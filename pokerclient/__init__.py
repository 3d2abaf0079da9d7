"""Client-side state synchronization and action dispatch for a remote poker Gateway."""

from .gateway import GatewayClient
from .sync import ActionDispatcher, GameStateStore, Poller, StoreSnapshot

__version__ = "1.0.0"

__all__ = [
    "GatewayClient",
    "GameStateStore",
    "ActionDispatcher",
    "Poller",
    "StoreSnapshot",
]
