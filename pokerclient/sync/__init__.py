"""State synchronization and action dispatch."""

from .backoff import with_backoff
from .dispatcher import ActionDispatcher, DispatchState, validate_action
from .poller import Poller
from .store import GameStateStore, StoreSnapshot

__all__ = [
    "ActionDispatcher",
    "DispatchState",
    "GameStateStore",
    "Poller",
    "StoreSnapshot",
    "validate_action",
    "with_backoff",
]
