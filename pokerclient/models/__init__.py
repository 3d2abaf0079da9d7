"""Pydantic models for Gateway payloads."""

from .game import (
    GameStatus,
    ActionType,
    Card,
    TableState,
    PlayerState,
    PlayersSnapshot,
)
from .api import (
    HealthResponse,
    ActionRequest,
    ActionResponse,
    ConnectRequest,
    ConnectResponse,
    ErrorResponse,
)

__all__ = [
    # Game models
    "GameStatus",
    "ActionType",
    "Card",
    "TableState",
    "PlayerState",
    "PlayersSnapshot",
    # API
    "HealthResponse",
    "ActionRequest",
    "ActionResponse",
    "ConnectRequest",
    "ConnectResponse",
    "ErrorResponse",
]
