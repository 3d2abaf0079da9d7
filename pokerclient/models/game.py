"""Game state models, as served by the Gateway."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class GameStatus(str, Enum):
    """Table lifecycle status."""

    WAITING = "WAITING"
    PLAYER_READY = "PLAYER-READY"
    DEALING = "DEALING"
    PREFLOP = "PREFLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"
    SHOWDOWN = "SHOWDOWN"
    HAND_COMPLETE = "HAND-COMPLETE"


class ActionType(str, Enum):
    """Player action kinds the Gateway accepts."""

    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    BET = "BET"
    RAISE = "RAISE"
    READY = "READY"

    @property
    def requires_value(self) -> bool:
        """BET and RAISE carry an amount."""
        return self in (ActionType.BET, ActionType.RAISE)

    @classmethod
    def parse(cls, kind: "str | ActionType") -> "ActionType":
        """Parse an action name like 'call' or 'RAISE'."""
        if isinstance(kind, cls):
            return kind
        try:
            return cls(str(kind).strip().upper())
        except ValueError:
            raise ValueError(f"Invalid action: {kind}") from None


class Card(BaseModel):
    """Playing card. The label is precomputed by the Gateway."""

    model_config = ConfigDict(frozen=True)

    suit: str
    value: int
    display: str

    def __str__(self) -> str:
        return self.display


class TableState(BaseModel):
    """Viewer-scoped snapshot of the shared table."""

    status: GameStatus
    my_hand: list[Card] = Field(default_factory=list)
    community_cards: list[Card] = Field(default_factory=list, max_length=5)
    pot: int = 0
    highest_bet: int = 0
    min_raise: int = 0
    valid_actions: list[ActionType] = Field(default_factory=list)
    is_my_turn: bool = False
    my_stack: int = 0
    current_turn_id: int = 0
    my_player_id: int = 0
    dealer_id: int = 0
    small_blind: int = 0
    big_blind: int = 0
    time_bank: Optional[int] = None

    # The engine serializes empty hands and boards as null
    @field_validator("my_hand", "community_cards", "valid_actions", mode="before")
    @classmethod
    def _null_as_empty(cls, v):
        return [] if v is None else v

    def is_consistent(self) -> bool:
        """Check that a turn flagged as ours is actually ours."""
        return not self.is_my_turn or self.my_player_id == self.current_turn_id

    def can(self, action: ActionType) -> bool:
        """Check whether the viewer may take an action right now."""
        return action in self.valid_actions

    @property
    def facing_bet(self) -> bool:
        return self.highest_bet > 0


class PlayerState(BaseModel):
    """Public state of one seated player."""

    player_id: int
    listen_addr: str
    stack: int
    current_bet: int = 0
    is_active: bool = True
    is_folded: bool = False
    is_all_in: bool = False
    is_dealer: bool = False
    is_small_blind: bool = False
    is_big_blind: bool = False
    is_current_turn: bool = False


class PlayersSnapshot(BaseModel):
    """Roster of every player at the table."""

    players: list[PlayerState] = Field(default_factory=list)
    total_players: int = 0
    active_players: int = 0

    @field_validator("players", mode="before")
    @classmethod
    def _null_as_empty(cls, v):
        return [] if v is None else v

    def is_consistent(self) -> bool:
        """Check the redundant counts against the roster."""
        active = sum(1 for p in self.players if p.is_active)
        return self.total_players == len(self.players) and self.active_players == active

    def get(self, player_id: int) -> Optional[PlayerState]:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    @property
    def current_turn(self) -> Optional[PlayerState]:
        return next((p for p in self.players if p.is_current_turn), None)
