"""Shared fixtures: Gateway payloads, a mocked GatewayClient, and an
in-process fake Gateway built on FastAPI.

The repo root goes on sys.path so ``pokerclient`` imports without an
editable install.
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import copy
from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from pokerclient.gateway import GatewayClient
from pokerclient.models import (
    ActionResponse,
    PlayersSnapshot,
    TableState,
)


GATEWAY_URL = "http://gateway.test"
MY_ADDR = "localhost:3001"
OPPONENT_ADDR = "localhost:3000"


# =============================================================================
# Payload Fixtures
# =============================================================================


def make_table_payload() -> dict[str, Any]:
    """Preflop table facing a raise to 40, viewer is player 1 with 20 in."""
    return {
        "status": "PREFLOP",
        "my_hand": [
            {"suit": "SPADES", "value": 14, "display": "A♠"},
            {"suit": "HEARTS", "value": 13, "display": "K♥"},
        ],
        "community_cards": [],
        "pot": 60,
        "highest_bet": 40,
        "min_raise": 80,
        "valid_actions": ["FOLD", "CALL", "RAISE"],
        "is_my_turn": True,
        "my_stack": 980,
        "current_turn_id": 1,
        "my_player_id": 1,
        "dealer_id": 0,
        "small_blind": 10,
        "big_blind": 20,
    }


def make_players_payload() -> dict[str, Any]:
    """Two seated players matching make_table_payload()."""
    return {
        "players": [
            {
                "player_id": 0,
                "listen_addr": OPPONENT_ADDR,
                "stack": 960,
                "current_bet": 40,
                "is_active": True,
                "is_folded": False,
                "is_all_in": False,
                "is_dealer": True,
                "is_small_blind": True,
                "is_big_blind": False,
                "is_current_turn": False,
            },
            {
                "player_id": 1,
                "listen_addr": MY_ADDR,
                "stack": 980,
                "current_bet": 20,
                "is_active": True,
                "is_folded": False,
                "is_all_in": False,
                "is_dealer": False,
                "is_small_blind": False,
                "is_big_blind": True,
                "is_current_turn": True,
            },
        ],
        "total_players": 2,
        "active_players": 2,
    }


@pytest.fixture
def table_payload() -> dict[str, Any]:
    return make_table_payload()


@pytest.fixture
def players_payload() -> dict[str, Any]:
    return make_players_payload()


@pytest.fixture
def table_state() -> TableState:
    """Sample preflop table state."""
    return TableState.model_validate(make_table_payload())


@pytest.fixture
def players_snapshot() -> PlayersSnapshot:
    """Sample two-player roster."""
    return PlayersSnapshot.model_validate(make_players_payload())


# =============================================================================
# Mock Gateway Fixture
# =============================================================================


@pytest.fixture
def mock_gateway(table_state, players_snapshot):
    """Gateway double whose reads succeed and whose actions are acknowledged."""
    gateway = MagicMock(spec=GatewayClient)
    gateway.get_table_state = AsyncMock(return_value=table_state)
    gateway.get_players = AsyncMock(return_value=players_snapshot)
    gateway.submit = AsyncMock(
        return_value=ActionResponse(status="CALL", player=MY_ADDR)
    )
    return gateway


# =============================================================================
# Fake Gateway Server
# =============================================================================


class FakeEngine:
    """In-memory stand-in for the engine behind the Gateway.

    Only enough rules to move the viewer's turn along; the real engine is
    the authority on everything else.
    """

    def __init__(self):
        self.table = make_table_payload()
        self.players = make_players_payload()
        self.requests: list[tuple[str, str, Optional[dict]]] = []
        self._failures: dict[str, tuple[int, Optional[dict]]] = {}

    def fail(self, path: str, status_code: int = 500, body: Optional[dict] = None) -> None:
        """Make ``path`` answer with ``status_code``. ``body=None`` sends plain text."""
        self._failures[path] = (status_code, body)

    def recover(self, path: Optional[str] = None) -> None:
        if path is None:
            self._failures.clear()
        else:
            self._failures.pop(path, None)

    def failure_response(self, path: str):
        if path not in self._failures:
            return None
        status_code, body = self._failures[path]
        if body is None:
            return PlainTextResponse("upstream unavailable", status_code=status_code)
        return JSONResponse(body, status_code=status_code)

    def paths(self, method: Optional[str] = None) -> list[str]:
        return [p for m, p, _ in self.requests if method is None or m == method]

    def _me(self) -> dict:
        my_id = self.table["my_player_id"]
        return next(p for p in self.players["players"] if p["player_id"] == my_id)

    def _commit(self, me: dict, amount: int) -> None:
        me["stack"] -= amount
        me["current_bet"] += amount
        self.table["pot"] += amount
        self.table["my_stack"] = me["stack"]

    def _pass_turn(self) -> None:
        my_id = self.table["my_player_id"]
        others = [p for p in self.players["players"] if p["player_id"] != my_id]
        for p in self.players["players"]:
            p["is_current_turn"] = p["player_id"] == others[0]["player_id"]
        self.table["current_turn_id"] = others[0]["player_id"]
        self.table["is_my_turn"] = False
        self.table["valid_actions"] = []
        self.players["active_players"] = sum(
            1 for p in self.players["players"] if p["is_active"]
        )

    def apply_action(self, action: str, value: Optional[int]) -> dict:
        if action == "READY":
            self.table["status"] = "PLAYER-READY"
            return {"status": "READY", "player": MY_ADDR}

        if action not in self.table["valid_actions"]:
            raise ValueError(f"illegal action: you cannot {action} right now")

        me = self._me()
        if action == "CALL":
            self._commit(me, self.table["highest_bet"] - me["current_bet"])
        elif action in ("BET", "RAISE"):
            self._commit(me, value - me["current_bet"])
            self.table["highest_bet"] = value
        elif action == "FOLD":
            me["is_folded"] = True
            me["is_active"] = False
        self._pass_turn()

        ack = {"status": action, "player": MY_ADDR}
        if action in ("BET", "RAISE"):
            ack["value"] = value
        return ack


def build_gateway_app(engine: FakeEngine) -> FastAPI:
    """Serve ``engine`` with the Gateway's HTTP contract."""
    app = FastAPI()

    @app.get("/api/health")
    async def health():
        engine.requests.append(("GET", "/api/health", None))
        return engine.failure_response("/api/health") or {
            "status": "ok",
            "game_status": engine.table["status"],
        }

    @app.get("/api/table")
    async def table():
        engine.requests.append(("GET", "/api/table", None))
        return engine.failure_response("/api/table") or copy.deepcopy(engine.table)

    @app.get("/api/players")
    async def players():
        engine.requests.append(("GET", "/api/players", None))
        return engine.failure_response("/api/players") or copy.deepcopy(engine.players)

    @app.post("/api/connect")
    async def connect(request: Request):
        body = await request.json()
        engine.requests.append(("POST", "/api/connect", body))
        return engine.failure_response("/api/connect") or {
            "status": "connecting",
            "addr": body["addr"],
        }

    @app.post("/api/{action}")
    async def take_action(action: str, request: Request):
        raw = await request.body()
        body = await request.json() if raw else None
        path = f"/api/{action}"
        engine.requests.append(("POST", path, body))

        failure = engine.failure_response(path)
        if failure is not None:
            return failure
        try:
            return engine.apply_action(action.upper(), (body or {}).get("value"))
        except ValueError as e:
            return JSONResponse({"error": str(e)}, status_code=400)

    return app


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def gateway(fake_engine) -> GatewayClient:
    """Real GatewayClient talking to the fake engine in-process."""
    transport = httpx.ASGITransport(app=build_gateway_app(fake_engine))
    return GatewayClient(GATEWAY_URL, timeout=10.0, transport=transport)
