"""Observable store of the last known Gateway state."""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Optional, TypeVar

from ..config import settings
from ..errors import PokerClientError
from ..gateway import GatewayClient
from ..models.game import PlayersSnapshot, TableState
from .backoff import with_backoff
from .poller import Poller

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[["StoreSnapshot"], None]


@dataclass(frozen=True)
class StoreSnapshot:
    """Read-only view of the store for consumers."""

    table: Optional[TableState] = None
    players: Optional[PlayersSnapshot] = None
    loading: bool = True
    error: Optional[str] = None
    connected: bool = False
    version: int = 0  # ticket of the last applied reconcile


class GameStateStore:
    """Holds table and player state, refreshed by reconciles.

    Every reconcile takes a ticket from a monotonically increasing counter.
    On completion the result is applied only if that ticket is still the
    most recently issued one, so a slow response can never overwrite the
    result of a request issued after it.

    A failed reconcile keeps the previous table and players and marks the
    store disconnected. Automatic polling runs only while connected; after a
    failure it resumes once a manual refresh() succeeds.
    """

    def __init__(
        self,
        gateway: GatewayClient,
        poll_interval_ms: int = settings.poll_interval_ms,
        read_retries: int = settings.read_retries,
        backoff_base: float = settings.backoff_base,
        backoff_max: float = settings.backoff_max,
    ):
        self.gateway = gateway
        self.read_retries = read_retries
        self.backoff_base = backoff_base
        self.backoff_max = backoff_max
        self.poller = Poller(self._poll_tick, poll_interval_ms)

        self._state = StoreSnapshot()
        self._issued = 0
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def current_state(self) -> StoreSnapshot:
        return self._state

    @property
    def table(self) -> Optional[TableState]:
        return self._state.table

    @property
    def players(self) -> Optional[PlayersSnapshot]:
        return self._state.players

    @property
    def connected(self) -> bool:
        return self._state.connected

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    @property
    def poll_interval_ms(self) -> int:
        return self.poller.interval_ms

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with each new snapshot.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Initial fetch. Polling starts on its own once connected."""
        await self.reconcile()

    async def refresh(self) -> None:
        """Reconcile immediately, independent of the poll timer."""
        self._set(replace(self._state, loading=True))
        await self.reconcile()

    def set_poll_interval(self, interval_ms: int) -> None:
        """Change the poll cadence. ``interval_ms <= 0`` disables polling."""
        self.poller.stop()
        self.poller.interval_ms = interval_ms
        self._sync_poller()

    async def close(self) -> None:
        await self.poller.cancel()

    # ------------------------------------------------------------------
    # Reconcile
    # ------------------------------------------------------------------

    async def reconcile(self) -> bool:
        """
        Fetch table and players concurrently and apply the result.

        Returns:
            True if this reconcile was applied as a success
        """
        self._issued += 1
        ticket = self._issued

        results = await asyncio.gather(
            self._read(self.gateway.get_table_state),
            self._read(self.gateway.get_players),
            return_exceptions=True,
        )

        failure = None
        for result in results:
            if isinstance(result, PokerClientError):
                failure = failure or result
            elif isinstance(result, BaseException):
                raise result

        if ticket != self._issued:
            logger.debug(f"[SYNC] Discarding reconcile #{ticket}, #{self._issued} is newer")
            return False

        if failure is not None:
            logger.warning(f"[SYNC] Failed to fetch game state: {failure.message}")
            self._set(
                replace(self._state, loading=False, error=failure.message, connected=False)
            )
            return False

        table, players = results
        if not table.is_consistent():
            logger.warning(
                f"[SYNC] Table says it is our turn but current_turn_id={table.current_turn_id} "
                f"is not my_player_id={table.my_player_id}"
            )
        if not players.is_consistent():
            logger.warning(
                f"[SYNC] Player counts disagree with roster: total={players.total_players} "
                f"active={players.active_players} listed={len(players.players)}"
            )

        self._set(
            StoreSnapshot(
                table=table,
                players=players,
                loading=False,
                error=None,
                connected=True,
                version=ticket,
            )
        )
        return True

    async def _read(self, operation: Callable[[], Awaitable[T]]) -> T:
        return await with_backoff(
            operation, self.read_retries, self.backoff_base, self.backoff_max
        )

    async def _poll_tick(self) -> None:
        await self.reconcile()

    def _set(self, state: StoreSnapshot) -> None:
        was_connected = self._state.connected
        self._state = state
        if state.connected != was_connected:
            logger.info(f"[SYNC] {'Connected' if state.connected else 'Disconnected'}")
            self._sync_poller()

        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("[SYNC] Store listener failed")

    def _sync_poller(self) -> None:
        should_run = self._state.connected and self.poller.interval_ms > 0
        if should_run and not self.poller.is_running:
            self.poller.start()
        elif not should_run and self.poller.is_running:
            self.poller.stop()
