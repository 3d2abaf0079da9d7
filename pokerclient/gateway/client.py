"""Async HTTP client for the Gateway API."""

import logging
from typing import Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..config import settings
from ..errors import (
    GatewayProtocolError,
    GatewayRejectedError,
    GatewayTransportError,
)
from ..models.api import (
    ActionRequest,
    ActionResponse,
    ConnectRequest,
    ConnectResponse,
    ErrorResponse,
    HealthResponse,
)
from ..models.game import ActionType, PlayersSnapshot, TableState

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# One Gateway endpoint per action kind
ACTION_PATHS = {
    ActionType.READY: "/api/ready",
    ActionType.FOLD: "/api/fold",
    ActionType.CHECK: "/api/check",
    ActionType.CALL: "/api/call",
    ActionType.BET: "/api/bet",
    ActionType.RAISE: "/api/raise",
}


def error_message(response: httpx.Response) -> str:
    """Extract the Gateway's error text from a non-2xx response."""
    try:
        body = ErrorResponse.model_validate(response.json())
    except ValueError:
        return f"Connection failed: {response.status_code}"
    return body.error or f"Connection failed: {response.status_code}"


class GatewayClient:
    """Client for one Gateway instance.

    Each instance is independent: construct one per session and hand it to
    the store and the dispatcher.
    """

    def __init__(
        self,
        base_url: str = settings.base_url,
        timeout: float = settings.request_timeout,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    @base_url.setter
    def base_url(self, value: str) -> None:
        self._base_url = value.rstrip("/")

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
            headers={"Content-Type": "application/json"},
        )

    async def _request(
        self,
        method: str,
        path: str,
        model: Type[ModelT],
        body: Optional[BaseModel] = None,
    ) -> ModelT:
        """Send one request and parse the response into ``model``."""
        url = f"{self.base_url}{path}"
        kwargs = {}
        if body is not None:
            kwargs["json"] = body.model_dump(exclude_none=True)

        try:
            async with self._client() as client:
                response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"[GATEWAY] API Error: {method} {path} timed out")
            raise GatewayTransportError(f"Request timed out: {method} {path}") from e
        except httpx.HTTPError as e:
            logger.error(f"[GATEWAY] API Error: {method} {path}: {e}")
            raise GatewayTransportError(f"Network error: {e}") from e

        if not response.is_success:
            message = error_message(response)
            logger.error(f"[GATEWAY] API Error: {method} {path} -> {response.status_code}: {message}")
            raise GatewayRejectedError(message, response.status_code)

        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"[GATEWAY] API Error: malformed {path} response: {e}")
            raise GatewayProtocolError(f"Malformed response from {path}") from e

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def health(self) -> HealthResponse:
        return await self._request("GET", "/api/health", HealthResponse)

    async def get_table_state(self) -> TableState:
        return await self._request("GET", "/api/table", TableState)

    async def get_players(self) -> PlayersSnapshot:
        return await self._request("GET", "/api/players", PlayersSnapshot)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def ready(self) -> ActionResponse:
        return await self._request("POST", ACTION_PATHS[ActionType.READY], ActionResponse)

    async def fold(self) -> ActionResponse:
        return await self._request("POST", ACTION_PATHS[ActionType.FOLD], ActionResponse)

    async def check(self) -> ActionResponse:
        return await self._request("POST", ACTION_PATHS[ActionType.CHECK], ActionResponse)

    async def call(self) -> ActionResponse:
        return await self._request("POST", ACTION_PATHS[ActionType.CALL], ActionResponse)

    async def bet(self, value: int) -> ActionResponse:
        return await self._request(
            "POST", ACTION_PATHS[ActionType.BET], ActionResponse, ActionRequest(value=value)
        )

    async def raise_(self, value: int) -> ActionResponse:
        return await self._request(
            "POST", ACTION_PATHS[ActionType.RAISE], ActionResponse, ActionRequest(value=value)
        )

    async def submit(self, action: ActionType, value: Optional[int] = None) -> ActionResponse:
        """Submit an action by kind. BET and RAISE send ``value``."""
        if action is ActionType.BET:
            return await self.bet(value)
        if action is ActionType.RAISE:
            return await self.raise_(value)
        handlers = {
            ActionType.READY: self.ready,
            ActionType.FOLD: self.fold,
            ActionType.CHECK: self.check,
            ActionType.CALL: self.call,
        }
        return await handlers[action]()

    async def connect_peer(self, addr: str) -> ConnectResponse:
        """Ask the engine behind the Gateway to join the peer at ``addr``."""
        return await self._request(
            "POST", "/api/connect", ConnectResponse, ConnectRequest(addr=addr)
        )
