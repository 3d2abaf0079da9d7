"""Validates and submits player actions."""

import inspect
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from ..errors import ActionValidationError, PokerClientError
from ..gateway import GatewayClient
from ..models.api import ActionResponse
from ..models.game import ActionType

logger = logging.getLogger(__name__)

OnSuccess = Callable[[], Union[None, Awaitable[None]]]


class DispatchState(str, Enum):
    """Dispatcher state."""

    IDLE = "idle"
    SUBMITTING = "submitting"


def validate_action(kind: Union[str, ActionType], value: Optional[int] = None) -> ActionType:
    """Check an action locally before anything is sent."""
    try:
        action = ActionType.parse(kind)
    except ValueError as e:
        raise ActionValidationError(str(e), action=str(kind)) from None

    if not action.requires_value:
        return action
    if value is None:
        raise ActionValidationError(
            f"Value is required for {action.value} action", action=action.value
        )
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise ActionValidationError(
            f"Value for {action.value} action must be a whole number, got {value!r}",
            action=action.value,
        )
    return action


class ActionDispatcher:
    """Submits one player action at a time to the Gateway.

    Nothing in the table or player state is changed optimistically. On
    success the ``on_success`` callback runs, usually the store's refresh,
    so the authoritative post-action state shows up without waiting for
    the next poll.
    """

    def __init__(self, gateway: GatewayClient, on_success: Optional[OnSuccess] = None):
        self.gateway = gateway
        self.on_success = on_success
        self.busy = False
        self.error: Optional[str] = None
        self.last_action: Optional[ActionType] = None

    @property
    def state(self) -> DispatchState:
        return DispatchState.SUBMITTING if self.busy else DispatchState.IDLE

    async def execute_action(
        self,
        kind: Union[str, ActionType],
        value: Optional[int] = None,
    ) -> Optional[ActionResponse]:
        """
        Validate and submit an action.

        Args:
            kind: Action name or ActionType
            value: Amount, required for BET and RAISE

        Returns:
            The Gateway's acknowledgement, or None if the action failed
            (the reason is left in ``error``) or another one is in flight
        """
        if self.busy:
            logger.warning(f"[ACTION] Ignoring {kind}, an action is already in flight")
            return None

        self.busy = True
        self.error = None
        try:
            action = validate_action(kind, value)
            response = await self.gateway.submit(action, value)
            logger.info(f"[ACTION] Action response: {response.model_dump(exclude_none=True)}")
            self.last_action = action
            await self._notify_success()
            return response
        except PokerClientError as e:
            self.error = e.message or "Action failed"
            logger.error(f"[ACTION] Action error: {self.error}")
            return None
        finally:
            self.busy = False

    async def _notify_success(self) -> None:
        if self.on_success is None:
            return
        result = self.on_success()
        if inspect.isawaitable(result):
            await result
