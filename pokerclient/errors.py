"""Exception hierarchy for the sync layer."""

from typing import Optional


class PokerClientError(Exception):
    """Base class for every expected failure in the client."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class GatewayError(PokerClientError):
    """Talking to the Gateway failed."""


class GatewayTransportError(GatewayError):
    """No response arrived (timeout, refused connection, reset)."""


class GatewayRejectedError(GatewayError):
    """The Gateway answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class GatewayProtocolError(GatewayError):
    """A 2xx response whose body could not be understood."""


class ActionValidationError(PokerClientError):
    """An action was rejected locally before any request was made."""

    def __init__(self, message: str, action: Optional[str] = None):
        super().__init__(message)
        self.action = action
