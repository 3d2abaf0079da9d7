"""Gateway request/response models."""

from typing import Optional
from pydantic import BaseModel, ConfigDict


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    game_status: str


class ActionRequest(BaseModel):
    """Body for BET and RAISE."""

    value: Optional[int] = None


class ActionResponse(BaseModel):
    """Acknowledgement of a submitted action."""

    status: str
    value: Optional[int] = None
    player: str = ""


class ConnectRequest(BaseModel):
    """Ask the local engine to join a peer."""

    addr: str


class ConnectResponse(BaseModel):
    """Join-peer acknowledgement. The shape is engine-defined."""

    model_config = ConfigDict(extra="allow")

    status: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error body the Gateway sends with non-2xx statuses."""

    error: str
