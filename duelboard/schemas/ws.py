from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator


class MessageType(str, Enum):
    """WebSocket message types."""

    # Core
    PING = "ping"
    PONG = "pong"
    CONNECTED = "connected"
    ERROR = "error"

    # Game
    GAME_COMMAND = "game_command"
    GET_STATE = "get_state"
    GAME_EVENTS = "game_events"
    GAME_STATE = "game_state"
    GAME_REJECTED = "game_rejected"


class WSCloseCode:
    """WebSocket close codes (RFC 6455 + custom)."""

    # Standard RFC 6455 codes
    NORMAL = 1000
    GOING_AWAY = 1001
    POLICY_VIOLATION = 1008
    MESSAGE_TOO_BIG = 1009
    INTERNAL_ERROR = 1011

    # Custom application codes (4000-4999)
    SEAT_NOT_FOUND = 4003


class WSClientMessage(BaseModel):
    """Message sent from client to server."""

    type: MessageType
    request_id: str | None = None
    payload: dict[str, Any] | None = None


class WSServerMessage(BaseModel):
    """Message sent from server to client."""

    type: MessageType
    request_id: str | None = None
    payload: dict[str, Any] | None = None


# --- Payload schemas ---


class ConnectedPayload(BaseModel):
    """Payload for the 'connected' message."""

    connection_id: str
    seat: int


class PongPayload(BaseModel):
    """Payload for the 'pong' message."""

    server_time: datetime = Field(default_factory=lambda: datetime.now())


class ErrorPayload(BaseModel):
    """Payload for transport-level ERROR messages."""

    error_code: str
    message: str


# --- Game payload schemas ---


class GameCommandPayload(BaseModel):
    """Payload for GAME_COMMAND messages from client.

    Carries either a structured command or a raw key press, never both.
    """

    command: dict[str, Any] | None = Field(
        None, description="Command dict with a 'command_type' key"
    )
    key: str | None = Field(None, min_length=1, description="Raw key name, e.g. 'k' or 'ArrowUp'")

    @model_validator(mode="after")
    def exactly_one_input(self) -> GameCommandPayload:
        if (self.command is None) == (self.key is None):
            raise ValueError("Provide exactly one of 'command' or 'key'")
        return self


class GameEventsPayload(BaseModel):
    """Payload for GAME_EVENTS messages to clients.

    Events are broadcast to every seat for incremental view updates.
    """

    events: list[dict[str, Any]] = Field(..., description="List of game events (serialized)")


class GameStatePayload(BaseModel):
    """Payload for GAME_STATE messages to clients.

    Contains the seat's read model for reconciliation or initial sync.
    """

    state: dict[str, Any] = Field(..., description="Read model (serialized)")


class GameRejectedPayload(BaseModel):
    """Payload for GAME_REJECTED messages: the command was ignored."""

    error_code: str
    message: str
