"""Base types and helpers for WebSocket message handlers."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import BaseModel, ValidationError

from duelboard.schemas.ws import (
    ErrorPayload,
    GameStatePayload,
    MessageType,
    WSClientMessage,
    WSServerMessage,
)

if TYPE_CHECKING:
    from duelboard.services.game.session import GameSession
    from duelboard.services.websocket.manager import ConnectionManager


@dataclass
class HandlerContext:
    """Context passed to each message handler."""

    connection_id: str
    seat: int
    message: WSClientMessage
    manager: "ConnectionManager"
    session: "GameSession"


@dataclass
class HandlerResult:
    """Result returned by message handlers.

    state_changed asks the endpoint to push a fresh game_state to every seat.
    """

    success: bool
    response: WSServerMessage | None = None
    broadcast: WSServerMessage | None = None
    state_changed: bool = False


def validate_payload[T: BaseModel](
    payload: dict | None,
    schema: type[T],
    request_id: str | None,
    error_type: MessageType,
) -> tuple[T | None, HandlerResult | None]:
    """Validate payload against a Pydantic schema.

    Returns:
        Tuple of (validated_payload, error_result). One will be None.
    """
    try:
        validated = schema.model_validate(payload or {})
        return validated, None
    except ValidationError as e:
        return None, HandlerResult(
            success=False,
            response=WSServerMessage(
                type=error_type,
                request_id=request_id,
                payload=ErrorPayload(
                    error_code="VALIDATION_ERROR",
                    message=str(e),
                ).model_dump(),
            ),
        )


def error_response(
    error_code: str,
    message: str,
    error_type: MessageType,
    request_id: str | None = None,
) -> HandlerResult:
    """Build an error HandlerResult."""
    return HandlerResult(
        success=False,
        response=WSServerMessage(
            type=error_type,
            request_id=request_id,
            payload=ErrorPayload(
                error_code=error_code,
                message=message,
            ).model_dump(),
        ),
    )


def state_message(
    session: "GameSession", seat: int, request_id: str | None = None
) -> WSServerMessage:
    """Build a GAME_STATE message holding the seat's read model."""
    return WSServerMessage(
        type=MessageType.GAME_STATE,
        request_id=request_id,
        payload=GameStatePayload(
            state=session.snapshot(seat).model_dump(mode="json")
        ).model_dump(),
    )
