import json
import logging
import time
from collections import defaultdict

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from starlette.websockets import WebSocketState

from duelboard.config import get_settings
from duelboard.schemas.ws import (
    ErrorPayload,
    MessageType,
    WSClientMessage,
    WSCloseCode,
    WSServerMessage,
)
from duelboard.services.game.session import GameSession, get_game_session
from duelboard.services.websocket.handlers import HandlerContext, dispatch
from duelboard.services.websocket.handlers.base import state_message
from duelboard.services.websocket.manager import (
    Connection,
    ConnectionManager,
    get_connection_manager,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["websocket"])

RATE_LIMIT_WINDOW = 1.0  # seconds


class RateLimiter:
    """Simple sliding-window rate limiter per connection."""

    def __init__(self, max_tokens: int, window: float = RATE_LIMIT_WINDOW):
        self.max_tokens = max_tokens
        self.window = window
        self._tokens: dict[str, list[float]] = defaultdict(list)

    def is_allowed(self, connection_id: str) -> bool:
        """Check if a message is allowed under rate limiting."""
        now = time.time()
        cutoff = now - self.window

        self._tokens[connection_id] = [t for t in self._tokens[connection_id] if t > cutoff]

        if len(self._tokens[connection_id]) >= self.max_tokens:
            return False

        self._tokens[connection_id].append(now)
        return True

    def remove(self, connection_id: str) -> None:
        """Remove rate limit tracking for a connection."""
        self._tokens.pop(connection_id, None)


_rate_limiter = RateLimiter(get_settings().WS_MAX_MESSAGES_PER_SECOND)


def _error(error_code: str, message: str) -> WSServerMessage:
    return WSServerMessage(
        type=MessageType.ERROR,
        payload=ErrorPayload(error_code=error_code, message=message).model_dump(),
    )


async def _sync_states(manager: ConnectionManager, session: GameSession) -> None:
    """Push every connected seat its own read model."""
    for seat in manager.connected_seats():
        await manager.send_to_seat(seat, state_message(session, seat))


async def _parse(
    manager: ConnectionManager,
    connection: Connection,
    raw_text: str | None,
    raw_bytes: bytes | None,
) -> WSClientMessage | None:
    """Check size, rate and shape of one frame. Replies with ERROR and returns None on failure."""
    settings = get_settings()
    connection_id = connection.connection_id

    size = len(raw_text.encode("utf-8")) if raw_text else len(raw_bytes or b"")
    if size == 0:
        return None

    if size > settings.WS_MAX_MESSAGE_SIZE:
        logger.warning(
            "Dropping %d byte message from connection %s (max %d)",
            size,
            connection_id,
            settings.WS_MAX_MESSAGE_SIZE,
        )
        await manager.send_to_connection(
            connection_id,
            _error(
                "MESSAGE_TOO_LARGE",
                f"Message exceeds maximum size of {settings.WS_MAX_MESSAGE_SIZE} bytes",
            ),
        )
        return None

    if not _rate_limiter.is_allowed(connection_id):
        logger.warning("Rate limit exceeded for connection %s", connection_id)
        await manager.send_to_connection(
            connection_id, _error("RATE_LIMITED", "Too many messages, please slow down")
        )
        return None

    # Only text frames carry commands
    if not raw_text:
        return None

    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError:
        await manager.send_to_connection(
            connection_id, _error("INVALID_JSON", "Invalid JSON format")
        )
        return None

    try:
        return WSClientMessage.model_validate(data)
    except ValidationError as e:
        logger.info("Invalid message from connection %s: %s", connection_id, e)
        await manager.send_to_connection(
            connection_id, _error("INVALID_MESSAGE", "Invalid message format")
        )
        return None


@router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    seat: int = Query(..., ge=0, description="Index of the player to act as"),
):
    """WebSocket endpoint for playing one seat of the running game.

    Clients connect with: ws://host/api/v1/ws?seat=0

    On connection the server sends 'connected' followed by the seat's
    'game_state'. Every accepted command is answered with 'game_events',
    broadcast to the other seats, and followed by a fresh 'game_state' for
    each seat. Ignored commands are answered with 'game_rejected'.
    """
    session = get_game_session()

    if seat >= len(session.state.players):
        logger.warning("WS connection rejected: no seat %d", seat)
        await websocket.close(code=WSCloseCode.SEAT_NOT_FOUND)
        return

    await websocket.accept()

    manager = get_connection_manager()
    connection = await manager.connect(websocket, seat)
    await manager.send_to_connection(connection.connection_id, state_message(session, seat))

    try:
        while websocket.client_state == WebSocketState.CONNECTED:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                break

            message = await _parse(manager, connection, frame.get("text"), frame.get("bytes"))
            if message is None:
                continue

            result = await dispatch(
                HandlerContext(
                    connection_id=connection.connection_id,
                    seat=seat,
                    message=message,
                    manager=manager,
                    session=session,
                )
            )
            if result is None:
                continue

            if result.response:
                await manager.send_to_connection(connection.connection_id, result.response)
            if result.broadcast:
                await manager.broadcast(
                    result.broadcast, exclude_connection=connection.connection_id
                )
            if result.state_changed:
                await _sync_states(manager, session)

    except WebSocketDisconnect as e:
        logger.info("WS disconnected: connection %s, code %s", connection.connection_id, e.code)
    except Exception:
        logger.exception("WS error for connection %s", connection.connection_id)
    finally:
        _rate_limiter.remove(connection.connection_id)
        await manager.disconnect(connection.connection_id)
