import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from fastapi import WebSocket

from duelboard.config import get_settings
from duelboard.schemas.ws import ConnectedPayload, MessageType, WSServerMessage

logger = logging.getLogger(__name__)

GOING_AWAY = 1001


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Connection:
    """One open socket playing one seat."""

    connection_id: str
    websocket: WebSocket
    seat: int
    connected_at: datetime = field(default_factory=_now)
    last_heartbeat: datetime = field(default_factory=_now)

    def idle_seconds(self, now: datetime) -> float:
        return (now - self.last_heartbeat).total_seconds()


class ConnectionManager:
    """Tracks the sockets attached to the running game, grouped by seat.

    A seat may be watched from several sockets at once (two tabs, say); all of
    them receive that seat's messages. Sockets that stop sending pings are
    swept by a background task started from the app lifespan.
    """

    def __init__(self):
        self._settings = get_settings()
        self._connections: dict[str, Connection] = {}
        self._by_seat: dict[int, set[str]] = {}
        self._sweep_task: asyncio.Task | None = None

    async def connect(self, websocket: WebSocket, seat: int) -> Connection:
        """Register an accepted socket for a seat and greet it with CONNECTED."""
        connection = Connection(
            connection_id=str(uuid.uuid4()),
            websocket=websocket,
            seat=seat,
        )
        self._connections[connection.connection_id] = connection
        self._by_seat.setdefault(seat, set()).add(connection.connection_id)
        logger.info("Connection %s joined seat %d", connection.connection_id, seat)

        greeting = ConnectedPayload(connection_id=connection.connection_id, seat=seat)
        await self.send_to_connection(
            connection.connection_id,
            WSServerMessage(type=MessageType.CONNECTED, payload=greeting.model_dump()),
        )
        return connection

    async def disconnect(self, connection_id: str) -> None:
        """Forget a connection. Unknown ids are ignored."""
        connection = self._connections.pop(connection_id, None)
        if connection is None:
            return

        seat_ids = self._by_seat.get(connection.seat)
        if seat_ids is not None:
            seat_ids.discard(connection_id)
            if not seat_ids:
                del self._by_seat[connection.seat]

        logger.info("Connection %s left seat %d", connection_id, connection.seat)

    async def heartbeat(self, connection_id: str) -> None:
        connection = self._connections.get(connection_id)
        if connection is not None:
            connection.last_heartbeat = _now()

    async def sweep_stale(self) -> int:
        """Close every connection whose last heartbeat is older than the timeout.

        Returns:
            Number of connections closed.
        """
        now = _now()
        timeout = self._settings.WS_CONNECTION_TIMEOUT
        stale = [
            conn
            for conn in self._connections.values()
            if conn.idle_seconds(now) > timeout
        ]
        for conn in stale:
            logger.warning(
                "Closing stale connection %s (seat %d, idle %.1fs)",
                conn.connection_id,
                conn.seat,
                conn.idle_seconds(now),
            )
            await self._close(conn.connection_id)
        return len(stale)

    async def start_cleanup_task(self) -> None:
        """Start the periodic stale-connection sweep."""
        if self._sweep_task is not None:
            logger.warning("Cleanup task already running")
            return

        interval = self._settings.WS_HEARTBEAT_INTERVAL

        async def sweep_loop():
            while True:
                await asyncio.sleep(interval)
                try:
                    await self.sweep_stale()
                except Exception:
                    logger.exception("Stale connection sweep failed")

        self._sweep_task = asyncio.create_task(sweep_loop())
        logger.info("Cleanup task started, interval %ds", interval)

    async def stop_cleanup_task(self) -> None:
        if self._sweep_task is None:
            return
        self._sweep_task.cancel()
        try:
            await self._sweep_task
        except asyncio.CancelledError:
            pass
        self._sweep_task = None
        logger.info("Cleanup task stopped")

    async def close_all_connections(self) -> None:
        logger.info("Closing all %d connections", len(self._connections))
        for connection_id in list(self._connections):
            await self._close(connection_id)

    async def _close(self, connection_id: str) -> None:
        connection = self._connections.get(connection_id)
        if connection is not None:
            try:
                await connection.websocket.close(code=GOING_AWAY)
            except Exception as e:
                logger.debug("Error closing websocket %s: %s", connection_id, e)
        await self.disconnect(connection_id)

    async def send_to_connection(self, connection_id: str, message: WSServerMessage) -> bool:
        """Send one message. A socket that fails to send is dropped.

        Returns:
            True if the message went out.
        """
        connection = self._connections.get(connection_id)
        if connection is None:
            return False

        try:
            await connection.websocket.send_json(message.model_dump(mode="json", exclude_none=True))
        except Exception as e:
            logger.warning("Failed to send to connection %s: %s", connection_id, e)
            await self.disconnect(connection_id)
            return False
        return True

    async def send_to_seat(self, seat: int, message: WSServerMessage) -> int:
        """Send to every socket playing a seat. Returns how many received it."""
        delivered = 0
        for connection_id in list(self._by_seat.get(seat, ())):
            delivered += await self.send_to_connection(connection_id, message)
        return delivered

    async def broadcast(
        self, message: WSServerMessage, exclude_connection: str | None = None
    ) -> int:
        """Send to every open socket except exclude_connection."""
        delivered = 0
        for connection_id in list(self._connections):
            if connection_id != exclude_connection:
                delivered += await self.send_to_connection(connection_id, message)
        return delivered

    def connected_seats(self) -> list[int]:
        """Seats with at least one live connection, in seat order."""
        return sorted(self._by_seat)

    def connection_count(self) -> int:
        return len(self._connections)


# Global manager instance (initialized in lifespan)
_connection_manager: ConnectionManager | None = None


def get_connection_manager() -> ConnectionManager:
    """Get the global ConnectionManager instance."""
    global _connection_manager
    if _connection_manager is None:
        _connection_manager = ConnectionManager()
    return _connection_manager


def set_connection_manager(manager: ConnectionManager | None) -> None:
    """Set the global ConnectionManager instance."""
    global _connection_manager
    _connection_manager = manager
