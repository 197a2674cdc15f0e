"""Handler for PING messages."""

import logging

from duelboard.schemas.ws import MessageType, PongPayload, WSServerMessage

from . import handler
from .base import HandlerContext, HandlerResult

logger = logging.getLogger(__name__)


@handler(MessageType.PING)
async def handle_ping(ctx: HandlerContext) -> HandlerResult:
    """Refresh the connection's heartbeat and answer with PONG."""
    await ctx.manager.heartbeat(ctx.connection_id)

    logger.debug("Ping/pong for connection %s (seat %d)", ctx.connection_id, ctx.seat)

    return HandlerResult(
        success=True,
        response=WSServerMessage(
            type=MessageType.PONG,
            request_id=ctx.message.request_id,
            payload=PongPayload().model_dump(),
        ),
    )
