"""WebSocket message handlers, looked up by message type."""

import logging
from collections.abc import Awaitable, Callable

from duelboard.schemas.ws import MessageType

from .base import HandlerContext, HandlerResult

logger = logging.getLogger(__name__)

HandlerFunc = Callable[[HandlerContext], Awaitable[HandlerResult]]

_handlers: dict[MessageType, HandlerFunc] = {}


def handler(message_type: MessageType) -> Callable[[HandlerFunc], HandlerFunc]:
    """Register the decorated coroutine as the handler for message_type.

    Usage:
        @handler(MessageType.GET_STATE)
        async def handle_get_state(ctx: HandlerContext) -> HandlerResult:
            ...
    """

    def register(func: HandlerFunc) -> HandlerFunc:
        if message_type in _handlers:
            logger.warning("Replacing handler for %s", message_type)
        _handlers[message_type] = func
        return func

    return register


async def dispatch(ctx: HandlerContext) -> HandlerResult | None:
    """Run the handler for the message's type, or return None if there is none."""
    func = _handlers.get(ctx.message.type)
    if func is None:
        logger.debug("No handler for %s (seat %d)", ctx.message.type, ctx.seat)
        return None
    return await func(ctx)


# Handler modules register themselves on import
from . import game  # noqa: E402, F401
from . import ping  # noqa: E402, F401

__all__ = [
    "HandlerContext",
    "HandlerResult",
    "dispatch",
    "handler",
]
