from duelboard.services.websocket.handlers import HandlerContext, HandlerResult, dispatch, handler
from duelboard.services.websocket.manager import ConnectionManager

__all__ = [
    "ConnectionManager",
    "HandlerContext",
    "HandlerResult",
    "dispatch",
    "handler",
]
