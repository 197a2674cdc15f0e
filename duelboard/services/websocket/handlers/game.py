"""Handlers for GAME_COMMAND and GET_STATE messages."""

import logging

from pydantic import ValidationError

from duelboard.schemas.ws import (
    GameCommandPayload,
    GameEventsPayload,
    GameRejectedPayload,
    MessageType,
    WSServerMessage,
)
from duelboard.services.game.engine import ProcessResult, build_command_from_payload

from . import handler
from .base import (
    HandlerContext,
    HandlerResult,
    error_response,
    state_message,
    validate_payload,
)

logger = logging.getLogger(__name__)


@handler(MessageType.GAME_COMMAND)
async def handle_game_command(ctx: HandlerContext) -> HandlerResult:
    """Handle GAME_COMMAND by running it through the game session.

    Flow:
    1. Validate payload
    2. Build the command (or map the key press)
    3. Dispatch through the session, which serializes all writers
    4. Reply with events, or with game_rejected if the command was ignored
    5. Broadcast events to the other seats

    Returns:
        HandlerResult with events for requester and broadcast for the rest.
    """
    request_id = ctx.message.request_id

    payload, validation_error = validate_payload(
        ctx.message.payload,
        GameCommandPayload,
        request_id,
        MessageType.ERROR,
    )
    if validation_error:
        return validation_error

    if payload.key is not None:
        result = await ctx.session.dispatch_key(payload.key, ctx.seat)
        if result is None:
            return _rejected("UNMAPPED_KEY", f"Key {payload.key!r} does nothing here", request_id)
    else:
        try:
            command = build_command_from_payload(payload.command or {})
        except ValidationError as e:
            return error_response("VALIDATION_ERROR", str(e), MessageType.ERROR, request_id)
        except ValueError as e:
            return error_response("INVALID_COMMAND", str(e), MessageType.ERROR, request_id)
        result = await ctx.session.dispatch(command, ctx.seat)

    if not result.success:
        logger.info(
            "Game command ignored for seat %d: %s - %s",
            ctx.seat,
            result.error_code,
            result.error_message,
        )
        return _rejected(
            result.error_code or "REJECTED",
            result.error_message or "Command ignored",
            request_id,
        )

    return _events_result(result, request_id)


@handler(MessageType.GET_STATE)
async def handle_get_state(ctx: HandlerContext) -> HandlerResult:
    """Reply with the seat's current read model."""
    return HandlerResult(
        success=True,
        response=state_message(ctx.session, ctx.seat, ctx.message.request_id),
    )


def _rejected(error_code: str, message: str, request_id: str | None) -> HandlerResult:
    return HandlerResult(
        success=False,
        response=WSServerMessage(
            type=MessageType.GAME_REJECTED,
            request_id=request_id,
            payload=GameRejectedPayload(error_code=error_code, message=message).model_dump(),
        ),
    )


def _events_result(result: ProcessResult, request_id: str | None) -> HandlerResult:
    serialized_events = [event.model_dump(mode="json") for event in result.events]

    logger.debug("Game command processed: %d events", len(serialized_events))

    return HandlerResult(
        success=True,
        response=WSServerMessage(
            type=MessageType.GAME_EVENTS,
            request_id=request_id,
            payload=GameEventsPayload(events=serialized_events).model_dump(),
        ),
        broadcast=WSServerMessage(
            type=MessageType.GAME_EVENTS,
            payload=GameEventsPayload(events=serialized_events).model_dump(),
        ),
        state_changed=True,
    )
