"""REST endpoints for the running game."""

import logging

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import ValidationError

from duelboard.config import get_settings
from duelboard.dependencies.session import CurrentSession
from duelboard.schemas.game import CommandRequest, CommandResponse, ResetRequest
from duelboard.schemas.game_engine import ReadModel
from duelboard.services.game.catalog import demo_game_settings
from duelboard.services.game.engine import build_command_from_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/game", tags=["game"])


@router.get("/state", response_model=ReadModel)
async def get_state(
    session: CurrentSession,
    seat: int = Query(0, ge=0, description="Index of the viewing player"),
):
    """Return the read model as seen from one seat.

    Raises:
        HTTPException 404: If there is no player at that seat.
    """
    if seat >= len(session.state.players):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No player at seat {seat}",
        )
    return session.snapshot(seat)


@router.post("/commands", response_model=CommandResponse)
async def post_command(session: CurrentSession, request: CommandRequest):
    """Apply one command (or key press) for a seat.

    A command the current state does not allow is ignored and reported with
    success=false; the game state is left as it was.

    Raises:
        HTTPException 422: If the command payload is malformed.
    """
    logger.info(
        "POST /game/commands - seat: %d, command: %s, key: %s",
        request.seat,
        (request.command or {}).get("command_type"),
        request.key,
    )

    if request.key is not None:
        result = await session.dispatch_key(request.key, request.seat)
        if result is None:
            return CommandResponse(
                success=False,
                error_code="UNMAPPED_KEY",
                error_message=f"Key {request.key!r} does nothing here",
            )
    else:
        try:
            command = build_command_from_payload(request.command or {})
        except ValidationError as e:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=e.errors(include_url=False, include_context=False),
            ) from e
        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=str(e),
            ) from e
        result = await session.dispatch(command, request.seat)

    if not result.success:
        return CommandResponse(
            success=False,
            error_code=result.error_code,
            error_message=result.error_message,
        )

    return CommandResponse(
        success=True,
        events=[event.model_dump(mode="json") for event in result.events],
        state=session.snapshot(request.seat),
    )


@router.post("/reset", response_model=ReadModel)
async def reset_game(session: CurrentSession, request: ResetRequest | None = None):
    """Throw the running game away and seed a fresh demo game."""
    settings = get_settings()
    tile_seed = request.tile_seed if request and request.tile_seed is not None else settings.TILE_SEED
    await session.reset(
        demo_game_settings(
            board_size=settings.BOARD_SIZE,
            initial_hand_size=settings.INITIAL_HAND_SIZE,
            tile_seed=tile_seed,
        )
    )
    logger.info("POST /game/reset - tile_seed: %s", tile_seed)
    return session.snapshot(0)
