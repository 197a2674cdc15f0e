"""Validation layer for game commands and the ProcessResult pattern.

Illegal commands are never raised as exceptions: input arrives continuously
from the view layer, so a command whose preconditions fail is declined with
an error code and the current state stays as it was.
"""

import logging
from dataclasses import dataclass, field

from duelboard.schemas.game_engine import GameState

from .commands import (
    FlipCommand,
    GameCommand,
    MoveCursorCommand,
    MovePieceCommand,
    ReorientCommand,
    StartSummonCommand,
    ToggleDetailsCommand,
    ToggleHandCommand,
)
from .events import AnyGameEvent

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Result of processing a game command.

    Replaces exceptions for control flow, providing explicit success/failure
    with error codes a client can map to feedback if it wants to.
    """

    state: GameState | None = None
    events: list[AnyGameEvent] = field(default_factory=list)
    success: bool = True
    error_code: str | None = None
    error_message: str | None = None

    @classmethod
    def ok(
        cls,
        state: GameState,
        events: list[AnyGameEvent] | None = None,
    ) -> "ProcessResult":
        """Create a successful result with new state and events."""
        return cls(
            state=state,
            events=events or [],
            success=True,
        )

    @classmethod
    def failure(cls, code: str, message: str) -> "ProcessResult":
        """Create a declined result; callers keep their current state."""
        logger.debug("Command declined: %s - %s", code, message)
        return cls(
            state=None,
            events=[],
            success=False,
            error_code=code,
            error_message=message,
        )


@dataclass
class ValidationResult:
    """Result of validating a command before processing."""

    is_valid: bool = True
    error_code: str | None = None
    error_message: str | None = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        """Create a successful validation result."""
        return cls(is_valid=True)

    @classmethod
    def error(cls, code: str, message: str) -> "ValidationResult":
        """Create a validation failure with error details."""
        return cls(
            is_valid=False,
            error_code=code,
            error_message=message,
        )


def validate_command(
    state: GameState,
    command: GameCommand,
    player_index: int,
) -> ValidationResult:
    """Coarse checks shared by every command.

    Checks:
    - The acting seat exists
    - Staged edits (flip, reorient, nudge) come from the turn owner
    - The shared cursor, hand and details view are steered only by the turn owner
    - Summons are only started by the turn owner

    Finer preconditions live with the machine that owns them.

    Args:
        state: Current game state.
        command: The command to validate.
        player_index: Seat issuing the command.

    Returns:
        ValidationResult indicating success or failure with error details.
    """
    command_type = type(command).__name__
    logger.debug(
        "Validating command: type=%s, player_index=%d, mode=%s",
        command_type,
        player_index,
        state.interaction.mode,
    )

    if not 0 <= player_index < len(state.players):
        logger.warning("Validation failed: UNKNOWN_PLAYER, player_index=%d", player_index)
        return ValidationResult.error(
            "UNKNOWN_PLAYER",
            f"No player at index {player_index}",
        )

    turn_bound = (
        FlipCommand,
        ReorientCommand,
        MovePieceCommand,
        StartSummonCommand,
        MoveCursorCommand,
        ToggleHandCommand,
        ToggleDetailsCommand,
    )
    if isinstance(command, turn_bound):
        if state.turn_state.turn_owner_index != player_index:
            logger.debug(
                "Validation failed: NOT_YOUR_TURN, current=%d, attempted=%d",
                state.turn_state.turn_owner_index,
                player_index,
            )
            return ValidationResult.error(
                "NOT_YOUR_TURN",
                "It's not your turn",
            )

    logger.debug("Command validated successfully: type=%s", command_type)
    return ValidationResult.ok()
