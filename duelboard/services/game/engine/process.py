"""Main entry point for game command processing.

This module provides the primary interface for processing player input:
- process_command(): Validates and routes any game command
- Dispatches to the staging, summoning and cursor handlers
- Returns ProcessResult with new state and events

A command whose preconditions fail is declined, never raised: the result
carries an error code and no state, and the caller keeps what it had.
"""

import logging

from duelboard.schemas.game_engine import Card, GameState, PieceKind, Player, SummonPhase

from . import cursor, staging, summoning
from .board import is_in_bounds, step
from .commands import (
    CancelCommand,
    FlipCommand,
    GameCommand,
    MoveCursorCommand,
    MovePieceCommand,
    ReorientCommand,
    SelectCommand,
    StartSummonCommand,
    ToggleDetailsCommand,
    ToggleHandCommand,
)
from .events import AnyGameEvent
from .store import find_piece, piece_at
from .turns import has_acted, is_players_turn, is_turn_owner
from .validation import ProcessResult, validate_command

logger = logging.getLogger(__name__)


def process_command(
    state: GameState,
    command: GameCommand,
    player_index: int,
) -> ProcessResult:
    """Process a game command and return the result.

    This is the single entry point for player input. It:
    1. Validates the command against the acting seat
    2. Routes it to the handler for the active mode
    3. Assigns sequence numbers to events
    4. Returns ProcessResult with new state and events

    Args:
        state: Current game state.
        command: The command to process.
        player_index: Seat issuing the command.

    Returns:
        ProcessResult containing:
        - success: Whether the command changed anything
        - state: The new game state (if successful)
        - events: List of events that occurred (with seq numbers)
        - error_code/error_message: Why it was declined (if it was)

    Example:
        >>> result = process_command(state, StartSummonCommand(), 0)
        >>> if result.success:
        ...     state = result.state
    """
    command_type = type(command).__name__
    logger.debug(
        "Processing command: type=%s, player_index=%d, mode=%s",
        command_type,
        player_index,
        state.interaction.mode,
    )

    validation = validate_command(state, command, player_index)
    if not validation.is_valid:
        return ProcessResult.failure(
            validation.error_code or "VALIDATION_ERROR",
            validation.error_message or "Invalid command",
        )

    if isinstance(command, SelectCommand):
        result = _process_select(state, command, player_index)

    elif isinstance(command, CancelCommand):
        result = _process_cancel(state, player_index)

    elif isinstance(command, MoveCursorCommand):
        result = cursor.move_cursor(state, command.direction, player_index)

    elif isinstance(command, MovePieceCommand):
        result = _process_move_piece(state, command.direction)

    elif isinstance(command, FlipCommand):
        result = staging.flip(state)

    elif isinstance(command, ReorientCommand):
        result = staging.reorient(state)

    elif isinstance(command, StartSummonCommand):
        result = summoning.start(state, player_index)

    elif isinstance(command, ToggleDetailsCommand):
        result = cursor.toggle_details(state, player_index)

    elif isinstance(command, ToggleHandCommand):
        result = cursor.toggle_hand(state)

    else:
        logger.error("Unknown command type: %s", command_type)
        return ProcessResult.failure("UNKNOWN_COMMAND", f"Unknown command type: {command_type}")

    if result.success and result.state is not None:
        result = _assign_event_sequences(result)
        logger.debug(
            "Command processed: type=%s, player_index=%d, events_generated=%d",
            command_type,
            player_index,
            len(result.events),
        )
    else:
        logger.debug(
            "Command declined: type=%s, player_index=%d, error=%s",
            command_type,
            player_index,
            result.error_code,
        )

    return result


def _assign_event_sequences(result: ProcessResult) -> ProcessResult:
    """Assign monotonically increasing sequence numbers to events.

    Updates each event's seq field and increments the state's event_seq counter.
    """
    if result.state is None or not result.events:
        return result

    current_seq = result.state.event_seq
    for event in result.events:
        event.seq = current_seq
        current_seq += 1

    new_state = result.state.model_copy(update={"event_seq": current_seq})

    return ProcessResult.ok(new_state, result.events)


def _prepend_events(result: ProcessResult, events: list[AnyGameEvent]) -> ProcessResult:
    """Fold events from an earlier step into a later step's result."""
    if not events:
        return result
    if not result.success:
        return result
    return ProcessResult.ok(result.state, [*events, *result.events])


def _process_select(
    state: GameState,
    command: SelectCommand,
    player_index: int,
) -> ProcessResult:
    """Route a select by priority: summon, commit, staged move, inspect, stage."""
    if state.summoning is not None:
        return _process_summon_select(state, command, player_index)

    if command.piece is not None and find_piece(state, command.piece) is None:
        return ProcessResult.failure("PIECE_NOT_FOUND", f"{command.piece.key} is not on the board")

    target = _resolve_target(state, command)
    if target is None:
        return ProcessResult.failure("OUT_OF_BOUNDS", "Selection is outside the board")
    tx, ty = target

    events: list[AnyGameEvent] = []
    active = state.staging
    if active is not None:
        if not is_players_turn(state, player_index):
            return ProcessResult.failure("NOT_YOUR_TURN", "It's not your turn")

        live = staging.staged_piece(state)
        if live is not None and live.position.x == tx and live.position.y == ty:
            return staging.commit(state)

        if (tx, ty) in staging.legal_destinations(active, state.board_size):
            return staging.record_move(state, tx, ty)

        # Selecting elsewhere abandons the staged edits
        reverted = staging.cancel(state)
        if not reverted.success or reverted.state is None:
            return reverted
        state, events = reverted.state, list(reverted.events)

    if command.coord is not None or command.tile is not None:
        state, cursor_events = cursor.set_cursor(state, tx, ty)
        events.extend(cursor_events)
    if command.tile is not None:
        state, tile_events = cursor.select_tile(state, command.tile)
        events.extend(tile_events)

    target_piece = _resolve_piece(state, command, tx, ty)

    if not is_players_turn(state, player_index):
        if target_piece is not None:
            return _prepend_events(cursor.inspect_piece(state, target_piece), events)
        return _finish(state, events)

    if target_piece is None:
        return _prepend_events(cursor.clear_selection(state), events)

    if state.selected_piece == target_piece.ref:
        return _finish(state, events)

    if is_turn_owner(state, target_piece) and not has_acted(state, target_piece):
        return _prepend_events(staging.begin(state, target_piece, player_index), events)

    return _prepend_events(cursor.inspect_piece(state, target_piece), events)


def _process_summon_select(
    state: GameState,
    command: SelectCommand,
    player_index: int,
) -> ProcessResult:
    active = state.summoning
    if active is None:
        return ProcessResult.failure("NOT_SUMMONING", "No summon in progress")
    if active.player_index != player_index:
        return ProcessResult.failure("NOT_YOUR_SUMMON", "Another player is summoning")

    if active.phase == SummonPhase.TARGET:
        if command.coord is not None:
            return summoning.confirm_target(state, command.coord.x, command.coord.y)
        if command.tile is not None:
            return summoning.confirm_target(
                state, command.tile.position.x, command.tile.position.y
            )
        return summoning.confirm_target(state, state.cursor.x, state.cursor.y)

    # Board clicks are ignored once the target is fixed
    if command.coord is not None or command.tile is not None:
        return ProcessResult.failure("BOARD_LOCKED", "Board clicks are ignored at this step")

    if active.phase == SummonPhase.CARD:
        card_id = None
        if command.piece is not None:
            if command.piece.kind != PieceKind.CARD:
                return ProcessResult.failure("NOT_A_CARD", "Pick a card from the hand")
            card_id = command.piece.id
        return summoning.select_card(state, card_id)

    return summoning.confirm_summon(state)


def _process_cancel(state: GameState, player_index: int) -> ProcessResult:
    """Back out of whatever is most recent: summon step, hand, staging, selection."""
    active = state.summoning
    if active is not None:
        if active.player_index != player_index:
            return ProcessResult.failure("NOT_YOUR_SUMMON", "Another player is summoning")
        return summoning.step_back(state)

    if state.show_hand:
        return cursor.toggle_hand(state)

    if state.staging is not None:
        if not is_players_turn(state, player_index):
            return ProcessResult.failure("NOT_YOUR_TURN", "It's not your turn")
        reverted = staging.cancel(state)
        if not reverted.success or reverted.state is None:
            return reverted
        return _prepend_events(cursor.close_details(reverted.state), reverted.events)

    if state.selected_piece is not None:
        cleared = cursor.clear_selection(state)
        if cleared.state is None:
            return cleared
        return _prepend_events(cursor.close_details(cleared.state), cleared.events)

    if state.details_view is not None:
        return cursor.close_details(state)

    return ProcessResult.failure("NOTHING_TO_CANCEL", "Nothing to cancel")


def _process_move_piece(state: GameState, direction: str) -> ProcessResult:
    """Nudge the staged piece one square from where it stands now."""
    piece = staging.staged_piece(state)
    if piece is None:
        return ProcessResult.failure("NOT_STAGING", "No piece is staged")

    x, y = step(piece.position.x, piece.position.y, direction)
    if not is_in_bounds(x, y, state.board_size):
        return ProcessResult.failure("OUT_OF_BOUNDS", f"({x},{y}) is off the board")
    return staging.record_move(state, x, y)


def _resolve_target(state: GameState, command: SelectCommand) -> tuple[int, int] | None:
    """Board square a select aims at: explicit coord, tile, clicked piece, else cursor."""
    if command.coord is not None:
        x, y = command.coord.x, command.coord.y
    elif command.tile is not None:
        x, y = command.tile.position.x, command.tile.position.y
    elif command.piece is not None:
        piece = find_piece(state, command.piece)
        if piece is None:
            return None
        x, y = piece.position.x, piece.position.y
    else:
        x, y = state.cursor.x, state.cursor.y

    if not is_in_bounds(x, y, state.board_size):
        return None
    return x, y


def _resolve_piece(
    state: GameState, command: SelectCommand, x: int, y: int
) -> Card | Player | None:
    if command.piece is not None:
        return find_piece(state, command.piece)
    if command.tile is not None:
        return None
    return piece_at(state, x, y)


def _finish(state: GameState, events: list[AnyGameEvent]) -> ProcessResult:
    if not events:
        return ProcessResult.failure("NOTHING_TO_SELECT", "Nothing to select here")
    return ProcessResult.ok(state, events)
