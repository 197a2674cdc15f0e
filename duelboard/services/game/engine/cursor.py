"""Cursor and selection controller.

The cursor is always inside the board. While a machine is live it is
further restricted to that machine's legal squares, and while the hand is
open horizontal movement walks the hand instead of the board.
"""

import logging

from duelboard.schemas.game_engine import (
    Card,
    Cursor,
    DetailsView,
    GameState,
    Player,
    SummonPhase,
    Tile,
)

from .board import clamp, step, tile_at
from .events import (
    AnyGameEvent,
    CursorMoved,
    DetailsClosed,
    DetailsOpened,
    HandIndexChanged,
    HandToggled,
    PieceSelected,
    SelectionCleared,
    TileSelected,
)
from .staging import legal_destinations
from .store import find_piece, hand_cards
from .summoning import legal_targets
from .validation import ProcessResult

logger = logging.getLogger(__name__)


def hand_owner_index(state: GameState, player_index: int) -> int:
    """Whose hand is on screen: the summoning player's, else the viewer's."""
    summoning = state.summoning
    return summoning.player_index if summoning is not None else player_index


def move_cursor(state: GameState, direction: str, player_index: int) -> ProcessResult:
    """Move the cursor one step, honouring whichever mode is active."""
    if state.show_hand:
        return _move_hand_index(state, direction, player_index)

    summoning = state.summoning
    if summoning is not None:
        if summoning.phase != SummonPhase.TARGET:
            return ProcessResult.failure("CURSOR_LOCKED", "Cursor is locked while confirming")
        x, y = step(state.cursor.x, state.cursor.y, direction)
        if (x, y) not in legal_targets(state, summoning.player_index):
            return ProcessResult.failure("ILLEGAL_TARGET", f"({x},{y}) is not a summon target")
        return _place_cursor(state, x, y)

    x, y = step(state.cursor.x, state.cursor.y, direction)
    x, y = clamp(x, state.board_size), clamp(y, state.board_size)

    staging = state.staging
    if staging is not None and (x, y) not in legal_destinations(staging, state.board_size):
        return ProcessResult.failure(
            "ILLEGAL_DESTINATION", f"({x},{y}) is out of reach of the staged piece"
        )

    if x == state.cursor.x and y == state.cursor.y:
        return ProcessResult.failure("AT_EDGE", "Cursor is already at the board edge")
    return _place_cursor(state, x, y)


def _place_cursor(state: GameState, x: int, y: int) -> ProcessResult:
    update: dict = {"cursor": Cursor(x=x, y=y)}
    events: list[AnyGameEvent] = [CursorMoved(x=x, y=y)]

    tile = tile_at(state.tiles, x, y)
    if tile is not None:
        update["selected_tile"] = tile
        events.append(TileSelected(position=tile.position))

    logger.debug("Cursor moved to (%d,%d)", x, y)
    return ProcessResult.ok(state.model_copy(update=update), events)


def _move_hand_index(state: GameState, direction: str, player_index: int) -> ProcessResult:
    if direction not in ("left", "right"):
        return ProcessResult.failure("HAND_OPEN", "Only left and right move through the hand")

    hand_size = len(hand_cards(state, hand_owner_index(state, player_index)))
    if hand_size == 0:
        return ProcessResult.failure("EMPTY_HAND", "The hand is empty")

    index = max(state.hand_selected_index, 0)
    if direction == "left":
        index = max(0, index - 1)
    else:
        index = min(hand_size - 1, index + 1)

    if index == state.hand_selected_index:
        return ProcessResult.failure("AT_EDGE", "Already at the end of the hand")

    new_state = state.model_copy(update={"hand_selected_index": index})
    return ProcessResult.ok(new_state, [HandIndexChanged(index=index)])


def set_cursor(state: GameState, x: int, y: int) -> tuple[GameState, list[AnyGameEvent]]:
    """Put the cursor on an in-bounds square (used by pointer input)."""
    cursor = Cursor(x=clamp(x, state.board_size), y=clamp(y, state.board_size))
    if cursor == state.cursor:
        return state, []
    return state.model_copy(update={"cursor": cursor}), [CursorMoved(x=cursor.x, y=cursor.y)]


def select_tile(state: GameState, tile: Tile) -> tuple[GameState, list[AnyGameEvent]]:
    new_state = state.model_copy(update={"selected_tile": tile})
    return new_state, [TileSelected(position=tile.position)]


def inspect_piece(state: GameState, piece: Card | Player) -> ProcessResult:
    """Select a piece for viewing only; no staging is opened."""
    if state.selected_piece == piece.ref:
        return ProcessResult.ok(state)
    new_state = state.model_copy(update={"selected_piece": piece.ref})
    return ProcessResult.ok(new_state, [PieceSelected(piece=piece.ref, view_only=True)])


def clear_selection(state: GameState) -> ProcessResult:
    if state.selected_piece is None:
        return ProcessResult.ok(state)
    new_state = state.model_copy(update={"selected_piece": None})
    return ProcessResult.ok(new_state, [SelectionCleared()])


def toggle_hand(state: GameState) -> ProcessResult:
    """Open or close the hand for browsing.

    Summons manage the hand themselves, and a staged piece owns the arrow keys.
    """
    if state.summoning is not None:
        return ProcessResult.failure("SUMMONING", "The summon controls the hand")
    if state.staging is not None and not state.show_hand:
        return ProcessResult.failure("STAGING", "Finish the staged action first")

    show_hand = not state.show_hand
    new_state = state.model_copy(
        update={"show_hand": show_hand, "hand_selected_index": 0 if show_hand else -1}
    )
    events: list[AnyGameEvent] = [HandToggled(show_hand=show_hand)]
    if show_hand:
        events.append(HandIndexChanged(index=0))
    return ProcessResult.ok(new_state, events)


def toggle_details(state: GameState, player_index: int) -> ProcessResult:
    """Open the details view for the highlighted hand card or the selected piece,
    or close it when it is already open."""
    if state.details_view is not None:
        return close_details(state)

    hand_open = state.show_hand or (
        state.summoning is not None and state.summoning.phase == SummonPhase.CARD
    )
    if hand_open:
        hand = hand_cards(state, hand_owner_index(state, player_index))
        if 0 <= state.hand_selected_index < len(hand):
            return _open_details(state, DetailsView.HAND_CARD)

    if state.selected_piece is not None:
        piece = find_piece(state, state.selected_piece)
        if isinstance(piece, Card):
            return _open_details(state, DetailsView.CARD)
        if isinstance(piece, Player):
            return _open_details(state, DetailsView.PLAYER)

    return ProcessResult.failure("NOTHING_SELECTED", "Nothing to show details for")


def _open_details(state: GameState, view: DetailsView) -> ProcessResult:
    new_state = state.model_copy(update={"details_view": view})
    return ProcessResult.ok(new_state, [DetailsOpened(view=view)])


def close_details(state: GameState) -> ProcessResult:
    if state.details_view is None:
        return ProcessResult.ok(state)
    new_state = state.model_copy(update={"details_view": None})
    return ProcessResult.ok(new_state, [DetailsClosed()])

