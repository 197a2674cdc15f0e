"""Staging machine: provisional, revertible single-piece actions.

Idle -> Active on begin(); Active -> Idle on commit() or cancel(). While a
piece is staged its live position and card flags may drift from the snapshot
taken at begin(), but the snapshot itself never changes. The has_* flags are
recomputed from divergence against that snapshot, so undoing an edit also
clears its flag.
"""

import logging

from duelboard.schemas.game_engine import (
    Card,
    Cursor,
    GameState,
    IdleState,
    Player,
    Position,
    StagingState,
)

from .board import cardinal_neighbors
from .events import (
    ActionCommitted,
    AnyGameEvent,
    CardFlipped,
    CardReoriented,
    CursorMoved,
    HandToggled,
    PieceMoved,
    PieceSelected,
    SelectionCleared,
    StagingCancelled,
    StagingReleased,
    StagingStarted,
)
from .store import find_piece, update_piece
from .turns import has_acted, is_players_turn, is_turn_owner, mark_acted
from .validation import ProcessResult

logger = logging.getLogger(__name__)


def legal_destinations(staging: StagingState, board_size: int) -> list[tuple[int, int]]:
    """Squares a staged piece may stand on: its original square and the
    in-bounds cardinal neighbours of that original square."""
    x, y = staging.original_position.x, staging.original_position.y
    return [*cardinal_neighbors(x, y, board_size), (x, y)]


def staged_piece(state: GameState) -> Card | Player | None:
    """Fresh copy of the staged piece from the store."""
    staging = state.staging
    if staging is None:
        return None
    return find_piece(state, staging.piece)


def _release(state: GameState) -> GameState:
    return state.model_copy(update={"interaction": IdleState(), "selected_piece": None})


def begin(state: GameState, piece: Card | Player, player_index: int) -> ProcessResult:
    """Open a staging session on a piece.

    Requires no active machine, the acting seat to own the turn, the piece to
    belong to the turn owner's side, and the piece not to have acted yet.
    """
    if not state.is_idle:
        return ProcessResult.failure("BUSY", f"Cannot stage while {state.interaction.mode}")
    if not is_players_turn(state, player_index):
        return ProcessResult.failure("NOT_YOUR_TURN", "It's not your turn")
    if not is_turn_owner(state, piece):
        return ProcessResult.failure("NOT_YOUR_PIECE", "Piece belongs to the other side")
    if has_acted(state, piece):
        return ProcessResult.failure("ALREADY_ACTED", f"{piece.ref.key} has already acted")

    staging = StagingState(
        piece=piece.ref,
        original_position=piece.position.model_copy(),
        original_is_face_down=piece.is_face_down if isinstance(piece, Card) else None,
        original_is_defense_mode=piece.is_defense_mode if isinstance(piece, Card) else None,
    )

    cursor = Cursor(x=piece.position.x, y=piece.position.y)
    new_state = state.model_copy(
        update={
            "interaction": staging,
            "selected_piece": piece.ref,
            "cursor": cursor,
            "show_hand": False,
            "hand_selected_index": -1,
        }
    )
    logger.info(
        "Staging started: piece=%s, original=(%d,%d)",
        piece.ref.key,
        piece.position.x,
        piece.position.y,
    )

    events: list[AnyGameEvent] = [
        PieceSelected(piece=piece.ref, view_only=False),
        StagingStarted(piece=piece.ref, original_position=staging.original_position),
    ]
    if state.show_hand:
        events.append(HandToggled(show_hand=False))
    if cursor != state.cursor:
        events.append(CursorMoved(x=cursor.x, y=cursor.y))
    return ProcessResult.ok(new_state, events)


def record_move(state: GameState, x: int, y: int) -> ProcessResult:
    """Move the staged piece to (x, y).

    Destinations are measured from the original square, never from the
    current one, so moves do not chain. Moving a card forces attack stance.
    """
    staging = state.staging
    if staging is None:
        return ProcessResult.failure("NOT_STAGING", "No piece is staged")

    piece = find_piece(state, staging.piece)
    if piece is None:
        logger.warning("Staged piece %s missing from store", staging.piece.key)
        return ProcessResult.failure("PIECE_NOT_FOUND", "Staged piece is no longer on the board")

    if (x, y) not in legal_destinations(staging, state.board_size):
        return ProcessResult.failure(
            "ILLEGAL_DESTINATION",
            f"({x},{y}) is not reachable from ({staging.original_position.x},"
            f"{staging.original_position.y})",
        )

    if piece.position.x == x and piece.position.y == y:
        return ProcessResult.ok(state)

    from_position = piece.position
    to_position = Position(x=x, y=y, z=piece.position.z)
    staging_update: dict = {"has_moved": not to_position.same_square(staging.original_position)}

    if isinstance(piece, Card):
        moved = piece.model_copy(update={"position": to_position, "is_defense_mode": False})
        staging_update["has_changed_position"] = (
            staging.original_is_defense_mode is not None
            and moved.is_defense_mode != staging.original_is_defense_mode
        )
    else:
        moved = piece.model_copy(update={"position": to_position})

    new_state = update_piece(state, moved)
    new_state = new_state.model_copy(
        update={
            "interaction": staging.model_copy(update=staging_update),
            "cursor": Cursor(x=x, y=y),
        }
    )
    logger.debug(
        "Staged move: piece=%s, to=(%d,%d), has_moved=%s",
        piece.ref.key,
        x,
        y,
        staging_update["has_moved"],
    )
    return ProcessResult.ok(
        new_state,
        [
            PieceMoved(piece=piece.ref, from_position=from_position, to_position=to_position),
            CursorMoved(x=x, y=y),
        ],
    )


def flip(state: GameState) -> ProcessResult:
    """Toggle the staged card face up/down.

    A card that was face up when staging began can never be turned face down.
    """
    staging = state.staging
    if staging is None:
        return ProcessResult.failure("NOT_STAGING", "No piece is staged")

    piece = find_piece(state, staging.piece)
    if not isinstance(piece, Card):
        return ProcessResult.failure("NOT_A_CARD", "Only cards can be flipped")

    if staging.original_is_face_down is False:
        return ProcessResult.failure(
            "CANNOT_HIDE_REVEALED_CARD",
            "A card revealed at the start of the turn cannot be hidden again",
        )

    flipped = piece.model_copy(update={"is_face_down": not piece.is_face_down})
    has_flipped = (
        staging.original_is_face_down is not None
        and flipped.is_face_down != staging.original_is_face_down
    )
    new_state = update_piece(state, flipped)
    new_state = new_state.model_copy(
        update={"interaction": staging.model_copy(update={"has_flipped": has_flipped})}
    )
    logger.debug("Card flipped: piece=%s, face_down=%s", piece.ref.key, flipped.is_face_down)
    return ProcessResult.ok(
        new_state, [CardFlipped(piece=piece.ref, is_face_down=flipped.is_face_down)]
    )


def reorient(state: GameState) -> ProcessResult:
    """Toggle the staged card between attack and defense stance.

    Only allowed while the card stands on its original square.
    """
    staging = state.staging
    if staging is None:
        return ProcessResult.failure("NOT_STAGING", "No piece is staged")

    piece = find_piece(state, staging.piece)
    if not isinstance(piece, Card):
        return ProcessResult.failure("NOT_A_CARD", "Only cards have a stance")

    if staging.has_moved or not piece.position.same_square(staging.original_position):
        return ProcessResult.failure(
            "ALREADY_MOVED", "A card that moved this turn cannot change stance"
        )

    reoriented = piece.model_copy(update={"is_defense_mode": not piece.is_defense_mode})
    has_changed_position = (
        staging.original_is_defense_mode is not None
        and reoriented.is_defense_mode != staging.original_is_defense_mode
    )
    new_state = update_piece(state, reoriented)
    new_state = new_state.model_copy(
        update={
            "interaction": staging.model_copy(
                update={"has_changed_position": has_changed_position}
            )
        }
    )
    logger.debug(
        "Card reoriented: piece=%s, defense=%s", piece.ref.key, reoriented.is_defense_mode
    )
    return ProcessResult.ok(
        new_state,
        [CardReoriented(piece=piece.ref, is_defense_mode=reoriented.is_defense_mode)],
    )


def commit(state: GameState) -> ProcessResult:
    """Make the staged edits final.

    With no net change this only releases the piece; it does not cost the
    piece its action for the turn.
    """
    staging = state.staging
    if staging is None:
        return ProcessResult.failure("NOT_STAGING", "No piece is staged")

    piece = find_piece(state, staging.piece)
    if piece is None:
        logger.warning("Staged piece %s missing from store on commit", staging.piece.key)
        return ProcessResult.ok(_release(state), [SelectionCleared()])

    if not staging.has_changes:
        logger.debug("Commit without changes: releasing %s", staging.piece.key)
        return ProcessResult.ok(
            _release(state),
            [StagingReleased(piece=staging.piece), SelectionCleared()],
        )

    new_state = _release(mark_acted(state, piece))
    logger.info(
        "Action committed: piece=%s, moved=%s, flipped=%s, changed_position=%s",
        staging.piece.key,
        staging.has_moved,
        staging.has_flipped,
        staging.has_changed_position,
    )
    return ProcessResult.ok(
        new_state,
        [
            ActionCommitted(
                piece=staging.piece,
                has_moved=staging.has_moved,
                has_flipped=staging.has_flipped,
                has_changed_position=staging.has_changed_position,
            ),
            SelectionCleared(),
        ],
    )


def cancel(state: GameState) -> ProcessResult:
    """Revert the staged piece to its snapshot and release it."""
    staging = state.staging
    if staging is None:
        return ProcessResult.failure("NOT_STAGING", "No piece is staged")

    new_state = state
    piece = find_piece(state, staging.piece)
    if piece is not None:
        revert: dict = {"position": staging.original_position}
        if isinstance(piece, Card):
            if staging.original_is_face_down is not None:
                revert["is_face_down"] = staging.original_is_face_down
            if staging.original_is_defense_mode is not None:
                revert["is_defense_mode"] = staging.original_is_defense_mode
        new_state = update_piece(state, piece.model_copy(update=revert))

    logger.info("Staging cancelled: piece=%s", staging.piece.key)
    return ProcessResult.ok(
        _release(new_state),
        [
            StagingCancelled(piece=staging.piece, restored_position=staging.original_position),
            SelectionCleared(),
        ],
    )
