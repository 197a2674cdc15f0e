"""Turn ownership and the per-turn acted set."""

import logging

from duelboard.schemas.game_engine import Card, GameState, Player

logger = logging.getLogger(__name__)


def piece_key(piece: Card | Player) -> str:
    """Composite "<kind>-<id>" key used in the acted set."""
    return piece.ref.key


def turn_owner(state: GameState) -> Player | None:
    index = state.turn_state.turn_owner_index
    if 0 <= index < len(state.players):
        return state.players[index]
    return None


def is_players_turn(state: GameState, player_index: int) -> bool:
    """True when the seat at player_index owns the current turn."""
    if not 0 <= player_index < len(state.players):
        return False
    return state.turn_state.turn_owner_index == player_index


def is_turn_owner(state: GameState, piece: Card | Player) -> bool:
    """True when the piece belongs to the side whose turn it is."""
    owner = turn_owner(state)
    return owner is not None and piece.owner == owner.owner


def has_acted(state: GameState, piece: Card | Player) -> bool:
    return piece_key(piece) in state.turn_state.acted_piece_ids


def mark_acted(state: GameState, piece: Card | Player) -> GameState:
    """Add the piece to the acted set. Calling it twice has no further effect."""
    key = piece_key(piece)
    if key in state.turn_state.acted_piece_ids:
        logger.debug("Piece %s already marked as acted", key)
        return state

    turn_state = state.turn_state.model_copy(
        update={"acted_piece_ids": [*state.turn_state.acted_piece_ids, key]}
    )
    logger.debug("Marked %s as acted this turn", key)
    return state.model_copy(update={"turn_state": turn_state})
