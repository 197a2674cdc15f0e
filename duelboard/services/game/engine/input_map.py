"""Keyboard input mapping.

Turns a raw key name into the command it stands for, given the current
state and the seat pressing it. Returns None for keys with no meaning in
the current context; the caller simply drops those.
"""

import logging

from duelboard.schemas.game_engine import Card, GameState, KeyBindings, Player

from .commands import (
    CancelCommand,
    DirectionName,
    FlipCommand,
    GameCommand,
    MoveCursorCommand,
    MovePieceCommand,
    ReorientCommand,
    SelectCommand,
    StartSummonCommand,
    ToggleDetailsCommand,
)
from .staging import staged_piece
from .turns import is_players_turn, is_turn_owner

logger = logging.getLogger(__name__)

ARROW_KEYS: dict[str, DirectionName] = {
    "ArrowUp": "up",
    "ArrowDown": "down",
    "ArrowLeft": "left",
    "ArrowRight": "right",
}


def _matches(key: str, binding: str) -> bool:
    return key.lower() == binding.lower()


def _binding_direction(key: str, bindings: KeyBindings) -> DirectionName | None:
    if _matches(key, bindings.cursor_up):
        return "up"
    if _matches(key, bindings.cursor_down):
        return "down"
    if _matches(key, bindings.cursor_left):
        return "left"
    if _matches(key, bindings.cursor_right):
        return "right"
    return None


def map_key_to_command(
    key: str,
    state: GameState,
    player_index: int,
    bindings: KeyBindings | None = None,
) -> GameCommand | None:
    """Map a key press to a command.

    Order of precedence:
    1. Cancel keys, always
    2. While this seat is staging its own piece: Enter commits, flip and
       position keys act on cards, the play-card key on a leader starts a
       summon, and the movement bindings nudge the piece
    3. Arrow keys and movement bindings move the cursor
    4. Select, details and play-card keys
    """
    bindings = bindings or KeyBindings()

    if key in bindings.cancel:
        return CancelCommand()

    piece = staged_piece(state)
    if (
        piece is not None
        and is_players_turn(state, player_index)
        and is_turn_owner(state, piece)
    ):
        if key == "Enter":
            return SelectCommand()
        if isinstance(piece, Card):
            if _matches(key, bindings.flip_card):
                return FlipCommand()
            if _matches(key, bindings.change_position):
                return ReorientCommand()
        if isinstance(piece, Player) and _matches(key, bindings.play_card):
            return StartSummonCommand()

        direction = _binding_direction(key, bindings)
        if direction is not None:
            return MovePieceCommand(direction=direction)

    direction = ARROW_KEYS.get(key) or _binding_direction(key, bindings)
    if direction is not None:
        return MoveCursorCommand(direction=direction)

    if _matches(key, bindings.select):
        return SelectCommand()
    if _matches(key, bindings.view_details):
        return ToggleDetailsCommand()
    if _matches(key, bindings.play_card):
        return StartSummonCommand()

    logger.debug("Unmapped key: %r", key)
    return None
