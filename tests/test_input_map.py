"""Tests for keyboard mapping."""

from duelboard.schemas.game_engine import GameState, KeyBindings, PieceKind, PieceRef
from duelboard.services.game.engine import (
    CancelCommand,
    FlipCommand,
    MoveCursorCommand,
    MovePieceCommand,
    ReorientCommand,
    SelectCommand,
    StartSummonCommand,
    ToggleDetailsCommand,
    map_key_to_command,
    process_command,
)

from .conftest import NORTH, SOUTH

CARD_1 = PieceRef(kind=PieceKind.CARD, id=1)
LEADER_1 = PieceRef(kind=PieceKind.PLAYER, id=1)


def staged(state: GameState, ref: PieceRef) -> GameState:
    result = process_command(state, SelectCommand(piece=ref), SOUTH)
    assert result.success
    return result.state


class TestIdleKeys:
    """Test keys with nothing staged."""

    def test_cancel_keys(self, game_south_turn: GameState):
        assert isinstance(map_key_to_command("l", game_south_turn, SOUTH), CancelCommand)
        assert isinstance(map_key_to_command("Escape", game_south_turn, SOUTH), CancelCommand)

    def test_movement_keys_move_cursor(self, game_south_turn: GameState):
        command = map_key_to_command("w", game_south_turn, SOUTH)
        assert isinstance(command, MoveCursorCommand)
        assert command.direction == "up"

    def test_arrow_keys_move_cursor(self, game_south_turn: GameState):
        command = map_key_to_command("ArrowLeft", game_south_turn, SOUTH)
        assert isinstance(command, MoveCursorCommand)
        assert command.direction == "left"

    def test_action_keys(self, game_south_turn: GameState):
        assert isinstance(map_key_to_command("k", game_south_turn, SOUTH), SelectCommand)
        assert isinstance(map_key_to_command("i", game_south_turn, SOUTH), ToggleDetailsCommand)
        assert isinstance(map_key_to_command("j", game_south_turn, SOUTH), StartSummonCommand)

    def test_case_insensitive(self, game_south_turn: GameState):
        assert isinstance(map_key_to_command("K", game_south_turn, SOUTH), SelectCommand)

    def test_unknown_key(self, game_south_turn: GameState):
        assert map_key_to_command("z", game_south_turn, SOUTH) is None

    def test_flip_key_does_nothing_when_idle(self, game_south_turn: GameState):
        assert map_key_to_command("o", game_south_turn, SOUTH) is None


class TestStagingKeys:
    """Test keys while this seat has a piece staged."""

    def test_card_keys(self, game_south_turn: GameState):
        state = staged(game_south_turn, CARD_1)
        assert isinstance(map_key_to_command("o", state, SOUTH), FlipCommand)
        assert isinstance(map_key_to_command("u", state, SOUTH), ReorientCommand)
        assert isinstance(map_key_to_command("Enter", state, SOUTH), SelectCommand)

    def test_movement_keys_nudge_the_piece(self, game_south_turn: GameState):
        state = staged(game_south_turn, CARD_1)
        command = map_key_to_command("d", state, SOUTH)
        assert isinstance(command, MovePieceCommand)
        assert command.direction == "right"

    def test_arrows_still_move_the_cursor(self, game_south_turn: GameState):
        state = staged(game_south_turn, CARD_1)
        assert isinstance(map_key_to_command("ArrowUp", state, SOUTH), MoveCursorCommand)

    def test_play_card_on_leader(self, game_south_turn: GameState):
        state = staged(game_south_turn, LEADER_1)
        assert isinstance(map_key_to_command("j", state, SOUTH), StartSummonCommand)
        # Leaders cannot flip
        assert map_key_to_command("o", state, SOUTH) is None

    def test_other_seat_gets_cursor_keys(self, game_south_turn: GameState):
        state = staged(game_south_turn, CARD_1)
        assert isinstance(map_key_to_command("w", state, NORTH), MoveCursorCommand)
        assert map_key_to_command("o", state, NORTH) is None


class TestCustomBindings:
    """Test user key bindings."""

    def test_rebound_keys(self, game_south_turn: GameState):
        bindings = KeyBindings(select="space", cursor_up="i", view_details="v")

        assert isinstance(
            map_key_to_command("space", game_south_turn, SOUTH, bindings), SelectCommand
        )
        command = map_key_to_command("i", game_south_turn, SOUTH, bindings)
        assert isinstance(command, MoveCursorCommand)
        assert command.direction == "up"
        assert map_key_to_command("k", game_south_turn, SOUTH, bindings) is None
