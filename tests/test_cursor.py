"""Tests for cursor movement, hand browsing and the details view."""

from duelboard.schemas.game_engine import (
    Cursor,
    DetailsView,
    GameState,
    PieceKind,
    PieceRef,
)
from duelboard.services.game.engine import cursor, staging, summoning
from duelboard.services.game.engine.events import CursorMoved, TileSelected
from duelboard.services.game.engine.store import find_piece

from .conftest import SOUTH

CARD_1 = PieceRef(kind=PieceKind.CARD, id=1)
CARD_11 = PieceRef(kind=PieceKind.CARD, id=11)
LEADER_1 = PieceRef(kind=PieceKind.PLAYER, id=1)


class TestBoardCursor:
    """Test free cursor movement."""

    def test_move_up(self, game_south_turn: GameState):
        result = cursor.move_cursor(game_south_turn, "up", SOUTH)

        assert result.success
        assert result.state.cursor == Cursor(x=0, y=-4)
        assert result.state.selected_tile.position.y == -4
        assert isinstance(result.events[0], CursorMoved)
        assert isinstance(result.events[1], TileSelected)

    def test_stops_at_the_edge(self, game_south_turn: GameState):
        result = cursor.move_cursor(game_south_turn, "down", SOUTH)
        assert not result.success
        assert result.error_code == "AT_EDGE"

    def test_restricted_to_staging_destinations(self, game_south_turn: GameState):
        state = staging.begin(game_south_turn, find_piece(game_south_turn, CARD_1), SOUTH).state
        assert state.cursor == Cursor(x=1, y=-5)

        state = cursor.move_cursor(state, "up", SOUTH).state
        assert state.cursor == Cursor(x=1, y=-4)

        result = cursor.move_cursor(state, "up", SOUTH)
        assert result.error_code == "ILLEGAL_DESTINATION"

    def test_restricted_to_summon_targets(self, game_south_turn: GameState):
        state = summoning.start(game_south_turn, SOUTH).state
        state = cursor.move_cursor(state, "up", SOUTH).state
        assert state.cursor == Cursor(x=0, y=-4)

        result = cursor.move_cursor(state, "up", SOUTH)
        assert result.error_code == "ILLEGAL_TARGET"

    def test_locked_while_confirming_summon(self, game_south_turn: GameState):
        state = summoning.start(game_south_turn, SOUTH).state
        state = summoning.confirm_target(state, 1, -4).state
        state = summoning.select_card(state, 7).state

        assert cursor.move_cursor(state, "left", SOUTH).error_code == "CURSOR_LOCKED"


class TestHandBrowsing:
    """Test horizontal movement through an open hand."""

    def test_toggle_hand_opens_at_first_card(self, game_south_turn: GameState):
        result = cursor.toggle_hand(game_south_turn)
        assert result.state.show_hand is True
        assert result.state.hand_selected_index == 0

    def test_toggle_hand_closes(self, game_south_turn: GameState):
        state = cursor.toggle_hand(game_south_turn).state
        state = cursor.toggle_hand(state).state
        assert state.show_hand is False
        assert state.hand_selected_index == -1

    def test_left_right_walk_the_hand(self, game_south_turn: GameState):
        state = cursor.toggle_hand(game_south_turn).state
        state = cursor.move_cursor(state, "right", SOUTH).state
        state = cursor.move_cursor(state, "right", SOUTH).state
        assert state.hand_selected_index == 2
        # Board cursor does not move while the hand is open
        assert state.cursor == game_south_turn.cursor

        assert cursor.move_cursor(state, "right", SOUTH).error_code == "AT_EDGE"

    def test_up_down_ignored(self, game_south_turn: GameState):
        state = cursor.toggle_hand(game_south_turn).state
        assert cursor.move_cursor(state, "up", SOUTH).error_code == "HAND_OPEN"

    def test_empty_hand(self, game_south_turn: GameState):
        leader = game_south_turn.players[SOUTH].model_copy(update={"hand": []})
        state = game_south_turn.model_copy(
            update={"players": [leader, game_south_turn.players[1]]}
        )
        state = cursor.toggle_hand(state).state
        assert cursor.move_cursor(state, "right", SOUTH).error_code == "EMPTY_HAND"

    def test_hand_belongs_to_the_summon(self, game_south_turn: GameState):
        state = summoning.start(game_south_turn, SOUTH).state
        assert cursor.toggle_hand(state).error_code == "SUMMONING"


class TestSelection:
    """Test view-only inspection and pointer helpers."""

    def test_inspect_piece(self, game_south_turn: GameState):
        piece = find_piece(game_south_turn, CARD_11)
        result = cursor.inspect_piece(game_south_turn, piece)

        assert result.state.selected_piece == CARD_11
        assert result.state.is_idle
        assert result.events[0].view_only is True

    def test_clear_selection(self, game_south_turn: GameState):
        state = cursor.inspect_piece(game_south_turn, find_piece(game_south_turn, CARD_11)).state
        result = cursor.clear_selection(state)
        assert result.state.selected_piece is None

    def test_set_cursor_clamps(self, game_south_turn: GameState):
        state, events = cursor.set_cursor(game_south_turn, 9, 2)
        assert state.cursor == Cursor(x=5, y=2)
        assert len(events) == 1

    def test_set_cursor_same_square(self, game_south_turn: GameState):
        state, events = cursor.set_cursor(game_south_turn, 0, -5)
        assert state is game_south_turn
        assert events == []


class TestDetails:
    """Test the details view toggle."""

    def test_nothing_selected(self, game_south_turn: GameState):
        assert cursor.toggle_details(game_south_turn, SOUTH).error_code == "NOTHING_SELECTED"

    def test_selected_card(self, game_south_turn: GameState):
        state = cursor.inspect_piece(game_south_turn, find_piece(game_south_turn, CARD_11)).state
        result = cursor.toggle_details(state, SOUTH)
        assert result.state.details_view == DetailsView.CARD

    def test_selected_leader(self, game_south_turn: GameState):
        state = cursor.inspect_piece(game_south_turn, find_piece(game_south_turn, LEADER_1)).state
        result = cursor.toggle_details(state, SOUTH)
        assert result.state.details_view == DetailsView.PLAYER

    def test_hand_card_wins_over_selection(self, game_south_turn: GameState):
        state = cursor.inspect_piece(game_south_turn, find_piece(game_south_turn, CARD_11)).state
        state = cursor.toggle_hand(state).state
        result = cursor.toggle_details(state, SOUTH)
        assert result.state.details_view == DetailsView.HAND_CARD

    def test_toggle_closes(self, game_south_turn: GameState):
        state = cursor.inspect_piece(game_south_turn, find_piece(game_south_turn, CARD_11)).state
        state = cursor.toggle_details(state, SOUTH).state
        result = cursor.toggle_details(state, SOUTH)
        assert result.state.details_view is None
