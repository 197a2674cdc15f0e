"""Outbound snapshot builder."""

from duelboard.schemas.game_engine import Cursor, GameState, ReadModel, SummonPhase

from .staging import legal_destinations
from .store import find_piece, hand_cards
from .summoning import legal_targets


def build_read_model(state: GameState, player_index: int) -> ReadModel:
    """Project the state into the plain data a seat's view renders.

    Legal squares are only listed while the matching machine is live, so a
    view can highlight them without knowing the rules.
    """
    staging = state.staging
    summoning = state.summoning

    legal_moves: list[Cursor] = []
    if staging is not None:
        legal_moves = [
            Cursor(x=x, y=y) for x, y in legal_destinations(staging, state.board_size)
        ]

    summon_targets: list[Cursor] = []
    if summoning is not None and summoning.phase == SummonPhase.TARGET:
        summon_targets = [
            Cursor(x=x, y=y) for x, y in legal_targets(state, summoning.player_index)
        ]

    selected = None
    if state.selected_piece is not None:
        selected = find_piece(state, state.selected_piece)

    hand = []
    if 0 <= player_index < len(state.players):
        hand = hand_cards(state, player_index)

    return ReadModel(
        turn_state=state.turn_state,
        staging_state=staging,
        summoning_state=summoning,
        selected_tile_piece=selected,
        selected_tile=state.selected_tile,
        cursor_position=state.cursor,
        cards=state.cards,
        players=state.players,
        tiles=state.tiles,
        hand_cards=hand,
        show_hand=state.show_hand,
        hand_selected_index=state.hand_selected_index,
        details_view=state.details_view,
        legal_moves=legal_moves,
        legal_summon_targets=summon_targets,
        event_seq=state.event_seq,
    )
