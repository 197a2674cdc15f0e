"""Summoning machine: deploying a card from hand onto the board.

Phases run strictly target -> card -> confirm, then the card is placed and
the machine cleared. step_back() undoes exactly one decision: confirm goes
back to card, card back to target, and target closes the machine.
"""

import logging

from duelboard.schemas.game_engine import (
    Card,
    Cursor,
    GameState,
    IdleState,
    Position,
    SummoningState,
    SummonPhase,
)

from .board import SUMMON_Z, chebyshev_ring
from .events import (
    AnyGameEvent,
    CardSummoned,
    CursorMoved,
    HandIndexChanged,
    HandToggled,
    SummonCancelled,
    SummonCardChosen,
    SummonStarted,
    SummonStepBack,
    SummonTargetChosen,
)
from .store import add_card, hand_cards, update_piece
from .turns import is_players_turn
from .validation import ProcessResult

logger = logging.getLogger(__name__)


def legal_targets(state: GameState, player_index: int) -> list[tuple[int, int]]:
    """Squares around the player's leader where a card may be summoned.

    Occupied squares are included: pieces may share a square.
    """
    if not 0 <= player_index < len(state.players):
        return []
    leader = state.players[player_index]
    return chebyshev_ring(leader.position.x, leader.position.y, state.board_size)


def start(state: GameState, player_index: int) -> ProcessResult:
    """Enter the target phase and snap the cursor onto the player's leader."""
    if not is_players_turn(state, player_index):
        return ProcessResult.failure("NOT_YOUR_TURN", "It's not your turn")
    if not state.is_idle:
        return ProcessResult.failure(
            "BUSY", f"Cannot start a summon while {state.interaction.mode}"
        )

    leader = state.players[player_index]
    cursor = Cursor(x=leader.position.x, y=leader.position.y)
    # The target phase steers the board cursor, so a browsing hand closes
    new_state = state.model_copy(
        update={
            "interaction": SummoningState(phase=SummonPhase.TARGET, player_index=player_index),
            "cursor": cursor,
            "show_hand": False,
            "hand_selected_index": -1,
        }
    )
    logger.info("Summon started: player_index=%d", player_index)

    events: list[AnyGameEvent] = [SummonStarted(player_index=player_index)]
    if state.show_hand:
        events.append(HandToggled(show_hand=False))
    if cursor != state.cursor:
        events.append(CursorMoved(x=cursor.x, y=cursor.y))
    return ProcessResult.ok(new_state, events)


def confirm_target(state: GameState, x: int, y: int) -> ProcessResult:
    """Fix the target square and open the hand."""
    summoning = state.summoning
    if summoning is None or summoning.phase != SummonPhase.TARGET:
        return ProcessResult.failure("WRONG_PHASE", "Not choosing a summon target")

    if (x, y) not in legal_targets(state, summoning.player_index):
        return ProcessResult.failure(
            "ILLEGAL_TARGET", f"({x},{y}) is not next to your leader"
        )

    target = Position(x=x, y=y, z=SUMMON_Z)
    new_state = state.model_copy(
        update={
            "interaction": summoning.model_copy(
                update={"phase": SummonPhase.CARD, "target_tile": target}
            ),
            "cursor": Cursor(x=x, y=y),
            "show_hand": True,
            "hand_selected_index": 0,
        }
    )
    logger.debug("Summon target chosen: (%d,%d)", x, y)
    return ProcessResult.ok(
        new_state,
        [
            SummonTargetChosen(player_index=summoning.player_index, target=target),
            CursorMoved(x=x, y=y),
            HandToggled(show_hand=True),
            HandIndexChanged(index=0),
        ],
    )


def select_card(state: GameState, card_id: int | None = None) -> ProcessResult:
    """Pick the card to summon, by id or by the highlighted hand index."""
    summoning = state.summoning
    if summoning is None or summoning.phase != SummonPhase.CARD:
        return ProcessResult.failure("WRONG_PHASE", "Not choosing a card")

    hand = hand_cards(state, summoning.player_index)
    if card_id is not None:
        index = next((i for i, c in enumerate(hand) if c.id == card_id), -1)
    else:
        index = state.hand_selected_index

    if not 0 <= index < len(hand):
        return ProcessResult.failure("CARD_NOT_IN_HAND", "No such card in hand")

    chosen = hand[index]
    new_state = state.model_copy(
        update={
            "interaction": summoning.model_copy(
                update={"phase": SummonPhase.CONFIRM, "selected_card_id": chosen.id}
            ),
            "show_hand": False,
            "hand_selected_index": index,
        }
    )
    logger.debug("Summon card chosen: card_id=%d", chosen.id)
    return ProcessResult.ok(
        new_state,
        [
            SummonCardChosen(player_index=summoning.player_index, card_id=chosen.id),
            HandToggled(show_hand=False),
        ],
    )


def confirm_summon(state: GameState) -> ProcessResult:
    """Move the chosen card from hand to the board.

    New summons always enter face down and in attack stance.
    """
    summoning = state.summoning
    if summoning is None or summoning.phase != SummonPhase.CONFIRM:
        return ProcessResult.failure("WRONG_PHASE", "Nothing to confirm")

    card_id, target = summoning.selected_card_id, summoning.target_tile
    if card_id is None or target is None:
        return ProcessResult.failure("INCOMPLETE_SUMMON", "Target and card are both required")

    player_index = summoning.player_index
    if not is_players_turn(state, player_index):
        return ProcessResult.failure("NOT_YOUR_TURN", "It's not your turn")

    player = state.players[player_index]
    if card_id not in player.hand:
        return ProcessResult.failure("CARD_NOT_IN_HAND", f"Card {card_id} is not in hand")

    card = next((c for c in player.all_cards if c.id == card_id), None)
    if card is None:
        logger.error("Hand card %d has no definition for player_index=%d", card_id, player_index)
        return ProcessResult.failure("CARD_NOT_IN_HAND", f"Card {card_id} is unknown")

    if any(c.id == card_id for c in state.cards):
        logger.warning("Summon would duplicate card-%d on the board", card_id)
        return ProcessResult.failure("DUPLICATE_CARD", f"Card {card_id} is already in play")

    hand = list(player.hand)
    hand.remove(card_id)
    updated_player = player.model_copy(
        update={"hand": hand, "cards_in_play": [*player.cards_in_play, card_id]}
    )
    summoned: Card = card.model_copy(
        update={
            "position": target,
            "owner": player.owner,
            "is_face_down": True,
            "is_defense_mode": False,
        }
    )

    cursor = Cursor(x=target.x, y=target.y)
    placed = add_card(update_piece(state, updated_player), summoned)
    new_state = placed.model_copy(
        update={
            "interaction": IdleState(),
            "cursor": cursor,
            "selected_piece": None,
            "show_hand": False,
            "hand_selected_index": -1,
        }
    )
    logger.info(
        "Card summoned: card_id=%d, player_index=%d, at=(%d,%d)",
        card_id,
        player_index,
        target.x,
        target.y,
    )
    return ProcessResult.ok(
        new_state,
        [
            CardSummoned(player_index=player_index, card_id=card_id, position=target),
            CursorMoved(x=cursor.x, y=cursor.y),
        ],
    )


def step_back(state: GameState) -> ProcessResult:
    """Undo the most recent summoning decision."""
    summoning = state.summoning
    if summoning is None:
        return ProcessResult.failure("NOT_SUMMONING", "No summon in progress")

    if summoning.phase == SummonPhase.CONFIRM:
        new_state = state.model_copy(
            update={
                "interaction": summoning.model_copy(
                    update={"phase": SummonPhase.CARD, "selected_card_id": None}
                ),
                "show_hand": True,
                "hand_selected_index": max(state.hand_selected_index, 0),
            }
        )
        return ProcessResult.ok(
            new_state,
            [
                SummonStepBack(from_phase=SummonPhase.CONFIRM, to_phase=SummonPhase.CARD),
                HandToggled(show_hand=True),
            ],
        )

    if summoning.phase == SummonPhase.CARD:
        new_state = state.model_copy(
            update={
                # target_tile stays so the earlier choice survives a round trip
                "interaction": summoning.model_copy(
                    update={"phase": SummonPhase.TARGET, "selected_card_id": None}
                ),
                "show_hand": False,
                "hand_selected_index": -1,
            }
        )
        return ProcessResult.ok(
            new_state,
            [
                SummonStepBack(from_phase=SummonPhase.CARD, to_phase=SummonPhase.TARGET),
                HandToggled(show_hand=False),
            ],
        )

    new_state = state.model_copy(
        update={
            "interaction": IdleState(),
            "show_hand": False,
            "hand_selected_index": -1,
        }
    )
    logger.info("Summon cancelled: player_index=%d", summoning.player_index)
    return ProcessResult.ok(new_state, [SummonCancelled(player_index=summoning.player_index)])
