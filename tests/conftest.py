"""Shared fixtures for game engine tests."""

import pytest

from duelboard.schemas.game_engine import (
    BoardSide,
    Card,
    Cursor,
    GameState,
    Owner,
    Player,
    Position,
    TurnState,
)
from duelboard.services.game.engine.board import PLAYER_BASE_Z, SUMMON_Z, generate_tiles

# Seats
SOUTH = 0
NORTH = 1

# Fixed seed so tile layouts are reproducible
TILE_SEED = 7


def create_card(
    card_id: int,
    x: int = 0,
    y: int = 0,
    owner: Owner = Owner.PLAYER,
    is_face_down: bool = True,
    is_defense_mode: bool = False,
) -> Card:
    """Helper to create a card standing on the board."""
    return Card(
        id=card_id,
        name=f"Card {card_id}",
        position=Position(x=x, y=y, z=SUMMON_Z),
        owner=owner,
        attack=1000 + card_id,
        defense=900 + card_id,
        level=4,
        is_face_down=is_face_down,
        is_defense_mode=is_defense_mode,
    )


def create_player(
    player_id: int,
    owner: Owner,
    board_side: BoardSide,
    x: int,
    y: int,
    all_cards: list[Card] | None = None,
    hand: list[int] | None = None,
) -> Player:
    """Helper to create a leader."""
    return Player(
        id=player_id,
        name=f"Player {player_id}",
        position=Position(x=x, y=y, z=PLAYER_BASE_Z),
        owner=owner,
        board_side=board_side,
        all_cards=all_cards or [],
        hand=hand or [],
    )


def south_library() -> list[Card]:
    """Cards 6-10, held off the board by the south leader."""
    return [create_card(card_id) for card_id in range(6, 11)]


@pytest.fixture
def south_leader() -> Player:
    """South leader at (0,-5) holding cards 6, 7 and 8."""
    return create_player(
        1,
        Owner.PLAYER,
        BoardSide.SOUTH,
        0,
        -5,
        all_cards=south_library(),
        hand=[6, 7, 8],
    )


@pytest.fixture
def north_leader() -> Player:
    """North leader at (0,5) holding card 20."""
    return create_player(
        2,
        Owner.OPPONENT,
        BoardSide.NORTH,
        0,
        5,
        all_cards=[create_card(20, owner=Owner.OPPONENT)],
        hand=[20],
    )


@pytest.fixture
def board_cards() -> list[Card]:
    """Cards already in play.

    - card-1: south, face down, attack, at (1,-5) (shares its id with player-1)
    - card-2: south, face up, attack, at (-2,0)
    - card-3: south, face down, defense, at (3,-3)
    - card-11: north, face down, attack, at (0,4)
    """
    return [
        create_card(1, 1, -5),
        create_card(2, -2, 0, is_face_down=False),
        create_card(3, 3, -3, is_defense_mode=True),
        create_card(11, 0, 4, owner=Owner.OPPONENT),
    ]


@pytest.fixture
def game_south_turn(
    south_leader: Player, north_leader: Player, board_cards: list[Card]
) -> GameState:
    """Two-seat game on an 11x11 board with the south seat to act."""
    return GameState(
        board_size=11,
        cards=board_cards,
        players=[south_leader, north_leader],
        tiles=generate_tiles(11, TILE_SEED),
        turn_state=TurnState(turn_owner_index=SOUTH),
        cursor=Cursor(x=0, y=-5),
    )


@pytest.fixture
def game_north_turn(game_south_turn: GameState) -> GameState:
    """Same board with the north seat to act."""
    return game_south_turn.model_copy(
        update={"turn_state": TurnState(turn_owner_index=NORTH), "cursor": Cursor(x=0, y=5)}
    )
