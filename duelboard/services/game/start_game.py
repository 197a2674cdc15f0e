import logging

from duelboard.schemas.game_engine import (
    BoardSide,
    Cursor,
    GameSettings,
    GameState,
    Player,
    PlayerSetup,
    Position,
    TurnState,
)

from .engine.board import PLAYER_BASE_Z, board_max, generate_tiles

logger = logging.getLogger(__name__)


def validate_game_settings(game_settings: GameSettings) -> None:
    """Validate game settings before initializing a game."""
    if len(game_settings.players) < 2:
        raise ValueError("A minimum of 2 players is required to start the game.")
    if game_settings.board_size < 3 or game_settings.board_size % 2 == 0:
        raise ValueError("Board size must be an odd number of at least 3.")
    if game_settings.initial_hand_size < 0:
        raise ValueError("Initial hand size cannot be negative.")
    if sum(1 for p in game_settings.players if p.first_move) > 1:
        raise ValueError("At most one player can move first.")

    # Ensure each player has a unique name, owner and side, and card ids never collide
    player_names: set[str] = set()
    owners: set[str] = set()
    sides: set[str] = set()
    card_ids: set[int] = set()
    for player in game_settings.players:
        if player.name in player_names:
            raise ValueError(f"Duplicate player name found: {player.name}")
        if player.owner in owners:
            raise ValueError(f"Duplicate owner found: {player.owner.value}")
        if player.board_side in sides:
            raise ValueError(f"Duplicate board side found: {player.board_side.value}")
        for card in player.deck:
            if card.id in card_ids:
                raise ValueError(f"Duplicate card ID found: {card.id}")
            card_ids.add(card.id)
        player_names.add(player.name)
        owners.add(player.owner)
        sides.add(player.board_side)


def _starting_position(board_side: BoardSide, board_size: int) -> Position:
    """Leaders start at the middle of their own edge."""
    edge = board_max(board_size)
    x, y = {
        BoardSide.NORTH: (0, edge),
        BoardSide.SOUTH: (0, -edge),
        BoardSide.EAST: (edge, 0),
        BoardSide.WEST: (-edge, 0),
    }[board_side]
    return Position(x=x, y=y, z=PLAYER_BASE_Z)


def _initialize_player(
    index: int, setup: PlayerSetup, game_settings: GameSettings
) -> Player:
    """Build a leader and deal its opening hand off the top of the deck."""
    all_cards = [card.model_copy(update={"owner": setup.owner}) for card in setup.deck]
    card_ids = [card.id for card in all_cards]
    hand_size = game_settings.initial_hand_size

    return Player(
        id=index + 1,
        name=setup.name,
        clan=setup.clan,
        position=_starting_position(setup.board_side, game_settings.board_size),
        owner=setup.owner,
        board_side=setup.board_side,
        first_move=setup.first_move,
        all_cards=all_cards,
        hand=card_ids[:hand_size],
        deck=card_ids[hand_size:],
    )


def initialize_game(game_settings: GameSettings) -> GameState:
    """
    Validate game settings and return an initialized GameState.

    Args:
        game_settings: Players with their decks, board size, opening hand
                      size and an optional terrain seed.

    Returns:
        An initialized GameState with the first mover holding the turn and
        the cursor on that player's leader.

    Raises:
        ValueError: If game settings are invalid.
    """
    validate_game_settings(game_settings)

    players = [
        _initialize_player(index, setup, game_settings)
        for index, setup in enumerate(game_settings.players)
    ]
    first_index = next((i for i, p in enumerate(players) if p.first_move), 0)
    leader = players[first_index]

    logger.info(
        "Game initialized: players=%d, board_size=%d, first_index=%d",
        len(players),
        game_settings.board_size,
        first_index,
    )

    return GameState(
        board_size=game_settings.board_size,
        cards=[],
        players=players,
        tiles=generate_tiles(game_settings.board_size, game_settings.tile_seed),
        turn_state=TurnState(turn_owner_index=first_index),
        cursor=Cursor(x=leader.position.x, y=leader.position.y),
    )
