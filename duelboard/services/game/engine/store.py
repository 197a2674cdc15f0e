"""Entity store operations over the card and player collections.

Every lookup is kind-qualified through PieceRef. The one id-only helper,
find_piece_by_id, returns every match so a caller can never silently pick a
card when it meant a player (or the reverse).
"""

import logging

from duelboard.schemas.game_engine import Card, GameState, PieceKind, PieceRef, Player

logger = logging.getLogger(__name__)


def find_piece(state: GameState, ref: PieceRef) -> Card | Player | None:
    """Find a piece by its (kind, id) identity."""
    if ref.kind == PieceKind.CARD:
        return next((c for c in state.cards if c.id == ref.id), None)
    return next((p for p in state.players if p.id == ref.id), None)


def find_piece_by_id(
    state: GameState, piece_id: int, kind: PieceKind | None = None
) -> list[Card | Player]:
    """Find pieces by bare id, optionally narrowed to one kind.

    Without a kind both collections are searched and all matches returned.
    """
    matches: list[Card | Player] = []
    if kind in (None, PieceKind.CARD):
        matches.extend(c for c in state.cards if c.id == piece_id)
    if kind in (None, PieceKind.PLAYER):
        matches.extend(p for p in state.players if p.id == piece_id)
    if kind is None and len(matches) > 1:
        logger.debug("Ambiguous id lookup: id=%d matched %d pieces", piece_id, len(matches))
    return matches


def update_piece(state: GameState, piece: Card | Player) -> GameState:
    """Replace the piece with the same (kind, id), leaving the rest untouched.

    A piece that is not in the store is ignored and the state returned as is.
    """
    if isinstance(piece, Card):
        if not any(c.id == piece.id for c in state.cards):
            logger.debug("update_piece miss: card-%d not in store", piece.id)
            return state
        cards = [piece if c.id == piece.id else c for c in state.cards]
        return state.model_copy(update={"cards": cards})

    if not any(p.id == piece.id for p in state.players):
        logger.debug("update_piece miss: player-%d not in store", piece.id)
        return state
    players = [piece if p.id == piece.id else p for p in state.players]
    return state.model_copy(update={"players": players})


def add_card(state: GameState, card: Card) -> GameState:
    """Put a card on the board, on top of anything already on its square."""
    return state.model_copy(update={"cards": [*state.cards, card]})


def pieces_at(state: GameState, x: int, y: int) -> list[Card | Player]:
    """All pieces standing on a square. Stacking is allowed, so there may be several."""
    on_square: list[Card | Player] = [
        c for c in state.cards if c.position.x == x and c.position.y == y
    ]
    on_square.extend(p for p in state.players if p.position.x == x and p.position.y == y)
    return on_square


def piece_at(state: GameState, x: int, y: int) -> Card | Player | None:
    """The topmost piece on a square: cards before leaders, later summons first."""
    cards = [c for c in state.cards if c.position.x == x and c.position.y == y]
    if cards:
        return cards[-1]
    return next((p for p in state.players if p.position.x == x and p.position.y == y), None)


def hand_cards(state: GameState, player_index: int) -> list[Card]:
    """Resolve a player's hand ids to card objects, in hand order."""
    if not 0 <= player_index < len(state.players):
        return []
    player = state.players[player_index]
    by_id = {c.id: c for c in player.all_cards}
    return [by_id[card_id] for card_id in player.hand if card_id in by_id]
