"""Game event types - emitted during state transitions.

Events describe what a command changed, enabling:
- Incremental view updates (only redraw what changed)
- Animations (know exactly which piece moved or flipped)
- Logging of committed actions
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from duelboard.schemas.game_engine import DetailsView, PieceRef, Position, SummonPhase


class GameEvent(BaseModel):
    """Base class for all game events."""

    event_type: str
    seq: int = 0  # Sequence number assigned during processing


# Selection and cursor
class PieceSelected(GameEvent):
    """A piece became the selected piece."""

    event_type: Literal["piece_selected"] = "piece_selected"
    piece: PieceRef
    view_only: bool = Field(..., description="True when the piece is only inspected")


class SelectionCleared(GameEvent):
    event_type: Literal["selection_cleared"] = "selection_cleared"


class TileSelected(GameEvent):
    event_type: Literal["tile_selected"] = "tile_selected"
    position: Position


class CursorMoved(GameEvent):
    event_type: Literal["cursor_moved"] = "cursor_moved"
    x: int
    y: int


class HandIndexChanged(GameEvent):
    event_type: Literal["hand_index_changed"] = "hand_index_changed"
    index: int


class HandToggled(GameEvent):
    event_type: Literal["hand_toggled"] = "hand_toggled"
    show_hand: bool


class DetailsOpened(GameEvent):
    event_type: Literal["details_opened"] = "details_opened"
    view: DetailsView


class DetailsClosed(GameEvent):
    event_type: Literal["details_closed"] = "details_closed"


# Staging
class StagingStarted(GameEvent):
    """A piece was picked up for a provisional action."""

    event_type: Literal["staging_started"] = "staging_started"
    piece: PieceRef
    original_position: Position


class PieceMoved(GameEvent):
    event_type: Literal["piece_moved"] = "piece_moved"
    piece: PieceRef
    from_position: Position
    to_position: Position


class CardFlipped(GameEvent):
    event_type: Literal["card_flipped"] = "card_flipped"
    piece: PieceRef
    is_face_down: bool


class CardReoriented(GameEvent):
    event_type: Literal["card_reoriented"] = "card_reoriented"
    piece: PieceRef
    is_defense_mode: bool


class ActionCommitted(GameEvent):
    """A staged action became final; the piece has now acted this turn."""

    event_type: Literal["action_committed"] = "action_committed"
    piece: PieceRef
    has_moved: bool
    has_flipped: bool
    has_changed_position: bool


class StagingReleased(GameEvent):
    """Staging closed without any net change; the piece may still act."""

    event_type: Literal["staging_released"] = "staging_released"
    piece: PieceRef


class StagingCancelled(GameEvent):
    """Staged changes were reverted to the snapshot."""

    event_type: Literal["staging_cancelled"] = "staging_cancelled"
    piece: PieceRef
    restored_position: Position


# Summoning
class SummonStarted(GameEvent):
    event_type: Literal["summon_started"] = "summon_started"
    player_index: int


class SummonTargetChosen(GameEvent):
    event_type: Literal["summon_target_chosen"] = "summon_target_chosen"
    player_index: int
    target: Position


class SummonCardChosen(GameEvent):
    event_type: Literal["summon_card_chosen"] = "summon_card_chosen"
    player_index: int
    card_id: int


class CardSummoned(GameEvent):
    """A card left its owner's hand and entered the board face down."""

    event_type: Literal["card_summoned"] = "card_summoned"
    player_index: int
    card_id: int
    position: Position


class SummonStepBack(GameEvent):
    event_type: Literal["summon_step_back"] = "summon_step_back"
    from_phase: SummonPhase
    to_phase: SummonPhase


class SummonCancelled(GameEvent):
    event_type: Literal["summon_cancelled"] = "summon_cancelled"
    player_index: int


# Union type for all events (discriminated by event_type)
AnyGameEvent = Annotated[
    PieceSelected
    | SelectionCleared
    | TileSelected
    | CursorMoved
    | HandIndexChanged
    | HandToggled
    | DetailsOpened
    | DetailsClosed
    | StagingStarted
    | PieceMoved
    | CardFlipped
    | CardReoriented
    | ActionCommitted
    | StagingReleased
    | StagingCancelled
    | SummonStarted
    | SummonTargetChosen
    | SummonCardChosen
    | CardSummoned
    | SummonStepBack
    | SummonCancelled,
    Field(discriminator="event_type"),
]
