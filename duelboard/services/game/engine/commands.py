"""Game command types - discrete player intents separated from game state."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from duelboard.schemas.game_engine import Cursor, PieceRef, Tile

DirectionName = Literal["up", "down", "left", "right"]


class SelectCommand(BaseModel):
    """Select, confirm or commit, depending on what is active.

    With no arguments the board cursor is the target.
    """

    command_type: Literal["select"] = "select"
    piece: PieceRef | None = Field(None, description="Piece that was clicked")
    coord: Cursor | None = Field(None, description="Board square that was clicked")
    tile: Tile | None = Field(None, description="Tile that was clicked")


class CancelCommand(BaseModel):
    """Back out of the current step."""

    command_type: Literal["cancel"] = "cancel"


class MoveCursorCommand(BaseModel):
    """Move the board cursor, or the hand index while the hand is open."""

    command_type: Literal["move_cursor"] = "move_cursor"
    direction: DirectionName


class MovePieceCommand(BaseModel):
    """Nudge the staged piece one square from where it currently stands."""

    command_type: Literal["move_piece"] = "move_piece"
    direction: DirectionName


class FlipCommand(BaseModel):
    command_type: Literal["flip"] = "flip"


class ReorientCommand(BaseModel):
    """Toggle the staged card between attack and defense stance."""

    command_type: Literal["reorient"] = "reorient"


class StartSummonCommand(BaseModel):
    command_type: Literal["start_summon"] = "start_summon"


class ToggleDetailsCommand(BaseModel):
    command_type: Literal["toggle_details"] = "toggle_details"


class ToggleHandCommand(BaseModel):
    """Open or close the hand for browsing outside of a summon."""

    command_type: Literal["toggle_hand"] = "toggle_hand"


# Union type for all game commands
GameCommand = Annotated[
    SelectCommand
    | CancelCommand
    | MoveCursorCommand
    | MovePieceCommand
    | FlipCommand
    | ReorientCommand
    | StartSummonCommand
    | ToggleDetailsCommand
    | ToggleHandCommand,
    Field(discriminator="command_type"),
]

_COMMAND_TYPES: dict[str, type[BaseModel]] = {
    "select": SelectCommand,
    "cancel": CancelCommand,
    "move_cursor": MoveCursorCommand,
    "move_piece": MovePieceCommand,
    "flip": FlipCommand,
    "reorient": ReorientCommand,
    "start_summon": StartSummonCommand,
    "toggle_details": ToggleDetailsCommand,
    "toggle_hand": ToggleHandCommand,
}


def build_command_from_payload(payload: dict) -> GameCommand:
    """Build a typed command from a raw payload dict.

    Args:
        payload: Dict with 'command_type' key and command-specific fields.

    Returns:
        The appropriate GameCommand subtype.

    Raises:
        ValueError: If command_type is missing or unknown.
        pydantic.ValidationError: If the fields do not match the command.
    """
    command_type = payload.get("command_type")
    command_cls = _COMMAND_TYPES.get(command_type) if command_type else None
    if command_cls is None:
        raise ValueError(f"Unknown command type: {command_type}")
    return command_cls.model_validate(payload)
