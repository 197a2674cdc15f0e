from typing import Any

from pydantic import BaseModel, Field, model_validator

from .game_engine import ReadModel


class CommandRequest(BaseModel):
    """A command, or a raw key press, issued on behalf of a seat."""

    seat: int = Field(..., ge=0, description="Index of the acting player")
    command: dict[str, Any] | None = Field(
        None, description="Command dict with a 'command_type' key"
    )
    key: str | None = Field(None, min_length=1, description="Raw key name")

    @model_validator(mode="after")
    def exactly_one_input(self) -> "CommandRequest":
        if (self.command is None) == (self.key is None):
            raise ValueError("Provide exactly one of 'command' or 'key'")
        return self


class CommandResponse(BaseModel):
    """Outcome of a command. An ignored command is not an HTTP error."""

    success: bool
    error_code: str | None = None
    error_message: str | None = None
    events: list[dict[str, Any]] = []
    state: ReadModel | None = None


class ResetRequest(BaseModel):
    tile_seed: int | None = None
