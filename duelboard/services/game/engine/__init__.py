"""Game engine module - pure functional game logic.

This module provides the core game engine with:
- Command types for discrete player inputs
- Event types for WebSocket broadcasts
- ProcessResult pattern for declined commands
- Staging and summoning machines behind one dispatcher

Usage:
    from duelboard.services.game.engine import (
        process_command,
        ProcessResult,
        SelectCommand,
        StartSummonCommand,
    )

    result = process_command(state, StartSummonCommand(), player_index)

    if result.success:
        new_state = result.state
        events = result.events  # Broadcast these via WebSocket
    else:
        # Declined; keep the current state
        print(f"Declined: {result.error_code} - {result.error_message}")
"""

# Commands - discrete player inputs
from .commands import (
    CancelCommand,
    FlipCommand,
    GameCommand,
    MoveCursorCommand,
    MovePieceCommand,
    ReorientCommand,
    SelectCommand,
    StartSummonCommand,
    ToggleDetailsCommand,
    ToggleHandCommand,
    build_command_from_payload,
)

# Events - for WebSocket broadcasts
from .events import (
    ActionCommitted,
    AnyGameEvent,
    CardFlipped,
    CardReoriented,
    CardSummoned,
    CursorMoved,
    GameEvent,
    PieceMoved,
    PieceSelected,
    SelectionCleared,
    StagingCancelled,
    StagingStarted,
    SummonCancelled,
    SummonStarted,
)

# Keyboard input
from .input_map import map_key_to_command

# Main processing
from .process import process_command
from .read_model import build_read_model

# Result types
from .validation import ProcessResult, ValidationResult, validate_command

__all__ = [
    # Commands
    "GameCommand",
    "SelectCommand",
    "CancelCommand",
    "MoveCursorCommand",
    "MovePieceCommand",
    "FlipCommand",
    "ReorientCommand",
    "StartSummonCommand",
    "ToggleDetailsCommand",
    "ToggleHandCommand",
    "build_command_from_payload",
    # Events
    "GameEvent",
    "AnyGameEvent",
    "PieceSelected",
    "SelectionCleared",
    "CursorMoved",
    "StagingStarted",
    "PieceMoved",
    "CardFlipped",
    "CardReoriented",
    "ActionCommitted",
    "StagingCancelled",
    "SummonStarted",
    "CardSummoned",
    "SummonCancelled",
    # Processing
    "process_command",
    "build_read_model",
    "map_key_to_command",
    # Results
    "ProcessResult",
    "ValidationResult",
    "validate_command",
]
