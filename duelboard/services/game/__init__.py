"""Game service module.

Provides:
- Game initialization (start_game.py)
- Demo card catalog (catalog.py)
- The owning session for a running game (session.py)
- Game engine processing (engine/)
"""

# Re-export from engine for convenience
from .catalog import demo_game_settings
from .engine import (
    GameCommand,
    ProcessResult,
    build_command_from_payload,
    build_read_model,
    map_key_to_command,
    process_command,
)
from .session import GameSession, get_game_session, set_game_session
from .start_game import initialize_game, validate_game_settings

__all__ = [
    # Initialization
    "initialize_game",
    "validate_game_settings",
    "demo_game_settings",
    # Session
    "GameSession",
    "get_game_session",
    "set_game_session",
    # Engine
    "GameCommand",
    "ProcessResult",
    "process_command",
    "build_command_from_payload",
    "build_read_model",
    "map_key_to_command",
]
