import asyncio
import logging

from duelboard.config import get_settings
from duelboard.schemas.game_engine import GameSettings, GameState, KeyBindings, ReadModel

from .catalog import demo_game_settings
from .engine import (
    GameCommand,
    ProcessResult,
    build_read_model,
    map_key_to_command,
    process_command,
)
from .start_game import initialize_game

logger = logging.getLogger(__name__)


class GameSession:
    """The one owner of a running game's state.

    Every command goes through dispatch(), which holds a single lock for the
    whole read-process-swap so commands apply strictly one after another.
    The stored state is only replaced when a command succeeds.
    """

    def __init__(self, state: GameState, key_bindings: KeyBindings | None = None):
        self._state = state
        self._lock = asyncio.Lock()
        self.key_bindings = key_bindings or KeyBindings()

    @classmethod
    def from_settings(cls, game_settings: GameSettings) -> "GameSession":
        return cls(initialize_game(game_settings))

    @property
    def state(self) -> GameState:
        return self._state

    async def dispatch(self, command: GameCommand, player_index: int) -> ProcessResult:
        """Apply a command for a seat and keep the result if it succeeded."""
        async with self._lock:
            return self._apply(command, player_index)

    async def dispatch_key(self, key: str, player_index: int) -> ProcessResult | None:
        """Map a key press and apply it. Returns None for keys with no meaning."""
        async with self._lock:
            command = map_key_to_command(key, self._state, player_index, self.key_bindings)
            if command is None:
                return None
            return self._apply(command, player_index)

    def _apply(self, command: GameCommand, player_index: int) -> ProcessResult:
        result = process_command(self._state, command, player_index)
        if result.success and result.state is not None:
            self._state = result.state
        else:
            logger.debug(
                "Session kept state: player_index=%d, error=%s",
                player_index,
                result.error_code,
            )
        return result

    async def reset(self, game_settings: GameSettings) -> GameState:
        """Throw the current game away and seed a new one.

        Raises:
            ValueError: If game settings are invalid.
        """
        state = initialize_game(game_settings)
        async with self._lock:
            self._state = state
        logger.info("Game session reset")
        return state

    def snapshot(self, player_index: int) -> ReadModel:
        return build_read_model(self._state, player_index)


# Global session instance (initialized in lifespan)
_game_session: GameSession | None = None


def get_game_session() -> GameSession:
    """Get the global GameSession, seeding the demo game on first use."""
    global _game_session
    if _game_session is None:
        settings = get_settings()
        _game_session = GameSession.from_settings(
            demo_game_settings(
                board_size=settings.BOARD_SIZE,
                initial_hand_size=settings.INITIAL_HAND_SIZE,
                tile_seed=settings.TILE_SEED,
            )
        )
    return _game_session


def set_game_session(session: GameSession | None) -> None:
    """Set the global GameSession instance."""
    global _game_session
    _game_session = session
