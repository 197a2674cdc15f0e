import logging
import sys
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Board
    BOARD_SIZE: int = 11
    INITIAL_HAND_SIZE: int = 5
    TILE_SEED: int | None = None

    # App config
    CORS_ORIGINS: list[str] = ["http://localhost:5173"]
    DEBUG: bool = False

    # WebSocket config
    WS_MAX_MESSAGE_SIZE: int = 64 * 1024
    WS_MAX_MESSAGES_PER_SECOND: int = 20
    WS_HEARTBEAT_INTERVAL: int = 30
    WS_CONNECTION_TIMEOUT: int = 90

    @field_validator("BOARD_SIZE")
    @classmethod
    def validate_board_size(cls, v: int) -> int:
        if v < 3 or v % 2 == 0:
            raise ValueError("BOARD_SIZE must be an odd number of at least 3")
        return v

    @field_validator("INITIAL_HAND_SIZE")
    @classmethod
    def validate_hand_size(cls, v: int) -> int:
        if v < 0:
            raise ValueError("INITIAL_HAND_SIZE cannot be negative")
        return v


def configure_logging(debug: bool = False) -> None:
    """Configure logging for the application."""
    log_level = logging.DEBUG if debug else logging.INFO
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("websockets").setLevel(logging.WARNING)


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    configure_logging(settings.DEBUG)
    logger.info("Settings loaded successfully")
    logger.debug("Board size: %d, initial hand: %d", settings.BOARD_SIZE, settings.INITIAL_HAND_SIZE)
    return settings
