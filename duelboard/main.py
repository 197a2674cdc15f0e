import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from duelboard.config import get_settings
from duelboard.routers import game, ws
from duelboard.services.game.session import get_game_session
from duelboard.services.websocket.manager import get_connection_manager

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Duel Board API")
    logger.debug("Debug mode: %s", settings.DEBUG)

    # Seed the game before the first connection arrives
    session = get_game_session()
    logger.info("Game session ready with %d players", len(session.state.players))

    connection_manager = get_connection_manager()
    await connection_manager.start_cleanup_task()
    logger.info("WebSocket connection manager initialized")

    yield

    logger.info("Shutting down Duel Board API")
    await connection_manager.stop_cleanup_task()
    await connection_manager.close_all_connections()
    logger.info("WebSocket cleanup complete")


app = FastAPI(
    title="Duel Board API",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
logger.debug("CORS configured with origins: %s", settings.CORS_ORIGINS)

app.include_router(game.router, prefix="/api/v1")
app.include_router(ws.router, prefix="/api/v1")
logger.debug("Routers registered: /api/v1/game, /api/v1/ws")


@app.get("/")
def root():
    return {"message": "Duel Board API"}


@app.get("/health")
def health():
    return {"status": "healthy"}
