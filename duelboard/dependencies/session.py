from typing import Annotated

from fastapi import Depends

from duelboard.services.game.session import GameSession, get_game_session

CurrentSession = Annotated[GameSession, Depends(get_game_session)]
