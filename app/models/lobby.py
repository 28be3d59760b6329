# app/models/lobby.py

from datetime import datetime, UTC
from typing import Optional, Set
from pydantic import BaseModel, Field


class Lobby(BaseModel):
    """
    Game lobby as stored in Redis.

    ``users_in_lobby`` holds user ids only; user data lives in the ``users``
    table. ``version`` is bumped by the repository on every save and is 0 for
    a lobby that was never persisted.
    """
    lobby_id: Optional[int] = None
    lobby_name: str = Field(..., min_length=1)
    number_of_players: int
    voice_chat: bool = False
    user_id: int  # leader
    user_token: str  # leader token, authorizes updates
    number_of_bots: Optional[int] = None
    lobby_score: Optional[int] = None
    is_private: bool = False
    private_key: Optional[str] = None
    users_in_lobby: Set[int] = Field(default_factory=set)
    version: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def current_players(self) -> int:
        return len(self.users_in_lobby)

    def is_leader(self, user_id: int) -> bool:
        return self.user_id == user_id

    def is_member(self, user_id: int) -> bool:
        return user_id in self.users_in_lobby
