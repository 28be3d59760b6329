# app/schemas/lobby_schema.py

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from config.settings import settings
from models.lobby import Lobby


# ================ Request Models ================

class CreateLobbyRequest(BaseModel):
    """Request to create a new lobby; the caller becomes its leader"""
    lobby_name: str = Field(..., min_length=1, max_length=100)
    number_of_players: int = Field(
        ..., ge=settings.LOBBY_MIN_PLAYERS, description="Target number of players"
    )
    voice_chat: bool = False
    is_private: bool = False

    @field_validator('lobby_name')
    @classmethod
    def validate_lobby_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Lobby name cannot be empty or only whitespace")
        return v


class UpdateLobbyRequest(BaseModel):
    """
    Leader-only lobby update.

    Every field left as None is unchanged. ``number_of_players`` is range
    checked by the service so a too-small value surfaces as a conflict.
    """
    token: str
    number_of_players: Optional[int] = None
    number_of_bots: Optional[int] = Field(default=None, ge=0)
    voice_chat: Optional[bool] = None
    users_to_kick: List[int] = Field(default_factory=list)


class UpdateLobbyBody(BaseModel):
    """HTTP body for a lobby update, the token comes from the Authorization header"""
    number_of_players: Optional[int] = None
    number_of_bots: Optional[int] = Field(default=None, ge=0)
    voice_chat: Optional[bool] = None
    users_to_kick: List[int] = Field(default_factory=list)

    def with_token(self, token: str) -> UpdateLobbyRequest:
        return UpdateLobbyRequest(token=token, **self.model_dump())


class JoinLobbyRequest(BaseModel):
    """Request to join a lobby; private lobbies need their key"""
    private_key: Optional[str] = None

    @field_validator('private_key')
    @classmethod
    def normalize_key(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip().upper()


# ================ Response Models ================

class LobbyResponse(BaseModel):
    """Lobby as returned to clients; the leader token is never exposed"""
    lobby_id: int
    lobby_name: str
    number_of_players: int
    current_players: int
    voice_chat: bool
    user_id: int
    number_of_bots: Optional[int] = None
    lobby_score: Optional[int] = None
    is_private: bool
    private_key: Optional[str] = None
    users_in_lobby: List[int]
    created_at: datetime

    @classmethod
    def from_lobby(cls, lobby: Lobby, viewer_id: Optional[int] = None) -> "LobbyResponse":
        # Only the leader gets to see (and share) the private key
        return cls(
            lobby_id=lobby.lobby_id,
            lobby_name=lobby.lobby_name,
            number_of_players=lobby.number_of_players,
            current_players=lobby.current_players,
            voice_chat=lobby.voice_chat,
            user_id=lobby.user_id,
            number_of_bots=lobby.number_of_bots,
            lobby_score=lobby.lobby_score,
            is_private=lobby.is_private,
            private_key=lobby.private_key if viewer_id == lobby.user_id else None,
            users_in_lobby=sorted(lobby.users_in_lobby),
            created_at=lobby.created_at,
        )


class PublicLobbiesResponse(BaseModel):
    lobbies: List[LobbyResponse]
    total: int


class LobbyLeftResponse(BaseModel):
    lobby_closed: bool
    message: str = "Left lobby successfully"
