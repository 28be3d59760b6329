# app/api/routes/lobby.py

from fastapi import APIRouter, Depends, status
from models.lobby import Lobby
from models.user import User
from api.dependencies import current_user, get_lobby_service
from services.lobby_service import LobbyService
from schemas.lobby_schema import (
    CreateLobbyRequest,
    UpdateLobbyBody,
    JoinLobbyRequest,
    LobbyResponse,
    PublicLobbiesResponse,
    LobbyLeftResponse,
)
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/lobbies", tags=["lobby"])


@router.post("", response_model=LobbyResponse, status_code=status.HTTP_201_CREATED)
async def create_lobby(
    request: CreateLobbyRequest,
    user: User = Depends(current_user),
    service: LobbyService = Depends(get_lobby_service)
):
    """
    Create a new lobby led by the caller

    Private lobbies get a generated key, returned only to the leader.
    """
    lobby = await service.create_lobby(
        Lobby(
            lobby_name=request.lobby_name,
            number_of_players=request.number_of_players,
            voice_chat=request.voice_chat,
            is_private=request.is_private,
            user_id=user.id,
            user_token=user.token,
        )
    )
    return LobbyResponse.from_lobby(lobby, viewer_id=user.id)


@router.get("", response_model=PublicLobbiesResponse)
async def get_public_lobbies(
    user: User = Depends(current_user),
    service: LobbyService = Depends(get_lobby_service)
):
    lobbies = await service.get_public_lobbies()
    return PublicLobbiesResponse(
        lobbies=[LobbyResponse.from_lobby(lobby, viewer_id=user.id) for lobby in lobbies],
        total=len(lobbies)
    )


@router.get("/{lobby_id}", response_model=LobbyResponse)
async def get_lobby(
    lobby_id: int,
    user: User = Depends(current_user),
    service: LobbyService = Depends(get_lobby_service)
):
    lobby = await service.get_lobby(lobby_id)
    return LobbyResponse.from_lobby(lobby, viewer_id=user.id)


@router.put("/{lobby_id}", response_model=LobbyResponse)
async def update_lobby(
    lobby_id: int,
    body: UpdateLobbyBody,
    user: User = Depends(current_user),
    service: LobbyService = Depends(get_lobby_service)
):
    """
    Update player/bot counts and voice chat, or kick members (leader only)
    """
    lobby = await service.get_lobby(lobby_id)
    lobby = await service.update_lobby(lobby, body.with_token(user.token))
    return LobbyResponse.from_lobby(lobby, viewer_id=user.id)


@router.post("/{lobby_id}/join", response_model=LobbyResponse)
async def join_lobby(
    lobby_id: int,
    request: JoinLobbyRequest,
    user: User = Depends(current_user),
    service: LobbyService = Depends(get_lobby_service)
):
    lobby = await service.join_lobby(lobby_id, user.id, request.private_key)
    return LobbyResponse.from_lobby(lobby, viewer_id=user.id)


@router.post("/{lobby_id}/leave", response_model=LobbyLeftResponse)
async def leave_lobby(
    lobby_id: int,
    user: User = Depends(current_user),
    service: LobbyService = Depends(get_lobby_service)
):
    lobby = await service.leave_lobby(lobby_id, user.id)
    if lobby is None:
        return LobbyLeftResponse(lobby_closed=True, message="Lobby closed")
    return LobbyLeftResponse(lobby_closed=False)


@router.delete("/{lobby_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_lobby(
    lobby_id: int,
    user: User = Depends(current_user),
    service: LobbyService = Depends(get_lobby_service)
):
    await service.delete_lobby(lobby_id, user.token)
    logger.debug(f"Lobby {lobby_id} deleted via API by user {user.id}")
