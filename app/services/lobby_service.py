# app/services/lobby_service.py

import secrets
import string
from typing import Optional, List
from config.settings import settings
from exceptions.domain_exceptions import (
    NotFoundException,
    BadRequestException,
    UnauthorizedException,
    ForbiddenException,
    ConflictException,
)
from infrastructure.lobby_repository import LobbyRepository
from models.lobby import Lobby
from schemas.lobby_schema import UpdateLobbyRequest
import logging

logger = logging.getLogger(__name__)


class LobbyService:
    """Service enforcing lobby creation, update and membership rules"""

    PRIVATE_KEY_ALPHABET = string.ascii_uppercase + string.digits
    MAX_KEY_ATTEMPTS = 10

    def __init__(
        self,
        repository: LobbyRepository,
        min_players: Optional[int] = None,
        private_key_length: Optional[int] = None
    ):
        self.repository = repository
        self.min_players = min_players if min_players is not None else settings.LOBBY_MIN_PLAYERS
        self.private_key_length = private_key_length or settings.LOBBY_PRIVATE_KEY_LENGTH

    def _generate_private_key(self) -> str:
        return ''.join(secrets.choice(self.PRIVATE_KEY_ALPHABET) for _ in range(self.private_key_length))

    async def _generate_unique_private_key(self) -> str:
        for _ in range(self.MAX_KEY_ATTEMPTS):
            private_key = self._generate_private_key()
            if not await self.repository.private_key_exists(private_key):
                return private_key
        raise BadRequestException(message="Failed to generate unique private key")

    async def create_lobby(self, candidate: Lobby) -> Lobby:
        """
        Create a new lobby

        Args:
            candidate: Lobby with name, player count, voice chat, leader id/token
                and private flag already set

        Returns:
            The persisted lobby with its assigned id

        Raises:
            ConflictException: If the target player count is below the minimum
            BadRequestException: If no unused private key could be generated
        """
        if candidate.number_of_players < self.min_players:
            logger.warning(
                f"Rejected lobby '{candidate.lobby_name}' by user {candidate.user_id}: "
                f"number_of_players={candidate.number_of_players} below {self.min_players}"
            )
            raise ConflictException(
                message="Invalid number_of_players",
                details={
                    "number_of_players": candidate.number_of_players,
                    "min_players": self.min_players
                }
            )

        if candidate.is_private:
            candidate.private_key = await self._generate_unique_private_key()
        else:
            candidate.private_key = None

        candidate.number_of_bots = None
        candidate.users_in_lobby.add(candidate.user_id)

        lobby = await self.repository.save(candidate)

        logger.info(
            f"Lobby '{lobby.lobby_name}' ({lobby.lobby_id}) created by user {lobby.user_id}"
            + (" as private" if lobby.is_private else "")
        )
        return lobby

    async def get_lobby(self, lobby_id: int) -> Lobby:
        """
        Get a lobby by id

        Raises:
            NotFoundException: If the lobby does not exist
        """
        lobby = await self.repository.find_by_id(lobby_id)
        if lobby is None:
            raise NotFoundException(message="Lobby not found", details={"lobby_id": lobby_id})
        return lobby

    async def get_public_lobbies(self) -> List[Lobby]:
        """All non-private lobbies, newest first"""
        lobbies = [lobby for lobby in await self.repository.find_all() if not lobby.is_private]
        lobbies.sort(key=lambda lobby: lobby.created_at, reverse=True)
        return lobbies

    async def update_lobby(self, existing: Lobby, request: UpdateLobbyRequest) -> Lobby:
        """
        Apply a leader's update to a lobby

        Everything is validated before the lobby is touched, so a rejected
        request leaves it exactly as it was. Kicking the leader is silently
        skipped.

        Args:
            existing: Current lobby record
            request: Fields to change (None means unchanged) plus users to kick

        Returns:
            The saved lobby

        Raises:
            UnauthorizedException: If the request token is not the leader's
            ConflictException: If the player or bot count is not allowed
            StaleLobbyException: If the lobby changed since it was read
        """
        if request.token != existing.user_token:
            logger.warning(f"Rejected update of lobby {existing.lobby_id}: token does not match leader")
            raise UnauthorizedException(
                message="Only the lobby leader can update the lobby",
                details={"lobby_id": existing.lobby_id}
            )

        to_kick = {user_id for user_id in request.users_to_kick if not existing.is_leader(user_id)}
        remaining_members = existing.users_in_lobby - to_kick

        if request.number_of_players is not None:
            if request.number_of_players < self.min_players:
                logger.warning(
                    f"Rejected update of lobby {existing.lobby_id}: "
                    f"number_of_players={request.number_of_players} below {self.min_players}"
                )
                raise ConflictException(
                    message="Invalid number_of_players",
                    details={
                        "number_of_players": request.number_of_players,
                        "min_players": self.min_players
                    }
                )

            if request.number_of_players < len(remaining_members):
                raise ConflictException(
                    message="Cannot set number_of_players below current player count",
                    details={
                        "current_players": len(remaining_members),
                        "requested": request.number_of_players
                    }
                )

        effective_players = (
            request.number_of_players
            if request.number_of_players is not None
            else existing.number_of_players
        )

        effective_bots = (
            request.number_of_bots
            if request.number_of_bots is not None
            else existing.number_of_bots
        )

        if effective_bots is not None and effective_bots > effective_players:
            logger.warning(
                f"Rejected update of lobby {existing.lobby_id}: "
                f"{effective_bots} bots for {effective_players} players"
            )
            raise ConflictException(
                message="Too many bots for the number of players",
                details={
                    "number_of_bots": effective_bots,
                    "number_of_players": effective_players
                }
            )

        if request.number_of_players is not None:
            existing.number_of_players = request.number_of_players
        if request.number_of_bots is not None:
            existing.number_of_bots = request.number_of_bots
        if request.voice_chat is not None:
            existing.voice_chat = request.voice_chat

        for user_id in request.users_to_kick:
            if existing.is_leader(user_id):
                continue
            if existing.is_member(user_id):
                existing.users_in_lobby.discard(user_id)
                logger.info(f"User {user_id} kicked from lobby {existing.lobby_id}")

        lobby = await self.repository.save(existing)

        logger.info(
            f"Lobby {lobby.lobby_id} updated by leader {lobby.user_id}: "
            f"number_of_players={lobby.number_of_players}, number_of_bots={lobby.number_of_bots}, "
            f"voice_chat={lobby.voice_chat}, members={len(lobby.users_in_lobby)}"
        )
        return lobby

    async def join_lobby(self, lobby_id: int, user_id: int, private_key: Optional[str] = None) -> Lobby:
        """
        Add a user to a lobby

        Raises:
            NotFoundException: If the lobby does not exist
            ForbiddenException: If the lobby is private and the key is wrong
            BadRequestException: If the user is already a member
            ConflictException: If the lobby is full
        """
        lobby = await self.get_lobby(lobby_id)

        if lobby.is_private and (not private_key or not secrets.compare_digest(private_key.encode(), lobby.private_key.encode())):
            raise ForbiddenException(message="Invalid private key", details={"lobby_id": lobby_id})

        if lobby.is_member(user_id):
            raise BadRequestException(message="You are already in this lobby")

        if lobby.current_players >= lobby.number_of_players:
            raise ConflictException(
                message="Lobby is full",
                details={"number_of_players": lobby.number_of_players}
            )

        lobby.users_in_lobby.add(user_id)
        lobby = await self.repository.save(lobby)

        logger.info(f"User {user_id} joined lobby {lobby_id}")
        return lobby

    async def leave_lobby(self, lobby_id: int, user_id: int) -> Optional[Lobby]:
        """
        Remove a user from a lobby

        The leader cannot be removed, so when the leader leaves the lobby is
        closed instead.

        Returns:
            The updated lobby, or None if it was closed

        Raises:
            NotFoundException: If the lobby does not exist
            BadRequestException: If the user is not a member
        """
        lobby = await self.get_lobby(lobby_id)

        if not lobby.is_member(user_id):
            raise BadRequestException(message="You are not in this lobby")

        if lobby.is_leader(user_id):
            await self.repository.delete(lobby)
            logger.info(f"Lobby {lobby_id} closed (leader {user_id} left)")
            return None

        lobby.users_in_lobby.discard(user_id)
        lobby = await self.repository.save(lobby)

        logger.info(f"User {user_id} left lobby {lobby_id}")
        return lobby

    async def delete_lobby(self, lobby_id: int, token: str) -> None:
        """
        Close a lobby (leader only)

        Raises:
            NotFoundException: If the lobby does not exist
            UnauthorizedException: If the token is not the leader's
        """
        lobby = await self.get_lobby(lobby_id)

        if token != lobby.user_token:
            logger.warning(f"Rejected deletion of lobby {lobby_id}: token does not match leader")
            raise UnauthorizedException(message="Only the lobby leader can close the lobby")

        await self.repository.delete(lobby)
        logger.info(f"Lobby {lobby_id} closed by leader {lobby.user_id}")
