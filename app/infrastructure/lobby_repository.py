# app/infrastructure/lobby_repository.py

import logging
from typing import List, Optional
from redis.asyncio import Redis
from redis.exceptions import WatchError
from config.settings import settings
from exceptions.domain_exceptions import NotFoundException, StaleLobbyException
from models.lobby import Lobby

logger = logging.getLogger(__name__)


class LobbyRepository:
    """
    Redis-backed storage for lobbies.

    Each lobby is a JSON document under ``lobby:{id}``. Ids come from an INCR
    counter, and private keys are indexed so the service can keep them unique.
    Updates are version-checked inside a WATCH/MULTI transaction.
    """

    LOBBY_KEY_PREFIX = "lobby:"
    LOBBY_ID_SEQUENCE_KEY = "lobby_id_seq"
    PRIVATE_KEY_PREFIX = "lobby_private_key:"

    def __init__(self, redis: Redis, ttl: Optional[int] = None):
        self.redis = redis
        self.ttl = ttl or settings.LOBBY_TTL_SECONDS

    @staticmethod
    def _lobby_key(lobby_id: int) -> str:
        return f"{LobbyRepository.LOBBY_KEY_PREFIX}{lobby_id}"

    @staticmethod
    def _private_key_key(private_key: str) -> str:
        return f"{LobbyRepository.PRIVATE_KEY_PREFIX}{private_key}"

    async def save(self, lobby: Lobby) -> Lobby:
        """
        Persist a lobby and return it.

        The first save assigns ``lobby_id`` and sets ``version`` to 1. Every
        later save requires the stored version to match ``lobby.version`` and
        increments it.

        Raises:
            NotFoundException: If the lobby has an id but no stored record
            StaleLobbyException: If the stored record changed since it was read
        """
        if lobby.lobby_id is None:
            return await self._insert(lobby)
        return await self._update(lobby)

    async def _insert(self, lobby: Lobby) -> Lobby:
        lobby.lobby_id = await self.redis.incr(self.LOBBY_ID_SEQUENCE_KEY)
        lobby.version = 1

        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(self._lobby_key(lobby.lobby_id), lobby.model_dump_json(), ex=self.ttl)
            if lobby.private_key:
                pipe.set(self._private_key_key(lobby.private_key), lobby.lobby_id, ex=self.ttl)
            await pipe.execute()

        logger.debug(f"Inserted lobby {lobby.lobby_id}")
        return lobby

    async def _update(self, lobby: Lobby) -> Lobby:
        key = self._lobby_key(lobby.lobby_id)
        new_version = lobby.version + 1

        async with self.redis.pipeline(transaction=True) as pipe:
            try:
                await pipe.watch(key)
                raw = await pipe.get(key)
                if raw is None:
                    raise NotFoundException(
                        message="Lobby not found",
                        details={"lobby_id": lobby.lobby_id}
                    )

                stored_version = Lobby.model_validate_json(raw).version
                if stored_version != lobby.version:
                    raise StaleLobbyException(lobby.lobby_id, lobby.version, stored_version)

                pipe.multi()
                pipe.set(key, lobby.model_copy(update={"version": new_version}).model_dump_json(), ex=self.ttl)
                if lobby.private_key:
                    pipe.set(self._private_key_key(lobby.private_key), lobby.lobby_id, ex=self.ttl)
                await pipe.execute()
            except WatchError:
                raise StaleLobbyException(lobby.lobby_id, lobby.version)

        lobby.version = new_version
        return lobby

    async def find_by_id(self, lobby_id: int) -> Optional[Lobby]:
        """Return the stored lobby, or None if there is none"""
        raw = await self.redis.get(self._lobby_key(lobby_id))
        if raw is None:
            return None
        return Lobby.model_validate_json(raw)

    async def find_all(self) -> List[Lobby]:
        lobbies = []
        async for key in self.redis.scan_iter(match=f"{self.LOBBY_KEY_PREFIX}*", count=100):
            raw = await self.redis.get(key)
            # Expired between SCAN and GET
            if raw is None:
                continue
            lobbies.append(Lobby.model_validate_json(raw))
        return lobbies

    async def delete(self, lobby: Lobby) -> None:
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.delete(self._lobby_key(lobby.lobby_id))
            if lobby.private_key:
                pipe.delete(self._private_key_key(lobby.private_key))
            await pipe.execute()

    async def private_key_exists(self, private_key: str) -> bool:
        return bool(await self.redis.exists(self._private_key_key(private_key)))
