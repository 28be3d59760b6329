# app/api/dependencies.py

from typing import Optional
from fastapi import Depends, Header
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession
from infrastructure.redis_connection import get_redis
from infrastructure.postgres_connection import get_db_session
from infrastructure.lobby_repository import LobbyRepository
from models.user import User
from services.lobby_service import LobbyService
from services.user_service import UserService


def get_lobby_service(redis: Redis = Depends(get_redis)) -> LobbyService:
    return LobbyService(LobbyRepository(redis))


def get_bearer_token(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header"""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


async def current_user(
    token: Optional[str] = Depends(get_bearer_token),
    session: AsyncSession = Depends(get_db_session)
) -> User:
    return await UserService.get_user_by_token(session, token)
