# app/services/user_service.py

from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from models.user import User
from exceptions.domain_exceptions import NotFoundException, UnauthorizedException


class UserService:
    """Read-only lookups against the user store"""

    @staticmethod
    async def get_user(session: AsyncSession, user_id: int) -> User:
        """
        Get a user by id

        Raises:
            NotFoundException: If no user has this id
        """
        user = await session.get(User, user_id)
        if not user:
            raise NotFoundException(message="User not found", details={"user_id": user_id})
        return user

    @staticmethod
    async def find_by_token(session: AsyncSession, token: str) -> Optional[User]:
        result = await session.execute(select(User).where(User.token == token))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_by_token(session: AsyncSession, token: Optional[str]) -> User:
        """
        Resolve the caller from their authentication token

        Raises:
            UnauthorizedException: If the token is missing or unknown
        """
        if not token:
            raise UnauthorizedException(message="Missing authentication token")

        user = await UserService.find_by_token(session, token)
        if not user:
            raise UnauthorizedException(message="Invalid authentication token")
        return user
