# app/models/__init__.py

from models.user import User, UserStatus
from models.lobby import Lobby

__all__ = ["User", "UserStatus", "Lobby"]
