# app/exceptions/domain_exceptions.py

from typing import Any, Dict, Optional


class DomainException(Exception):
    """Base class for all lobby domain errors"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundException(DomainException):
    """Raised when a lobby or user cannot be resolved by its identifier"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=404, details=details)


class BadRequestException(DomainException):
    """Raised for requests that make no sense for the current membership"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=400, details=details)


class UnauthorizedException(DomainException):
    """Raised when the caller token does not match the lobby leader's token"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=401, details=details)


class ForbiddenException(DomainException):
    """Raised when a private lobby is joined without the right key"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=403, details=details)


class ConflictException(DomainException):
    """Raised when a requested change conflicts with lobby constraints"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=409, details=details)


class StaleLobbyException(ConflictException):
    """Raised when a lobby was modified by someone else since it was read"""

    def __init__(self, lobby_id: int, expected_version: int, actual_version: Optional[int] = None):
        super().__init__(
            message="Lobby was modified concurrently, reload and retry",
            details={
                "lobby_id": lobby_id,
                "expected_version": expected_version,
                "actual_version": actual_version,
            }
        )
