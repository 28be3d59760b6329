# app/api/exception_handlers.py

from typing import TYPE_CHECKING
from fastapi import Request
from fastapi.responses import JSONResponse
from exceptions.domain_exceptions import DomainException

if TYPE_CHECKING:
    from fastapi import FastAPI


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """
    Render any domain exception as JSON

    Subclasses (NotFound, Conflict, StaleLobby, ...) are dispatched here as
    well since Starlette looks handlers up along the exception's MRO.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.__class__.__name__,
            "message": exc.message,
            "details": exc.details,
            "path": request.url.path
        }
    )


def register_exception_handlers(app: "FastAPI") -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)
