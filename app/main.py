# app/main.py

from contextlib import asynccontextmanager
from fastapi import FastAPI
from api.routes import lobby
from api.exception_handlers import register_exception_handlers
from config.settings import settings
from infrastructure.redis_connection import redis_connection
from infrastructure.postgres_connection import postgres_connection
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the lobby store and user store for the lifetime of the app"""
    await redis_connection.connect()
    await postgres_connection.connect()
    logger.info(f"{settings.APP_NAME} started (min players per lobby: {settings.LOBBY_MIN_PLAYERS})")

    yield

    await postgres_connection.disconnect()
    await redis_connection.disconnect()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

register_exception_handlers(app)


@app.get("/health")
async def health_check():
    """Health check endpoint for Docker and monitoring"""
    return {
        "status": "healthy",
        "redis": redis_connection.is_connected,
        "postgres": postgres_connection.is_connected,
    }


app.include_router(lobby.router, prefix="/v1")
