# app/infrastructure/postgres_connection.py

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy import text
from config.settings import settings


# Base class for SQLAlchemy models
Base = declarative_base()


class PostgresConnection:
    """PostgreSQL connection manager for the user store"""

    def __init__(self):
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_connected(self) -> bool:
        return self.engine is not None

    async def connect(self):
        if self.engine is not None:
            return

        try:
            self.engine = create_async_engine(
                settings.DATABASE_URL,
                echo=settings.DEBUG,
                pool_pre_ping=True,
                pool_size=10,
                max_overflow=20,
            )
            self.session_factory = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))

            print(f"✅ User store connected to PostgreSQL at {settings.POSTGRES_HOST}:{settings.POSTGRES_PORT}/{settings.POSTGRES_DB}")
        except Exception as e:
            print(f"❌ User store could not reach PostgreSQL: {e}")
            self.engine = None
            self.session_factory = None
            raise

    async def disconnect(self):
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            print("✅ User store disconnected from PostgreSQL")

    def get_session_factory(self) -> async_sessionmaker[AsyncSession]:
        if not self.session_factory:
            raise RuntimeError("PostgreSQL session factory is not initialized. Call connect() first.")
        return self.session_factory


# Shared instance
postgres_connection = PostgresConnection()


async def get_db_session():
    """
    FastAPI dependency yielding a session on the user store.

    Commits when the request handler returns, rolls back if it raises.
    """
    session_factory = postgres_connection.get_session_factory()
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
