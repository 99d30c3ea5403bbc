"""
Gestión de engine y sesiones de base de datos.

No hay engine global: el entry point (API o CLI) construye un `Database`
una sola vez y lo inyecta hacia abajo.
"""
from typing import AsyncGenerator, Optional
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker
)
from sqlalchemy.orm import declarative_base

from horrorsite.core.config import settings


# Base para modelos de SQLAlchemy
Base = declarative_base()


def _create_engine_args(database_url: str, echo: bool) -> dict:
    """
    Construye los argumentos del engine segun el tipo de base de datos.
    PostgreSQL usa pool de conexiones, SQLite no lo soporta.
    """
    args = {
        "echo": echo,
        "future": True,
    }

    # Configuracion de pool solo para PostgreSQL
    if "postgresql" in database_url:
        args.update({
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_pre_ping": True,  # Verifica conexion antes de usar
        })

    return args


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Session factory con la configuracion estandar del proyecto."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False
    )


class Database:
    """
    Dueño del engine y la session factory.

    Args:
        database_url: URL async (postgresql+asyncpg://, sqlite+aiosqlite://)
        echo: Loguea SQL emitido
    """

    def __init__(self, database_url: Optional[str] = None, *, echo: Optional[bool] = None):
        self.database_url = database_url or settings.effective_database_url
        self.engine = create_async_engine(
            self.database_url,
            **_create_engine_args(self.database_url, settings.DEBUG if echo is None else echo)
        )
        self.session_factory = build_session_factory(self.engine)

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Generador de sesiones de base de datos.

        Yields:
            AsyncSession: Sesión de base de datos
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def init_db(self) -> None:
        """Inicializa la base de datos creando todas las tablas."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        """Cierra las conexiones de la base de datos."""
        await self.engine.dispose()
