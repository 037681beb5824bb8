"""
Configuração de sessão do banco de dados com SQLAlchemy async.

Este módulo fornece o engine async, session factory e dependency
para injeção de sessão nos endpoints.
"""

from typing import Any, AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from library_api.core.config import get_settings

settings = get_settings()

engine_options: dict[str, Any] = {"echo": False, "pool_pre_ping": True}
if settings.is_sqlite:
    # SQLite: uma conexão por uso, sem pool
    engine_options["poolclass"] = NullPool
else:
    engine_options.update(pool_size=5, max_overflow=10)

engine = create_async_engine(settings.DATABASE_URL, **engine_options)


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """SQLite só aplica FOREIGN KEY (ON DELETE RESTRICT) com o pragma ligado."""

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


if settings.is_sqlite:
    enable_sqlite_foreign_keys(engine)

# Factory de sessões async
async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Classe base para todos os modelos SQLAlchemy."""
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency que fornece uma sessão de banco de dados por request.

    Cada request é uma unidade de trabalho: nada é reaproveitado entre
    requests e a sessão é fechada ao final (transação pendente sofre
    rollback).
    """
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def check_database_connection() -> tuple[bool, str | None]:
    """
    Verifica se a conexão com o banco de dados está funcionando.

    Returns:
        Tupla (sucesso, mensagem_erro)
    """
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True, None
    except Exception as e:
        return False, str(e)
