"""
Fixtures compartilhadas para testes.

DATABASE_URL aponta para SQLite :memory: apenas para que o engine da
aplicação (usado no healthcheck) não dependa de PostgreSQL. Os testes
de dados rodam sobre o engine de test_engine: um arquivo SQLite próprio
em tmp_path, criado a partir do metadata dos models, para que sessões
distintas enxerguem o mesmo banco.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import library_api.models  # noqa: F401
from library_api.core.security import create_access_token, hash_password
from library_api.db.session import Base, enable_sqlite_foreign_keys, get_db
from library_api.main import app
from library_api.models.book import Book
from library_api.models.enums import UserRole
from library_api.models.user import User

TEST_PASSWORD = "senha123"


# ==========================================
# Event loop configuration
# ==========================================

@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


# ==========================================
# Database fixtures
# ==========================================

@pytest.fixture
async def test_engine(tmp_path):
    """
    Engine de teste com NullPool sobre um arquivo SQLite novo.

    Foreign keys ligadas para que ON DELETE RESTRICT seja aplicado.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'library.db'}",
        echo=False,
        poolclass=NullPool,
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Sessão de banco para preparar dados e chamar services diretamente."""
    async with session_factory() as session:
        yield session


# ==========================================
# HTTP Client fixtures
# ==========================================

@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    Cliente HTTP assíncrono para testes.

    Substitui a dependency get_db por sessões do engine de teste.
    """

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            finally:
                await session.close()

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ==========================================
# Data fixtures
# ==========================================

async def create_user(
    db: AsyncSession,
    username: str,
    role: UserRole = UserRole.MEMBER,
) -> User:
    """Grava usuário diretamente no banco (senha TEST_PASSWORD)."""
    user = User(
        username=username,
        email=f"{username}@example.com",
        full_name=username.title(),
        password_hash=hash_password(TEST_PASSWORD),
        role=role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def create_book(
    db: AsyncSession,
    isbn: str = "9780000000001",
    total_copies: int = 1,
    available_copies: int | None = None,
    title: str = "Dom Casmurro",
    author: str = "Machado de Assis",
    category: str | None = "Romance",
) -> Book:
    """Grava livro diretamente no banco."""
    book = Book(
        title=title,
        author=author,
        isbn=isbn,
        category=category,
        total_copies=total_copies,
        available_copies=(
            total_copies if available_copies is None else available_copies
        ),
    )
    db.add(book)
    await db.commit()
    await db.refresh(book)
    return book


@pytest.fixture
async def librarian(test_db) -> User:
    return await create_user(test_db, "biblio", UserRole.LIBRARIAN)


@pytest.fixture
async def member(test_db) -> User:
    return await create_user(test_db, "alice")


@pytest.fixture
async def other_member(test_db) -> User:
    return await create_user(test_db, "bruno")


@pytest.fixture
async def book(test_db) -> Book:
    """Livro com dois exemplares."""
    return await create_book(test_db, total_copies=2)


# ==========================================
# Auth fixtures
# ==========================================

def bearer(user: User) -> dict:
    """Headers de autenticação para o usuário."""
    token = create_access_token(user.id, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def librarian_headers(librarian: User) -> dict:
    return bearer(librarian)


@pytest.fixture
def member_headers(member: User) -> dict:
    return bearer(member)
