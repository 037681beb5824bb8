"""
Repository para operações de User no banco de dados.
"""

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.models.enums import UserRole
from library_api.models.user import User
from library_api.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository para operações CRUD de User."""

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def get_by_username(self, username: str) -> User | None:
        """Busca usuário por username."""
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        """Busca usuário por email."""
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def username_exists(self, username: str) -> bool:
        """Verifica se username já está cadastrado."""
        return await self.get_by_username(username) is not None

    async def email_exists(self, email: str) -> bool:
        """Verifica se email já está cadastrado."""
        return await self.get_by_email(email) is not None

    async def search(
        self,
        role: UserRole | None = None,
        search: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[User], int]:
        """
        Busca usuários com filtros e paginação.

        Args:
            role: Filtro por role
            search: Trecho de username, nome ou email
            page: Número da página
            page_size: Tamanho da página

        Returns:
            Tupla (lista de usuários, total)
        """
        skip = (page - 1) * page_size

        query = select(User)

        if role:
            query = query.where(User.role == role)

        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    User.username.ilike(pattern),
                    User.full_name.ilike(pattern),
                    User.email.ilike(pattern),
                )
            )

        count_result = await self.db.execute(
            select(func.count()).select_from(query.subquery())
        )
        total = count_result.scalar_one()

        result = await self.db.execute(
            query.offset(skip).limit(page_size).order_by(User.username)
        )
        users = list(result.scalars().all())

        return users, total
