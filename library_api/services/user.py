"""
Service para lógica de negócio de User.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.exceptions import ConflictError, NotFoundError
from library_api.core.security import hash_password
from library_api.models.enums import UserRole
from library_api.models.user import User
from library_api.repositories.user import UserRepository
from library_api.schemas.user import UserCreate, UserRegister, UserUpdate

logger = logging.getLogger(__name__)

# Colunas NOT NULL: null explícito no update é ignorado
REQUIRED_FIELDS = frozenset({"email", "full_name"})


class UserService:
    """Service para operações de User."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = UserRepository(db)

    async def get_by_id(self, user_id: int) -> User:
        """
        Busca usuário por ID.

        Raises:
            NotFoundError: Usuário não encontrado
        """
        user = await self.repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("Usuário não encontrado", user_id=user_id)
        return user

    async def get_by_username(self, username: str) -> User:
        """
        Busca usuário por username exato.

        Raises:
            NotFoundError: Usuário não encontrado
        """
        user = await self.repo.get_by_username(username)
        if not user:
            raise NotFoundError("Usuário não encontrado", username=username)
        return user

    async def create(
        self,
        data: UserRegister,
        role: UserRole = UserRole.MEMBER,
    ) -> User:
        """
        Cria novo usuário.

        Raises:
            ConflictError: Username ou email já cadastrado
        """
        if isinstance(data, UserCreate):
            role = data.role

        await self._ensure_unique(username=data.username, email=data.email)

        try:
            user = await self.repo.create(
                username=data.username,
                email=data.email,
                full_name=data.full_name,
                phone_number=data.phone_number,
                password_hash=hash_password(data.password),
                role=role,
            )
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(
                "Username ou email já cadastrado",
                username=data.username,
                email=data.email,
            ) from e
        logger.info(f"Usuário criado: {user.username} ({user.role.value}, ID: {user.id})")
        return user

    async def update(
        self,
        user_id: int,
        data: UserUpdate,
        allow_role_change: bool = False,
    ) -> User:
        """
        Atualiza usuário.

        Args:
            user_id: ID do usuário
            data: Campos a alterar
            allow_role_change: Se False, `role` é ignorada (membros)

        Raises:
            NotFoundError: Usuário não encontrado
            ConflictError: Email já cadastrado por outro usuário
        """
        user = await self.get_by_id(user_id)

        if data.email and data.email != user.email:
            await self._ensure_unique(email=data.email)

        changes = data.model_dump(exclude_unset=True, exclude={"password", "role"})
        changes = {
            key: value
            for key, value in changes.items()
            if value is not None or key not in REQUIRED_FIELDS
        }
        if data.password:
            changes["password_hash"] = hash_password(data.password)
        if allow_role_change and data.role is not None:
            changes["role"] = data.role

        try:
            return await self.repo.update(user, **changes)
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError("Email já cadastrado", email=data.email) from e

    async def delete(self, user_id: int) -> None:
        """
        Remove usuário.

        Raises:
            NotFoundError: Usuário não encontrado
            ConflictError: Usuário possui histórico de transações
        """
        user = await self.get_by_id(user_id)
        try:
            await self.repo.delete(user)
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(
                "Usuário possui transações registradas e não pode ser removido",
                user_id=user_id,
            ) from e
        logger.info(f"Usuário removido: ID {user_id}")

    async def list_paginated(
        self,
        role: UserRole | None = None,
        search: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[User], int]:
        """Lista usuários com filtros e paginação."""
        return await self.repo.search(
            role=role,
            search=search,
            page=page,
            page_size=page_size,
        )

    async def _ensure_unique(
        self,
        username: str | None = None,
        email: str | None = None,
    ) -> None:
        if username and await self.repo.username_exists(username):
            raise ConflictError("Username já cadastrado", username=username)
        if email and await self.repo.email_exists(email):
            raise ConflictError("Email já cadastrado", email=email)
