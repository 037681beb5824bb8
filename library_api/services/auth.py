"""
Service de autenticação.
"""

import logging

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.config import get_settings
from library_api.core.security import create_access_token, verify_password
from library_api.models.enums import UserRole
from library_api.models.user import User
from library_api.repositories.user import UserRepository
from library_api.schemas.user import TokenResponse, UserRead, UserRegister, UserWithToken
from library_api.services.user import UserService

logger = logging.getLogger(__name__)
settings = get_settings()


class AuthService:
    """Service para cadastro e login."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)
        self.user_service = UserService(db)

    async def register(self, data: UserRegister) -> UserWithToken:
        """
        Auto-cadastro de membro, já autenticado.

        Raises:
            ConflictError: Username ou email já cadastrado
        """
        user = await self.user_service.create(data, role=UserRole.MEMBER)
        return self._with_token(user)

    async def login(self, username: str, password: str) -> UserWithToken:
        """
        Autentica usuário e retorna token JWT.

        Args:
            username: Username do usuário
            password: Senha em texto plano

        Raises:
            HTTPException 401: Credenciais inválidas
        """
        user = await self.user_repo.get_by_username(username)

        if user is None or not verify_password(password, user.password_hash):
            logger.info(f"Falha de login para '{username}'")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Username ou senha incorretos",
                headers={"WWW-Authenticate": "Bearer"},
            )

        return self._with_token(user)

    def _with_token(self, user: User) -> UserWithToken:
        return UserWithToken(
            user=UserRead.model_validate(user),
            token=TokenResponse(
                access_token=create_access_token(user.id, user.role),
                token_type="bearer",
                expires_in=settings.JWT_EXPIRES_MINUTES * 60,
            ),
        )
