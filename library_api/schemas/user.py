"""
Schemas Pydantic para User e autenticação.
"""

import re

from pydantic import EmailStr, Field, field_validator

from library_api.models.enums import UserRole
from library_api.schemas.base import BaseSchema, TimestampSchema

USERNAME_PATTERN = r"^[A-Za-z0-9_.-]+$"


def _check_password_strength(v: str) -> str:
    if len(v.encode("utf-8")) > 72:
        raise ValueError("Senha deve ter no máximo 72 bytes")
    if not re.search(r"[A-Za-z]", v):
        raise ValueError("Senha deve conter pelo menos uma letra")
    if not re.search(r"\d", v):
        raise ValueError("Senha deve conter pelo menos um número")
    return v


class UserRegister(BaseSchema):
    """
    Schema para auto-cadastro (sempre cria MEMBER).

    Validações:
        - username: 3-50 caracteres, letras, números, _ . -
        - email: formato válido
        - password: 6-72 caracteres (até 72 bytes), ao menos uma letra e um número
    """
    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        pattern=USERNAME_PATTERN,
        examples=["joao.silva"],
    )
    email: EmailStr = Field(..., examples=["joao@email.com"])
    password: str = Field(..., min_length=6, max_length=72, examples=["senha123"])
    full_name: str = Field(..., min_length=2, max_length=255, examples=["João Silva"])
    phone_number: str | None = Field(None, max_length=30)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Valida complexidade da senha."""
        return _check_password_strength(v)


class UserCreate(UserRegister):
    """Schema para criação de usuário por bibliotecário (role escolhida)."""
    role: UserRole = UserRole.MEMBER


class UserRead(TimestampSchema):
    """
    Schema para leitura de usuário.

    Nunca expõe password_hash.
    """
    id: int
    username: str
    email: EmailStr
    full_name: str
    phone_number: str | None = None
    role: UserRole


class UserUpdate(BaseSchema):
    """
    Schema para atualização de usuário.

    Campos ausentes não são alterados. role só é aceita de bibliotecários.
    """
    email: EmailStr | None = None
    full_name: str | None = Field(None, min_length=2, max_length=255)
    phone_number: str | None = Field(None, max_length=30)
    password: str | None = Field(None, min_length=6, max_length=72)
    role: UserRole | None = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _check_password_strength(v)


class UserLogin(BaseSchema):
    """Schema para login."""
    username: str
    password: str


class TokenResponse(BaseSchema):
    """Resposta de autenticação com token JWT."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class UserWithToken(BaseSchema):
    """Usuário com token JWT (retorno de cadastro e login)."""
    user: UserRead
    token: TokenResponse
