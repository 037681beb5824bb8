"""
Utilitários de segurança: hash de senha e JWT.

O token carrega o ID do usuário em `sub` e a role em `role`. A role do
token serve apenas como dica; as dependencies sempre recarregam o usuário
do banco antes de autorizar.
"""

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from library_api.core.config import get_settings
from library_api.models.enums import UserRole

logger = logging.getLogger(__name__)
settings = get_settings()


class TokenPayload(BaseModel):
    """Claims validadas de um access token."""

    sub: int
    role: UserRole
    exp: datetime


def hash_password(password: str) -> str:
    """
    Gera hash bcrypt da senha.

    Args:
        password: Senha em texto plano (até 72 bytes)

    Returns:
        Hash bcrypt da senha
    """
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifica se a senha corresponde ao hash. Hash malformado conta como falha."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError as e:
        logger.debug(f"Erro na verificação de senha: {type(e).__name__}")
        return False


def create_access_token(
    user_id: int,
    role: UserRole,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Cria token JWT de acesso.

    Args:
        user_id: ID do usuário (vai em `sub`, como string)
        role: Role do usuário no momento da emissão
        expires_delta: Tempo de expiração customizado

    Returns:
        Token JWT assinado
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.JWT_EXPIRES_MINUTES))

    payload = {
        "sub": str(user_id),
        "role": role.value,
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> TokenPayload | None:
    """
    Decodifica e valida token JWT.

    Returns:
        Claims do token ou None se inválido, expirado ou malformado
    """
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
        return TokenPayload.model_validate(claims)
    except (JWTError, ValidationError):
        return None
