"""
Dependencies FastAPI para autenticação e autorização.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.security import decode_token
from library_api.db.session import get_db
from library_api.models.user import User
from library_api.repositories.user import UserRepository

# Scheme Bearer para extrair token do header Authorization
security = HTTPBearer()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Dependency que retorna o usuário autenticado.

    Extrai o token JWT do header Authorization, decodifica e
    busca o usuário no banco (a role vale a do banco, não a do token).

    Raises:
        HTTPException 401: Token inválido, expirado ou usuário não encontrado
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Token inválido ou expirado",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise credentials_exception

    user = await UserRepository(db).get_by_id(payload.sub)
    if user is None:
        raise credentials_exception

    return user


async def require_librarian(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """
    Dependency que exige que o usuário seja LIBRARIAN.

    Raises:
        HTTPException 403: Usuário não é bibliotecário
    """
    if not current_user.is_librarian:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Acesso restrito a bibliotecários",
        )
    return current_user


def ensure_self_or_librarian(current_user: User, user_id: int) -> None:
    """
    Permite a ação se o usuário é bibliotecário ou age sobre si mesmo.

    Raises:
        HTTPException 403: Membro agindo em nome de outro usuário
    """
    if not current_user.is_librarian and current_user.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Membros só podem acessar os próprios dados",
        )


# Type aliases para uso nos endpoints
CurrentUser = Annotated[User, Depends(get_current_user)]
LibrarianUser = Annotated[User, Depends(require_librarian)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
