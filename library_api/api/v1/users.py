"""
Endpoints de Gestão de Usuários.

Contratos:
    - GET /users: Lista usuários paginado (LIBRARIAN)
    - POST /users: Cria usuário com role (LIBRARIAN)
    - GET /users/search/{username}: Busca por username exato (LIBRARIAN)
    - GET /users/{user_id}: Busca usuário (LIBRARIAN ou o próprio)
    - PUT /users/{user_id}: Atualiza usuário (LIBRARIAN ou o próprio)
    - DELETE /users/{user_id}: Remove usuário (LIBRARIAN)

Autorização:
    - MEMBER só lê e altera os próprios dados e não muda a própria role

Status codes:
    - 200: Sucesso
    - 201: Criado com sucesso
    - 204: Removido
    - 401: Não autenticado
    - 403: Sem permissão
    - 404: Usuário não encontrado
    - 409: Username/email duplicado ou usuário com transações
"""

from fastapi import APIRouter, Query, status

from library_api.core.deps import (
    CurrentUser,
    DbSession,
    LibrarianUser,
    ensure_self_or_librarian,
)
from library_api.models.enums import UserRole
from library_api.schemas.base import PaginatedResponse
from library_api.schemas.user import UserCreate, UserRead, UserUpdate
from library_api.services.user import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "",
    response_model=PaginatedResponse[UserRead],
    summary="Listar usuários",
    description="Lista usuários com filtro por role e busca textual. **Requer LIBRARIAN.**",
)
async def list_users(
    db: DbSession,
    librarian: LibrarianUser,
    role: UserRole | None = Query(None, description="Filtrar por role"),
    search: str | None = Query(None, description="Trecho de username, nome ou email"),
    page: int = Query(1, ge=1, description="Número da página"),
    page_size: int = Query(20, ge=1, le=100, description="Itens por página"),
) -> PaginatedResponse[UserRead]:
    users, total = await UserService(db).list_paginated(
        role=role,
        search=search,
        page=page,
        page_size=page_size,
    )
    return PaginatedResponse.create(
        items=[UserRead.model_validate(u) for u in users],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Criar usuário",
    description="Cria usuário com role escolhida. **Requer LIBRARIAN.**",
)
async def create_user(
    data: UserCreate,
    db: DbSession,
    librarian: LibrarianUser,
) -> UserRead:
    user = await UserService(db).create(data)
    return UserRead.model_validate(user)


@router.get(
    "/search/{username}",
    response_model=UserRead,
    summary="Buscar usuário por username",
    description="Busca por username exato. **Requer LIBRARIAN.**",
)
async def get_user_by_username(
    username: str,
    db: DbSession,
    librarian: LibrarianUser,
) -> UserRead:
    user = await UserService(db).get_by_username(username)
    return UserRead.model_validate(user)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    summary="Buscar usuário",
)
async def get_user(
    user_id: int,
    db: DbSession,
    current_user: CurrentUser,
) -> UserRead:
    """Bibliotecários veem qualquer usuário; membros apenas a si mesmos."""
    ensure_self_or_librarian(current_user, user_id)
    user = await UserService(db).get_by_id(user_id)
    return UserRead.model_validate(user)


@router.put(
    "/{user_id}",
    response_model=UserRead,
    summary="Atualizar usuário",
)
async def update_user(
    user_id: int,
    data: UserUpdate,
    db: DbSession,
    current_user: CurrentUser,
) -> UserRead:
    """
    Atualiza dados do usuário.

    Campo role só é aplicado quando quem altera é bibliotecário.
    """
    ensure_self_or_librarian(current_user, user_id)
    user = await UserService(db).update(
        user_id,
        data,
        allow_role_change=current_user.role == UserRole.LIBRARIAN,
    )
    return UserRead.model_validate(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remover usuário",
    description="**Requer LIBRARIAN.** Usuários com transações não podem ser removidos.",
)
async def delete_user(
    user_id: int,
    db: DbSession,
    librarian: LibrarianUser,
) -> None:
    await UserService(db).delete(user_id)
