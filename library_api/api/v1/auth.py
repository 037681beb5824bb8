"""
Endpoints de autenticação.

Contratos:
    - POST /auth/register: Auto-cadastro (sempre MEMBER), retorna token
    - POST /auth/login: Login por username e senha
    - GET /auth/me: Dados do usuário autenticado

Rate Limiting aplicado:
    - POST /register: 10 req/min (rate_limit_auth)
    - POST /login: 10 req/min (rate_limit_auth)
"""

from fastapi import APIRouter, Depends, status

from library_api.core.deps import CurrentUser, DbSession
from library_api.core.rate_limit import rate_limit_auth
from library_api.schemas.user import UserLogin, UserRead, UserRegister, UserWithToken
from library_api.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=UserWithToken,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar novo membro",
    description="Cria uma conta MEMBER. Username e email devem ser únicos.",
)
async def register(
    data: UserRegister,
    db: DbSession,
    _: None = Depends(rate_limit_auth),
) -> UserWithToken:
    """
    Registro público de membro.

    - **username**: 3-50 caracteres (letras, números, _ . -)
    - **email**: Email único
    - **password**: 6-72 caracteres, ao menos uma letra e um número
    - **full_name**: Nome completo

    Rate limit: 10 req/min por IP
    """
    return await AuthService(db).register(data)


@router.post(
    "/login",
    response_model=UserWithToken,
    summary="Autenticar usuário",
    description="Retorna token JWT para autenticação nos endpoints protegidos.",
)
async def login(
    data: UserLogin,
    db: DbSession,
    _: None = Depends(rate_limit_auth),
) -> UserWithToken:
    """
    Login de usuário.

    Uso do token: `Authorization: Bearer <access_token>`

    Rate limit: 10 req/min por IP
    """
    return await AuthService(db).login(data.username, data.password)


@router.get(
    "/me",
    response_model=UserRead,
    summary="Dados do usuário autenticado",
)
async def get_me(current_user: CurrentUser) -> UserRead:
    """Retorna dados do usuário autenticado."""
    return UserRead.model_validate(current_user)
