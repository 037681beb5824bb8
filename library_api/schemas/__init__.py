"""
Schemas Pydantic da aplicação.
"""

from library_api.schemas.base import (
    BaseSchema,
    ErrorResponse,
    PaginatedResponse,
    TimestampSchema,
)
from library_api.schemas.health import HealthResponse
from library_api.schemas.user import (
    TokenResponse,
    UserCreate,
    UserLogin,
    UserRead,
    UserRegister,
    UserUpdate,
    UserWithToken,
)
from library_api.schemas.book import BookCreate, BookRead, BookUpdate
from library_api.schemas.transaction import TransactionDetail, TransactionRead

__all__ = [
    # Base
    "BaseSchema",
    "ErrorResponse",
    "PaginatedResponse",
    "TimestampSchema",
    # Health
    "HealthResponse",
    # User
    "TokenResponse",
    "UserCreate",
    "UserLogin",
    "UserRead",
    "UserRegister",
    "UserUpdate",
    "UserWithToken",
    # Book
    "BookCreate",
    "BookRead",
    "BookUpdate",
    # Transaction
    "TransactionDetail",
    "TransactionRead",
]
