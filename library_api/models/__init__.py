"""
Models SQLAlchemy da aplicação.

Importar todos os models aqui para que o Alembic detecte as mudanças.
"""

from library_api.models.enums import TransactionStatus, TransactionType, UserRole
from library_api.models.user import User
from library_api.models.book import Book
from library_api.models.transaction import Transaction

__all__ = [
    "UserRole",
    "TransactionType",
    "TransactionStatus",
    "User",
    "Book",
    "Transaction",
]
