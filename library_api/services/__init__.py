"""
Módulo de serviços - lógica de negócio.
"""

from library_api.services.auth import AuthService
from library_api.services.user import UserService
from library_api.services.book import BookService
from library_api.services.transaction import TransactionService

__all__ = [
    "AuthService",
    "UserService",
    "BookService",
    "TransactionService",
]
