"""
Módulo de repositórios - acesso a dados.
"""

from library_api.repositories.base import BaseRepository
from library_api.repositories.user import UserRepository
from library_api.repositories.book import BookRepository
from library_api.repositories.transaction import TransactionRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "BookRepository",
    "TransactionRepository",
]
