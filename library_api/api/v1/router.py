"""
Router principal da API v1.

Inclui todos os routers de endpoints.
"""

from fastapi import APIRouter

from library_api.api.v1.auth import router as auth_router
from library_api.api.v1.books import router as books_router
from library_api.api.v1.transactions import router as transactions_router
from library_api.api.v1.users import router as users_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(auth_router)
api_router.include_router(users_router)
api_router.include_router(books_router)
api_router.include_router(transactions_router)
