"""
Script de seed para criar dados iniciais no banco.

Uso:
    python -m library_api.db.seed

Cria o bibliotecário inicial se não existir.
"""

import asyncio
import logging

from library_api.core.config import get_settings
from library_api.core.logging import setup_logging
from library_api.core.security import hash_password
from library_api.db.session import async_session_factory
from library_api.models.enums import UserRole
from library_api.repositories.user import UserRepository

logger = logging.getLogger(__name__)
settings = get_settings()


async def create_librarian() -> None:
    """
    Cria o bibliotecário seed se não existir.

    Lê credenciais do .env (ADMIN_USERNAME, ADMIN_EMAIL, ADMIN_PASSWORD).
    """
    async with async_session_factory() as db:
        repo = UserRepository(db)

        if await repo.username_exists(settings.ADMIN_USERNAME):
            logger.info(f"Bibliotecário já existe: {settings.ADMIN_USERNAME}")
            return

        librarian = await repo.create(
            username=settings.ADMIN_USERNAME,
            email=settings.ADMIN_EMAIL,
            full_name="Bibliotecário",
            password_hash=hash_password(settings.ADMIN_PASSWORD),
            role=UserRole.LIBRARIAN,
        )
        logger.info(
            f"Bibliotecário criado: {librarian.username} (ID: {librarian.id})"
        )


async def main() -> None:
    """Executa todos os seeds."""
    setup_logging()
    logger.info("Executando seeds...")
    await create_librarian()
    logger.info("Seeds concluídos!")


if __name__ == "__main__":
    asyncio.run(main())
