"""
Repository para operações de Transaction no banco de dados.

Somente leitura e inserção: transações nunca são removidas e só são
alteradas pelo fluxo de devolução.
"""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.models.enums import TransactionStatus
from library_api.models.transaction import Transaction
from library_api.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """Repository para consultas e inserções de Transaction."""

    def __init__(self, db: AsyncSession):
        super().__init__(Transaction, db)

    def _ordered(self, query):
        return query.order_by(
            Transaction.transaction_date.desc(),
            Transaction.id.desc(),
        )

    async def get_active(self, user_id: int, book_id: int) -> Transaction | None:
        """Busca a transação ACTIVE do par (usuário, livro), se houver."""
        result = await self.db.execute(
            select(Transaction)
            .where(
                Transaction.user_id == user_id,
                Transaction.book_id == book_id,
                Transaction.status == TransactionStatus.ACTIVE,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def has_active(self, user_id: int, book_id: int) -> bool:
        """Verifica se o usuário está com o livro emprestado."""
        return await self.get_active(user_id, book_id) is not None

    async def list_all(self) -> list[Transaction]:
        """Lista todas as transações (mais recentes primeiro)."""
        result = await self.db.execute(self._ordered(select(Transaction)))
        return list(result.scalars().all())

    async def list_by_user(self, user_id: int) -> list[Transaction]:
        """Lista transações de um usuário."""
        result = await self.db.execute(
            self._ordered(select(Transaction).where(Transaction.user_id == user_id))
        )
        return list(result.scalars().all())

    async def list_by_book(self, book_id: int) -> list[Transaction]:
        """Lista transações de um livro."""
        result = await self.db.execute(
            self._ordered(select(Transaction).where(Transaction.book_id == book_id))
        )
        return list(result.scalars().all())

    async def list_active(self) -> list[Transaction]:
        """Lista empréstimos em aberto."""
        result = await self.db.execute(
            self._ordered(
                select(Transaction).where(
                    Transaction.status == TransactionStatus.ACTIVE
                )
            )
        )
        return list(result.scalars().all())

    async def list_overdue(self, now: datetime) -> list[Transaction]:
        """Lista empréstimos em aberto com prazo vencido."""
        result = await self.db.execute(
            select(Transaction)
            .where(
                Transaction.status == TransactionStatus.ACTIVE,
                Transaction.due_date < now,
            )
            .order_by(Transaction.due_date)
        )
        return list(result.scalars().all())
