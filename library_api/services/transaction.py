"""
Service para o ciclo de empréstimo e devolução (Transaction).

Regras de negócio:
    - Prazo: 14 dias a partir do empréstimo
    - Multa por atraso: 1,00 por dia inteiro (truncado)
    - No máximo um empréstimo ativo por (usuário, livro)
    - 0 <= available_copies <= total_copies sempre

Cada empréstimo/devolução é uma única unidade de trabalho: a alteração do
estoque e as linhas de transação são confirmadas juntas ou descartadas
juntas (rollback em qualquer falha).
"""

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from library_api.core.exceptions import (
    BookUnavailableError,
    DuplicateActiveLoanError,
    LibraryError,
    NoActiveLoanError,
    NotFoundError,
)
from library_api.models.enums import TransactionStatus, TransactionType
from library_api.models.transaction import Transaction
from library_api.repositories.transaction import TransactionRepository
from library_api.repositories.user import UserRepository
from library_api.services import loan_policy
from library_api.services.book import BookService

logger = logging.getLogger(__name__)


class TransactionService:
    """
    Service para operações de empréstimo e devolução.

    Args:
        db: Sessão da unidade de trabalho
        clock: Fonte do instante atual (UTC aware); injetável em testes
    """

    def __init__(
        self,
        db: AsyncSession,
        clock: Callable[[], datetime] = loan_policy.utcnow,
    ):
        self.db = db
        self.clock = clock
        self.transaction_repo = TransactionRepository(db)
        self.user_repo = UserRepository(db)
        self.book_service = BookService(db)

    # ==========================================
    # Borrow
    # ==========================================

    async def borrow(self, user_id: int, book_id: int) -> Transaction:
        """
        Empresta um exemplar do livro ao usuário.

        Fluxo:
            1. Verifica se o usuário existe
            2. Busca o livro com lock de linha
            3. Verifica disponibilidade e empréstimo ativo do par
            4. Decrementa available_copies
            5. Cria transação BORROW (ACTIVE, due_date = agora + 14 dias)
            6. Commit

        Args:
            user_id: ID do usuário
            book_id: ID do livro

        Returns:
            Transação BORROW criada

        Raises:
            NotFoundError: Usuário ou livro não encontrado
            BookUnavailableError: Nenhum exemplar disponível
            DuplicateActiveLoanError: Usuário já está com este livro
        """
        now = self.clock()

        try:
            # 1. Usuário
            await self._get_user(user_id)

            # 2. Livro (lock)
            book = await self.book_service.get_for_update(book_id)

            # 3. Elegibilidade
            has_active = await self.transaction_repo.has_active(user_id, book_id)
            if not loan_policy.can_borrow(book.available_copies, has_active):
                if book.available_copies <= 0:
                    raise BookUnavailableError(
                        "Livro sem exemplares disponíveis",
                        book_id=book_id,
                    )
                raise DuplicateActiveLoanError(
                    "Usuário já possui empréstimo ativo deste livro",
                    user_id=user_id,
                    book_id=book_id,
                )

            # 4. Estoque
            await self.book_service.decrement_available(book_id)

            # 5. Lançamento
            transaction = await self.transaction_repo.add(
                Transaction(
                    user_id=user_id,
                    book_id=book_id,
                    transaction_type=TransactionType.BORROW,
                    transaction_date=now,
                    due_date=loan_policy.calculate_due_date(now),
                    status=TransactionStatus.ACTIVE,
                )
            )

            # 6. Commit
            await self.db.commit()
        except IntegrityError as e:
            # Índice único parcial: outro empréstimo ativo do par foi gravado antes
            await self.db.rollback()
            logger.warning(
                f"Empréstimo recusado (concorrente): user={user_id} book={book_id}"
            )
            raise DuplicateActiveLoanError(
                "Usuário já possui empréstimo ativo deste livro",
                user_id=user_id,
                book_id=book_id,
            ) from e
        except LibraryError as e:
            await self.db.rollback()
            logger.warning(
                f"Empréstimo recusado: user={user_id} book={book_id} "
                f"({e.error_code}: {e.message})"
            )
            raise
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            f"Empréstimo registrado: transação {transaction.id} "
            f"user={user_id} book={book_id} due={transaction.due_date.isoformat()}"
        )
        return await self._reload(transaction.id)

    # ==========================================
    # Return
    # ==========================================

    async def return_book(self, user_id: int, book_id: int) -> Transaction:
        """
        Processa a devolução do livro pelo usuário.

        Fluxo:
            1. Verifica se o usuário existe
            2. Busca o livro com lock de linha
            3. Busca o empréstimo ACTIVE do par
            4. Calcula multa (dias inteiros de atraso * 1,00)
            5. Fecha o BORROW (RETURNED, return_date, fine)
            6. Cria transação RETURN
            7. Incrementa available_copies
            8. Commit

        Args:
            user_id: ID do usuário
            book_id: ID do livro

        Returns:
            Transação RETURN criada

        Raises:
            NotFoundError: Usuário ou livro não encontrado
            NoActiveLoanError: Não há empréstimo ativo do par
            InternalConsistencyError: Estoque já completo com empréstimo ativo
        """
        now = self.clock()

        try:
            # 1. Usuário
            await self._get_user(user_id)

            # 2. Livro (lock)
            await self.book_service.get_for_update(book_id)

            # 3. Empréstimo ativo
            borrow = await self.transaction_repo.get_active(user_id, book_id)
            if borrow is None:
                raise NoActiveLoanError(
                    "Nenhum empréstimo ativo deste livro para o usuário",
                    user_id=user_id,
                    book_id=book_id,
                )

            # 4. Multa
            fine = loan_policy.calculate_fine(borrow.due_date, now)

            # 5. Fecha o empréstimo
            borrow.status = TransactionStatus.RETURNED
            borrow.return_date = now
            borrow.fine = fine

            # 6. Lançamento de devolução
            transaction = await self.transaction_repo.add(
                Transaction(
                    user_id=user_id,
                    book_id=book_id,
                    transaction_type=TransactionType.RETURN,
                    transaction_date=now,
                    return_date=now,
                    status=TransactionStatus.RETURNED,
                )
            )

            # 7. Estoque
            await self.book_service.increment_available(book_id)

            # 8. Commit
            await self.db.commit()
        except LibraryError as e:
            await self.db.rollback()
            logger.warning(
                f"Devolução recusada: user={user_id} book={book_id} "
                f"({e.error_code}: {e.message})"
            )
            raise
        except Exception:
            await self.db.rollback()
            raise

        if fine is not None:
            logger.info(
                f"Devolução registrada com atraso: transação {transaction.id} "
                f"user={user_id} book={book_id} multa={fine}"
            )
        else:
            logger.info(
                f"Devolução registrada: transação {transaction.id} "
                f"user={user_id} book={book_id}"
            )
        return await self._reload(transaction.id)

    # ==========================================
    # Consultas
    # ==========================================

    async def list_all(self) -> list[Transaction]:
        """Lista todas as transações."""
        return await self.transaction_repo.list_all()

    async def list_by_user(self, user_id: int) -> list[Transaction]:
        """Lista transações de um usuário."""
        return await self.transaction_repo.list_by_user(user_id)

    async def list_by_book(self, book_id: int) -> list[Transaction]:
        """Lista transações de um livro."""
        return await self.transaction_repo.list_by_book(book_id)

    async def list_overdue(self) -> list[Transaction]:
        """Lista empréstimos ativos com prazo vencido em relação ao relógio."""
        return await self.transaction_repo.list_overdue(self.clock())

    async def list_active(self) -> list[Transaction]:
        """Lista empréstimos ativos."""
        return await self.transaction_repo.list_active()

    # ==========================================
    # Helpers
    # ==========================================

    async def _get_user(self, user_id: int):
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("Usuário não encontrado", user_id=user_id)
        return user

    async def _reload(self, transaction_id: int) -> Transaction:
        """Recarrega a transação com usuário e livro atualizados."""
        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.id == transaction_id)
            .options(
                selectinload(Transaction.user),
                selectinload(Transaction.book),
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()
