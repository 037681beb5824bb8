"""
Schemas Pydantic para Transaction.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, computed_field

from library_api.models.enums import TransactionStatus, TransactionType
from library_api.services import loan_policy


class TransactionRead(BaseModel):
    """Schema de leitura básico de transação."""

    id: int
    user_id: int
    book_id: int
    transaction_type: TransactionType
    transaction_date: datetime
    due_date: datetime | None = None
    return_date: datetime | None = None
    fine: Decimal | None = None
    status: TransactionStatus

    model_config = {"from_attributes": True}


class TransactionDetail(TransactionRead):
    """
    Transação com dados de usuário e livro e situação de atraso.

    is_overdue e days_overdue são calculados no momento da serialização,
    apenas para BORROW ainda ACTIVE.
    """

    username: str | None = None
    book_title: str | None = None
    book_isbn: str | None = None

    @computed_field
    @property
    def is_overdue(self) -> bool:
        """True se o empréstimo está em aberto e com prazo vencido."""
        if self.status != TransactionStatus.ACTIVE or self.due_date is None:
            return False
        return loan_policy.is_overdue(self.due_date, loan_policy.utcnow())

    @computed_field
    @property
    def days_overdue(self) -> int:
        """Dias inteiros em atraso (0 se não atrasado ou já devolvido)."""
        if not self.is_overdue:
            return 0
        return loan_policy.days_overdue(self.due_date, loan_policy.utcnow())

    @classmethod
    def from_transaction(cls, transaction) -> "TransactionDetail":
        """
        Cria TransactionDetail a partir de um Transaction com relações.

        Args:
            transaction: Objeto Transaction do SQLAlchemy (user e book
                carregados via selectin)
        """
        user = getattr(transaction, "user", None)
        book = getattr(transaction, "book", None)

        return cls(
            id=transaction.id,
            user_id=transaction.user_id,
            book_id=transaction.book_id,
            transaction_type=transaction.transaction_type,
            transaction_date=transaction.transaction_date,
            due_date=transaction.due_date,
            return_date=transaction.return_date,
            fine=transaction.fine,
            status=transaction.status,
            username=user.username if user else None,
            book_title=book.title if book else None,
            book_isbn=book.isbn if book else None,
        )
