"""
Model de transação (histórico de empréstimos e devoluções).
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, Numeric, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.db.session import Base
from library_api.models.base import IntIDMixin, TimestampMixin
from library_api.models.enums import TransactionStatus, TransactionType

if TYPE_CHECKING:
    from library_api.models.user import User
    from library_api.models.book import Book


class Transaction(Base, IntIDMixin, TimestampMixin):
    """
    Lançamento no histórico de transações.

    Cada empréstimo concluído gera duas linhas:
        - BORROW: criada ACTIVE no empréstimo, fechada como RETURNED
          na devolução (return_date e, se houver atraso, fine)
        - RETURN: inserida na devolução, já RETURNED, sem due_date e sem fine

    Regras de negócio:
        - Prazo: 14 dias a partir do empréstimo
        - Multa: 1,00 por dia inteiro de atraso
        - No máximo uma transação ACTIVE por (usuário, livro)

    Attributes:
        id: ID inteiro da transação
        user_id: FK para o usuário
        book_id: FK para o livro
        transaction_type: BORROW ou RETURN
        transaction_date: Momento do lançamento
        due_date: Prazo de devolução (só BORROW)
        return_date: Momento da devolução
        fine: Multa cobrada (null se não houve atraso)
        status: ACTIVE ou RETURNED
    """
    __tablename__ = "transactions"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )
    book_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("books.id", ondelete="RESTRICT"),
        nullable=False,
    )
    transaction_type: Mapped[TransactionType] = mapped_column(
        Enum(TransactionType, name="transaction_type"),
        nullable=False,
    )
    transaction_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    due_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    return_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    fine: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 2),
        nullable=True,
    )
    status: Mapped[TransactionStatus] = mapped_column(
        Enum(TransactionStatus, name="transaction_status"),
        nullable=False,
    )

    # Relationships
    user: Mapped["User"] = relationship("User", lazy="selectin")
    book: Mapped["Book"] = relationship("Book", lazy="selectin")

    __table_args__ = (
        Index("ix_transactions_user_id", "user_id"),
        Index("ix_transactions_book_id", "book_id"),
        Index("ix_transactions_status", "status"),
        # Índice para buscar transações atrasadas
        Index("ix_transactions_overdue", "status", "due_date"),
        # Um único empréstimo ativo por (usuário, livro)
        Index(
            "uq_transactions_active_user_book",
            "user_id",
            "book_id",
            unique=True,
            postgresql_where=text("status = 'ACTIVE'"),
            sqlite_where=text("status = 'ACTIVE'"),
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Transaction {self.id} - {self.transaction_type.value} "
            f"{self.status.value}>"
        )
