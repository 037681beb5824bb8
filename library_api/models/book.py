"""
Model de livro do acervo.
"""

from typing import Optional

from sqlalchemy import CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from library_api.db.session import Base
from library_api.models.base import IntIDMixin, TimestampMixin


class Book(Base, IntIDMixin, TimestampMixin):
    """
    Livro do acervo com contagem de exemplares.

    Invariante: 0 <= available_copies <= total_copies, garantida também
    por CHECK constraints no banco. available_copies só muda por empréstimo
    e devolução (ver BookService.decrement_available/increment_available).

    Attributes:
        id: ID inteiro do livro
        title: Título
        author: Nome do autor
        isbn: ISBN único
        publisher: Editora (opcional)
        publication_year: Ano de publicação (opcional)
        category: Categoria/gênero (opcional)
        total_copies: Exemplares no acervo (>= 1)
        available_copies: Exemplares disponíveis para empréstimo
        description: Sinopse (opcional)
    """
    __tablename__ = "books"

    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    author: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    isbn: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        nullable=False,
        index=True,
    )
    publisher: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    publication_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        index=True,
    )
    total_copies: Mapped[int] = mapped_column(Integer, nullable=False)
    available_copies: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("total_copies >= 1", name="ck_books_total_copies_positive"),
        CheckConstraint(
            "available_copies >= 0",
            name="ck_books_available_copies_non_negative",
        ),
        CheckConstraint(
            "available_copies <= total_copies",
            name="ck_books_available_le_total",
        ),
    )

    def __repr__(self) -> str:
        return f"<Book {self.isbn} - {self.available_copies}/{self.total_copies}>"

    @property
    def loaned_copies(self) -> int:
        """Exemplares atualmente emprestados."""
        return self.total_copies - self.available_copies
