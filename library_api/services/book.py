"""
Service para lógica de negócio de Book.

Além do CRUD do acervo, concentra as duas únicas operações que alteram
available_copies (decrement_available/increment_available), usadas pelo
TransactionService dentro da mesma unidade de trabalho.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.exceptions import (
    BookUnavailableError,
    ConflictError,
    InternalConsistencyError,
    InvalidStateError,
    NotFoundError,
)
from library_api.models.book import Book
from library_api.repositories.book import BookRepository
from library_api.schemas.book import BookCreate, BookUpdate

logger = logging.getLogger(__name__)

# Colunas NOT NULL: null explícito no update é ignorado
REQUIRED_FIELDS = frozenset({"title", "author", "isbn"})


class BookService:
    """Service para operações de Book."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = BookRepository(db)

    # ==========================================
    # Consultas
    # ==========================================

    async def get_by_id(self, book_id: int) -> Book:
        """
        Busca livro por ID.

        Raises:
            NotFoundError: Livro não encontrado
        """
        book = await self.repo.get_by_id(book_id)
        if not book:
            raise NotFoundError("Livro não encontrado", book_id=book_id)
        return book

    async def get_by_isbn(self, isbn: str) -> Book:
        """
        Busca livro por ISBN.

        Raises:
            NotFoundError: Livro não encontrado
        """
        book = await self.repo.get_by_isbn(isbn)
        if not book:
            raise NotFoundError("Livro não encontrado", isbn=isbn)
        return book

    async def search(
        self,
        title: str | None = None,
        author: str | None = None,
        category: str | None = None,
        available: bool | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Book], int]:
        """Lista livros com filtros e paginação."""
        return await self.repo.search(
            title=title,
            author=author,
            category=category,
            available=available,
            page=page,
            page_size=page_size,
        )

    async def list_available(self) -> list[Book]:
        """Lista livros com exemplar disponível."""
        return await self.repo.get_available()

    # ==========================================
    # CRUD do acervo
    # ==========================================

    async def create(self, data: BookCreate) -> Book:
        """
        Cadastra livro com todos os exemplares disponíveis.

        Raises:
            ConflictError: ISBN já cadastrado
        """
        if await self.repo.isbn_exists(data.isbn):
            raise ConflictError("ISBN já cadastrado", isbn=data.isbn)

        try:
            book = await self.repo.create(
                **data.model_dump(),
                available_copies=data.total_copies,
            )
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError("ISBN já cadastrado", isbn=data.isbn) from e
        logger.info(f"Livro cadastrado: {book.isbn} (ID: {book.id})")
        return book

    async def update(self, book_id: int, data: BookUpdate) -> Book:
        """
        Atualiza dados do livro.

        Só os campos enviados são alterados; null limpa campos opcionais.
        Se total_copies mudar, os exemplares emprestados são preservados:
        available_copies = novo_total - emprestados.

        Raises:
            NotFoundError: Livro não encontrado
            ConflictError: ISBN já cadastrado em outro livro
            InvalidStateError: Novo total menor que exemplares emprestados
        """
        book = await self.get_by_id(book_id)

        if data.isbn and data.isbn != book.isbn:
            if await self.repo.isbn_exists(data.isbn):
                raise ConflictError("ISBN já cadastrado", isbn=data.isbn)

        changes = {
            key: value
            for key, value in data.model_dump(
                exclude_unset=True, exclude={"total_copies"}
            ).items()
            if value is not None or key not in REQUIRED_FIELDS
        }

        if data.total_copies is not None and data.total_copies != book.total_copies:
            loaned = book.loaned_copies
            if not await self.repo.resize_copies(book_id, data.total_copies):
                await self.db.rollback()
                raise InvalidStateError(
                    "Total de exemplares menor que a quantidade emprestada",
                    book_id=book_id,
                    total_copies=data.total_copies,
                    loaned_copies=loaned,
                )

        try:
            return await self.repo.update(book, **changes)
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError("ISBN já cadastrado", isbn=data.isbn) from e

    async def delete(self, book_id: int) -> None:
        """
        Remove livro do acervo.

        Raises:
            NotFoundError: Livro não encontrado
            ConflictError: Livro possui histórico de transações
        """
        book = await self.get_by_id(book_id)
        try:
            await self.repo.delete(book)
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(
                "Livro possui transações registradas e não pode ser removido",
                book_id=book_id,
            ) from e
        logger.info(f"Livro removido: ID {book_id}")

    # ==========================================
    # Estoque (usado pelo TransactionService, sem commit)
    # ==========================================

    async def get_for_update(self, book_id: int) -> Book:
        """
        Busca livro com lock de linha para o fluxo de empréstimo/devolução.

        Raises:
            NotFoundError: Livro não encontrado
        """
        book = await self.repo.get_for_update(book_id)
        if not book:
            raise NotFoundError("Livro não encontrado", book_id=book_id)
        return book

    async def decrement_available(self, book_id: int) -> Book:
        """
        Retira um exemplar do estoque disponível.

        Raises:
            BookUnavailableError: Nenhum exemplar disponível (outro
                empréstimo concorrente levou o último)
            InternalConsistencyError: Contagem fora de [0, total]
        """
        if not await self.repo.decrement_available(book_id):
            logger.warning(f"Decremento recusado, livro {book_id} sem exemplares")
            raise BookUnavailableError(
                "Livro sem exemplares disponíveis",
                book_id=book_id,
            )
        return await self._check_counts(book_id)

    async def increment_available(self, book_id: int) -> Book:
        """
        Devolve um exemplar ao estoque disponível.

        Raises:
            InternalConsistencyError: available_copies já igual ao total
                ou contagem fora de [0, total]
        """
        if not await self.repo.increment_available(book_id):
            logger.error(
                f"Incremento recusado para o livro {book_id}: "
                f"available_copies já atingiu total_copies"
            )
            raise InternalConsistencyError(
                "Devolução excederia o total de exemplares",
                book_id=book_id,
            )
        return await self._check_counts(book_id)

    async def _check_counts(self, book_id: int) -> Book:
        book = await self.repo.refresh_counts(book_id)
        if book is None or not 0 <= book.available_copies <= book.total_copies:
            counts = (
                (book.available_copies, book.total_copies) if book else None
            )
            logger.error(f"Contagem inválida para o livro {book_id}: {counts}")
            raise InternalConsistencyError(
                "Contagem de exemplares inconsistente",
                book_id=book_id,
                counts=counts,
            )
        return book
