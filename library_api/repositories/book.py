"""
Repository para operações de Book no banco de dados.

As mutações de estoque (decrement_available/increment_available) são
UPDATEs condicionais de um único statement: a condição no WHERE torna o
teste e a alteração atômicos mesmo sem lock de linha.
"""

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.models.book import Book
from library_api.repositories.base import BaseRepository


class BookRepository(BaseRepository[Book]):
    """Repository para operações CRUD de Book."""

    def __init__(self, db: AsyncSession):
        super().__init__(Book, db)

    async def get_by_isbn(self, isbn: str) -> Book | None:
        """Busca livro por ISBN."""
        result = await self.db.execute(select(Book).where(Book.isbn == isbn))
        return result.scalar_one_or_none()

    async def isbn_exists(self, isbn: str) -> bool:
        """Verifica se ISBN já está cadastrado."""
        return await self.get_by_isbn(isbn) is not None

    async def get_for_update(self, book_id: int) -> Book | None:
        """
        Busca livro com lock de linha (SELECT ... FOR UPDATE).

        populate_existing garante que a instância no identity map seja
        recarregada do banco. Em SQLite o FOR UPDATE é omitido.
        """
        result = await self.db.execute(
            select(Book)
            .where(Book.id == book_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def refresh_counts(self, book_id: int) -> Book | None:
        """Relê o livro do banco, sobrescrevendo a instância em memória."""
        result = await self.db.execute(
            select(Book)
            .where(Book.id == book_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def decrement_available(self, book_id: int) -> bool:
        """
        Decrementa available_copies se houver exemplar disponível.

        Returns:
            False se nenhuma linha satisfez available_copies > 0
        """
        result = await self.db.execute(
            update(Book)
            .where(Book.id == book_id, Book.available_copies > 0)
            .values(available_copies=Book.available_copies - 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def increment_available(self, book_id: int) -> bool:
        """
        Incrementa available_copies se estiver abaixo do total.

        Returns:
            False se nenhuma linha satisfez available_copies < total_copies
        """
        result = await self.db.execute(
            update(Book)
            .where(Book.id == book_id, Book.available_copies < Book.total_copies)
            .values(available_copies=Book.available_copies + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def resize_copies(self, book_id: int, total_copies: int) -> bool:
        """
        Altera total_copies mantendo os exemplares emprestados.

        available_copies passa a ser total_copies - emprestados.

        Returns:
            False se o novo total é menor que os exemplares emprestados
        """
        loaned = Book.total_copies - Book.available_copies
        result = await self.db.execute(
            update(Book)
            .where(Book.id == book_id, loaned <= total_copies)
            .values(
                total_copies=total_copies,
                available_copies=total_copies - loaned,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def search(
        self,
        title: str | None = None,
        author: str | None = None,
        category: str | None = None,
        available: bool | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Book], int]:
        """
        Busca livros com filtros e paginação.

        Args:
            title: Filtro por título (parcial, case-insensitive)
            author: Filtro por autor (parcial, case-insensitive)
            category: Filtro por categoria (exato, case-insensitive)
            available: True para apenas livros com exemplar disponível
            page: Número da página
            page_size: Tamanho da página

        Returns:
            Tupla (lista de livros, total)
        """
        skip = (page - 1) * page_size

        query = select(Book)

        if title:
            query = query.where(Book.title.ilike(f"%{title}%"))

        if author:
            query = query.where(Book.author.ilike(f"%{author}%"))

        if category:
            query = query.where(func.lower(Book.category) == category.lower())

        if available is True:
            query = query.where(Book.available_copies > 0)
        elif available is False:
            query = query.where(Book.available_copies == 0)

        # Total com filtros
        count_result = await self.db.execute(
            select(func.count()).select_from(query.subquery())
        )
        total = count_result.scalar_one()

        # Resultados paginados
        result = await self.db.execute(
            query
            .offset(skip)
            .limit(page_size)
            .order_by(Book.title, Book.id)
        )
        books = list(result.scalars().all())

        return books, total

    async def get_available(self) -> list[Book]:
        """Lista livros com ao menos um exemplar disponível."""
        result = await self.db.execute(
            select(Book)
            .where(Book.available_copies > 0)
            .order_by(Book.title, Book.id)
        )
        return list(result.scalars().all())
