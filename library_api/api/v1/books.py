"""
Endpoints de Livros.

Contratos:
    - GET /books: Lista livros paginado com filtros (público)
    - GET /books/available: Livros com exemplar disponível (público)
    - GET /books/isbn/{isbn}: Busca por ISBN (público)
    - GET /books/{id}: Detalhes do livro (público)
    - POST /books: Cadastra livro (LIBRARIAN)
    - PUT /books/{id}: Atualiza livro (LIBRARIAN)
    - DELETE /books/{id}: Remove livro (LIBRARIAN)

Status codes:
    - 200: Sucesso
    - 201: Criado com sucesso
    - 204: Removido
    - 400: Novo total menor que exemplares emprestados
    - 401: Não autenticado
    - 403: Sem permissão (não é bibliotecário)
    - 404: Livro não encontrado
    - 409: ISBN duplicado ou livro com transações
"""

from fastapi import APIRouter, Depends, Query, status

from library_api.core.deps import DbSession, LibrarianUser
from library_api.core.rate_limit import rate_limit_default
from library_api.schemas.base import PaginatedResponse
from library_api.schemas.book import BookCreate, BookRead, BookUpdate
from library_api.services.book import BookService

router = APIRouter(prefix="/books", tags=["Books"])


@router.get(
    "",
    response_model=PaginatedResponse[BookRead],
    summary="Listar livros",
    description="Lista livros com filtros por título, autor, categoria e disponibilidade.",
)
async def list_books(
    db: DbSession,
    title: str | None = Query(None, description="Trecho do título"),
    author: str | None = Query(None, description="Trecho do nome do autor"),
    category: str | None = Query(None, description="Categoria exata"),
    available: bool | None = Query(None, description="Apenas com exemplar disponível"),
    page: int = Query(1, ge=1, description="Número da página"),
    page_size: int = Query(20, ge=1, le=100, description="Itens por página"),
    _: None = Depends(rate_limit_default),
) -> PaginatedResponse[BookRead]:
    books, total = await BookService(db).search(
        title=title,
        author=author,
        category=category,
        available=available,
        page=page,
        page_size=page_size,
    )
    return PaginatedResponse.create(
        items=[BookRead.model_validate(b) for b in books],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/available",
    response_model=list[BookRead],
    summary="Livros disponíveis",
)
async def list_available_books(db: DbSession) -> list[BookRead]:
    books = await BookService(db).list_available()
    return [BookRead.model_validate(b) for b in books]


@router.get(
    "/isbn/{isbn}",
    response_model=BookRead,
    summary="Buscar livro por ISBN",
)
async def get_book_by_isbn(isbn: str, db: DbSession) -> BookRead:
    book = await BookService(db).get_by_isbn(isbn)
    return BookRead.model_validate(book)


@router.get(
    "/{book_id}",
    response_model=BookRead,
    summary="Detalhes do livro",
)
async def get_book(book_id: int, db: DbSession) -> BookRead:
    book = await BookService(db).get_by_id(book_id)
    return BookRead.model_validate(book)


@router.post(
    "",
    response_model=BookRead,
    status_code=status.HTTP_201_CREATED,
    summary="Cadastrar livro",
    description="Cadastra livro com todos os exemplares disponíveis. **Requer LIBRARIAN.**",
)
async def create_book(
    data: BookCreate,
    db: DbSession,
    librarian: LibrarianUser,
) -> BookRead:
    book = await BookService(db).create(data)
    return BookRead.model_validate(book)


@router.put(
    "/{book_id}",
    response_model=BookRead,
    summary="Atualizar livro",
    description=(
        "Atualiza dados do livro. Alterar total_copies mantém os exemplares "
        "emprestados. **Requer LIBRARIAN.**"
    ),
)
async def update_book(
    book_id: int,
    data: BookUpdate,
    db: DbSession,
    librarian: LibrarianUser,
) -> BookRead:
    book = await BookService(db).update(book_id, data)
    return BookRead.model_validate(book)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remover livro",
    description="**Requer LIBRARIAN.** Livros com transações não podem ser removidos.",
)
async def delete_book(
    book_id: int,
    db: DbSession,
    librarian: LibrarianUser,
) -> None:
    await BookService(db).delete(book_id)
