"""
Endpoints de Transações (empréstimo e devolução).

Contratos:
    - POST /transactions/borrow?userId=&bookId=: Empresta livro
    - POST /transactions/return?userId=&bookId=: Devolve livro
    - GET /transactions: Todas as transações (LIBRARIAN)
    - GET /transactions/user/{user_id}: Transações do usuário
    - GET /transactions/book/{book_id}: Transações do livro (LIBRARIAN)
    - GET /transactions/overdue: Empréstimos atrasados (LIBRARIAN)
    - GET /transactions/active: Empréstimos em aberto (LIBRARIAN)

Autorização:
    - MEMBER: empresta, devolve e consulta apenas para si mesmo
    - LIBRARIAN: qualquer usuário

Status codes:
    - 200: Sucesso (devolução e consultas)
    - 201: Empréstimo criado
    - 400: Livro indisponível ou sem empréstimo ativo
    - 401: Não autenticado
    - 403: Sem permissão
    - 404: Usuário ou livro não encontrado
    - 409: Usuário já está com o livro
"""

from fastapi import APIRouter, Depends, Query, status

from library_api.core.deps import (
    CurrentUser,
    DbSession,
    LibrarianUser,
    ensure_self_or_librarian,
)
from library_api.core.rate_limit import rate_limit_transactions
from library_api.schemas.base import ErrorResponse
from library_api.schemas.transaction import TransactionDetail
from library_api.services.transaction import TransactionService

router = APIRouter(prefix="/transactions", tags=["Transactions"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


@router.post(
    "/borrow",
    response_model=TransactionDetail,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Emprestar livro",
    description="Registra empréstimo com prazo de 14 dias.",
)
async def borrow_book(
    db: DbSession,
    current_user: CurrentUser,
    user_id: int = Query(..., alias="userId", description="ID do usuário"),
    book_id: int = Query(..., alias="bookId", description="ID do livro"),
    _: None = Depends(rate_limit_transactions),
) -> TransactionDetail:
    """
    Empresta um exemplar do livro.

    Raises:
        400: Nenhum exemplar disponível
        404: Usuário ou livro não encontrado
        409: Usuário já possui empréstimo ativo deste livro
    """
    ensure_self_or_librarian(current_user, user_id)
    transaction = await TransactionService(db).borrow(user_id, book_id)
    return TransactionDetail.from_transaction(transaction)


@router.post(
    "/return",
    response_model=TransactionDetail,
    responses=ERROR_RESPONSES,
    summary="Devolver livro",
    description="Encerra o empréstimo ativo e aplica multa de 1,00 por dia de atraso.",
)
async def return_book(
    db: DbSession,
    current_user: CurrentUser,
    user_id: int = Query(..., alias="userId", description="ID do usuário"),
    book_id: int = Query(..., alias="bookId", description="ID do livro"),
    _: None = Depends(rate_limit_transactions),
) -> TransactionDetail:
    """
    Devolve o livro e retorna a transação RETURN.

    A multa fica registrada na transação BORROW encerrada.

    Raises:
        400: Não há empréstimo ativo deste livro para o usuário
        404: Usuário ou livro não encontrado
    """
    ensure_self_or_librarian(current_user, user_id)
    transaction = await TransactionService(db).return_book(user_id, book_id)
    return TransactionDetail.from_transaction(transaction)


@router.get(
    "",
    response_model=list[TransactionDetail],
    summary="Listar transações",
    description="**Requer LIBRARIAN.**",
)
async def list_transactions(
    db: DbSession,
    librarian: LibrarianUser,
) -> list[TransactionDetail]:
    transactions = await TransactionService(db).list_all()
    return [TransactionDetail.from_transaction(t) for t in transactions]


@router.get(
    "/user/{user_id}",
    response_model=list[TransactionDetail],
    summary="Transações do usuário",
)
async def list_user_transactions(
    user_id: int,
    db: DbSession,
    current_user: CurrentUser,
) -> list[TransactionDetail]:
    """Bibliotecários consultam qualquer usuário; membros apenas a si mesmos."""
    ensure_self_or_librarian(current_user, user_id)
    transactions = await TransactionService(db).list_by_user(user_id)
    return [TransactionDetail.from_transaction(t) for t in transactions]


@router.get(
    "/book/{book_id}",
    response_model=list[TransactionDetail],
    summary="Transações do livro",
    description="**Requer LIBRARIAN.**",
)
async def list_book_transactions(
    book_id: int,
    db: DbSession,
    librarian: LibrarianUser,
) -> list[TransactionDetail]:
    transactions = await TransactionService(db).list_by_book(book_id)
    return [TransactionDetail.from_transaction(t) for t in transactions]


@router.get(
    "/overdue",
    response_model=list[TransactionDetail],
    summary="Empréstimos atrasados",
    description="Empréstimos ativos com prazo vencido. **Requer LIBRARIAN.**",
)
async def list_overdue_transactions(
    db: DbSession,
    librarian: LibrarianUser,
) -> list[TransactionDetail]:
    transactions = await TransactionService(db).list_overdue()
    return [TransactionDetail.from_transaction(t) for t in transactions]


@router.get(
    "/active",
    response_model=list[TransactionDetail],
    summary="Empréstimos em aberto",
    description="**Requer LIBRARIAN.**",
)
async def list_active_transactions(
    db: DbSession,
    librarian: LibrarianUser,
) -> list[TransactionDetail]:
    transactions = await TransactionService(db).list_active()
    return [TransactionDetail.from_transaction(t) for t in transactions]
