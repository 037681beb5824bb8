"""
Exceções de domínio e handlers HTTP.

Os serviços levantam estas exceções; os handlers registrados em
register_exception_handlers convertem cada uma na resposta HTTP
correspondente com corpo {"error": <código>, "detail": <mensagem>}.

Status codes:
    - NotFoundError: 404
    - ConflictError: 409
    - InvalidStateError: 400
    - InternalConsistencyError: 500 (mensagem genérica, detalhes só no log)
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class LibraryError(Exception):
    """Base para erros de domínio da biblioteca."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "library_error"

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context


class NotFoundError(LibraryError):
    """Usuário, livro ou transação inexistente."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "not_found"


class ConflictError(LibraryError):
    """Violação de unicidade ou de referência."""

    status_code = status.HTTP_409_CONFLICT
    error_code = "conflict"


class DuplicateActiveLoanError(ConflictError):
    error_code = "duplicate_active_loan"


class InvalidStateError(LibraryError):
    """Operação válida, mas não permitida no estado atual."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "invalid_state"


class BookUnavailableError(InvalidStateError):
    error_code = "book_unavailable"


class NoActiveLoanError(InvalidStateError):
    error_code = "no_active_loan"


class InternalConsistencyError(LibraryError):
    """
    Estado persistido violou um invariante (ex.: available_copies fora
    de [0, total_copies]). Nunca deve acontecer em operação normal.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "internal_consistency"


async def library_error_handler(request: Request, exc: LibraryError) -> JSONResponse:
    """Converte LibraryError em resposta JSON."""
    if isinstance(exc, InternalConsistencyError):
        logger.error(
            f"Inconsistência interna em {request.method} {request.url.path}: "
            f"{exc.message} {exc.context}"
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.error_code, "detail": "Erro interno do servidor"},
        )

    logger.info(
        f"{request.method} {request.url.path} -> {exc.status_code} "
        f"({exc.error_code}): {exc.message}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error_code, "detail": exc.message},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Erros não mapeados viram 500 genérico, com stack trace no log."""
    logger.exception(
        f"Erro não tratado em {request.method} {request.url.path}: {exc}"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "internal_error", "detail": "Erro interno do servidor"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registra os handlers de exceção na aplicação."""
    app.add_exception_handler(LibraryError, library_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
