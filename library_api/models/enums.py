"""
Enums utilizados nos models da aplicação.
"""

import enum


class UserRole(str, enum.Enum):
    """Roles de usuário no sistema."""
    LIBRARIAN = "LIBRARIAN"
    MEMBER = "MEMBER"


class TransactionType(str, enum.Enum):
    """Tipo de lançamento no histórico de transações."""
    BORROW = "BORROW"
    RETURN = "RETURN"


class TransactionStatus(str, enum.Enum):
    """
    Status de uma transação.

    Fluxo:
        BORROW criado como ACTIVE -> RETURNED na devolução
        RETURN já nasce RETURNED
    """
    ACTIVE = "ACTIVE"      # Livro com o usuário
    RETURNED = "RETURNED"  # Empréstimo encerrado
