"""
Regras de empréstimo: prazo, atraso e multa.

Funções puras, sem acesso a banco. O relógio é sempre recebido como
argumento para que o serviço de transações possa injetar o instante atual.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

# Constantes de negócio
LOAN_PERIOD_DAYS = 14
FINE_PER_DAY = Decimal("1.00")


def utcnow() -> datetime:
    """Instante atual em UTC (timezone-aware)."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """
    Normaliza datetime para UTC aware.

    Bancos sem suporte a timezone (SQLite) devolvem datetimes naive,
    que são gravados sempre em UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def calculate_due_date(borrowed_at: datetime) -> datetime:
    """Prazo de devolução: data do empréstimo + 14 dias."""
    return borrowed_at + timedelta(days=LOAN_PERIOD_DAYS)


def is_overdue(due_date: datetime, now: datetime) -> bool:
    """True se `now` é estritamente posterior ao prazo."""
    return as_utc(now) > as_utc(due_date)


def days_overdue(due_date: datetime, now: datetime) -> int:
    """Dias inteiros de atraso, truncados (0 se não atrasado)."""
    if not is_overdue(due_date, now):
        return 0
    return (as_utc(now) - as_utc(due_date)).days


def calculate_fine(due_date: datetime, returned_at: datetime) -> Decimal | None:
    """
    Calcula a multa da devolução.

    Args:
        due_date: Prazo do empréstimo
        returned_at: Momento da devolução

    Returns:
        None se devolvido no prazo; caso contrário dias inteiros de atraso
        vezes FINE_PER_DAY. Atraso menor que um dia resulta em 0.00.
    """
    if not is_overdue(due_date, returned_at):
        return None
    return (Decimal(days_overdue(due_date, returned_at)) * FINE_PER_DAY).quantize(
        Decimal("0.01")
    )


def can_borrow(available_copies: int, has_active_loan: bool) -> bool:
    """Elegibilidade: há exemplar disponível e o usuário não tem o livro."""
    return available_copies > 0 and not has_active_loan
