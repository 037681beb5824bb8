"""
Testes unitários das regras de prazo e multa.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from library_api.services.loan_policy import (
    FINE_PER_DAY,
    LOAN_PERIOD_DAYS,
    as_utc,
    calculate_due_date,
    calculate_fine,
    can_borrow,
    days_overdue,
    is_overdue,
)

T0 = datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc)
DUE = T0 + timedelta(days=LOAN_PERIOD_DAYS)


class TestDueDate:
    def test_due_date_is_fourteen_days_after_borrow(self):
        assert calculate_due_date(T0) == datetime(2026, 3, 15, 10, 0, tzinfo=timezone.utc)


class TestOverdue:
    def test_not_overdue_before_due_date(self):
        assert is_overdue(DUE, DUE - timedelta(seconds=1)) is False

    def test_not_overdue_exactly_at_due_date(self):
        assert is_overdue(DUE, DUE) is False

    def test_overdue_after_due_date(self):
        assert is_overdue(DUE, DUE + timedelta(seconds=1)) is True

    def test_naive_datetime_is_treated_as_utc(self):
        """SQLite devolve datetimes sem timezone."""
        naive_due = DUE.replace(tzinfo=None)
        assert as_utc(naive_due) == DUE
        assert is_overdue(naive_due, DUE + timedelta(hours=1)) is True

    def test_days_overdue_truncates(self):
        assert days_overdue(DUE, DUE + timedelta(days=2, hours=23)) == 2

    def test_days_overdue_zero_when_on_time(self):
        assert days_overdue(DUE, DUE - timedelta(days=3)) == 0


class TestFine:
    def test_no_fine_when_returned_on_time(self):
        assert calculate_fine(DUE, DUE - timedelta(days=1)) is None

    def test_no_fine_exactly_at_due_date(self):
        assert calculate_fine(DUE, DUE) is None

    def test_fine_is_whole_days_times_rate(self):
        fine = calculate_fine(DUE, DUE + timedelta(days=3, hours=1))
        assert fine == Decimal("3.00")
        assert fine == 3 * FINE_PER_DAY

    def test_fine_zero_when_less_than_one_day_late(self):
        """Atrasado, porém menos de um dia: multa registrada como 0.00."""
        assert calculate_fine(DUE, DUE + timedelta(hours=5)) == Decimal("0.00")

    def test_fine_rate_is_one_per_day(self):
        assert FINE_PER_DAY == Decimal("1.00")


class TestCanBorrow:
    def test_can_borrow_with_copies_and_no_active_loan(self):
        assert can_borrow(1, False) is True

    def test_cannot_borrow_without_copies(self):
        assert can_borrow(0, False) is False

    def test_cannot_borrow_twice(self):
        assert can_borrow(3, True) is False
