"""Read-side queries consumed by the calendar: what happens on a day, and
what the balance is at the end of it. All functions take a ``Ledger``
snapshot and never modify it.
"""
from datetime import date
from decimal import Decimal

from models.ledger import DayCell, Ledger
from models.transaction import Transaction
from services.balance import balance_as_of, running_balances
from services.recurrence import occurs_on
from utils.date_helpers import date_range, month_bounds


def transactions_on(ledger: Ledger, day: date) -> list[Transaction]:
    """Transactions with an occurrence on day, ordered by id."""
    return sorted(
        (t for t in ledger.transactions if occurs_on(t, day)),
        key=lambda t: t.id,
    )


def balance_on(ledger: Ledger, day: date) -> Decimal:
    """Balance at the end of day, after every occurrence on or before it."""
    return balance_as_of(ledger, day)


def range_view(ledger: Ledger, start: date, end: date) -> list[DayCell]:
    """One DayCell per day in [start, end]."""
    balances = running_balances(ledger, start, end)
    return [
        DayCell(date=d, transactions=transactions_on(ledger, d), balance=balances[d])
        for d in date_range(start, end)
    ]


def month_view(ledger: Ledger, year: int, month: int) -> list[DayCell]:
    """One cell per day of the month, balances from a single sweep."""
    first, last = month_bounds(year, month)
    return range_view(ledger, first, last)
