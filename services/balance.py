from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal

from models.ledger import Ledger
from services.recurrence import expand, occurrences_between
from utils.date_helpers import date_range


def balance_as_of(ledger: Ledger, target: date) -> Decimal:
    """Starting balance plus every occurrence on or before target."""
    total = ledger.starting_balance
    for tx in ledger.transactions:
        total += tx.amount * len(expand(tx, target))
    return total


def running_balances(ledger: Ledger, start: date, end: date) -> dict[date, Decimal]:
    """Return {day: balance_as_of(day)} for every day in [start, end].

    Computed in a single forward sweep: the balance carried into start is
    computed once, then each day adds only the contributions that land on it.
    """
    if start > end:
        raise ValueError(f"Empty range: {start} > {end}")

    if start == date.min:
        opening = ledger.starting_balance
    else:
        opening = balance_as_of(ledger, start - timedelta(days=1))

    deltas: dict[date, Decimal] = defaultdict(Decimal)
    for tx in ledger.transactions:
        for d in occurrences_between(tx, start, end):
            deltas[d] += tx.amount

    result: dict[date, Decimal] = {}
    balance = opening
    for day in date_range(start, end):
        balance += deltas.get(day, Decimal(0))
        result[day] = balance
    return result
