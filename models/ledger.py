from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from models.transaction import Transaction


@dataclass(frozen=True)
class Ledger:
    """Read-only snapshot of the starting balance and all transactions."""
    starting_balance: Decimal
    transactions: tuple[Transaction, ...] = field(default_factory=tuple)

    def get(self, tx_id: int) -> Transaction | None:
        return next((t for t in self.transactions if t.id == tx_id), None)


@dataclass(frozen=True)
class DayCell:
    date: date
    transactions: list[Transaction]
    balance: Decimal
