from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from utils.constants import RECURRENCE_NONE


@dataclass(frozen=True)
class Transaction:
    id: int
    date: date              # anchor: the first occurrence
    description: str
    amount: Decimal         # signed; negative = expense
    recurrence: str = RECURRENCE_NONE

    @property
    def is_expense(self) -> bool:
        return self.amount < 0

    @property
    def is_recurring(self) -> bool:
        return self.recurrence != RECURRENCE_NONE

    @property
    def magnitude(self) -> Decimal:
        return abs(self.amount)
