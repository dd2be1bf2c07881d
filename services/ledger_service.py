from datetime import date
from decimal import Decimal, InvalidOperation

from database.ledger_store import LedgerStore
from models.ledger import Ledger
from models.transaction import Transaction
from utils.constants import RECURRENCES, RECURRENCE_NONE
from utils.currency import signed_amount
from utils.date_helpers import parse_date
from utils.logging_setup import get_logger

logger = get_logger(__name__)


class LedgerService:
    """Mutations of the ledger. Every change is written through to the store
    as a full overwrite; readers take a fresh snapshot afterwards."""

    def __init__(self, store: LedgerStore):
        self._store = store

    def snapshot(self) -> Ledger:
        return Ledger(
            starting_balance=self._store.load_starting_balance(),
            transactions=tuple(self._store.load_transactions()),
        )

    def get_all(self) -> list[Transaction]:
        return self._store.load_transactions()

    def get_by_id(self, tx_id: int) -> Transaction | None:
        return self.snapshot().get(tx_id)

    def get_starting_balance(self) -> Decimal:
        return self._store.load_starting_balance()

    def set_starting_balance(self, value) -> Decimal:
        amount = self._parse_decimal(value)
        if amount is None:
            raise ValueError("Starting balance must be a number.")
        self._store.save_starting_balance(amount)
        logger.info("Starting balance set to %s", amount)
        return amount

    def create(
        self,
        date_: str | date,
        description: str,
        amount,
        is_expense: bool = True,
        recurrence: str = RECURRENCE_NONE,
    ) -> Transaction:
        d, desc, magnitude = self._validate(date_, description, amount, recurrence)
        tx = Transaction(
            id=self._store.next_id(),
            date=d,
            description=desc,
            amount=signed_amount(magnitude, is_expense),
            recurrence=recurrence,
        )
        transactions = self._store.load_transactions()
        transactions.append(tx)
        self._store.save_transactions(transactions)
        logger.info("Added transaction %d (%s, %s, %s)", tx.id, tx.date, tx.amount, tx.recurrence)
        return tx

    def update(
        self,
        tx_id: int,
        date_: str | date,
        description: str,
        amount,
        is_expense: bool = True,
        recurrence: str = RECURRENCE_NONE,
    ) -> Transaction:
        """Replace the transaction with the given id; the id is kept."""
        d, desc, magnitude = self._validate(date_, description, amount, recurrence)
        transactions = self._store.load_transactions()
        index = next((i for i, t in enumerate(transactions) if t.id == tx_id), None)
        if index is None:
            raise KeyError(tx_id)
        tx = Transaction(
            id=tx_id,
            date=d,
            description=desc,
            amount=signed_amount(magnitude, is_expense),
            recurrence=recurrence,
        )
        transactions[index] = tx
        self._store.save_transactions(transactions)
        logger.info("Replaced transaction %d", tx_id)
        return tx

    def delete(self, tx_id: int):
        transactions = self._store.load_transactions()
        remaining = [t for t in transactions if t.id != tx_id]
        if len(remaining) == len(transactions):
            raise KeyError(tx_id)
        self._store.save_transactions(remaining)
        logger.info("Removed transaction %d", tx_id)

    def _parse_decimal(self, value) -> Decimal | None:
        if isinstance(value, Decimal):
            return value if value.is_finite() else None
        if isinstance(value, float):
            value = repr(value)
        try:
            d = Decimal(str(value).strip())
        except InvalidOperation:
            return None
        return d if d.is_finite() else None

    def _validate(self, date_, description, amount, recurrence) -> tuple[date, str, Decimal]:
        desc = (description or "").strip()
        amount_text = amount if not isinstance(amount, str) else amount.strip()
        if not desc or amount_text in (None, "") or not date_:
            raise ValueError("Please fill in all fields.")

        magnitude = self._parse_decimal(amount_text)
        if magnitude is None or magnitude <= 0:
            raise ValueError("Please enter a valid amount.")

        d = date_ if isinstance(date_, date) else parse_date(date_)
        if d is None:
            raise ValueError("Invalid date.")

        if recurrence not in RECURRENCES:
            raise ValueError("Invalid recurrence.")
        return d, desc, magnitude
