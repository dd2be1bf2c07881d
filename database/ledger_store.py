"""sqlite-backed persistence for the ledger: the starting balance plus the
full transaction collection, both saved as whole-value overwrites.
"""
from decimal import Decimal, InvalidOperation
from typing import Iterable

from database.db_manager import DatabaseManager
from database.transaction_dao import TransactionDAO
from models.transaction import Transaction
from utils.constants import DEFAULT_STARTING_BALANCE
from utils.logging_setup import get_logger

logger = get_logger(__name__)


class LedgerStore:
    def __init__(self, db: DatabaseManager, tx_dao: TransactionDAO):
        self._db = db
        self._tx_dao = tx_dao

    def load_starting_balance(self) -> Decimal:
        raw = self._db.get_setting("starting_balance", "")
        if not raw:
            return DEFAULT_STARTING_BALANCE
        try:
            amount = Decimal(raw)
        except InvalidOperation:
            amount = None
        if amount is None or not amount.is_finite():
            raise ValueError(f"Stored starting balance is not a number: {raw!r}")
        return amount

    def save_starting_balance(self, amount: Decimal):
        self._db.set_setting("starting_balance", str(amount))
        logger.debug("Saved starting balance %s", amount)

    def load_transactions(self) -> list[Transaction]:
        return self._tx_dao.get_all()

    def save_transactions(self, transactions: Iterable[Transaction]):
        """Full overwrite, applied atomically."""
        transactions = list(transactions)
        conn = self._db.get_connection()
        with conn:
            self._tx_dao.replace_all(transactions, commit=False)
            self._bump_id_counter(max((t.id for t in transactions), default=0), commit=False)
        logger.debug("Saved %d transactions", len(transactions))

    def next_id(self) -> int:
        """Reserve and return a transaction id that has never been handed out."""
        conn = self._db.get_connection()
        with conn:
            candidate = max(
                int(self._db.get_setting("next_transaction_id", "1") or 1),
                self._tx_dao.max_id() + 1,
            )
            self._db.set_setting("next_transaction_id", str(candidate + 1), commit=False)
        return candidate

    def _bump_id_counter(self, highest_id: int, commit: bool = True):
        current = int(self._db.get_setting("next_transaction_id", "1") or 1)
        if highest_id >= current:
            self._db.set_setting("next_transaction_id", str(highest_id + 1), commit=commit)
