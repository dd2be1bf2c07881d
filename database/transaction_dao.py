from decimal import Decimal, InvalidOperation
from typing import Iterable
from database.db_manager import DatabaseManager
from models.transaction import Transaction
from utils.constants import RECURRENCES
from utils.date_helpers import parse_date, format_date


def row_to_transaction(row) -> Transaction:
    """Build a Transaction from a stored/imported record, raising ValueError if malformed."""
    tx_id = row["id"]
    d = parse_date(str(row["date"] or ""))
    if d is None:
        raise ValueError(f"Transaction {tx_id}: invalid date {row['date']!r}.")
    try:
        amount = Decimal(str(row["amount"]))
    except InvalidOperation:
        raise ValueError(f"Transaction {tx_id}: invalid amount {row['amount']!r}.") from None
    if not amount.is_finite() or amount == 0:
        raise ValueError(f"Transaction {tx_id}: amount must be a nonzero number.")
    recurrence = row["recurrence"] or "none"
    if recurrence not in RECURRENCES:
        raise ValueError(f"Transaction {tx_id}: unknown recurrence {recurrence!r}.")
    return Transaction(
        id=int(tx_id),
        date=d,
        description=row["description"] or "",
        amount=amount,
        recurrence=recurrence,
    )


class TransactionDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _to_params(self, tx: Transaction) -> tuple:
        return (tx.id, format_date(tx.date), tx.description, str(tx.amount), tx.recurrence)

    def get_all(self) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM transactions ORDER BY date ASC, id ASC"
        ).fetchall()
        return [row_to_transaction(r) for r in rows]

    def max_id(self) -> int:
        conn = self._db.get_connection()
        return conn.execute("SELECT COALESCE(MAX(id), 0) FROM transactions").fetchone()[0]

    def replace_all(self, transactions: Iterable[Transaction], commit: bool = True):
        """Overwrite the table with exactly the given transactions."""
        conn = self._db.get_connection()
        conn.execute("DELETE FROM transactions")
        conn.executemany(
            """INSERT INTO transactions (id, date, description, amount, recurrence)
               VALUES (?, ?, ?, ?, ?)""",
            [self._to_params(t) for t in transactions],
        )
        if commit:
            conn.commit()
