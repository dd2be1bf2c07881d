"""Export and import the whole ledger (starting balance and transactions) as JSON."""
from datetime import datetime
from decimal import Decimal, InvalidOperation

from database.ledger_store import LedgerStore
from database.transaction_dao import row_to_transaction
from models.transaction import Transaction
from utils.date_helpers import format_date
from utils.logging_setup import get_logger

logger = get_logger(__name__)

EXPORT_VERSION = 1


class DataService:
    def __init__(self, store: LedgerStore):
        self._store = store

    # ── Export ────────────────────────────────────────────────────────────────

    def export_json(self) -> dict:
        """Return a full export dict (caller writes to disk)."""
        return {
            "export_version": EXPORT_VERSION,
            "exported_at": datetime.now().isoformat(),
            "starting_balance": str(self._store.load_starting_balance()),
            "transactions": [
                {
                    "id": t.id,
                    "date": format_date(t.date),
                    "description": t.description,
                    "amount": str(t.amount),
                    "recurrence": t.recurrence,
                }
                for t in self._store.load_transactions()
            ],
        }

    # ── Import ────────────────────────────────────────────────────────────────

    def import_json(self, data: dict, mode: str) -> dict:
        """Import from a previously exported JSON dict.

        mode: 'merge' | 'replace'
        Every record is validated before anything is written; a malformed
        record raises ValueError and leaves the store untouched.
        Returns stats dict with counts of imported entities.
        """
        if mode not in ("merge", "replace"):
            raise ValueError(f"Unknown import mode: {mode!r}")
        if not isinstance(data, dict):
            raise ValueError("Import data must be a JSON object.")

        records = data.get("transactions", [])
        if not isinstance(records, list):
            raise ValueError("'transactions' must be a list.")
        parsed = [self._parse_record(i, r) for i, r in enumerate(records)]

        starting_balance = None
        if data.get("starting_balance") is not None:
            try:
                starting_balance = Decimal(str(data["starting_balance"]))
            except InvalidOperation:
                raise ValueError("'starting_balance' is not a number.") from None
            if not starting_balance.is_finite():
                raise ValueError("'starting_balance' must be a finite number.")

        if mode == "replace":
            transactions = self._renumber(parsed, keep_ids=True)
            self._store.save_transactions(transactions)
            if starting_balance is not None:
                self._store.save_starting_balance(starting_balance)
        else:
            existing = self._store.load_transactions()
            transactions = existing + self._renumber(parsed, keep_ids=False)
            self._store.save_transactions(transactions)

        logger.info("Imported %d transactions (%s)", len(parsed), mode)
        return {"transactions": len(parsed)}

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _parse_record(self, index: int, record) -> Transaction:
        if not isinstance(record, dict):
            raise ValueError(f"Transaction #{index + 1} is not an object.")
        row = {
            "id": record.get("id") or 0,
            "date": record.get("date"),
            "description": record.get("description", ""),
            "amount": record.get("amount"),
            "recurrence": record.get("recurrence", "none"),
        }
        try:
            return row_to_transaction(row)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Transaction #{index + 1}: {e}") from e

    def _renumber(self, transactions: list[Transaction], keep_ids: bool) -> list[Transaction]:
        """Give records fresh ids unless their own ids are usable and unique."""
        ids = [t.id for t in transactions]
        if keep_ids and all(i > 0 for i in ids) and len(set(ids)) == len(ids):
            return transactions
        return [
            Transaction(
                id=self._store.next_id(),
                date=t.date,
                description=t.description,
                amount=t.amount,
                recurrence=t.recurrence,
            )
            for t in transactions
        ]
