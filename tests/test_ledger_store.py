import sqlite3
from datetime import date
from decimal import Decimal

import pytest

from database.transaction_dao import row_to_transaction
from models.transaction import Transaction


def test_default_starting_balance(store):
    assert store.load_starting_balance() == Decimal("1000")


def test_starting_balance_round_trip(store):
    store.save_starting_balance(Decimal("-250.75"))
    assert store.load_starting_balance() == Decimal("-250.75")


@pytest.mark.parametrize("raw", ["lots", "NaN", "Infinity"])
def test_corrupt_starting_balance_raises(store, db, raw):
    db.set_setting("starting_balance", raw)
    with pytest.raises(ValueError):
        store.load_starting_balance()


def test_transactions_round_trip(store):
    txs = [
        Transaction(1, date(2024, 1, 31), "Rent", Decimal("-1200.00"), "monthly"),
        Transaction(2, date(2024, 1, 5), "Paycheck", Decimal("2100.10"), "biweekly"),
        Transaction(7, date(2024, 6, 15), "Bonus", Decimal("500"), "none"),
    ]
    store.save_transactions(txs)
    loaded = store.load_transactions()
    assert sorted(loaded, key=lambda t: t.id) == txs
    assert all(isinstance(t.amount, Decimal) for t in loaded)


def test_save_is_full_overwrite(store):
    store.save_transactions([Transaction(1, date(2024, 1, 1), "A", Decimal("-1"))])
    store.save_transactions([Transaction(2, date(2024, 1, 2), "B", Decimal("2"))])
    assert [t.id for t in store.load_transactions()] == [2]


def test_next_id_is_never_reused(store):
    first = store.next_id()
    second = store.next_id()
    assert second > first
    store.save_transactions([Transaction(second, date(2024, 1, 1), "A", Decimal("-1"))])
    store.save_transactions([])
    assert store.next_id() > second


def test_next_id_skips_ids_already_saved(store):
    store.save_transactions([Transaction(41, date(2024, 1, 1), "A", Decimal("-1"))])
    assert store.next_id() == 42


def test_failed_save_leaves_previous_rows(store, db):
    store.save_transactions([Transaction(1, date(2024, 1, 1), "A", Decimal("-1"))])
    # Duplicate primary keys make the insert fail part-way
    bad = [
        Transaction(5, date(2024, 1, 1), "X", Decimal("-1")),
        Transaction(5, date(2024, 1, 2), "Y", Decimal("-2")),
    ]
    with pytest.raises(sqlite3.IntegrityError):
        store.save_transactions(bad)
    assert [t.id for t in store.load_transactions()] == [1]


class TestRowToTransaction:
    def _row(self, **overrides):
        row = {"id": 3, "date": "2024-02-01", "description": "Tax", "amount": "-300", "recurrence": "quarterly"}
        row.update(overrides)
        return row

    def test_valid(self):
        tx = row_to_transaction(self._row())
        assert tx == Transaction(3, date(2024, 2, 1), "Tax", Decimal("-300"), "quarterly")

    @pytest.mark.parametrize("overrides", [
        {"date": "2024-02-30"},
        {"date": ""},
        {"amount": "abc"},
        {"amount": "0"},
        {"amount": "NaN"},
        {"recurrence": "daily"},
    ])
    def test_malformed(self, overrides):
        with pytest.raises(ValueError):
            row_to_transaction(self._row(**overrides))
