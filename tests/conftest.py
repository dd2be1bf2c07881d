"""Shared fixtures: an on-disk sqlite database per test and a transaction factory."""
from datetime import date
from decimal import Decimal
from itertools import count

import pytest

from database.db_manager import DatabaseManager
from database.ledger_store import LedgerStore
from database.transaction_dao import TransactionDAO
from models.ledger import Ledger
from models.transaction import Transaction
from services.data_service import DataService
from services.ledger_service import LedgerService


@pytest.fixture
def db(tmp_path):
    manager = DatabaseManager(str(tmp_path / "test.db"))
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def store(db):
    return LedgerStore(db, TransactionDAO(db))


@pytest.fixture
def ledger_service(store):
    return LedgerService(store)


@pytest.fixture
def data_service(store):
    return DataService(store)


@pytest.fixture
def make_tx():
    ids = count(1)

    def _make(anchor: date, amount, recurrence: str = "none", description: str = "Test") -> Transaction:
        return Transaction(
            id=next(ids),
            date=anchor,
            description=description,
            amount=Decimal(str(amount)),
            recurrence=recurrence,
        )

    return _make


@pytest.fixture
def make_ledger():
    def _make(*transactions: Transaction, starting_balance="1000") -> Ledger:
        return Ledger(starting_balance=Decimal(starting_balance), transactions=tuple(transactions))

    return _make
