from datetime import date, timedelta
from decimal import Decimal

import pytest

from services.balance import balance_as_of, running_balances
from services.ledger_queries import balance_on, month_view, transactions_on
from services.recurrence import occurs_on


def test_no_transactions_is_starting_balance(make_ledger):
    ledger = make_ledger(starting_balance="1234.56")
    assert balance_as_of(ledger, date(2024, 1, 1)) == Decimal("1234.56")


def test_weekly_expense_scenario(make_tx, make_ledger):
    ledger = make_ledger(make_tx(date(2024, 1, 1), -50, "weekly"))
    assert balance_on(ledger, date(2024, 1, 15)) == Decimal("850")


def test_annual_income_scenario(make_tx, make_ledger):
    ledger = make_ledger(make_tx(date(2024, 1, 1), 2000, "annually"))
    assert balance_on(ledger, date(2024, 1, 1)) == Decimal("3000")
    assert balance_on(ledger, date(2023, 12, 31)) == Decimal("1000")
    assert balance_on(ledger, date(2025, 1, 1)) == Decimal("5000")


def test_anchor_date_counts_exactly_once(make_tx, make_ledger):
    tx = make_tx(date(2024, 3, 10), Decimal("-12.34"), "monthly")
    ledger = make_ledger(tx)
    assert balance_as_of(ledger, tx.date) == Decimal("1000") + tx.amount


def test_one_time_and_weekly_same_day(make_tx, make_ledger):
    weekly = make_tx(date(2024, 1, 1), -50, "weekly")
    one_time = make_tx(date(2024, 6, 15), 500)
    ledger = make_ledger(weekly, one_time)

    day = date(2024, 6, 15)
    weekly_today = weekly.amount if occurs_on(weekly, day) else 0
    assert balance_on(ledger, day) == balance_on(ledger, day - timedelta(days=1)) + 500 + weekly_today


def test_short_month_skip_is_reflected_in_balance(make_tx, make_ledger):
    ledger = make_ledger(make_tx(date(2024, 1, 31), -100, "monthly"))
    # Jan 31 and Mar 31 only; February has no 31st
    assert balance_on(ledger, date(2024, 3, 30)) == Decimal("900")
    assert balance_on(ledger, date(2024, 3, 31)) == Decimal("800")


def test_deterministic(make_tx, make_ledger):
    ledger = make_ledger(
        make_tx(date(2024, 1, 1), -50, "weekly"),
        make_tx(date(2024, 2, 1), -300, "quarterly"),
    )
    target = date(2025, 7, 1)
    assert balance_as_of(ledger, target) == balance_as_of(ledger, target)


def test_order_of_transactions_does_not_matter(make_tx, make_ledger):
    a = make_tx(date(2024, 1, 1), -50, "weekly")
    b = make_tx(date(2024, 1, 31), Decimal("1500.25"), "monthly")
    c = make_tx(date(2024, 5, 5), -75)
    target = date(2024, 12, 31)
    assert balance_as_of(make_ledger(a, b, c), target) == balance_as_of(make_ledger(c, a, b), target)


class TestRunningBalances:
    def test_matches_point_queries(self, make_tx, make_ledger):
        ledger = make_ledger(
            make_tx(date(2024, 1, 1), -50, "weekly"),
            make_tx(date(2024, 1, 31), -100, "monthly"),
            make_tx(date(2024, 2, 1), -300, "quarterly"),
            make_tx(date(2024, 2, 29), 2000, "annually"),
            make_tx(date(2024, 3, 3), Decimal("12.5"), "biweekly"),
            make_tx(date(2024, 3, 15), 500),
        )
        start, end = date(2024, 2, 20), date(2024, 4, 10)
        sweep = running_balances(ledger, start, end)
        assert list(sweep) == [start + timedelta(days=i) for i in range((end - start).days + 1)]
        for day, balance in sweep.items():
            assert balance == balance_as_of(ledger, day)

    def test_empty_range_raises(self, make_ledger):
        with pytest.raises(ValueError):
            running_balances(make_ledger(), date(2024, 2, 2), date(2024, 2, 1))


class TestQueries:
    def test_transactions_on(self, make_tx, make_ledger):
        weekly = make_tx(date(2024, 1, 1), -50, "weekly")
        monthly = make_tx(date(2024, 1, 15), -100, "monthly")
        one_time = make_tx(date(2024, 1, 20), 40)
        ledger = make_ledger(one_time, monthly, weekly)

        assert transactions_on(ledger, date(2024, 1, 15)) == [weekly, monthly]
        assert transactions_on(ledger, date(2024, 1, 20)) == [one_time]
        assert transactions_on(ledger, date(2024, 1, 21)) == []

    def test_month_view(self, make_tx, make_ledger):
        weekly = make_tx(date(2024, 1, 1), -50, "weekly")
        ledger = make_ledger(weekly)
        cells = month_view(ledger, 2024, 2)

        assert len(cells) == 29
        assert cells[0].date == date(2024, 2, 1)
        assert cells[-1].date == date(2024, 2, 29)
        by_day = {c.date.day: c for c in cells}
        assert by_day[5].transactions == [weekly]
        assert by_day[6].transactions == []
        # Jan 1, 8, 15, 22, 29 and Feb 5
        assert by_day[5].balance == Decimal("700")
        assert by_day[29].balance == balance_as_of(ledger, date(2024, 2, 29))


def test_balances_in_the_last_representable_month(make_tx, make_ledger):
    ledger = make_ledger(
        make_tx(date(9999, 12, 1), -50, "weekly"),
        make_tx(date(9999, 11, 15), -100, "monthly"),
    )
    assert balance_as_of(ledger, date.max) == Decimal("1000") - 5 * 50 - 2 * 100
    cells = month_view(ledger, 9999, 12)
    assert cells[-1].date == date.max
    assert cells[-1].balance == balance_as_of(ledger, date.max)


def test_running_balances_from_first_representable_date(make_tx, make_ledger):
    ledger = make_ledger(make_tx(date.min, 10, "weekly"))
    sweep = running_balances(ledger, date.min, date(1, 1, 8))
    assert sweep[date.min] == Decimal("1010")
    assert sweep[date(1, 1, 8)] == Decimal("1020")
