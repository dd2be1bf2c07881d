from datetime import date, timedelta
from itertools import islice

import pytest

from services.recurrence import expand, iter_occurrences, occurrences_between, occurs_on
from utils.constants import RECURRENCES


class TestOccursOn:
    def test_one_time_only_on_anchor(self, make_tx):
        tx = make_tx(date(2024, 6, 15), 500)
        assert occurs_on(tx, date(2024, 6, 15))
        assert not occurs_on(tx, date(2024, 6, 14))
        assert not occurs_on(tx, date(2024, 6, 22))
        assert not occurs_on(tx, date(2025, 6, 15))

    def test_weekly(self, make_tx):
        tx = make_tx(date(2024, 1, 1), -50, "weekly")
        assert occurs_on(tx, date(2024, 1, 1))
        assert occurs_on(tx, date(2024, 1, 8))
        assert occurs_on(tx, date(2024, 1, 15))
        assert not occurs_on(tx, date(2024, 1, 9))
        assert not occurs_on(tx, date(2023, 12, 25))

    def test_biweekly(self, make_tx):
        tx = make_tx(date(2024, 1, 5), -20, "biweekly")
        assert occurs_on(tx, date(2024, 1, 19))
        assert not occurs_on(tx, date(2024, 1, 12))
        assert occurs_on(tx, date(2024, 2, 2))

    def test_monthly_skips_short_months(self, make_tx):
        tx = make_tx(date(2024, 1, 31), -100, "monthly")
        assert not occurs_on(tx, date(2024, 2, 29))
        assert occurs_on(tx, date(2024, 3, 31))
        assert not occurs_on(tx, date(2024, 4, 30))
        assert occurs_on(tx, date(2024, 5, 31))

    def test_monthly_before_anchor(self, make_tx):
        tx = make_tx(date(2024, 3, 10), -100, "monthly")
        assert not occurs_on(tx, date(2024, 2, 10))

    def test_quarterly(self, make_tx):
        tx = make_tx(date(2024, 2, 1), -300, "quarterly")
        for month in (2, 5, 8, 11):
            assert occurs_on(tx, date(2024, month, 1))
        for month in (3, 4, 6, 7, 9, 10, 12):
            assert not occurs_on(tx, date(2024, month, 1))
        assert occurs_on(tx, date(2025, 2, 1))
        assert not occurs_on(tx, date(2024, 5, 2))

    def test_annually(self, make_tx):
        tx = make_tx(date(2024, 1, 1), 2000, "annually")
        assert occurs_on(tx, date(2024, 1, 1))
        assert occurs_on(tx, date(2030, 1, 1))
        assert not occurs_on(tx, date(2023, 1, 1))
        assert not occurs_on(tx, date(2024, 2, 1))

    def test_annually_leap_day_only_in_leap_years(self, make_tx):
        tx = make_tx(date(2024, 2, 29), 100, "annually")
        assert not occurs_on(tx, date(2025, 2, 28))
        assert not occurs_on(tx, date(2025, 3, 1))
        assert occurs_on(tx, date(2028, 2, 29))

    def test_unknown_recurrence_raises(self, make_tx):
        tx = make_tx(date(2024, 1, 1), 10, "daily")
        with pytest.raises(ValueError):
            occurs_on(tx, date(2024, 1, 2))


class TestExpand:
    def test_empty_before_anchor(self, make_tx):
        for kind in RECURRENCES:
            tx = make_tx(date(2024, 5, 1), -1, kind)
            assert expand(tx, date(2024, 4, 30)) == []

    def test_one_time(self, make_tx):
        tx = make_tx(date(2024, 5, 1), -1)
        assert expand(tx, date(2024, 5, 1)) == [date(2024, 5, 1)]
        assert expand(tx, date(2030, 1, 1)) == [date(2024, 5, 1)]

    def test_weekly_includes_target(self, make_tx):
        tx = make_tx(date(2024, 1, 1), -50, "weekly")
        assert expand(tx, date(2024, 1, 15)) == [
            date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15),
        ]
        assert expand(tx, date(2024, 1, 14)) == [date(2024, 1, 1), date(2024, 1, 8)]

    def test_quarterly(self, make_tx):
        tx = make_tx(date(2024, 2, 1), -300, "quarterly")
        assert expand(tx, date(2024, 12, 31)) == [
            date(2024, 2, 1), date(2024, 5, 1), date(2024, 8, 1), date(2024, 11, 1),
        ]

    def test_monthly_from_31st_keeps_day_number(self, make_tx):
        tx = make_tx(date(2024, 1, 31), -100, "monthly")
        assert expand(tx, date(2024, 8, 31)) == [
            date(2024, 1, 31), date(2024, 3, 31), date(2024, 5, 31),
            date(2024, 7, 31), date(2024, 8, 31),
        ]

    def test_monthly_from_30th_does_not_drift(self, make_tx):
        tx = make_tx(date(2023, 12, 30), -100, "monthly")
        result = expand(tx, date(2024, 4, 30))
        assert result == [date(2023, 12, 30), date(2024, 1, 30), date(2024, 3, 30), date(2024, 4, 30)]

    def test_annually_across_years(self, make_tx):
        tx = make_tx(date(2022, 7, 4), 10, "annually")
        assert expand(tx, date(2024, 7, 3)) == [date(2022, 7, 4), date(2023, 7, 4)]

    @pytest.mark.parametrize("kind", RECURRENCES)
    def test_strictly_increasing_and_agrees_with_occurs_on(self, make_tx, kind):
        tx = make_tx(date(2024, 1, 31), -5, kind)
        target = date(2026, 3, 1)
        occurrences = expand(tx, target)
        assert occurrences[0] == tx.date
        assert all(a < b for a, b in zip(occurrences, occurrences[1:]))
        assert all(occurs_on(tx, d) for d in occurrences)

        # Point membership matches the expansion on every day of the span
        members = set(occurrences)
        day = tx.date - timedelta(days=3)
        while day <= target:
            assert occurs_on(tx, day) == (day in members)
            day += timedelta(days=1)


class TestIterOccurrences:
    def test_yields_fresh_dates_from_start(self, make_tx):
        tx = make_tx(date(2024, 1, 1), -50, "weekly")
        first_three = list(islice(iter_occurrences(tx, date(2024, 1, 10)), 3))
        assert first_three == [date(2024, 1, 15), date(2024, 1, 22), date(2024, 1, 29)]

    def test_one_time_before_start_is_empty(self, make_tx):
        tx = make_tx(date(2024, 1, 1), 10)
        assert list(iter_occurrences(tx, date(2024, 1, 2))) == []

    def test_monthly_start_mid_month(self, make_tx):
        tx = make_tx(date(2024, 1, 20), 10, "monthly")
        assert next(iter_occurrences(tx, date(2024, 3, 21))) == date(2024, 4, 20)
        assert next(iter_occurrences(tx, date(2024, 3, 20))) == date(2024, 3, 20)

    def test_occurrences_between(self, make_tx):
        tx = make_tx(date(2024, 2, 1), -300, "quarterly")
        assert occurrences_between(tx, date(2024, 4, 1), date(2024, 10, 1)) == [
            date(2024, 5, 1), date(2024, 8, 1),
        ]
        assert occurrences_between(tx, date(2024, 10, 1), date(2024, 4, 1)) == []


class TestLastRepresentableDate:
    def test_weekly_stops_at_date_max(self, make_tx):
        tx = make_tx(date(9999, 12, 1), -1, "weekly")
        assert expand(tx, date.max) == [
            date(9999, 12, 1), date(9999, 12, 8), date(9999, 12, 15),
            date(9999, 12, 22), date(9999, 12, 29),
        ]
        assert occurs_on(tx, date(9999, 12, 29))
        assert not occurs_on(tx, date.max)

    def test_monthly_stops_at_date_max(self, make_tx):
        tx = make_tx(date(9999, 11, 15), -1, "monthly")
        assert expand(tx, date.max) == [date(9999, 11, 15), date(9999, 12, 15)]

    @pytest.mark.parametrize("kind", RECURRENCES)
    def test_iteration_ends_after_last_slot(self, make_tx, kind):
        tx = make_tx(date(9999, 12, 31), 1, kind)
        assert list(iter_occurrences(tx)) == [date(9999, 12, 31)]
        assert occurrences_between(tx, date(9999, 12, 1), date.max) == [date(9999, 12, 31)]
