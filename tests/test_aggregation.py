"""
Tests for the aggregation engine.

All inputs are in-memory snapshots; nothing touches storage.
Naive datetimes are used throughout so results don't depend on the
machine's timezone.
"""

from datetime import date, datetime

import pytest

from walletbook.models.finance import (
    Category,
    Transaction,
    TransactionType,
    Wallet,
)
from walletbook.reports import (
    category_label,
    filter_by_range,
    find_category,
    find_wallet,
    group_by_category,
    group_by_date,
    month_range,
    monthly_report,
    total_balance,
    totals,
)


INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE


def make_tx(tx_id, tx_type, amount, when, category_id="food", wallet_id="cash"):
    return Transaction(
        id=tx_id,
        type=tx_type,
        amount=amount,
        category_id=category_id,
        wallet_id=wallet_id,
        date=when,
    )


CATEGORIES = [
    Category(id="salary", name="Salary", icon="💰", type=INCOME, color="#4CAF50"),
    Category(id="food", name="Food & Drinks", icon="🍔", type=EXPENSE, color="#F44336"),
    Category(id="travel", name="Travel", icon="✈️", type=EXPENSE, color="#009688"),
    Category(id="misc", name="Misc", icon="📦", type=EXPENSE),
]


class TestTotals:
    """Tests for totals()."""

    def test_empty(self):
        result = totals([])
        assert result.income == 0
        assert result.expense == 0
        assert result.net == 0

    def test_sums_by_type(self):
        txs = [
            make_tx("1", INCOME, 5000, datetime(2024, 5, 1)),
            make_tx("2", EXPENSE, 1200, datetime(2024, 5, 2)),
            make_tx("3", EXPENSE, 300, datetime(2024, 5, 3)),
            make_tx("4", INCOME, 1, datetime(2024, 5, 4)),
        ]
        result = totals(txs)
        assert result.income == 5001
        assert result.expense == 1500
        assert result.net == 3501


class TestGroupByDate:
    """Tests for group_by_date()."""

    def test_same_day_lands_in_one_group(self):
        txs = [
            make_tx("morning", EXPENSE, 10, datetime(2024, 5, 3, 0, 0, 1)),
            make_tx("night", EXPENSE, 20, datetime(2024, 5, 3, 23, 59, 59)),
        ]
        groups = group_by_date(txs)
        assert len(groups) == 1
        assert groups[0].date == date(2024, 5, 3)
        assert [t.id for t in groups[0].transactions] == ["morning", "night"]

    def test_sorted_newest_day_first(self):
        txs = [
            make_tx("a", EXPENSE, 10, datetime(2024, 5, 1, 12)),
            make_tx("b", EXPENSE, 10, datetime(2024, 5, 20, 8)),
            make_tx("c", INCOME, 10, datetime(2024, 5, 7, 18)),
            make_tx("d", EXPENSE, 10, datetime(2024, 5, 20, 21)),
        ]
        groups = group_by_date(txs)
        assert [g.date for g in groups] == [date(2024, 5, 20), date(2024, 5, 7), date(2024, 5, 1)]
        assert [t.id for t in groups[0].transactions] == ["b", "d"]

    def test_empty(self):
        assert group_by_date([]) == []


class TestGroupByCategory:
    """Tests for group_by_category()."""

    def test_totals_per_category_sorted_desc(self):
        txs = [
            make_tx("1", EXPENSE, 100, datetime(2024, 5, 1), category_id="food"),
            make_tx("2", EXPENSE, 700, datetime(2024, 5, 2), category_id="travel"),
            make_tx("3", EXPENSE, 250, datetime(2024, 5, 3), category_id="food"),
            make_tx("4", INCOME, 9000, datetime(2024, 5, 4), category_id="salary"),
        ]
        groups = group_by_category(txs, CATEGORIES, EXPENSE)

        assert [(g.category_id, g.total) for g in groups] == [("travel", 700), ("food", 350)]
        assert groups[1].name == "Food & Drinks"
        assert groups[1].icon == "🍔"
        assert groups[1].color == "#F44336"

    def test_only_present_categories(self):
        txs = [make_tx("1", EXPENSE, 100, datetime(2024, 5, 1), category_id="food")]
        groups = group_by_category(txs, CATEGORIES, EXPENSE)
        assert [g.category_id for g in groups] == ["food"]

    def test_income_type(self):
        txs = [
            make_tx("1", INCOME, 9000, datetime(2024, 5, 1), category_id="salary"),
            make_tx("2", EXPENSE, 100, datetime(2024, 5, 1), category_id="food"),
        ]
        groups = group_by_category(txs, CATEGORIES, INCOME)
        assert len(groups) == 1
        assert groups[0].name == "Salary"
        assert groups[0].total == 9000

    def test_deleted_category_falls_back_to_unknown(self):
        txs = [make_tx("1", EXPENSE, 4200, datetime(2024, 5, 1), category_id="gone")]
        groups = group_by_category(txs, CATEGORIES, EXPENSE)

        assert len(groups) == 1
        assert groups[0].category_id == "gone"
        assert groups[0].name == "Unknown"
        assert groups[0].icon == "📦"
        assert groups[0].color == "#888"
        assert groups[0].total == 4200

    def test_category_without_color_gets_default_color(self):
        txs = [make_tx("1", EXPENSE, 10, datetime(2024, 5, 1), category_id="misc")]
        groups = group_by_category(txs, CATEGORIES, EXPENSE)
        assert groups[0].name == "Misc"
        assert groups[0].color == "#888"

    def test_defaults_to_expense(self):
        txs = [
            make_tx("1", INCOME, 9000, datetime(2024, 5, 1), category_id="salary"),
            make_tx("2", EXPENSE, 100, datetime(2024, 5, 1), category_id="food"),
        ]
        assert [g.category_id for g in group_by_category(txs, CATEGORIES)] == ["food"]

    def test_type_by_keyword(self):
        txs = [
            make_tx("1", INCOME, 9000, datetime(2024, 5, 1), category_id="salary"),
            make_tx("2", EXPENSE, 100, datetime(2024, 5, 1), category_id="food"),
        ]
        groups = group_by_category(txs, CATEGORIES, tx_type=INCOME)
        assert [g.category_id for g in groups] == ["salary"]


class TestMonthRange:
    """Tests for month_range()."""

    def test_regular_month(self):
        r = month_range(datetime(2024, 5, 17, 14, 5))
        assert r.start == datetime(2024, 5, 1, 0, 0, 0)
        assert r.end == datetime(2024, 5, 31, 23, 59, 59)

    def test_leap_february(self):
        r = month_range(datetime(2024, 2, 10))
        assert r.end == datetime(2024, 2, 29, 23, 59, 59)

    def test_plain_february(self):
        r = month_range(datetime(2023, 2, 10))
        assert r.end == datetime(2023, 2, 28, 23, 59, 59)

    def test_december(self):
        r = month_range(datetime(2024, 12, 31, 23, 59, 59))
        assert r.start == datetime(2024, 12, 1)
        assert r.end == datetime(2024, 12, 31, 23, 59, 59)

    def test_defaults_to_now(self):
        now = datetime.now()
        r = month_range()
        assert r.start.year == now.year
        assert r.start.month == now.month
        assert r.start.day == 1


class TestFilterByRange:
    """Tests for filter_by_range()."""

    def test_inclusive_bounds(self):
        r = month_range(datetime(2024, 5, 1))
        txs = [
            make_tx("before", EXPENSE, 1, datetime(2024, 4, 30, 23, 59, 59)),
            make_tx("first", EXPENSE, 1, datetime(2024, 5, 1, 0, 0, 0)),
            make_tx("last", EXPENSE, 1, datetime(2024, 5, 31, 23, 59, 59)),
            make_tx("after", EXPENSE, 1, datetime(2024, 6, 1, 0, 0, 0)),
        ]
        assert [t.id for t in filter_by_range(txs, r.start, r.end)] == ["first", "last"]

    def test_open_bounds(self):
        txs = [make_tx("a", EXPENSE, 1, datetime(2024, 5, 1))]
        assert filter_by_range(txs) == txs
        assert filter_by_range(txs, start=datetime(2024, 6, 1)) == []


class TestMonthlyReport:
    """Tests for monthly_report()."""

    def test_percentages(self):
        txs = [
            make_tx("1", EXPENSE, 300, datetime(2024, 5, 1), category_id="food"),
            make_tx("2", EXPENSE, 100, datetime(2024, 5, 2), category_id="travel"),
            make_tx("3", INCOME, 1000, datetime(2024, 5, 3), category_id="salary"),
        ]
        report = monthly_report(txs, CATEGORIES, EXPENSE)

        assert report.income == 1000
        assert report.expense == 400
        assert report.balance == 600
        assert [c.percentage for c in report.categories] == [75.0, 25.0]
        assert report.categories[0].category_name == "Food & Drinks"

    def test_percentages_sum_to_hundred(self):
        txs = [
            make_tx(str(i), EXPENSE, amount, datetime(2024, 5, 1), category_id=cat)
            for i, (amount, cat) in enumerate([(1, "food"), (1, "travel"), (1, "misc")])
        ]
        report = monthly_report(txs, CATEGORIES, EXPENSE)
        assert sum(c.percentage for c in report.categories) == pytest.approx(100.0, abs=0.2)

    def test_income_breakdown(self):
        txs = [
            make_tx("1", INCOME, 900, datetime(2024, 5, 1), category_id="salary"),
            make_tx("2", EXPENSE, 100, datetime(2024, 5, 2), category_id="food"),
        ]
        report = monthly_report(txs, CATEGORIES, tx_type=INCOME)
        assert [(c.category_id, c.percentage) for c in report.categories] == [("salary", 100.0)]

    def test_empty(self):
        report = monthly_report([], CATEGORIES)
        assert report.categories == []
        assert report.balance == 0


class TestLookups:
    """Tests for dangling-reference tolerant lookups."""

    def test_find_category(self):
        assert find_category(CATEGORIES, "food").name == "Food & Drinks"
        assert find_category(CATEGORIES, "gone") is None

    def test_find_wallet(self):
        wallets = [Wallet(id="w1", name="Cash", balance=10)]
        assert find_wallet(wallets, "w1").name == "Cash"
        assert find_wallet(wallets, "w2") is None

    def test_category_label_placeholder(self):
        assert category_label(None) == ("Unknown", "📦", "#888")

    def test_total_balance(self):
        wallets = [
            Wallet(id="w1", name="Cash", balance=1000),
            Wallet(id="w2", name="Card", balance=-250),
        ]
        assert total_balance(wallets) == 750
        assert total_balance([]) == 0
