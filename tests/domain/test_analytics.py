"""Tests for pocketbook.domain.analytics pure functions."""

from datetime import date, datetime, timedelta, timezone

import pytest

from pocketbook.dates import month_bounds, trailing_months
from pocketbook.domain.analytics import (
    breakdown_by_category,
    build_series,
    filter_by_window,
    percent_change,
    summarize,
)
from pocketbook.domain.errors import InvalidWindowError, MalformedTransactionError
from pocketbook.domain.models import Category, CategoryName, Money, Transaction

REFERENCE = datetime(2024, 2, 10, 12, 0)


def make_txn(
    txn_id: int,
    txn_type: str,
    amount: int,
    when: datetime | date,
    category_id: int | None = None,
) -> Transaction:
    return Transaction(
        id=txn_id,
        type=txn_type,
        amount=Money(amount),
        category_id=category_id,
        date=when,
    )


def make_category(cat_id: int, name: str, color: str = "#F59E0B", cat_type: str = "expense") -> Category:
    return Category(id=cat_id, name=CategoryName(name), color=color, type=cat_type)


class TestFilterByWindow:
    """Tests for filter_by_window."""

    def test_includes_both_boundaries(self) -> None:
        """Should keep transactions exactly on start and end."""
        start, end = month_bounds(REFERENCE)
        txns = [
            make_txn(1, "expense", 100, start),
            make_txn(2, "expense", 100, end),
            make_txn(3, "expense", 100, datetime(2024, 3, 1)),
            make_txn(4, "expense", 100, datetime(2024, 1, 31, 23, 59, 59)),
        ]

        result = filter_by_window(txns, start, end)

        assert [t.id for t in result] == [1, 2]

    def test_preserves_order(self) -> None:
        """Should keep the input's relative order."""
        start, end = month_bounds(REFERENCE)
        txns = [
            make_txn(3, "income", 10, datetime(2024, 2, 20)),
            make_txn(1, "income", 10, datetime(2024, 2, 2)),
            make_txn(2, "income", 10, datetime(2024, 2, 15)),
        ]

        assert [t.id for t in filter_by_window(txns, start, end)] == [3, 1, 2]

    def test_plain_dates(self) -> None:
        """Should accept plain dates on transactions."""
        start, end = month_bounds(REFERENCE)
        txns = [make_txn(1, "income", 10, date(2024, 2, 29)), make_txn(2, "income", 10, date(2024, 3, 1))]

        assert [t.id for t in filter_by_window(txns, start, end)] == [1]


class TestSummarize:
    """Tests for summarize."""

    def test_empty(self) -> None:
        """Should return zeros for no transactions."""
        summary = summarize([])

        assert summary.total_income == 0
        assert summary.total_expenses == 0
        assert summary.balance == 0
        assert summary.transaction_count == 0

    def test_sums_by_type(self) -> None:
        """Should total income and expenses separately."""
        txns = [
            make_txn(1, "income", 1000, REFERENCE),
            make_txn(2, "expense", 300, REFERENCE),
            make_txn(3, "expense", 200, REFERENCE),
            make_txn(4, "income", 50, REFERENCE),
        ]

        summary = summarize(txns)

        assert summary.total_income == 1050
        assert summary.total_expenses == 500
        assert summary.balance == 550
        assert summary.transaction_count == 4

    def test_balance_can_be_negative(self) -> None:
        """Should report a deficit as a negative balance."""
        summary = summarize([make_txn(1, "expense", 200, REFERENCE)])

        assert summary.balance == -200
        assert summary.balance == summary.total_income - summary.total_expenses

    def test_zero_amount_counts(self) -> None:
        """A zero amount is valid and still counted."""
        summary = summarize([make_txn(1, "expense", 0, REFERENCE)])

        assert summary.transaction_count == 1
        assert summary.total_expenses == 0

    def test_unknown_type_raises(self) -> None:
        """Should fail on a type other than income/expense."""
        txns = [make_txn(1, "income", 100, REFERENCE), make_txn(7, "transfer", 100, REFERENCE)]

        with pytest.raises(MalformedTransactionError) as exc_info:
            summarize(txns)

        assert exc_info.value.transaction_id == 7
        assert "transfer" in str(exc_info.value)

    def test_negative_amount_raises(self) -> None:
        """Should fail on a negative amount instead of coercing it."""
        with pytest.raises(MalformedTransactionError):
            summarize([make_txn(1, "expense", -100, REFERENCE)])

    def test_adjacent_months_partition_the_union(self) -> None:
        """Counts of two consecutive months should add up to their union."""
        txns = [
            make_txn(1, "income", 1000, datetime(2024, 1, 1)),
            make_txn(2, "expense", 300, datetime(2024, 1, 31, 23, 59)),
            make_txn(3, "expense", 200, datetime(2024, 2, 1)),
            make_txn(4, "expense", 200, datetime(2024, 2, 29, 18, 0)),
            make_txn(5, "expense", 200, datetime(2023, 12, 31)),
            make_txn(6, "expense", 200, datetime(2024, 3, 1)),
        ]
        jan_start, jan_end = month_bounds(REFERENCE, 1)
        feb_start, feb_end = month_bounds(REFERENCE, 0)

        jan = summarize(filter_by_window(txns, jan_start, jan_end))
        feb = summarize(filter_by_window(txns, feb_start, feb_end))
        union = filter_by_window(txns, jan_start, feb_end)

        assert jan.transaction_count + feb.transaction_count == len(union) == 4


class TestPercentChange:
    """Tests for percent_change."""

    def test_increase(self) -> None:
        assert percent_change(150, 100) == 50

    def test_decrease(self) -> None:
        assert percent_change(50, 100) == -50

    def test_from_zero_is_zero(self) -> None:
        """Moving from zero reports 0%, not infinity."""
        assert percent_change(100, 0) == 0

    def test_zero_to_zero(self) -> None:
        assert percent_change(0, 0) == 0

    def test_negative_previous_is_zero(self) -> None:
        """A negative previous value (e.g. a deficit) also reports 0%."""
        assert percent_change(500, -200) == 0

    def test_fractional_result(self) -> None:
        assert percent_change(200, 300) == pytest.approx(-33.3333, rel=1e-4)

    def test_unchanged(self) -> None:
        assert percent_change(100, 100) == 0


class TestBreakdownByCategory:
    """Tests for breakdown_by_category."""

    def test_merges_categories_with_same_name(self) -> None:
        """Two 'Food' categories with different ids become one entry."""
        categories = [make_category(1, "Food"), make_category(2, "Food", color="#000000")]
        txns = [make_txn(1, "expense", 100, REFERENCE, 1), make_txn(2, "expense", 100, REFERENCE, 2)]

        entries = breakdown_by_category(txns, categories)

        assert len(entries) == 1
        entry = entries[0]
        assert entry.name == "Food"
        assert entry.expense == 200
        assert entry.income == 0
        assert entry.total == 200
        assert entry.color == "#F59E0B"  # first category seen

    def test_unknown_category_is_other(self) -> None:
        """Missing category ids fall back to Other / gray / expense."""
        txns = [make_txn(1, "income", 500, REFERENCE, 99), make_txn(2, "expense", 20, REFERENCE, None)]

        entries = breakdown_by_category(txns, [make_category(1, "Food")])

        assert len(entries) == 1
        other = entries[0]
        assert other.name == "Other"
        assert other.color == "#6B7280"
        assert other.type == "expense"
        assert other.income == 500
        assert other.expense == 20
        assert other.total == 520

    def test_income_and_expense_in_one_category(self) -> None:
        """A category receives amounts of either type regardless of its own type."""
        categories = [make_category(1, "Freelance", cat_type="income")]
        txns = [make_txn(1, "income", 800, REFERENCE, 1), make_txn(2, "expense", 150, REFERENCE, 1)]

        entry = breakdown_by_category(txns, categories)[0]

        assert entry.income == 800
        assert entry.expense == 150
        assert entry.total == 950
        assert entry.type == "income"

    def test_sorted_by_total_descending(self) -> None:
        """Entries should come out largest total first."""
        categories = [make_category(1, "Food"), make_category(2, "Rent"), make_category(3, "Fun")]
        txns = [
            make_txn(1, "expense", 50, REFERENCE, 1),
            make_txn(2, "expense", 900, REFERENCE, 2),
            make_txn(3, "expense", 120, REFERENCE, 3),
            make_txn(4, "expense", 30, REFERENCE, 1),
        ]

        entries = breakdown_by_category(txns, categories)

        assert [e.name for e in entries] == ["Rent", "Fun", "Food"]
        totals = [e.total for e in entries]
        assert totals == sorted(totals, reverse=True)

    def test_ties_keep_first_occurrence_order(self) -> None:
        """Equal totals should stay in the order their names first appeared."""
        categories = [make_category(1, "Books"), make_category(2, "Apps")]
        txns = [make_txn(1, "expense", 100, REFERENCE, 1), make_txn(2, "expense", 100, REFERENCE, 2)]

        assert [e.name for e in breakdown_by_category(txns, categories)] == ["Books", "Apps"]

    def test_zero_totals_excluded(self) -> None:
        """Categories whose transactions sum to zero are dropped."""
        categories = [make_category(1, "Food"), make_category(2, "Gifts")]
        txns = [make_txn(1, "expense", 100, REFERENCE, 1), make_txn(2, "expense", 0, REFERENCE, 2)]

        entries = breakdown_by_category(txns, categories)

        assert [e.name for e in entries] == ["Food"]
        assert all(e.income > 0 or e.expense > 0 for e in entries)

    def test_total_is_sum_of_parts(self) -> None:
        """Every entry's total equals income + expense."""
        categories = [make_category(1, "Food"), make_category(2, "Salary", cat_type="income")]
        txns = [
            make_txn(1, "expense", 70, REFERENCE, 1),
            make_txn(2, "income", 3000, REFERENCE, 2),
            make_txn(3, "income", 5, REFERENCE, 1),
        ]

        for entry in breakdown_by_category(txns, categories):
            assert entry.total == entry.income + entry.expense

    def test_empty(self) -> None:
        assert breakdown_by_category([], [make_category(1, "Food")]) == []

    def test_malformed_transaction_raises(self) -> None:
        with pytest.raises(MalformedTransactionError):
            breakdown_by_category([make_txn(1, "refund", 10, REFERENCE, 1)], [make_category(1, "Food")])

    def test_to_dict_includes_total(self) -> None:
        entry = breakdown_by_category([make_txn(1, "expense", 10, REFERENCE, 1)], [make_category(1, "Food")])[0]

        assert entry.to_dict() == {
            "name": "Food",
            "color": "#F59E0B",
            "type": "expense",
            "income": 0,
            "expense": 10,
            "total": 10,
        }


class TestBuildSeries:
    """Tests for build_series."""

    def test_returns_requested_number_of_points(self) -> None:
        """Should always return exactly month_count points."""
        for count in (1, 6, 24):
            assert len(build_series([], REFERENCE, count)) == count

    def test_oldest_first_with_labels(self) -> None:
        """Labels should run from oldest to the reference month."""
        series = build_series([], REFERENCE, 6)

        assert [p.month for p in series] == ["Sep 2023", "Oct 2023", "Nov 2023", "Dec 2023", "Jan 2024", "Feb 2024"]
        assert [p.key for p in series][-1] == "2024-02"

    def test_empty_months_are_zero(self) -> None:
        """Months without transactions should have zero totals."""
        txns = [make_txn(1, "income", 1000, datetime(2024, 1, 15))]

        series = build_series(txns, REFERENCE, 3)

        assert [(p.income, p.expenses, p.net_balance) for p in series] == [(0, 0, 0), (1000, 0, 1000), (0, 0, 0)]

    def test_buckets_by_month(self) -> None:
        """Each transaction should land in its own month only."""
        txns = [
            make_txn(1, "income", 1000, datetime(2024, 1, 15)),
            make_txn(2, "expense", 300, datetime(2024, 1, 20)),
            make_txn(3, "expense", 200, datetime(2024, 2, 5)),
            make_txn(4, "expense", 999, datetime(2023, 1, 5)),  # outside range
            make_txn(5, "expense", 999, datetime(2024, 3, 1)),  # after reference month
        ]

        series = build_series(txns, REFERENCE, 2)

        jan, feb = series
        assert (jan.income, jan.expenses, jan.net_balance) == (1000, 300, 700)
        assert (feb.income, feb.expenses, feb.net_balance) == (0, 200, -200)

    def test_matches_per_month_filtering(self) -> None:
        """Single-pass bucketing should agree with filtering each month."""
        txns = [
            make_txn(i, "income" if i % 3 == 0 else "expense", i * 10, datetime(2023, 6 + i % 7, 1 + i % 28))
            for i in range(1, 60)
        ]

        series = build_series(txns, REFERENCE, 8)

        for point, (start, end) in zip(series, trailing_months(REFERENCE, 8)):
            summary = summarize(filter_by_window(txns, start, end))
            assert point.income == summary.total_income
            assert point.expenses == summary.total_expenses

    def test_other_offset_counts_in_reference_month(self) -> None:
        """An aware timestamp in another offset belongs to the reference's month."""
        reference = datetime(2024, 2, 10, tzinfo=timezone.utc)
        ist = timezone(timedelta(hours=5, minutes=30))
        # 2024-02-29 20:00 UTC
        txns = [make_txn(1, "expense", 500, datetime(2024, 3, 1, 1, 30, tzinfo=ist))]

        series = build_series(txns, reference, 2)

        assert [p.key for p in series] == ["2024-01", "2024-02"]
        assert series[0].expenses == 0
        assert series[1].expenses == 500
        feb_start, feb_end = month_bounds(reference)
        assert series[1].expenses == summarize(filter_by_window(txns, feb_start, feb_end)).total_expenses

    def test_year_rollover(self) -> None:
        """Series spanning New Year should keep months in order."""
        series = build_series([make_txn(1, "expense", 10, date(2023, 12, 31))], datetime(2024, 1, 2), 2)

        assert [p.key for p in series] == ["2023-12", "2024-01"]
        assert series[0].expenses == 10

    @pytest.mark.parametrize("count", [0, -3])
    def test_non_positive_count_raises(self, count: int) -> None:
        with pytest.raises(InvalidWindowError):
            build_series([], REFERENCE, count)

    def test_ignores_malformed_transactions_outside_range(self) -> None:
        """Only transactions inside the series are validated."""
        txns = [make_txn(1, "bogus", 10, datetime(2020, 1, 1)), make_txn(2, "income", 10, REFERENCE)]

        assert build_series(txns, REFERENCE, 1)[0].income == 10

    def test_malformed_in_range_raises(self) -> None:
        with pytest.raises(MalformedTransactionError):
            build_series([make_txn(1, "bogus", 10, REFERENCE)], REFERENCE, 1)

    def test_idempotent(self) -> None:
        """Same inputs and reference give the same output."""
        txns = [make_txn(1, "income", 1000, datetime(2024, 1, 15)), make_txn(2, "expense", 5, REFERENCE)]

        assert build_series(txns, REFERENCE, 6) == build_series(txns, REFERENCE, 6)
