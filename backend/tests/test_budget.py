"""Tests for the budget filter and its fallback-to-unfiltered policy."""

import pytest

from advisor.pipeline.budget import budget_ceiling, filter_by_budget, within_budget
from conftest import make_record


def _records(*prices: float):
    return [make_record(i, price=p) for i, p in enumerate(prices)]


class TestNoBudget:
    """A budget of zero or less expresses no constraint."""

    @pytest.mark.parametrize("budget", [0, -1, -250.5])
    def test_identity(self, budget):
        """Returns the very same list for any non-positive budget."""
        records = _records(10, 5000, 99.99)
        assert filter_by_budget(records, budget) is records

    def test_empty_input(self):
        assert filter_by_budget([], 0) == []


class TestCeiling:
    """Records priced up to 10% over the budget are kept."""

    def test_ceiling_is_ten_percent_over(self):
        assert budget_ceiling(100) == pytest.approx(110)

    def test_excludes_records_over_ceiling(self):
        """Every record above budget * 1.1 is removed when any record fits."""
        records = _records(50, 109.99, 110, 110.01, 500)
        result = filter_by_budget(records, 100)
        assert [r.sale_price for r in result] == [50, 109.99, 110]
        assert all(r.sale_price <= budget_ceiling(100) for r in result)

    def test_keeps_catalog_order(self):
        records = _records(90, 10, 60)
        assert [r.id for r in filter_by_budget(records, 100)] == ["item-0", "item-1", "item-2"]

    def test_empty_input_with_budget(self):
        assert filter_by_budget([], 100) == []


class TestFallback:
    """When nothing fits, the unfiltered list is returned instead of nothing."""

    def test_all_over_ceiling_returns_original(self):
        records = _records(500, 800, 1200)
        result = filter_by_budget(records, 100)
        assert result == records

    def test_within_budget_has_no_fallback(self):
        """within_budget reports the strict result so callers can detect the fallback."""
        records = _records(500, 800)
        assert within_budget(records, 100) == []
