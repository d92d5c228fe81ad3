"""Budget filtering of catalog results.

Records priced up to 10% over the budget are kept. If that would leave
nothing, the unfiltered list is returned instead so a slightly strict budget
never turns into an empty results page.
"""

from __future__ import annotations

import structlog

from advisor.models.contracts import ProductRecord

log = structlog.get_logger("budget")

BUDGET_TOLERANCE = 1.1


def budget_ceiling(budget: float) -> float:
    return budget * BUDGET_TOLERANCE


def within_budget(records: list[ProductRecord], budget: float) -> list[ProductRecord]:
    """Records at or under the ceiling, with no fallback."""
    if budget <= 0:
        return list(records)
    ceiling = budget_ceiling(budget)
    return [r for r in records if r.sale_price <= ceiling]


def filter_by_budget(records: list[ProductRecord], budget: float) -> list[ProductRecord]:
    if budget <= 0:
        return records

    filtered = within_budget(records, budget)
    if not filtered and records:
        log.warning(
            "budget_filter_fallback",
            budget=budget,
            ceiling=round(budget_ceiling(budget), 2),
            cheapest=min(r.sale_price for r in records),
            records=len(records),
        )
        return records

    if len(filtered) < len(records):
        log.info(
            "budget_filter_applied",
            budget=budget,
            kept=len(filtered),
            dropped=len(records) - len(filtered),
        )
    return filtered
