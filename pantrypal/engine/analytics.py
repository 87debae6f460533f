"""Spending summaries for the analytics view."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from ..types import SpendingCategory, TripRecord

TIMEFRAME_DAYS: dict[str, int] = {
    "weekly": 7,
    "monthly": 30,
    "yearly": 365,
}


@dataclass
class SpendingSummary:
    goal: float
    spent: float
    remaining: float
    percent: float  # clamped to [0, 100]


def summarize(goal: float, spent: float) -> SpendingSummary:
    if goal > 0:
        percent = min(100.0, max(0.0, spent / goal * 100))
    else:
        percent = 0.0
    return SpendingSummary(
        goal=goal,
        spent=spent,
        remaining=max(0.0, goal - spent),
        percent=percent,
    )


def category_breakdown(
    categories: list[SpendingCategory],
) -> list[tuple[SpendingCategory, float]]:
    """Each category's share of total spend, as a fraction in [0, 1]."""
    total = sum(c.amount for c in categories)
    if total <= 0:
        return [(c, 0.0) for c in categories]
    return [(c, c.amount / total) for c in categories]


def spent_in_window(
    trips: list[TripRecord],
    timeframe: str,
    reference: date | datetime,
) -> float:
    """Total spent on trips in the last week/month/year up to *reference*.

    A datetime reference is compared by its calendar date.

    Raises:
        ValueError: If *timeframe* is not one of weekly, monthly, yearly.
    """
    try:
        days = TIMEFRAME_DAYS[timeframe]
    except KeyError:
        raise ValueError(
            f"unknown timeframe: {timeframe!r} "
            f"(choose from {', '.join(TIMEFRAME_DAYS)})"
        ) from None
    if isinstance(reference, datetime):
        reference = reference.date()
    start = reference - timedelta(days=days)
    return sum(
        t.total_spent
        for t in trips
        if t.purchased_at is not None and start <= t.purchased_at <= reference
    )


def lifetime_spent(trips: list[TripRecord]) -> float:
    return sum(t.total_spent for t in trips)
