"""Low-stock, expiration and restock derivations over a pantry snapshot."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any

from ..types import CATEGORIES, GroceryItem, PantryItem
from .matching import matches, normalize, same_name
from .offers import DEFAULT_SECTION_CATEGORIES, section_category

EXPIRING_SOON_DAYS = 7

_ONE_DAY = timedelta(days=1)


@dataclass
class ExpiringItem:
    """A pantry item annotated with the number of days until it expires."""

    item: PantryItem
    days_left: int

    @property
    def expired(self) -> bool:
        return self.days_left <= 0

    @property
    def label(self) -> str:
        return expiry_label(self.days_left)


@dataclass
class UsageResult:
    """Outcome of logging usage against a pantry item."""

    item_id: Any
    quantity: float
    remove: bool


@dataclass
class RestockPlan:
    """Pantry writes needed after a shopping trip."""

    updates: list[PantryItem] = field(default_factory=list)
    creates: list[PantryItem] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.updates and not self.creates


def is_low_stock(item: PantryItem) -> bool:
    return item.quantity <= item.threshold


def low_stock(
    pantry: list[PantryItem],
    grocery_items: list[GroceryItem],
) -> list[PantryItem]:
    """Pantry items at or below threshold that are not already listed.

    "Already listed" is an exact, case-insensitive name match against the
    shopping list (not the fuzzy match used elsewhere).
    """
    listed = {normalize(g.name) for g in grocery_items}
    return [
        item
        for item in pantry
        if is_low_stock(item) and normalize(item.name) not in listed
    ]


def days_until(expiration: date | datetime, reference: date | datetime) -> int:
    """Whole days from *reference* to *expiration*, rounded up."""
    if isinstance(expiration, datetime) != isinstance(reference, datetime):
        # Compare on calendar days when the two sides differ in precision.
        expiration = _as_date(expiration)
        reference = _as_date(reference)
    return math.ceil((expiration - reference) / _ONE_DAY)


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def expiring_soon(
    pantry: list[PantryItem],
    reference: date | datetime,
    window_days: int = EXPIRING_SOON_DAYS,
) -> list[ExpiringItem]:
    """Items expiring within *window_days* of *reference*, most urgent first.

    Already-expired items are included with ``days_left <= 0``.
    """
    result: list[ExpiringItem] = []
    for item in pantry:
        if item.expiration_date is None:
            continue
        days_left = days_until(item.expiration_date, reference)
        if days_left <= window_days:
            result.append(ExpiringItem(item=item, days_left=days_left))
    result.sort(key=lambda e: e.days_left)
    return result


def expiry_label(days_left: int) -> str:
    if days_left < 0:
        n = -days_left
        return f"expired {n} day{'s' if n != 1 else ''} ago"
    if days_left == 0:
        return "expires today"
    if days_left == 1:
        return "expires tomorrow"
    return f"expires in {days_left} days"


def stock_level(item: PantryItem) -> float:
    """Quantity as a percentage of threshold, capped at 100."""
    if item.threshold <= 0:
        return 100.0 if item.quantity > 0 else 0.0
    return min(item.quantity / item.threshold * 100, 100.0)


def search_pantry(pantry: list[PantryItem], query: str) -> list[PantryItem]:
    """Filter pantry items by name; a blank query keeps everything."""
    if not normalize(query):
        return list(pantry)
    return [item for item in pantry if matches(query, item.name)]


def count_by_category(
    pantry: list[PantryItem],
    categories: tuple[str, ...] | list[str] = CATEGORIES,
) -> dict[str, int]:
    """Number of pantry items in each of the fixed categories."""
    counts = {c: 0 for c in categories}
    for item in pantry:
        if item.category in counts:
            counts[item.category] += 1
    return counts


def group_by_category(pantry: list[PantryItem]) -> dict[str, list[PantryItem]]:
    """Group items by category in first-seen order, names sorted within."""
    groups: dict[str, list[PantryItem]] = {}
    for item in pantry:
        groups.setdefault(item.category or "Others", []).append(item)
    for items in groups.values():
        items.sort(key=lambda i: normalize(i.name))
    return groups


def apply_usage(item: PantryItem, used: float) -> UsageResult:
    """Subtract *used* from an item; flag it for removal when used up.

    Raises:
        ValueError: If *used* is not positive.
    """
    if used <= 0:
        raise ValueError(f"usage amount must be positive, got {used!r}")
    remaining = item.quantity - used
    if remaining <= 0:
        return UsageResult(item_id=item.id, quantity=0.0, remove=True)
    return UsageResult(item_id=item.id, quantity=remaining, remove=False)


def plan_restock(
    purchased: list[GroceryItem],
    pantry: list[PantryItem],
    section_categories: dict[str, str] | None = None,
) -> RestockPlan:
    """Work out pantry updates for the checked-off shopping list items.

    Existing items (exact case-insensitive name) get their quantity
    increased; everything else becomes a new pantry item. A missing or
    zero grocery quantity counts as 1.
    """
    table = (
        section_categories
        if section_categories is not None
        else DEFAULT_SECTION_CATEGORIES
    )
    updates: dict[str, PantryItem] = {}
    creates: dict[str, PantryItem] = {}

    for bought in purchased:
        amount = bought.quantity or 1
        key = normalize(bought.name)

        if key in updates:
            updates[key].quantity += amount
            continue
        if key in creates:
            creates[key].quantity += amount
            continue

        existing = next((p for p in pantry if same_name(p.name, bought.name)), None)
        if existing is not None:
            updates[key] = PantryItem(
                id=existing.id,
                name=existing.name,
                category=existing.category,
                quantity=existing.quantity + amount,
                unit=existing.unit,
                threshold=existing.threshold,
                expiration_date=existing.expiration_date,
            )
        else:
            creates[key] = PantryItem(
                id=None,
                name=bought.name,
                category=section_category(bought.section, table),
                quantity=amount,
                unit=bought.unit or "Unit",
                threshold=1,
            )

    return RestockPlan(updates=list(updates.values()), creates=list(creates.values()))
