"""Budget, coupon-discount and shopping progress calculations."""

from __future__ import annotations

from dataclasses import dataclass

from ..types import Coupon, GroceryItem
from .matching import matches
from .recipes import round_half_up


@dataclass
class BudgetProgress:
    """Derived shopping-list progress.

    ``percent`` is clamped to [0, 100] for rendering; ``raw_percent`` is
    not, so a value above 100 can drive the over-budget state.
    """

    spent: float
    remaining: float
    percent: float
    raw_percent: float
    over_budget: bool
    budget_limit: float = 0.0
    checked_count: int = 0
    total_count: int = 0
    projected_total: float = 0.0

    @property
    def projected_over_budget(self) -> bool:
        """True if buying the whole list would exceed the budget."""
        return self.budget_limit > 0 and self.projected_total > self.budget_limit

    @property
    def label(self) -> str:
        pct = round_half_up(self.raw_percent)
        if self.budget_limit > 0:
            return f"{pct}% of Budget"
        return f"{pct}% Complete"


def find_coupon(name: str, coupons: list[Coupon]) -> Coupon | None:
    """Best coupon for an item name.

    Among fuzzy matches the highest discount wins; ties keep list order.
    """
    best: Coupon | None = None
    for coupon in coupons:
        if not matches(coupon.grocery_item_name, name):
            continue
        if best is None or coupon.discount_percentage > best.discount_percentage:
            best = coupon
    return best


def apply_discount(price: float, percentage: float) -> float:
    """Price after a percentage discount, never below zero."""
    return max(0.0, price - price * percentage / 100)


def discounted_price(item: GroceryItem, coupons: list[Coupon]) -> float:
    coupon = find_coupon(item.name, coupons)
    if coupon is None:
        return max(0.0, item.price)
    return apply_discount(item.price, coupon.discount_percentage)


def checked_total(items: list[GroceryItem], coupons: list[Coupon]) -> float:
    """Discounted total of the items already in the cart."""
    return sum(discounted_price(i, coupons) for i in items if i.is_checked)


def projected_total(items: list[GroceryItem], coupons: list[Coupon]) -> float:
    """Discounted total of the whole list."""
    return sum(discounted_price(i, coupons) for i in items)


def compute_progress(
    items: list[GroceryItem],
    coupons: list[Coupon],
    budget_limit: float,
) -> BudgetProgress:
    """Spent / remaining / percent for the shopping list.

    With a budget the percent is spend over budget; with no budget
    (``budget_limit <= 0``) it falls back to checked items over all items.
    """
    spent = checked_total(items, coupons)
    checked = sum(1 for i in items if i.is_checked)
    total = len(items)

    if budget_limit > 0:
        raw = spent / budget_limit * 100
    elif total > 0:
        raw = checked / total * 100
    else:
        raw = 0.0

    return BudgetProgress(
        spent=spent,
        remaining=max(0.0, budget_limit - spent),
        percent=min(max(raw, 0.0), 100.0),
        raw_percent=raw,
        over_budget=budget_limit > 0 and spent > budget_limit,
        budget_limit=budget_limit,
        checked_count=checked,
        total_count=total,
        projected_total=projected_total(items, coupons),
    )


def group_by_section(
    items: list[GroceryItem],
    include_checked: bool = False,
) -> dict[str, list[GroceryItem]]:
    """Group list items by store section, keeping first-seen section order.

    Checked items are left out unless *include_checked* is set; sections
    that end up empty are dropped.
    """
    groups: dict[str, list[GroceryItem]] = {}
    for item in items:
        if item.is_checked and not include_checked:
            continue
        groups.setdefault(item.section, []).append(item)
    return groups
