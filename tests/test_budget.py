"""Tests for budget, coupon discount and shopping progress."""

import pytest

from pantrypal.engine.budget import (
    apply_discount,
    compute_progress,
    discounted_price,
    find_coupon,
    group_by_section,
)
from pantrypal.types import Coupon, GroceryItem


def _grocery(name: str, price: float = 0.0, checked: bool = False, **kw) -> GroceryItem:
    return GroceryItem(id=kw.pop("id", name), name=name, price=price,
                       is_checked=checked, **kw)


class TestDiscount:
    def test_coupon_applied(self):
        coupons = [Coupon("milk", 10)]
        assert discounted_price(_grocery("Whole Milk", 100), coupons) == 90

    def test_no_coupon(self):
        assert discounted_price(_grocery("Bread", 40), [Coupon("milk", 10)]) == 40

    def test_never_below_zero(self):
        assert apply_discount(50, 150) == 0.0

    def test_highest_discount_wins(self):
        coupons = [Coupon("milk", 10, "A"), Coupon("whole milk", 25, "B"), Coupon("milk", 5, "C")]
        assert find_coupon("Whole Milk", coupons).store_name == "B"

    def test_tie_keeps_list_order(self):
        coupons = [Coupon("milk", 10, "first"), Coupon("milk", 10, "second")]
        assert find_coupon("milk", coupons).store_name == "first"

    def test_empty_coupon_name_never_applies(self):
        assert find_coupon("milk", [Coupon("", 50)]) is None


class TestComputeProgress:
    def test_over_budget_with_coupon(self):
        items = [_grocery("Milk", 100, checked=True)]
        p = compute_progress(items, [Coupon("milk", 10)], budget_limit=50)
        assert p.spent == 90
        assert p.remaining == 0
        assert p.over_budget is True
        assert p.percent == 100
        assert p.raw_percent == pytest.approx(180)

    def test_unchecked_items_do_not_count(self):
        items = [_grocery("Milk", 100, checked=True), _grocery("Bread", 60)]
        p = compute_progress(items, [], budget_limit=200)
        assert p.spent == 100
        assert p.remaining == 100
        assert p.percent == 50
        assert p.over_budget is False
        assert p.projected_total == 160
        assert p.label == "50% of Budget"

    def test_projected_over_budget(self):
        items = [_grocery("Milk", 100, checked=True), _grocery("Bread", 60)]
        assert compute_progress(items, [], budget_limit=150).projected_over_budget is True
        assert compute_progress(items, [], budget_limit=0).projected_over_budget is False

    def test_spend_exactly_at_budget_is_not_over(self):
        p = compute_progress([_grocery("Rice", 50, checked=True)], [], budget_limit=50)
        assert p.over_budget is False
        assert p.remaining == 0

    def test_no_budget_uses_checked_ratio(self):
        items = [
            _grocery("A", 10, checked=True),
            _grocery("B", 10),
            _grocery("C", 10),
            _grocery("D", 10, checked=True),
        ]
        p = compute_progress(items, [], budget_limit=0)
        assert p.percent == 50
        assert p.over_budget is False
        assert p.remaining == 0
        assert p.checked_count == 2
        assert p.total_count == 4
        assert p.label == "50% Complete"

    def test_empty_list(self):
        p = compute_progress([], [], budget_limit=0)
        assert p.spent == 0
        assert p.percent == 0
        assert p.label == "0% Complete"

    def test_percent_always_clamped(self):
        items = [_grocery("Caviar", 10_000, checked=True)]
        p = compute_progress(items, [], budget_limit=1)
        assert 0 <= p.percent <= 100
        assert p.remaining >= 0


class TestGroupBySection:
    def test_groups_unchecked_in_first_seen_order(self):
        items = [
            _grocery("Milk", section="Dairy"),
            _grocery("Apples", section="Produce"),
            _grocery("Cheese", section="Dairy"),
            _grocery("Bread", section="Bakery", checked=True),
        ]
        groups = group_by_section(items)
        assert list(groups) == ["Dairy", "Produce"]
        assert [i.name for i in groups["Dairy"]] == ["Milk", "Cheese"]

    def test_include_checked(self):
        items = [_grocery("Bread", section="Bakery", checked=True)]
        assert list(group_by_section(items, include_checked=True)) == ["Bakery"]
