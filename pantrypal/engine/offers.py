"""Category / coupon offer aggregation."""

from __future__ import annotations

from typing import Union

from ..types import Coupon, GroceryItem, PantryItem
from .matching import matches, normalize

# Shopping-list section -> pantry category
DEFAULT_SECTION_CATEGORIES: dict[str, str] = {
    "Produce": "Produce",
    "Fruits": "Produce",
    "Vegetables": "Produce",
    "Fruits & Vegetables": "Produce",
    "Dairy": "Dairy",
    "Dairy & Eggs": "Dairy",
    "Eggs": "Dairy",
    "Bakery": "Grains",
    "Grains": "Grains",
    "Bread": "Grains",
    "Rice & Pasta": "Grains",
    "Canned Goods": "Canned Goods",
    "Canned": "Canned Goods",
    "Pantry Staples": "Canned Goods",
    "Frozen": "Frozen",
    "Frozen Foods": "Frozen",
}

FALLBACK_CATEGORY = "Others"

Item = Union[GroceryItem, PantryItem]


def section_category(section: str, table: dict[str, str] | None = None) -> str:
    """Map a shopping-list section to a pantry category.

    Lookup ignores case and surrounding whitespace; unmapped sections
    fall back to "Others".
    """
    table = table if table is not None else DEFAULT_SECTION_CATEGORIES
    wanted = normalize(section or "")
    for key, category in table.items():
        if normalize(key) == wanted:
            return category
    return FALLBACK_CATEGORY


def item_category(item: Item, table: dict[str, str] | None = None) -> str:
    """Pantry items carry a category; grocery items go through the table."""
    if isinstance(item, PantryItem):
        return item.category or FALLBACK_CATEGORY
    return section_category(item.section, table)


def has_offer(name: str, coupons: list[Coupon]) -> bool:
    return any(matches(c.grocery_item_name, name) for c in coupons)


def offers_by_category(
    items: list[Item],
    coupons: list[Coupon],
    section_categories: dict[str, str] | None = None,
) -> dict[str, list[str]]:
    """Unique item names per category that have an applicable coupon.

    Names are de-duplicated case-insensitively, keeping the first spelling.
    """
    result: dict[str, list[str]] = {}
    seen: dict[str, set[str]] = {}
    for item in items:
        if not has_offer(item.name, coupons):
            continue
        category = item_category(item, section_categories)
        key = normalize(item.name)
        names = seen.setdefault(category, set())
        if key in names:
            continue
        names.add(key)
        result.setdefault(category, []).append(item.name)
    return result
