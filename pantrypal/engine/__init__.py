"""Pure matching and derived-metrics functions over API snapshots."""

from .analytics import (
    SpendingSummary,
    category_breakdown,
    lifetime_spent,
    spent_in_window,
    summarize,
)
from .budget import (
    BudgetProgress,
    apply_discount,
    checked_total,
    compute_progress,
    discounted_price,
    find_coupon,
    group_by_section,
    projected_total,
)
from .inventory import (
    EXPIRING_SOON_DAYS,
    ExpiringItem,
    RestockPlan,
    UsageResult,
    apply_usage,
    count_by_category,
    expiring_soon,
    expiry_label,
    group_by_category,
    low_stock,
    plan_restock,
    search_pantry,
    stock_level,
)
from .matching import matches, normalize
from .offers import DEFAULT_SECTION_CATEGORIES, offers_by_category, section_category
from .recipes import RankedRecipe, filter_recipes, match_recipes, match_tier

__all__ = [
    "normalize",
    "matches",
    "RankedRecipe",
    "match_recipes",
    "filter_recipes",
    "match_tier",
    "EXPIRING_SOON_DAYS",
    "ExpiringItem",
    "UsageResult",
    "RestockPlan",
    "low_stock",
    "expiring_soon",
    "expiry_label",
    "stock_level",
    "search_pantry",
    "count_by_category",
    "group_by_category",
    "apply_usage",
    "plan_restock",
    "BudgetProgress",
    "find_coupon",
    "apply_discount",
    "discounted_price",
    "checked_total",
    "projected_total",
    "compute_progress",
    "group_by_section",
    "DEFAULT_SECTION_CATEGORIES",
    "section_category",
    "offers_by_category",
    "SpendingSummary",
    "summarize",
    "category_breakdown",
    "spent_in_window",
    "lifetime_spent",
]
