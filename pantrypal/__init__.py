"""Household pantry tracking, shopping budget and recipe matching."""

from .client import APIError, PantryAPI
from .config import (
    APIConfig,
    InventoryConfig,
    PantryConfig,
    RemindersConfig,
    ShoppingConfig,
    load_config,
)
from .engine import (
    BudgetProgress,
    ExpiringItem,
    RankedRecipe,
    compute_progress,
    discounted_price,
    expiring_soon,
    low_stock,
    match_recipes,
    matches,
    offers_by_category,
)
from .household import Household
from .session import SessionContext, SessionKind
from .types import (
    Coupon,
    GroceryItem,
    PantryItem,
    RecipeDetail,
    RecipeIngredient,
    RecipeSummary,
)

__all__ = [
    "PantryAPI",
    "APIError",
    "Household",
    "SessionContext",
    "SessionKind",
    "PantryConfig",
    "APIConfig",
    "InventoryConfig",
    "ShoppingConfig",
    "RemindersConfig",
    "load_config",
    "PantryItem",
    "RecipeSummary",
    "RecipeDetail",
    "RecipeIngredient",
    "GroceryItem",
    "Coupon",
    "matches",
    "match_recipes",
    "RankedRecipe",
    "low_stock",
    "expiring_soon",
    "ExpiringItem",
    "compute_progress",
    "discounted_price",
    "BudgetProgress",
    "offers_by_category",
]
