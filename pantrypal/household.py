"""Fetch fresh snapshots from the API and run the engine over them."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from .client import APIError, PantryAPI
from .config import PantryConfig
from .engine import (
    BudgetProgress,
    ExpiringItem,
    RankedRecipe,
    RestockPlan,
    UsageResult,
    apply_usage,
    compute_progress,
    count_by_category,
    expiring_soon,
    filter_recipes,
    group_by_section,
    low_stock,
    match_recipes,
    offers_by_category,
    plan_restock,
)
from .types import Coupon, GroceryItem, PantryItem, RecipeDetail, RecipeSummary

logger = logging.getLogger(__name__)


@dataclass
class DashboardView:
    low_stock: list[PantryItem]
    expiring: list[ExpiringItem]
    category_counts: dict[str, int]


@dataclass
class ShoppingView:
    items: list[GroceryItem]
    progress: BudgetProgress
    coupons: list[Coupon] = field(default_factory=list)
    offers: dict[str, list[str]] = field(default_factory=dict)
    suggestions: list[PantryItem] = field(default_factory=list)
    sections: dict[str, list[GroceryItem]] = field(default_factory=dict)
    list_id: Any = None


@dataclass
class CheckoutResult:
    list_id: Any
    total_spent: float
    items_logged: int
    restock: RestockPlan


async def _fetch_detail(api: PantryAPI, recipe: RecipeSummary) -> RecipeDetail | None:
    """Fetch ingredients for one recipe; None if the request fails."""
    try:
        detail = await api.get_recipe(recipe.id)
    except APIError:
        logger.warning("Could not load ingredients for recipe %s", recipe.id)
        return None
    if not detail.title:
        detail.title = recipe.title
    return detail


class Household:
    """One household's pantry, list and recipes, seen through the API.

    Nothing is cached: every call re-fetches the snapshots it needs.
    """

    def __init__(self, api: PantryAPI, config: PantryConfig | None = None) -> None:
        self._api = api
        self._config = config or PantryConfig()

    @property
    def config(self) -> PantryConfig:
        return self._config

    async def dashboard(self, today: date) -> DashboardView:
        pantry, (_, grocery) = await asyncio.gather(
            self._api.get_pantry(),
            self._grocery_or_empty(),
        )
        return DashboardView(
            low_stock=low_stock(pantry, grocery),
            expiring=expiring_soon(
                pantry, today, window_days=self._config.pantry.expiring_days
            ),
            category_counts=count_by_category(
                pantry, self._config.pantry.categories
            ),
        )

    async def shopping(self) -> ShoppingView:
        (grocery_list, items), pantry, coupons = await asyncio.gather(
            self._api.get_grocery(),
            self._api.get_pantry(),
            self._coupons_or_empty(),
        )
        budget = grocery_list.budget_limit if grocery_list else 0.0
        return ShoppingView(
            items=items,
            progress=compute_progress(items, coupons, budget),
            coupons=coupons,
            offers=offers_by_category(
                items, coupons, self._config.shopping.section_categories
            ),
            suggestions=low_stock(pantry, items),
            sections=group_by_section(items),
            list_id=grocery_list.id if grocery_list else None,
        )

    async def pantry_match(
        self,
        query: str = "",
        diet: str = "All",
    ) -> list[RankedRecipe]:
        """Rank the (filtered) recipe catalogue against the current pantry."""
        recipes, pantry = await asyncio.gather(
            self._api.get_recipes(),
            self._api.get_pantry(),
        )
        recipes = filter_recipes(recipes, query=query, diet=diet)
        if not pantry:
            logger.warning("Pantry is empty; every recipe will score 0%")

        details = await asyncio.gather(
            *[_fetch_detail(self._api, r) for r in recipes]
        )
        return match_recipes([d for d in details if d is not None], pantry)

    async def checkout(self) -> CheckoutResult:
        """Log the checked items as a trip and restock the pantry.

        Raises:
            ValueError: If nothing is checked or the list id is unknown.
        """
        (grocery_list, items), pantry, coupons = await asyncio.gather(
            self._api.get_grocery(),
            self._api.get_pantry(),
            self._coupons_or_empty(),
        )
        purchased = [i for i in items if i.is_checked]
        if not purchased:
            raise ValueError("no items have been checked off yet")

        list_id = purchased[0].list_id
        if list_id is None and grocery_list is not None:
            list_id = grocery_list.id
        if list_id is None:
            raise ValueError("could not determine the shopping list id")

        progress = compute_progress(
            items, coupons, grocery_list.budget_limit if grocery_list else 0.0
        )
        await self._api.log_trip(list_id, progress.spent)

        plan = plan_restock(
            purchased, pantry, self._config.shopping.section_categories
        )
        for item in plan.updates:
            await self._api.update_pantry_item(item.id, quantity=item.quantity)
        for item in plan.creates:
            await self._api.add_pantry_item(item)
        logger.info(
            "Trip logged: %d items, %d restocked, %d new",
            len(purchased),
            len(plan.updates),
            len(plan.creates),
        )

        return CheckoutResult(
            list_id=list_id,
            total_spent=progress.spent,
            items_logged=len(purchased),
            restock=plan,
        )

    async def log_usage(self, item_id: Any, used: float) -> UsageResult:
        """Record that *used* units of a pantry item were consumed.

        Raises:
            ValueError: If the item is unknown or *used* is not positive.
        """
        pantry = await self._api.get_pantry()
        item = next((p for p in pantry if str(p.id) == str(item_id)), None)
        if item is None:
            raise ValueError(f"pantry item {item_id!r} not found")

        result = apply_usage(item, used)
        if result.remove:
            await self._api.delete_pantry_item(item.id)
            logger.info("%s used up; removed from pantry", item.name)
        else:
            await self._api.update_pantry_item(item.id, quantity=result.quantity)
        return result

    async def add_to_list(
        self,
        item: PantryItem,
        price: float | None = None,
        note: str = "From Dashboard Low Stock",
    ) -> None:
        """Put a pantry item on the shopping list, estimating its price if needed."""
        if price is None:
            try:
                price = await self._api.estimate_price(item.name)
            except APIError:
                logger.warning("Price estimate failed for %s", item.name)
                price = None
        await self._api.add_grocery_item(
            GroceryItem(
                id=None,
                name=item.name,
                quantity=1,
                price=price or 0.0,
                notes=note,
            )
        )

    async def mark_all_read(self) -> int:
        notifications = await self._api.get_notifications()
        unread = [n for n in notifications if not n.is_read]
        await asyncio.gather(
            *[self._api.mark_notification_read(n.id) for n in unread]
        )
        return len(unread)

    async def _grocery_or_empty(self):
        try:
            return await self._api.get_grocery()
        except APIError:
            logger.warning("Shopping list unavailable; assuming it is empty")
            return None, []

    async def _coupons_or_empty(self) -> list[Coupon]:
        try:
            return await self._api.get_coupons()
        except APIError:
            logger.warning("Coupons unavailable; prices shown without discounts")
            return []
