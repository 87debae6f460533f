"""Tests for Household orchestration over a mocked API."""

from datetime import date
from unittest.mock import AsyncMock, call

import pytest

from pantrypal.client import APIError
from pantrypal.config import PantryConfig
from pantrypal.household import Household
from pantrypal.types import (
    Coupon,
    GroceryItem,
    GroceryList,
    Notification,
    PantryItem,
    RecipeDetail,
    RecipeIngredient,
    RecipeSummary,
)

TODAY = date(2024, 3, 10)


@pytest.fixture
def api():
    mock = AsyncMock()
    mock.get_pantry.return_value = [
        PantryItem(id=1, name="Eggs", category="Dairy", quantity=2, threshold=6,
                   expiration_date=date(2024, 3, 12)),
        PantryItem(id=2, name="Whole Milk", category="Dairy", quantity=3, threshold=1),
        PantryItem(id=3, name="Rice", category="Grains", quantity=0, threshold=1),
    ]
    mock.get_grocery.return_value = (
        GroceryList(id=9, budget_limit=50),
        [
            GroceryItem(id=10, name="Milk", price=100, is_checked=True, list_id=9,
                        section="Dairy"),
            GroceryItem(id=11, name="rice", price=30, section="Grains"),
        ],
    )
    mock.get_coupons.return_value = [Coupon("milk", 10)]
    return mock


class TestDashboard:
    @pytest.mark.asyncio
    async def test_dashboard(self, api):
        view = await Household(api).dashboard(TODAY)
        # Rice is low but already on the list
        assert [i.name for i in view.low_stock] == ["Eggs"]
        assert [(e.item.name, e.days_left) for e in view.expiring] == [("Eggs", 2)]
        assert view.category_counts["Dairy"] == 2
        assert view.category_counts["Grains"] == 1

    @pytest.mark.asyncio
    async def test_dashboard_without_grocery(self, api):
        api.get_grocery.side_effect = APIError("down", status_code=500)
        view = await Household(api).dashboard(TODAY)
        assert [i.name for i in view.low_stock] == ["Eggs", "Rice"]


class TestShopping:
    @pytest.mark.asyncio
    async def test_shopping_view(self, api):
        view = await Household(api).shopping()
        p = view.progress
        assert p.spent == 90
        assert p.remaining == 0
        assert p.over_budget is True
        assert p.percent == 100
        assert view.list_id == 9
        assert view.offers == {"Dairy": ["Milk"]}
        assert list(view.sections) == ["Grains"]
        assert [i.name for i in view.suggestions] == ["Eggs"]

    @pytest.mark.asyncio
    async def test_coupons_unavailable(self, api):
        api.get_coupons.side_effect = APIError("down")
        view = await Household(api).shopping()
        assert view.progress.spent == 100
        assert view.offers == {}


class TestPantryMatch:
    @pytest.mark.asyncio
    async def test_ranks_details(self, api):
        api.get_recipes.return_value = [
            RecipeSummary(id=1, title="Omelette", dietary_tags=["Vegetarian"]),
            RecipeSummary(id=2, title="Pancakes", dietary_tags=["Vegetarian"]),
        ]
        details = {
            1: RecipeDetail(id=1, ingredients=[RecipeIngredient("Egg"), RecipeIngredient("Salt")]),
            2: RecipeDetail(id=2, title="Pancakes", ingredients=[
                RecipeIngredient("Egg"), RecipeIngredient("Flour"), RecipeIngredient("Milk"),
            ]),
        }
        api.get_recipe.side_effect = lambda rid: details[rid]

        ranked = await Household(api).pantry_match()

        assert [r.title for r in ranked] == ["Pancakes", "Omelette"]
        assert ranked[0].match_percentage == 67
        assert ranked[1].match_percentage == 50

    @pytest.mark.asyncio
    async def test_failed_detail_skipped(self, api):
        api.get_recipes.return_value = [
            RecipeSummary(id=1, title="Omelette"),
            RecipeSummary(id=2, title="Ghost"),
        ]

        async def get_recipe(rid):
            if rid == 2:
                raise APIError("not found", status_code=404)
            return RecipeDetail(id=1, ingredients=[RecipeIngredient("Egg")])

        api.get_recipe.side_effect = get_recipe
        ranked = await Household(api).pantry_match()
        assert [r.id for r in ranked] == [1]
        assert ranked[0].title == "Omelette"

    @pytest.mark.asyncio
    async def test_filters_before_fetching(self, api):
        api.get_recipes.return_value = [
            RecipeSummary(id=1, title="Chicken Curry"),
            RecipeSummary(id=2, title="Veg Pulao", dietary_tags=["Vegetarian"]),
        ]
        api.get_recipe.return_value = RecipeDetail(id=2, ingredients=[RecipeIngredient("Rice")])

        await Household(api).pantry_match(diet="Veg")

        api.get_recipe.assert_awaited_once_with(2)


class TestCheckout:
    @pytest.mark.asyncio
    async def test_checkout(self, api):
        result = await Household(api).checkout()

        api.log_trip.assert_awaited_once_with(9, 90)
        # "Milk" is not an exact match for the pantry's "Whole Milk"
        api.update_pantry_item.assert_not_awaited()
        created = api.add_pantry_item.await_args.args[0]
        assert created.name == "Milk"
        assert created.category == "Dairy"
        assert result.items_logged == 1
        assert result.total_spent == 90

    @pytest.mark.asyncio
    async def test_existing_item_restocked(self, api):
        api.get_grocery.return_value = (
            GroceryList(id=9),
            [GroceryItem(id=12, name="eggs", quantity=12, price=80, is_checked=True)],
        )
        await Household(api).checkout()

        api.update_pantry_item.assert_awaited_once_with(1, quantity=14.0)
        api.add_pantry_item.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_new_items_created(self, api):
        api.get_grocery.return_value = (
            GroceryList(id=9),
            [GroceryItem(id=12, name="Spinach", section="Vegetables", is_checked=True)],
        )
        result = await Household(api).checkout()

        api.add_pantry_item.assert_awaited_once()
        created = api.add_pantry_item.await_args.args[0]
        assert created.name == "Spinach"
        assert created.category == "Produce"
        assert result.list_id == 9

    @pytest.mark.asyncio
    async def test_nothing_checked(self, api):
        api.get_grocery.return_value = (GroceryList(id=9), [GroceryItem(id=1, name="Milk")])
        with pytest.raises(ValueError, match="no items"):
            await Household(api).checkout()
        api.log_trip.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_list_id(self, api):
        api.get_grocery.return_value = (
            None, [GroceryItem(id=1, name="Milk", is_checked=True)],
        )
        with pytest.raises(ValueError, match="list id"):
            await Household(api).checkout()


class TestUsage:
    @pytest.mark.asyncio
    async def test_partial_use(self, api):
        result = await Household(api).log_usage("2", 1)
        assert result.quantity == 2
        api.update_pantry_item.assert_awaited_once_with(2, quantity=2)
        api.delete_pantry_item.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_used_up(self, api):
        result = await Household(api).log_usage(1, 5)
        assert result.remove is True
        api.delete_pantry_item.assert_awaited_once_with(1)

    @pytest.mark.asyncio
    async def test_unknown_item(self, api):
        with pytest.raises(ValueError, match="not found"):
            await Household(api).log_usage(99, 1)


class TestListAndNotifications:
    @pytest.mark.asyncio
    async def test_add_to_list_estimates_price(self, api):
        api.estimate_price.return_value = 55.0
        item = PantryItem(id=1, name="Eggs")
        await Household(api).add_to_list(item)

        added = api.add_grocery_item.await_args.args[0]
        assert added.price == 55.0
        assert added.notes == "From Dashboard Low Stock"

    @pytest.mark.asyncio
    async def test_add_to_list_estimate_failure(self, api):
        api.estimate_price.side_effect = APIError("ai down")
        await Household(api).add_to_list(PantryItem(id=1, name="Eggs"))
        assert api.add_grocery_item.await_args.args[0].price == 0.0

    @pytest.mark.asyncio
    async def test_explicit_price_skips_estimate(self, api):
        await Household(api).add_to_list(PantryItem(id=1, name="Eggs"), price=12)
        api.estimate_price.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_mark_all_read(self, api):
        api.get_notifications.return_value = [
            Notification(id=1, is_read=False),
            Notification(id=2, is_read=True),
            Notification(id=3, is_read=False),
        ]
        assert await Household(api).mark_all_read() == 2
        api.mark_notification_read.assert_has_awaits([call(1), call(3)], any_order=True)

    def test_default_config(self, api):
        assert isinstance(Household(api).config, PantryConfig)
