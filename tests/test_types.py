"""Tests for API record parsing."""

from datetime import date

import pytest

from pantrypal.types import (
    AnalyticsReport,
    Coupon,
    GroceryItem,
    GroceryList,
    PantryItem,
    RecipeDetail,
    RecipeSummary,
    TripRecord,
    split_legacy_description,
)


class TestPantryItem:
    def test_from_dict(self):
        item = PantryItem.from_dict({
            "id": 3,
            "name": "Milk",
            "category": "Dairy",
            "quantity": "2",
            "unit": "L",
            "threshold": 1,
            "expiration_date": "2024-03-15T00:00:00+00:00",
        })
        assert item.quantity == 2.0
        assert item.threshold == 1.0
        assert item.expiration_date == date(2024, 3, 15)

    def test_defaults(self):
        item = PantryItem.from_dict({"name": "Salt"})
        assert item.category == "Others"
        assert item.quantity == 0.0
        assert item.expiration_date is None

    def test_missing_name(self):
        with pytest.raises(ValueError, match="name"):
            PantryItem.from_dict({"id": 1})

    def test_bad_quantity(self):
        with pytest.raises(ValueError, match="expected a number"):
            PantryItem.from_dict({"name": "Salt", "quantity": "lots"})

    def test_bad_date(self):
        with pytest.raises(ValueError, match="invalid date"):
            PantryItem.from_dict({"name": "Salt", "expiration_date": "soon"})

    def test_payload(self):
        item = PantryItem(id=None, name="Rice", quantity=2,
                          expiration_date=date(2024, 1, 2))
        payload = item.to_payload()
        assert "id" not in payload
        assert payload["expiration_date"] == "2024-01-02"


class TestRecipes:
    def test_legacy_image_split(self):
        r = RecipeSummary.from_dict({
            "id": 1,
            "title": "Dal",
            "description": "Comfort food|||IMAGE:https://img.example/dal.jpg",
        })
        assert r.description == "Comfort food"
        assert r.image_url == "https://img.example/dal.jpg"

    def test_explicit_image_wins(self):
        r = RecipeSummary.from_dict({
            "id": 1,
            "title": "Dal",
            "description": "x|||IMAGE:old.jpg",
            "image_url": "new.jpg",
        })
        assert r.image_url == "new.jpg"

    def test_plain_description(self):
        assert split_legacy_description("just text") == ("just text", None)

    def test_detail_ingredients(self):
        d = RecipeDetail.from_dict({
            "id": 2,
            "ingredients": [
                {"ingredient_name": "Egg", "quantity": 2, "unit": "pcs"},
                {"ingredient_name": "Flour"},
            ],
        })
        assert [i.ingredient_name for i in d.ingredients] == ["Egg", "Flour"]
        assert d.ingredients[0].quantity == "2"
        assert d.ingredients[1].quantity == ""


class TestGrocery:
    def test_null_price_is_zero(self):
        item = GroceryItem.from_dict({"id": 1, "name": "Bread", "price": None})
        assert item.price == 0.0
        assert item.quantity == 1.0
        assert item.section == "Others"

    def test_payload_omits_empty_unit(self):
        payload = GroceryItem(id=1, name="Bread", price=40).to_payload()
        assert "unit" not in payload
        assert payload["price"] == 40

    def test_list_budget(self):
        assert GroceryList.from_dict({"id": 7, "budget_limit": "500"}).budget_limit == 500

    def test_coupon(self):
        c = Coupon.from_dict({"grocery_item_name": "milk", "discount_percentage": 15})
        assert c.discount_percentage == 15.0


class TestHistory:
    def test_trip_title_from_list(self):
        trip = TripRecord.from_dict({
            "id": 1,
            "total_spent": 250.5,
            "purchased_at": "2024-03-01T10:00:00Z",
            "grocery_lists": {"title": "Weekly shop"},
        })
        assert trip.title == "Weekly shop"
        assert trip.purchased_at == date(2024, 3, 1)

    def test_trip_default_title(self):
        assert TripRecord.from_dict({"id": 1}).title == "Grocery Trip"

    def test_analytics_report(self):
        report = AnalyticsReport.from_dict({
            "goal": 1000,
            "spent": 200,
            "categories": [{"name": "Dairy", "amount": 120, "color": "#fff"}],
        })
        assert report.categories[0].amount == 120.0
