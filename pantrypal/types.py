"""Typed records for the household pantry API responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

CATEGORIES: tuple[str, ...] = (
    "Produce",
    "Dairy",
    "Grains",
    "Canned Goods",
    "Frozen",
    "Others",
)

# Older recipe rows smuggle the image URL inside the description.
_IMAGE_DELIMITER = "|||IMAGE:"


def _require(data: dict, key: str, kind: str) -> Any:
    if key not in data or data[key] is None:
        raise ValueError(f"{kind}: missing required field {key!r}")
    return data[key]


def _number(value: Any, default: float = 0.0) -> float:
    """Coerce a JSON number (or numeric string) to float.

    ``None`` and empty strings map to *default*.
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ValueError(f"expected a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"expected a number, got {value!r}") from None


def _parse_date(value: Any) -> date | None:
    """Parse the date part of an ISO date/datetime string."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise ValueError(f"invalid date: {value!r}") from None


def split_legacy_description(description: str) -> tuple[str, str | None]:
    """Split ``"text|||IMAGE:url"`` into ``("text", "url")``."""
    text, sep, image = description.partition(_IMAGE_DELIMITER)
    if not sep:
        return description, None
    return text, image.strip() or None


@dataclass
class PantryItem:
    """A tracked household inventory unit."""

    id: Any
    name: str
    category: str = "Others"
    quantity: float = 0.0
    unit: str = ""
    threshold: float = 0.0
    expiration_date: date | None = None

    @classmethod
    def from_dict(cls, data: dict) -> PantryItem:
        return cls(
            id=data.get("id"),
            name=str(_require(data, "name", "PantryItem")),
            category=data.get("category") or "Others",
            quantity=_number(data.get("quantity")),
            unit=data.get("unit") or "",
            threshold=_number(data.get("threshold")),
            expiration_date=_parse_date(data.get("expiration_date")),
        )

    def to_payload(self) -> dict:
        payload = {
            "name": self.name,
            "category": self.category,
            "quantity": self.quantity,
            "unit": self.unit,
            "threshold": self.threshold,
            "expiration_date": (
                self.expiration_date.isoformat() if self.expiration_date else None
            ),
        }
        if self.id is not None:
            payload["id"] = self.id
        return payload


@dataclass
class RecipeIngredient:
    ingredient_name: str
    quantity: str = ""
    unit: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> RecipeIngredient:
        quantity = data.get("quantity")
        return cls(
            ingredient_name=str(_require(data, "ingredient_name", "RecipeIngredient")),
            quantity="" if quantity is None else str(quantity),
            unit=data.get("unit") or "",
        )


@dataclass
class RecipeSummary:
    """Recipe listing entry used for browsing and filtering."""

    id: Any
    title: str
    description: str = ""
    image_url: str | None = None
    dietary_tags: list[str] = field(default_factory=list)
    calories: float | None = None
    protein: float | None = None

    @classmethod
    def from_dict(cls, data: dict) -> RecipeSummary:
        description, legacy_image = split_legacy_description(
            data.get("description") or ""
        )
        calories = data.get("calories")
        protein = data.get("protein")
        return cls(
            id=data.get("id"),
            title=str(_require(data, "title", "RecipeSummary")),
            description=description,
            image_url=data.get("image_url") or legacy_image,
            dietary_tags=list(data.get("dietary_tags") or []),
            calories=None if calories is None else _number(calories),
            protein=None if protein is None else _number(protein),
        )


@dataclass
class RecipeDetail:
    """A recipe with its ordered ingredient list."""

    id: Any
    title: str = ""
    ingredients: list[RecipeIngredient] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> RecipeDetail:
        return cls(
            id=data.get("id"),
            title=data.get("title") or "",
            ingredients=[
                RecipeIngredient.from_dict(i) for i in data.get("ingredients") or []
            ],
        )


@dataclass
class GroceryItem:
    """An entry on the shared shopping list."""

    id: Any
    name: str
    quantity: float = 1.0
    unit: str = ""
    price: float = 0.0
    section: str = "Others"
    is_checked: bool = False
    list_id: Any = None
    coupon: bool = False
    notes: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> GroceryItem:
        return cls(
            id=data.get("id"),
            name=str(_require(data, "name", "GroceryItem")),
            quantity=_number(data.get("quantity"), 1.0),
            unit=data.get("unit") or "",
            price=_number(data.get("price")),
            section=data.get("section") or "Others",
            is_checked=bool(data.get("is_checked", False)),
            list_id=data.get("list_id"),
            coupon=bool(data.get("coupon", False)),
            notes=data.get("notes") or "",
        )

    def to_payload(self) -> dict:
        payload = {
            "name": self.name,
            "quantity": self.quantity,
            "price": self.price,
            "coupon": self.coupon,
            "notes": self.notes,
        }
        if self.unit:
            payload["unit"] = self.unit
        return payload


@dataclass
class GroceryList:
    id: Any
    title: str = ""
    budget_limit: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> GroceryList:
        return cls(
            id=data.get("id"),
            title=data.get("title") or "",
            budget_limit=_number(data.get("budget_limit")),
        )


@dataclass
class Coupon:
    """A percentage discount keyed by a partial item name."""

    grocery_item_name: str
    discount_percentage: float
    store_name: str = ""
    discount_details: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> Coupon:
        return cls(
            grocery_item_name=data.get("grocery_item_name") or "",
            discount_percentage=_number(data.get("discount_percentage")),
            store_name=data.get("store_name") or "",
            discount_details=data.get("discount_details") or "",
        )


@dataclass
class BudgetState:
    budget_limit: float = 0.0  # 0 = unlimited

    @property
    def unlimited(self) -> bool:
        return self.budget_limit <= 0


@dataclass
class Profile:
    full_name: str = ""
    dietary_preferences: list[str] = field(default_factory=list)
    email: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> Profile:
        return cls(
            full_name=data.get("full_name") or "",
            dietary_preferences=list(data.get("dietary_preferences") or []),
            email=data.get("email") or "",
        )


@dataclass
class TripRecord:
    """A logged shopping trip."""

    id: Any
    list_id: Any = None
    total_spent: float = 0.0
    purchased_at: date | None = None
    title: str = "Grocery Trip"

    @classmethod
    def from_dict(cls, data: dict) -> TripRecord:
        grocery_list = data.get("grocery_lists") or {}
        return cls(
            id=data.get("id"),
            list_id=data.get("list_id"),
            total_spent=_number(data.get("total_spent")),
            purchased_at=_parse_date(data.get("purchased_at")),
            title=grocery_list.get("title") or "Grocery Trip",
        )


@dataclass
class Notification:
    id: Any
    message: str = ""
    is_read: bool = False
    created_at: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> Notification:
        return cls(
            id=data.get("id"),
            message=data.get("message") or "",
            is_read=bool(data.get("is_read", False)),
            created_at=data.get("created_at") or "",
        )


@dataclass
class Member:
    email: str
    role: str = "member"
    status: str = "pending"

    @classmethod
    def from_dict(cls, data: dict) -> Member:
        return cls(
            email=str(_require(data, "email", "Member")),
            role=data.get("role") or "member",
            status=data.get("status") or "pending",
        )


@dataclass
class InviteLink:
    token: str
    is_used: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> InviteLink:
        return cls(
            token=str(_require(data, "token", "InviteLink")),
            is_used=bool(data.get("is_used", False)),
        )


@dataclass
class SpendingCategory:
    name: str
    amount: float = 0.0
    color: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> SpendingCategory:
        return cls(
            name=str(_require(data, "name", "SpendingCategory")),
            amount=_number(data.get("amount")),
            color=data.get("color") or "",
        )


@dataclass
class AnalyticsReport:
    goal: float = 0.0
    spent: float = 0.0
    categories: list[SpendingCategory] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> AnalyticsReport:
        return cls(
            goal=_number(data.get("goal")),
            spent=_number(data.get("spent")),
            categories=[
                SpendingCategory.from_dict(c) for c in data.get("categories") or []
            ],
        )
