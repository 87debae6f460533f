"""Recipe-to-pantry matching and recipe list filters."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from ..types import PantryItem, RecipeDetail, RecipeSummary
from .matching import matches, matches_any, normalize

DIET_FILTERS = ("All", "Veg", "NonVeg")

_VEGETARIAN_TAG = "Vegetarian"


@dataclass
class RankedRecipe:
    """A recipe scored against the current pantry snapshot."""

    id: Any
    title: str
    matched_count: int
    total_required: int
    match_percentage: int
    matched_ingredients: list[str] = field(default_factory=list)
    missing_ingredients: list[str] = field(default_factory=list)

    @property
    def tier(self) -> str:
        return match_tier(self.match_percentage)


def match_tier(percentage: int) -> str:
    """Bucket a match percentage for display."""
    if percentage >= 100:
        return "full"
    if percentage > 80:
        return "high"
    if percentage > 40:
        return "medium"
    return "low"


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (12.5 -> 13)."""
    return math.floor(value + 0.5)


def score_recipe(recipe: RecipeDetail, pantry_names: list[str]) -> RankedRecipe:
    """Score a single recipe against a list of pantry item names.

    An ingredient counts once no matter how many pantry items satisfy it.
    A recipe with no ingredients scores 0%.
    """
    matched: list[str] = []
    missing: list[str] = []
    for ing in recipe.ingredients:
        if matches_any(ing.ingredient_name, pantry_names):
            matched.append(ing.ingredient_name)
        else:
            missing.append(ing.ingredient_name)

    total = len(recipe.ingredients)
    percentage = round_half_up(100 * len(matched) / total) if total > 0 else 0
    return RankedRecipe(
        id=recipe.id,
        title=recipe.title,
        matched_count=len(matched),
        total_required=total,
        match_percentage=percentage,
        matched_ingredients=matched,
        missing_ingredients=missing,
    )


def match_recipes(
    recipes: list[RecipeDetail],
    pantry: list[PantryItem],
) -> list[RankedRecipe]:
    """Rank recipes by how much of each one the pantry already covers.

    Sorted best-first; equal percentages keep their input order.
    """
    pantry_names = [item.name for item in pantry]
    ranked = [score_recipe(r, pantry_names) for r in recipes]
    # list.sort is stable
    ranked.sort(key=lambda r: r.match_percentage, reverse=True)
    return ranked


def filter_recipes(
    recipes: list[RecipeSummary],
    query: str = "",
    diet: str = "All",
) -> list[RecipeSummary]:
    """Apply the search box and the Veg / Non-Veg toggle.

    A blank query keeps every recipe.
    """
    if diet not in DIET_FILTERS:
        raise ValueError(
            f"unknown diet filter: {diet!r} (choose from {', '.join(DIET_FILTERS)})"
        )

    searching = bool(normalize(query))
    result: list[RecipeSummary] = []
    for recipe in recipes:
        if searching and not (
            matches(query, recipe.title) or matches(query, recipe.description)
        ):
            continue
        is_veg = _VEGETARIAN_TAG in recipe.dietary_tags
        if diet == "Veg" and not is_veg:
            continue
        if diet == "NonVeg" and is_veg:
            continue
        result.append(recipe)
    return result
