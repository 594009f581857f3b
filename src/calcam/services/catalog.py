"""Lookup over the static nutrient dataset."""

from dataclasses import dataclass
from typing import Protocol

from calcam.domain.nutrition import NutrientProfile


class FoodRepository(Protocol):
    """Read-only access to nutrient profiles."""

    def list_foods(self) -> list[NutrientProfile]:
        """Return all foods in dataset order."""

    def get_food(self, food_id: str) -> NutrientProfile | None:
        """Return a food by id, if present."""


@dataclass
class FoodCatalogService:
    """Search and lookup for nutrient profiles."""

    repository: FoodRepository

    def search(self, query: str | None, limit: int = 20) -> list[NutrientProfile]:
        """Substring search over names, tags and category."""
        foods = self.repository.list_foods()
        term = (query or "").strip().lower()
        if not term:
            return foods[:limit]
        return [food for food in foods if _matches(food, term)][:limit]

    def get(self, food_id: str) -> NutrientProfile | None:
        """Return a food by id."""
        return self.repository.get_food(food_id)

    def by_category(self, category: str) -> list[NutrientProfile]:
        """Return foods in a category."""
        foods = self.repository.list_foods()
        return [food for food in foods if food.category == category]


def _matches(food: NutrientProfile, term: str) -> bool:
    return (
        term in food.name_primary.lower()
        or term in food.name_secondary.lower()
        or any(term in tag.lower() for tag in food.tags)
        or term in food.category.lower()
    )
