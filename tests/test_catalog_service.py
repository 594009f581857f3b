"""Tests for the food catalog service."""

from calcam.adapters.memory_repositories import InMemoryFoodRepository
from calcam.domain.nutrition import NutrientProfile
from calcam.services.catalog import FoodCatalogService


def test_search_matches_names_tags_and_category(foods: list[NutrientProfile]) -> None:
    service = FoodCatalogService(InMemoryFoodRepository(foods))

    assert [f.id for f in service.search("SHRIMP")] == ["th_001", "th_003"]
    assert [f.id for f in service.search("ผัดไทย")] == ["th_002"]
    assert [f.id for f in service.search("soup")] == ["th_003"]
    assert [f.id for f in service.search("peanut")] == ["th_002"]


def test_search_empty_query_returns_first_foods(foods: list[NutrientProfile]) -> None:
    service = FoodCatalogService(InMemoryFoodRepository(foods))

    assert [f.id for f in service.search("  ", limit=2)] == ["th_001", "th_002"]
    assert service.search("no-such-food") == []


def test_get_and_by_category(foods: list[NutrientProfile]) -> None:
    service = FoodCatalogService(InMemoryFoodRepository(foods))

    assert service.get("th_002").name_secondary == "Pad thai"
    assert service.get("missing") is None
    assert [f.id for f in service.by_category("noodle")] == ["th_002"]
