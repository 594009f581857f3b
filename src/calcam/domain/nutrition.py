"""Nutrition domain models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class NutrientProfile:
    """Per-100g nutrient reference record for a food."""

    id: str
    name_primary: str
    name_secondary: str
    category: str
    kcal_per_100g: float
    protein_g: float
    carb_g: float
    fat_g: float
    fiber_g: float
    tags: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class NutritionAmount:
    """Absolute nutrition for a gram quantity of a food."""

    kcal: int
    protein_g: float
    carb_g: float
    fat_g: float
    fiber_g: float


@dataclass(frozen=True)
class DailyTotals:
    """Summed nutrition across a day's entries."""

    kcal: int
    protein_g: float
    carb_g: float
    fat_g: float
    fiber_g: float
    meal_count: int
