"""Domain models for meal logging."""

from dataclasses import dataclass
from datetime import date, datetime

from calcam.domain.nutrition import DailyTotals, NutritionAmount


@dataclass(frozen=True)
class MealEntry:
    """Logged portion of a food with its computed nutrition."""

    id: int
    food_id: str
    food_name: str
    grams: float
    nutrition: NutritionAmount
    day: date
    time: str
    created_at: datetime


@dataclass(frozen=True)
class DailySummary:
    """Daily totals with the entries and calorie goal context."""

    day: date
    totals: DailyTotals
    entries: list[MealEntry]
    kcal_goal: int
    remaining_kcal: int
