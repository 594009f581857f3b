"""Meal logging service."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Protocol

from calcam.domain.meals import DailySummary, MealEntry
from calcam.domain.nutrition import NutrientProfile, NutritionAmount
from calcam.services.nutrition import aggregate, scale


class MealLogRepository(Protocol):
    """Persistence interface for meal entries."""

    def add_entry(  # noqa: PLR0913
        self,
        food_id: str,
        food_name: str,
        grams: float,
        nutrition: NutritionAmount,
        day: date,
        time: str,
        created_at: datetime,
    ) -> MealEntry:
        """Persist an entry and return it with its id."""

    def get_entry(self, entry_id: int) -> MealEntry | None:
        """Return an entry by id."""

    def update_entry(
        self, entry_id: int, grams: float, nutrition: NutritionAmount
    ) -> MealEntry:
        """Replace grams and nutrition for an entry."""

    def delete_entry(self, entry_id: int) -> bool:
        """Delete an entry, returning False if it did not exist."""

    def list_entries(self, day: date) -> list[MealEntry]:
        """Return entries logged on a day."""

    def delete_before(self, day: date) -> int:
        """Delete entries dated before ``day`` and return the count."""


@dataclass
class MealLogService:
    """Service that computes portion nutrition and persists meal entries."""

    repository: MealLogRepository

    def add_entry(
        self,
        food: NutrientProfile,
        grams: float,
        day: date | None = None,
        time: str | None = None,
        now: datetime | None = None,
    ) -> MealEntry:
        """Scale the food to ``grams`` and log it."""
        nutrition = scale(food, grams)
        current = now or datetime.now()
        return self.repository.add_entry(
            food_id=food.id,
            food_name=food.name_primary,
            grams=grams,
            nutrition=nutrition,
            day=day or current.date(),
            time=time or current.strftime("%H:%M"),
            created_at=current,
        )

    def get_entry(self, entry_id: int) -> MealEntry | None:
        """Return an entry by id."""
        return self.repository.get_entry(entry_id)

    def update_grams(
        self, entry_id: int, grams: float, food: NutrientProfile
    ) -> MealEntry | None:
        """Change an entry's grams, recomputing nutrition from ``food``."""
        if self.repository.get_entry(entry_id) is None:
            return None
        return self.repository.update_entry(entry_id, grams, scale(food, grams))

    def delete_entry(self, entry_id: int) -> bool:
        """Delete an entry."""
        return self.repository.delete_entry(entry_id)

    def entries_for(self, day: date) -> list[MealEntry]:
        """Return a day's entries ordered by time."""
        return sorted(self.repository.list_entries(day), key=lambda entry: entry.time)

    def daily_summary(self, day: date, kcal_goal: int) -> DailySummary:
        """Recompute a day's totals from its entries."""
        entries = self.entries_for(day)
        totals = aggregate(entry.nutrition for entry in entries)
        return DailySummary(
            day=day,
            totals=totals,
            entries=entries,
            kcal_goal=kcal_goal,
            remaining_kcal=kcal_goal - totals.kcal,
        )

    def clear_old_entries(
        self, days_to_keep: int = 90, today: date | None = None
    ) -> int:
        """Delete entries older than ``days_to_keep`` days."""
        cutoff = (today or date.today()) - timedelta(days=days_to_keep)
        return self.repository.delete_before(cutoff)
