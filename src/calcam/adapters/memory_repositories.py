"""In-process repositories for foods, meal entries and the profile."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime

from calcam.domain.energy import ProfileSummary
from calcam.domain.meals import MealEntry
from calcam.domain.nutrition import NutrientProfile, NutritionAmount
from calcam.services.catalog import FoodRepository
from calcam.services.meals import MealLogRepository
from calcam.services.profile import ProfileRepository


@dataclass
class InMemoryFoodRepository(FoodRepository):
    """Food repository over a preloaded list of profiles."""

    foods: list[NutrientProfile] = field(default_factory=list)

    def list_foods(self) -> list[NutrientProfile]:
        """Return all foods."""
        return list(self.foods)

    def get_food(self, food_id: str) -> NutrientProfile | None:
        """Return a food by id."""
        for food in self.foods:
            if food.id == food_id:
                return food
        return None


@dataclass
class InMemoryMealLogRepository(MealLogRepository):
    """Meal entries kept in a dict keyed by auto-increment id."""

    entries: dict[int, MealEntry] = field(default_factory=dict)
    next_id: int = 1

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
        """Store an entry under the next id."""
        entry = MealEntry(
            id=self.next_id,
            food_id=food_id,
            food_name=food_name,
            grams=grams,
            nutrition=nutrition,
            day=day,
            time=time,
            created_at=created_at,
        )
        self.entries[entry.id] = entry
        self.next_id += 1
        return entry

    def get_entry(self, entry_id: int) -> MealEntry | None:
        """Return an entry by id."""
        return self.entries.get(entry_id)

    def update_entry(
        self, entry_id: int, grams: float, nutrition: NutritionAmount
    ) -> MealEntry:
        """Replace grams and nutrition on an entry."""
        entry = replace(self.entries[entry_id], grams=grams, nutrition=nutrition)
        self.entries[entry_id] = entry
        return entry

    def delete_entry(self, entry_id: int) -> bool:
        """Remove an entry."""
        return self.entries.pop(entry_id, None) is not None

    def list_entries(self, day: date) -> list[MealEntry]:
        """Return entries for a day."""
        return [entry for entry in self.entries.values() if entry.day == day]

    def delete_before(self, day: date) -> int:
        """Remove entries dated before ``day``."""
        stale = [key for key, entry in self.entries.items() if entry.day < day]
        for entry_id in stale:
            del self.entries[entry_id]
        return len(stale)


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """Holds at most one current profile."""

    profile: ProfileSummary | None = None

    def get_profile(self) -> ProfileSummary | None:
        """Return the current profile."""
        return self.profile

    def replace_profile(self, profile: ProfileSummary) -> None:
        """Replace the current profile."""
        self.profile = profile
