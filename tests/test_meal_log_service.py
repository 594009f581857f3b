"""Tests for meal log service."""

from datetime import date, datetime

import pytest

from calcam.adapters.memory_repositories import InMemoryMealLogRepository
from calcam.domain.errors import InvalidQuantity
from calcam.domain.nutrition import NutrientProfile
from calcam.services.meals import MealLogService
from calcam.services.nutrition import scale

DAY = date(2026, 10, 18)


def _service() -> MealLogService:
    return MealLogService(repository=InMemoryMealLogRepository())


def test_add_entry_scales_nutrition(foods: list[NutrientProfile]) -> None:
    service = _service()

    entry = service.add_entry(foods[0], 250, day=DAY, time="12:30")

    assert entry.id == 1
    assert entry.food_name == "ข้าวผัดกุ้ง"
    assert entry.nutrition.kcal == 408
    assert entry.day == DAY


def test_add_entry_defaults_to_now(foods: list[NutrientProfile]) -> None:
    service = _service()
    now = datetime(2026, 10, 18, 7, 5)

    entry = service.add_entry(foods[1], 100, now=now)

    assert entry.day == DAY
    assert entry.time == "07:05"


def test_add_entry_rejects_invalid_grams(foods: list[NutrientProfile]) -> None:
    service = _service()

    with pytest.raises(InvalidQuantity):
        service.add_entry(foods[0], 0, day=DAY)

    assert service.entries_for(DAY) == []


def test_daily_summary_recomputes_from_entries(foods: list[NutrientProfile]) -> None:
    service = _service()
    service.add_entry(foods[1], 100, day=DAY, time="19:00")
    service.add_entry(foods[0], 250, day=DAY, time="08:00")
    service.add_entry(foods[2], 300, day=date(2026, 10, 17), time="12:00")

    summary = service.daily_summary(DAY, kcal_goal=2000)

    assert [entry.time for entry in summary.entries] == ["08:00", "19:00"]
    assert summary.totals.kcal == sum(entry.nutrition.kcal for entry in summary.entries)
    assert summary.totals.kcal == 578
    assert summary.totals.meal_count == 2
    assert summary.remaining_kcal == 2000 - 578


def test_update_grams_recomputes_from_profile(foods: list[NutrientProfile]) -> None:
    service = _service()
    entry = service.add_entry(foods[0], 100, day=DAY, time="12:00")

    updated = service.update_grams(entry.id, 250, foods[0])

    assert updated is not None
    assert updated.grams == 250
    assert updated.nutrition == scale(foods[0], 250)
    assert service.get_entry(entry.id) == updated
    assert service.update_grams(999, 100, foods[0]) is None


def test_delete_and_clear_old_entries(foods: list[NutrientProfile]) -> None:
    service = _service()
    kept = service.add_entry(foods[0], 100, day=DAY, time="12:00")
    service.add_entry(foods[0], 100, day=date(2026, 6, 1), time="12:00")
    removed = service.add_entry(foods[1], 100, day=DAY, time="13:00")

    assert service.delete_entry(removed.id)
    assert not service.delete_entry(removed.id)
    assert service.clear_old_entries(days_to_keep=90, today=DAY) == 1
    assert [entry.id for entry in service.entries_for(DAY)] == [kept.id]
