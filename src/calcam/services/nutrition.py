"""Scaling per-100g profiles to portions and summing daily totals."""

import math
from collections.abc import Iterable

from calcam.domain.errors import InvalidQuantity
from calcam.domain.nutrition import DailyTotals, NutrientProfile, NutritionAmount
from calcam.services.rounding import round_half_up, round_int


def scale(profile: NutrientProfile, grams: float) -> NutritionAmount:
    """Return absolute nutrition for ``grams`` of ``profile``."""
    if not grams > 0 or math.isinf(grams):
        raise InvalidQuantity("Grams must be greater than zero", grams=grams)
    multiplier = grams / 100.0
    return NutritionAmount(
        kcal=round_int(profile.kcal_per_100g * multiplier),
        protein_g=round_half_up(profile.protein_g * multiplier, 1),
        carb_g=round_half_up(profile.carb_g * multiplier, 1),
        fat_g=round_half_up(profile.fat_g * multiplier, 1),
        fiber_g=round_half_up(profile.fiber_g * multiplier, 1),
    )


def aggregate(amounts: Iterable[NutritionAmount]) -> DailyTotals:
    """Sum amounts into daily totals; the result is independent of order."""
    items = list(amounts)
    return DailyTotals(
        kcal=sum(item.kcal for item in items),
        protein_g=round_half_up(math.fsum(item.protein_g for item in items), 1),
        carb_g=round_half_up(math.fsum(item.carb_g for item in items), 1),
        fat_g=round_half_up(math.fsum(item.fat_g for item in items), 1),
        fiber_g=round_half_up(math.fsum(item.fiber_g for item in items), 1),
        meal_count=len(items),
    )
