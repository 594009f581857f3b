"""Tests for portion scaling and daily aggregation."""

import itertools

import pytest

from calcam.domain.errors import InvalidQuantity
from calcam.domain.nutrition import NutrientProfile, NutritionAmount
from calcam.services.nutrition import aggregate, scale
from calcam.services.rounding import round_int


def test_scale_computes_portion(foods: list[NutrientProfile]) -> None:
    fried_rice = foods[0]

    amount = scale(fried_rice, 250)

    assert amount == NutritionAmount(
        kcal=408, protein_g=17.0, carb_g=61.3, fat_g=10.5, fiber_g=2.0
    )


@pytest.mark.parametrize("grams", [1, 37.5, 100, 333, 1250])
def test_scale_kcal_matches_formula(foods: list[NutrientProfile], grams: float) -> None:
    for food in foods:
        assert scale(food, grams).kcal == round_int(food.kcal_per_100g * grams / 100)


@pytest.mark.parametrize("grams", [120, 75.5, 410])
def test_scale_recovers_grams_from_kcal(foods: list[NutrientProfile], grams: float) -> None:
    food = foods[1]

    amount = scale(food, grams)
    recovered = amount.kcal / (food.kcal_per_100g / 100)

    assert recovered == pytest.approx(grams, abs=100 / food.kcal_per_100g)


@pytest.mark.parametrize("grams", [0, -10, float("nan")])
def test_scale_rejects_non_positive_grams(
    foods: list[NutrientProfile], grams: float
) -> None:
    with pytest.raises(InvalidQuantity):
        scale(foods[0], grams)


def test_aggregate_empty_is_zero() -> None:
    totals = aggregate([])

    assert totals.kcal == 0
    assert totals.protein_g == 0
    assert totals.fiber_g == 0
    assert totals.meal_count == 0


def test_aggregate_sums_and_rounds() -> None:
    amounts = [
        NutritionAmount(kcal=408, protein_g=17.0, carb_g=61.3, fat_g=10.5, fiber_g=2.0),
        NutritionAmount(kcal=170, protein_g=7.4, carb_g=25.1, fat_g=4.6, fiber_g=1.1),
        NutritionAmount(kcal=68, protein_g=7.8, carb_g=4.4, fat_g=2.3, fiber_g=0.6),
    ]

    totals = aggregate(amounts)

    assert totals.kcal == 646
    assert totals.protein_g == 32.2
    assert totals.carb_g == 90.8
    assert totals.fat_g == 17.4
    assert totals.fiber_g == 3.7
    assert totals.meal_count == 3


def test_aggregate_is_order_independent() -> None:
    amounts = [
        NutritionAmount(kcal=101, protein_g=0.1, carb_g=0.2, fat_g=0.3, fiber_g=0.7),
        NutritionAmount(kcal=55, protein_g=1.1, carb_g=2.2, fat_g=3.3, fiber_g=0.1),
        NutritionAmount(kcal=3, protein_g=10.7, carb_g=0.9, fat_g=0.6, fiber_g=0.2),
        NutritionAmount(kcal=999, protein_g=4.4, carb_g=7.7, fat_g=0.1, fiber_g=0.3),
    ]

    results = {aggregate(list(order)) for order in itertools.permutations(amounts)}

    assert len(results) == 1
    assert aggregate(amounts) == aggregate(amounts)
