"""Energy expenditure, BMI and calorie-target calculations."""

from dataclasses import dataclass

from calcam.domain.energy import (
    ActivityLevel,
    BiometricProfile,
    BmiResult,
    EnergyResult,
    Gender,
    GoalCalories,
    GoalKind,
    GoalRate,
    MacroSplit,
    MacroTarget,
    WeightRange,
)
from calcam.domain.errors import InvalidBiometric
from calcam.services.rounding import round_half_up, round_int

MIN_HEALTHY_BMI = 18.5
MAX_HEALTHY_BMI = 24.9
PROTEIN_G_PER_KG = 1.9
FAT_ENERGY_PERCENTAGE = 25
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARB = 4
KCAL_PER_G_FAT = 9

_BMI_CATEGORIES = (
    (18.5, "underweight"),
    (25.0, "normal"),
    (30.0, "overweight"),
)

# (kcal/day adjustment, kg/week, description); literal table, not derived
_GOAL_TABLE: dict[tuple[GoalKind, GoalRate], tuple[int, float, str]] = {
    (GoalKind.LOSE, GoalRate.SLOW): (-250, -0.25, "Slow weight loss (0.25 kg/week)"),
    (GoalKind.LOSE, GoalRate.MODERATE): (
        -500,
        -0.5,
        "Moderate weight loss (0.5 kg/week)",
    ),
    (GoalKind.LOSE, GoalRate.FAST): (-750, -0.75, "Fast weight loss (0.75 kg/week)"),
    (GoalKind.GAIN, GoalRate.SLOW): (250, 0.25, "Slow weight gain (0.25 kg/week)"),
    (GoalKind.GAIN, GoalRate.MODERATE): (
        500,
        0.5,
        "Moderate weight gain (0.5 kg/week)",
    ),
    (GoalKind.GAIN, GoalRate.FAST): (750, 0.75, "Fast weight gain (0.75 kg/week)"),
}
_MAINTAIN = (0, 0.0, "Maintain current weight")


@dataclass(frozen=True)
class BiometricLimits:
    """Sanity upper bounds for biometric input; not physiological limits."""

    max_age_years: int = 120
    max_weight_kg: float = 500
    max_height_cm: float = 300


DEFAULT_LIMITS = BiometricLimits()


def compute_energy(
    profile: BiometricProfile, limits: BiometricLimits = DEFAULT_LIMITS
) -> EnergyResult:
    """Compute BMR (Mifflin-St Jeor) and TDEE, both rounded to integers.

    BMR is rounded first and TDEE is the rounded BMR times the activity
    factor, rounded again.
    """
    validate_biometrics(profile, limits)
    rounded_bmr = round_int(_mifflin_st_jeor(profile))
    tdee = round_int(rounded_bmr * float(profile.activity_factor))
    return EnergyResult(bmr=rounded_bmr, tdee=tdee)


def daily_expenditure(
    profile: BiometricProfile, limits: BiometricLimits = DEFAULT_LIMITS
) -> float:
    """Unrounded BMR times the activity factor, used for the macro split."""
    validate_biometrics(profile, limits)
    return _mifflin_st_jeor(profile) * float(profile.activity_factor)


def _mifflin_st_jeor(profile: BiometricProfile) -> float:
    offset = 5 if Gender(profile.gender) is Gender.MALE else -161
    return (
        10 * profile.weight_kg
        + 6.25 * profile.height_cm
        - 5 * profile.age_years
        + offset
    )


def validate_biometrics(
    profile: BiometricProfile, limits: BiometricLimits = DEFAULT_LIMITS
) -> None:
    """Raise ``InvalidBiometric`` for out-of-range profile values."""
    for name in ("age_years", "weight_kg", "height_cm"):
        value = getattr(profile, name)
        if not value > 0:
            raise InvalidBiometric(
                f"{name} must be greater than zero", field=name, value=value
            )
    if profile.age_years > limits.max_age_years:
        raise InvalidBiometric(
            f"age_years must not exceed {limits.max_age_years}",
            field="age_years",
            value=profile.age_years,
        )
    if profile.weight_kg > limits.max_weight_kg:
        raise InvalidBiometric(
            f"weight_kg must not exceed {limits.max_weight_kg}",
            field="weight_kg",
            value=profile.weight_kg,
        )
    if profile.height_cm > limits.max_height_cm:
        raise InvalidBiometric(
            f"height_cm must not exceed {limits.max_height_cm}",
            field="height_cm",
            value=profile.height_cm,
        )
    try:
        Gender(profile.gender)
    except ValueError as exc:
        raise InvalidBiometric(
            "gender must be 'male' or 'female'", field="gender", value=profile.gender
        ) from exc
    try:
        ActivityLevel(profile.activity_factor)
    except ValueError as exc:
        raise InvalidBiometric(
            "activity_factor must be one of the fixed activity levels",
            field="activity_factor",
            value=profile.activity_factor,
        ) from exc


def compute_bmi(weight_kg: float, height_cm: float) -> BmiResult:
    """Return BMI rounded to one decimal and its category.

    The category is taken from the unrounded value, so a BMI of 18.48 is
    reported as 18.5 but classified as underweight.
    """
    _require_positive("weight_kg", weight_kg)
    _require_positive("height_cm", height_cm)
    height_m = height_cm / 100
    raw = weight_kg / (height_m * height_m)
    return BmiResult(bmi=round_half_up(raw, 1), category=bmi_category(raw))


def bmi_category(bmi: float) -> str:
    """Classify a BMI value."""
    for upper, category in _BMI_CATEGORIES:
        if bmi < upper:
            return category
    return "obese"


def ideal_weight_range(height_cm: float) -> WeightRange:
    """Weight range for BMI 18.5-24.9 at ``height_cm``, rounded to kg."""
    _require_positive("height_cm", height_cm)
    height_m = height_cm / 100
    return WeightRange(
        min=round_int(MIN_HEALTHY_BMI * height_m * height_m),
        max=round_int(MAX_HEALTHY_BMI * height_m * height_m),
    )


def goal_calories(
    tdee: float, goal: GoalKind | str, rate: GoalRate | str = GoalRate.MODERATE
) -> GoalCalories:
    """Adjust TDEE by the fixed goal table; rate is ignored for maintain."""
    kind = GoalKind(goal)
    if kind is GoalKind.MAINTAIN:
        adjustment, weekly_change, description = _MAINTAIN
    else:
        adjustment, weekly_change, description = _GOAL_TABLE[(kind, GoalRate(rate))]
    return GoalCalories(
        daily_kcal=round_int(tdee + adjustment),
        weekly_change_kg=weekly_change,
        description=description,
    )


def macro_split(tdee: float, weight_kg: float) -> MacroSplit:
    """Default macro split: 1.9 g/kg protein, 25% fat, carbs take the rest.

    Percentages are rounded independently and need not sum to 100.
    """
    _require_positive("tdee", tdee)
    _require_positive("weight_kg", weight_kg)
    protein_g = round_int(weight_kg * PROTEIN_G_PER_KG)
    protein_kcal = protein_g * KCAL_PER_G_PROTEIN
    fat_kcal = round_int(tdee * FAT_ENERGY_PERCENTAGE / 100)
    carb_kcal = round_int(tdee - protein_kcal - fat_kcal)
    return MacroSplit(
        protein=MacroTarget(
            grams=protein_g,
            kcal=protein_kcal,
            percentage=round_int(protein_kcal / tdee * 100),
        ),
        carb=MacroTarget(
            grams=round_int(carb_kcal / KCAL_PER_G_CARB),
            kcal=carb_kcal,
            percentage=round_int(carb_kcal / tdee * 100),
        ),
        fat=MacroTarget(
            grams=round_int(fat_kcal / KCAL_PER_G_FAT),
            kcal=fat_kcal,
            percentage=FAT_ENERGY_PERCENTAGE,
        ),
    )


def _require_positive(name: str, value: float) -> None:
    if not value > 0:
        raise InvalidBiometric(
            f"{name} must be greater than zero", field=name, value=value
        )
