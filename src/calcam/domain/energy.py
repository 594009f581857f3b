"""Domain models for biometrics and energy targets."""

from dataclasses import dataclass
from enum import Enum


class Gender(str, Enum):
    """Biological sex used by the BMR equation."""

    MALE = "male"
    FEMALE = "female"


class ActivityLevel(float, Enum):
    """Fixed activity multipliers applied to BMR."""

    SEDENTARY = 1.2
    LIGHT = 1.375
    MODERATE = 1.55
    ACTIVE = 1.725
    VERY_ACTIVE = 1.9

    @property
    def description(self) -> str:
        """Human-readable description of the activity level."""
        return _ACTIVITY_DESCRIPTIONS[self]


_ACTIVITY_DESCRIPTIONS = {
    ActivityLevel.SEDENTARY: "Desk job, little or no exercise",
    ActivityLevel.LIGHT: "Light exercise 1-3 days/week",
    ActivityLevel.MODERATE: "Moderate exercise 3-5 days/week",
    ActivityLevel.ACTIVE: "Hard exercise 6-7 days/week",
    ActivityLevel.VERY_ACTIVE: "Training twice a day or physical job",
}


class GoalKind(str, Enum):
    """Direction of the weight goal."""

    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


class GoalRate(str, Enum):
    """Pace of the weight goal."""

    SLOW = "slow"
    MODERATE = "moderate"
    FAST = "fast"


@dataclass(frozen=True)
class BiometricProfile:
    """User-supplied body metrics."""

    gender: Gender
    age_years: int
    weight_kg: float
    height_cm: float
    activity_factor: ActivityLevel


@dataclass(frozen=True)
class EnergyGoal:
    """Weight goal used to adjust the daily calorie target."""

    kind: GoalKind
    rate: GoalRate = GoalRate.MODERATE


@dataclass(frozen=True)
class EnergyResult:
    """Basal and total daily energy expenditure in kcal."""

    bmr: int
    tdee: int


@dataclass(frozen=True)
class BmiResult:
    """Body-mass index and its category."""

    bmi: float
    category: str


@dataclass(frozen=True)
class WeightRange:
    """Healthy weight range in kg."""

    min: int
    max: int


@dataclass(frozen=True)
class GoalCalories:
    """Goal-adjusted daily calorie target."""

    daily_kcal: int
    weekly_change_kg: float
    description: str


@dataclass(frozen=True)
class MacroTarget:
    """Daily target for one macronutrient."""

    grams: int
    kcal: int
    percentage: int


@dataclass(frozen=True)
class MacroSplit:
    """Default protein/carb/fat split for a TDEE."""

    protein: MacroTarget
    carb: MacroTarget
    fat: MacroTarget


@dataclass(frozen=True)
class ProfileSummary:
    """Biometrics with every derived figure recomputed from them."""

    biometrics: BiometricProfile
    goal: EnergyGoal
    energy: EnergyResult
    macros: MacroSplit
    bmi: BmiResult
    ideal_weight: WeightRange
    goal_calories: GoalCalories
    activity_description: str
