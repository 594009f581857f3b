"""Pydantic models for API request payloads."""

from datetime import date

from pydantic import BaseModel

from calcam.domain.energy import (
    ActivityLevel,
    BiometricProfile,
    EnergyGoal,
    Gender,
    GoalKind,
    GoalRate,
)
from calcam.domain.errors import InvalidBiometric


class ScaleRequest(BaseModel):
    """Portion of a catalog food to scale."""

    food_id: str
    grams: float


class EntryCreate(BaseModel):
    """New meal entry."""

    food_id: str
    grams: float
    day: date | None = None
    time: str | None = None


class EntryUpdate(BaseModel):
    """Gram change for an existing entry."""

    grams: float


class BmiRequest(BaseModel):
    """Weight and height for BMI lookups."""

    weight_kg: float
    height_cm: float


class ProfileRequest(BaseModel):
    """Biometrics and weight goal for the current profile."""

    gender: Gender
    age_years: int
    weight_kg: float
    height_cm: float
    activity_level: str | float = "sedentary"
    goal: GoalKind = GoalKind.MAINTAIN
    rate: GoalRate = GoalRate.MODERATE

    def to_biometrics(self) -> BiometricProfile:
        """Convert to a biometric profile, resolving the activity level."""
        return BiometricProfile(
            gender=self.gender,
            age_years=self.age_years,
            weight_kg=self.weight_kg,
            height_cm=self.height_cm,
            activity_factor=parse_activity_level(self.activity_level),
        )

    def to_goal(self) -> EnergyGoal:
        """Return the energy goal."""
        return EnergyGoal(kind=self.goal, rate=self.rate)


def parse_activity_level(raw: str | float) -> ActivityLevel:
    """Resolve an activity level by name (``very_active``) or multiplier."""
    try:
        if isinstance(raw, str):
            return ActivityLevel[raw.strip().upper()]
        return ActivityLevel(raw)
    except (KeyError, ValueError) as exc:
        raise InvalidBiometric(
            "Unknown activity level", field="activity_factor", value=raw
        ) from exc
