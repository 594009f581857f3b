"""Current user profile with derived energy targets."""

from dataclasses import dataclass
from typing import Protocol

from calcam.domain.energy import (
    ActivityLevel,
    BiometricProfile,
    EnergyGoal,
    ProfileSummary,
)
from calcam.services.energy import (
    DEFAULT_LIMITS,
    BiometricLimits,
    compute_bmi,
    compute_energy,
    daily_expenditure,
    goal_calories,
    ideal_weight_range,
    macro_split,
)


class ProfileRepository(Protocol):
    """Persistence interface for the single current profile."""

    def get_profile(self) -> ProfileSummary | None:
        """Return the current profile, if any."""

    def replace_profile(self, profile: ProfileSummary) -> None:
        """Replace the current profile."""


@dataclass
class ProfileService:
    """Recomputes derived figures whenever biometrics change."""

    repository: ProfileRepository
    limits: BiometricLimits = DEFAULT_LIMITS
    default_daily_kcal_goal: int = 2000

    def summarize(
        self, biometrics: BiometricProfile, goal: EnergyGoal
    ) -> ProfileSummary:
        """Compute every derived figure without persisting."""
        energy = compute_energy(biometrics, self.limits)
        return ProfileSummary(
            biometrics=biometrics,
            goal=goal,
            energy=energy,
            macros=macro_split(
                daily_expenditure(biometrics, self.limits), biometrics.weight_kg
            ),
            bmi=compute_bmi(biometrics.weight_kg, biometrics.height_cm),
            ideal_weight=ideal_weight_range(biometrics.height_cm),
            goal_calories=goal_calories(energy.tdee, goal.kind, goal.rate),
            activity_description=ActivityLevel(
                biometrics.activity_factor
            ).description,
        )

    def save(self, biometrics: BiometricProfile, goal: EnergyGoal) -> ProfileSummary:
        """Recompute the profile and make it current."""
        summary = self.summarize(biometrics, goal)
        self.repository.replace_profile(summary)
        return summary

    def current(self) -> ProfileSummary | None:
        """Return the current profile."""
        return self.repository.get_profile()

    def daily_kcal_goal(self) -> int:
        """Return the goal-adjusted target or the configured default."""
        profile = self.repository.get_profile()
        if profile is None:
            return self.default_daily_kcal_goal
        return profile.goal_calories.daily_kcal
