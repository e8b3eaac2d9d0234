"""Nutrition target calculation."""

import math

from nutrilog.domain.profile import Profile, Targets

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very": 1.9,
}
GOAL_OFFSETS = {"lose": -500, "maintain": 0, "gain": 500}

# Share of calories and kcal per gram for each macro.
PROTEIN_SHARE, PROTEIN_KCAL = 0.30, 4
CARBS_SHARE, CARBS_KCAL = 0.40, 4
FAT_SHARE, FAT_KCAL = 0.30, 9


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves going up."""
    return math.floor(value + 0.5)


def compute_targets(profile: Profile) -> Profile:
    """Return the profile with targets derived from its body metrics.

    Uses the Mifflin-St Jeor BMR scaled by the activity multiplier and shifted
    by the goal offset. Profiles missing any input are returned unchanged.
    """
    if not (
        profile.age
        and profile.height_cm
        and profile.weight_kg
        and profile.gender
        and profile.activity_level
        and profile.goal
    ):
        return profile

    bmr = 10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age
    bmr += 5 if profile.gender == "male" else -161
    tdee = bmr * ACTIVITY_MULTIPLIERS[profile.activity_level]
    calories = max(0, round_half_up(tdee + GOAL_OFFSETS[profile.goal]))
    targets = Targets(
        calories=calories,
        protein=round_half_up(calories * PROTEIN_SHARE / PROTEIN_KCAL),
        carbohydrates=round_half_up(calories * CARBS_SHARE / CARBS_KCAL),
        fat=round_half_up(calories * FAT_SHARE / FAT_KCAL),
    )
    return profile.model_copy(update={"targets": targets})
