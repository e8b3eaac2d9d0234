"""Domain models for daily progress and trends."""

from dataclasses import dataclass
from datetime import date

from nutrilog.domain.meals import Meal
from nutrilog.domain.profile import Targets


@dataclass(frozen=True)
class DailyTotals:
    """Summed calories and macro grams."""

    calories: int
    protein_g: int
    carbs_g: int
    fat_g: int


@dataclass(frozen=True)
class DaySummary:
    """A day's totals against targets, with meals in display order."""

    day: date
    totals: DailyTotals
    targets: Targets
    percentages: dict[str, int]
    meals: list[Meal]


@dataclass(frozen=True)
class DayTrend:
    """Calories for one day and the difference from the calorie target."""

    day: date
    calories: int
    surplus: int


@dataclass(frozen=True)
class TrendSummary:
    """Calorie trend over a run of days."""

    days: list[DayTrend]
    target_calories: int
    average_calories: float
    total_surplus: int
    projected_weight_change_kg: float
