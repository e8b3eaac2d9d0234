"""Meal aggregation, ordering and read-time normalization."""

from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from nutrilog.domain.meals import (
    CATEGORY_ORDER,
    MacroAmount,
    Macros,
    Meal,
    MealCategory,
    MealDraft,
)
from nutrilog.domain.profile import Targets
from nutrilog.domain.stats import DailyTotals, DaySummary, DayTrend, TrendSummary
from nutrilog.services.targets import round_half_up

BREAKFAST_START_HOUR = 5
LUNCH_START_HOUR = 11
DINNER_START_HOUR = 16
SNACK_START_HOUR = 22
KCAL_PER_KG = 7700


def infer_category(hour: int) -> MealCategory:
    """Map an hour of the day to a meal category."""
    if BREAKFAST_START_HOUR <= hour < LUNCH_START_HOUR:
        return "Breakfast"
    if LUNCH_START_HOUR <= hour < DINNER_START_HOUR:
        return "Lunch"
    if DINNER_START_HOUR <= hour < SNACK_START_HOUR:
        return "Dinner"
    return "Snack"


def aggregate(meals: Iterable[Meal]) -> DailyTotals:
    """Sum calories and macro grams across meals."""
    calories = protein = carbs = fat = 0
    for meal in meals:
        calories += meal.total_calories
        protein += meal.macros.protein.grams
        carbs += meal.macros.carbohydrates.grams
        fat += meal.macros.fat.grams
    return DailyTotals(calories=calories, protein_g=protein, carbs_g=carbs, fat_g=fat)


def sort_by_category(meals: Iterable[Meal]) -> list[Meal]:
    """Order meals Breakfast, Lunch, Dinner, Snack, keeping ties in input order."""
    return sorted(meals, key=_category_rank)


def percent_of_target(current: float, target: float) -> int:
    """Return current as a whole percentage of target; 0 when there is no target."""
    if target <= 0:
        return 0
    return round_half_up(100 * current / target)


def normalize_meal(meal: Meal, tz: ZoneInfo) -> Meal:
    """Fill in a missing category from the hour of the stored date.

    Returns a copy for display; the stored record is not changed.
    """
    if meal.category is not None:
        return meal
    hour = _stored_hour(meal.date, tz)
    category = infer_category(hour) if hour is not None else "Snack"
    return meal.model_copy(update={"category": category})


def apply_ingredient_totals(draft: MealDraft) -> MealDraft:
    """Recompute totals and macros as quantity-weighted ingredient sums."""
    if not draft.ingredients:
        return draft
    calories = protein = carbs = fat = 0.0
    for ingredient in draft.ingredients:
        calories += ingredient.calories * ingredient.quantity
        protein += ingredient.protein * ingredient.quantity
        carbs += ingredient.carbs * ingredient.quantity
        fat += ingredient.fat * ingredient.quantity
    macro_grams = protein + carbs + fat
    macros = Macros(
        protein=_macro_amount(protein, macro_grams),
        carbohydrates=_macro_amount(carbs, macro_grams),
        fat=_macro_amount(fat, macro_grams),
    )
    return draft.model_copy(
        update={"total_calories": round_half_up(calories), "macros": macros}
    )


def summarize_day(day: date, meals: list[Meal], targets: Targets) -> DaySummary:
    """Build a day's progress against targets."""
    totals = aggregate(meals)
    return DaySummary(
        day=day,
        totals=totals,
        targets=targets,
        percentages={
            "calories": percent_of_target(totals.calories, targets.calories),
            "protein": percent_of_target(totals.protein_g, targets.protein),
            "carbohydrates": percent_of_target(
                totals.carbs_g, targets.carbohydrates
            ),
            "fat": percent_of_target(totals.fat_g, targets.fat),
        },
        meals=sort_by_category(meals),
    )


def summarize_trend(
    start: date, days: int, meals: list[Meal], target_calories: int
) -> TrendSummary:
    """Aggregate calories per day over a period and project the weight change."""
    by_day: dict[str, list[Meal]] = {}
    for meal in meals:
        by_day.setdefault(meal.date[:10], []).append(meal)

    trend = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        calories = aggregate(by_day.get(day.isoformat(), [])).calories
        trend.append(
            DayTrend(day=day, calories=calories, surplus=calories - target_calories)
        )

    total_days = max(len(trend), 1)
    total_calories = sum(entry.calories for entry in trend)
    total_surplus = sum(entry.surplus for entry in trend)
    return TrendSummary(
        days=trend,
        target_calories=target_calories,
        average_calories=_round_to(total_calories / total_days, 1),
        total_surplus=total_surplus,
        projected_weight_change_kg=_round_to(total_surplus / KCAL_PER_KG, 2),
    )


def _round_to(value: float, digits: int) -> float:
    scale = 10**digits
    return round_half_up(value * scale) / scale


def _category_rank(meal: Meal) -> int:
    if meal.category is None:
        return len(CATEGORY_ORDER)
    return CATEGORY_ORDER.index(meal.category)


def _macro_amount(grams: float, total_grams: float) -> MacroAmount:
    percentage = round_half_up(grams / total_grams * 100) if total_grams > 0 else 0
    return MacroAmount(grams=round_half_up(grams), percentage=percentage)


def _stored_hour(value: str, tz: ZoneInfo) -> int | None:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(tz).hour
