"""Domain models for logged meals."""

import math
from typing import Any, Literal, get_args

from pydantic import ConfigDict, Field, field_validator

from nutrilog.domain.base import CamelModel

MealCategory = Literal["Breakfast", "Lunch", "Dinner", "Snack"]
CATEGORY_ORDER: tuple[MealCategory, ...] = get_args(MealCategory)

MeasurementUnit = Literal[
    "unit", "g", "oz", "cup", "tbsp", "tsp", "slice", "piece", "whole", "half"
]
UNSPECIFIED_UNIT: MeasurementUnit = "unit"


class MacroAmount(CamelModel):
    """Grams of one macro and its share of the meal's macro grams."""

    grams: int = 0
    percentage: int = Field(default=0, ge=0, le=100)

    @field_validator("grams", "percentage", mode="before")
    @classmethod
    def _round_fractional(cls, value: Any) -> Any:
        # Older records saved unrounded model output.
        if isinstance(value, float):
            return math.floor(value + 0.5)
        return value


class Macros(CamelModel):
    """Protein, carbohydrate and fat amounts of a meal."""

    protein: MacroAmount = Field(default_factory=MacroAmount)
    carbohydrates: MacroAmount = Field(default_factory=MacroAmount)
    fat: MacroAmount = Field(default_factory=MacroAmount)


class Ingredient(CamelModel):
    """Ingredient with per-unit nutrition and a user-adjustable quantity."""

    name: str
    quantity: int | float = Field(default=1, ge=0)
    unit: MeasurementUnit = UNSPECIFIED_UNIT
    calories: int | float = 0
    protein: int | float = 0
    carbs: int | float = 0
    fat: int | float = 0


class MealDraft(CamelModel):
    """Meal as submitted by the client, before the server assigns identity."""

    meal_name: str
    total_calories: int = 0
    macros: Macros = Field(default_factory=Macros)
    ingredients: list[Ingredient] = Field(default_factory=list)


class Meal(MealDraft):
    """Persisted meal.

    Older records may carry a full ISO timestamp in ``date`` and no
    ``category``; unknown keys are kept so rewrites do not drop them.
    """

    model_config = ConfigDict(extra="allow")

    id: int
    date: str
    category: MealCategory | None = None
