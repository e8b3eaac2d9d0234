"""Models for AI meal analysis results."""

from dataclasses import dataclass

from nutrilog.domain.base import CamelModel
from nutrilog.domain.meals import Ingredient, Macros


class AnalyzedIngredient(CamelModel):
    """Ingredient as estimated by the model, without quantity or unit."""

    name: str
    calories: int
    protein: int
    carbs: int
    fat: int


class RawAnalysis(CamelModel):
    """Structured model output; either the meal fields or ``error`` is set."""

    meal_name: str | None = None
    total_calories: int | None = None
    macros: Macros | None = None
    ingredients: list[AnalyzedIngredient] | None = None
    error: str | None = None


class AnalysisResult(CamelModel):
    """Editable analysis shown to the user before the meal is logged."""

    meal_name: str
    total_calories: int
    macros: Macros
    ingredients: list[Ingredient]


@dataclass(frozen=True)
class AnalysisRejection:
    """The model could not identify a food item in the input."""

    message: str
