"""Meal analysis via an AI model with structured outputs."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from nutrilog.domain.analysis import AnalysisRejection, AnalysisResult, RawAnalysis
from nutrilog.domain.meals import UNSPECIFIED_UNIT, Ingredient
from nutrilog.errors import (
    AnalysisNotConfiguredError,
    FoodNotRecognizedError,
    InvalidInputError,
    UpstreamError,
)

_logger = logging.getLogger(__name__)

ANALYSIS_PROMPT = """\
Analyze the following meal and provide a nutritional analysis.
The user input may be text, an image, or both.
Return mealName (a descriptive name for the meal), totalCalories,
macros with grams and percentage of total macro grams for protein,
carbohydrates and fat, and ingredients with calories, protein, carbs and
fat for each. All numbers are integers. Set error to null.
If the input is unclear or doesn't seem to be a food item, set every other
field to null and set error to a short message, for example:
"Could not identify a food item in the provided input."
"""


def _nullable(schema: dict[str, object]) -> dict[str, object]:
    return {"anyOf": [schema, {"type": "null"}]}


_MACRO_AMOUNT_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "grams": {"type": "integer", "minimum": 0},
        "percentage": {"type": "integer", "minimum": 0, "maximum": 100},
    },
    "required": ["grams", "percentage"],
    "additionalProperties": False,
}

ANALYSIS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "mealName": _nullable({"type": "string"}),
        "totalCalories": _nullable({"type": "integer", "minimum": 0}),
        "macros": _nullable(
            {
                "type": "object",
                "properties": {
                    "protein": _MACRO_AMOUNT_SCHEMA,
                    "carbohydrates": _MACRO_AMOUNT_SCHEMA,
                    "fat": _MACRO_AMOUNT_SCHEMA,
                },
                "required": ["protein", "carbohydrates", "fat"],
                "additionalProperties": False,
            }
        ),
        "ingredients": _nullable(
            {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "name": {"type": "string"},
                        "calories": {"type": "integer", "minimum": 0},
                        "protein": {"type": "integer", "minimum": 0},
                        "carbs": {"type": "integer", "minimum": 0},
                        "fat": {"type": "integer", "minimum": 0},
                    },
                    "required": ["name", "calories", "protein", "carbs", "fat"],
                    "additionalProperties": False,
                },
            }
        ),
        "error": _nullable({"type": "string"}),
    },
    "required": ["mealName", "totalCalories", "macros", "ingredients", "error"],
    "additionalProperties": False,
}


@dataclass(frozen=True)
class ImageInput:
    """Uploaded image bytes with the MIME type declared by the client."""

    data: bytes
    mime_type: str | None = None


class AnalysisClient(Protocol):
    """Interface for the AI model call."""

    async def analyze(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        text: str | None,
        image_data_url: str | None,
        schema: dict[str, object],
    ) -> object:
        """Return the model's decoded JSON output."""


@dataclass
class AnalysisService:
    """Service that prepares analysis requests and validates the results."""

    client: AnalysisClient | None
    model: str
    reasoning_effort: str | None
    store: bool

    async def analyze(
        self, text: str | None = None, image: ImageInput | None = None
    ) -> AnalysisResult:
        """Estimate nutrition for a meal described by text and/or a photo."""
        text = text.strip() if text else None
        if image is not None and not image.data:
            image = None
        if not text and image is None:
            raise InvalidInputError("Please provide text or an image for analysis.")
        if self.client is None:
            raise AnalysisNotConfiguredError(
                "Server is not configured with an OpenAI API key."
            )

        raw = await self.client.analyze(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=ANALYSIS_PROMPT,
            text=text or None,
            image_data_url=_to_data_url(image) if image else None,
            schema=ANALYSIS_SCHEMA,
        )
        outcome = parse_analysis(raw)
        if isinstance(outcome, AnalysisRejection):
            _logger.info("Analysis rejected: %s", outcome.message)
            raise FoodNotRecognizedError(outcome.message)
        return outcome


def parse_analysis(raw: object) -> AnalysisResult | AnalysisRejection:
    """Validate model output into a result or a rejection."""
    try:
        parsed = RawAnalysis.model_validate(raw)
    except ValidationError as exc:
        raise UpstreamError("AI model returned an unexpected response") from exc
    if parsed.error:
        return AnalysisRejection(message=parsed.error)
    if parsed.meal_name is None or parsed.total_calories is None or not parsed.macros:
        raise UpstreamError("AI model returned an incomplete analysis")
    return AnalysisResult(
        meal_name=parsed.meal_name,
        total_calories=parsed.total_calories,
        macros=parsed.macros,
        ingredients=[
            Ingredient(
                **ingredient.model_dump(), quantity=1, unit=UNSPECIFIED_UNIT
            )
            for ingredient in parsed.ingredients or []
        ],
    )


def _to_data_url(image: ImageInput) -> str:
    """Convert image bytes to a base64 data URL."""
    mime_type = image.mime_type
    if not mime_type or not mime_type.startswith("image/"):
        mime_type = _detect_mime_type(image.data)
    encoded = base64.b64encode(image.data).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
