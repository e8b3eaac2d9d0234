"""Error types surfaced by services and mapped to HTTP responses."""


class NutrilogError(Exception):
    """Base error carrying a user-facing message and an HTTP status."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(NutrilogError):
    """The caller supplied unusable input."""

    status_code = 400


class AnalysisNotConfiguredError(InvalidInputError):
    """Meal analysis was requested but no AI credentials are configured."""

    status_code = 500


class MealNotFoundError(NutrilogError):
    """No stored meal has the requested id."""

    status_code = 404

    def __init__(self, meal_id: object) -> None:
        super().__init__("Meal not found")
        self.meal_id = meal_id


class UpstreamError(NutrilogError):
    """The AI model was unreachable or returned unusable content."""

    status_code = 500


class FoodNotRecognizedError(NutrilogError):
    """The AI model reported that the input is not a recognizable food."""

    status_code = 422


class StoreUnavailableError(NutrilogError):
    """The persisted document cannot be read or was never initialized."""

    status_code = 500
