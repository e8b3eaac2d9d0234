"""FastAPI application factory."""

import datetime as dt
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, Form, Query, Request, Response, UploadFile, status
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from nutrilog.api.schemas import MealUpdate
from nutrilog.app_logging import configure_logging
from nutrilog.containers import AppContainer
from nutrilog.domain.meals import MealDraft
from nutrilog.domain.profile import Profile
from nutrilog.domain.stats import DailyTotals, DaySummary, TrendSummary
from nutrilog.errors import FoodNotRecognizedError, NutrilogError, UpstreamError
from nutrilog.services.aggregation import summarize_day, summarize_trend
from nutrilog.services.analysis import ImageInput

ANALYSIS_FAILED_MESSAGE = "Failed to analyze meal. Please try again."


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.container.initialize_resources()
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(NutrilogError)
    async def handle_nutrilog_error(
        request: Request, exc: NutrilogError
    ) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/profile")
    async def get_profile(request: Request) -> dict[str, object]:
        """Return the profile and its targets."""
        state_container: AppContainer = request.app.state.container
        return state_container.profile_service.get_profile().to_json_dict()

    @app.post("/api/profile")
    async def save_profile(profile: Profile, request: Request) -> dict[str, object]:
        """Replace the profile, recomputing targets when metrics are complete."""
        state_container: AppContainer = request.app.state.container
        return state_container.profile_service.save_profile(profile).to_json_dict()

    @app.get("/api/meals")
    async def list_meals(
        request: Request, date: dt.date | None = None
    ) -> list[dict[str, object]]:
        """Return meals for a day, today by default."""
        state_container: AppContainer = request.app.state.container
        meals = state_container.meal_store.list_meals(date)
        return [meal.to_json_dict() for meal in meals]

    @app.post("/api/meals", status_code=status.HTTP_201_CREATED)
    async def create_meal(draft: MealDraft, request: Request) -> dict[str, object]:
        """Log a meal for today."""
        state_container: AppContainer = request.app.state.container
        return state_container.meal_store.create_meal(draft).to_json_dict()

    @app.put("/api/meals/{meal_id}")
    async def update_meal(
        meal_id: str, update: MealUpdate, request: Request
    ) -> dict[str, object]:
        """Move a meal to another day and/or category."""
        state_container: AppContainer = request.app.state.container
        meal = state_container.meal_store.update_meal(
            meal_id, date=update.date, category=update.category
        )
        return meal.to_json_dict()

    @app.delete("/api/meals/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_meal(meal_id: str, request: Request) -> Response:
        """Delete a meal."""
        state_container: AppContainer = request.app.state.container
        state_container.meal_store.delete_meal(meal_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.post("/api/analyze-meal")
    async def analyze_meal(
        request: Request,
        text: str | None = Form(default=None),
        image: UploadFile | None = File(default=None),
    ) -> dict[str, object]:
        """Estimate nutrition for a meal from text and/or a photo."""
        state_container: AppContainer = request.app.state.container
        image_input = None
        if image is not None:
            image_input = ImageInput(
                data=await image.read(), mime_type=image.content_type
            )
        try:
            result = await state_container.analysis_service.analyze(
                text=text, image=image_input
            )
        except FoodNotRecognizedError as exc:
            return {"error": exc.message}
        except UpstreamError as exc:
            logger.exception("Meal analysis failed")
            raise UpstreamError(
                _format_upstream_error(state_container, exc, ANALYSIS_FAILED_MESSAGE)
            ) from exc
        return result.to_json_dict()

    @app.get("/api/summary")
    async def day_summary(
        request: Request, date: dt.date | None = None
    ) -> dict[str, object]:
        """Return a day's totals, targets, progress and ordered meals."""
        state_container: AppContainer = request.app.state.container
        store = state_container.meal_store
        day = date or store.today()
        summary = summarize_day(
            day, store.list_meals(day), store.get_profile().targets
        )
        return _format_day_summary(summary)

    @app.get("/api/trends")
    async def trends(
        request: Request,
        days: int = Query(default=7, ge=1, le=366),
        end: dt.date | None = None,
    ) -> dict[str, object]:
        """Return daily calories and surplus against target over recent days."""
        state_container: AppContainer = request.app.state.container
        store = state_container.meal_store
        last = end or store.today()
        start = last - dt.timedelta(days=days - 1)
        summary = summarize_trend(
            start,
            days,
            store.list_meals_between(start, last),
            store.get_profile().targets.calories,
        )
        return _format_trend_summary(summary)

    static_dir = container.settings.static_dir
    if static_dir is not None:
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="frontend")

    return app


def _format_upstream_error(
    state_container: AppContainer, exc: Exception, fallback: str
) -> str:
    """Return a user-facing analysis error message with local debug info."""
    if state_container.settings.environment == "local":
        cause = exc.__cause__ or exc
        detail = f"{type(cause).__name__}: {cause}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback


def _format_totals(totals: DailyTotals) -> dict[str, int]:
    return {
        "calories": totals.calories,
        "protein": totals.protein_g,
        "carbohydrates": totals.carbs_g,
        "fat": totals.fat_g,
    }


def _format_day_summary(summary: DaySummary) -> dict[str, object]:
    return {
        "date": summary.day.isoformat(),
        "totals": _format_totals(summary.totals),
        "targets": summary.targets.to_json_dict(),
        "percentages": summary.percentages,
        "meals": [meal.to_json_dict() for meal in summary.meals],
    }


def _format_trend_summary(summary: TrendSummary) -> dict[str, object]:
    return {
        "days": [
            {
                "date": entry.day.isoformat(),
                "calories": entry.calories,
                "surplus": entry.surplus,
            }
            for entry in summary.days
        ],
        "targetCalories": summary.target_calories,
        "averageCalories": summary.average_calories,
        "totalSurplus": summary.total_surplus,
        "projectedWeightChangeKg": summary.projected_weight_change_kg,
    }
