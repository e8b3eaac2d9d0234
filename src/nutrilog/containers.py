"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from nutrilog.adapters.json_file_store import JsonFileStore
from nutrilog.adapters.openai_analysis_client import OpenAIAnalysisClient
from nutrilog.config import Settings
from nutrilog.services.analysis import AnalysisService
from nutrilog.services.profile import ProfileService
from nutrilog.services.store import MealStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    meal_store: MealStore
    profile_service: ProfileService
    analysis_service: AnalysisService
    initialize_resources: Callable[[], None]
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    document_store = JsonFileStore(resolved_settings.data_file)
    meal_store = MealStore(
        documents=document_store, timezone=resolved_settings.timezone
    )
    profile_service = ProfileService(meal_store)
    api_key = resolved_settings.analysis_api_key
    openai_client = OpenAIAnalysisClient.create(api_key) if api_key else None
    analysis_service = AnalysisService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )

    async def close_resources() -> None:
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        meal_store=meal_store,
        profile_service=profile_service,
        analysis_service=analysis_service,
        initialize_resources=document_store.initialize,
        close_resources=close_resources,
    )
