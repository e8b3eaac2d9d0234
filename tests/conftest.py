"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from nutrilog.config import Settings
from nutrilog.containers import AppContainer
from nutrilog.domain.store import StoreDocument
from nutrilog.errors import StoreUnavailableError
from nutrilog.services.analysis import AnalysisClient, AnalysisService
from nutrilog.services.profile import ProfileService
from nutrilog.services.store import DocumentStore, MealStore

FIXED_NOW = datetime(2024, 1, 1, 8, 30, tzinfo=UTC)


def meal_payload(  # noqa: PLR0913
    name: str = "Oatmeal",
    calories: int = 300,
    protein: int = 10,
    carbs: int = 50,
    fat: int = 6,
    ingredients: list[dict[str, object]] | None = None,
) -> dict[str, object]:
    """Build a meal draft body in wire format."""
    return {
        "mealName": name,
        "totalCalories": calories,
        "macros": {
            "protein": {"grams": protein, "percentage": 15},
            "carbohydrates": {"grams": carbs, "percentage": 75},
            "fat": {"grams": fat, "percentage": 10},
        },
        "ingredients": ingredients or [],
    }


@dataclass
class InMemoryDocumentStore(DocumentStore):
    """In-memory document store that copies on every read and write."""

    document: StoreDocument = field(default_factory=StoreDocument)
    available: bool = True
    writes: int = 0

    def read(self) -> StoreDocument:
        if not self.available:
            raise StoreUnavailableError("Database not initialized")
        return self.document.model_copy(deep=True)

    def write(self, document: StoreDocument) -> None:
        if not self.available:
            raise StoreUnavailableError("Database not initialized")
        self.document = document.model_copy(deep=True)
        self.writes += 1


@dataclass
class FakeAnalysisClient(AnalysisClient):
    """Fake analysis client returning a fixed payload and recording calls."""

    payload: object = field(
        default_factory=lambda: {
            "mealName": "Chicken rice bowl",
            "totalCalories": 520,
            "macros": {
                "protein": {"grams": 35, "percentage": 30},
                "carbohydrates": {"grams": 60, "percentage": 52},
                "fat": {"grams": 14, "percentage": 18},
            },
            "ingredients": [
                {"name": "rice", "calories": 260, "protein": 5, "carbs": 57, "fat": 1},
                {
                    "name": "chicken breast",
                    "calories": 260,
                    "protein": 30,
                    "carbs": 3,
                    "fat": 13,
                },
            ],
            "error": None,
        }
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

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
        self.calls.append(
            {"model": model, "text": text, "image_data_url": image_data_url}
        )
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openai_api_key="test-key",
        environment="test",
        timezone="UTC",
    )


@pytest.fixture
def document_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def analysis_client() -> FakeAnalysisClient:
    return FakeAnalysisClient()


@pytest.fixture
def meal_store(document_store: InMemoryDocumentStore) -> MealStore:
    return MealStore(documents=document_store, timezone="UTC", clock=lambda: FIXED_NOW)


@pytest.fixture
def container(
    settings: Settings,
    meal_store: MealStore,
    analysis_client: FakeAnalysisClient,
) -> AppContainer:
    analysis_service = AnalysisService(
        client=analysis_client,
        model="gpt-5.2",
        reasoning_effort="low",
        store=False,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        meal_store=meal_store,
        profile_service=ProfileService(meal_store),
        analysis_service=analysis_service,
        initialize_resources=lambda: None,
        close_resources=close_resources,
    )
