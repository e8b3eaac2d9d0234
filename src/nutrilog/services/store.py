"""Meal store: CRUD over the persisted profile and meals."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Any, Protocol
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from nutrilog.domain.meals import Meal, MealCategory, MealDraft
from nutrilog.domain.profile import Profile
from nutrilog.domain.store import StoreDocument
from nutrilog.errors import MealNotFoundError, StoreUnavailableError
from nutrilog.services.aggregation import (
    apply_ingredient_totals,
    infer_category,
    normalize_meal,
)

_logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    """Persistence interface for the whole stored document."""

    def read(self) -> StoreDocument:
        """Return the current document."""

    def write(self, document: StoreDocument) -> None:
        """Replace the stored document."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class MealStore:
    """Read-modify-write operations over the stored document.

    Every mutating call reads the full document, changes it and writes it back
    before returning. There is no locking or versioning, so concurrent writers
    can overwrite each other's changes.
    """

    documents: DocumentStore
    timezone: str = "UTC"
    clock: Callable[[], datetime] = field(default=_utc_now)

    def now(self) -> datetime:
        """Return the current time in the configured timezone."""
        return self.clock().astimezone(ZoneInfo(self.timezone))

    def today(self) -> date:
        """Return today's date in the configured timezone."""
        return self.now().date()

    def get_profile(self) -> Profile:
        """Return the stored profile, or a defaulted one if the store is unavailable."""
        try:
            document = self.documents.read()
        except StoreUnavailableError as exc:
            _logger.warning("Returning default profile: %s", exc.message)
            return Profile()
        return document.profile

    def set_profile(self, profile: Profile) -> Profile:
        """Replace the stored profile."""
        document = self.documents.read()
        document.profile = profile
        self.documents.write(document)
        return profile

    def list_meals(self, day: date | None = None) -> list[Meal]:
        """Return meals logged on a day, today by default."""
        prefix = (day or self.today()).isoformat()
        document = self.documents.read()
        tz = ZoneInfo(self.timezone)
        return [
            normalize_meal(meal, tz)
            for _, meal in _readable_meals(document.meals)
            if meal.date.startswith(prefix)
        ]

    def list_meals_between(self, start: date, end: date) -> list[Meal]:
        """Return meals dated within an inclusive day range."""
        first, last = start.isoformat(), end.isoformat()
        document = self.documents.read()
        tz = ZoneInfo(self.timezone)
        return [
            normalize_meal(meal, tz)
            for _, meal in _readable_meals(document.meals)
            if first <= meal.date[:10] <= last
        ]

    def create_meal(self, draft: MealDraft) -> Meal:
        """Persist a new meal dated today and categorized by the time of day."""
        now = self.now()
        resolved = apply_ingredient_totals(draft)
        document = self.documents.read()
        meal = Meal(
            **resolved.model_dump(),
            id=_next_meal_id(now, document.meals),
            date=now.date().isoformat(),
            category=infer_category(now.hour),
        )
        document.meals.append(meal.to_json_dict())
        self.documents.write(document)
        _logger.info("Logged meal %s (%s)", meal.id, meal.category)
        return meal

    def update_meal(
        self,
        meal_id: int | str,
        *,
        date: date | None = None,
        category: MealCategory | None = None,
    ) -> Meal:
        """Change a meal's date and/or category.

        Records that do not validate as meals are treated as missing.
        """
        document = self.documents.read()
        wanted = str(meal_id)
        found = next(
            (
                (index, meal)
                for index, meal in _readable_meals(document.meals)
                if str(meal.id) == wanted
            ),
            None,
        )
        if found is None:
            raise MealNotFoundError(meal_id)
        index, meal = found
        updates: dict[str, object] = {}
        if date is not None:
            updates["date"] = date.isoformat()
        if category is not None:
            updates["category"] = category
        meal = meal.model_copy(update=updates)
        document.meals[index] = meal.to_json_dict()
        self.documents.write(document)
        return meal

    def delete_meal(self, meal_id: int | str) -> None:
        """Remove a meal, including records that no longer validate."""
        document = self.documents.read()
        index = _find_record_index(document.meals, meal_id)
        if index is None:
            raise MealNotFoundError(meal_id)
        del document.meals[index]
        self.documents.write(document)
        _logger.info("Deleted meal %s", meal_id)


def _readable_meals(records: list[Any]) -> list[tuple[int, Meal]]:
    """Validate stored records one by one, skipping those that are not meals."""
    meals = []
    for index, record in enumerate(records):
        try:
            meals.append((index, Meal.model_validate(record)))
        except ValidationError as exc:
            _logger.warning(
                "Skipping unreadable meal record at position %s: %s",
                index,
                exc.errors(include_url=False),
            )
    return meals


def _find_record_index(records: list[Any], meal_id: int | str) -> int | None:
    wanted = str(meal_id)
    for index, record in enumerate(records):
        if isinstance(record, dict) and str(record.get("id")) == wanted:
            return index
    return None


def _next_meal_id(now: datetime, records: list[Any]) -> int:
    """Use the epoch milliseconds, bumped past the newest stored id."""
    candidate = int(now.timestamp() * 1000)
    latest = max(
        (
            record["id"]
            for record in records
            if isinstance(record, dict) and type(record.get("id")) is int
        ),
        default=0,
    )
    return max(candidate, latest + 1)
