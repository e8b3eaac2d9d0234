"""Layout of the persisted document."""

import json
from typing import Any

from pydantic import BaseModel, Field, field_validator

from nutrilog.domain.meals import Meal
from nutrilog.domain.profile import Profile


class StoreDocument(BaseModel):
    """Single JSON document holding the profile and all meals.

    Meals are kept as the raw JSON records found on disk. They are validated
    one at a time when read, so a single malformed record cannot make the
    whole document unreadable, and records that do not validate are written
    back untouched.
    """

    profile: Profile = Field(default_factory=Profile)
    meals: list[Any] = Field(default_factory=list)

    @field_validator("meals", mode="before")
    @classmethod
    def _dump_meal_models(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [
                item.to_json_dict() if isinstance(item, Meal) else item
                for item in value
            ]
        return value

    def to_json(self) -> str:
        """Serialize with camelCase profile keys and meal records as stored."""
        return json.dumps(
            {"profile": self.profile.to_json_dict(), "meals": self.meals}, indent=2
        )
