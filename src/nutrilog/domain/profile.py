"""Domain models for the user profile and nutrition targets."""

from typing import Literal

from pydantic import Field

from nutrilog.domain.base import CamelModel

Gender = Literal["male", "female"]
ActivityLevel = Literal["sedentary", "light", "moderate", "active", "very"]
Goal = Literal["lose", "maintain", "gain"]


class Targets(CamelModel):
    """Daily calorie and macro goals."""

    calories: int = Field(default=2000, ge=0)
    protein: int = Field(default=150, ge=0)
    carbohydrates: int = Field(default=250, ge=0)
    fat: int = Field(default=60, ge=0)


class Profile(CamelModel):
    """Body metrics and goals; targets are always present."""

    age: int | None = None
    gender: Gender | None = None
    height_cm: float | None = Field(default=None, alias="height")
    weight_kg: float | None = Field(default=None, alias="weight")
    activity_level: ActivityLevel | None = None
    goal: Goal | None = None
    targets: Targets = Field(default_factory=Targets)
