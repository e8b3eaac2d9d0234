"""Request bodies for the REST API."""

import datetime as dt

from pydantic import BaseModel

from nutrilog.domain.meals import MealCategory


class MealUpdate(BaseModel):
    """Partial update of a meal's day and category."""

    date: dt.date | None = None
    category: MealCategory | None = None
