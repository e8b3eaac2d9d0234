"""Profile service."""

from dataclasses import dataclass

from nutrilog.domain.profile import Profile
from nutrilog.services.store import MealStore
from nutrilog.services.targets import compute_targets


@dataclass
class ProfileService:
    """Service that keeps the stored profile's targets in sync with its metrics."""

    store: MealStore

    def get_profile(self) -> Profile:
        """Return the stored profile, defaulted if nothing is stored yet."""
        return self.store.get_profile()

    def save_profile(self, profile: Profile) -> Profile:
        """Recompute targets and replace the stored profile."""
        return self.store.set_profile(compute_targets(profile))
