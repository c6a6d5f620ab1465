"""User profiles."""

from thinkscore.profiles.repository import ProfileRepository
from thinkscore.profiles.schemas import Profile

__all__ = ["Profile", "ProfileRepository"]
