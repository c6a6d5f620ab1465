"""Profile repository."""

import logging
from datetime import datetime, timezone
from typing import Any

from thinkscore.errors import InvalidInputError, NotFoundError
from thinkscore.profiles.schemas import Profile
from thinkscore.storage.gateway import TableGateway, eq

logger = logging.getLogger(__name__)

TABLE = "profiles"


class ProfileRepository:
    """Repository for the ``profiles`` table."""

    def __init__(self, gateway: TableGateway) -> None:
        self._gateway = gateway

    async def get(self, profile_id: str) -> Profile:
        """Get a profile.

        Raises:
            NotFoundError: No profile with this id.
        """
        result = await self._gateway.query_one(TABLE, filters=[eq("id", profile_id)])
        return _row_to_profile(result.unwrap("fetch profile"))

    async def create(
        self,
        profile_id: str,
        display_name: str | None = None,
        email: str | None = None,
    ) -> Profile:
        """Insert a profile for an account id."""
        if not profile_id:
            raise InvalidInputError("id must not be empty")
        result = await self._gateway.insert(
            TABLE,
            {"id": profile_id, "display_name": display_name, "email": email},
        )
        return _row_to_profile(result.unwrap("create profile"))

    async def update(self, profile_id: str, display_name: str | None) -> Profile:
        """Change the display name.

        Raises:
            NotFoundError: No profile with this id.
        """
        result = await self._gateway.update(
            TABLE,
            [eq("id", profile_id)],
            {"display_name": display_name, "updated_at": datetime.now(timezone.utc)},
        )
        rows = result.unwrap("update profile")
        if not rows:
            raise NotFoundError(f"Profile {profile_id} not found")
        return _row_to_profile(rows[0])


def _row_to_profile(row: dict[str, Any]) -> Profile:
    return Profile(
        id=row["id"],
        display_name=row.get("display_name"),
        email=row.get("email"),
        total_score=row.get("total_score") or 0,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )
