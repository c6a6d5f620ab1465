"""Schema definitions for user profiles.

Maps 1:1 to the ``profiles`` table. ``total_score`` is maintained outside
this service and only read here.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Profile:
    id: str
    display_name: str | None = None
    email: str | None = None
    total_score: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
