"""Schema definitions for forum records.

Maps to the ``forum_posts``, ``forum_comments`` and ``forum_likes`` tables.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

VALID_SORTS: frozenset[str] = frozenset({
    "recent",
    "popular",
    "all",
})

# Category filter value meaning "no filter"
ALL_CATEGORIES = "all"

UPDATABLE_POST_FIELDS: frozenset[str] = frozenset({"title", "content", "category"})


@dataclass
class ForumComment:
    post_id: int
    author_id: str
    content: str
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    author: dict[str, Any] | None = None


@dataclass
class ForumPost:
    """A forum post.

    Attributes:
        question_id: Question the post discusses; the question must be
            forum-enabled.
        author: Joined author profile summary (id, display_name).
        comments_count: Number of comments (list view).
        comments: Comments oldest first (detail view).
    """

    title: str
    content: str
    author_id: str
    category: str = "free"
    id: int | None = None
    question_id: int | None = None
    views_count: int = 0
    likes_count: int = 0
    is_pinned: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    author: dict[str, Any] | None = None
    comments_count: int = 0
    comments: list[ForumComment] = field(default_factory=list)
