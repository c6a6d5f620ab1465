"""Forum repository: posts, comments and likes.

Counters (``views_count``, ``likes_count``) are adjusted with a
read-modify-write through the gateway. Concurrent updates can lose an
increment; counters are display-only.
"""

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Any

from thinkscore.errors import InvalidInputError, NotFoundError
from thinkscore.forum.config import ForumConfig
from thinkscore.forum.schemas import (
    ALL_CATEGORIES,
    UPDATABLE_POST_FIELDS,
    VALID_SORTS,
    ForumComment,
    ForumPost,
)
from thinkscore.storage.gateway import Join, Order, TableGateway, eq, is_in

logger = logging.getLogger(__name__)

POSTS = "forum_posts"
COMMENTS = "forum_comments"
LIKES = "forum_likes"

_AUTHOR_JOIN = Join("profiles", "author_id", columns=("id", "display_name"), alias="author")


class ForumRepository:
    """Repository for forum posts, comments and likes."""

    def __init__(self, gateway: TableGateway, config: ForumConfig | None = None) -> None:
        self._gateway = gateway
        self._config = config or ForumConfig()

    def _check_text(self, field_name: str, value: str | None, max_length: int) -> str:
        if value is None or not value.strip():
            raise InvalidInputError(f"{field_name} must not be empty")
        if len(value) > max_length:
            raise InvalidInputError(f"{field_name} exceeds {max_length} characters")
        return value

    # ── Posts ────────────────────────────────────────────

    async def create_post(
        self,
        author_id: str,
        title: str,
        content: str,
        category: str | None = None,
        question_id: int | None = None,
    ) -> ForumPost:
        """Create a post.

        Raises:
            InvalidInputError: Empty/oversized fields, or ``question_id`` names a
                question that does not exist or is not forum-enabled.
        """
        self._check_text("title", title, self._config.max_title_length)
        self._check_text("content", content, self._config.max_content_length)

        if question_id is not None:
            question = await self._gateway.query_one(
                "questions",
                columns=("id", "forum_enabled"),
                filters=[eq("id", question_id)],
            )
            if question.is_not_found or not question.unwrap("fetch question")["forum_enabled"]:
                raise InvalidInputError(f"Question {question_id} is not open for discussion")

        result = await self._gateway.insert(
            POSTS,
            {
                "title": title,
                "content": content,
                "author_id": author_id,
                "category": category or self._config.default_category,
                "question_id": question_id,
            },
        )
        return _row_to_post(result.unwrap("create post"))

    async def list_posts(self, category: str | None = None, sort: str = "all") -> list[ForumPost]:
        """List posts with author name and comment count.

        Args:
            category: Category filter; None or "all" lists every category.
            sort: "recent" or "all" (newest first), "popular" (most liked first).
        """
        if sort not in VALID_SORTS:
            raise InvalidInputError(f"Invalid sort {sort!r}. Must be one of: {sorted(VALID_SORTS)}")

        filters = []
        if category and category != ALL_CATEGORIES:
            filters.append(eq("category", category))
        order = [Order("likes_count", descending=True)] if sort == "popular" else []
        order.append(Order("created_at", descending=True))

        posts = (
            await self._gateway.query(POSTS, joins=[_AUTHOR_JOIN], filters=filters, order_by=order)
        ).unwrap("fetch posts")
        if not posts:
            return []

        comments = (
            await self._gateway.query(
                COMMENTS,
                columns=("post_id",),
                filters=[is_in("post_id", [p["id"] for p in posts])],
            )
        ).unwrap("fetch comment counts")
        counts = Counter(c["post_id"] for c in comments)

        result = []
        for row in posts:
            post = _row_to_post(row)
            post.comments_count = counts.get(post.id, 0)
            result.append(post)
        return result

    async def get_post(self, post_id: int) -> ForumPost:
        """Get a post with author and comments, counting the view.

        Raises:
            NotFoundError: No post with this id.
        """
        row = (
            await self._gateway.query_one(POSTS, joins=[_AUTHOR_JOIN], filters=[eq("id", post_id)])
        ).unwrap("fetch post")
        post = _row_to_post(row)

        views = await self._gateway.update(
            POSTS, [eq("id", post_id)], {"views_count": post.views_count + 1}
        )
        if views.ok:
            post.views_count += 1
        else:
            logger.warning("Failed to count view of post %s: %s", post_id, views.error.message)

        post.comments = await self.list_comments(post_id)
        post.comments_count = len(post.comments)
        return post

    async def update_post(self, post_id: int, author_id: str, patch: dict[str, Any]) -> ForumPost:
        """Edit the author's own post.

        Raises:
            InvalidInputError: Empty patch or unknown fields.
            NotFoundError: No post with this id by this author.
        """
        patch = {k: v for k, v in patch.items() if v is not None}
        if not patch:
            raise InvalidInputError("Nothing to update")
        unknown = set(patch) - UPDATABLE_POST_FIELDS
        if unknown:
            raise InvalidInputError(f"Unknown post fields: {sorted(unknown)}")
        if "title" in patch:
            self._check_text("title", patch["title"], self._config.max_title_length)
        if "content" in patch:
            self._check_text("content", patch["content"], self._config.max_content_length)

        patch["updated_at"] = datetime.now(timezone.utc)
        rows = (
            await self._gateway.update(
                POSTS, [eq("id", post_id), eq("author_id", author_id)], patch
            )
        ).unwrap("update post")
        if not rows:
            raise NotFoundError(f"Post {post_id} not found for this author")
        return _row_to_post(rows[0])

    async def delete_post(self, post_id: int, author_id: str) -> None:
        """Delete the author's own post.

        Raises:
            NotFoundError: No post with this id by this author.
        """
        rows = (
            await self._gateway.delete(POSTS, [eq("id", post_id), eq("author_id", author_id)])
        ).unwrap("delete post")
        if not rows:
            raise NotFoundError(f"Post {post_id} not found for this author")

    # ── Comments ─────────────────────────────────────────

    async def create_comment(self, post_id: int, author_id: str, content: str) -> ForumComment:
        """Comment on an existing post.

        Raises:
            NotFoundError: No post with this id.
        """
        self._check_text("content", content, self._config.max_content_length)
        (
            await self._gateway.query_one(POSTS, columns=("id",), filters=[eq("id", post_id)])
        ).unwrap("fetch post")

        row = (
            await self._gateway.insert(
                COMMENTS,
                {"post_id": post_id, "author_id": author_id, "content": content},
            )
        ).unwrap("create comment")
        return _row_to_comment(row)

    async def list_comments(self, post_id: int) -> list[ForumComment]:
        """Comments on a post, oldest first."""
        rows = (
            await self._gateway.query(
                COMMENTS,
                joins=[_AUTHOR_JOIN],
                filters=[eq("post_id", post_id)],
                order_by=[Order("created_at")],
            )
        ).unwrap("fetch comments")
        return [_row_to_comment(row) for row in rows]

    # ── Likes ────────────────────────────────────────────

    async def toggle_like(self, post_id: int, user_id: str) -> bool:
        """Like or unlike a post.

        Returns:
            True if the post is now liked by the user.

        Raises:
            NotFoundError: No post with this id.
        """
        post = (
            await self._gateway.query_one(
                POSTS, columns=("id", "likes_count"), filters=[eq("id", post_id)]
            )
        ).unwrap("fetch post")

        like_filters = [eq("post_id", post_id), eq("user_id", user_id)]
        existing = await self._gateway.query_one(LIKES, filters=like_filters)
        if not existing.ok and not existing.is_not_found:
            existing.unwrap("fetch like")

        likes = post.get("likes_count") or 0
        if existing.ok:
            (await self._gateway.delete(LIKES, like_filters)).unwrap("remove like")
            liked, likes = False, max(likes - 1, 0)
        else:
            (
                await self._gateway.insert(LIKES, {"post_id": post_id, "user_id": user_id})
            ).unwrap("add like")
            liked, likes = True, likes + 1

        (
            await self._gateway.update(POSTS, [eq("id", post_id)], {"likes_count": likes})
        ).unwrap("update like count")
        return liked


def _row_to_post(row: dict[str, Any]) -> ForumPost:
    return ForumPost(
        id=row.get("id"),
        title=row["title"],
        content=row["content"],
        author_id=row["author_id"],
        category=row.get("category") or "free",
        question_id=row.get("question_id"),
        views_count=row.get("views_count") or 0,
        likes_count=row.get("likes_count") or 0,
        is_pinned=bool(row.get("is_pinned")),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        author=row.get("author"),
    )


def _row_to_comment(row: dict[str, Any]) -> ForumComment:
    return ForumComment(
        id=row.get("id"),
        post_id=row["post_id"],
        author_id=row["author_id"],
        content=row["content"],
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        author=row.get("author"),
    )
