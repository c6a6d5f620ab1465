"""Forum: posts, comments and likes, optionally tied to a published question.

Components:
- ForumPost / ForumComment: Dataclasses mapping to forum tables
- ForumConfig: Pydantic settings (FORUM_* env vars)
- ForumRepository: Post/comment CRUD and like toggling
"""

from thinkscore.forum.config import ForumConfig
from thinkscore.forum.repository import ForumRepository
from thinkscore.forum.schemas import VALID_SORTS, ForumComment, ForumPost

__all__ = ["ForumPost", "ForumComment", "ForumConfig", "ForumRepository", "VALID_SORTS"]
