"""Forum endpoints: posts, comments and likes.

Reads are open to any API key holder; writes act as the X-User-ID user.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from thinkscore.api.auth import get_current_user_id, verify_api_key
from thinkscore.api.dependencies import get_forum_repository
from thinkscore.api.errors import not_found, server_error
from thinkscore.api.models import (
    CommentCreateRequest,
    CommentItem,
    DeleteResponse,
    LikeResponse,
    PostCreateRequest,
    PostItem,
    PostUpdateRequest,
)
from thinkscore.errors import ThinkScoreError
from thinkscore.forum.repository import ForumRepository

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/forum")

_ERRORS = not_found("Post not found")


# ── Posts ────────────────────────────────────────────────


@router.get("/posts", response_model=list[PostItem], responses=_ERRORS, summary="List posts")
async def list_posts(
    category: str | None = Query(default=None, description='Category, or "all"'),
    sort: str = Query(default="all", description='"recent", "popular" or "all"'),
    api_key: str = Depends(verify_api_key),
    repo: ForumRepository = Depends(get_forum_repository),
) -> list[PostItem]:
    try:
        return [PostItem.model_validate(p) for p in await repo.list_posts(category, sort)]
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("list_posts", e)


@router.get("/posts/{post_id}", response_model=PostItem, responses=_ERRORS, summary="Get post")
async def get_post(
    post_id: int = Path(..., description="Post identifier"),
    api_key: str = Depends(verify_api_key),
    repo: ForumRepository = Depends(get_forum_repository),
) -> PostItem:
    try:
        return PostItem.model_validate(await repo.get_post(post_id))
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("get_post", e)


@router.post(
    "/posts",
    response_model=PostItem,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Create post",
)
async def create_post(
    request: PostCreateRequest,
    api_key: str = Depends(verify_api_key),
    user_id: str = Depends(get_current_user_id),
    repo: ForumRepository = Depends(get_forum_repository),
) -> PostItem:
    try:
        created = await repo.create_post(
            user_id,
            request.title,
            request.content,
            category=request.category,
            question_id=request.question_id,
        )
        logger.info("Post created", post_id=created.id, category=created.category)
        return PostItem.model_validate(created)
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("create_post", e)


@router.patch("/posts/{post_id}", response_model=PostItem, responses=_ERRORS, summary="Edit own post")
async def update_post(
    request: PostUpdateRequest,
    post_id: int = Path(..., description="Post identifier"),
    api_key: str = Depends(verify_api_key),
    user_id: str = Depends(get_current_user_id),
    repo: ForumRepository = Depends(get_forum_repository),
) -> PostItem:
    try:
        updated = await repo.update_post(post_id, user_id, request.model_dump(exclude_unset=True))
        return PostItem.model_validate(updated)
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("update_post", e)


@router.delete("/posts/{post_id}", response_model=DeleteResponse, responses=_ERRORS, summary="Delete own post")
async def delete_post(
    post_id: int = Path(..., description="Post identifier"),
    api_key: str = Depends(verify_api_key),
    user_id: str = Depends(get_current_user_id),
    repo: ForumRepository = Depends(get_forum_repository),
) -> DeleteResponse:
    try:
        await repo.delete_post(post_id, user_id)
        logger.info("Post deleted", post_id=post_id)
        return DeleteResponse()
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("delete_post", e)


@router.post("/posts/{post_id}/like", response_model=LikeResponse, responses=_ERRORS, summary="Toggle like")
async def toggle_like(
    post_id: int = Path(..., description="Post identifier"),
    api_key: str = Depends(verify_api_key),
    user_id: str = Depends(get_current_user_id),
    repo: ForumRepository = Depends(get_forum_repository),
) -> LikeResponse:
    try:
        return LikeResponse(liked=await repo.toggle_like(post_id, user_id))
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("toggle_like", e)


# ── Comments ─────────────────────────────────────────────


@router.get(
    "/posts/{post_id}/comments",
    response_model=list[CommentItem],
    responses=_ERRORS,
    summary="Comments on a post",
)
async def list_comments(
    post_id: int = Path(..., description="Post identifier"),
    api_key: str = Depends(verify_api_key),
    repo: ForumRepository = Depends(get_forum_repository),
) -> list[CommentItem]:
    try:
        return [CommentItem.model_validate(c) for c in await repo.list_comments(post_id)]
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("list_comments", e)


@router.post(
    "/comments",
    response_model=CommentItem,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Add comment",
)
async def create_comment(
    request: CommentCreateRequest,
    api_key: str = Depends(verify_api_key),
    user_id: str = Depends(get_current_user_id),
    repo: ForumRepository = Depends(get_forum_repository),
) -> CommentItem:
    try:
        created = await repo.create_comment(request.post_id, user_id, request.content)
        logger.info("Comment created", comment_id=created.id, post_id=created.post_id)
        return CommentItem.model_validate(created)
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("create_comment", e)
