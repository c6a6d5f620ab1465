"""Profile endpoints."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path, status

from thinkscore.api.auth import verify_api_key
from thinkscore.api.dependencies import get_profile_repository
from thinkscore.api.errors import not_found, server_error
from thinkscore.api.models import ProfileCreateRequest, ProfileItem, ProfileUpdateRequest
from thinkscore.errors import ThinkScoreError
from thinkscore.profiles.repository import ProfileRepository

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/profiles")

_ERRORS = not_found("Profile not found")


@router.get("/{profile_id}", response_model=ProfileItem, responses=_ERRORS, summary="Get profile")
async def get_profile(
    profile_id: str = Path(..., description="Account identifier"),
    api_key: str = Depends(verify_api_key),
    repo: ProfileRepository = Depends(get_profile_repository),
) -> ProfileItem:
    try:
        return ProfileItem.model_validate(await repo.get(profile_id))
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("get_profile", e)


@router.post(
    "",
    response_model=ProfileItem,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Create profile",
)
async def create_profile(
    request: ProfileCreateRequest,
    api_key: str = Depends(verify_api_key),
    repo: ProfileRepository = Depends(get_profile_repository),
) -> ProfileItem:
    try:
        created = await repo.create(request.id, display_name=request.display_name, email=request.email)
        logger.info("Profile created", profile_id=created.id)
        return ProfileItem.model_validate(created)
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("create_profile", e)


@router.patch("/{profile_id}", response_model=ProfileItem, responses=_ERRORS, summary="Rename profile")
async def update_profile(
    request: ProfileUpdateRequest,
    profile_id: str = Path(..., description="Account identifier"),
    api_key: str = Depends(verify_api_key),
    repo: ProfileRepository = Depends(get_profile_repository),
) -> ProfileItem:
    try:
        updated = await repo.update(profile_id, request.display_name)
        logger.info("Profile updated", profile_id=profile_id)
        return ProfileItem.model_validate(updated)
    except (HTTPException, ThinkScoreError):
        raise
    except Exception as e:
        raise server_error("update_profile", e)
