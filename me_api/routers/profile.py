"""Profile endpoints. The profile is a singleton: at most one row exists."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..db import get_session
from ..schemas import ProfileCreate, ProfileDTO, ProfileResponse, ProfileUpdate
from . import apply_changes, http_error, not_found

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profile", tags=["profile"])


async def _current_profile(session: AsyncSession) -> models.Profile | None:
    result = await session.execute(select(models.Profile).order_by(models.Profile.id).limit(1))
    return result.scalars().first()


async def _email_taken(session: AsyncSession, email: str, exclude_id: int | None = None) -> bool:
    query = select(models.Profile.id).where(models.Profile.email == email)
    if exclude_id is not None:
        query = query.where(models.Profile.id != exclude_id)
    return (await session.execute(query)).first() is not None


@router.get("", response_model=ProfileResponse)
async def get_profile(session: AsyncSession = Depends(get_session)) -> ProfileResponse:
    """Return the profile."""
    profile = await _current_profile(session)
    if profile is None:
        raise not_found("Profile")
    return ProfileResponse(data=ProfileDTO.model_validate(profile))


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(
    request: ProfileCreate,
    session: AsyncSession = Depends(get_session),
) -> ProfileResponse:
    """Create the profile. Fails with 409 once one exists."""
    if await _current_profile(session) is not None:
        raise http_error(
            status.HTTP_409_CONFLICT,
            "Profile already exists",
            "Use PUT /api/profile to update the existing profile",
        )

    profile = models.Profile(**request.model_dump())
    session.add(profile)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise http_error(status.HTTP_409_CONFLICT, "Duplicate email", f"Email {request.email} is already in use")

    await session.refresh(profile)
    logger.info(f"Created profile {profile.id}")
    return ProfileResponse(data=ProfileDTO.model_validate(profile))


@router.put("", response_model=ProfileResponse)
async def update_profile(
    request: ProfileUpdate,
    session: AsyncSession = Depends(get_session),
) -> ProfileResponse:
    """Update the provided profile fields."""
    profile = await _current_profile(session)
    if profile is None:
        raise not_found("Profile")

    changes = request.model_dump(exclude_unset=True)
    if changes.get("email") and await _email_taken(session, changes["email"], exclude_id=profile.id):
        raise http_error(status.HTTP_409_CONFLICT, "Duplicate email", f"Email {changes['email']} is already in use")

    applied = apply_changes(profile, changes, required=("name", "email"))
    await session.commit()
    await session.refresh(profile)

    logger.info(f"Updated profile {profile.id}: {', '.join(applied) or 'no changes'}")
    return ProfileResponse(data=ProfileDTO.model_validate(profile))
