"""Skill endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..db import get_session
from ..schemas import MessageResponse, SkillCreate, SkillDTO, SkillListResponse, SkillResponse, SkillUpdate
from . import apply_changes, http_error, not_found

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/skills", tags=["skills"])


async def _get_skill(session: AsyncSession, skill_id: int) -> models.Skill:
    skill = await session.get(models.Skill, skill_id)
    if skill is None:
        raise not_found("Skill", skill_id)
    return skill


def _duplicate_name(name: str):
    return http_error(status.HTTP_409_CONFLICT, "Duplicate skill", f"Skill '{name}' already exists")


@router.get("", response_model=SkillListResponse)
async def list_skills(
    category: str | None = Query(default=None, description="Exact category to filter by"),
    session: AsyncSession = Depends(get_session),
) -> SkillListResponse:
    """List skills, strongest first."""
    query = select(models.Skill).order_by(models.Skill.proficiency.desc(), models.Skill.name)
    if category:
        query = query.where(models.Skill.category == category)
    skills = (await session.execute(query)).scalars().all()
    return SkillListResponse(count=len(skills), data=[SkillDTO.model_validate(s) for s in skills])


@router.get("/top", response_model=SkillListResponse)
async def top_skills(
    limit: int = Query(default=5, ge=1, le=50),
    session: AsyncSession = Depends(get_session),
) -> SkillListResponse:
    """Highest-proficiency skills."""
    query = (
        select(models.Skill)
        .order_by(models.Skill.proficiency.desc(), models.Skill.name)
        .limit(limit)
    )
    skills = (await session.execute(query)).scalars().all()
    return SkillListResponse(count=len(skills), data=[SkillDTO.model_validate(s) for s in skills])


@router.get("/{skill_id}", response_model=SkillResponse)
async def get_skill(skill_id: int, session: AsyncSession = Depends(get_session)) -> SkillResponse:
    skill = await _get_skill(session, skill_id)
    return SkillResponse(data=SkillDTO.model_validate(skill))


@router.post("", response_model=SkillResponse, status_code=status.HTTP_201_CREATED)
async def create_skill(
    request: SkillCreate,
    session: AsyncSession = Depends(get_session),
) -> SkillResponse:
    """Create a skill. Names are unique."""
    existing = await session.execute(select(models.Skill.id).where(models.Skill.name == request.name))
    if existing.first() is not None:
        raise _duplicate_name(request.name)

    skill = models.Skill(**request.model_dump())
    session.add(skill)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise _duplicate_name(request.name)

    await session.refresh(skill)
    logger.info(f"Created skill {skill.id}: {skill.name}")
    return SkillResponse(data=SkillDTO.model_validate(skill))


@router.put("/{skill_id}", response_model=SkillResponse)
async def update_skill(
    skill_id: int,
    request: SkillUpdate,
    session: AsyncSession = Depends(get_session),
) -> SkillResponse:
    skill = await _get_skill(session, skill_id)
    changes = request.model_dump(exclude_unset=True)

    if changes.get("name") and changes["name"] != skill.name:
        clash = await session.execute(
            select(models.Skill.id).where(models.Skill.name == changes["name"], models.Skill.id != skill_id)
        )
        if clash.first() is not None:
            raise _duplicate_name(changes["name"])

    applied = apply_changes(skill, changes, required=("name", "proficiency"))
    await session.commit()
    await session.refresh(skill)

    logger.info(f"Updated skill {skill_id}: {', '.join(applied) or 'no changes'}")
    return SkillResponse(data=SkillDTO.model_validate(skill))


@router.delete("/{skill_id}", response_model=MessageResponse)
async def delete_skill(skill_id: int, session: AsyncSession = Depends(get_session)) -> MessageResponse:
    """Delete a skill and unlink it from every project."""
    skill = await _get_skill(session, skill_id)

    await session.execute(delete(models.project_skills).where(models.project_skills.c.skill_id == skill_id))
    await session.delete(skill)
    await session.commit()

    logger.info(f"Deleted skill {skill_id}")
    return MessageResponse(message=f"Skill {skill_id} deleted")
