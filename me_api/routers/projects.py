"""Project endpoints, including the project/skill links."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..db import get_session
from ..schemas import (
    MessageResponse,
    ProjectCreate,
    ProjectDTO,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
)
from . import apply_changes, http_error, not_found

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["projects"])


async def _load_project(session: AsyncSession, project_id: int) -> models.Project:
    query = (
        select(models.Project)
        .where(models.Project.id == project_id)
        .execution_options(populate_existing=True)
    )
    project = (await session.execute(query)).scalars().first()
    if project is None:
        raise not_found("Project", project_id)
    return project


async def _resolve_skills(session: AsyncSession, skill_ids: list[int]) -> list[models.Skill]:
    """Load the referenced skills, rejecting unknown ids."""
    wanted = set(skill_ids)
    if not wanted:
        return []
    result = await session.execute(select(models.Skill).where(models.Skill.id.in_(wanted)))
    skills = list(result.scalars().all())
    missing = wanted - {s.id for s in skills}
    if missing:
        raise http_error(
            status.HTTP_400_BAD_REQUEST,
            "Invalid skill reference",
            f"Unknown skill ids: {', '.join(str(i) for i in sorted(missing))}",
        )
    return skills


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    skill: str | None = Query(default=None, description="Only projects using this skill name"),
    session: AsyncSession = Depends(get_session),
) -> ProjectListResponse:
    """List projects, newest first."""
    query = select(models.Project).order_by(models.Project.created_at.desc(), models.Project.id.desc())
    if skill:
        query = query.join(models.Project.skills).where(func.lower(models.Skill.name) == skill.lower())
    projects = (await session.execute(query)).scalars().unique().all()
    return ProjectListResponse(count=len(projects), data=[ProjectDTO.model_validate(p) for p in projects])


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: int, session: AsyncSession = Depends(get_session)) -> ProjectResponse:
    project = await _load_project(session, project_id)
    return ProjectResponse(data=ProjectDTO.model_validate(project))


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    request: ProjectCreate,
    session: AsyncSession = Depends(get_session),
) -> ProjectResponse:
    """Create a project linked to existing skills."""
    skills = await _resolve_skills(session, request.skill_ids)

    project = models.Project(**request.model_dump(exclude={"skill_ids"}))
    project.skills = skills
    session.add(project)
    await session.commit()

    logger.info(f"Created project {project.id}: {project.title} ({len(skills)} skills)")
    return ProjectResponse(data=ProjectDTO.model_validate(await _load_project(session, project.id)))


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: int,
    request: ProjectUpdate,
    session: AsyncSession = Depends(get_session),
) -> ProjectResponse:
    project = await _load_project(session, project_id)
    changes = request.model_dump(exclude_unset=True)
    skill_ids = changes.pop("skill_ids", None)

    applied = apply_changes(project, changes, required=("title",))
    if skill_ids is not None:
        project.skills = await _resolve_skills(session, skill_ids)
        applied.append("skills")
    await session.commit()

    logger.info(f"Updated project {project_id}: {', '.join(applied) or 'no changes'}")
    return ProjectResponse(data=ProjectDTO.model_validate(await _load_project(session, project_id)))


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project(project_id: int, session: AsyncSession = Depends(get_session)) -> MessageResponse:
    """Delete a project. Its skill links go with it."""
    project = await _load_project(session, project_id)
    await session.delete(project)
    await session.commit()

    logger.info(f"Deleted project {project_id}")
    return MessageResponse(message=f"Project {project_id} deleted")
