"""Work experience endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..db import get_session
from ..schemas import MessageResponse, WorkCreate, WorkDTO, WorkListResponse, WorkResponse, WorkUpdate
from . import apply_changes, http_error, not_found

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/work", tags=["work"])


async def _get_work(session: AsyncSession, work_id: int) -> models.WorkExperience:
    work = await session.get(models.WorkExperience, work_id)
    if work is None:
        raise not_found("Work experience", work_id)
    return work


@router.get("", response_model=WorkListResponse)
async def list_work(session: AsyncSession = Depends(get_session)) -> WorkListResponse:
    """Current positions first, then most recent start date."""
    query = select(models.WorkExperience).order_by(
        models.WorkExperience.current.desc(),
        models.WorkExperience.start_date.desc(),
        models.WorkExperience.id.desc(),
    )
    entries = (await session.execute(query)).scalars().all()
    return WorkListResponse(count=len(entries), data=[WorkDTO.model_validate(w) for w in entries])


@router.get("/{work_id}", response_model=WorkResponse)
async def get_work(work_id: int, session: AsyncSession = Depends(get_session)) -> WorkResponse:
    work = await _get_work(session, work_id)
    return WorkResponse(data=WorkDTO.model_validate(work))


@router.post("", response_model=WorkResponse, status_code=status.HTTP_201_CREATED)
async def create_work(
    request: WorkCreate,
    session: AsyncSession = Depends(get_session),
) -> WorkResponse:
    work = models.WorkExperience(**request.model_dump())
    session.add(work)
    await session.commit()
    await session.refresh(work)

    logger.info(f"Created work experience {work.id}: {work.position} at {work.company}")
    return WorkResponse(data=WorkDTO.model_validate(work))


@router.put("/{work_id}", response_model=WorkResponse)
async def update_work(
    work_id: int,
    request: WorkUpdate,
    session: AsyncSession = Depends(get_session),
) -> WorkResponse:
    work = await _get_work(session, work_id)
    changes = request.model_dump(exclude_unset=True)

    start = changes.get("start_date", work.start_date)
    end = changes.get("end_date", work.end_date)
    if start and end and end < start:
        raise http_error(
            status.HTTP_400_BAD_REQUEST,
            "Invalid date range",
            "end_date must not be before start_date",
        )

    applied = apply_changes(work, changes, required=("company", "position", "current"))
    await session.commit()
    await session.refresh(work)

    logger.info(f"Updated work experience {work_id}: {', '.join(applied) or 'no changes'}")
    return WorkResponse(data=WorkDTO.model_validate(work))


@router.delete("/{work_id}", response_model=MessageResponse)
async def delete_work(work_id: int, session: AsyncSession = Depends(get_session)) -> MessageResponse:
    work = await _get_work(session, work_id)
    await session.delete(work)
    await session.commit()

    logger.info(f"Deleted work experience {work_id}")
    return MessageResponse(message=f"Work experience {work_id} deleted")
