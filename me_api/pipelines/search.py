"""Search pipeline: substring lookups across profile, skills, projects and work.

Each entity type gets one case-insensitive LIKE query whose rows are
projected into a common ``SearchResult`` shape. The basic search merges and
ranks the hits; the advanced search filters by type/category and truncates
the merged hits without ranking them.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Awaitable, Callable, Iterable

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from me_api import models
from me_api.config import SearchSettings, settings

logger = logging.getLogger(__name__)


class EntityType(str, Enum):
    """Searchable entity types, in merge order."""
    PROFILE = "profile"
    SKILL = "skill"
    PROJECT = "project"
    WORK = "work"


VALID_TYPES = tuple(t.value for t in EntityType)

PROFILE_CATEGORY = "Profile Information"
PROJECT_CATEGORY = "Project"
WORK_CATEGORY = "Work Experience"

PROFICIENCY_LABELS = {
    5: "Expert level",
    4: "Advanced level",
    3: "Intermediate level",
    2: "Beginner level",
}
DEFAULT_PROFICIENCY_LABEL = "Basic level"


@dataclass(frozen=True)
class SearchResult:
    """Single search hit, tagged with its entity type."""
    type: str
    title: str
    description: str | None
    category: str | None
    id: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class AdvancedSearchResult:
    """Outcome of an advanced search with the filters that produced it."""
    query: str
    type: str | None
    category: str | None
    limit: int
    results: list[SearchResult]


class SearchValidationError(Exception):
    """Raised when search input is rejected before any query runs."""

    def __init__(self, error: str, message: str):
        super().__init__(message)
        self.error = error
        self.message = message


class SearchError(Exception):
    """Raised when the underlying store fails during a search."""
    pass


def normalize_query(raw: str | None, min_length: int | None = None) -> str:
    """Trim the query and enforce the minimum length.

    Raises:
        SearchValidationError: If the query is missing or too short
    """
    if min_length is None:
        min_length = settings.search.min_query_length
    query = (raw or "").strip()
    if len(query) < min_length:
        raise SearchValidationError(
            "Invalid search query",
            f"Search query must be at least {min_length} characters long",
        )
    return query


def parse_entity_type(value: str | None) -> EntityType | None:
    """Validate the optional type filter. Empty means all types.

    Raises:
        SearchValidationError: If the value is not a known entity type
    """
    if not value:
        return None
    try:
        return EntityType(value)
    except ValueError:
        raise SearchValidationError(
            "Invalid type filter",
            f"Type must be one of: {', '.join(VALID_TYPES)}",
        ) from None


def like_pattern(query: str) -> str:
    return f"%{query}%"


def proficiency_label(proficiency: int | None) -> str:
    return PROFICIENCY_LABELS.get(proficiency, DEFAULT_PROFICIENCY_LABEL)


def _title(value: object) -> str:
    # Ranking needs a string; anything else ranks as an empty title
    return value if isinstance(value, str) else ""


async def search_profiles(session: AsyncSession, pattern: str) -> list[SearchResult]:
    query = (
        select(models.Profile)
        .where(
            or_(
                models.Profile.name.ilike(pattern),
                models.Profile.email.ilike(pattern),
                models.Profile.education.ilike(pattern),
            )
        )
        .order_by(models.Profile.id)
    )
    rows = (await session.execute(query)).scalars().all()
    return [
        SearchResult(
            type=EntityType.PROFILE.value,
            title=_title(row.name),
            description=row.email,
            category=PROFILE_CATEGORY,
            id=row.id,
        )
        for row in rows
    ]


async def search_skills(
    session: AsyncSession,
    pattern: str,
    category: str | None = None,
) -> list[SearchResult]:
    query = select(models.Skill).where(
        or_(
            models.Skill.name.ilike(pattern),
            models.Skill.category.ilike(pattern),
        )
    )
    if category:
        query = query.where(models.Skill.category == category)
    rows = (await session.execute(query.order_by(models.Skill.id))).scalars().all()
    return [
        SearchResult(
            type=EntityType.SKILL.value,
            title=_title(row.name),
            description=proficiency_label(row.proficiency),
            category=row.category,
            id=row.id,
        )
        for row in rows
    ]


async def search_projects(session: AsyncSession, pattern: str) -> list[SearchResult]:
    # Column-level select: the skills relationship is not needed here
    query = (
        select(models.Project.id, models.Project.title, models.Project.description)
        .where(
            or_(
                models.Project.title.ilike(pattern),
                models.Project.description.ilike(pattern),
            )
        )
        .order_by(models.Project.id)
    )
    rows = (await session.execute(query)).all()
    return [
        SearchResult(
            type=EntityType.PROJECT.value,
            title=_title(row.title),
            description=row.description,
            category=PROJECT_CATEGORY,
            id=row.id,
        )
        for row in rows
    ]


async def search_work(session: AsyncSession, pattern: str) -> list[SearchResult]:
    query = (
        select(models.WorkExperience)
        .where(
            or_(
                models.WorkExperience.company.ilike(pattern),
                models.WorkExperience.position.ilike(pattern),
                models.WorkExperience.description.ilike(pattern),
            )
        )
        .order_by(models.WorkExperience.id)
    )
    rows = (await session.execute(query)).scalars().all()
    return [
        SearchResult(
            type=EntityType.WORK.value,
            title=_title(row.position),
            description=f"{row.company} - {row.description or ''}",
            category=WORK_CATEGORY,
            id=row.id,
        )
        for row in rows
    ]


async def fan_out(
    session: AsyncSession,
    query: str,
    *,
    entity_type: EntityType | None = None,
    category: str | None = None,
) -> list[SearchResult]:
    """Run one lookup per requested entity type and concatenate the hits.

    Types other than ``entity_type`` (when given) are skipped without a query.
    ``category`` only narrows the skill lookup.
    """
    pattern = like_pattern(query)
    searchers: dict[EntityType, Callable[[], Awaitable[list[SearchResult]]]] = {
        EntityType.PROFILE: lambda: search_profiles(session, pattern),
        EntityType.SKILL: lambda: search_skills(session, pattern, category),
        EntityType.PROJECT: lambda: search_projects(session, pattern),
        EntityType.WORK: lambda: search_work(session, pattern),
    }

    merged: list[SearchResult] = []
    for kind in EntityType:
        if entity_type is not None and kind is not entity_type:
            continue
        hits = await searchers[kind]()
        logger.debug(f"{kind.value} lookup matched {len(hits)} rows")
        merged.extend(hits)
    return merged


def relevance_key(result: SearchResult, query: str) -> tuple[bool, int]:
    """Sort key: exact title matches first, then earliest occurrence of the query.

    A title that does not contain the query (the hit came from another
    column) gets position -1 and sorts ahead of the non-exact titles.
    """
    title = _title(result.title).lower()
    needle = query.lower()
    return (title != needle, title.find(needle))


def rank_results(results: Iterable[SearchResult], query: str) -> list[SearchResult]:
    """Order hits by relevance. The sort is stable, ties keep merge order."""
    return sorted(results, key=lambda r: relevance_key(r, query))


async def global_search(
    session: AsyncSession,
    raw_query: str | None,
    config: SearchSettings | None = None,
) -> tuple[str, list[SearchResult]]:
    """Search every entity type and rank the merged hits.

    Returns:
        The trimmed query and the ranked results

    Raises:
        SearchValidationError: For a missing or too short query
        SearchError: If a database lookup fails
    """
    config = config or settings.search
    query = normalize_query(raw_query, config.min_query_length)
    logger.info(f"Global search: {query!r}")

    try:
        merged = await fan_out(session, query)
    except SQLAlchemyError as e:
        raise SearchError(f"Search lookup failed: {e}") from e

    ranked = rank_results(merged, query)
    logger.info(f"Global search {query!r} matched {len(ranked)} results")
    return query, ranked


async def advanced_search(
    session: AsyncSession,
    raw_query: str | None,
    *,
    type_filter: str | None = None,
    category: str | None = None,
    limit: int | None = None,
    config: SearchSettings | None = None,
) -> AdvancedSearchResult:
    """Search with optional type/category filters and a result cap.

    The merged hits are truncated to ``limit`` in merge order; no ranking
    is applied. Limits above ``max_limit`` are clamped to it, and a limit of
    zero or less yields no results.

    Raises:
        SearchValidationError: For a bad query or type filter
        SearchError: If a database lookup fails
    """
    config = config or settings.search
    query = normalize_query(raw_query, config.min_query_length)
    entity_type = parse_entity_type(type_filter)
    category = category or None
    limit = config.default_limit if limit is None else limit
    limit = max(0, min(limit, config.max_limit))

    logger.info(
        f"Advanced search: {query!r} type={entity_type.value if entity_type else 'all'} "
        f"category={category or 'all'} limit={limit}"
    )

    try:
        merged = await fan_out(session, query, entity_type=entity_type, category=category)
    except SQLAlchemyError as e:
        raise SearchError(f"Advanced search lookup failed: {e}") from e

    return AdvancedSearchResult(
        query=query,
        type=entity_type.value if entity_type else None,
        category=category,
        limit=limit,
        results=merged[:limit],
    )
