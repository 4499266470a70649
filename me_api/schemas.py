"""Pydantic request/response models for the HTTP API."""
from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator


class ErrorResponse(BaseModel):
    """Error response."""
    error: str
    message: str


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


# Profile
class ProfileBase(BaseModel):
    education: str | None = None
    github: str | None = Field(default=None, max_length=500)
    linkedin: str | None = Field(default=None, max_length=500)
    portfolio: str | None = Field(default=None, max_length=500)


class ProfileCreate(ProfileBase):
    """Create profile request."""
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr


class ProfileUpdate(ProfileBase):
    """Partial profile update; omitted fields are left unchanged."""
    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None


class ProfileDTO(ProfileBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime


class ProfileResponse(BaseModel):
    success: bool = True
    data: ProfileDTO


# Skills
class SkillCreate(BaseModel):
    """Create skill request."""
    name: str = Field(min_length=1, max_length=255)
    proficiency: int = Field(ge=1, le=5)
    category: str | None = Field(default=None, max_length=100)


class SkillUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    proficiency: int | None = Field(default=None, ge=1, le=5)
    category: str | None = Field(default=None, max_length=100)


class SkillDTO(BaseModel):
    """Skill data transfer object."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    proficiency: int | None
    category: str | None
    created_at: datetime


class SkillResponse(BaseModel):
    success: bool = True
    data: SkillDTO


class SkillListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[SkillDTO]


# Projects
class ProjectBase(BaseModel):
    description: str | None = None
    github_link: str | None = Field(default=None, max_length=500)
    live_link: str | None = Field(default=None, max_length=500)


class ProjectCreate(ProjectBase):
    """Create project request."""
    title: str = Field(min_length=1, max_length=255)
    skill_ids: list[int] = Field(default_factory=list)


class ProjectUpdate(ProjectBase):
    """Partial project update. ``skill_ids`` replaces the linked skills when given."""
    title: str | None = Field(default=None, min_length=1, max_length=255)
    skill_ids: list[int] | None = None


class ProjectDTO(ProjectBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    skills: list[SkillDTO] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class ProjectResponse(BaseModel):
    success: bool = True
    data: ProjectDTO


class ProjectListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[ProjectDTO]


# Work experience
class WorkBase(BaseModel):
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None


class WorkCreate(WorkBase):
    """Create work experience request."""
    company: str = Field(min_length=1, max_length=255)
    position: str = Field(min_length=1, max_length=255)
    current: bool = False

    @model_validator(mode="after")
    def check_dates(self) -> WorkCreate:
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class WorkUpdate(WorkBase):
    company: str | None = Field(default=None, min_length=1, max_length=255)
    position: str | None = Field(default=None, min_length=1, max_length=255)
    current: bool | None = None


class WorkDTO(WorkBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company: str
    position: str
    current: bool
    created_at: datetime


class WorkResponse(BaseModel):
    success: bool = True
    data: WorkDTO


class WorkListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[WorkDTO]


# Search
class SearchResultDTO(BaseModel):
    """Single search hit, normalized across entity types."""
    type: Literal["profile", "skill", "project", "work"]
    title: str
    description: str | None
    category: str | None
    id: int


class SearchResponse(BaseModel):
    success: bool = True
    query: str
    count: int
    data: list[SearchResultDTO]


class AdvancedSearchResponse(BaseModel):
    success: bool = True
    query: str
    type: str
    category: str
    count: int
    data: list[SearchResultDTO]
