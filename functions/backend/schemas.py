"""
Pydantic schemas for the Skillync FastAPI backend.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, field_validator

from shared.constants import (
    MAX_BIO_LENGTH,
    MAX_PROJECT_DESCRIPTION_LENGTH,
    MAX_QUERY_LENGTH,
    MAX_RESOURCE_NAME_LENGTH,
    MAX_SKILLS_TEXT_LENGTH,
)
from shared.types import Project, UserProfile

_http_url = TypeAdapter(HttpUrl)


class SignInRequest(BaseModel):
    github_username: Optional[str] = Field(default=None, max_length=39)


class JoinedProjectResponse(BaseModel):
    project_id: str
    repo_full_name: str


class UserProfileResponse(BaseModel):
    uid: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    photo_url: Optional[str] = None
    github_username: Optional[str] = None
    bio: str = ""
    skills: list[str] = []
    saved_resources: list[str] = []
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    points: int = 0
    joined_projects: list[JoinedProjectResponse] = []

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "UserProfileResponse":
        return cls(**asdict(profile))


class ListProfilesResponse(BaseModel):
    profiles: list[UserProfileResponse]


class ProfileUpdateRequest(BaseModel):
    bio: Optional[str] = Field(default=None, max_length=MAX_BIO_LENGTH)
    skills: Optional[str] = Field(
        default=None,
        max_length=MAX_SKILLS_TEXT_LENGTH,
        description="Comma-separated skills.",
    )
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None

    @field_validator("linkedin_url", "twitter_url")
    @classmethod
    def _valid_url_or_empty(cls, value: Optional[str]) -> Optional[str]:
        if value:
            try:
                _http_url.validate_python(value)
            except ValueError as e:
                raise ValueError("Please enter a valid URL.") from e
        return value


class SavedResourceRequest(BaseModel):
    resource: str = Field(..., min_length=1, max_length=MAX_RESOURCE_NAME_LENGTH)


class SavedResourceResponse(BaseModel):
    resource: str
    saved: bool
    saved_resources: list[str]


class SyncContributionsResponse(BaseModel):
    merged_pull_requests: int
    points: int


class ProjectResponse(BaseModel):
    id: str
    title: str
    description: str
    skills: list[str]
    author: str
    avatar: str
    repo_full_name: str
    gh_id: int
    created_at: Optional[datetime] = None

    @classmethod
    def from_project(cls, project: Project) -> "ProjectResponse":
        return cls(**asdict(project))


class ListProjectsResponse(BaseModel):
    projects: list[ProjectResponse]


class AddProjectRequest(BaseModel):
    github_url: str = Field(..., min_length=1, max_length=500)


class MentorSearchRequest(BaseModel):
    query: str = Field(default="", max_length=MAX_QUERY_LENGTH)


class TeamSearchRequest(BaseModel):
    project_description: str = Field(
        default="", max_length=MAX_PROJECT_DESCRIPTION_LENGTH
    )


class RankedProfilesResponse(BaseModel):
    profiles: list[UserProfileResponse]
    ranked: bool


class ResourceSuggestion(BaseModel):
    name: str
    search_url: str


class SuggestResourcesResponse(BaseModel):
    resources: list[ResourceSuggestion]
