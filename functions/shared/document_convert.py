# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

"""Conversion between dataclasses and the camelCase documents stored in Firestore."""

from typing import Any, Optional

from shared.types import JoinedProject, Project, UserProfile

# Document field names for UserProfile attributes. These match the web client,
# so they are not a plain snake_to_camel conversion (e.g. photoURL).
PROFILE_FIELD_NAMES = {
    "uid": "uid",
    "display_name": "displayName",
    "email": "email",
    "photo_url": "photoURL",
    "github_username": "githubUsername",
    "bio": "bio",
    "skills": "skills",
    "saved_resources": "savedResources",
    "linkedin_url": "linkedinUrl",
    "twitter_url": "twitterUrl",
    "points": "points",
    "joined_projects": "joinedProjects",
}


def _get_value(data: dict, *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def joined_project_to_dict(joined: JoinedProject) -> dict:
    return {"projectId": joined.project_id, "repoFullName": joined.repo_full_name}


def _to_joined_project(data: dict) -> JoinedProject:
    return JoinedProject(
        project_id=_get_value(data, "projectId", "project_id") or "",
        repo_full_name=_get_value(data, "repoFullName", "repo_full_name") or "",
    )


def profile_changes_to_dict(changes: dict) -> dict:
    """
    Maps a {attribute: value} dict of UserProfile changes to document fields.

    Raises:
        KeyError: If an attribute is not a UserProfile field.
    """
    result = {}
    for key, value in changes.items():
        if key == "joined_projects":
            value = [joined_project_to_dict(j) for j in value]
        result[PROFILE_FIELD_NAMES[key]] = value
    return result


def profile_to_dict(profile: UserProfile) -> dict:
    return profile_changes_to_dict(
        {attr: getattr(profile, attr) for attr in PROFILE_FIELD_NAMES}
    )


def profile_from_dict(data: dict, uid: Optional[str] = None) -> UserProfile:
    """
    Builds a UserProfile from a stored document.

    Older documents may lack list fields or points; they read back as empty/0.
    """
    return UserProfile(
        uid=uid or _get_value(data, "uid") or "",
        display_name=_get_value(data, "displayName", "display_name"),
        email=_get_value(data, "email"),
        photo_url=_get_value(data, "photoURL", "photo_url"),
        github_username=_get_value(data, "githubUsername", "github_username"),
        bio=_get_value(data, "bio") or "",
        skills=list(_get_value(data, "skills") or []),
        saved_resources=list(
            _get_value(data, "savedResources", "saved_resources") or []
        ),
        linkedin_url=_get_value(data, "linkedinUrl", "linkedin_url"),
        twitter_url=_get_value(data, "twitterUrl", "twitter_url"),
        points=_get_value(data, "points") or 0,
        joined_projects=[
            _to_joined_project(item)
            for item in _get_value(data, "joinedProjects", "joined_projects") or []
        ],
    )


def project_to_dict(project: Project) -> dict:
    """The `id` is the document key and is not stored in the document body."""
    return {
        "title": project.title,
        "description": project.description,
        "skills": list(project.skills),
        "author": project.author,
        "avatar": project.avatar,
        "repoFullName": project.repo_full_name,
        "gh_id": project.gh_id,
        "createdAt": project.created_at,
    }


def project_from_dict(data: dict, project_id: Optional[str] = None) -> Project:
    return Project(
        id=project_id or _get_value(data, "id"),
        title=_get_value(data, "title") or "",
        description=_get_value(data, "description") or "",
        skills=list(_get_value(data, "skills") or []),
        author=_get_value(data, "author") or "",
        avatar=_get_value(data, "avatar") or "",
        repo_full_name=_get_value(data, "repoFullName", "repo_full_name") or "",
        gh_id=_get_value(data, "gh_id", "ghId") or 0,
        created_at=_get_value(data, "createdAt", "created_at"),
    )
