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
"""Profile and collaboration operations on top of the document store."""

import logging
from typing import Optional

from backend.db import DbClient
from import_pipeline import fetch_utils
from shared.constants import MAX_BIO_LENGTH, POINTS_PER_MERGED_PR
from shared.types import AuthUser, ContributionSummary, JoinedProject, UserProfile

logger = logging.getLogger(__name__)

DEFAULT_BIO_TEMPLATE = "Hi, I'm {name}. I'm new here!"
MISSING_SYNC_INFO_MESSAGE = "Missing profile information to sync contributions."


class ProfileError(ValueError):
    """A profile operation that is not allowed in the profile's current state."""


class ProfileNotFoundError(LookupError):
    pass


class ProjectNotFoundError(LookupError):
    pass


def parse_skills(skills_text: Optional[str]) -> list[str]:
    """Splits comma-separated skills, trimming whitespace and dropping empties."""
    if not skills_text:
        return []
    return [s.strip() for s in skills_text.split(",") if s.strip()]


def _require_profile(db: DbClient, uid: str) -> UserProfile:
    profile = db.get_user(uid)
    if profile is None:
        raise ProfileNotFoundError(f"No profile for user {uid}")
    return profile


def sign_in(
    db: DbClient, user: AuthUser, github_username: Optional[str]
) -> UserProfile:
    """
    Creates the profile on first sign-in, otherwise re-syncs identity fields.

    Only display name, email, photo and GitHub login are refreshed for an
    existing profile so user-edited fields survive.
    """
    identity = {
        "display_name": user.display_name,
        "email": user.email,
        "photo_url": user.photo_url,
        "github_username": github_username or None,
    }
    if db.get_user(user.uid) is None:
        logger.info("Creating profile for new user %s", user.uid)
        db.create_user(
            UserProfile(
                uid=user.uid,
                bio=DEFAULT_BIO_TEMPLATE.format(
                    name=user.display_name or "a new user"
                ),
                **identity,
            )
        )
    else:
        db.update_user(user.uid, identity)
    return _require_profile(db, user.uid)


def update_profile(
    db: DbClient,
    uid: str,
    bio: Optional[str] = None,
    skills: Optional[str] = None,
    linkedin_url: Optional[str] = None,
    twitter_url: Optional[str] = None,
) -> UserProfile:
    """
    Applies an edit-profile form. `skills` is the raw comma-separated text.

    Fields left as None keep their stored value; an empty string clears one.

    Raises:
        ProfileNotFoundError: If the user has no profile.
        ProfileError: If the bio is too long.
    """
    _require_profile(db, uid)
    if bio is not None and len(bio) > MAX_BIO_LENGTH:
        raise ProfileError(f"Bio must be {MAX_BIO_LENGTH} characters or less.")

    changes = {
        "bio": bio,
        "skills": parse_skills(skills) if skills is not None else None,
        "linkedin_url": linkedin_url,
        "twitter_url": twitter_url,
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    if changes:
        db.update_user(uid, changes)
    return _require_profile(db, uid)


def toggle_saved_resource(db: DbClient, uid: str, resource: str) -> tuple[bool, UserProfile]:
    """
    Saves the resource if it is not saved yet, otherwise unsaves it.

    Returns:
        tuple[bool, UserProfile]: Whether the resource is now saved, and the profile.
    """
    profile = _require_profile(db, uid)
    if resource in profile.saved_resources:
        db.remove_saved_resource(uid, resource)
        saved = False
    else:
        db.add_saved_resource(uid, resource)
        saved = True
    return saved, _require_profile(db, uid)


def join_project(db: DbClient, uid: str, project_id: str) -> UserProfile:
    """
    Records that the user joined a project. Joining twice is a no-op.

    Raises:
        ProfileNotFoundError: If the user has no profile.
        ProjectNotFoundError: If the project does not exist.
        ProfileError: If the user is the project's author.
    """
    profile = _require_profile(db, uid)
    project = db.get_project(project_id)
    if project is None:
        raise ProjectNotFoundError(f"No project {project_id}")

    if (
        profile.github_username
        and profile.github_username.lower() == project.author.lower()
    ):
        raise ProfileError("You cannot join your own project.")

    db.add_joined_project(
        uid,
        JoinedProject(project_id=project.id, repo_full_name=project.repo_full_name),
    )
    return _require_profile(db, uid)


def sync_contributions(
    db: DbClient,
    uid: str,
    github_token: Optional[str] = None,
    github_api_url: str = fetch_utils.GITHUB_API_URL,
) -> ContributionSummary:
    """
    Recomputes points from merged pull requests into joined projects.

    Repositories whose lookup fails are skipped. The stored points are
    replaced, not incremented.

    Raises:
        ProfileNotFoundError: If the user has no profile.
        ProfileError: If the profile has no linked GitHub username.
    """
    profile = _require_profile(db, uid)
    if not profile.github_username:
        raise ProfileError(MISSING_SYNC_INFO_MESSAGE)

    total_merged = 0
    for joined in profile.joined_projects:
        count = fetch_utils.count_merged_pull_requests(
            joined.repo_full_name,
            profile.github_username,
            token=github_token,
            api_url=github_api_url,
        )
        if count is None:
            continue
        total_merged += count

    points = total_merged * POINTS_PER_MERGED_PR
    db.update_user(uid, {"points": points})
    logger.info(
        "Awarded %d points to %s for %d merged PRs", points, uid, total_merged
    )
    return ContributionSummary(merged_pull_requests=total_merged, points=points)


def list_profiles(db: DbClient) -> list[UserProfile]:
    return db.list_users()
