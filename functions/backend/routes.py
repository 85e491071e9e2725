"""
HTTP routes for the Skillync API.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar
from urllib.parse import quote_plus

from fastapi import APIRouter, Depends, HTTPException, Query

from backend.auth import get_current_user
from backend.config import Settings, get_settings
from backend.db import DbClient
from backend.dependencies import get_db_client
from backend.schemas import (
    AddProjectRequest,
    ListProfilesResponse,
    ListProjectsResponse,
    MentorSearchRequest,
    ProfileUpdateRequest,
    ProjectResponse,
    RankedProfilesResponse,
    ResourceSuggestion,
    SavedResourceRequest,
    SavedResourceResponse,
    SignInRequest,
    SuggestResourcesResponse,
    SyncContributionsResponse,
    TeamSearchRequest,
    UserProfileResponse,
)
from flows import mentors, project_details, project_ideas, ranking, resources, team
from import_pipeline import import_pipeline
from import_pipeline.fetch_utils import GithubApiError
from models.gemini import GeminiInvalidResponseException, is_quota_error
from profiles import profiles
from shared.types import AuthUser

logger = logging.getLogger(__name__)

router = APIRouter()

GOOGLE_SEARCH_URL = "https://www.google.com/search?q="

T = TypeVar("T")


def _run_model_call(fn: Callable[[], T]) -> T:
    """Runs a Gemini-backed call, mapping model failures to HTTP errors."""
    try:
        return fn()
    except GeminiInvalidResponseException as e:
        logger.error("Invalid model response: %s", e)
        raise HTTPException(status_code=502, detail="Invalid model response") from e
    except Exception as e:
        if is_quota_error(e):
            raise HTTPException(
                status_code=429, detail=f"Gemini quota exceeded: {e}"
            ) from e
        raise


def _profile_or_404(db: DbClient, uid: str) -> UserProfileResponse:
    profile = db.get_user(uid)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return UserProfileResponse.from_profile(profile)


@router.get("/health")
def health():
    return {"status": "ok"}


@router.post("/auth/sign-in", response_model=UserProfileResponse)
def sign_in(
    payload: SignInRequest,
    user: AuthUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    """
    Called by the client after a GitHub sign-in through Firebase Auth.

    The GitHub login comes from the OAuth provider's profile on the client.
    """
    profile = profiles.sign_in(db, user, payload.github_username)
    return UserProfileResponse.from_profile(profile)


@router.get("/profiles", response_model=ListProfilesResponse)
def list_profiles(db: DbClient = Depends(get_db_client)):
    return ListProfilesResponse(
        profiles=[
            UserProfileResponse.from_profile(p) for p in profiles.list_profiles(db)
        ]
    )


@router.get("/profiles/me", response_model=UserProfileResponse)
def get_my_profile(
    user: AuthUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    return _profile_or_404(db, user.uid)


@router.patch("/profiles/me", response_model=UserProfileResponse)
def update_my_profile(
    payload: ProfileUpdateRequest,
    user: AuthUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    try:
        # Fields the client did not send keep their stored values.
        profile = profiles.update_profile(
            db, user.uid, **payload.model_dump(exclude_unset=True)
        )
    except profiles.ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except profiles.ProfileError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return UserProfileResponse.from_profile(profile)


@router.get("/profiles/{uid}", response_model=UserProfileResponse)
def get_profile(uid: str, db: DbClient = Depends(get_db_client)):
    return _profile_or_404(db, uid)


@router.post("/profiles/me/saved-resources", response_model=SavedResourceResponse)
def toggle_saved_resource(
    payload: SavedResourceRequest,
    user: AuthUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    try:
        saved, profile = profiles.toggle_saved_resource(
            db, user.uid, payload.resource
        )
    except profiles.ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return SavedResourceResponse(
        resource=payload.resource,
        saved=saved,
        saved_resources=profile.saved_resources,
    )


@router.post(
    "/profiles/me/sync-contributions", response_model=SyncContributionsResponse
)
def sync_contributions(
    user: AuthUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    try:
        summary = profiles.sync_contributions(
            db,
            user.uid,
            github_token=settings.github_token,
            github_api_url=settings.github_api_url,
        )
    except profiles.ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except profiles.ProfileError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return SyncContributionsResponse(
        merged_pull_requests=summary.merged_pull_requests, points=summary.points
    )


@router.get("/projects", response_model=ListProjectsResponse)
def list_projects(
    limit: int = Query(100, ge=1, le=500),
    db: DbClient = Depends(get_db_client),
):
    return ListProjectsResponse(
        projects=[ProjectResponse.from_project(p) for p in db.list_projects(limit)]
    )


@router.post("/projects", response_model=ProjectResponse, status_code=201)
def add_project(
    payload: AddProjectRequest,
    user: AuthUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    """
    Adds one of the caller's public GitHub repositories to the board.
    """
    profile = db.get_user(user.uid)
    github_username = profile.github_username if profile else None
    try:
        project = _run_model_call(
            lambda: import_pipeline.import_github_project(
                payload.github_url,
                github_username,
                api_key=settings.gemini_api_key,
                github_token=settings.github_token,
                github_api_url=settings.github_api_url,
            )
        )
    except import_pipeline.ProjectImportError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except GithubApiError as e:
        status_code = 404 if e.status_code == 404 else 502
        raise HTTPException(status_code=status_code, detail=str(e)) from e

    stored = db.add_project(project)
    logger.info("Added project %s (%s)", stored.id, stored.repo_full_name)
    return ProjectResponse.from_project(stored)


@router.post("/projects/{project_id}/join", response_model=UserProfileResponse)
def join_project(
    project_id: str,
    user: AuthUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    try:
        profile = profiles.join_project(db, user.uid, project_id)
    except (profiles.ProfileNotFoundError, profiles.ProjectNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except profiles.ProfileError as e:
        raise HTTPException(status_code=403, detail=str(e)) from e
    return UserProfileResponse.from_profile(profile)


@router.post("/mentors/search", response_model=RankedProfilesResponse)
def search_mentors(
    payload: MentorSearchRequest,
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    all_profiles = profiles.list_profiles(db)
    if not payload.query.strip():
        ranked_profiles, is_ranked = all_profiles, False
    else:
        result = _run_model_call(
            lambda: mentors.recommend_mentors(
                mentors.RecommendMentorsInput(
                    query=payload.query,
                    mentors=[ranking.to_candidate(p) for p in all_profiles],
                ),
                api_key=settings.gemini_api_key,
            )
        )
        ranked_profiles = ranking.apply_ranking(all_profiles, result.ranked_mentors)
        is_ranked = True
    return RankedProfilesResponse(
        profiles=[UserProfileResponse.from_profile(p) for p in ranked_profiles],
        ranked=is_ranked,
    )


@router.post("/team/search", response_model=RankedProfilesResponse)
def search_team(
    payload: TeamSearchRequest,
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    all_profiles = profiles.list_profiles(db)
    if not payload.project_description.strip():
        ranked_profiles, is_ranked = all_profiles, False
    else:
        result = _run_model_call(
            lambda: team.recommend_team_members(
                team.RecommendTeamMembersInput(
                    project_description=payload.project_description,
                    users=[ranking.to_candidate(p) for p in all_profiles],
                ),
                api_key=settings.gemini_api_key,
            )
        )
        ranked_profiles = ranking.apply_ranking(all_profiles, result.ranked_users)
        is_ranked = True
    return RankedProfilesResponse(
        profiles=[UserProfileResponse.from_profile(p) for p in ranked_profiles],
        ranked=is_ranked,
    )


@router.post("/ai/suggest-projects", response_model=project_ideas.SuggestProjectsOutput)
def suggest_projects(
    payload: project_ideas.SuggestProjectsInput,
    settings: Settings = Depends(get_settings),
):
    if not payload.skills.strip():
        raise HTTPException(status_code=400, detail="skills must not be empty")
    return _run_model_call(
        lambda: project_ideas.suggest_projects(
            payload, api_key=settings.gemini_api_key
        )
    )


@router.post("/ai/suggest-resources", response_model=SuggestResourcesResponse)
def suggest_resources(
    payload: resources.SuggestResourcesInput,
    settings: Settings = Depends(get_settings),
):
    if not payload.interests.strip():
        raise HTTPException(status_code=400, detail="interests must not be empty")
    result = _run_model_call(
        lambda: resources.suggest_resources(payload, api_key=settings.gemini_api_key)
    )
    return SuggestResourcesResponse(
        resources=[
            ResourceSuggestion(
                name=name, search_url=GOOGLE_SEARCH_URL + quote_plus(name)
            )
            for name in result.resources
        ]
    )


@router.post(
    "/ai/infer-project-details",
    response_model=project_details.InferProjectDetailsOutput,
)
def infer_project_details(
    payload: project_details.InferProjectDetailsInput,
    settings: Settings = Depends(get_settings),
):
    return _run_model_call(
        lambda: project_details.infer_project_details(
            payload, api_key=settings.gemini_api_key
        )
    )
