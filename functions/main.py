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

# Cloud functions for Skillync - callable wrappers around the AI flows.
#
# This file containing Python cloud functions must be named main.py.
# See https://cloud.google.com/run/docs/write-functions#python for more info.

# Standard library imports
from typing import Callable, Type, TypeVar

# Third-party library imports
from firebase_admin import initialize_app
from firebase_functions import https_fn, logger, options
from pydantic import BaseModel, ValidationError

# Local application imports
from flows import mentors, project_details, project_ideas, resources, team
from models.gemini import GeminiInvalidResponseException, is_quota_error
from shared.json_utils import convert_keys

initialize_app()

T = TypeVar("T", bound=BaseModel)


def _parse_request(req: https_fn.CallableRequest, model: Type[T]) -> T:
    """Validates the camelCase callable payload against a flow input schema."""
    if req.data is not None and not isinstance(req.data, dict):
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            "Invalid request: data must be an object",
        )
    data = {k: v for k, v in (req.data or {}).items() if k != "apiKey"}
    try:
        return model.model_validate(convert_keys(data, "camel_to_snake"))
    except ValidationError as e:
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            f"Invalid request: {e.errors(include_url=False)}",
        )


def _run_flow(fn: Callable[[], BaseModel]) -> dict:
    try:
        output = fn()
    except GeminiInvalidResponseException as e:
        logger.error(f"Invalid model response: {e}")
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.UNAVAILABLE,
            f"Invalid model response: {e}",
        )
    except Exception as e:
        if is_quota_error(e):
            raise https_fn.HttpsError(
                https_fn.FunctionsErrorCode.RESOURCE_EXHAUSTED,
                f"Gemini quota exceeded: {e}",
            )
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.UNAVAILABLE,
            f"Model call failed: {e}",
        )
    return convert_keys(output.model_dump(), "snake_to_camel")


def _api_key(req: https_fn.CallableRequest) -> str | None:
    return (req.data or {}).get("apiKey") or None


@https_fn.on_call(timeout_sec=120, memory=options.MemoryOption.MB_512)
def suggest_resources(req: https_fn.CallableRequest) -> dict:
    """
    Suggests learning resources for the student's interests.

    Args:
        req (https_fn.CallableRequest): The request, containing `interests`.

    Returns:
        A dictionary with a `resources` list of names.
    """
    request = _parse_request(req, resources.SuggestResourcesInput)
    return _run_flow(
        lambda: resources.suggest_resources(request, api_key=_api_key(req))
    )


@https_fn.on_call(timeout_sec=120, memory=options.MemoryOption.MB_512)
def suggest_projects(req: https_fn.CallableRequest) -> dict:
    """
    Recommends 3-5 portfolio projects with roadmaps for the given skills.

    Args:
        req (https_fn.CallableRequest): The request, containing `skills`.

    Returns:
        A dictionary with a `projects` list.
    """
    request = _parse_request(req, project_ideas.SuggestProjectsInput)
    return _run_flow(
        lambda: project_ideas.suggest_projects(request, api_key=_api_key(req))
    )


@https_fn.on_call(timeout_sec=120, memory=options.MemoryOption.MB_512)
def infer_project_details(req: https_fn.CallableRequest) -> dict:
    request = _parse_request(req, project_details.InferProjectDetailsInput)
    return _run_flow(
        lambda: project_details.infer_project_details(request, api_key=_api_key(req))
    )


@https_fn.on_call(timeout_sec=120, memory=options.MemoryOption.MB_512)
def recommend_mentors(req: https_fn.CallableRequest) -> dict:
    """
    Ranks the supplied mentors for a query.

    Returns:
        A dictionary with `rankedMentors`, mentor uids from best to worst.
    """
    request = _parse_request(req, mentors.RecommendMentorsInput)
    return _run_flow(
        lambda: mentors.recommend_mentors(request, api_key=_api_key(req))
    )


@https_fn.on_call(timeout_sec=120, memory=options.MemoryOption.MB_512)
def recommend_team_members(req: https_fn.CallableRequest) -> dict:
    """
    Ranks the supplied users as team members for a project description.

    Returns:
        A dictionary with `rankedUsers`, user uids from best to worst.
    """
    request = _parse_request(req, team.RecommendTeamMembersInput)
    return _run_flow(
        lambda: team.recommend_team_members(request, api_key=_api_key(req))
    )
