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

import logging
from typing import Optional

from flows import project_details
from import_pipeline import fetch_utils
from shared.constants import NO_SKILLS_INFERRED
from shared.types import Project

logger = logging.getLogger(__name__)

GITHUB_NOT_LINKED_MESSAGE = (
    "Your GitHub username is not linked. Please try logging out and back in to"
    " sync your account."
)
PRIVATE_REPO_MESSAGE = "Only public repositories can be added."


class ProjectImportError(ValueError):
    """A repository that cannot be added to the collaboration board."""


def import_github_project(
    github_url: str,
    github_username: Optional[str],
    api_key: str | None = None,
    github_token: Optional[str] = None,
    github_api_url: str = fetch_utils.GITHUB_API_URL,
) -> Project:
    """
    Builds a Project from a public GitHub repository owned by the caller.

    Fetches the repository and its README, then asks the model for a short
    summary and the skills needed to contribute.

    Args:
        github_url (str): The repository URL entered by the user.
        github_username (Optional[str]): The caller's linked GitHub login.
        api_key (str | None): Gemini API key override.
        github_token (Optional[str]): GitHub token for higher rate limits.
        github_api_url (str): GitHub REST API base URL.

    Returns:
        Project: The unsaved project (no id or creation time yet).

    Raises:
        ProjectImportError: If the URL, owner or visibility is not acceptable.
        fetch_utils.GithubApiError: If GitHub could not return the repository.
    """
    try:
        owner, repo_name = fetch_utils.parse_repo_url(github_url)
    except ValueError as e:
        raise ProjectImportError(str(e)) from e

    if not github_username:
        raise ProjectImportError(GITHUB_NOT_LINKED_MESSAGE)

    repo = fetch_utils.fetch_repo(
        owner, repo_name, token=github_token, api_url=github_api_url
    )
    if repo.private:
        raise ProjectImportError(PRIVATE_REPO_MESSAGE)

    if repo.owner.login.lower() != github_username.lower():
        raise ProjectImportError(
            "You can only add your own public repositories. This repository is"
            f' owned by "{repo.owner.login}".'
        )

    readme_content = fetch_utils.fetch_readme(
        owner, repo_name, token=github_token, api_url=github_api_url
    )
    if readme_content is None:
        logger.info("No README for %s, using the description", repo.full_name)
        readme_content = repo.description or ""

    details = project_details.infer_project_details(
        project_details.InferProjectDetailsInput(
            readme_content=readme_content,
            topics=repo.topics,
            language=repo.language,
        ),
        api_key=api_key,
    )

    return Project(
        title=repo.name,
        repo_full_name=repo.full_name,
        description=details.description,
        skills=details.skills or [NO_SKILLS_INFERRED],
        author=repo.owner.login,
        avatar=repo.owner.avatar_url,
        gh_id=repo.id,
    )
