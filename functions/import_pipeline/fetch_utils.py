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

import base64
import binascii
import logging
import re
from typing import Optional

import requests
from dacite import DaciteError, from_dict

from shared.types import GithubRepo

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30  # seconds
GITHUB_API_URL = "https://api.github.com"

# Matches https://github.com/<owner>/<repo>, optionally ending in .git and/or "/".
REPO_URL_PATTERN = re.compile(r"github\.com/([^/\s]+)/([^/\s]+?)(?:\.git)?/?$")

INVALID_URL_MESSAGE = "Invalid GitHub repository URL."
REPO_FETCH_FAILED_MESSAGE = (
    "Failed to fetch repository data. The repository might be private or does"
    " not exist."
)


class GithubApiError(Exception):
    """Raised when GitHub returns an error or an unexpected payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _headers(token: Optional[str]) -> dict:
    headers = {"Accept": "application/vnd.github+json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def parse_repo_url(url: str) -> tuple[str, str]:
    """
    Extracts the owner and repository name from a GitHub URL.

    Args:
        url (str): e.g. "https://github.com/owner/repo".

    Returns:
        tuple[str, str]: (owner, repo)

    Raises:
        ValueError: If the URL does not point at a GitHub repository.
    """
    match = REPO_URL_PATTERN.search((url or "").strip())
    if not match:
        raise ValueError(INVALID_URL_MESSAGE)
    return match.group(1), match.group(2)


def fetch_repo(
    owner: str,
    repo: str,
    token: Optional[str] = None,
    api_url: str = GITHUB_API_URL,
) -> GithubRepo:
    """
    Fetches repository metadata from the GitHub REST API.

    Raises:
        GithubApiError: If the request fails or the payload has the wrong shape.
    """
    try:
        response = requests.get(
            f"{api_url}/repos/{owner}/{repo}",
            headers=_headers(token),
            timeout=REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.warning("Repository fetch for %s/%s failed: %s", owner, repo, e)
        raise GithubApiError(REPO_FETCH_FAILED_MESSAGE) from e
    if not response.ok:
        logger.warning(
            "Repository fetch for %s/%s failed with status %s",
            owner,
            repo,
            response.status_code,
        )
        raise GithubApiError(REPO_FETCH_FAILED_MESSAGE, response.status_code)

    try:
        return from_dict(data_class=GithubRepo, data=response.json())
    except (DaciteError, ValueError) as e:
        raise GithubApiError(f"Unexpected repository payload: {e}") from e


def fetch_readme(
    owner: str,
    repo: str,
    token: Optional[str] = None,
    api_url: str = GITHUB_API_URL,
) -> Optional[str]:
    """
    Fetches and decodes a repository's README.

    Returns:
        Optional[str]: The README text, or None if it is missing or unreadable.
    """
    try:
        response = requests.get(
            f"{api_url}/repos/{owner}/{repo}/readme",
            headers=_headers(token),
            timeout=REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.warning("README fetch for %s/%s failed: %s", owner, repo, e)
        return None
    if not response.ok:
        return None

    try:
        content = response.json().get("content")
        if not isinstance(content, str):
            return None
        # GitHub wraps the base64 payload in newlines, which b64decode discards.
        return base64.b64decode(content).decode("utf-8", errors="replace")
    except (ValueError, binascii.Error) as e:
        logger.warning("Unreadable README for %s/%s: %s", owner, repo, e)
        return None


def count_merged_pull_requests(
    repo_full_name: str,
    author: str,
    token: Optional[str] = None,
    api_url: str = GITHUB_API_URL,
) -> Optional[int]:
    """
    Counts pull requests by `author` merged into `repo_full_name`.

    Returns:
        Optional[int]: The count, or None if the search request failed.
    """
    query = f"repo:{repo_full_name} is:pr author:{author} is:merged"
    try:
        response = requests.get(
            f"{api_url}/search/issues",
            params={"q": query},
            headers=_headers(token),
            timeout=REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.warning("Failed to fetch PRs for %s: %s", repo_full_name, e)
        return None
    if not response.ok:
        logger.warning(
            "Failed to fetch PRs for %s. Status: %s",
            repo_full_name,
            response.status_code,
        )
        return None
    return response.json().get("total_count") or 0
