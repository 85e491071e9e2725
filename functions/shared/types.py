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

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class JoinedProject:
    """A project a user has joined, tracked for contribution syncing."""

    project_id: str
    repo_full_name: str


@dataclass
class UserProfile:
    """Schema for the `users/{uid}` document."""

    uid: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    photo_url: Optional[str] = None
    github_username: Optional[str] = None
    bio: str = ""
    skills: List[str] = field(default_factory=list)
    saved_resources: List[str] = field(default_factory=list)
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    points: int = 0
    joined_projects: List[JoinedProject] = field(default_factory=list)


@dataclass
class Project:
    """Schema for the `projects/{id}` document."""

    title: str
    description: str
    skills: List[str]
    author: str
    avatar: str
    repo_full_name: str
    gh_id: int
    id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class GithubOwner:
    login: str
    avatar_url: str


@dataclass
class GithubRepo:
    """The subset of a GitHub repository payload we rely on."""

    id: int
    name: str
    full_name: str
    owner: GithubOwner
    private: bool
    description: Optional[str] = None
    language: Optional[str] = None
    topics: List[str] = field(default_factory=list)


@dataclass
class ContributionSummary:
    merged_pull_requests: int
    points: int


@dataclass
class AuthUser:
    """Identity claims from a verified Firebase ID token."""

    uid: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    photo_url: Optional[str] = None
