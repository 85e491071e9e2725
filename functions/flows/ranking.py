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
"""Shared pieces of the mentor and team ranking flows."""

import json
from typing import Iterable, List, Optional
from pydantic import BaseModel, Field

from shared.types import UserProfile


class CandidateProfile(BaseModel):
    """The slice of a profile that is shown to the model for ranking."""

    uid: str = Field(..., description="The unique identifier for the user.")
    display_name: Optional[str] = Field(None, description="The display name.")
    bio: Optional[str] = Field(None, description="A short biography.")
    skills: List[str] = Field(
        default_factory=list, description="A list of technical skills."
    )
    github_username: Optional[str] = Field(
        None, description="The GitHub username."
    )


def to_candidate(profile: UserProfile) -> CandidateProfile:
    return CandidateProfile(
        uid=profile.uid,
        display_name=profile.display_name,
        bio=profile.bio,
        skills=profile.skills,
        github_username=profile.github_username,
    )


def candidates_to_json(candidates: Iterable[CandidateProfile]) -> str:
    return json.dumps(
        [c.model_dump(exclude_none=True) for c in candidates], indent=2
    )


def apply_ranking(
    profiles: List[UserProfile], ranked_uids: List[str]
) -> List[UserProfile]:
    """
    Orders profiles by the model's ranking.

    Uids the model invented are dropped, repeated uids keep their first
    position, and profiles the model left out are not returned.
    """
    by_uid = {p.uid: p for p in profiles}
    seen = set()
    ranked = []
    for uid in ranked_uids:
        if uid in seen or uid not in by_uid:
            continue
        seen.add(uid)
        ranked.append(by_uid[uid])
    return ranked
