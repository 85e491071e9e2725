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
"""Ranks users to form a team for a project description."""

from typing import List
from pydantic import BaseModel, Field

from flows.ranking import CandidateProfile, candidates_to_json
from models import gemini
from models import prompts


class RecommendTeamMembersInput(BaseModel):
    project_description: str = Field(
        ..., description="A description of the project."
    )
    users: List[CandidateProfile] = Field(
        ..., description="The list of all available users."
    )


class RecommendTeamMembersOutput(BaseModel):
    ranked_users: List[str] = Field(
        ...,
        description=(
            "An array of user UIDs, ranked from best to worst match for the team."
        ),
    )


def recommend_team_members(
    request: RecommendTeamMembersInput, api_key: str | None = None
) -> RecommendTeamMembersOutput:
    prompt = prompts.RECOMMEND_TEAM_MEMBERS_PROMPT.format(
        project_description=request.project_description,
        users_json=candidates_to_json(request.users),
    )
    return gemini.call_predict_with_schema(
        prompt, RecommendTeamMembersOutput, api_key=api_key
    )
