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
"""Ranks mentors against a free-text request."""

from typing import List
from pydantic import BaseModel, Field

from flows.ranking import CandidateProfile, candidates_to_json
from models import gemini
from models import prompts


class RecommendMentorsInput(BaseModel):
    query: str = Field(..., description="The user's request for a mentor.")
    mentors: List[CandidateProfile] = Field(
        ..., description="The list of all available mentors."
    )


class RecommendMentorsOutput(BaseModel):
    ranked_mentors: List[str] = Field(
        ...,
        description="An array of mentor UIDs, ranked from best to worst match.",
    )


def recommend_mentors(
    request: RecommendMentorsInput, api_key: str | None = None
) -> RecommendMentorsOutput:
    prompt = prompts.RECOMMEND_MENTORS_PROMPT.format(
        query=request.query,
        mentors_json=candidates_to_json(request.mentors),
    )
    return gemini.call_predict_with_schema(
        prompt, RecommendMentorsOutput, api_key=api_key
    )
