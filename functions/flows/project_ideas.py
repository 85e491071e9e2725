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
"""Recommends portfolio project ideas, with roadmaps, from a user's skills."""

from typing import List
from pydantic import BaseModel, Field

from models import gemini
from models import prompts


class SuggestProjectsInput(BaseModel):
    skills: str = Field(
        ..., description="The skills the user has, comma-separated."
    )


class ProjectIdea(BaseModel):
    title: str = Field(
        ..., description="A catchy and descriptive title for the project."
    )
    description: str = Field(
        ...,
        description=(
            "A one or two-paragraph summary of what the project is, its purpose,"
            " and its key features."
        ),
    )
    roadmap: List[str] = Field(
        ...,
        description=(
            "An array of clear, actionable steps or milestones to build the"
            " project from start to finish."
        ),
    )


class SuggestProjectsOutput(BaseModel):
    projects: List[ProjectIdea] = Field(
        ..., description="An array of 3-5 recommended project ideas."
    )


def suggest_projects(
    request: SuggestProjectsInput, api_key: str | None = None
) -> SuggestProjectsOutput:
    prompt = prompts.SUGGEST_PROJECTS_PROMPT.format(skills=request.skills)
    return gemini.call_predict_with_schema(
        prompt, SuggestProjectsOutput, api_key=api_key
    )
