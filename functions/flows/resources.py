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
"""Suggests learning resources for a student's interests."""

from typing import List
from pydantic import BaseModel, Field

from models import gemini
from models import prompts


class SuggestResourcesInput(BaseModel):
    interests: str = Field(
        ..., description="The interests of the student, comma separated."
    )


class SuggestResourcesOutput(BaseModel):
    resources: List[str] = Field(
        ..., description="An array of suggested learning resources."
    )


def suggest_resources(
    request: SuggestResourcesInput, api_key: str | None = None
) -> SuggestResourcesOutput:
    prompt = prompts.SUGGEST_RESOURCES_PROMPT.format(interests=request.interests)
    return gemini.call_predict_with_schema(
        prompt, SuggestResourcesOutput, api_key=api_key
    )
