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
"""Infers a summary and required skills from repository data."""

from typing import List, Optional
from pydantic import BaseModel, Field

from models import gemini
from models import prompts
from shared.constants import MAX_README_LENGTH


class InferProjectDetailsInput(BaseModel):
    readme_content: str = Field(
        ..., description="The full content of the project's README.md file."
    )
    topics: List[str] = Field(
        default_factory=list,
        description="A list of topics or tags associated with the repository.",
    )
    language: Optional[str] = Field(
        None, description="The primary programming language of the repository."
    )


class InferProjectDetailsOutput(BaseModel):
    skills: List[str] = Field(
        ..., description="An array of inferred skills required for the project."
    )
    description: str = Field(
        ...,
        description=(
            "A concise, one or two-sentence summary of the project based on the"
            " README."
        ),
    )


def infer_project_details(
    request: InferProjectDetailsInput, api_key: str | None = None
) -> InferProjectDetailsOutput:
    prompt = prompts.INFER_PROJECT_DETAILS_PROMPT.format(
        language=request.language or "",
        topics=", ".join(request.topics),
        readme_content=request.readme_content[:MAX_README_LENGTH],
    )
    return gemini.call_predict_with_schema(
        prompt, InferProjectDetailsOutput, api_key=api_key
    )
