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

import time
import logging
from google import genai
from google.genai import errors
from models import api_config
from typing import Type, TypeVar

logger = logging.getLogger(__name__)

API_KEY_LOGGING_MESSAGE = "Ran with user-specified API key"
QUOTA_EXCEEDED_STATUS = 429

T = TypeVar("T")


class GeminiInvalidResponseException(Exception):
    pass


def is_quota_error(error: Exception) -> bool:
    """True if the error is Gemini rejecting the call for rate/quota reasons."""
    return (
        isinstance(error, errors.APIError)
        and getattr(error, "code", None) == QUOTA_EXCEEDED_STATUS
    )


def call_predict_with_schema(
    query: str,
    response_schema: Type[T],
    model: str | None = None,
    api_key: str | None = None,
) -> T:
    """
    Calls Gemini with a response schema for structured output.

    Args:
        query (str): The filled prompt.
        response_schema (Type[T]): A pydantic model describing the JSON reply.
        model (str | None): Model name, defaults to api_config.DEFAULT_MODEL.
        api_key (str | None): Overrides the default API key.

    Returns:
        T: The parsed response.

    Raises:
        GeminiInvalidResponseException: If the reply could not be parsed.
        google.genai.errors.APIError: If the call itself failed.
    """
    if not api_key:
        api_key = api_config.DEFAULT_API_KEY
    else:
        logger.info(API_KEY_LOGGING_MESSAGE)

    client = genai.Client(api_key=api_key)
    start_time = time.time()
    truncated_query = (query[:200] + "...") if len(query) > 200 else query
    logger.info("Calling Gemini with schema, prompt: '%s'", truncated_query)
    response = client.models.generate_content(
        model=model or api_config.DEFAULT_MODEL,
        contents=query,
        config={
            "response_mime_type": "application/json",
            "response_schema": response_schema,
            "temperature": 0,
        },
    )
    logger.info("Gemini with schema call took: %.2fs", time.time() - start_time)
    if not response.parsed:
        raise GeminiInvalidResponseException(
            f"Empty or unparseable response for {response_schema.__name__}"
        )
    return response.parsed
