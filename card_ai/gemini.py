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
from google.genai import types
from card_ai import api_config
from typing import Optional, Type, TypeVar

logger = logging.getLogger(__name__)

API_KEY_LOGGING_MESSAGE = "Ran with user-specified API key"
TEXT_RESPONSE_MAX_OUTPUT_TOKENS = 300
SCHEMA_RESPONSE_MAX_OUTPUT_TOKENS = 500

T = TypeVar("T")


class GeminiInvalidResponseException(Exception):
    pass


def _client(api_key: str | None) -> genai.Client:
    if not api_key:
        api_key = api_config.DEFAULT_API_KEY
    else:
        logger.info(API_KEY_LOGGING_MESSAGE)
    return genai.Client(api_key=api_key)


def _truncate(prompt: str) -> str:
    return (prompt[:200] + "...") if len(prompt) > 200 else prompt


def call_predict(
    query: str,
    model: str | None = None,
    api_key: str | None = None,
    system_instruction: Optional[str] = None,
    temperature: float = 0.8,
    max_output_tokens: int = TEXT_RESPONSE_MAX_OUTPUT_TOKENS,
) -> str:
    client = _client(api_key)
    start_time = time.time()
    logger.info("Calling Gemini, prompt: '%s'", _truncate(query))

    response = client.models.generate_content(
        model=model or api_config.DEFAULT_MODEL,
        contents=query,
        config=types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        ),
    )
    logger.info("Gemini call took: %.2fs", time.time() - start_time)
    if not response.text:
        raise GeminiInvalidResponseException()
    return response.text.strip()


def call_predict_with_schema(
    query: str,
    response_schema: Type[T],
    model: str | None = None,
    api_key: str | None = None,
    system_instruction: Optional[str] = None,
    temperature: float = 0.7,
) -> T | None:
    """Calls Gemini with a response schema for structured output.

    Returns None when the model output cannot be parsed into the schema, so
    callers can fall back to defaults.
    """
    client = _client(api_key)
    start_time = time.time()
    logger.info("Calling Gemini with schema, prompt: '%s'", _truncate(query))
    try:
        response = client.models.generate_content(
            model=model or api_config.DEFAULT_MODEL,
            contents=query,
            config=types.GenerateContentConfig(
                system_instruction=system_instruction,
                response_mime_type="application/json",
                response_schema=response_schema,
                temperature=temperature,
                max_output_tokens=SCHEMA_RESPONSE_MAX_OUTPUT_TOKENS,
            ),
        )
    finally:
        logger.info("Gemini with schema call took: %.2fs", time.time() - start_time)
    if not response.parsed:
        logger.warning("Gemini returned no parseable structured output")
        return None
    return response.parsed
