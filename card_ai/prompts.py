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

from typing import List

from pydantic import BaseModel

from card_shared.api import (
    DesignSuggestionRequest,
    GreetingTextRequest,
    ImproveTextRequest,
)

LANGUAGE_NAMES = {
    "zh": "Chinese",
    "en": "English",
    "fr": "French",
    "de": "German",
    "es": "Spanish",
    "ja": "Japanese",
    "ko": "Korean",
}

GREETING_SYSTEM_INSTRUCTION = (
    "You are a professional greeting card copywriter who writes sincere, warm "
    "messages for every kind of occasion."
)
DESIGN_SYSTEM_INSTRUCTION = (
    "You are a professional greeting card design consultant who gives advice "
    "on color schemes, fonts and layout."
)
IMPROVE_SYSTEM_INSTRUCTION = (
    "You are a professional copy editor who polishes greeting card messages."
)


class DesignSuggestionsSchema(BaseModel):
    colorScheme: List[str]
    fontSuggestions: List[str]
    layoutTips: List[str]


def language_name(code: str | None) -> str:
    return LANGUAGE_NAMES.get((code or "en").lower(), "English")


def make_greeting_prompt(request: GreetingTextRequest) -> str:
    return f"""Write a greeting card message in {language_name(request.language)} for the following situation.

Occasion: {request.occasion}
Recipient: {request.recipient}
Tone: {request.tone}

Requirements:
- sincere and warm
- between 50 and 100 words
- suits the occasion
- fluent, natural language

Reply with the message only, without any explanation."""


def make_design_suggestions_prompt(request: DesignSuggestionRequest) -> str:
    current_colors = (
        f"Current colors: {', '.join(request.colors)}\n" if request.colors else ""
    )
    return f"""Suggest a design for a greeting card.

Occasion: {request.occasion}
Style: {request.style}
{current_colors}
Return:
- colorScheme: 3 to 5 hex color codes
- fontSuggestions: 2 or 3 font family names
- layoutTips: 3 short layout tips"""


def make_improve_text_prompt(request: ImproveTextRequest) -> str:
    return f"""Improve the following {language_name(request.language)} greeting card message so it reads more polished, sincere and moving. Keep its meaning.

Original: {request.text}

Reply with the improved message only, without any explanation."""
