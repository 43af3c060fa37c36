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
from typing import List, Optional


@dataclass
class GreetingTextRequest:
    """Request for a generated greeting message."""

    occasion: str
    recipient: str
    tone: str = "warm"
    language: str = "en"


@dataclass
class DesignSuggestionRequest:
    """Request for color, font and layout suggestions."""

    occasion: str
    style: str = "modern"
    colors: List[str] = field(default_factory=list)


@dataclass
class ImproveTextRequest:
    """Request to polish an existing greeting message."""

    text: str
    language: Optional[str] = None


@dataclass
class DesignSuggestions:
    """Design suggestions returned by the model."""

    color_scheme: List[str]
    font_suggestions: List[str]
    layout_tips: List[str]


DEFAULT_DESIGN_SUGGESTIONS = DesignSuggestions(
    color_scheme=["#3b82f6", "#8b5cf6", "#ec4899"],
    font_suggestions=["Arial", "Georgia"],
    layout_tips=["Keep it simple", "Emphasize the key message", "Use strong contrast"],
)
