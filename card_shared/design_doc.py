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

import math
import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Tuple, Union

CURRENT_VERSION = "1.0"
KNOWN_VERSIONS = ("1.0",)

MIN_FONT_SIZE = 8
DEFAULT_FONT_FAMILY = "Arial"

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_NUMBER = r"\s*\d+(?:\.\d+)?%?\s*"
_FUNC_COLOR = re.compile(
    rf"^rgba?\({_NUMBER},{_NUMBER},{_NUMBER}(?:,\s*(?:0|1|0?\.\d+|1\.0+)\s*)?\)$"
)
NAMED_COLORS = frozenset(
    {
        "transparent",
        "black",
        "silver",
        "gray",
        "grey",
        "white",
        "maroon",
        "red",
        "purple",
        "fuchsia",
        "green",
        "lime",
        "olive",
        "yellow",
        "navy",
        "blue",
        "teal",
        "aqua",
        "orange",
        "pink",
        "gold",
        "brown",
        "beige",
        "coral",
        "crimson",
        "cyan",
        "magenta",
        "indigo",
        "ivory",
        "khaki",
        "lavender",
        "salmon",
        "tomato",
        "turquoise",
        "violet",
        "skyblue",
        "darkred",
        "darkgreen",
        "darkblue",
        "lightgray",
        "lightgrey",
        "lightblue",
        "lightgreen",
        "lightpink",
        "rebeccapurple",
    }
)


class ObjectKind(StrEnum):
    TEXT = "text"
    RECT = "rect"
    CIRCLE = "circle"


@dataclass(frozen=True)
class TextPayload:
    text: str
    font_family: str = DEFAULT_FONT_FAMILY
    font_size: float = 32


@dataclass(frozen=True)
class RectPayload:
    width: float
    height: float


@dataclass(frozen=True)
class CirclePayload:
    radius: float


Payload = Union[TextPayload, RectPayload, CirclePayload]

PAYLOAD_TYPES = {
    ObjectKind.TEXT: TextPayload,
    ObjectKind.RECT: RectPayload,
    ObjectKind.CIRCLE: CirclePayload,
}


@dataclass(frozen=True)
class SceneObject:
    """One visual element of a card. `kind` selects the payload type."""

    id: str
    kind: ObjectKind
    x: float
    y: float
    fill: str
    payload: Payload


@dataclass(frozen=True)
class DesignDocument:
    """Versioned scene graph of a card. Later objects paint on top."""

    version: str = CURRENT_VERSION
    objects: Tuple[SceneObject, ...] = field(default_factory=tuple)

    def object_ids(self) -> list[str]:
        return [obj.id for obj in self.objects]


def empty_document() -> DesignDocument:
    return DesignDocument(version=CURRENT_VERSION, objects=())


def is_valid_color(value) -> bool:
    if not isinstance(value, str):
        return False
    value = value.strip()
    if _HEX_COLOR.match(value) or _FUNC_COLOR.match(value.lower()):
        return True
    return value.lower() in NAMED_COLORS


def is_finite(value) -> bool:
    """Like math.isfinite, but ints too large for a float count as infinite."""
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def geometry_problems(obj: SceneObject) -> list[str]:
    """Returns the invariant violations of a scene object, empty if valid."""
    problems: list[str] = []
    for name in ("x", "y"):
        if not is_finite(getattr(obj, name)):
            problems.append(f"{name} must be finite")
    if not is_valid_color(obj.fill):
        problems.append(f"invalid fill color {obj.fill!r}")

    payload = obj.payload
    if not isinstance(payload, PAYLOAD_TYPES[obj.kind]):
        problems.append(f"payload does not match kind {obj.kind.value}")
        return problems
    if isinstance(payload, TextPayload):
        if not is_finite(payload.font_size):
            problems.append("fontSize must be finite")
        elif payload.font_size < MIN_FONT_SIZE:
            problems.append(f"fontSize must be at least {MIN_FONT_SIZE}")
    elif isinstance(payload, RectPayload):
        for name in ("width", "height"):
            value = getattr(payload, name)
            if not is_finite(value) or value < 0:
                problems.append(f"{name} must be a finite non-negative number")
    elif isinstance(payload, CirclePayload):
        if not is_finite(payload.radius) or payload.radius < 0:
            problems.append("radius must be a finite non-negative number")
    return problems
