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

import uuid
from dataclasses import replace
from typing import Any, Iterable, Mapping, Optional, Tuple

from card_shared.design_doc import (
    MIN_FONT_SIZE,
    CirclePayload,
    DesignDocument,
    ObjectKind,
    RectPayload,
    SceneObject,
    TextPayload,
    empty_document,
    geometry_problems,
    is_valid_color,
)
from card_shared.design_doc_convert import is_finite_number, parse_kind
from card_shared.errors import InvalidAttributes

# Attribute names accepted by add_object, mapped to their canonical name.
_ATTRIBUTE_ALIASES = {
    "x": "x",
    "left": "x",
    "y": "y",
    "top": "y",
    "fill": "fill",
    "text": "text",
    "fontFamily": "font_family",
    "font_family": "font_family",
    "fontSize": "font_size",
    "font_size": "font_size",
    "width": "width",
    "height": "height",
    "radius": "radius",
}

_KIND_ATTRIBUTES = {
    ObjectKind.TEXT: {"text", "font_family", "font_size"},
    ObjectKind.RECT: {"width", "height"},
    ObjectKind.CIRCLE: {"radius"},
}

_STRING_ATTRIBUTES = {"fill", "text", "font_family"}

# Toolbar defaults for newly added objects.
_DEFAULTS = {
    ObjectKind.TEXT: {
        "x": 100,
        "y": 100,
        "fill": "#000000",
        "text": "Click to edit",
        "font_family": "Arial",
        "font_size": 32,
    },
    ObjectKind.RECT: {
        "x": 100,
        "y": 100,
        "fill": "#3b82f6",
        "width": 200,
        "height": 100,
    },
    ObjectKind.CIRCLE: {
        "x": 100,
        "y": 100,
        "fill": "#8b5cf6",
        "radius": 50,
    },
}


def _normalize_attributes(kind: ObjectKind, attributes: Mapping[str, Any]) -> dict:
    values = dict(_DEFAULTS[kind])
    allowed = {"x", "y", "fill"} | _KIND_ATTRIBUTES[kind]
    for key, value in attributes.items():
        name = _ATTRIBUTE_ALIASES.get(key)
        if name is None or name not in allowed:
            raise InvalidAttributes(f"Unknown attribute {key!r} for {kind.value}")
        if name in _STRING_ATTRIBUTES:
            if not isinstance(value, str):
                raise InvalidAttributes(f"{key} must be a string")
        elif isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidAttributes(f"{key} must be a number")
        values[name] = value
    return values


def build_scene_object(
    kind: ObjectKind, attributes: Mapping[str, Any], object_id: str
) -> SceneObject:
    values = _normalize_attributes(kind, attributes)
    if kind == ObjectKind.TEXT:
        payload = TextPayload(
            text=values["text"],
            font_family=values["font_family"],
            font_size=values["font_size"],
        )
    elif kind == ObjectKind.RECT:
        payload = RectPayload(width=values["width"], height=values["height"])
    else:
        payload = CirclePayload(radius=values["radius"])

    obj = SceneObject(
        id=object_id,
        kind=kind,
        x=values["x"],
        y=values["y"],
        fill=values["fill"],
        payload=payload,
    )
    problems = geometry_problems(obj)
    if problems:
        raise InvalidAttributes("; ".join(problems))
    return obj


class EditorSession:
    """
    Mutable editing state around one design document.

    The document itself is immutable; every operation swaps in a new document
    so a failed operation leaves the session untouched. Nothing here talks to
    storage: callers export the document and hand it to the card gateway.
    """

    def __init__(self, document: Optional[DesignDocument] = None):
        self._document = document if document is not None else empty_document()
        self._selection: Tuple[str, ...] = ()

    @property
    def document(self) -> DesignDocument:
        return self._document

    @property
    def selection(self) -> Tuple[str, ...]:
        return self._selection

    def selected_objects(self) -> list[SceneObject]:
        selected = set(self._selection)
        return [obj for obj in self._document.objects if obj.id in selected]

    def add_object(self, kind: str, attributes: Mapping[str, Any] | None = None) -> DesignDocument:
        parsed_kind = parse_kind(kind)
        if parsed_kind is None:
            raise InvalidAttributes(f"Unknown object type {kind!r}")
        existing = set(self._document.object_ids())
        object_id = uuid.uuid4().hex
        while object_id in existing:
            object_id = uuid.uuid4().hex
        obj = build_scene_object(parsed_kind, attributes or {}, object_id)

        self._document = replace(
            self._document, objects=self._document.objects + (obj,)
        )
        self._selection = (obj.id,)
        return self._document

    def remove_selected(self) -> DesignDocument:
        if not self._selection:
            return self._document
        selected = set(self._selection)
        self._document = replace(
            self._document,
            objects=tuple(o for o in self._document.objects if o.id not in selected),
        )
        self._selection = ()
        return self._document

    def set_selection(self, ids: Iterable[str]) -> DesignDocument:
        # Unknown ids are dropped: the UI selects optimistically while dragging.
        present = set(self._document.object_ids())
        selection: list[str] = []
        for object_id in ids:
            if object_id in present and object_id not in selection:
                selection.append(object_id)
        self._selection = tuple(selection)
        return self._document

    def adjust_font_size(self, delta: float) -> DesignDocument:
        if not is_finite_number(delta):
            raise InvalidAttributes("font size delta must be a finite number")

        def resize(obj: SceneObject) -> SceneObject:
            if obj.kind != ObjectKind.TEXT:
                return obj
            size = max(MIN_FONT_SIZE, obj.payload.font_size + delta)
            return replace(obj, payload=replace(obj.payload, font_size=size))

        return self._apply_to_selection(resize)

    def set_fill_color(self, color: str) -> DesignDocument:
        if not is_valid_color(color):
            raise InvalidAttributes(f"Invalid color {color!r}")
        return self._apply_to_selection(lambda obj: replace(obj, fill=color))

    def export_document(self) -> DesignDocument:
        return self._document

    def load_document(self, doc: DesignDocument) -> DesignDocument:
        self._document = doc
        self._selection = ()
        return self._document

    def _apply_to_selection(self, fn) -> DesignDocument:
        if not self._selection:
            return self._document
        selected = set(self._selection)
        self._document = replace(
            self._document,
            objects=tuple(
                fn(obj) if obj.id in selected else obj
                for obj in self._document.objects
            ),
        )
        return self._document
