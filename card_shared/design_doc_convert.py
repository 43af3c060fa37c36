"""
Helpers to convert design document JSON payloads to and from dataclasses.
"""

from __future__ import annotations

from typing import Any, Optional

from card_shared.design_doc import (
    KNOWN_VERSIONS,
    DEFAULT_FONT_FAMILY,
    CirclePayload,
    DesignDocument,
    ObjectKind,
    RectPayload,
    SceneObject,
    TextPayload,
    geometry_problems,
    is_finite,
)
from card_shared.errors import MalformedDocument, UnsupportedVersion

_KIND_ALIASES = {
    "text": ObjectKind.TEXT,
    "i-text": ObjectKind.TEXT,
    "textbox": ObjectKind.TEXT,
    "rect": ObjectKind.RECT,
    "rectangle": ObjectKind.RECT,
    "circle": ObjectKind.CIRCLE,
}

_DEFAULT_FILL = "#000000"


def _get_value(data: dict, *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _version_tuple(version: str) -> tuple[int, ...]:
    # "1", "1.0" and "1.0.0" compare equal.
    parts = [int(part) for part in version.split(".")]
    while len(parts) > 1 and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


def check_version(version: Any) -> str:
    if not isinstance(version, str) or not version:
        raise MalformedDocument("missing document version")
    try:
        parsed = _version_tuple(version)
    except ValueError:
        raise MalformedDocument(f"unparseable document version {version!r}")
    newest = max(_version_tuple(v) for v in KNOWN_VERSIONS)
    if parsed > newest:
        raise UnsupportedVersion(version)
    return version


def parse_kind(value: Any) -> Optional[ObjectKind]:
    if not isinstance(value, str):
        return None
    return _KIND_ALIASES.get(value.lower())


def _required(data: dict, index: int, *keys: str) -> Any:
    value = _get_value(data, *keys)
    if value is None:
        raise MalformedDocument(f"missing required field {keys[0]!r}", index)
    return value


def _number(data: dict, index: int, *keys: str) -> float:
    value = _required(data, index, *keys)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedDocument(f"field {keys[0]!r} must be a number", index)
    return value


def _string(data: dict, index: int, *keys: str) -> str:
    value = _required(data, index, *keys)
    if not isinstance(value, str):
        raise MalformedDocument(f"field {keys[0]!r} must be a string", index)
    return value


def _to_payload(kind: ObjectKind, data: dict, index: int):
    if kind == ObjectKind.TEXT:
        font_family = _get_value(data, "fontFamily", "font_family")
        if font_family is None:
            font_family = DEFAULT_FONT_FAMILY
        elif not isinstance(font_family, str):
            raise MalformedDocument("field 'fontFamily' must be a string", index)
        return TextPayload(
            text=_string(data, index, "text"),
            font_family=font_family,
            font_size=_number(data, index, "fontSize", "font_size"),
        )
    if kind == ObjectKind.RECT:
        return RectPayload(
            width=_number(data, index, "width"),
            height=_number(data, index, "height"),
        )
    return CirclePayload(radius=_number(data, index, "radius"))


def _to_scene_object(data: Any, index: int) -> SceneObject:
    if not isinstance(data, dict):
        raise MalformedDocument("scene object must be a mapping", index)
    raw_kind = _required(data, index, "type", "kind")
    kind = parse_kind(raw_kind)
    if kind is None:
        raise MalformedDocument(f"unknown object type {raw_kind!r}", index)

    fill = _get_value(data, "fill")
    obj = SceneObject(
        id=_string(data, index, "id"),
        kind=kind,
        x=_number(data, index, "x", "left"),
        y=_number(data, index, "y", "top"),
        fill=_DEFAULT_FILL if fill is None else fill,
        payload=_to_payload(kind, data, index),
    )
    problems = geometry_problems(obj)
    if problems:
        raise MalformedDocument("; ".join(problems), index)
    return obj


def doc_from_dict(data: Any) -> DesignDocument:
    if not isinstance(data, dict):
        raise MalformedDocument("design document must be a mapping")
    version = check_version(_get_value(data, "version"))
    raw_objects = _get_value(data, "objects")
    if raw_objects is None:
        raw_objects = []
    if not isinstance(raw_objects, list):
        raise MalformedDocument("'objects' must be a list")

    objects = []
    seen: set[str] = set()
    for index, raw in enumerate(raw_objects):
        obj = _to_scene_object(raw, index)
        if obj.id in seen:
            raise MalformedDocument(f"duplicate object id {obj.id!r}", index)
        seen.add(obj.id)
        objects.append(obj)
    return DesignDocument(version=version, objects=tuple(objects))


def scene_object_to_dict(obj: SceneObject) -> dict:
    out: dict[str, Any] = {
        "type": obj.kind.value,
        "id": obj.id,
        "x": obj.x,
        "y": obj.y,
        "fill": obj.fill,
    }
    payload = obj.payload
    if isinstance(payload, TextPayload):
        out["text"] = payload.text
        out["fontFamily"] = payload.font_family
        out["fontSize"] = payload.font_size
    elif isinstance(payload, RectPayload):
        out["width"] = payload.width
        out["height"] = payload.height
    elif isinstance(payload, CirclePayload):
        out["radius"] = payload.radius
    return out


def doc_to_dict(doc: DesignDocument) -> dict:
    return {
        "version": doc.version,
        "objects": [scene_object_to_dict(obj) for obj in doc.objects],
    }


def is_finite_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and is_finite(value)
    )
