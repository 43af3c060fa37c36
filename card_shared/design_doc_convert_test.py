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

import unittest

from card_shared.design_doc import (
    CirclePayload,
    DesignDocument,
    ObjectKind,
    RectPayload,
    SceneObject,
    TextPayload,
    empty_document,
)
from card_shared.design_doc_convert import doc_from_dict, doc_to_dict
from card_shared.errors import MalformedDocument, UnsupportedVersion


def _sample_document() -> DesignDocument:
    return DesignDocument(
        version="1.0",
        objects=(
            SceneObject(
                id="bg",
                kind=ObjectKind.RECT,
                x=0,
                y=0,
                fill="#ffffff",
                payload=RectPayload(width=800, height=600),
            ),
            SceneObject(
                id="dot",
                kind=ObjectKind.CIRCLE,
                x=400,
                y=300,
                fill="rgba(255, 0, 0, 0.5)",
                payload=CirclePayload(radius=40),
            ),
            SceneObject(
                id="greeting",
                kind=ObjectKind.TEXT,
                x=120,
                y=80,
                fill="navy",
                payload=TextPayload(text="Happy Birthday", font_family="Georgia", font_size=48),
            ),
        ),
    )


class DesignDocConvertTest(unittest.TestCase):

    def test_round_trip_keeps_objects_and_paint_order(self):
        doc = _sample_document()
        restored = doc_from_dict(doc_to_dict(doc))
        self.assertEqual(restored, doc)
        self.assertEqual(restored.object_ids(), ["bg", "dot", "greeting"])

    def test_empty_document_round_trip(self):
        self.assertEqual(doc_to_dict(empty_document()), {"version": "1.0", "objects": []})
        self.assertEqual(doc_from_dict({"version": "1.0", "objects": []}), empty_document())

    def test_missing_objects_reads_as_empty(self):
        self.assertEqual(doc_from_dict({"version": "1.0"}).objects, ())

    def test_canvas_style_field_names_are_accepted(self):
        doc = doc_from_dict(
            {
                "version": "1.0",
                "objects": [
                    {
                        "type": "i-text",
                        "id": "t1",
                        "left": 10,
                        "top": 20,
                        "text": "Hi",
                        "fontSize": 24,
                    },
                    {"type": "Rectangle", "id": "r1", "left": 0, "top": 0, "width": 5, "height": 5},
                ],
            }
        )
        text, rect = doc.objects
        self.assertEqual(text.kind, ObjectKind.TEXT)
        self.assertEqual((text.x, text.y), (10, 20))
        self.assertEqual(text.payload.font_family, "Arial")
        self.assertEqual(text.fill, "#000000")
        self.assertEqual(rect.kind, ObjectKind.RECT)

    def test_serialized_object_shape(self):
        data = doc_to_dict(_sample_document())
        self.assertEqual(
            data["objects"][2],
            {
                "type": "text",
                "id": "greeting",
                "x": 120,
                "y": 80,
                "fill": "navy",
                "text": "Happy Birthday",
                "fontFamily": "Georgia",
                "fontSize": 48,
            },
        )
        self.assertEqual(data["objects"][1]["radius"], 40)
        self.assertNotIn("radius", data["objects"][0])

    def test_newer_version_is_unsupported(self):
        with self.assertRaises(UnsupportedVersion) as ctx:
            doc_from_dict({"version": "2.0", "objects": []})
        self.assertEqual(ctx.exception.version, "2.0")

    def test_missing_or_garbled_version_is_malformed(self):
        with self.assertRaises(MalformedDocument):
            doc_from_dict({"objects": []})
        with self.assertRaises(MalformedDocument):
            doc_from_dict({"version": "one", "objects": []})

    def test_bad_object_reports_its_index(self):
        data = doc_to_dict(_sample_document())
        del data["objects"][1]["radius"]
        with self.assertRaises(MalformedDocument) as ctx:
            doc_from_dict(data)
        self.assertEqual(ctx.exception.index, 1)
        self.assertIn("object 1", str(ctx.exception))

    def test_equivalent_version_spellings_are_accepted(self):
        for version in ("1", "1.0", "1.0.0", "0.9"):
            with self.subTest(version=version):
                doc = doc_from_dict({"version": version, "objects": []})
                self.assertEqual(doc.version, version)
        with self.assertRaises(UnsupportedVersion):
            doc_from_dict({"version": "1.0.1", "objects": []})

    def test_oversized_numbers_are_malformed(self):
        huge = 10**400
        cases = [
            {"type": "rect", "id": "a", "x": huge, "y": 0, "width": 5, "height": 5},
            {"type": "rect", "id": "a", "x": 0, "y": 0, "width": huge, "height": 5},
            {"type": "text", "id": "a", "x": 0, "y": 0, "text": "x", "fontSize": huge},
            {"type": "circle", "id": "a", "x": 0, "y": 0, "radius": -huge},
        ]
        for raw in cases:
            with self.subTest(raw=raw):
                with self.assertRaises(MalformedDocument) as ctx:
                    doc_from_dict({"version": "1.0", "objects": [raw]})
                self.assertEqual(ctx.exception.index, 0)

    def test_invalid_geometry_is_malformed(self):
        cases = [
            {"type": "rect", "id": "a", "x": 0, "y": 0, "width": -1, "height": 5},
            {"type": "text", "id": "a", "x": 0, "y": 0, "text": "x", "fontSize": 4},
            {"type": "circle", "id": "a", "x": 0, "y": 0, "radius": 3, "fill": "not-a-color"},
            {"type": "circle", "id": "a", "x": "0", "y": 0, "radius": 3},
            {"type": "star", "id": "a", "x": 0, "y": 0},
            "rect",
        ]
        for raw in cases:
            with self.subTest(raw=raw):
                with self.assertRaises(MalformedDocument) as ctx:
                    doc_from_dict({"version": "1.0", "objects": [raw]})
                self.assertEqual(ctx.exception.index, 0)

    def test_duplicate_ids_are_rejected(self):
        data = doc_to_dict(_sample_document())
        data["objects"][2]["id"] = "bg"
        with self.assertRaises(MalformedDocument) as ctx:
            doc_from_dict(data)
        self.assertEqual(ctx.exception.index, 2)

    def test_non_mapping_document_is_malformed(self):
        with self.assertRaises(MalformedDocument):
            doc_from_dict(["not", "a", "doc"])
        with self.assertRaises(MalformedDocument):
            doc_from_dict({"version": "1.0", "objects": {"a": 1}})


if __name__ == "__main__":
    unittest.main()
