import random
import unittest

from card_api.db import InMemoryDbClient, TemplateRecord
from card_api.storage import InMemoryStorageClient
from card_api.template_library import SEARCH_LIMIT, TemplateFilter, TemplateLibrary
from card_shared.errors import InvalidAttributes, NotFound
from scripts.seed_templates import SAMPLE_TEMPLATES, seed_templates


def _template(template_id, **overrides):
    values = dict(
        template_id=template_id,
        name=template_id.title(),
        category="birthday",
        tags=[],
        is_universal=True,
    )
    values.update(overrides)
    return TemplateRecord(**values)


class TemplateLibraryTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        self.storage = InMemoryStorageClient()
        self.library = TemplateLibrary(self.db, self.storage)

    def _save(self, *templates):
        for template in templates:
            self.db.save_template(template)

    def test_filters_combine(self):
        self._save(
            _template("a", is_premium=True, language="en"),
            _template("b", is_premium=False, language="en"),
            _template("c", is_premium=True, language="zh"),
            _template("d", category="wedding", is_premium=True, language="en"),
        )

        premium_en, total = self.library.list_templates(
            TemplateFilter(category="birthday", premium_only=True, locale="en")
        )
        self.assertEqual([t.template_id for t in premium_en], ["a"])
        self.assertEqual(total, 1)

        free, _ = self.library.list_templates(TemplateFilter(premium_only=False))
        self.assertEqual([t.template_id for t in free], ["b"])

        everything, total = self.library.list_templates(TemplateFilter())
        self.assertEqual(total, 4)
        self.assertEqual(len(everything), 4)

    def test_list_is_ordered_by_downloads_and_paginated(self):
        self._save(*[_template(f"t{i}", downloads_count=i) for i in range(5)])

        first, total = self.library.list_templates(page=1, page_size=2)
        second, _ = self.library.list_templates(page=2, page_size=2)
        last, _ = self.library.list_templates(page=3, page_size=2)

        self.assertEqual(total, 5)
        self.assertEqual([t.template_id for t in first], ["t4", "t3"])
        self.assertEqual([t.template_id for t in second], ["t2", "t1"])
        self.assertEqual([t.template_id for t in last], ["t0"])

        with self.assertRaises(InvalidAttributes):
            self.library.list_templates(page=0)

    def test_recommend_puts_country_templates_first(self):
        self._save(
            _template("global-popular", downloads_count=900),
            _template("cn-new-year", country="CN", is_universal=False, downloads_count=10),
            _template("us-only", country="US", is_universal=False, downloads_count=1000),
        )

        ranked = [t.template_id for t in self.library.recommend("cn")]
        self.assertEqual(ranked, ["cn-new-year", "global-popular"])

        ranked_us = [t.template_id for t in self.library.recommend("US")]
        self.assertEqual(ranked_us, ["us-only", "global-popular"])

    def test_search_matches_name_and_tags(self):
        self._save(
            _template("gold", name="Premium Birthday Gold", tags=["luxury"]),
            _template("xmas", name="Christmas Joy", category="holiday", tags=["winter"]),
            _template("snow", name="Snow Day", category="holiday", tags=["winter"]),
        )

        self.assertEqual([t.template_id for t in self.library.search("gold")], ["gold"])
        self.assertEqual(
            {t.template_id for t in self.library.search("winter")}, {"xmas", "snow"}
        )
        self.assertEqual(
            [t.template_id for t in self.library.search("joy", category="holiday")],
            ["xmas"],
        )
        self.assertEqual(self.library.search("joy", category="birthday"), [])

        with self.assertRaises(InvalidAttributes):
            self.library.search("   ")

    def test_search_is_capped(self):
        self._save(*[_template(f"party{i}", name=f"Party {i}") for i in range(SEARCH_LIMIT + 5)])
        self.assertEqual(len(self.library.search("party")), SEARCH_LIMIT)

    def test_categories_with_counts(self):
        seed_templates(self.db, rng=random.Random(7))
        categories = dict(self.library.categories())

        self.assertEqual(sum(categories.values()), len(SAMPLE_TEMPLATES))
        self.assertEqual(categories["birthday"], 3)
        self.assertEqual(list(categories), sorted(categories))

    def test_seed_clear_replaces_catalog(self):
        seed_templates(self.db)
        seed_templates(self.db, clear=True)
        _, total = self.library.list_templates()
        self.assertEqual(total, len(SAMPLE_TEMPLATES))
        self.assertTrue(
            all(50 <= t.downloads_count <= 1049 for t in self.db.templates.values())
        )

    def test_get_template_not_found(self):
        with self.assertRaises(NotFound):
            self.library.get_template("missing")

    def test_favorites(self):
        self._save(_template("a"), _template("b"))

        self.library.add_favorite("alice", "a")
        self.library.add_favorite("alice", "a")
        self.library.add_favorite("alice", "b")
        self.assertEqual(
            sorted(t.template_id for t in self.library.favorites("alice")), ["a", "b"]
        )
        self.assertEqual(self.library.favorites("bob"), [])

        self.library.remove_favorite("alice", "a")
        self.assertEqual([t.template_id for t in self.library.favorites("alice")], ["b"])

        with self.assertRaises(NotFound):
            self.library.add_favorite("alice", "missing")

    def test_open_session_from_template(self):
        self._save(
            _template(
                "with-text",
                design_data={
                    "version": "1.0",
                    "objects": [
                        {"type": "text", "id": "t", "x": 5, "y": 5, "text": "Hi", "fontSize": 20}
                    ],
                },
            )
        )
        session = self.library.open_session("with-text")
        self.assertEqual(session.document.object_ids(), ["t"])
        self.assertEqual(session.selection, ())

    def test_preview_url(self):
        public = _template("a", preview_image_url="/templates/a.jpg")
        external = _template("b", preview_image_url="https://cdn.test/b.jpg")
        bucket = _template("c", preview_image_url="previews/c.jpg")

        self.assertEqual(self.library.preview_url(public), "/templates/a.jpg")
        self.assertEqual(self.library.preview_url(external), "https://cdn.test/b.jpg")
        self.assertIn("previews/c.jpg", self.library.preview_url(bucket))
        self.assertEqual(self.storage.signed, [("get", "previews/c.jpg")])


if __name__ == "__main__":
    unittest.main()
