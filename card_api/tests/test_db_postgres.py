import time
import unittest

from card_api.db import CardRecord, PostgresDbClient, ShareTokenTaken, TemplateRecord
from card_shared.errors import StorageError


def _card(card_id, token, owner="alice", **overrides):
    values = dict(
        card_id=card_id,
        owner_id=owner,
        title=f"Card {card_id}",
        design_data={"version": "1.0", "objects": []},
        share_token=token,
    )
    values.update(overrides)
    return CardRecord(**values)


class PostgresDbClientTests(unittest.TestCase):
    """
    Uses SQLite via SQLAlchemy URL for fast/local testing of the Postgres client logic.
    """

    def setUp(self):
        self.db = PostgresDbClient("sqlite+pysqlite:///:memory:")

    def test_insert_and_get_card(self):
        self.db.insert_card(_card("c1", "AAAAAAAA", is_public=True))

        fetched = self.db.get_card("c1")
        self.assertIsNotNone(fetched)
        self.assertEqual(fetched.share_token, "AAAAAAAA")
        self.assertTrue(fetched.is_public)
        self.assertEqual(fetched.design_data, {"version": "1.0", "objects": []})

        by_token = self.db.get_card_by_share_token("AAAAAAAA")
        self.assertEqual(by_token.card_id, "c1")
        self.assertIsNone(self.db.get_card("missing"))

    def test_duplicate_share_token_is_rejected(self):
        self.db.insert_card(_card("c1", "AAAAAAAA"))
        with self.assertRaises(ShareTokenTaken):
            self.db.insert_card(_card("c2", "AAAAAAAA"))
        self.assertIsNone(self.db.get_card("c2"))

        # The store is still usable after the rejected insert.
        self.db.insert_card(_card("c2", "BBBBBBBB"))
        self.assertEqual(self.db.get_card("c2").share_token, "BBBBBBBB")

    def test_duplicate_card_id_is_a_storage_error(self):
        self.db.insert_card(_card("c1", "AAAAAAAA"))
        with self.assertLogs("card_api.db", level="ERROR"):
            with self.assertRaises(StorageError) as ctx:
                self.db.insert_card(_card("c1", "BBBBBBBB"))
        self.assertNotIsInstance(ctx.exception, ShareTokenTaken)
        self.assertEqual(self.db.get_card("c1").share_token, "AAAAAAAA")
        self.assertIsNone(self.db.get_card_by_share_token("BBBBBBBB"))

    def test_update_card_partial_fields(self):
        self.db.insert_card(_card("c1", "AAAAAAAA"))
        doc = {"version": "1.0", "objects": [{"type": "circle", "id": "o", "x": 1, "y": 1, "fill": "red", "radius": 2}]}

        updated = self.db.update_card("c1", design_data=doc, thumbnail_path="cards/c1/thumbnail.png")
        self.assertEqual(updated.design_data, doc)
        self.assertEqual(updated.title, "Card c1")
        self.assertEqual(updated.thumbnail_path, "cards/c1/thumbnail.png")
        self.assertIsNone(self.db.update_card("missing", title="x"))

    def test_view_count_and_delete(self):
        self.db.insert_card(_card("c1", "AAAAAAAA"))
        self.db.increment_view_count("c1")
        self.assertEqual(self.db.increment_view_count("c1").view_count, 2)

        self.assertTrue(self.db.delete_card("c1"))
        self.assertFalse(self.db.delete_card("c1"))
        self.assertIsNone(self.db.get_card_by_share_token("AAAAAAAA"))

    def test_list_cards_by_owner(self):
        now = time.time()
        for i in range(3):
            self.db.insert_card(_card(f"a{i}", f"TOKENA0{i}", updated_at=now + i))
        self.db.insert_card(_card("b0", "TOKENB00", owner="bob"))

        cards, total = self.db.list_cards("alice", limit=2, offset=0)
        self.assertEqual(total, 3)
        self.assertEqual([c.card_id for c in cards], ["a2", "a1"])

    def test_templates_with_tags_and_filters(self):
        self.db.save_template(
            TemplateRecord(
                template_id="t1",
                name="Christmas Joy",
                category="holiday",
                tags=["christmas", "winter"],
                is_universal=True,
                downloads_count=10,
            )
        )
        self.db.save_template(
            TemplateRecord(
                template_id="t2",
                name="春节祝福",
                category="holiday",
                tags=["春节"],
                language="zh",
                country="CN",
                is_premium=True,
                downloads_count=5,
            )
        )

        fetched = self.db.get_template("t1")
        self.assertEqual(fetched.tags, ["christmas", "winter"])

        premium, total = self.db.list_templates(is_premium=True)
        self.assertEqual([t.template_id for t in premium], ["t2"])
        self.assertEqual(total, 1)

        holiday, total = self.db.list_templates(category="holiday", limit=1, offset=1)
        self.assertEqual([t.template_id for t in holiday], ["t2"])
        self.assertEqual(total, 2)

        self.assertEqual(
            [t.template_id for t in self.db.recommend_templates("CN")], ["t2", "t1"]
        )
        self.assertEqual([t.template_id for t in self.db.recommend_templates("US")], ["t1"])

        self.assertEqual([t.template_id for t in self.db.search_templates("JOY")], ["t1"])
        self.assertEqual([t.template_id for t in self.db.search_templates("春节")], ["t2"])
        self.assertEqual(self.db.search_templates("100%"), [])
        self.assertEqual(self.db.template_categories(), [("holiday", 2)])

    def test_save_template_replaces_tags(self):
        template = TemplateRecord(template_id="t1", name="A", category="love", tags=["x", "y"])
        self.db.save_template(template)
        template.tags = ["z"]
        self.db.save_template(template)
        self.assertEqual(self.db.get_template("t1").tags, ["z"])

    def test_favorites(self):
        self.db.save_template(TemplateRecord(template_id="t1", name="A", category="love"))
        self.db.save_template(TemplateRecord(template_id="t2", name="B", category="love"))

        self.db.add_favorite("alice", "t1")
        self.db.add_favorite("alice", "t1")
        self.db.add_favorite("alice", "t2")
        self.assertEqual(
            sorted(t.template_id for t in self.db.list_favorites("alice")), ["t1", "t2"]
        )

        self.db.remove_favorite("alice", "t1")
        self.assertEqual([t.template_id for t in self.db.list_favorites("alice")], ["t2"])

        self.assertEqual(self.db.delete_all_templates(), 2)
        self.assertEqual(self.db.list_favorites("alice"), [])

    def test_ai_usage_and_subscription_tier(self):
        start = time.time() - 1
        self.db.record_ai_usage("alice", "text_generation")
        self.db.record_ai_usage("alice", "design_suggestion", tokens_used=42)
        self.db.record_ai_usage("bob", "text_generation")

        self.assertEqual(self.db.count_ai_usage("alice", since=start), 2)
        self.assertEqual(self.db.count_ai_usage("alice", since=time.time() + 60), 0)

        self.assertEqual(self.db.get_subscription_tier("alice"), "free")
        self.db.set_subscription_tier("alice", "monthly")
        self.db.set_subscription_tier("alice", "yearly", expires_at=time.time() + 3600)
        self.assertEqual(self.db.get_subscription_tier("alice"), "yearly")

    def test_subscription_includes_expiry(self):
        self.assertEqual(self.db.get_subscription("alice"), ("free", None))

        expires_at = time.time() + 3600
        self.db.set_subscription_tier("alice", "yearly", expires_at=expires_at)
        tier, stored_expiry = self.db.get_subscription("alice")
        self.assertEqual(tier, "yearly")
        self.assertAlmostEqual(stored_expiry, expires_at, places=3)

        self.db.set_subscription_tier("alice", "monthly")
        self.assertEqual(self.db.get_subscription("alice"), ("monthly", None))


if __name__ == "__main__":
    unittest.main()
