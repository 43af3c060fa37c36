import threading
import unittest
from concurrent.futures import ThreadPoolExecutor

from card_api.db import CardRecord, InMemoryDbClient, ShareTokenTaken, TemplateRecord
from card_shared.errors import StorageError


def _card(card_id, token, owner="alice"):
    return CardRecord(
        card_id=card_id,
        owner_id=owner,
        title=f"Card {card_id}",
        design_data={"version": "1.0", "objects": []},
        share_token=token,
    )


class InMemoryDbClientTests(unittest.TestCase):

    def setUp(self):
        self.db = InMemoryDbClient()

    def test_duplicate_card_id_is_a_storage_error(self):
        self.db.insert_card(_card("c1", "AAAAAAAA"))
        with self.assertRaises(StorageError) as ctx:
            self.db.insert_card(_card("c1", "BBBBBBBB"))
        self.assertNotIsInstance(ctx.exception, ShareTokenTaken)
        self.assertEqual(self.db.get_card("c1").share_token, "AAAAAAAA")
        self.assertIsNone(self.db.get_card_by_share_token("BBBBBBBB"))

    def test_duplicate_share_token_is_rejected(self):
        self.db.insert_card(_card("c1", "AAAAAAAA"))
        with self.assertRaises(ShareTokenTaken):
            self.db.insert_card(_card("c2", "AAAAAAAA"))
        self.assertIsNone(self.db.get_card("c2"))

    def test_subscription_defaults_to_free_without_expiry(self):
        self.assertEqual(self.db.get_subscription("alice"), ("free", None))
        self.db.set_subscription_tier("alice", "yearly", expires_at=1234.5)
        self.assertEqual(self.db.get_subscription("alice"), ("yearly", 1234.5))
        self.assertEqual(self.db.get_subscription_tier("alice"), "yearly")

    def test_listing_while_writing_from_other_threads(self):
        writers = 4
        per_writer = 200
        done = threading.Event()

        def write(n):
            for i in range(per_writer):
                key = f"{n}-{i}"
                self.db.insert_card(_card(f"c{key}", f"T{key}"))
                self.db.save_template(
                    TemplateRecord(template_id=f"t{key}", name=key, category=f"cat{n}")
                )
                self.db.add_favorite("alice", f"t{key}")
                self.db.record_ai_usage("alice", "text_generation")

        def read():
            reads = 0
            while True:
                self.db.list_cards("alice", limit=5)
                self.db.list_templates(limit=5)
                self.db.search_templates("1")
                self.db.recommend_templates("US")
                self.db.template_categories()
                self.db.list_favorites("alice")
                self.db.count_ai_usage("alice", since=0)
                reads += 1
                if done.is_set():
                    return reads

        with ThreadPoolExecutor(max_workers=writers + 2) as pool:
            readers = [pool.submit(read) for _ in range(2)]
            writes = [pool.submit(write, n) for n in range(writers)]
            try:
                for future in writes:
                    future.result()
            finally:
                done.set()
            for future in readers:
                self.assertGreater(future.result(), 0)

        total = writers * per_writer
        self.assertEqual(self.db.list_cards("alice", limit=1)[1], total)
        self.assertEqual(self.db.list_templates(limit=1)[1], total)
        self.assertEqual(len(self.db.list_favorites("alice")), total)
        self.assertEqual(self.db.count_ai_usage("alice", since=0), total)


if __name__ == "__main__":
    unittest.main()
