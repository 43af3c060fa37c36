"""
Seed the template catalog with a starter set of card designs.
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
import uuid
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from card_api.config import get_settings
from card_api.db import DbClient, PostgresDbClient, TemplateRecord

logger = logging.getLogger(__name__)


def _template(
    name: str,
    category: str,
    tags: list[str],
    preview: str,
    *,
    premium: bool = False,
    language: str = "en",
    country: str | None = None,
    universal: bool = True,
) -> dict:
    return {
        "name": name,
        "category": category,
        "tags": tags,
        "preview_image_url": f"/templates/{preview}",
        "is_premium": premium,
        "language": language,
        "country": country,
        "is_universal": universal,
    }


SAMPLE_TEMPLATES = [
    # Birthday
    _template(
        "Happy Birthday Celebration",
        "birthday",
        ["party", "celebration", "colorful"],
        "birthday-01.jpg",
    ),
    _template(
        "生日快乐祝福",
        "birthday",
        ["生日", "祝福", "快乐"],
        "birthday-02.jpg",
        language="zh",
        country="CN",
        universal=False,
    ),
    _template(
        "Premium Birthday Gold",
        "birthday",
        ["luxury", "gold", "elegant"],
        "birthday-premium.jpg",
        premium=True,
    ),
    # Holiday
    _template(
        "Christmas Joy",
        "holiday",
        ["christmas", "winter", "snow"],
        "christmas-01.jpg",
    ),
    _template(
        "春节祝福",
        "holiday",
        ["春节", "新年", "红色"],
        "spring-festival.jpg",
        language="zh",
        country="CN",
        universal=False,
    ),
    _template(
        "Thanksgiving Gratitude",
        "holiday",
        ["thanksgiving", "autumn", "gratitude"],
        "thanksgiving.jpg",
        country="US",
        universal=False,
    ),
    # Wedding
    _template(
        "Elegant Wedding Invitation",
        "wedding",
        ["elegant", "romantic", "floral"],
        "wedding-01.jpg",
        premium=True,
    ),
    _template(
        "浪漫婚礼邀请",
        "wedding",
        ["浪漫", "优雅", "花卉"],
        "wedding-02.jpg",
        premium=True,
        language="zh",
        universal=False,
    ),
    # Thank you
    _template(
        "Simple Thank You",
        "thank-you",
        ["gratitude", "simple", "clean"],
        "thankyou-01.jpg",
    ),
    _template(
        "Professional Thank You",
        "thank-you",
        ["professional", "business", "formal"],
        "thankyou-02.jpg",
    ),
    # Love
    _template(
        "Romantic Love Card",
        "love",
        ["romantic", "hearts", "valentine"],
        "love-01.jpg",
    ),
    _template(
        "Anniversary Celebration",
        "love",
        ["anniversary", "celebration", "romantic"],
        "anniversary.jpg",
        premium=True,
    ),
    # Business
    _template(
        "Corporate Event Invitation",
        "business",
        ["corporate", "professional", "formal"],
        "business-01.jpg",
        premium=True,
    ),
    _template(
        "Business Congratulations",
        "business",
        ["congratulations", "achievement", "professional"],
        "business-02.jpg",
    ),
    # Get well
    _template(
        "Get Well Soon Flowers",
        "get-well",
        ["flowers", "healing", "caring"],
        "getwell-01.jpg",
    ),
    _template(
        "早日康复",
        "get-well",
        ["康复", "祝福", "关怀"],
        "getwell-02.jpg",
        language="zh",
        universal=False,
    ),
]


def seed_templates(db: DbClient, clear: bool = False, rng: random.Random | None = None) -> int:
    rng = rng or random.Random()
    if clear:
        removed = db.delete_all_templates()
        logger.info("Cleared %d existing templates", removed)

    for fields in SAMPLE_TEMPLATES:
        db.save_template(
            TemplateRecord(
                template_id=uuid.uuid4().hex,
                downloads_count=rng.randint(50, 1049),
                **fields,
            )
        )
    logger.info("Created %d sample templates", len(SAMPLE_TEMPLATES))
    return len(SAMPLE_TEMPLATES)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the card template catalog")
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Override DATABASE_URL from settings",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Delete existing templates before seeding",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    database_url = args.database_url or get_settings().database_url
    if not database_url:
        logger.error("No database configured: set DATABASE_URL or pass --database-url")
        return 1

    seed_templates(PostgresDbClient(database_url), clear=args.clear)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
