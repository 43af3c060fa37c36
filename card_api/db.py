"""
Database abstraction for Postgres and an in-memory test implementation.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, Optional, Protocol

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Float,
    Integer,
    String,
    case,
    create_engine,
    delete,
    func,
    or_,
    select,
    update,
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from card_shared.errors import StorageError

logger = logging.getLogger(__name__)

DEFAULT_TIER = "free"


class ShareTokenTaken(Exception):
    """Raised when a card insert collides on its share token."""

    def __init__(self, token: str):
        super().__init__(f"Share token already in use: {token}")
        self.token = token


@dataclass
class CardRecord:
    card_id: str
    owner_id: str
    title: str
    design_data: dict
    share_token: str
    is_public: bool = False
    view_count: int = 0
    template_id: Optional[str] = None
    thumbnail_path: Optional[str] = None
    created_at: float = field(default_factory=lambda: time.time())
    updated_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return {
            "card_id": self.card_id,
            "owner_id": self.owner_id,
            "title": self.title,
            "design_data": self.design_data,
            "share_token": self.share_token,
            "is_public": self.is_public,
            "view_count": self.view_count,
            "template_id": self.template_id,
            "thumbnail_path": self.thumbnail_path,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class TemplateRecord:
    template_id: str
    name: str
    category: str
    tags: list[str] = field(default_factory=list)
    preview_image_url: Optional[str] = None
    is_premium: bool = False
    language: str = "en"
    country: Optional[str] = None
    is_universal: bool = False
    downloads_count: int = 0
    design_data: dict = field(
        default_factory=lambda: {"version": "1.0", "objects": []}
    )
    created_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return {
            "template_id": self.template_id,
            "name": self.name,
            "category": self.category,
            "tags": list(self.tags),
            "preview_image_url": self.preview_image_url,
            "is_premium": self.is_premium,
            "language": self.language,
            "country": self.country,
            "is_universal": self.is_universal,
            "downloads_count": self.downloads_count,
            "design_data": self.design_data,
            "created_at": self.created_at,
        }


class DbClient(Protocol):
    """Interface for database access."""

    def insert_card(self, card: CardRecord) -> CardRecord:
        ...

    def get_card(self, card_id: str) -> Optional[CardRecord]:
        ...

    def get_card_by_share_token(self, token: str) -> Optional[CardRecord]:
        ...

    def update_card(
        self,
        card_id: str,
        *,
        title: Optional[str] = None,
        design_data: Optional[dict] = None,
        is_public: Optional[bool] = None,
        thumbnail_path: Optional[str] = None,
    ) -> Optional[CardRecord]:
        ...

    def increment_view_count(self, card_id: str) -> Optional[CardRecord]:
        ...

    def delete_card(self, card_id: str) -> bool:
        ...

    def list_cards(
        self, owner_id: str, limit: int = 20, offset: int = 0
    ) -> tuple[list[CardRecord], int]:
        ...

    def save_template(self, template: TemplateRecord) -> TemplateRecord:
        ...

    def delete_all_templates(self) -> int:
        ...

    def get_template(self, template_id: str) -> Optional[TemplateRecord]:
        ...

    def list_templates(
        self,
        *,
        category: Optional[str] = None,
        is_premium: Optional[bool] = None,
        language: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[TemplateRecord], int]:
        ...

    def recommend_templates(self, country: str, limit: int = 20) -> list[TemplateRecord]:
        ...

    def search_templates(
        self, query: str, category: Optional[str] = None, limit: int = 30
    ) -> list[TemplateRecord]:
        ...

    def template_categories(self) -> list[tuple[str, int]]:
        ...

    def add_favorite(self, user_id: str, template_id: str) -> None:
        ...

    def remove_favorite(self, user_id: str, template_id: str) -> None:
        ...

    def list_favorites(self, user_id: str) -> list[TemplateRecord]:
        ...

    def record_ai_usage(
        self, user_id: str, usage_type: str, tokens_used: int = 0
    ) -> None:
        ...

    def count_ai_usage(self, user_id: str, since: float) -> int:
        ...

    def get_subscription(self, user_id: str) -> tuple[str, Optional[float]]:
        ...

    def get_subscription_tier(self, user_id: str) -> str:
        ...

    def set_subscription_tier(
        self, user_id: str, tier: str, expires_at: Optional[float] = None
    ) -> None:
        ...


def _by_popularity(template: TemplateRecord) -> int:
    return -template.downloads_count


def _violates_share_token(exc: IntegrityError) -> bool:
    # Postgres names the constraint and key, SQLite the column: both mention it.
    return "share_token" in str(exc.orig)


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.cards: Dict[str, CardRecord] = {}
        self.cards_by_token: Dict[str, str] = {}
        self.templates: Dict[str, TemplateRecord] = {}
        self.favorites: Dict[tuple[str, str], float] = {}
        self.ai_usage: list[tuple[str, str, int, float]] = []
        self.subscriptions: Dict[str, tuple[str, Optional[float]]] = {}
        # Guards every dict below and stands in for the unique index on share_token.
        self._lock = threading.Lock()

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        with self._lock:
            self.cards.clear()
            self.cards_by_token.clear()
            self.templates.clear()
            self.favorites.clear()
            self.ai_usage.clear()
            self.subscriptions.clear()

    def insert_card(self, card: CardRecord) -> CardRecord:
        with self._lock:
            if card.card_id in self.cards:
                raise StorageError(f"Card id already exists: {card.card_id}")
            if card.share_token in self.cards_by_token:
                raise ShareTokenTaken(card.share_token)
            stored = replace(card)
            self.cards[card.card_id] = stored
            self.cards_by_token[card.share_token] = card.card_id
            return replace(stored)

    def get_card(self, card_id: str) -> Optional[CardRecord]:
        with self._lock:
            card = self.cards.get(card_id)
            return replace(card) if card else None

    def get_card_by_share_token(self, token: str) -> Optional[CardRecord]:
        with self._lock:
            card = self.cards.get(self.cards_by_token.get(token, ""))
            return replace(card) if card else None

    def update_card(
        self,
        card_id: str,
        *,
        title: Optional[str] = None,
        design_data: Optional[dict] = None,
        is_public: Optional[bool] = None,
        thumbnail_path: Optional[str] = None,
    ) -> Optional[CardRecord]:
        with self._lock:
            card = self.cards.get(card_id)
            if not card:
                return None
            if title is not None:
                card.title = title
            if design_data is not None:
                card.design_data = design_data
            if is_public is not None:
                card.is_public = is_public
            if thumbnail_path is not None:
                card.thumbnail_path = thumbnail_path
            card.updated_at = time.time()
            return replace(card)

    def increment_view_count(self, card_id: str) -> Optional[CardRecord]:
        with self._lock:
            card = self.cards.get(card_id)
            if not card:
                return None
            card.view_count += 1
            return replace(card)

    def delete_card(self, card_id: str) -> bool:
        with self._lock:
            card = self.cards.pop(card_id, None)
            if not card:
                return False
            self.cards_by_token.pop(card.share_token, None)
            return True

    def list_cards(
        self, owner_id: str, limit: int = 20, offset: int = 0
    ) -> tuple[list[CardRecord], int]:
        with self._lock:
            owned = [replace(c) for c in self.cards.values() if c.owner_id == owner_id]
        owned.sort(key=lambda c: c.updated_at, reverse=True)
        return owned[offset : offset + limit], len(owned)

    def save_template(self, template: TemplateRecord) -> TemplateRecord:
        with self._lock:
            self.templates[template.template_id] = replace(template, tags=list(template.tags))
        return template

    def delete_all_templates(self) -> int:
        with self._lock:
            count = len(self.templates)
            self.templates.clear()
            self.favorites.clear()
        return count

    def get_template(self, template_id: str) -> Optional[TemplateRecord]:
        with self._lock:
            return self.templates.get(template_id)

    def _template_snapshot(self) -> list[TemplateRecord]:
        with self._lock:
            return list(self.templates.values())

    def list_templates(
        self,
        *,
        category: Optional[str] = None,
        is_premium: Optional[bool] = None,
        language: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[TemplateRecord], int]:
        matches = [
            t
            for t in self._template_snapshot()
            if (category is None or t.category == category)
            and (is_premium is None or t.is_premium == is_premium)
            and (language is None or t.language == language)
        ]
        matches.sort(key=_by_popularity)
        return matches[offset : offset + limit], len(matches)

    def recommend_templates(self, country: str, limit: int = 20) -> list[TemplateRecord]:
        matches = [
            t
            for t in self._template_snapshot()
            if t.country == country or t.is_universal
        ]
        matches.sort(key=lambda t: (0 if t.country == country else 1, -t.downloads_count))
        return matches[:limit]

    def search_templates(
        self, query: str, category: Optional[str] = None, limit: int = 30
    ) -> list[TemplateRecord]:
        needle = query.lower()
        matches = [
            t
            for t in self._template_snapshot()
            if (needle in t.name.lower() or query in t.tags)
            and (category is None or t.category == category)
        ]
        matches.sort(key=_by_popularity)
        return matches[:limit]

    def template_categories(self) -> list[tuple[str, int]]:
        counts: Dict[str, int] = {}
        for template in self._template_snapshot():
            counts[template.category] = counts.get(template.category, 0) + 1
        return sorted(counts.items())

    def add_favorite(self, user_id: str, template_id: str) -> None:
        with self._lock:
            self.favorites.setdefault((user_id, template_id), time.time())

    def remove_favorite(self, user_id: str, template_id: str) -> None:
        with self._lock:
            self.favorites.pop((user_id, template_id), None)

    def list_favorites(self, user_id: str) -> list[TemplateRecord]:
        with self._lock:
            entries = [
                (created_at, self.templates[template_id])
                for (fav_user, template_id), created_at in self.favorites.items()
                if fav_user == user_id and template_id in self.templates
            ]
        entries.sort(key=lambda entry: entry[0], reverse=True)
        return [template for _, template in entries]

    def record_ai_usage(
        self, user_id: str, usage_type: str, tokens_used: int = 0
    ) -> None:
        with self._lock:
            self.ai_usage.append((user_id, usage_type, tokens_used, time.time()))

    def count_ai_usage(self, user_id: str, since: float) -> int:
        with self._lock:
            usage = list(self.ai_usage)
        return sum(
            1 for uid, _, _, created_at in usage
            if uid == user_id and created_at >= since
        )

    def get_subscription(self, user_id: str) -> tuple[str, Optional[float]]:
        with self._lock:
            return self.subscriptions.get(user_id, (DEFAULT_TIER, None))

    def get_subscription_tier(self, user_id: str) -> str:
        tier, _ = self.get_subscription(user_id)
        return tier

    def set_subscription_tier(
        self, user_id: str, tier: str, expires_at: Optional[float] = None
    ) -> None:
        with self._lock:
            self.subscriptions[user_id] = (tier, expires_at)


class PostgresDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for PostgresDbClient")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with self.Session() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.exception("Database operation failed")
            raise StorageError("Backing store failure") from exc

    def _to_card_record(self, row: "CardRow") -> CardRecord:
        return CardRecord(
            card_id=row.card_id,
            owner_id=row.owner_id,
            title=row.title,
            design_data=row.design_data,
            share_token=row.share_token,
            is_public=row.is_public,
            view_count=row.view_count,
            template_id=row.template_id,
            thumbnail_path=row.thumbnail_path,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _to_template_record(
        self, row: "TemplateRow", tags: list[str]
    ) -> TemplateRecord:
        return TemplateRecord(
            template_id=row.template_id,
            name=row.name,
            category=row.category,
            tags=tags,
            preview_image_url=row.preview_image_url,
            is_premium=row.is_premium,
            language=row.language,
            country=row.country,
            is_universal=row.is_universal,
            downloads_count=row.downloads_count,
            design_data=row.design_data,
            created_at=row.created_at,
        )

    def _templates_with_tags(
        self, session: Session, rows: list["TemplateRow"]
    ) -> list[TemplateRecord]:
        if not rows:
            return []
        ids = [row.template_id for row in rows]
        tags: Dict[str, list[str]] = {template_id: [] for template_id in ids}
        stmt = (
            select(TemplateTagRow)
            .where(TemplateTagRow.template_id.in_(ids))
            .order_by(TemplateTagRow.position.asc())
        )
        for tag_row in session.execute(stmt).scalars():
            tags[tag_row.template_id].append(tag_row.tag)
        return [self._to_template_record(row, tags[row.template_id]) for row in rows]

    def insert_card(self, card: CardRecord) -> CardRecord:
        with self._session() as session:
            row = CardRow(
                card_id=card.card_id,
                owner_id=card.owner_id,
                title=card.title,
                design_data=card.design_data,
                share_token=card.share_token,
                is_public=card.is_public,
                view_count=card.view_count,
                template_id=card.template_id,
                thumbnail_path=card.thumbnail_path,
                created_at=card.created_at,
                updated_at=card.updated_at,
            )
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                if _violates_share_token(exc):
                    raise ShareTokenTaken(card.share_token) from exc
                raise
            session.refresh(row)
            return self._to_card_record(row)

    def get_card(self, card_id: str) -> Optional[CardRecord]:
        with self._session() as session:
            row = session.get(CardRow, card_id)
            return self._to_card_record(row) if row else None

    def get_card_by_share_token(self, token: str) -> Optional[CardRecord]:
        with self._session() as session:
            stmt = select(CardRow).where(CardRow.share_token == token)
            row = session.execute(stmt).scalar_one_or_none()
            return self._to_card_record(row) if row else None

    def update_card(
        self,
        card_id: str,
        *,
        title: Optional[str] = None,
        design_data: Optional[dict] = None,
        is_public: Optional[bool] = None,
        thumbnail_path: Optional[str] = None,
    ) -> Optional[CardRecord]:
        with self._session() as session:
            row = session.get(CardRow, card_id)
            if not row:
                return None
            if title is not None:
                row.title = title
            if design_data is not None:
                row.design_data = design_data
            if is_public is not None:
                row.is_public = is_public
            if thumbnail_path is not None:
                row.thumbnail_path = thumbnail_path
            row.updated_at = time.time()
            session.commit()
            session.refresh(row)
            return self._to_card_record(row)

    def increment_view_count(self, card_id: str) -> Optional[CardRecord]:
        with self._session() as session:
            session.execute(
                update(CardRow)
                .where(CardRow.card_id == card_id)
                .values(view_count=CardRow.view_count + 1)
            )
            session.commit()
            row = session.get(CardRow, card_id)
            if not row:
                return None
            session.refresh(row)
            return self._to_card_record(row)

    def delete_card(self, card_id: str) -> bool:
        with self._session() as session:
            result = session.execute(delete(CardRow).where(CardRow.card_id == card_id))
            session.commit()
            return (result.rowcount or 0) > 0

    def list_cards(
        self, owner_id: str, limit: int = 20, offset: int = 0
    ) -> tuple[list[CardRecord], int]:
        with self._session() as session:
            total = session.execute(
                select(func.count()).select_from(CardRow).where(CardRow.owner_id == owner_id)
            ).scalar_one()
            rows = (
                session.execute(
                    select(CardRow)
                    .where(CardRow.owner_id == owner_id)
                    .order_by(CardRow.updated_at.desc())
                    .offset(offset)
                    .limit(limit)
                )
                .scalars()
                .all()
            )
            return [self._to_card_record(row) for row in rows], total

    def save_template(self, template: TemplateRecord) -> TemplateRecord:
        with self._session() as session:
            row = session.get(TemplateRow, template.template_id)
            if not row:
                row = TemplateRow(template_id=template.template_id)
                session.add(row)
            row.name = template.name
            row.category = template.category
            row.preview_image_url = template.preview_image_url
            row.is_premium = template.is_premium
            row.language = template.language
            row.country = template.country
            row.is_universal = template.is_universal
            row.downloads_count = template.downloads_count
            row.design_data = template.design_data
            row.created_at = template.created_at
            session.execute(
                delete(TemplateTagRow).where(
                    TemplateTagRow.template_id == template.template_id
                )
            )
            for position, tag in enumerate(dict.fromkeys(template.tags)):
                session.add(
                    TemplateTagRow(
                        template_id=template.template_id, tag=tag, position=position
                    )
                )
            session.commit()
            return template

    def delete_all_templates(self) -> int:
        with self._session() as session:
            session.execute(delete(TemplateFavoriteRow))
            session.execute(delete(TemplateTagRow))
            result = session.execute(delete(TemplateRow))
            session.commit()
            return result.rowcount or 0

    def get_template(self, template_id: str) -> Optional[TemplateRecord]:
        with self._session() as session:
            row = session.get(TemplateRow, template_id)
            if not row:
                return None
            return self._templates_with_tags(session, [row])[0]

    def list_templates(
        self,
        *,
        category: Optional[str] = None,
        is_premium: Optional[bool] = None,
        language: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[TemplateRecord], int]:
        conditions = []
        if category is not None:
            conditions.append(TemplateRow.category == category)
        if is_premium is not None:
            conditions.append(TemplateRow.is_premium == is_premium)
        if language is not None:
            conditions.append(TemplateRow.language == language)
        with self._session() as session:
            total = session.execute(
                select(func.count()).select_from(TemplateRow).where(*conditions)
            ).scalar_one()
            rows = (
                session.execute(
                    select(TemplateRow)
                    .where(*conditions)
                    .order_by(
                        TemplateRow.downloads_count.desc(),
                        TemplateRow.template_id.asc(),
                    )
                    .offset(offset)
                    .limit(limit)
                )
                .scalars()
                .all()
            )
            return self._templates_with_tags(session, list(rows)), total

    def recommend_templates(self, country: str, limit: int = 20) -> list[TemplateRecord]:
        country_rank = case((TemplateRow.country == country, 0), else_=1)
        with self._session() as session:
            rows = (
                session.execute(
                    select(TemplateRow)
                    .where(
                        or_(
                            TemplateRow.country == country,
                            TemplateRow.is_universal.is_(True),
                        )
                    )
                    .order_by(country_rank, TemplateRow.downloads_count.desc())
                    .limit(limit)
                )
                .scalars()
                .all()
            )
            return self._templates_with_tags(session, list(rows))

    def search_templates(
        self, query: str, category: Optional[str] = None, limit: int = 30
    ) -> list[TemplateRecord]:
        tagged = select(TemplateTagRow.template_id).where(TemplateTagRow.tag == query)
        conditions = [
            or_(
                func.lower(TemplateRow.name).contains(query.lower(), autoescape=True),
                TemplateRow.template_id.in_(tagged),
            )
        ]
        if category is not None:
            conditions.append(TemplateRow.category == category)
        with self._session() as session:
            rows = (
                session.execute(
                    select(TemplateRow)
                    .where(*conditions)
                    .order_by(TemplateRow.downloads_count.desc())
                    .limit(limit)
                )
                .scalars()
                .all()
            )
            return self._templates_with_tags(session, list(rows))

    def template_categories(self) -> list[tuple[str, int]]:
        with self._session() as session:
            rows = session.execute(
                select(TemplateRow.category, func.count())
                .group_by(TemplateRow.category)
                .order_by(TemplateRow.category.asc())
            ).all()
            return [(category, count) for category, count in rows]

    def add_favorite(self, user_id: str, template_id: str) -> None:
        with self._session() as session:
            if session.get(TemplateFavoriteRow, (user_id, template_id)):
                return
            session.add(
                TemplateFavoriteRow(
                    user_id=user_id, template_id=template_id, created_at=time.time()
                )
            )
            try:
                session.commit()
            except IntegrityError:
                # A concurrent request favorited it first.
                session.rollback()

    def remove_favorite(self, user_id: str, template_id: str) -> None:
        with self._session() as session:
            session.execute(
                delete(TemplateFavoriteRow).where(
                    TemplateFavoriteRow.user_id == user_id,
                    TemplateFavoriteRow.template_id == template_id,
                )
            )
            session.commit()

    def list_favorites(self, user_id: str) -> list[TemplateRecord]:
        with self._session() as session:
            rows = (
                session.execute(
                    select(TemplateRow)
                    .join(
                        TemplateFavoriteRow,
                        TemplateFavoriteRow.template_id == TemplateRow.template_id,
                    )
                    .where(TemplateFavoriteRow.user_id == user_id)
                    .order_by(TemplateFavoriteRow.created_at.desc())
                )
                .scalars()
                .all()
            )
            return self._templates_with_tags(session, list(rows))

    def record_ai_usage(
        self, user_id: str, usage_type: str, tokens_used: int = 0
    ) -> None:
        with self._session() as session:
            session.add(
                AIUsageRow(
                    id=uuid.uuid4().hex,
                    user_id=user_id,
                    usage_type=usage_type,
                    tokens_used=tokens_used,
                    created_at=time.time(),
                )
            )
            session.commit()

    def count_ai_usage(self, user_id: str, since: float) -> int:
        with self._session() as session:
            return session.execute(
                select(func.count())
                .select_from(AIUsageRow)
                .where(AIUsageRow.user_id == user_id, AIUsageRow.created_at >= since)
            ).scalar_one()

    def get_subscription(self, user_id: str) -> tuple[str, Optional[float]]:
        with self._session() as session:
            row = session.get(UserSubscriptionRow, user_id)
            if not row:
                return DEFAULT_TIER, None
            return row.tier, row.expires_at

    def get_subscription_tier(self, user_id: str) -> str:
        tier, _ = self.get_subscription(user_id)
        return tier

    def set_subscription_tier(
        self, user_id: str, tier: str, expires_at: Optional[float] = None
    ) -> None:
        with self._session() as session:
            row = session.get(UserSubscriptionRow, user_id)
            if row:
                row.tier = tier
                row.expires_at = expires_at
                row.updated_at = time.time()
            else:
                session.add(
                    UserSubscriptionRow(
                        user_id=user_id,
                        tier=tier,
                        expires_at=expires_at,
                        updated_at=time.time(),
                    )
                )
            session.commit()


Base = declarative_base()


class CardRow(Base):
    __tablename__ = "cards"

    card_id = Column(String, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    design_data = Column(JSON, nullable=False)
    share_token = Column(String(16), nullable=False, unique=True)
    is_public = Column(Boolean, nullable=False, default=False)
    view_count = Column(Integer, nullable=False, default=0)
    template_id = Column(String, nullable=True)
    thumbnail_path = Column(String, nullable=True)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False, index=True)


class TemplateRow(Base):
    __tablename__ = "templates"

    template_id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    preview_image_url = Column(String, nullable=True)
    is_premium = Column(Boolean, nullable=False, default=False)
    language = Column(String, nullable=False, default="en", index=True)
    country = Column(String, nullable=True, index=True)
    is_universal = Column(Boolean, nullable=False, default=False)
    downloads_count = Column(Integer, nullable=False, default=0)
    design_data = Column(JSON, nullable=False)
    created_at = Column(Float, nullable=False)


class TemplateTagRow(Base):
    __tablename__ = "template_tags"

    template_id = Column(String, primary_key=True)
    tag = Column(String, primary_key=True, index=True)
    position = Column(Integer, nullable=False, default=0)


class TemplateFavoriteRow(Base):
    __tablename__ = "template_favorites"

    user_id = Column(String, primary_key=True)
    template_id = Column(String, primary_key=True)
    created_at = Column(Float, nullable=False)


class AIUsageRow(Base):
    __tablename__ = "ai_usage"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    usage_type = Column(String, nullable=False)
    tokens_used = Column(Integer, nullable=False, default=0)
    created_at = Column(Float, nullable=False)


class UserSubscriptionRow(Base):
    __tablename__ = "user_subscriptions"

    user_id = Column(String, primary_key=True)
    tier = Column(String, nullable=False, default=DEFAULT_TIER)
    expires_at = Column(Float, nullable=True)
    updated_at = Column(Float, nullable=False)
