"""
Read-mostly catalog of pre-built card designs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from card_api.db import DbClient, TemplateRecord
from card_api.storage import StorageClient
from card_shared.design_doc_convert import doc_from_dict
from card_shared.editor_session import EditorSession
from card_shared.errors import InvalidAttributes, NotFound

DEFAULT_PAGE_SIZE = 20
RECOMMENDATION_LIMIT = 20
SEARCH_LIMIT = 30
PREVIEW_URL_EXPIRES_IN = 3600


@dataclass(frozen=True)
class TemplateFilter:
    """Conjunction of template predicates; None means no constraint.

    `premium_only=True` keeps premium templates, `False` keeps free ones.
    """

    category: Optional[str] = None
    premium_only: Optional[bool] = None
    locale: Optional[str] = None


class TemplateLibrary:
    def __init__(self, db: DbClient, storage: Optional[StorageClient] = None):
        self.db = db
        self.storage = storage

    def list_templates(
        self,
        template_filter: TemplateFilter = TemplateFilter(),
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> tuple[list[TemplateRecord], int]:
        if page < 1 or page_size < 1:
            raise InvalidAttributes("page and page_size must be positive")
        return self.db.list_templates(
            category=template_filter.category,
            is_premium=template_filter.premium_only,
            language=template_filter.locale,
            limit=page_size,
            offset=(page - 1) * page_size,
        )

    def recommend(self, country_code: str) -> list[TemplateRecord]:
        """Country-specific templates first, then universal ones."""
        return self.db.recommend_templates(
            country_code.upper(), limit=RECOMMENDATION_LIMIT
        )

    def search(self, query: str, category: Optional[str] = None) -> list[TemplateRecord]:
        query = (query or "").strip()
        if not query:
            raise InvalidAttributes("Search query required")
        return self.db.search_templates(query, category=category, limit=SEARCH_LIMIT)

    def get_template(self, template_id: str) -> TemplateRecord:
        template = self.db.get_template(template_id)
        if template is None:
            raise NotFound("Template not found")
        return template

    def categories(self) -> list[tuple[str, int]]:
        return self.db.template_categories()

    def add_favorite(self, user_id: str, template_id: str) -> TemplateRecord:
        template = self.get_template(template_id)
        self.db.add_favorite(user_id, template_id)
        return template

    def remove_favorite(self, user_id: str, template_id: str) -> None:
        self.db.remove_favorite(user_id, template_id)

    def favorites(self, user_id: str) -> list[TemplateRecord]:
        return self.db.list_favorites(user_id)

    def open_session(self, template_id: str) -> EditorSession:
        template = self.get_template(template_id)
        return EditorSession(doc_from_dict(template.design_data))

    def preview_url(self, template: TemplateRecord) -> Optional[str]:
        """Public previews pass through; bucket paths get a signed URL."""
        ref = template.preview_image_url
        if not ref or self.storage is None:
            return ref
        if ref.startswith("/") or "://" in ref:
            return ref
        return self.storage.presign_get(ref, expires_in=PREVIEW_URL_EXPIRES_IN)
