"""
Card persistence: maps design documents onto stored card records.
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable, Optional

from card_api import sharing
from card_api.db import CardRecord, DbClient, ShareTokenTaken
from card_api.storage import StorageClient
from card_shared.design_doc import DesignDocument
from card_shared.design_doc_convert import doc_from_dict, doc_to_dict
from card_shared.editor_session import EditorSession
from card_shared.errors import Forbidden, InvalidAttributes, NotFound, StorageError

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKEN_ATTEMPTS = 10
THUMBNAIL_UPLOAD_EXPIRES_IN = 900


def _validated_title(title: str) -> str:
    if not isinstance(title, str) or not title.strip():
        raise InvalidAttributes("Title must not be empty")
    return title


class CardGateway:
    """
    Create, read, update and delete cards on behalf of a user.

    Saves are whole-document replacements and the last write wins; there is
    no version check between concurrent editors of the same card.
    """

    def __init__(
        self,
        db: DbClient,
        token_factory: Callable[[], str] = sharing.generate_share_token,
        max_token_attempts: int = DEFAULT_MAX_TOKEN_ATTEMPTS,
    ):
        self.db = db
        self.token_factory = token_factory
        self.max_token_attempts = max_token_attempts

    def create_card(
        self,
        owner_id: str,
        title: str,
        document: DesignDocument,
        is_public: bool = False,
        template_id: Optional[str] = None,
    ) -> CardRecord:
        title = _validated_title(title)
        design_data = doc_to_dict(document)
        card_id = uuid.uuid4().hex

        # The store's unique index decides; a rejected insert means redraw.
        for attempt in range(1, self.max_token_attempts + 1):
            card = CardRecord(
                card_id=card_id,
                owner_id=owner_id,
                title=title,
                design_data=design_data,
                share_token=self.token_factory(),
                is_public=is_public,
                template_id=template_id,
            )
            try:
                created = self.db.insert_card(card)
            except ShareTokenTaken:
                logger.warning(
                    "Share token collision on attempt %d for card %s", attempt, card_id
                )
                continue
            logger.info("Created card %s for owner %s", created.card_id, owner_id)
            return created
        raise StorageError(
            f"Could not assign a unique share token after {self.max_token_attempts} attempts"
        )

    def update_card(
        self,
        card_id: str,
        requester_id: str,
        *,
        title: Optional[str] = None,
        document: Optional[DesignDocument] = None,
        is_public: Optional[bool] = None,
    ) -> CardRecord:
        self._owned_card(card_id, requester_id)
        if title is not None:
            title = _validated_title(title)
        updated = self.db.update_card(
            card_id,
            title=title,
            design_data=doc_to_dict(document) if document is not None else None,
            is_public=is_public,
        )
        if updated is None:
            # Deleted between the ownership check and the write.
            raise NotFound("Card not found")
        return updated

    def get_card_by_id(
        self, card_id: str, requester_id: Optional[str] = None
    ) -> CardRecord:
        card = self.db.get_card(card_id)
        if card is None:
            raise NotFound("Card not found")
        if not sharing.can_view(card, requester_id):
            raise Forbidden("Access denied")
        return card

    def get_card_by_share_token(self, token: str) -> CardRecord:
        card = self.db.get_card_by_share_token(token)
        # Private cards look exactly like missing ones on this path.
        if card is None or not sharing.visible_via_share_token(card):
            raise NotFound("Card not found")
        viewed = self.db.increment_view_count(card.card_id)
        if viewed is None:
            raise NotFound("Card not found")
        return viewed

    def delete_card(self, card_id: str, requester_id: str) -> None:
        self._owned_card(card_id, requester_id)
        if not self.db.delete_card(card_id):
            raise NotFound("Card not found")
        logger.info("Deleted card %s", card_id)

    def list_cards(
        self, owner_id: str, page: int = 1, limit: int = 20
    ) -> tuple[list[CardRecord], int]:
        if page < 1 or limit < 1:
            raise InvalidAttributes("page and limit must be positive")
        return self.db.list_cards(owner_id, limit=limit, offset=(page - 1) * limit)

    def load_document(self, card: CardRecord) -> DesignDocument:
        return doc_from_dict(card.design_data)

    def open_session(
        self, card_id: str, requester_id: Optional[str] = None
    ) -> EditorSession:
        card = self.get_card_by_id(card_id, requester_id)
        return EditorSession(self.load_document(card))

    def thumbnail_upload_url(
        self, card_id: str, requester_id: str, storage: StorageClient
    ) -> tuple[str, str]:
        self._owned_card(card_id, requester_id)
        path = f"cards/{card_id}/thumbnail.png"
        url = storage.presign_put(path, expires_in=THUMBNAIL_UPLOAD_EXPIRES_IN)
        self.db.update_card(card_id, thumbnail_path=path)
        return path, url

    def _owned_card(self, card_id: str, requester_id: str) -> CardRecord:
        card = self.db.get_card(card_id)
        if card is None:
            raise NotFound("Card not found")
        if card.owner_id != requester_id:
            raise Forbidden("Access denied")
        return card
