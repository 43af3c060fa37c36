"""
Share tokens and visibility rules for cards.
"""

from __future__ import annotations

import secrets
import string
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from card_api.db import CardRecord

SHARE_TOKEN_LENGTH = 8
SHARE_TOKEN_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


def generate_share_token() -> str:
    """Draw one candidate token; uniqueness is enforced by the store."""
    return "".join(
        secrets.choice(SHARE_TOKEN_ALPHABET) for _ in range(SHARE_TOKEN_LENGTH)
    )


def is_share_token(value: str) -> bool:
    return len(value) == SHARE_TOKEN_LENGTH and all(
        ch in SHARE_TOKEN_ALPHABET for ch in value
    )


def can_view(card: "CardRecord", requester_id: Optional[str]) -> bool:
    # An anonymous requester never counts as the owner.
    if card.is_public:
        return True
    return requester_id is not None and requester_id == card.owner_id


def visible_via_share_token(card: "CardRecord") -> bool:
    return card.is_public


def share_url(base_url: str, token: str) -> str:
    return f"{base_url.rstrip('/')}/share/{token}"
