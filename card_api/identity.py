"""
Identity lookup for bearer credentials.

Authentication itself belongs to an external provider; the service only
needs to turn a request's bearer token into a user id.
"""

from __future__ import annotations

import secrets
from typing import Dict, Mapping, Optional, Protocol


class IdentityProvider(Protocol):
    def resolve(self, token: str) -> Optional[str]:
        ...


class InMemoryIdentityProvider:
    """Token table for development and tests."""

    def __init__(self, tokens: Optional[Mapping[str, str]] = None):
        self.tokens: Dict[str, str] = dict(tokens or {})

    def issue_token(self, user_id: str) -> str:
        token = secrets.token_urlsafe(24)
        self.tokens[token] = user_id
        return token

    def resolve(self, token: str) -> Optional[str]:
        return self.tokens.get(token)

    def reset(self) -> None:
        self.tokens.clear()
