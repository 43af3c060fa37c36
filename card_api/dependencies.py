"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from card_api.config import get_settings
from card_api.db import DbClient, InMemoryDbClient, PostgresDbClient
from card_api.gateway import CardGateway
from card_api.identity import IdentityProvider, InMemoryIdentityProvider
from card_api.storage import CosStorageClient, InMemoryStorageClient, StorageClient
from card_api.template_library import TemplateLibrary

_db_client: DbClient | None = None
_storage_client: StorageClient | None = None
_identity_provider: IdentityProvider | None = None

bearer_scheme = HTTPBearer(auto_error=False)


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so card state persists across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        _db_client = InMemoryDbClient()
    else:
        _db_client = PostgresDbClient(settings.database_url)
    return _db_client


def get_storage_client() -> StorageClient:
    global _storage_client
    if _storage_client:
        return _storage_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.cos_bucket:
        _storage_client = InMemoryStorageClient()
    else:
        _storage_client = CosStorageClient(
            bucket=settings.cos_bucket,
            region=settings.cos_region or "",
            endpoint=settings.cos_endpoint or "",
            access_key_id=settings.aws_access_key_id or "",
            secret_access_key=settings.aws_secret_access_key or "",
        )
    return _storage_client


def get_identity_provider() -> IdentityProvider:
    global _identity_provider
    if _identity_provider:
        return _identity_provider
    _identity_provider = InMemoryIdentityProvider(get_settings().auth_tokens)
    return _identity_provider


def get_card_gateway(db: DbClient = Depends(get_db_client)) -> CardGateway:
    return CardGateway(db, max_token_attempts=get_settings().share_token_max_attempts)


def get_template_library(
    db: DbClient = Depends(get_db_client),
    storage: StorageClient = Depends(get_storage_client),
) -> TemplateLibrary:
    return TemplateLibrary(db, storage)


def get_optional_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> Optional[str]:
    """Resolve the caller if a valid bearer token is present; else anonymous."""
    if not credentials:
        return None
    return identity.resolve(credentials.credentials)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> str:
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user_id = identity.resolve(credentials.credentials)
    if not user_id:
        raise HTTPException(
            status_code=401,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


def get_country_code(
    cf_ipcountry: Optional[str] = Header(default=None, alias="cf-ipcountry"),
) -> str:
    country = (cf_ipcountry or "").strip().upper()
    return country or get_settings().default_country.upper()
