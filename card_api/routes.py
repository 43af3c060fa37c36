"""
HTTP routes for the card backend API.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, Query

from card_ai import gemini, prompts
from card_api import ai_usage
from card_api.config import get_settings
from card_api.db import CardRecord, DbClient, TemplateRecord
from card_api.dependencies import (
    get_card_gateway,
    get_country_code,
    get_current_user_id,
    get_db_client,
    get_optional_user_id,
    get_storage_client,
    get_template_library,
)
from card_api.gateway import CardGateway
from card_api.schemas import (
    CardCreateRequest,
    CardListResponse,
    CardResponse,
    CardSummary,
    CardUpdateRequest,
    CategoriesResponse,
    CategoryCount,
    DeleteResponse,
    DesignSuggestionsRequest,
    DesignSuggestionsResponse,
    EnhanceTextRequest,
    FavoriteRequest,
    FavoritesResponse,
    GenerateTextRequest,
    MySubscriptionResponse,
    Pagination,
    PlanResponse,
    PlansResponse,
    RecommendedTemplatesResponse,
    TemplateListResponse,
    TemplateResponse,
    TemplateSearchResponse,
    TemplateSummary,
    TextResponse,
    ThumbnailUploadResponse,
    UsageResponse,
)
from card_api.sharing import share_url
from card_api.storage import StorageClient
from card_api.subscriptions import SUBSCRIPTION_PLANS
from card_api.template_library import TemplateFilter, TemplateLibrary
from card_shared.api import (
    DEFAULT_DESIGN_SUGGESTIONS,
    DesignSuggestionRequest,
    GreetingTextRequest,
    ImproveTextRequest,
)
from card_shared.design_doc_convert import doc_from_dict
from card_shared.errors import AIServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


def _pagination(page: int, limit: int, total: int) -> Pagination:
    return Pagination(
        page=page, limit=limit, total=total, total_pages=math.ceil(total / limit)
    )


def _card_fields(card: CardRecord) -> dict:
    return {
        "card_id": card.card_id,
        "title": card.title,
        "share_token": card.share_token,
        "share_url": share_url(get_settings().share_base_url, card.share_token),
        "is_public": card.is_public,
        "view_count": card.view_count,
        "thumbnail_path": card.thumbnail_path,
        "created_at": card.created_at,
        "updated_at": card.updated_at,
    }


def _card_response(card: CardRecord) -> CardResponse:
    return CardResponse(
        **_card_fields(card),
        owner_id=card.owner_id,
        design_data=card.design_data,
        template_id=card.template_id,
    )


def _template_fields(template: TemplateRecord, library: TemplateLibrary) -> dict:
    return {
        "template_id": template.template_id,
        "name": template.name,
        "category": template.category,
        "tags": list(template.tags),
        "preview_image_url": library.preview_url(template),
        "is_premium": template.is_premium,
        "language": template.language,
        "country": template.country,
        "is_universal": template.is_universal,
        "downloads_count": template.downloads_count,
    }


def _template_summaries(
    templates: list[TemplateRecord], library: TemplateLibrary
) -> list[TemplateSummary]:
    return [TemplateSummary(**_template_fields(t, library)) for t in templates]


def _ask_model(call, *args, **kwargs):
    try:
        return call(*args, **kwargs)
    except Exception as exc:
        logger.exception("AI text service call failed")
        raise AIServiceError("AI text service failed") from exc


# Cards


@router.post("/cards", response_model=CardResponse, status_code=201)
def create_card(
    payload: CardCreateRequest,
    user_id: str = Depends(get_current_user_id),
    gateway: CardGateway = Depends(get_card_gateway),
):
    document = doc_from_dict(payload.design_data)
    card = gateway.create_card(
        user_id,
        payload.title,
        document,
        is_public=payload.is_public,
        template_id=payload.template_id,
    )
    return _card_response(card)


@router.get("/cards", response_model=CardListResponse)
def list_cards(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    gateway: CardGateway = Depends(get_card_gateway),
):
    cards, total = gateway.list_cards(user_id, page=page, limit=limit)
    return CardListResponse(
        cards=[CardSummary(**_card_fields(card)) for card in cards],
        pagination=_pagination(page, limit, total),
    )


@router.get("/cards/share/{token}", response_model=CardResponse)
def get_card_by_share_token(
    token: str, gateway: CardGateway = Depends(get_card_gateway)
):
    return _card_response(gateway.get_card_by_share_token(token))


@router.get("/cards/{card_id}", response_model=CardResponse)
def get_card(
    card_id: str,
    user_id: Optional[str] = Depends(get_optional_user_id),
    gateway: CardGateway = Depends(get_card_gateway),
):
    return _card_response(gateway.get_card_by_id(card_id, user_id))


@router.put("/cards/{card_id}", response_model=CardResponse)
def update_card(
    card_id: str,
    payload: CardUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    gateway: CardGateway = Depends(get_card_gateway),
):
    document = (
        doc_from_dict(payload.design_data) if payload.design_data is not None else None
    )
    card = gateway.update_card(
        card_id,
        user_id,
        title=payload.title,
        document=document,
        is_public=payload.is_public,
    )
    return _card_response(card)


@router.delete("/cards/{card_id}", response_model=DeleteResponse)
def delete_card(
    card_id: str,
    user_id: str = Depends(get_current_user_id),
    gateway: CardGateway = Depends(get_card_gateway),
):
    gateway.delete_card(card_id, user_id)
    return DeleteResponse(status="ok")


@router.post("/cards/{card_id}/thumbnail-url", response_model=ThumbnailUploadResponse)
def card_thumbnail_upload_url(
    card_id: str,
    user_id: str = Depends(get_current_user_id),
    gateway: CardGateway = Depends(get_card_gateway),
    storage: StorageClient = Depends(get_storage_client),
):
    path, url = gateway.thumbnail_upload_url(card_id, user_id, storage)
    return ThumbnailUploadResponse(path=path, url=url)


# Templates


@router.get("/templates", response_model=TemplateListResponse)
def list_templates(
    category: Optional[str] = Query(None),
    premium: Optional[bool] = Query(None),
    locale: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    library: TemplateLibrary = Depends(get_template_library),
):
    templates, total = library.list_templates(
        TemplateFilter(category=category, premium_only=premium, locale=locale),
        page=page,
        page_size=limit,
    )
    return TemplateListResponse(
        templates=_template_summaries(templates, library),
        pagination=_pagination(page, limit, total),
    )


@router.get("/templates/recommended", response_model=RecommendedTemplatesResponse)
def recommended_templates(
    country: str = Depends(get_country_code),
    library: TemplateLibrary = Depends(get_template_library),
):
    templates = library.recommend(country)
    return RecommendedTemplatesResponse(
        templates=_template_summaries(templates, library), country=country
    )


@router.get("/templates/search", response_model=TemplateSearchResponse)
def search_templates(
    q: str = Query(..., min_length=1),
    category: Optional[str] = Query(None),
    library: TemplateLibrary = Depends(get_template_library),
):
    results = library.search(q, category=category)
    return TemplateSearchResponse(
        query=q, results=_template_summaries(results, library)
    )


@router.get("/templates/categories", response_model=CategoriesResponse)
def template_categories(library: TemplateLibrary = Depends(get_template_library)):
    return CategoriesResponse(
        categories=[
            CategoryCount(name=name, count=count)
            for name, count in library.categories()
        ]
    )


@router.get("/templates/favorites", response_model=FavoritesResponse)
def favorite_templates(
    user_id: str = Depends(get_current_user_id),
    library: TemplateLibrary = Depends(get_template_library),
):
    return FavoritesResponse(
        favorites=_template_summaries(library.favorites(user_id), library)
    )


@router.post("/templates/favorite", response_model=TemplateSummary, status_code=201)
def favorite_template(
    payload: FavoriteRequest,
    user_id: str = Depends(get_current_user_id),
    library: TemplateLibrary = Depends(get_template_library),
):
    template = library.add_favorite(user_id, payload.template_id)
    return TemplateSummary(**_template_fields(template, library))


@router.delete("/templates/favorite/{template_id}", response_model=DeleteResponse)
def unfavorite_template(
    template_id: str,
    user_id: str = Depends(get_current_user_id),
    library: TemplateLibrary = Depends(get_template_library),
):
    library.remove_favorite(user_id, template_id)
    return DeleteResponse(status="ok")


@router.get("/templates/{template_id}", response_model=TemplateResponse)
def get_template(
    template_id: str, library: TemplateLibrary = Depends(get_template_library)
):
    template = library.get_template(template_id)
    return TemplateResponse(
        **_template_fields(template, library), design_data=template.design_data
    )


# AI text service


@router.post("/ai/generate-text", response_model=TextResponse)
def generate_text(
    payload: GenerateTextRequest,
    user_id: str = Depends(get_current_user_id),
    db: DbClient = Depends(get_db_client),
):
    ai_usage.check_quota(db, user_id)
    request = GreetingTextRequest(
        occasion=payload.occasion,
        recipient=payload.recipient,
        tone=payload.tone or "warm",
        language=payload.language or "en",
    )
    settings = get_settings()
    text = _ask_model(
        gemini.call_predict,
        prompts.make_greeting_prompt(request),
        model=settings.gemini_model,
        api_key=settings.gemini_api_key,
        system_instruction=prompts.GREETING_SYSTEM_INSTRUCTION,
    )
    ai_usage.track_usage(db, user_id, ai_usage.USAGE_TEXT_GENERATION)
    return TextResponse(text=text)


@router.post("/ai/design-suggestions", response_model=DesignSuggestionsResponse)
def design_suggestions(
    payload: DesignSuggestionsRequest,
    user_id: str = Depends(get_current_user_id),
    db: DbClient = Depends(get_db_client),
):
    ai_usage.check_quota(db, user_id)
    request = DesignSuggestionRequest(
        occasion=payload.occasion,
        style=payload.style or "modern",
        colors=payload.colors or [],
    )
    settings = get_settings()
    parsed = _ask_model(
        gemini.call_predict_with_schema,
        prompts.make_design_suggestions_prompt(request),
        prompts.DesignSuggestionsSchema,
        model=settings.gemini_model,
        api_key=settings.gemini_api_key,
        system_instruction=prompts.DESIGN_SYSTEM_INSTRUCTION,
    )
    ai_usage.track_usage(db, user_id, ai_usage.USAGE_DESIGN_SUGGESTION)
    if parsed is None:
        fallback = DEFAULT_DESIGN_SUGGESTIONS
        return DesignSuggestionsResponse(
            color_scheme=fallback.color_scheme,
            font_suggestions=fallback.font_suggestions,
            layout_tips=fallback.layout_tips,
        )
    return DesignSuggestionsResponse(
        color_scheme=parsed.colorScheme,
        font_suggestions=parsed.fontSuggestions,
        layout_tips=parsed.layoutTips,
    )


@router.post("/ai/enhance-text", response_model=TextResponse)
def enhance_text(
    payload: EnhanceTextRequest,
    user_id: str = Depends(get_current_user_id),
    db: DbClient = Depends(get_db_client),
):
    ai_usage.check_quota(db, user_id)
    request = ImproveTextRequest(text=payload.text, language=payload.language)
    settings = get_settings()
    text = _ask_model(
        gemini.call_predict,
        prompts.make_improve_text_prompt(request),
        model=settings.gemini_model,
        api_key=settings.gemini_api_key,
        system_instruction=prompts.IMPROVE_SYSTEM_INSTRUCTION,
        temperature=0.7,
    )
    ai_usage.track_usage(db, user_id, ai_usage.USAGE_TEXT_IMPROVEMENT)
    return TextResponse(text=text or payload.text)


@router.get("/ai/usage", response_model=UsageResponse)
def ai_usage_stats(
    user_id: str = Depends(get_current_user_id),
    db: DbClient = Depends(get_db_client),
):
    stats = ai_usage.usage_stats(db, user_id)
    return UsageResponse(
        used=stats.used, quota=stats.quota, remaining=stats.remaining, tier=stats.tier
    )


# Subscriptions


@router.get("/subscriptions/plans", response_model=PlansResponse)
def subscription_plans():
    return PlansResponse(
        plans=[
            PlanResponse(
                id=plan.id,
                name=plan.name,
                price=plan.price,
                currency=plan.currency,
                interval=plan.interval,
                features=list(plan.features),
                ai_quota=plan.ai_quota,
            )
            for plan in SUBSCRIPTION_PLANS
        ]
    )


@router.get("/subscriptions/me", response_model=MySubscriptionResponse)
def my_subscription(
    user_id: str = Depends(get_current_user_id),
    db: DbClient = Depends(get_db_client),
):
    tier, expires_at = db.get_subscription(user_id)
    return MySubscriptionResponse(
        tier=tier, ai_quota=ai_usage.quota_for_tier(tier), expires_at=expires_at
    )
