"""
Pydantic schemas for the card backend.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


def _empty_design() -> dict:
    return {"version": "1.0", "objects": []}


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class CardCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    template_id: Optional[str] = None
    design_data: dict = Field(default_factory=_empty_design)
    is_public: bool = False


class CardUpdateRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    design_data: Optional[dict] = None
    is_public: Optional[bool] = None


class CardSummary(BaseModel):
    card_id: str
    title: str
    share_token: str
    share_url: str
    is_public: bool
    view_count: int
    thumbnail_path: Optional[str] = None
    created_at: float
    updated_at: float


class CardResponse(CardSummary):
    owner_id: str
    design_data: dict
    template_id: Optional[str] = None


class CardListResponse(BaseModel):
    cards: list[CardSummary]
    pagination: Pagination


class DeleteResponse(BaseModel):
    status: Literal["ok"]


class ThumbnailUploadResponse(BaseModel):
    path: str
    url: str


class TemplateSummary(BaseModel):
    template_id: str
    name: str
    category: str
    tags: list[str]
    preview_image_url: Optional[str] = None
    is_premium: bool
    language: str
    country: Optional[str] = None
    is_universal: bool
    downloads_count: int


class TemplateResponse(TemplateSummary):
    design_data: dict


class TemplateListResponse(BaseModel):
    templates: list[TemplateSummary]
    pagination: Pagination


class RecommendedTemplatesResponse(BaseModel):
    templates: list[TemplateSummary]
    country: str


class TemplateSearchResponse(BaseModel):
    query: str
    results: list[TemplateSummary]


class CategoryCount(BaseModel):
    name: str
    count: int


class CategoriesResponse(BaseModel):
    categories: list[CategoryCount]


class FavoriteRequest(BaseModel):
    template_id: str


class FavoritesResponse(BaseModel):
    favorites: list[TemplateSummary]


class GenerateTextRequest(BaseModel):
    occasion: str = Field(..., min_length=1, max_length=200)
    recipient: str = Field(..., min_length=1, max_length=200)
    tone: Optional[str] = Field(default=None, max_length=100)
    language: Optional[str] = Field(default=None, max_length=16)


class DesignSuggestionsRequest(BaseModel):
    occasion: str = Field(..., min_length=1, max_length=200)
    style: Optional[str] = Field(default=None, max_length=100)
    colors: Optional[list[str]] = None


class EnhanceTextRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)
    language: Optional[str] = Field(default=None, max_length=16)


class TextResponse(BaseModel):
    text: str


class DesignSuggestionsResponse(BaseModel):
    color_scheme: list[str]
    font_suggestions: list[str]
    layout_tips: list[str]


class UsageResponse(BaseModel):
    used: int
    quota: int
    remaining: int
    tier: str


class PlanResponse(BaseModel):
    id: str
    name: str
    price: float
    currency: str
    interval: str
    features: list[str]
    ai_quota: int


class PlansResponse(BaseModel):
    plans: list[PlanResponse]


class MySubscriptionResponse(BaseModel):
    tier: str
    ai_quota: int
    expires_at: Optional[float] = None
