"""News API response schemas"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


# ============================================================================
# AI pipeline
# ============================================================================

class RawArticleItem(BaseModel):
    """Unprocessed article handed to the AI pipeline"""
    id: str
    link: str
    source: str
    summary: str
    title: str
    timestamp: str  # ISO 8601, JSON safe


class RawArticleListResponse(BaseModel):
    articles: List[RawArticleItem]
    count: int


class FanoutResponse(BaseModel):
    success: bool
    articlesProcessed: int
    totalLocationsSaved: int


# ============================================================================
# Category tree
# ============================================================================

class SubcategoryNode(BaseModel):
    id: str
    name: str
    slug: Optional[str] = None


class CategoryNode(BaseModel):
    id: str
    name: str
    slug: Optional[str] = None
    subcategories: List[SubcategoryNode] = []


class CategoryTreeResponse(BaseModel):
    categories: List[CategoryNode]
    lastUpdate: Optional[datetime] = None


# ============================================================================
# Client reads
# ============================================================================

class ProcessedArticleItem(BaseModel):
    id: str
    category_id: str
    title: str
    link: str
    source: str
    timestamp: Optional[datetime] = None
    original_summary: str = ""
    generated_summary: str = ""
    categories: List[str] = []
    processed_at: Optional[datetime] = None


class ProcessedArticleListResponse(BaseModel):
    category_id: str
    articles: List[ProcessedArticleItem]
    count: int


# ============================================================================
# Admin
# ============================================================================

class FeedResponse(BaseModel):
    id: str
    name: str
    url: str
    enabled: bool
    category_id: Optional[str] = None


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str


class NotificationResponse(BaseModel):
    id: str
    title: str
    body: str
    target_category_id: Optional[str] = None
    sent_at: Optional[datetime] = None


class JobRunResponse(BaseModel):
    job: str
    success: bool
    stats: Optional[dict] = None
