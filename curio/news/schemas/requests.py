"""News API request schemas"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic import ValidationError as SchemaValidationError

_datetime_adapter = TypeAdapter(datetime)


def _check_document_id(value: str) -> str:
    if not value or "/" in value:
        raise ValueError("must be a non-empty id without '/'")
    return value


class ProcessedArticleSubmission(BaseModel):
    """
    One classified article posted back by the AI pipeline.

    Only ``id`` and ``categories`` are validated. Every other field, known or
    not, is stored as sent; only ``timestamp`` is normalized.
    """
    model_config = ConfigDict(extra="allow")

    id: str
    categories: List[str] = Field(..., min_length=1)
    title: Any = None
    link: Any = None
    source: Any = None
    timestamp: Optional[datetime] = None
    original_summary: Any = None
    generated_summary: Any = None
    summary_embedding: Any = None

    @field_validator("id")
    @classmethod
    def validate_id(cls, value: str) -> str:
        return _check_document_id(value)

    @field_validator("categories")
    @classmethod
    def validate_categories(cls, value: List[str]) -> List[str]:
        for category_id in value:
            _check_document_id(category_id)
        # Same category twice is the same location
        return list(dict.fromkeys(value))

    @field_validator("timestamp", mode="before")
    @classmethod
    def lenient_timestamp(cls, value: Any) -> Optional[datetime]:
        # Unparseable timestamps fall back to the receive time instead of rejecting the article
        if value in (None, ""):
            return None
        try:
            parsed = _datetime_adapter.validate_python(value)
        except SchemaValidationError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    def to_document(self, received_at: datetime) -> Dict[str, Any]:
        document = {**(self.model_extra or {}), **self.model_dump(exclude_unset=True)}
        document["categories"] = self.categories
        document["timestamp"] = self.timestamp or received_at
        return document


class FeedCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    url: str = Field(..., min_length=1, max_length=2000)
    enabled: bool = True
    category_id: Optional[str] = None


class FeedUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    url: Optional[str] = Field(None, min_length=1, max_length=2000)
    enabled: Optional[bool] = None
    category_id: Optional[str] = None


class CategoryCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=100)
    id: Optional[str] = Field(None, max_length=100, description="Defaults to the slug")


class CategoryUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=100)


class NotificationCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1, max_length=2000)
    target_category_id: Optional[str] = None
