"""
Article documents stored in Firestore.

Raw articles live in ``rawnews/{id}``; processed copies live in
``processed_articles/{categoryId}/articles/{id}``. Both share the same id,
derived from the article link.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union


@dataclass
class RawArticle:
    """An ingested, not yet classified feed item"""
    id: str
    source: str
    title: str
    timestamp: datetime
    link: str
    summary: str = ""
    is_processed: bool = False

    def to_document(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "title": self.title,
            "timestamp": self.timestamp,
            "link": self.link,
            "summary": self.summary,
            "isProcessed": self.is_processed,
        }

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "RawArticle":
        timestamp = data.get("timestamp")
        if not isinstance(timestamp, datetime):
            timestamp = datetime.now(timezone.utc)
        return cls(
            id=doc_id,
            source=data.get("source") or "",
            title=data.get("title") or "",
            timestamp=timestamp,
            link=data.get("link") or "",
            summary=data.get("summary") or "",
            is_processed=bool(data.get("isProcessed", False)),
        )


@dataclass
class ProcessedArticle:
    """One category copy of a classified article, as read back for clients"""
    id: str
    category_id: str
    title: str = ""
    link: str = ""
    source: str = ""
    timestamp: Optional[datetime] = None
    original_summary: str = ""
    generated_summary: str = ""
    categories: List[str] = field(default_factory=list)
    processed_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, category_id: str, doc_id: str, data: Dict[str, Any]) -> "ProcessedArticle":
        return cls(
            id=doc_id,
            category_id=category_id,
            title=_text(data.get("title")),
            link=_text(data.get("link")),
            source=_text(data.get("source")),
            timestamp=data.get("timestamp"),
            original_summary=_text(data.get("original_summary")),
            generated_summary=_text(data.get("generated_summary")),
            categories=list(data.get("categories") or []),
            processed_at=data.get("processedAt"),
        )


@dataclass(frozen=True)
class MarkProcessed:
    """Flip ``isProcessed`` on an existing raw article"""
    article_id: str


@dataclass(frozen=True)
class StoreProcessedCopy:
    """Write one processed-article copy under a category"""
    category_id: str
    article_id: str
    document: Dict[str, Any]


FanoutWrite = Union[MarkProcessed, StoreProcessedCopy]


def _text(value: Any) -> str:
    # Processed copies store pipeline fields as sent, whatever their type
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
