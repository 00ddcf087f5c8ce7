from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class Notification:
    id: str
    title: str
    body: str
    target_category_id: Optional[str] = None
    sent_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Notification":
        return cls(
            id=doc_id,
            title=data.get("title") or "",
            body=data.get("body") or "",
            target_category_id=data.get("targetCategoryId"),
            sent_at=data.get("sentAt"),
        )
