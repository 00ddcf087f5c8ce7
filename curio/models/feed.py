from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class FeedSource:
    """An RSS/Atom feed configured by an admin (``feeds/{id}``)"""
    id: str
    name: str
    feed_url: str
    enabled: bool = True
    category_id: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "feed": self.feed_url,
            "enabled": self.enabled,
            "categoryId": self.category_id,
        }

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "FeedSource":
        return cls(
            id=doc_id,
            name=data.get("name") or "",
            feed_url=data.get("feed") or "",
            # Feeds created before the toggle existed have no field
            enabled=data.get("enabled", True) is not False,
            category_id=data.get("categoryId"),
        )
