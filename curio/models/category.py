import re
from dataclasses import dataclass, field
from typing import Any, Dict, List


def slugify(name: str) -> str:
    return re.sub(r"\s+", "-", name.strip().lower())


def name_sort_key(name: str):
    return (name.casefold(), name)


@dataclass
class Subcategory:
    id: str
    name: str
    slug: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "slug": self.slug}

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Subcategory":
        return cls(id=doc_id, name=data.get("name") or "", slug=data.get("slug") or "")


@dataclass
class Category:
    """Top-level category; owns its subcategories"""
    id: str
    name: str
    slug: str = ""
    subcategories: List[Subcategory] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "subcategories": [sub.to_dict() for sub in self.subcategories],
        }

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Category":
        return cls(id=doc_id, name=data.get("name") or "", slug=data.get("slug") or "")
