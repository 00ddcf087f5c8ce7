"""
Category Service
Owns the two-level category tree and its read-through cache.

The tree is rebuilt lazily: a read that finds no cached snapshot reads every
category and its subcategories, stores the sorted result, and returns it.
Every category or subcategory write deletes the snapshot so the next read
rebuilds. Two concurrent misses may both rebuild and both store; the last
write wins and both snapshots are built from the same data.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog

from ...exceptions import ValidationError
from ...models.category import Category, Subcategory, name_sort_key, slugify
from ...repositories.cache_repository import CategoryTreeCache
from ...repositories.category_repository import CategoryRepository

logger = structlog.get_logger(__name__)


class CategoryService:
    def __init__(self, category_repository: CategoryRepository, cache: CategoryTreeCache):
        self.category_repository = category_repository
        self.cache = cache

    async def get_tree(self) -> Dict[str, Any]:
        cached = await self.cache.get()
        if cached is not None:
            return cached

        tree, complete = await self.build_tree()
        if complete:
            await self.cache.set(tree)
        else:
            logger.warning("Category tree rebuilt with missing subcategories, not caching it")
        return tree

    async def build_tree(self) -> tuple:
        """Returns (tree, complete). ``complete`` is False if any subcategory read failed."""
        categories = await self.category_repository.list_categories()
        results = await asyncio.gather(
            *(self.category_repository.list_subcategories(category.id) for category in categories),
            return_exceptions=True,
        )

        complete = True
        for category, subcategories in zip(categories, results):
            if isinstance(subcategories, BaseException):
                complete = False
                logger.error("Failed to read subcategories", category_id=category.id, error=str(subcategories))
                continue
            category.subcategories = sorted(subcategories, key=lambda sub: name_sort_key(sub.name))

        categories.sort(key=lambda category: name_sort_key(category.name))
        tree = {
            "categories": [category.to_dict() for category in categories],
            "lastUpdate": datetime.now(timezone.utc),
        }
        logger.info("Category tree rebuilt", categories=len(categories))
        return tree, complete

    async def invalidate_cache(self, reason: str) -> None:
        await self.cache.invalidate()
        logger.info("Category cache invalidated", reason=reason)

    async def _invalidate_after_write(self, reason: str) -> None:
        # Runs in `finally`; must not mask the write's own outcome
        try:
            await self.invalidate_cache(reason)
        except Exception as e:
            logger.error("Failed to invalidate category cache", reason=reason, error=str(e))

    # ------------------------------------------------------------------
    # Writes. Each one invalidates the cached tree, even when it fails
    # part-way (a cascade delete may have removed some documents).
    # ------------------------------------------------------------------

    async def create_category(self, name: str, slug: Optional[str] = None, category_id: Optional[str] = None) -> Category:
        category = _new_node(Category, name, slug, category_id)
        try:
            return await self.category_repository.create_category(category)
        finally:
            await self._invalidate_after_write("category created")

    async def update_category(self, category_id: str, name: Optional[str] = None, slug: Optional[str] = None) -> Category:
        fields = _update_fields(name, slug)
        try:
            return await self.category_repository.update_category(category_id, fields)
        finally:
            await self._invalidate_after_write("category updated")

    async def delete_category(self, category_id: str) -> int:
        try:
            return await self.category_repository.delete_category(category_id)
        finally:
            await self._invalidate_after_write("category deleted")

    async def create_subcategory(
        self,
        category_id: str,
        name: str,
        slug: Optional[str] = None,
        subcategory_id: Optional[str] = None,
    ) -> Subcategory:
        subcategory = _new_node(Subcategory, name, slug, subcategory_id)
        try:
            return await self.category_repository.create_subcategory(category_id, subcategory)
        finally:
            await self._invalidate_after_write("subcategory created")

    async def update_subcategory(
        self,
        category_id: str,
        subcategory_id: str,
        name: Optional[str] = None,
        slug: Optional[str] = None,
    ) -> Subcategory:
        fields = _update_fields(name, slug)
        try:
            return await self.category_repository.update_subcategory(category_id, subcategory_id, fields)
        finally:
            await self._invalidate_after_write("subcategory updated")

    async def delete_subcategory(self, category_id: str, subcategory_id: str) -> None:
        try:
            await self.category_repository.delete_subcategory(category_id, subcategory_id)
        finally:
            await self._invalidate_after_write("subcategory deleted")


def _new_node(node_class, name: str, slug: Optional[str], node_id: Optional[str]):
    name = (name or "").strip()
    if not name:
        raise ValidationError("Category name is required")
    slug = slugify(slug) if slug else slugify(name)
    node_id = node_id or slug
    if not node_id or "/" in node_id:
        raise ValidationError(f"Invalid category id: {node_id!r}")
    return node_class(id=node_id, name=name, slug=slug)


def _update_fields(name: Optional[str], slug: Optional[str]) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    if name is not None:
        name = name.strip()
        if not name:
            raise ValidationError("Category name cannot be empty")
        fields["name"] = name
    if slug:
        fields["slug"] = slugify(slug)
    if not fields:
        raise ValidationError("Nothing to update")
    return fields
