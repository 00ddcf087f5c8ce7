from typing import Any, Dict, List

from google.api_core.exceptions import AlreadyExists, NotFound
from google.cloud.firestore import AsyncClient

from ..exceptions import ConflictError, NotFoundError
from ..models.category import Category, Subcategory
from ..utils.batch_utils import chunked
from .collections import Collections

# Firestore's per-batch mutation limit
MAX_BATCH_MUTATIONS = 500


class CategoryRepository:
    def __init__(self, client: AsyncClient):
        self.client = client
        self.collection = client.collection(Collections.CATEGORIES)

    def _subcategories(self, category_id: str):
        return self.collection.document(category_id).collection(Collections.SUBCATEGORIES)

    async def list_categories(self) -> List[Category]:
        return [Category.from_document(doc.id, doc.to_dict() or {}) async for doc in self.collection.stream()]

    async def list_subcategories(self, category_id: str) -> List[Subcategory]:
        return [
            Subcategory.from_document(doc.id, doc.to_dict() or {})
            async for doc in self._subcategories(category_id).stream()
        ]

    async def create_category(self, category: Category) -> Category:
        try:
            await self.collection.document(category.id).create({"name": category.name, "slug": category.slug})
        except AlreadyExists:
            raise ConflictError(f"Category {category.id} already exists", details={"category_id": category.id})
        return category

    async def update_category(self, category_id: str, fields: Dict[str, Any]) -> Category:
        ref = self.collection.document(category_id)
        try:
            await ref.update(fields)
        except NotFound:
            raise NotFoundError(f"Category {category_id} not found", details={"category_id": category_id})
        snapshot = await ref.get()
        return Category.from_document(snapshot.id, snapshot.to_dict() or {})

    async def delete_category(self, category_id: str) -> int:
        """Delete a category and every subcategory it owns. Returns documents deleted."""
        ref = self.collection.document(category_id)
        snapshot = await ref.get()
        if not snapshot.exists:
            raise NotFoundError(f"Category {category_id} not found", details={"category_id": category_id})

        refs = [doc.reference async for doc in self._subcategories(category_id).stream()]
        refs.append(ref)
        for group in chunked(refs, MAX_BATCH_MUTATIONS):
            batch = self.client.batch()
            for doc_ref in group:
                batch.delete(doc_ref)
            await batch.commit()
        return len(refs)

    async def create_subcategory(self, category_id: str, subcategory: Subcategory) -> Subcategory:
        parent = await self.collection.document(category_id).get()
        if not parent.exists:
            raise NotFoundError(f"Category {category_id} not found", details={"category_id": category_id})
        try:
            await self._subcategories(category_id).document(subcategory.id).create(
                {"name": subcategory.name, "slug": subcategory.slug}
            )
        except AlreadyExists:
            raise ConflictError(
                f"Subcategory {subcategory.id} already exists",
                details={"category_id": category_id, "subcategory_id": subcategory.id},
            )
        return subcategory

    async def update_subcategory(self, category_id: str, subcategory_id: str, fields: Dict[str, Any]) -> Subcategory:
        ref = self._subcategories(category_id).document(subcategory_id)
        try:
            await ref.update(fields)
        except NotFound:
            raise NotFoundError(
                f"Subcategory {subcategory_id} not found",
                details={"category_id": category_id, "subcategory_id": subcategory_id},
            )
        snapshot = await ref.get()
        return Subcategory.from_document(snapshot.id, snapshot.to_dict() or {})

    async def delete_subcategory(self, category_id: str, subcategory_id: str) -> None:
        ref = self._subcategories(category_id).document(subcategory_id)
        snapshot = await ref.get()
        if not snapshot.exists:
            raise NotFoundError(
                f"Subcategory {subcategory_id} not found",
                details={"category_id": category_id, "subcategory_id": subcategory_id},
            )
        await ref.delete()
