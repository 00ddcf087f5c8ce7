from typing import Any, Dict, Optional

from google.cloud.firestore import AsyncClient

from .collections import CATEGORY_TREE_CACHE_ID, Collections


class CategoryTreeCache:
    """Single cached snapshot of the category tree (``cache/categoryTree``)"""

    def __init__(self, client: AsyncClient):
        self.ref = client.collection(Collections.CACHE).document(CATEGORY_TREE_CACHE_ID)

    async def get(self) -> Optional[Dict[str, Any]]:
        snapshot = await self.ref.get()
        if not snapshot.exists:
            return None
        return snapshot.to_dict()

    async def set(self, tree: Dict[str, Any]) -> None:
        await self.ref.set(tree)

    async def invalidate(self) -> None:
        await self.ref.delete()
