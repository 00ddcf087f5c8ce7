from google.cloud.firestore import AsyncClient

from .collections import Collections


class UserProfileRepository:
    def __init__(self, client: AsyncClient):
        self.collection = client.collection(Collections.USER_PROFILE)

    async def is_admin(self, uid: str) -> bool:
        snapshot = await self.collection.document(uid).get()
        if not snapshot.exists:
            return False
        return (snapshot.to_dict() or {}).get("is_admin") is True
