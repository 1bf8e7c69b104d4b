"""In-memory implementation of the ResourceRepository."""

import asyncio
import uuid
from dataclasses import replace

from app.application.interfaces import ResourceRepository
from app.domain.entities import Resource


class InMemoryResourceRepository(ResourceRepository):
    """Resource store kept in a dict; insertion order is creation order."""

    def __init__(self):
        self._resources: dict[str, Resource] = {}
        self._lock = asyncio.Lock()

    async def create(self, resource: Resource) -> Resource:
        async with self._lock:
            if not resource.id:
                resource.id = str(uuid.uuid4())
            self._resources[resource.id] = replace(resource)
            return replace(resource)

    async def get_by_id(self, resource_id: str) -> Resource | None:
        stored = self._resources.get(resource_id)
        return replace(stored) if stored else None

    async def list_all(self) -> list[Resource]:
        # Stable sort keeps insertion order for equal timestamps
        return sorted(
            (replace(r) for r in self._resources.values()),
            key=lambda r: r.created_at,
        )

    async def delete(self, resource_id: str) -> bool:
        async with self._lock:
            return self._resources.pop(resource_id, None) is not None

    async def delete_all(self) -> int:
        async with self._lock:
            count = len(self._resources)
            self._resources.clear()
            return count
