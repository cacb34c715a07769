"""Document storage used by the resource routers."""

import asyncio
import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Protocol
from uuid import uuid4

from natours.services.query import QueryFeatures, matches


class Repository(Protocol):
    """Storage contract the routers depend on."""

    name: str

    async def find(self, features: QueryFeatures) -> tuple[list[dict[str, Any]], int]:
        ...

    async def get(self, doc_id: str) -> Optional[dict[str, Any]]:
        ...

    async def find_one(self, **criteria: Any) -> Optional[dict[str, Any]]:
        ...

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        ...

    async def update(self, doc_id: str, data: dict[str, Any]) -> Optional[dict[str, Any]]:
        ...

    async def delete(self, doc_id: str) -> bool:
        ...


class InMemoryRepository:
    """
    Process-local document collection.

    Documents are plain dicts keyed by a generated ``id``; callers always
    receive copies.
    """

    def __init__(self, name: str):
        self.name = name
        self._docs: dict[str, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def find(self, features: QueryFeatures) -> tuple[list[dict[str, Any]], int]:
        """Return one page of matching documents and the total match count."""
        async with self._lock:
            docs = [doc for doc in self._docs.values() if matches(doc, features.filters)]
        docs = features.apply_sort(docs)
        total = len(docs)
        page = docs[features.offset:features.offset + features.limit]
        return [features.project(copy.deepcopy(doc)) for doc in page], total

    async def get(self, doc_id: str) -> Optional[dict[str, Any]]:
        async with self._lock:
            doc = self._docs.get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    async def find_one(self, **criteria: Any) -> Optional[dict[str, Any]]:
        async with self._lock:
            for doc in self._docs.values():
                if all(doc.get(key) == value for key, value in criteria.items()):
                    return copy.deepcopy(doc)
        return None

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        now = datetime.now(timezone.utc).isoformat()
        doc = {**copy.deepcopy(data), "id": uuid4().hex, "createdAt": now}
        async with self._lock:
            self._docs[doc["id"]] = doc
        return copy.deepcopy(doc)

    async def update(self, doc_id: str, data: dict[str, Any]) -> Optional[dict[str, Any]]:
        changes = {k: v for k, v in copy.deepcopy(data).items() if k not in ("id", "createdAt")}
        async with self._lock:
            doc = self._docs.get(doc_id)
            if doc is None:
                return None
            doc.update(changes)
            return copy.deepcopy(doc)

    async def delete(self, doc_id: str) -> bool:
        async with self._lock:
            return self._docs.pop(doc_id, None) is not None


@dataclass
class Repositories:
    """The collections mounted by the API."""

    tours: Repository = field(default_factory=lambda: InMemoryRepository("tours"))
    users: Repository = field(default_factory=lambda: InMemoryRepository("users"))
    reviews: Repository = field(default_factory=lambda: InMemoryRepository("reviews"))
    bookings: Repository = field(default_factory=lambda: InMemoryRepository("bookings"))

    def get(self, name: str) -> Repository:
        return getattr(self, name)
