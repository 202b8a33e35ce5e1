"""Base repository for MongoDB collections"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterator, List, Optional, Tuple, Type, TypeVar

from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from project_registry.entities.base import BaseEntity
from project_registry.services.exceptions import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseEntity)

SortSpec = List[Tuple[str, int]]


class BaseRepository(Generic[T]):
    """Typed access to one collection; driver failures surface as StorageError."""

    def __init__(self, db: Database, collection_name: str, model_class: Type[T]):
        self.db = db
        self.collection: Collection = db[collection_name]
        self.collection_name = collection_name
        self.model_class = model_class

    @contextmanager
    def _storage_call(self, operation: str) -> Iterator[None]:
        try:
            yield
        except PyMongoError as exc:
            logger.error(
                f"{self.collection_name}.{operation} failed: {exc}",
                exc_info=True,
                extra={"operation": operation},
            )
            raise StorageError(
                f"{operation} on {self.collection_name} failed: {exc}",
                operation=operation,
                cause=exc,
            ) from exc

    def _to_model(self, doc: Optional[Dict[str, Any]]) -> Optional[T]:
        if doc is None:
            return None
        return self.model_class.model_validate(doc)

    def find_one(self, query: Dict[str, Any]) -> Optional[T]:
        with self._storage_call("find_one"):
            doc = self.collection.find_one(query)
        return self._to_model(doc)

    def find_many(
        self,
        query: Dict[str, Any],
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[T]:
        with self._storage_call("find_many"):
            cursor = self.collection.find(query)
            if sort:
                cursor = cursor.sort(sort)
            if skip:
                cursor = cursor.skip(skip)
            if limit > 0:
                cursor = cursor.limit(limit)
            docs = list(cursor)
        return [self._to_model(doc) for doc in docs]

    def insert_one(self, entity: T) -> T:
        document = entity.to_mongo()
        with self._storage_call("insert_one"):
            result = self.collection.insert_one(document)
        entity.id = result.inserted_id
        return entity

    def update_many(self, query: Dict[str, Any], update: Dict[str, Any]) -> int:
        with self._storage_call("update_many"):
            result = self.collection.update_many(query, update)
        return result.modified_count

    def upsert_one(self, query: Dict[str, Any], update: Dict[str, Any]) -> bool:
        """Update the matching document or insert one; True when inserted."""
        with self._storage_call("upsert_one"):
            result = self.collection.update_one(query, update, upsert=True)
        return result.upserted_id is not None
