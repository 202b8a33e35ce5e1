"""Repository for ProjectRef entities."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Set

from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database

from project_registry.config import settings
from project_registry.entities.project_ref import ProjectRef, ProjectRefKeys
from project_registry.services.exceptions import ProjectRefValidationError

from .base import BaseRepository


class ProjectRefRepository(BaseRepository[ProjectRef]):
    """Repository for project references, keyed by identifier."""

    def __init__(self, db: Database, collection_name: Optional[str] = None):
        super().__init__(
            db, collection_name or settings.PROJECT_REF_COLLECTION, ProjectRef
        )
        with self._storage_call("create_index"):
            self.collection.create_index(
                [(ProjectRefKeys.IDENTIFIER, ASCENDING)],
                unique=True,
                background=True,
            )

    @staticmethod
    def _require_identifier(project_ref: ProjectRef) -> None:
        if not project_ref.identifier:
            raise ProjectRefValidationError(
                "Project ref has no identifier", field="identifier"
            )

    def insert(self, project_ref: ProjectRef) -> ProjectRef:
        self._require_identifier(project_ref)
        return self.insert_one(project_ref)

    def find_by_identifier(self, identifier: str) -> Optional[ProjectRef]:
        """Project ref with the given identifier, None if there is none."""
        return self.find_one({ProjectRefKeys.IDENTIFIER: identifier})

    def find_all_tracked(self) -> List[ProjectRef]:
        """Project refs still being tracked, i.e. whose project files still exist."""
        return self.find_many({ProjectRefKeys.TRACKED: True})

    def find_all(self) -> List[ProjectRef]:
        return self.find_many({})

    def find_page(
        self,
        start_key: str,
        limit: int,
        descending: bool = False,
        include_private: bool = False,
    ) -> List[ProjectRef]:
        """
        Page of project refs ordered by identifier.

        Ascending pages start at ``start_key`` inclusive; descending pages
        hold the identifiers strictly before it. Private refs are filtered
        out in the query itself, so they never count against ``limit``.
        """
        query: Dict[str, Any] = {}
        if not include_private:
            query[ProjectRefKeys.PRIVATE] = {"$ne": True}

        if descending:
            query[ProjectRefKeys.IDENTIFIER] = {"$lt": start_key}
            sort = [(ProjectRefKeys.IDENTIFIER, DESCENDING)]
        else:
            query[ProjectRefKeys.IDENTIFIER] = {"$gte": start_key}
            sort = [(ProjectRefKeys.IDENTIFIER, ASCENDING)]

        return self.find_many(query, sort=sort, limit=limit)

    @staticmethod
    def active_identifier_set(active_identifiers: Iterable[str]) -> Set[str]:
        if isinstance(active_identifiers, str):
            raise ProjectRefValidationError(
                "Active identifiers must be a collection of identifiers, not a string",
                field="active_identifiers",
            )
        return set(active_identifiers)

    def untrack_stale(self, active_identifiers: Iterable[str]) -> int:
        """
        Mark every project ref whose identifier is not active as untracked.

        Refs in the active set are left as they are; this never marks a ref
        tracked. Returns the number of refs whose flag changed, so a repeated
        call with the same set returns 0.
        """
        active = sorted(self.active_identifier_set(active_identifiers))
        return self.update_many(
            {
                ProjectRefKeys.IDENTIFIER: {"$nin": active},
                ProjectRefKeys.TRACKED: {"$ne": False},
            },
            {"$set": {ProjectRefKeys.TRACKED: False}},
        )

    def upsert(self, project_ref: ProjectRef) -> bool:
        """
        Overwrite the stored ref with the same identifier, or create it.

        Only recognized fields are set; fields written by older schema
        versions are kept. Returns True when a new document was created.
        """
        self._require_identifier(project_ref)
        return self.upsert_one(
            {ProjectRefKeys.IDENTIFIER: project_ref.identifier},
            {"$set": project_ref.upsert_fields()},
        )
