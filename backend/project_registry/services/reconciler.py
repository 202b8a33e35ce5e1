"""
Registry Reconciler - keeps stored project refs consistent with the set of
active projects discovered elsewhere.

Every operation is a single round trip to MongoDB and is safe to retry;
nothing here retries on its own.
"""

import logging
from typing import Iterable, List, Optional

from pymongo.database import Database

from project_registry.database.mongo import get_database
from project_registry.entities.project_ref import ProjectRef
from project_registry.repositories.project_ref import ProjectRefRepository

logger = logging.getLogger(__name__)


class RegistryReconciler:
    def __init__(
        self, db: Optional[Database] = None, collection_name: Optional[str] = None
    ):
        self.db = db if db is not None else get_database()
        self.project_ref_repo = ProjectRefRepository(self.db, collection_name)

    def reconcile_tracked(self, active_identifiers: Iterable[str]) -> int:
        """
        Untrack every stored project ref missing from ``active_identifiers``.

        Args:
            active_identifiers: The full, authoritative set of active projects.
                A collection of identifiers; a bare string is rejected.

        Returns:
            Number of project refs that went from tracked to untracked.

        Raises:
            ProjectRefValidationError: If a single string is passed.
            StorageError: If the bulk update fails. Nothing is rolled back;
                calling again with the same set finishes the job.
        """
        active = self.project_ref_repo.active_identifier_set(active_identifiers)
        untracked = self.project_ref_repo.untrack_stale(active)
        logger.info(
            f"Reconciled project refs: {len(active)} active, {untracked} untracked",
            extra={"active_count": len(active), "untracked_count": untracked},
        )
        return untracked

    def upsert(self, project_ref: ProjectRef) -> bool:
        created = self.project_ref_repo.upsert(project_ref)
        logger.info(
            f"{'Created' if created else 'Updated'} project ref {project_ref}",
            extra={"identifier": project_ref.identifier, "operation": "upsert"},
        )
        return created

    def insert(self, project_ref: ProjectRef) -> ProjectRef:
        inserted = self.project_ref_repo.insert(project_ref)
        logger.info(
            f"Inserted project ref {project_ref}",
            extra={"identifier": project_ref.identifier, "operation": "insert"},
        )
        return inserted

    def find(self, identifier: str) -> Optional[ProjectRef]:
        return self.project_ref_repo.find_by_identifier(identifier)

    def tracked_projects(self) -> List[ProjectRef]:
        return self.project_ref_repo.find_all_tracked()

    def all_projects(self) -> List[ProjectRef]:
        return self.project_ref_repo.find_all()

    def list_page(
        self,
        start_key: str = "",
        limit: int = 0,
        descending: bool = False,
        include_private: bool = False,
    ) -> List[ProjectRef]:
        """Page of project refs by identifier; private refs only when asked for."""
        return self.project_ref_repo.find_page(
            start_key, limit, descending=descending, include_private=include_private
        )
