import unittest
from unittest.mock import MagicMock, patch

from fake_mongo import FakeDatabase
from project_registry.entities.project_ref import ProjectRef
from project_registry.services.reconciler import RegistryReconciler
from project_registry.services.exceptions import ProjectRefValidationError


class TestRegistryReconciler(unittest.TestCase):
    def setUp(self):
        self.db = FakeDatabase()
        self.reconciler = RegistryReconciler(self.db)
        for identifier in ("a", "b", "c"):
            self.reconciler.insert(ProjectRef(identifier=identifier, tracked=True))

    def test_reconcile_untracks_stale_projects(self):
        with self.assertLogs("project_registry.services.reconciler", "INFO") as logs:
            untracked = self.reconciler.reconcile_tracked(["a", "c"])

        self.assertEqual(untracked, 1)
        self.assertFalse(self.reconciler.find("b").tracked)
        self.assertTrue(self.reconciler.find("a").tracked)
        self.assertTrue(self.reconciler.find("c").tracked)
        self.assertEqual(
            [str(ref) for ref in self.reconciler.tracked_projects()], ["a", "c"]
        )
        self.assertIn("2 active, 1 untracked", logs.output[0])

    def test_reconcile_is_idempotent(self):
        self.reconciler.reconcile_tracked({"a"})
        first = [ref.model_dump() for ref in self.reconciler.all_projects()]

        self.assertEqual(self.reconciler.reconcile_tracked({"a"}), 0)
        self.assertEqual(
            [ref.model_dump() for ref in self.reconciler.all_projects()], first
        )

    def test_explicit_upsert_reactivates_project(self):
        self.reconciler.reconcile_tracked(["a"])
        self.assertFalse(self.reconciler.find("b").tracked)

        created = self.reconciler.upsert(ProjectRef(identifier="b", tracked=True))

        self.assertFalse(created)
        self.assertTrue(self.reconciler.find("b").tracked)
        self.assertEqual(len(self.reconciler.all_projects()), 3)

    def test_list_page_hides_private_projects_by_default(self):
        self.reconciler.upsert(ProjectRef(identifier="bb", private=True))

        self.assertEqual(
            [str(ref) for ref in self.reconciler.list_page()], ["a", "b", "c"]
        )
        self.assertEqual(
            [str(ref) for ref in self.reconciler.list_page(include_private=True)],
            ["a", "b", "bb", "c"],
        )

    def test_rejects_single_string(self):
        with self.assertRaises(ProjectRefValidationError):
            self.reconciler.reconcile_tracked("abc")

        self.assertEqual(
            [str(ref) for ref in self.reconciler.tracked_projects()], ["a", "b", "c"]
        )

    def test_find_missing_returns_none(self):
        self.assertIsNone(RegistryReconciler(FakeDatabase()).find("missing"))

    def test_uses_configured_collection(self):
        db = MagicMock()
        with patch(
            "project_registry.config.settings.PROJECT_REF_COLLECTION",
            "refs",
        ):
            RegistryReconciler(db)
        db.__getitem__.assert_called_with("refs")

    @patch("project_registry.services.reconciler.get_database")
    def test_defaults_to_application_database(self, mock_get_db):
        mock_get_db.return_value = FakeDatabase()

        reconciler = RegistryReconciler()

        mock_get_db.assert_called_once_with()
        self.assertIs(reconciler.db, mock_get_db.return_value)


if __name__ == "__main__":
    unittest.main()
