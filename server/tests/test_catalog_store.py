import os
import shutil
import tempfile
import unittest

from app_catalog.cache.catalog_store import CatalogStore
from app_catalog.indexer.models import AppRecord


def make_record(app_id, name, launch_path="C:/App/app.exe", last_modified=100):
    return AppRecord(
        id=app_id, name=name, launch_path=launch_path,
        working_directory="C:/App", icon_path=launch_path,
        source="C:/Menu", last_modified=last_modified,
    )


class TestCatalogStore(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp(prefix="catalog_store_")
        self.store = CatalogStore(os.path.join(self.tmpdir, "db", "catalog.db"))

    def tearDown(self):
        self.store.close()
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_creates_parent_directory(self):
        self.assertTrue(os.path.isdir(os.path.join(self.tmpdir, "db")))

    def test_upsert_and_fetch_sorted_by_name(self):
        written = self.store.upsert([make_record("1", "zeta"), make_record("2", "Alpha")])

        apps = self.store.fetch_all()

        self.assertEqual(written, 2)
        self.assertEqual([a["name"] for a in apps], ["Alpha", "zeta"])
        self.assertEqual(apps[0]["launchPath"], "C:/App/app.exe")
        self.assertEqual(apps[0]["workingDirectory"], "C:/App")
        self.assertEqual(apps[0]["launchCount"], 0)
        self.assertIsNone(apps[0]["lastLaunchedAt"])

    def test_upsert_updates_fields_and_keeps_launch_stats(self):
        self.store.upsert([make_record("1", "Editor", launch_path="C:/Old/editor.exe")])
        self.assertTrue(self.store.record_launch("1"))

        self.store.upsert([make_record("1", "Editor", launch_path="C:/New/editor.exe", last_modified=200)])
        app = self.store.get("1")

        self.assertEqual(app["launchPath"], "C:/New/editor.exe")
        self.assertEqual(app["lastModified"], 200)
        self.assertEqual(app["launchCount"], 1)
        self.assertIsNotNone(app["lastLaunchedAt"])

    def test_record_launch_unknown_id(self):
        self.assertFalse(self.store.record_launch("missing"))

    def test_record_without_launch_path_is_not_stored(self):
        blank = AppRecord.model_construct(
            id="blank", name="Blank", launch_path="  ", source="C:/Menu",
            working_directory=None, icon_path=None, last_modified=0,
        )
        with self.assertLogs("app_catalog.cache.catalog_store", level="WARNING"):
            written = self.store.upsert([blank, make_record("1", "One")])

        self.assertEqual(written, 1)
        self.assertIsNone(self.store.get("blank"))

    def test_clear(self):
        self.store.upsert([make_record("1", "One")])
        self.store.clear()
        self.assertEqual(self.store.fetch_all(), [])

    def test_data_survives_reopen(self):
        self.store.upsert([make_record("1", "One")])
        self.store.close()

        self.store = CatalogStore(os.path.join(self.tmpdir, "db", "catalog.db"))

        self.assertEqual([a["id"] for a in self.store.fetch_all()], ["1"])


if __name__ == "__main__":
    unittest.main()
