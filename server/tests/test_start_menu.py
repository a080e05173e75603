import os
import shutil
import tempfile
import unittest

from app_catalog.indexer.identity import hash_id
from app_catalog.indexer.models import AppRecord, ShortcutMetadata, Skip
from app_catalog.indexer.normalizer import normalize_path
from app_catalog.indexer.shortcut_decoder import build_metadata
from app_catalog.indexer.start_menu import iter_start_menu

from catalog_fakes import FIXED_NOW, FakeDecoder, fixed_now, touch


class TestStartMenuIngester(unittest.TestCase):
    def setUp(self):
        self.root = tempfile.mkdtemp(prefix="startmenu_")

    def tearDown(self):
        shutil.rmtree(self.root, ignore_errors=True)

    def _scan(self, decoder):
        return list(iter_start_menu(self.root, decoder, now=fixed_now))

    def _records(self, items):
        return [item for item in items if isinstance(item, AppRecord)]

    def test_missing_root_yields_nothing(self):
        decoder = FakeDecoder()
        items = list(iter_start_menu(os.path.join(self.root, "nope"), decoder))
        self.assertEqual(items, [])
        self.assertEqual(decoder.calls, [])

    def test_builds_record_from_shortcut(self):
        """A decoded shortcut yields a record keyed on the shortcut file."""
        path = touch(os.path.join(self.root, "Tools", "Foo App.lnk"), mtime=1_600_000_000)
        decoder = FakeDecoder({"Foo App.lnk": ShortcutMetadata(target="C:/Foo/foo.exe")})

        [record] = self._records(self._scan(decoder))

        self.assertEqual(record.name, "Foo App")
        self.assertEqual(record.launch_path, "C:/Foo/foo.exe")
        self.assertEqual(record.working_directory, "C:/Foo")
        self.assertEqual(record.icon_path, "C:/Foo/foo.exe")
        self.assertEqual(record.source, normalize_path(self.root))
        self.assertEqual(record.last_modified, 1_600_000_000)
        self.assertEqual(record.id, hash_id(["start_menu", normalize_path(path)]))

    def test_decoder_values_win_over_defaults(self):
        touch(os.path.join(self.root, "foo.lnk"))
        decoder = FakeDecoder({"foo.lnk": ShortcutMetadata(
            target="C:/Foo/foo.exe",
            working_directory="D:/Work",
            icon_path="C:/Foo/foo.ico",
        )})

        [record] = self._records(self._scan(decoder))

        self.assertEqual(record.working_directory, "D:/Work")
        self.assertEqual(record.icon_path, "C:/Foo/foo.ico")

    def test_only_shortcut_files_are_decoded(self):
        touch(os.path.join(self.root, "a.LNK"))
        touch(os.path.join(self.root, "readme.txt"))
        touch(os.path.join(self.root, "desktop.ini"))
        decoder = FakeDecoder({"a.LNK": ShortcutMetadata(target="C:/A/a.exe")})

        records = self._records(self._scan(decoder))

        self.assertEqual([r.name for r in records], ["a"])
        self.assertEqual([os.path.basename(p) for p in decoder.calls], ["a.LNK"])

    def test_decode_failure_skips_only_that_file(self):
        touch(os.path.join(self.root, "bad.lnk"))
        touch(os.path.join(self.root, "good.lnk"))
        decoder = FakeDecoder({"good.lnk": ShortcutMetadata(target="C:/Good/good.exe")})

        items = self._scan(decoder)

        self.assertEqual([r.name for r in self._records(items)], ["good"])
        skips = [item for item in items if isinstance(item, Skip)]
        self.assertEqual(len(skips), 1)
        self.assertEqual(skips[0].kind, "collaborator")
        self.assertTrue(skips[0].item.endswith("bad.lnk"))

    def test_shortcut_without_target_is_skipped(self):
        touch(os.path.join(self.root, "empty.lnk"))
        decoder = FakeDecoder({"empty.lnk": ShortcutMetadata(target=None)})

        items = self._scan(decoder)

        self.assertEqual(self._records(items), [])
        self.assertEqual(items[0].reason, "shortcut has no target")

    def test_blank_stem_gets_placeholder_name(self):
        touch(os.path.join(self.root, "   .lnk"))
        decoder = FakeDecoder({"   .lnk": ShortcutMetadata(target="C:/X/x.exe")})

        [record] = self._records(self._scan(decoder))

        self.assertEqual(record.name, "Unknown Shortcut")

    def test_unreadable_mtime_falls_back_to_now(self):
        path = touch(os.path.join(self.root, "foo.lnk"))

        class VanishingDecoder(FakeDecoder):
            def decode(self, shortcut_path):
                meta = super().decode(shortcut_path)
                os.remove(shortcut_path)
                return meta

        decoder = VanishingDecoder({"foo.lnk": ShortcutMetadata(target="C:/Foo/foo.exe")})

        [record] = self._records(self._scan(decoder))

        self.assertFalse(os.path.exists(path))
        self.assertEqual(record.last_modified, int(FIXED_NOW))

    def test_retargeted_shortcut_keeps_its_id(self):
        touch(os.path.join(self.root, "foo.lnk"))
        first = self._records(self._scan(FakeDecoder({"foo.lnk": ShortcutMetadata(target="C:/Old/foo.exe")})))
        second = self._records(self._scan(FakeDecoder({"foo.lnk": ShortcutMetadata(target="C:/New/foo.exe")})))

        self.assertEqual(first[0].id, second[0].id)
        self.assertNotEqual(first[0].launch_path, second[0].launch_path)

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks unavailable")
    def test_follows_directory_links(self):
        outside = tempfile.mkdtemp(prefix="linked_")
        self.addCleanup(shutil.rmtree, outside, True)
        touch(os.path.join(outside, "linked.lnk"))
        try:
            os.symlink(outside, os.path.join(self.root, "Linked"))
        except (OSError, NotImplementedError):
            self.skipTest("cannot create symlink")
        decoder = FakeDecoder({"linked.lnk": ShortcutMetadata(target="C:/L/l.exe")})

        records = self._records(self._scan(decoder))

        self.assertEqual([r.name for r in records], ["linked"])

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks unavailable")
    def test_two_links_to_one_directory_give_two_records(self):
        shared = tempfile.mkdtemp(prefix="shared_")
        self.addCleanup(shutil.rmtree, shared, True)
        touch(os.path.join(shared, "tool.lnk"))
        try:
            os.symlink(shared, os.path.join(self.root, "A"))
            os.symlink(shared, os.path.join(self.root, "B"))
        except (OSError, NotImplementedError):
            self.skipTest("cannot create symlink")
        decoder = FakeDecoder({"tool.lnk": ShortcutMetadata(target="C:/T/tool.exe")})

        records = self._records(self._scan(decoder))

        self.assertEqual(len(records), 2)
        self.assertNotEqual(records[0].id, records[1].id)
        self.assertEqual(records[0].launch_path, records[1].launch_path)

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks unavailable")
    def test_link_back_to_ancestor_is_not_followed(self):
        touch(os.path.join(self.root, "Sub", "app.lnk"))
        try:
            os.symlink(self.root, os.path.join(self.root, "Sub", "Loop"))
        except (OSError, NotImplementedError):
            self.skipTest("cannot create symlink")
        decoder = FakeDecoder({"app.lnk": ShortcutMetadata(target="C:/A/app.exe")})

        records = self._records(self._scan(decoder))

        self.assertEqual([r.name for r in records], ["app"])


class TestBuildMetadata(unittest.TestCase):
    def test_applies_decoder_contract(self):
        meta = build_metadata(
            r"C:\Menu\Foo\foo.lnk",
            target=r"C:\Program Files\Foo\foo.exe",
            arguments="--fast",
            working_directory="bin",
            icon_location=r'"icons\foo.ico",3',
        )

        self.assertEqual(meta.target, "C:/Program Files/Foo/foo.exe")
        self.assertEqual(meta.arguments, "--fast")
        self.assertEqual(meta.working_directory, "C:/Menu/Foo/bin")
        self.assertEqual(meta.icon_path, "C:/Menu/Foo/icons/foo.ico")

    def test_empty_fields_are_absent(self):
        meta = build_metadata(r"C:\Menu\foo.lnk", None, None, None, ",0")

        self.assertIsNone(meta.target)
        self.assertIsNone(meta.arguments)
        self.assertIsNone(meta.working_directory)
        self.assertIsNone(meta.icon_path)


if __name__ == "__main__":
    unittest.main()
