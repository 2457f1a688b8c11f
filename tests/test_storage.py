import os
import tempfile
import unittest

from fretboard_trainer.core.exceptions import StorageReadFailure, StorageWriteFailure
from fretboard_trainer.settings import SettingsStore, default_settings
from fretboard_trainer.storage import JsonFileStorage, MemoryStorage


class TestJsonFileStorage(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.directory = os.path.join(self.tmp.name, "storage")
        self.storage = JsonFileStorage(self.directory)

    def test_missing_key(self):
        self.assertIsNone(self.storage.get_item("nothing"))

    def test_set_get_remove(self):
        self.storage.set_item("k", '{"a": 1}')
        self.assertTrue(os.path.exists(os.path.join(self.directory, "k.json")))
        self.assertEqual(self.storage.get_item("k"), '{"a": 1}')
        self.storage.remove_item("k")
        self.assertIsNone(self.storage.get_item("k"))
        # Removing twice is fine
        self.storage.remove_item("k")

    def test_undecodable_file(self):
        os.makedirs(self.directory)
        with open(os.path.join(self.directory, "k.json"), "wb") as f:
            f.write(b"\xff\xfe\xfa")
        with self.assertRaises(StorageReadFailure):
            self.storage.get_item("k")

    def test_unwritable_location(self):
        blocker = os.path.join(self.tmp.name, "blocker")
        with open(blocker, "w") as f:
            f.write("a file, not a directory")
        storage = JsonFileStorage(blocker)
        with self.assertRaises(StorageWriteFailure):
            storage.set_item("k", "v")

    def test_settings_survive_restart(self):
        record = default_settings()
        store = SettingsStore(self.storage)
        store.set_string(record, 0, False)
        reloaded = SettingsStore(JsonFileStorage(self.directory)).load()
        self.assertEqual(reloaded, record)


class TestMemoryStorage(unittest.TestCase):
    def test_basic(self):
        storage = MemoryStorage({"a": "1"})
        self.assertEqual(storage.get_item("a"), "1")
        storage.set_item("b", "2")
        storage.remove_item("a")
        storage.remove_item("zzz")
        self.assertEqual(storage.items, {"b": "2"})


if __name__ == "__main__":
    unittest.main()
