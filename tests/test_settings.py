import json
import unittest

from fretboard_trainer.mock_storage import FailingStorage
from fretboard_trainer.note_types import SettingsDimension, SettingsRecord
from fretboard_trainer.settings import SettingsStore, default_settings, validate_settings
from fretboard_trainer.storage import SETTINGS_KEY, MemoryStorage


class TestValidateSettings(unittest.TestCase):
    def test_missing_record_is_all_enabled(self):
        record, defaulted = validate_settings(None)
        self.assertEqual(record, default_settings())
        self.assertEqual(defaulted, ["frets", "strings"])

    def test_bad_field_defaults_alone(self):
        strings = [True, False, False, False, False, False]
        record, defaulted = validate_settings({"frets": [True] * 5, "strings": strings})
        self.assertEqual(record.frets, [True] * 13)
        self.assertEqual(record.strings, strings)
        self.assertEqual(defaulted, ["frets"])

    def test_rejects_non_list_and_all_false(self):
        record, defaulted = validate_settings({"frets": "all", "strings": [False] * 6})
        self.assertEqual(record, default_settings())
        self.assertEqual(defaulted, ["frets", "strings"])

    def test_non_object_top_level(self):
        _, defaulted = validate_settings([1, 2, 3])
        self.assertEqual(defaulted, ["frets", "strings"])


class TestSettingsStore(unittest.TestCase):
    def setUp(self):
        self.storage = MemoryStorage()
        self.store = SettingsStore(self.storage)

    def test_round_trip(self):
        record = SettingsRecord(
            frets=[i % 3 == 0 for i in range(13)],
            strings=[False, True, True, False, False, True],
        )
        self.store.save(record)
        self.assertEqual(self.store.load(), record)

    def test_corrupt_json_loads_defaults(self):
        self.storage.set_item(SETTINGS_KEY, "{not json")
        with self.assertLogs("fretboard_trainer.settings", level="ERROR"):
            record = self.store.load()
        self.assertEqual(record, default_settings())

    def test_deeply_nested_json_loads_defaults(self):
        self.storage.set_item(SETTINGS_KEY, "[" * 100000)
        with self.assertLogs("fretboard_trainer.settings", level="ERROR"):
            record = self.store.load()
        self.assertEqual(record, default_settings())

    def test_extra_fields_ignored(self):
        self.storage.set_item(
            SETTINGS_KEY,
            json.dumps({"frets": [True] * 13, "strings": [True] * 6, "theme": "dark"}),
        )
        self.assertEqual(self.store.load(), default_settings())

    def test_set_fret_writes_through(self):
        record = self.store.load()
        self.assertTrue(self.store.set_fret(record, 3, False))
        self.assertFalse(record.frets[3])
        self.assertFalse(json.loads(self.storage.get_item(SETTINGS_KEY))["frets"][3])

    def test_cannot_disable_last_fret(self):
        record = self.store.load()
        self.store.select_none(record, SettingsDimension.FRETS)
        self.assertEqual(record.enabled_frets(), [0])
        self.assertFalse(self.store.set_fret(record, 0, False))
        self.assertEqual(record.enabled_frets(), [0])

    def test_cannot_disable_last_string(self):
        record = SettingsRecord(frets=[True] * 13, strings=[False, False, True, False, False, False])
        self.assertFalse(self.store.set_string(record, 2, False))
        self.assertEqual(record.enabled_strings(), [2])
        # Disabling an already-disabled string is harmless
        self.assertTrue(self.store.set_string(record, 0, False))
        self.assertEqual(record.enabled_strings(), [2])

    def test_out_of_range_index_is_ignored(self):
        record = self.store.load()
        self.assertFalse(self.store.set_string(record, 6, False))
        self.assertFalse(self.store.toggle(record, SettingsDimension.FRETS, -1))
        self.assertEqual(record, default_settings())

    def test_toggle(self):
        record = self.store.load()
        self.assertTrue(self.store.toggle(record, SettingsDimension.STRINGS, 4))
        self.assertFalse(record.strings[4])
        self.assertTrue(self.store.toggle(record, SettingsDimension.STRINGS, 4))
        self.assertTrue(record.strings[4])

    def test_select_all_and_none(self):
        record = self.store.load()
        self.store.select_none(record, SettingsDimension.STRINGS)
        self.assertEqual(record.strings, [True, False, False, False, False, False])
        self.store.select_all(record, SettingsDimension.STRINGS)
        self.assertEqual(record.strings, [True] * 6)
        self.assertEqual(self.store.load(), record)

    def test_reset_defaults_in_place(self):
        record = self.store.load()
        self.store.select_none(record, SettingsDimension.FRETS)
        returned = self.store.reset_defaults(record)
        self.assertIs(returned, record)
        self.assertEqual(record, default_settings())
        self.assertEqual(self.store.load(), default_settings())

    def test_write_failure_is_swallowed(self):
        store = SettingsStore(FailingStorage(fail_writes=True))
        record = default_settings()
        with self.assertLogs("fretboard_trainer.settings", level="ERROR"):
            self.assertTrue(store.set_fret(record, 5, False))
        # In-memory record still reflects the change
        self.assertFalse(record.frets[5])

    def test_read_failure_loads_defaults(self):
        store = SettingsStore(FailingStorage(fail_reads=True))
        with self.assertLogs("fretboard_trainer.settings", level="ERROR"):
            self.assertEqual(store.load(), default_settings())


if __name__ == "__main__":
    unittest.main()
