"""Tests for persisting and reloading the configuration record."""

import unittest

import yaml

from lnos_installer.config_store import SECRET_MASK, ConfigStore, load_config, record_to_mapping, save_config
from lnos_installer.errors import ConfigLoadError
from lnos_installer.record import ConfigRecord

from tests.helpers import TempDirTestCase, complete_record


class TestRecord(unittest.TestCase):
    def test_fresh_record_is_unresolved(self):
        record = ConfigRecord()
        self.assertFalse(record.is_complete())
        self.assertIn("username", record.unresolved())

    def test_graphics_driver_only_required_with_desktop(self):
        record = complete_record()
        self.assertTrue(record.is_complete())
        record.desktop_enabled = True
        record.desktop_environment = "KDE"
        self.assertEqual(record.unresolved(), ["desktop_graphics_driver"])

    def test_false_booleans_count_as_resolved(self):
        record = complete_record(encryption_enabled=False, multilib_enabled=False)
        self.assertNotIn("encryption_enabled", record.unresolved())

    def test_reset_clears_everything(self):
        record = complete_record()
        record.reset()
        self.assertEqual(record, ConfigRecord())

    def test_scrub_secrets(self):
        record = complete_record()
        record.scrub_secrets()
        self.assertEqual((record.password, record.root_password), ("", ""))
        self.assertEqual(record.username, "alice")


class TestShellFormat(TempDirTestCase):
    def setUp(self):
        super().setUp()
        self.path = str(self.tmp / "installer.conf")

    def test_roundtrip_keeps_non_secret_fields(self):
        original = complete_record(desktop_environment="TTY")
        save_config(self.path, original)

        loaded = ConfigRecord()
        self.assertTrue(load_config(self.path, loaded))

        for name in ConfigRecord.field_names():
            if name in ("password", "root_password"):
                continue
            self.assertEqual(getattr(loaded, name), getattr(original, name), name)

    def test_secrets_are_written_masked(self):
        save_config(self.path, complete_record(password="hunter2", root_password="toor"))
        text = (self.tmp / "installer.conf").read_text()
        self.assertNotIn("hunter2", text)
        self.assertNotIn("toor", text)
        self.assertIn(f"LNOS_PASSWORD='{SECRET_MASK}'", text)

    def test_masked_secrets_are_not_imported(self):
        save_config(self.path, complete_record())
        loaded = ConfigRecord()
        load_config(self.path, loaded)
        self.assertEqual(loaded.password, "")
        self.assertEqual(loaded.root_password, "")

    def test_plaintext_secret_is_imported(self):
        (self.tmp / "installer.conf").write_text("LNOS_PASSWORD='scripted'\n")
        loaded = ConfigRecord()
        load_config(self.path, loaded)
        self.assertEqual(loaded.password, "scripted")

    def test_list_values_and_quotes(self):
        record = complete_record(username="o'brien", locale_gen_list=["de_DE.UTF-8 UTF-8", "en_US.UTF-8 UTF-8"])
        save_config(self.path, record)
        text = (self.tmp / "installer.conf").read_text()
        self.assertIn("LNOS_LOCALE_GEN_LIST=('de_DE.UTF-8 UTF-8' 'en_US.UTF-8 UTF-8')", text)

        loaded = ConfigRecord()
        load_config(self.path, loaded)
        self.assertEqual(loaded.username, "o'brien")
        self.assertEqual(loaded.locale_gen_list, ["de_DE.UTF-8 UTF-8", "en_US.UTF-8 UTF-8"])

    def test_unset_booleans_stay_unresolved(self):
        save_config(self.path, ConfigRecord(username="bob"))
        loaded = ConfigRecord()
        load_config(self.path, loaded)
        self.assertIsNone(loaded.encryption_enabled)
        self.assertEqual(loaded.username, "bob")

    def test_unknown_keys_and_comments_are_ignored(self):
        (self.tmp / "installer.conf").write_text("# saved answers\nLNOS_USERNAME='bob'\nLNOS_FAVORITE_COLOR='blue'\n")
        loaded = ConfigRecord()
        load_config(self.path, loaded)
        self.assertEqual(loaded.username, "bob")

    def test_missing_file_is_not_an_error(self):
        self.assertFalse(load_config(str(self.tmp / "nope.conf"), ConfigRecord()))

    def test_malformed_file_raises(self):
        (self.tmp / "installer.conf").write_text("this is not an assignment\n")
        with self.assertRaises(ConfigLoadError):
            load_config(self.path, ConfigRecord())

    def test_unterminated_quote_raises(self):
        (self.tmp / "installer.conf").write_text("LNOS_USERNAME='bob\n")
        with self.assertRaises(ConfigLoadError):
            load_config(self.path, ConfigRecord())

    def test_save_overwrites(self):
        store = ConfigStore(self.path)
        store.save(complete_record(username="first"))
        store.save(complete_record(username="second"))
        loaded = ConfigRecord()
        store.load(loaded)
        self.assertEqual(loaded.username, "second")


class TestYamlFormat(TempDirTestCase):
    def test_roundtrip(self):
        path = str(self.tmp / "installer.yaml")
        original = complete_record(desktop_enabled=True, desktop_environment="KDE", desktop_graphics_driver="amd")
        save_config(path, original)

        data = yaml.safe_load((self.tmp / "installer.yaml").read_text())
        self.assertEqual(data["LNOS_DESKTOP_ENVIRONMENT"], "KDE")
        self.assertEqual(data["LNOS_PASSWORD"], SECRET_MASK)

        loaded = ConfigRecord()
        load_config(path, loaded)
        self.assertEqual(loaded.desktop_graphics_driver, "amd")
        self.assertTrue(loaded.desktop_enabled)
        self.assertEqual(loaded.password, "")

    def test_non_mapping_raises(self):
        path = self.tmp / "installer.yml"
        path.write_text("- just\n- a list\n")
        with self.assertRaises(ConfigLoadError):
            load_config(str(path), ConfigRecord())

    def test_mapping_masks_secrets(self):
        mapping = record_to_mapping(complete_record())
        self.assertEqual(mapping["LNOS_ROOT_PASSWORD"], SECRET_MASK)
        self.assertEqual(mapping["LNOS_ENCRYPTION_ENABLED"], "false")


if __name__ == "__main__":
    unittest.main()
