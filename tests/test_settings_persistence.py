"""Unit tests for settings persistence."""

import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path

from breakmark.page_config import LineStyle, OverlaySettings, PageSize
from breakmark.settings_persistence import SettingsPersistence, get_persistence


class TestSettingsPersistence(unittest.TestCase):
    """Test settings persistence functionality."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.persistence = SettingsPersistence(config_dir=Path(self.temp_dir))

    def tearDown(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_load_without_file_gives_defaults(self):
        self.assertEqual(self.persistence.load(), OverlaySettings())

    def test_save_and_load_settings(self):
        settings = OverlaySettings().with_page(page_size=PageSize.LEGAL, calibration_offset=-12)
        settings = settings.with_style(line_style=LineStyle.DOTTED, opacity=0.8)

        self.assertTrue(self.persistence.save(settings))

        # A fresh instance reads the file, not the cache
        reloaded = SettingsPersistence(config_dir=Path(self.temp_dir)).load()
        self.assertEqual(reloaded, settings)

    def test_settings_file_is_json(self):
        self.persistence.save(OverlaySettings())
        with open(self.persistence.settings_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
        self.assertEqual(data["page_size"], "A4")
        self.assertEqual(data["break_line_style"], "solid")

    def test_no_temp_file_left_after_save(self):
        self.persistence.save(OverlaySettings())
        self.assertFalse(self.persistence.settings_file.with_suffix('.tmp').exists())

    def test_corrupt_file_falls_back_to_defaults(self):
        with open(self.persistence.settings_file, 'w') as f:
            f.write("{ invalid json }")
        with self.assertLogs("breakmark.settings_persistence", level="WARNING"):
            loaded = self.persistence.load()
        self.assertEqual(loaded, OverlaySettings())

    def test_non_dict_file_is_ignored(self):
        with open(self.persistence.settings_file, 'w') as f:
            json.dump([1, 2, 3], f)
        with self.assertLogs("breakmark.settings_persistence", level="WARNING"):
            loaded = self.persistence.load()
        self.assertEqual(loaded, OverlaySettings())

    def test_partial_file_merges_over_defaults(self):
        with open(self.persistence.settings_file, 'w') as f:
            json.dump({"page_size": "Letter", "font_size": 14}, f)
        loaded = self.persistence.load()
        self.assertEqual(loaded.page.page_size, PageSize.LETTER)
        self.assertEqual(loaded.page.font_size, 14)
        self.assertEqual(loaded.page.line_height, 1.5)

    def test_unknown_keys_preserved_on_save(self):
        with open(self.persistence.settings_file, 'w') as f:
            json.dump({"future_option": "keep me"}, f)
        self.persistence.save(OverlaySettings())
        with open(self.persistence.settings_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
        self.assertEqual(data["future_option"], "keep me")

    def test_cache_cleared(self):
        self.persistence.save(OverlaySettings())
        with open(self.persistence.settings_file, 'w') as f:
            json.dump({"page_size": "Legal"}, f)
        # Still cached
        self.assertEqual(self.persistence.load().page.page_size, PageSize.A4)
        self.persistence.clear_cache()
        self.assertEqual(self.persistence.load().page.page_size, PageSize.LEGAL)

    def test_creates_missing_config_dir(self):
        nested = SettingsPersistence(config_dir=Path(self.temp_dir) / "a" / "b")
        self.assertTrue(nested.save(OverlaySettings()))
        self.assertTrue(nested.settings_file.exists())

    def test_validate_setting(self):
        self.assertTrue(self.persistence.validate_setting("page_size", "Letter"))
        self.assertFalse(self.persistence.validate_setting("page_size", "B5"))
        self.assertTrue(self.persistence.validate_setting("margin_top", 10))
        self.assertFalse(self.persistence.validate_setting("margin_top", -1))
        self.assertFalse(self.persistence.validate_setting("break_line_color", "blue"))
        self.assertTrue(self.persistence.validate_setting("break_line_color", "#ff0000"))
        self.assertFalse(self.persistence.validate_setting("break_line_opacity", 1.5))
        self.assertTrue(self.persistence.validate_setting("margin_top", None))
        self.assertTrue(self.persistence.validate_setting("unknown_key", "anything"))


class TestGlobalInstance(unittest.TestCase):

    def test_get_persistence_is_singleton(self):
        self.assertIs(get_persistence(), get_persistence())


if __name__ == '__main__':
    unittest.main()
