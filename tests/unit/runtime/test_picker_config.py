"""Tests for config persistence and input sanitization.

Malformed config data must normalize to defaults instead of failing.
"""

from __future__ import annotations

import json
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazypick import config


class ConfigBehaviorTests(unittest.TestCase):
    def _patched(self, config_path: Path):
        return mock.patch.dict(os.environ, {config.CONFIG_ENV: str(config_path)})

    def test_missing_config_yields_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp, self._patched(Path(tmp) / "absent.json"):
            self.assertEqual(config.load_config(), {})
            self.assertEqual(config.load_picker_config(), config.PickerConfig())

    def test_malformed_json_is_logged_and_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text("{not json", encoding="utf-8")
            with self._patched(config_path), self.assertLogs("lazypick.config", level="WARNING"):
                self.assertEqual(config.load_config(), {})

    def test_non_object_json_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text("[1, 2]", encoding="utf-8")
            with self._patched(config_path):
                self.assertEqual(config.load_config(), {})

    def test_round_trip_and_validation(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "config.json"
            with self._patched(config_path):
                config.save_config(
                    {
                        "engine_command": "rank-files --fast",
                        "theme": "ocean",
                        "style": "friendly",
                        "overlay_percent": 250,
                        "show_preview": False,
                        "async_refresh": "yes",
                        "keys": {
                            "navigation": {"x": "cancel", "": "up", "y": 3},
                            "text_entry": {"TAB": "clear"},
                        },
                    }
                )
                loaded = config.load_picker_config()

        self.assertEqual(loaded.engine_command, ("rank-files", "--fast"))
        self.assertEqual(loaded.theme, "ocean")
        self.assertEqual(loaded.style, "friendly")
        self.assertEqual(loaded.overlay_percent, 100)
        self.assertFalse(loaded.show_preview)
        self.assertTrue(loaded.async_refresh)
        self.assertEqual(loaded.navigation_keys, {"x": "cancel"})
        self.assertEqual(loaded.text_entry_keys, {"TAB": "clear"})

    def test_invalid_values_fall_back_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(
                json.dumps({"engine_command": [1, 2], "theme": 5, "overlay_percent": True, "keys": "nope"}),
                encoding="utf-8",
            )
            with self._patched(config_path):
                loaded = config.load_picker_config()

        self.assertIsNone(loaded.engine_command)
        self.assertIsNone(loaded.theme)
        self.assertEqual(loaded.overlay_percent, config.DEFAULT_OVERLAY_PERCENT)
        self.assertEqual(loaded.navigation_keys, {})

    def test_default_config_data_loads_back_as_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp, self._patched(Path(tmp) / "config.json"):
            config.save_config(config.default_config_data())
            loaded = config.load_picker_config()

        self.assertEqual(loaded.overlay_percent, 80)
        self.assertEqual(loaded.style, "monokai")
        self.assertEqual(loaded.theme, "default")

    def test_config_path_uses_platform_default_without_override(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=False):
            os.environ.pop(config.CONFIG_ENV, None)
            self.assertEqual(config.config_path(), config.CONFIG_PATH)
        self.assertEqual(config.CONFIG_PATH.name, "config.json")

    def test_parse_engine_command(self) -> None:
        self.assertEqual(config.parse_engine_command(["rank", "-x"]), ("rank", "-x"))
        self.assertEqual(config.parse_engine_command(f"{sys.executable} -m rank"), (sys.executable, "-m", "rank"))
        self.assertIsNone(config.parse_engine_command(""))
        self.assertIsNone(config.parse_engine_command("'unterminated"))
        self.assertIsNone(config.parse_engine_command(42))


if __name__ == "__main__":
    unittest.main()
