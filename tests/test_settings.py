# tests/test_settings.py

"""Tests for the Settings configuration class."""

import os
import unittest
from pathlib import Path
from unittest.mock import patch

from src.config.settings import Settings, _env_flag


class TestSettings(unittest.TestCase):
    """Verify Settings constants."""

    def test_api_base_url_has_no_trailing_slash(self) -> None:
        """Endpoint paths are appended with a leading slash."""
        self.assertTrue(Settings.API_BASE_URL.startswith("http"))
        self.assertFalse(Settings.API_BASE_URL.endswith("/"))

    def test_request_timeout_is_positive_int(self) -> None:
        """REQUEST_TIMEOUT must be a positive integer."""
        self.assertIsInstance(Settings.REQUEST_TIMEOUT, int)
        self.assertGreater(Settings.REQUEST_TIMEOUT, 0)

    def test_max_retries_is_positive(self) -> None:
        """MAX_RETRIES must be >= 1."""
        self.assertGreaterEqual(Settings.MAX_RETRIES, 1)

    def test_connectivity_timeout_shorter_than_requests(self) -> None:
        """The connectivity check must not outlast a real fetch."""
        self.assertLessEqual(
            Settings.CONNECTIVITY_TIMEOUT, Settings.REQUEST_TIMEOUT
        )

    def test_item_write_through_is_bool(self) -> None:
        """ITEM_WRITE_THROUGH is a plain flag."""
        self.assertIsInstance(Settings.ITEM_WRITE_THROUGH, bool)

    def test_path_constants_are_paths(self) -> None:
        """Path-typed settings are Path instances."""
        self.assertIsInstance(Settings.BASE_DIR, Path)
        self.assertIsInstance(Settings.DATA_DIR, Path)
        self.assertIsInstance(Settings.CATALOG_DB_PATH, Path)
        self.assertIsInstance(Settings.LOGS_DIR, Path)

    def test_impersonate_browser_is_string(self) -> None:
        """IMPERSONATE_BROWSER must be a non-empty string."""
        self.assertIsInstance(Settings.IMPERSONATE_BROWSER, str)
        self.assertTrue(len(Settings.IMPERSONATE_BROWSER) > 0)

    def test_default_headers_accept_json(self) -> None:
        """DEFAULT_HEADERS must ask for JSON."""
        self.assertIn("application/json", Settings.DEFAULT_HEADERS["Accept"])


class TestEnvFlag(unittest.TestCase):
    """Tests for boolean environment parsing."""

    def test_default_when_unset(self) -> None:
        """An unset variable yields the default."""
        with patch.dict(os.environ, {}, clear=True):
            self.assertTrue(_env_flag("CATALOG_TEST_FLAG", True))
            self.assertFalse(_env_flag("CATALOG_TEST_FLAG", False))

    def test_truthy_and_falsy_values(self) -> None:
        """Common spellings are recognised."""
        for raw, expected in (
            ("1", True), ("true", True), ("YES", True), ("on", True),
            ("0", False), ("false", False), ("no", False), ("", False),
        ):
            with self.subTest(raw=raw):
                with patch.dict(os.environ, {"CATALOG_TEST_FLAG": raw}):
                    self.assertEqual(
                        _env_flag("CATALOG_TEST_FLAG", True), expected
                    )


if __name__ == "__main__":
    unittest.main()
