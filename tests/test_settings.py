import tempfile
import unittest
from pathlib import Path

from solver.settings import (
    DEFAULT_SETTINGS,
    limits_from_settings,
    load_settings,
    policy_from_settings,
    save_settings,
)
from solver.state_graph import SearchLimits, SearchPolicy


class SettingsTestCase(unittest.TestCase):
    def test_defaults_without_file(self):
        self.assertEqual(DEFAULT_SETTINGS, load_settings(None))
        self.assertEqual(DEFAULT_SETTINGS, load_settings("/nonexistent/freecell.ini"))

    def test_save_and_load(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "conf" / "solver.ini"
            save_settings({"max_nodes": "1000", "collapse_cascade_permutations": "yes"}, path)
            loaded = load_settings(path)
        self.assertEqual("1000", loaded["max_nodes"])
        self.assertEqual("true", loaded["collapse_cascade_permutations"])
        self.assertEqual(DEFAULT_SETTINGS["max_seconds"], loaded["max_seconds"])

    def test_file_without_search_section(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "other.ini"
            path.write_text("[ui]\ntheme = dark\n", encoding="utf-8")
            self.assertEqual(DEFAULT_SETTINGS, load_settings(path))

    def test_invalid_values_fall_back(self):
        limits = limits_from_settings({"max_nodes": "lots", "max_seconds": "0", "max_frontier": "none"})
        self.assertEqual(SearchLimits(max_nodes=2_000_000, max_seconds=None, max_frontier=None), limits)

        policy = policy_from_settings({"limit_empty_destinations": "maybe", "skip_lone_card_to_empty": "off"})
        self.assertTrue(policy.limit_empty_destinations)
        self.assertFalse(policy.skip_lone_card_to_empty)
        self.assertFalse(policy.collapse_cascade_permutations)

    def test_non_finite_limits_fall_back(self):
        limits = limits_from_settings({"max_nodes": "inf", "max_seconds": "nan", "max_frontier": "-inf"})
        self.assertEqual(SearchLimits(max_nodes=2_000_000, max_seconds=60.0, max_frontier=5_000_000), limits)
        self.assertEqual(60.0, limits_from_settings({"max_seconds": "inf"}).max_seconds)

    def test_default_policy(self):
        self.assertEqual(SearchPolicy(), policy_from_settings({}))


if __name__ == "__main__":
    unittest.main()
