import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config.scoring import get_scoring_config, get_scoring_value  # noqa: E402
from app.services.diagnosis_service import shortlist_size  # noqa: E402


class ScoringConfigTests(unittest.TestCase):
    def test_loads_yaml_mapping(self):
        config = get_scoring_config()
        self.assertIn("ranking", config)
        self.assertIn("excerpts", config)

    def test_dot_path_lookup(self):
        self.assertEqual(get_scoring_value("excerpts.weights.emotion"), 0.35)
        self.assertEqual(get_scoring_value("excerpts.phrase.window_chars"), 42)
        self.assertEqual(get_scoring_value("scores.precision"), 3)

    def test_missing_path_uses_default(self):
        self.assertEqual(get_scoring_value("excerpts.weights.missing", 7), 7)
        self.assertEqual(get_scoring_value("excerpts.weights.emotion.deeper", "x"), "x")
        self.assertIsNone(get_scoring_value(""))

    def test_shortlist_size_depends_on_pick_count(self):
        self.assertEqual(shortlist_size(1), 6)
        self.assertEqual(shortlist_size(2), 12)
        self.assertEqual(shortlist_size(3), 12)

    def test_path_override_from_environment(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "scoring.yaml"
            path.write_text("ranking:\n  top_k:\n    single_pick: 3\n", encoding="utf-8")
            get_scoring_config.cache_clear()
            try:
                with patch.dict(os.environ, {"SCORING_CONFIG_PATH": str(path)}):
                    self.assertEqual(get_scoring_value("ranking.top_k.single_pick"), 3)
                    self.assertEqual(get_scoring_value("ranking.top_k.multi_pick", 12), 12)
            finally:
                get_scoring_config.cache_clear()

    def test_non_mapping_config_is_rejected(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "scoring.yaml"
            path.write_text("- just\n- a list\n", encoding="utf-8")
            get_scoring_config.cache_clear()
            try:
                with patch.dict(os.environ, {"SCORING_CONFIG_PATH": str(path)}):
                    with self.assertRaises(RuntimeError):
                        get_scoring_config()
            finally:
                get_scoring_config.cache_clear()


if __name__ == "__main__":
    unittest.main()
