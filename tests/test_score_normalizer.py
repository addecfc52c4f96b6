import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.normalize.scores import LOVE_AXES, normalize_score, normalize_scores  # noqa: E402


class ScoreNormalizerTests(unittest.TestCase):
    def test_clamps_rounds_and_defaults(self):
        scores = normalize_scores({"passion": -5, "serenity": 5, "poetic": 0.6789})
        self.assertEqual(scores["passion"], 0.0)
        self.assertEqual(scores["serenity"], 1.0)
        self.assertEqual(scores["poetic"], 0.679)
        self.assertEqual(scores["autonomy"], 0.5)

    def test_output_keys_are_exactly_the_axis_set(self):
        scores = normalize_scores({"passion": 0.2, "jealousy": 0.9})
        self.assertEqual(list(scores), list(LOVE_AXES))
        self.assertEqual(len(LOVE_AXES), 10)
        self.assertEqual(list(normalize_scores(None)), list(LOVE_AXES))

    def test_non_numeric_values_are_neutral(self):
        for value in ("0.7", None, True, float("nan"), [0.3], {"v": 1}):
            self.assertEqual(normalize_score(value), 0.5, msg=repr(value))

    def test_infinite_values_clamp(self):
        self.assertEqual(normalize_score(float("inf")), 1.0)
        self.assertEqual(normalize_score(float("-inf")), 0.0)

    def test_normalization_is_idempotent(self):
        raw = {"passion": 1.23456, "serenity": 0.33333, "fleeting": "?", "pragmatic": -0.0004}
        once = normalize_scores(raw)
        self.assertEqual(normalize_scores(once), once)


if __name__ == "__main__":
    unittest.main()
