import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.errors import DiagnosisError, UpstreamParseError, UpstreamUnavailable  # noqa: E402
from app.normalize.answers import canonicalize_answers  # noqa: E402
from app.schemas.diagnose import Answer, DiagnoseRequest, MatcherPick, MatchPayload  # noqa: E402
from app.schemas.vocabulary import VocabularyEntry  # noqa: E402
from app.semantic.embeddings import EmbeddingCache  # noqa: E402
from app.services.diagnosis_service import (  # noqa: E402
    FALLBACK_INTERPRETATION,
    reflect,
    resolve_picks,
    run_diagnosis,
)
from app.vocabulary import LocalVocabulary  # noqa: E402
from tests.fake_ai import FakeAIClient  # noqa: E402

ANSWER_TEXT = "夕焼けの帰り道で黙って手をつないでいるだけで、気持ちが全部伝わっている気がした。"


def _pick(entry_id: str, gloss: str = "") -> MatcherPick:
    return MatcherPick(id=entry_id, term=entry_id, lang="xx", gloss=gloss, reason="理由", catchphrase="キャッチ")


class EmptyVocabulary:
    def entries(self):
        return ()

    def get(self, entry_id):
        return None


class ResolvePicksTests(unittest.TestCase):
    def setUp(self):
        self.vocabulary = LocalVocabulary()
        self.shortlist = [self.vocabulary.get("da-hygge"), self.vocabulary.get("cy-cwtch")]

    def test_fills_missing_gloss(self):
        picks = resolve_picks(MatchPayload(picks=[_pick("da-hygge")]), self.shortlist, self.vocabulary, 1)
        self.assertEqual(picks[0].gloss, self.vocabulary.get("da-hygge").gloss)

    def test_keeps_model_gloss(self):
        picks = resolve_picks(MatchPayload(picks=[_pick("da-hygge", "独自の説明")]), self.shortlist, self.vocabulary, 1)
        self.assertEqual(picks[0].gloss, "独自の説明")

    def test_drops_repeats_and_truncates(self):
        payload = MatchPayload(picks=[_pick("cy-cwtch"), _pick("cy-cwtch"), _pick("da-hygge")])
        self.assertEqual([p.id for p in resolve_picks(payload, self.shortlist, self.vocabulary, 3)], ["cy-cwtch", "da-hygge"])
        self.assertEqual([p.id for p in resolve_picks(payload, self.shortlist, self.vocabulary, 1)], ["cy-cwtch"])

    def test_rejects_word_outside_shortlist(self):
        with self.assertRaises(UpstreamParseError):
            resolve_picks(MatchPayload(picks=[_pick("pt-saudade")]), self.shortlist, self.vocabulary, 1)


class ReflectTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.answers = canonicalize_answers([Answer(id=1, kind="open", value=ANSWER_TEXT)])
        self.picks = [_pick("da-hygge", "居心地のよさ")]

    async def test_invented_quotes_are_replaced_with_extracted_ones(self):
        client = FakeAIClient(
            reflection={"excerpts": ["そんなことは言っていない。"], "interpretation": "解釈", "toneHint": "bright"}
        )
        reflection = await reflect(client, summary="要約", answers=self.answers, picks=self.picks, max_excerpts=2)

        self.assertFalse(reflection.fallback)
        self.assertEqual(reflection.tone_hint, "bright")
        self.assertNotIn("そんなことは言っていない。", reflection.excerpts)
        self.assertTrue(reflection.excerpts)

    async def test_fallback_on_malformed_output(self):
        client = FakeAIClient(reflection="???")
        reflection = await reflect(client, summary="要約", answers=self.answers, picks=self.picks, max_excerpts=2)

        self.assertTrue(reflection.fallback)
        self.assertEqual(reflection.interpretation, FALLBACK_INTERPRETATION)


class RunDiagnosisTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.request = DiagnoseRequest(answers=[Answer(id=1, kind="open", value=ANSWER_TEXT)])

    async def test_pipeline_order_and_result(self):
        client = FakeAIClient()
        response = await run_diagnosis(self.request, client=client, vocabulary=LocalVocabulary(), cache=EmbeddingCache())

        self.assertEqual(client.steps, ["analysis", "matching"])
        self.assertEqual(len(response.picks), 1)
        self.assertIsNone(response.reflection)
        self.assertIn("要約: ", client.embedded[0])

    async def test_empty_vocabulary_fails_before_any_model_call(self):
        client = FakeAIClient()
        with self.assertRaises(DiagnosisError) as ctx:
            await run_diagnosis(self.request, client=client, vocabulary=EmptyVocabulary(), cache=EmbeddingCache())
        self.assertEqual(ctx.exception.code, "vocabulary_empty")
        self.assertEqual(client.steps, [])
        self.assertEqual(client.embedded, [])

    async def test_embedding_failure_stops_before_matching(self):
        client = FakeAIClient(embed_error=UpstreamUnavailable("embedding down"))
        with self.assertRaises(UpstreamUnavailable):
            await run_diagnosis(self.request, client=client, vocabulary=LocalVocabulary(), cache=EmbeddingCache())
        self.assertEqual(client.steps, ["analysis"])


if __name__ == "__main__":
    unittest.main()
