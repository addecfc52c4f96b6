from .excerpts import ScoredPhrase, char_jaccard, extract_excerpts, mask_pii, score_phrase, split_to_phrases

__all__ = [
    "ScoredPhrase",
    "char_jaccard",
    "extract_excerpts",
    "mask_pii",
    "score_phrase",
    "split_to_phrases",
]
