"""Contiguous n-gram generation over token lists."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from aso_combos.services.combos.tokenizer import DEFAULT_STOPWORDS
from aso_combos.services.combos.types import NgramAnalysis


def generate_ngrams(tokens: Sequence[str], min_len: int, max_len: int) -> list[str]:
    """Return every contiguous window of length min_len..max_len, in token order."""
    token_count = len(tokens)
    if token_count == 0 or min_len > token_count:
        return []

    ngrams: list[str] = []
    for size in range(max(1, min_len), max_len + 1):
        if size > token_count:
            break
        for start in range(token_count - size + 1):
            ngrams.append(" ".join(tokens[start:start + size]))
    return ngrams


def filter_meaningful_combos(
    ngrams: Iterable[str],
    stopwords: Iterable[str] = DEFAULT_STOPWORDS,
) -> list[str]:
    """Drop n-grams made up entirely of stopwords."""
    stopword_set = set(stopwords)
    return [
        gram
        for gram in ngrams
        if any(token not in stopword_set for token in gram.split())
    ]


def analyze_combinations(
    tokens: Sequence[str],
    stopwords: Iterable[str] = DEFAULT_STOPWORDS,
    min_len: int = 2,
    max_len: int = 4,
) -> NgramAnalysis:
    all_combos = generate_ngrams(tokens, min_len, max_len)
    return NgramAnalysis(
        all_combos=all_combos,
        meaningful_combos=filter_meaningful_combos(all_combos, stopwords),
    )
