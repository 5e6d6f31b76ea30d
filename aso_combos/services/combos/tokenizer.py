"""Tokenization utilities for app metadata text."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable

from aso_combos.services.combos.types import TokenAnalysis

DEFAULT_STOPWORDS = frozenset(
    {
        "a",
        "an",
        "and",
        "are",
        "as",
        "at",
        "be",
        "by",
        "for",
        "from",
        "has",
        "he",
        "in",
        "is",
        "it",
        "its",
        "of",
        "on",
        "that",
        "the",
        "to",
        "was",
        "will",
        "with",
    }
)

NON_WORD_PATTERN = re.compile(r"[^\w\s]")


def tokenize(text: object) -> list[str]:
    """Split metadata text into lowercase word tokens without punctuation."""
    if not isinstance(text, str) or not text:
        return []
    cleaned = NON_WORD_PATTERN.sub(" ", text.lower())
    return [token for token in cleaned.split() if token]


def analyze_tokens(
    tokens: Iterable[str],
    stopwords: Iterable[str] = DEFAULT_STOPWORDS,
) -> TokenAnalysis:
    """Partition tokens into core and filler sets and report duplicates."""
    token_list = list(tokens)
    stopword_set = set(stopwords)

    core_tokens: list[str] = []
    filler_tokens: list[str] = []
    filler_count = 0
    for token in token_list:
        if token in stopword_set:
            filler_count += 1
            if token not in filler_tokens:
                filler_tokens.append(token)
        elif token not in core_tokens:
            core_tokens.append(token)

    counts = Counter(token_list)
    duplicates: list[str] = []
    for token in token_list:
        if counts[token] > 1 and token not in duplicates:
            duplicates.append(token)

    noise_ratio = filler_count / len(token_list) if token_list else 0.0
    return TokenAnalysis(
        core_tokens=core_tokens,
        filler_tokens=filler_tokens,
        duplicates=duplicates,
        noise_ratio=noise_ratio,
    )
