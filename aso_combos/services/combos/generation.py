"""Combo generation engine.

Generates every 2-4 word keyword combination from title, subtitle and
keywords-field tokens, then compares each combo against the metadata that
is actually live to find existing combos, missing combos and combos that
can be strengthened.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, replace
from itertools import combinations, islice, product

from aso_combos.services.combos.normalizer import canonical_form
from aso_combos.services.combos.numeric import round_half_up
from aso_combos.services.combos.strength import classify_strength
from aso_combos.services.combos.tokenizer import tokenize
from aso_combos.services.combos.types import (
    STRENGTH_ORDER,
    ComboAnalysis,
    ComboGenerationResult,
    ComboStats,
    GeneratedCombo,
    MetadataField,
)

logger = logging.getLogger(__name__)

MAX_COMBOS_PER_SOURCE = 500
MAX_COMBOS_TOTAL = 2500
RECOMMENDED_LIMIT = 10
# Cross-field candidates examined per source, as a multiple of its quota.
CROSS_EXAMINATION_FACTOR = 20

# Fixed generation filter; kept separate from the caller stopword set.
LOW_VALUE_STOPWORDS = frozenset(
    {
        "the",
        "a",
        "an",
        "and",
        "or",
        "but",
        "in",
        "on",
        "at",
        "to",
        "for",
        "of",
        "with",
        "by",
        "from",
        "as",
        "is",
        "was",
        "are",
        "be",
        "been",
        "have",
        "has",
        "had",
        "do",
        "does",
        "did",
        "will",
        "would",
        "should",
        "could",
        "may",
        "might",
        "can",
        "must",
        "shall",
    }
)

STRATEGIC_BASE_SCORE = 50
STRATEGIC_LENGTH_BONUS = {2: 10, 3: 20, 4: 15}


@dataclass(slots=True, frozen=True)
class GenerationOptions:
    """Which sources to combine and how many combos each may produce."""

    min_length: int = 2
    max_length: int = 4
    include_title: bool = True
    include_subtitle: bool = True
    include_keywords: bool = True
    include_cross: bool = True
    include_three_way: bool = True
    max_per_source: int = MAX_COMBOS_PER_SOURCE
    max_total: int = MAX_COMBOS_TOTAL


def filter_low_value_keywords(keywords: Sequence[str]) -> list[str]:
    """Drop low-value stopwords and single characters, keeping first-seen order."""
    filtered: list[str] = []
    for keyword in keywords:
        normalized = keyword.lower().strip()
        if len(normalized) <= 1 or normalized in LOW_VALUE_STOPWORDS:
            continue
        if normalized not in filtered:
            filtered.append(normalized)
    return filtered


def iter_field_combinations(
    tokens: Sequence[str],
    min_length: int,
    max_length: int,
) -> Iterator[tuple[str, ...]]:
    """Lazily yield order-preserving k-combinations of a single field."""
    for size in range(min_length, min(max_length, len(tokens)) + 1):
        yield from combinations(tokens, size)


def _owned_tokens(fields: dict[MetadataField, list[str]]) -> dict[MetadataField, list[str]]:
    """Assign each token to the first field (in listing order) that carries it."""
    seen: set[str] = set()
    owned: dict[MetadataField, list[str]] = {}
    for field_name, tokens in fields.items():
        owned[field_name] = [token for token in tokens if token not in seen]
        seen.update(tokens)
    return owned


def _field_splits(size: int, field_count: int) -> Iterator[tuple[int, ...]]:
    """Yield per-field word counts (each at least one) summing to size."""
    for split in product(range(1, size + 1), repeat=field_count):
        if sum(split) == size:
            yield split


class CrossCombinations:
    """Lazy cross-field combos with a cap on the candidates examined.

    Each token is drawn only from the first field that carries it and every
    candidate takes at least one word from each field, so duplicate words and
    single-field picks are never enumerated. Candidates whose words all appear
    in one field are still examined and skipped; `max_examined` bounds them.
    """

    def __init__(
        self,
        fields: dict[MetadataField, list[str]],
        min_length: int,
        max_length: int,
        max_examined: int | None = None,
    ) -> None:
        self.examined = 0
        self.budget_exhausted = False
        self._max_examined = max_examined
        self._field_sets = [set(tokens) for tokens in fields.values()]
        self._candidates = self._iter_candidates(_owned_tokens(fields), min_length, max_length)

    @staticmethod
    def _iter_candidates(
        owned: dict[MetadataField, list[str]],
        min_length: int,
        max_length: int,
    ) -> Iterator[tuple[str, ...]]:
        pools = list(owned.values())
        if not all(pools):
            return
        total = sum(len(pool) for pool in pools)
        for size in range(max(min_length, len(pools)), min(max_length, total) + 1):
            for split in _field_splits(size, len(pools)):
                if any(count > len(pool) for count, pool in zip(split, pools)):
                    continue
                parts = [combinations(pool, count) for count, pool in zip(split, pools)]
                for picked in product(*parts):
                    yield tuple(word for part in picked for word in part)

    def __iter__(self) -> CrossCombinations:
        return self

    def __next__(self) -> tuple[str, ...]:
        for words in self._candidates:
            if self._max_examined is not None and self.examined >= self._max_examined:
                self.budget_exhausted = True
                break
            self.examined += 1
            if any(all(word in field_set for word in words) for field_set in self._field_sets):
                continue
            return words
        raise StopIteration


def iter_cross_combinations(
    fields: dict[MetadataField, list[str]],
    min_length: int,
    max_length: int,
    max_examined: int | None = None,
) -> CrossCombinations:
    """Lazily yield combinations drawing at least one token from every field."""
    return CrossCombinations(fields, min_length, max_length, max_examined)


def generate_all_possible_combos(
    title_tokens: Sequence[str],
    subtitle_tokens: Sequence[str],
    keywords_tokens: Sequence[str] | None = None,
    options: GenerationOptions | None = None,
) -> ComboGenerationResult:
    """Generate unique keyword combos across single-field and cross-field sources."""
    opts = options or GenerationOptions()
    max_examined = opts.max_per_source * CROSS_EXAMINATION_FACTOR
    title = filter_low_value_keywords(title_tokens)
    subtitle = filter_low_value_keywords(subtitle_tokens)
    keywords = filter_low_value_keywords(keywords_tokens or [])

    sources: list[tuple[str, Iterator[tuple[str, ...]]]] = []
    if opts.include_title:
        sources.append(("title", iter_field_combinations(title, opts.min_length, opts.max_length)))
    if opts.include_subtitle:
        sources.append(
            ("subtitle", iter_field_combinations(subtitle, opts.min_length, opts.max_length))
        )
    if opts.include_keywords:
        sources.append(
            ("keywords", iter_field_combinations(keywords, opts.min_length, opts.max_length))
        )
    if opts.include_cross:
        for name, crossed in (
            ("title_subtitle", {"title": title, "subtitle": subtitle}),
            ("title_keywords", {"title": title, "keywords": keywords}),
            ("subtitle_keywords", {"subtitle": subtitle, "keywords": keywords}),
        ):
            if all(crossed.values()):
                sources.append(
                    (
                        name,
                        iter_cross_combinations(
                            crossed, opts.min_length, opts.max_length, max_examined
                        ),
                    )
                )
    if opts.include_three_way and title and subtitle and keywords:
        three_way: dict[MetadataField, list[str]] = {
            "title": title,
            "subtitle": subtitle,
            "keywords": keywords,
        }
        sources.append(
            (
                "three_way",
                iter_cross_combinations(
                    three_way, opts.min_length, opts.max_length, max_examined
                ),
            )
        )

    unique: dict[tuple[str, ...], str] = {}
    total_generated = 0
    limit_reached = False

    for source_name, iterator in sources:
        quota = min(opts.max_per_source, opts.max_total - total_generated)
        if quota <= 0:
            limit_reached = True
            break

        produced = 0
        for words in islice(iterator, quota):
            produced += 1
            text = " ".join(words)
            unique.setdefault(canonical_form(text), text)
        total_generated += produced

        if produced == quota and next(iterator, None) is not None:
            limit_reached = True
            logger.info(
                "Combo generation ceiling reached",
                extra={
                    "source": source_name,
                    "quota": quota,
                    "total_generated": total_generated,
                },
            )
        elif isinstance(iterator, CrossCombinations) and iterator.budget_exhausted:
            limit_reached = True
            logger.info(
                "Combo generation examination budget exhausted",
                extra={
                    "source": source_name,
                    "examined": iterator.examined,
                    "produced": produced,
                },
            )

    logger.debug(
        "Generated keyword combos",
        extra={
            "unique_combos": len(unique),
            "total_generated": total_generated,
            "limit_reached": limit_reached,
        },
    )
    return ComboGenerationResult(
        combos=list(unique.values()),
        total_generated=total_generated,
        limit_reached=limit_reached,
    )


def calculate_strategic_value(keywords: Sequence[str]) -> int:
    """Heuristic 0-100 value favouring specific, mid-length combos."""
    score = STRATEGIC_BASE_SCORE + STRATEGIC_LENGTH_BONUS.get(len(keywords), 0)
    return min(100, max(0, score))


def is_branded_combo(keywords: Sequence[str], brand_name: str | None) -> bool:
    """Return True when any combo word is part of the brand name."""
    brand_tokens = set(tokenize(brand_name or ""))
    if not brand_tokens:
        return False
    return any(keyword.lower() in brand_tokens for keyword in keywords)


def analyze_all_combos(
    title_tokens: Sequence[str],
    subtitle_tokens: Sequence[str],
    title_text: str,
    subtitle_text: str,
    keywords_tokens: Sequence[str] | None = None,
    keywords_text: str = "",
    brand_name: str | None = None,
    options: GenerationOptions | None = None,
    recommended_limit: int = RECOMMENDED_LIMIT,
) -> ComboAnalysis:
    """Generate all combos and classify their presence and strength.

    Branded combos are removed from the missing (recommendation) set only;
    existing combos always reflect the live metadata.
    """
    generation = generate_all_possible_combos(
        title_tokens,
        subtitle_tokens,
        keywords_tokens,
        options=options,
    )

    analyzed: list[GeneratedCombo] = []
    for text in generation.combos:
        keywords = text.split(" ")
        assessment = classify_strength(
            keywords,
            title_text,
            subtitle_text,
            keywords_text,
            title_tokens=title_tokens,
            subtitle_tokens=subtitle_tokens,
            keywords_tokens=keywords_tokens,
        )
        exists = assessment.strength != "missing"
        if not exists and is_branded_combo(keywords, brand_name):
            continue
        analyzed.append(
            GeneratedCombo(
                text=text,
                keywords=keywords,
                length=len(keywords),
                exists=exists,
                source=assessment.source,
                strength=assessment.strength,
                is_consecutive=assessment.is_consecutive,
                can_strengthen=assessment.can_strengthen,
                strengthening_suggestion=assessment.strengthening_suggestion,
                strategic_value=calculate_strategic_value(keywords),
            )
        )

    existing = [combo for combo in analyzed if combo.exists]
    missing = [combo for combo in analyzed if not combo.exists]

    recommended = [
        replace(
            combo,
            recommendation=(
                f'Consider adding "{combo.text}" - Strategic value: {combo.strategic_value}/100'
            ),
        )
        for combo in sorted(missing, key=lambda combo: -combo.strategic_value)[:recommended_limit]
    ]

    by_strength = {strength: 0 for strength in STRENGTH_ORDER}
    for combo in analyzed:
        by_strength[combo.strength] += 1

    stats = ComboStats(
        total_possible=len(analyzed),
        existing=len(existing),
        missing=len(missing),
        coverage=round_half_up(len(existing) / len(analyzed) * 100) if analyzed else 0,
        by_strength=by_strength,
        total_generated=generation.total_generated,
        limit_reached=generation.limit_reached,
    )

    return ComboAnalysis(
        all_possible_combos=analyzed,
        existing_combos=existing,
        missing_combos=missing,
        recommended_to_add=recommended,
        stats=stats,
    )


def filter_combos_by_keyword(combos: Sequence[GeneratedCombo], keyword: str) -> list[GeneratedCombo]:
    """Return combos with a word containing the keyword (case-insensitive)."""
    needle = keyword.lower()
    return [
        combo
        for combo in combos
        if any(needle in word.lower() for word in combo.keywords)
    ]


def group_combos_by_length(combos: Sequence[GeneratedCombo]) -> dict[int, list[GeneratedCombo]]:
    groups: dict[int, list[GeneratedCombo]] = {}
    for combo in combos:
        groups.setdefault(combo.length, []).append(combo)
    return groups


def count_combos_with_keyword(combos: Sequence[GeneratedCombo], keyword: str) -> int:
    return len(filter_combos_by_keyword(combos, keyword))
