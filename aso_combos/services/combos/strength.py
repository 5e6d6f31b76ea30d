"""Strength tier classification of combos against app metadata fields.

Tiers are checked strongest first and the first match wins, so every combo
receives exactly one tier. Fields are read in listing order (title, then
subtitle, then keywords field); a cross-field match needs the combo's words
to follow that order with at least one word drawn from each crossed field.
"""

from __future__ import annotations

from collections.abc import Sequence
from itertools import product

from aso_combos.services.combos.tokenizer import tokenize
from aso_combos.services.combos.types import (
    ComboSource,
    ComboStrength,
    MetadataField,
    StrengthAssessment,
)

FIELD_ORDER: tuple[MetadataField, ...] = ("title", "subtitle", "keywords")

CROSS_STRENGTHS = frozenset(
    {
        "title_keywords_cross",
        "title_subtitle_cross",
        "keywords_subtitle_cross",
        "three_way_cross",
    }
)
CONSECUTIVE_STRENGTHS = frozenset(
    {"title_consecutive", "keywords_consecutive", "subtitle_consecutive"}
)

STRENGTHENING_SUGGESTIONS: dict[ComboStrength, str] = {
    "title_non_consecutive": "Make words consecutive in title for maximum ranking power",
    "title_keywords_cross": "Move keyword-field words into the title next to each other",
    "title_subtitle_cross": "Move all keywords to title to strengthen",
    "keywords_consecutive": "Move to title to strengthen",
    "subtitle_consecutive": "Move to title to strengthen",
    "keywords_subtitle_cross": "Move all keywords to title",
    "keywords_non_consecutive": "Move to title and make consecutive",
    "subtitle_non_consecutive": "Move to title and make consecutive",
    "three_way_cross": "Consolidate all keywords into title",
}
MISSING_REORDER_SUGGESTION = "Reorder title words to form this exact phrase"
MISSING_CONSOLIDATE_SUGGESTION = "Consolidate all keywords into title"


def match_phrase(words: Sequence[str], field_tokens: Sequence[str]) -> tuple[bool, bool]:
    """Return (exists, is_consecutive) for words appearing in order in a field."""
    size = len(words)
    if size == 0 or size > len(field_tokens):
        return False, False

    target = list(words)
    tokens = list(field_tokens)
    for start in range(len(tokens) - size + 1):
        if tokens[start:start + size] == target:
            return True, True

    cursor = 0
    for word in words:
        try:
            cursor = tokens.index(word, cursor) + 1
        except ValueError:
            return False, False
    return True, False


def matches_cross(
    words: Sequence[str],
    fields: tuple[MetadataField, ...],
    membership: dict[MetadataField, frozenset[str]],
) -> bool:
    """Check whether words split across exactly the given fields in listing order."""
    candidates: list[list[int]] = []
    for word in words:
        options = [
            FIELD_ORDER.index(field_name)
            for field_name in fields
            if word in membership[field_name]
        ]
        if not options:
            return False
        candidates.append(options)

    required = {FIELD_ORDER.index(field_name) for field_name in fields}
    for assignment in product(*candidates):
        if set(assignment) != required:
            continue
        if all(left <= right for left, right in zip(assignment, assignment[1:])):
            return True
    return False


def classify_strength(
    combo_words: Sequence[str],
    title_text: str,
    subtitle_text: str,
    keywords_text: str = "",
    title_tokens: Sequence[str] | None = None,
    subtitle_tokens: Sequence[str] | None = None,
    keywords_tokens: Sequence[str] | None = None,
) -> StrengthAssessment:
    """Assign the strongest matching tier to a combo."""
    words = [word.lower() for word in combo_words]
    field_words: dict[MetadataField, list[str]] = {
        "title": tokenize(title_text),
        "subtitle": tokenize(subtitle_text),
        "keywords": tokenize(keywords_text),
    }
    provided: dict[MetadataField, Sequence[str] | None] = {
        "title": title_tokens,
        "subtitle": subtitle_tokens,
        "keywords": keywords_tokens,
    }
    membership: dict[MetadataField, frozenset[str]] = {}
    for field_name in FIELD_ORDER:
        tokens = provided[field_name]
        if tokens is None:
            tokens = field_words[field_name]
        membership[field_name] = frozenset(token.lower() for token in tokens)

    phrase = {field_name: match_phrase(words, field_words[field_name]) for field_name in FIELD_ORDER}
    source_fields: list[MetadataField] = [
        field_name for field_name in FIELD_ORDER if phrase[field_name][0]
    ]

    strength = _first_matching_strength(words, phrase, membership)

    if len(source_fields) >= 2:
        source: ComboSource = "both"
    elif source_fields:
        source = source_fields[0]
    elif strength in CROSS_STRENGTHS:
        source = "cross"
    else:
        source = "missing"

    if strength == "title_consecutive":
        can_strengthen = False
        suggestion = None
    elif strength == "missing":
        can_strengthen, suggestion = _missing_strengthening(words, membership)
    else:
        can_strengthen = True
        suggestion = STRENGTHENING_SUGGESTIONS[strength]

    return StrengthAssessment(
        strength=strength,
        is_consecutive=strength in CONSECUTIVE_STRENGTHS,
        source=source,
        source_fields=source_fields,
        can_strengthen=can_strengthen,
        strengthening_suggestion=suggestion,
    )


def _first_matching_strength(
    words: list[str],
    phrase: dict[MetadataField, tuple[bool, bool]],
    membership: dict[MetadataField, frozenset[str]],
) -> ComboStrength:
    title_exists, title_consecutive = phrase["title"]
    subtitle_exists, subtitle_consecutive = phrase["subtitle"]
    keywords_exists, keywords_consecutive = phrase["keywords"]

    if title_exists and title_consecutive:
        return "title_consecutive"
    if title_exists:
        return "title_non_consecutive"
    if matches_cross(words, ("title", "keywords"), membership):
        return "title_keywords_cross"
    if matches_cross(words, ("title", "subtitle"), membership):
        return "title_subtitle_cross"
    if keywords_exists and keywords_consecutive:
        return "keywords_consecutive"
    if subtitle_exists and subtitle_consecutive:
        return "subtitle_consecutive"
    if matches_cross(words, ("subtitle", "keywords"), membership):
        return "keywords_subtitle_cross"
    if keywords_exists:
        return "keywords_non_consecutive"
    if subtitle_exists:
        return "subtitle_non_consecutive"
    if matches_cross(words, ("title", "subtitle", "keywords"), membership):
        return "three_way_cross"
    return "missing"


def _missing_strengthening(
    words: list[str],
    membership: dict[MetadataField, frozenset[str]],
) -> tuple[bool, str | None]:
    if not words:
        return False, None
    if all(word in membership["title"] for word in words):
        return True, MISSING_REORDER_SUGGESTION
    present = membership["title"] | membership["subtitle"] | membership["keywords"]
    if all(word in present for word in words):
        return True, MISSING_CONSOLIDATE_SUGGESTION
    return False, None
