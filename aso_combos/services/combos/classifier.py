"""Tail-length, intent and semantic-feature classification of combos."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from aso_combos.core.exceptions import InvalidComboError
from aso_combos.services.combos.rules import ComboRuleSet
from aso_combos.services.combos.tokenizer import tokenize
from aso_combos.services.combos.types import ClassifiedCombo, IntentClass, TailLength

NOISE_FILLER_RATIO_THRESHOLD = 0.4


def _contains_any(tokens: Sequence[str], terms: Iterable[str]) -> bool:
    term_set = terms if isinstance(terms, frozenset | set) else set(terms)
    return any(token in term_set for token in tokens)


def has_brand(tokens: Sequence[str], rules: ComboRuleSet) -> bool:
    return _contains_any(tokens, rules.brand_tokens)


def has_category(tokens: Sequence[str], rules: ComboRuleSet) -> bool:
    return _contains_any(tokens, rules.category_keywords)


def has_benefit(tokens: Sequence[str], rules: ComboRuleSet) -> bool:
    return _contains_any(tokens, rules.benefit_keywords)


def has_verb(tokens: Sequence[str], rules: ComboRuleSet) -> bool:
    return _contains_any(tokens, rules.cta_verbs)


def has_time_hint(tokens: Sequence[str], rules: ComboRuleSet) -> bool:
    return _contains_any(tokens, rules.time_keywords)


def filler_ratio(tokens: Sequence[str], stopwords: Iterable[str]) -> float:
    """Fraction of tokens that are stopwords."""
    if not tokens:
        return 0.0
    stopword_set = set(stopwords)
    return sum(1 for token in tokens if token in stopword_set) / len(tokens)


def classify_by_length(tokens: Sequence[str]) -> TailLength:
    """Map combo word count to a tail-length bucket."""
    if len(tokens) < 2:
        raise InvalidComboError(" ".join(tokens), "combos need at least two tokens")
    if len(tokens) == 2:
        return "short-tail"
    if len(tokens) == 3:
        return "mid-tail"
    return "long-tail"


def classify_intent(tokens: Sequence[str], rules: ComboRuleSet) -> IntentClass:
    """Classify search intent, first matching rule wins."""
    if filler_ratio(tokens, rules.stopwords) > NOISE_FILLER_RATIO_THRESHOLD:
        return "Noise"

    brand = has_brand(tokens, rules)
    category = has_category(tokens, rules)
    verb = has_verb(tokens, rules)

    if not brand and not category and not verb:
        return "Noise"
    if brand:
        return "Navigational"
    if verb and category:
        return "Transactional"
    if category:
        return "Informational"
    # Verb-only combos carry some signal but no category match.
    return "Informational"


def classify_combo(combo: str, rules: ComboRuleSet) -> ClassifiedCombo:
    """Enrich a combo string with length, intent and feature flags."""
    tokens = tokenize(combo)
    return ClassifiedCombo(
        text=combo,
        keywords=tokens,
        tail_length=classify_by_length(tokens),
        intent=classify_intent(tokens, rules),
        has_brand=has_brand(tokens, rules),
        has_category=has_category(tokens, rules),
        has_benefit=has_benefit(tokens, rules),
        has_verb=has_verb(tokens, rules),
        has_time_hint=has_time_hint(tokens, rules),
        filler_ratio=filler_ratio(tokens, rules.stopwords),
    )


def classify_combos(combos: Iterable[str], rules: ComboRuleSet) -> list[ClassifiedCombo]:
    """Classify every combo with at least two tokens."""
    return [classify_combo(combo, rules) for combo in combos if len(tokenize(combo)) >= 2]
