"""Keyword combo generation, classification and scoring."""

from aso_combos.services.combos.classifier import classify_combo, classify_intent
from aso_combos.services.combos.comparison import (
    analyze_keyword_impact,
    calculate_tier_distribution,
    diff_combos,
    extract_strengthen_opportunities,
)
from aso_combos.services.combos.generation import (
    GenerationOptions,
    analyze_all_combos,
    generate_all_possible_combos,
)
from aso_combos.services.combos.ngrams import (
    analyze_combinations,
    filter_meaningful_combos,
    generate_ngrams,
)
from aso_combos.services.combos.normalizer import canonical_form, dedupe_combos
from aso_combos.services.combos.priority import calculate_combo_priority, select_top_combos
from aso_combos.services.combos.rules import ComboRuleSet, load_rule_set
from aso_combos.services.combos.strength import classify_strength
from aso_combos.services.combos.tokenizer import analyze_tokens, tokenize

__all__ = [
    "ComboRuleSet",
    "GenerationOptions",
    "analyze_all_combos",
    "analyze_combinations",
    "analyze_keyword_impact",
    "analyze_tokens",
    "calculate_combo_priority",
    "calculate_tier_distribution",
    "canonical_form",
    "classify_combo",
    "classify_intent",
    "classify_strength",
    "dedupe_combos",
    "diff_combos",
    "extract_strengthen_opportunities",
    "filter_meaningful_combos",
    "generate_all_possible_combos",
    "generate_ngrams",
    "load_rule_set",
    "select_top_combos",
    "tokenize",
]
