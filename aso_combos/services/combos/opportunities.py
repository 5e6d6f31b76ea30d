"""Missing semantic-cluster opportunities across title and subtitle combos."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from aso_combos.services.combos.rules import ComboRuleSet
from aso_combos.services.combos.tokenizer import tokenize
from aso_combos.services.combos.types import OpportunityReport

POINTS_PER_MISSING_CLUSTER = 5
MAX_SCORE_GAIN = 20


@dataclass(slots=True, frozen=True)
class SemanticCluster:
    """Two keyword groups that should appear together in at least one combo."""

    name: str
    leading: str
    trailing: str
    suggestion: str


SEMANTIC_CLUSTERS: tuple[SemanticCluster, ...] = (
    SemanticCluster(
        name="category+benefit",
        leading="benefit_keywords",
        trailing="category_keywords",
        suggestion="Pair a benefit with your category keyword (e.g. \"{example}\")",
    ),
    SemanticCluster(
        name="action+category",
        leading="cta_verbs",
        trailing="category_keywords",
        suggestion="Lead with an action verb before your category keyword (e.g. \"{example}\")",
    ),
    SemanticCluster(
        name="time+benefit",
        leading="benefit_keywords",
        trailing="time_keywords",
        suggestion="Combine a benefit with a time hint (e.g. \"{example}\")",
    ),
)


def identify_opportunities(
    existing_combos: Iterable[str],
    title_tokens: Sequence[str],
    subtitle_tokens: Sequence[str],
    rules: ComboRuleSet,
) -> OpportunityReport:
    """Find clusters whose keyword groups are present but never combined."""
    metadata_tokens: list[str] = []
    for token in [*title_tokens, *subtitle_tokens]:
        normalized = token.lower()
        if normalized not in metadata_tokens:
            metadata_tokens.append(normalized)

    combo_token_sets = [set(tokenize(combo)) for combo in existing_combos]

    missing_clusters: list[str] = []
    suggestions: list[str] = []
    example_combos: list[str] = []

    for cluster in SEMANTIC_CLUSTERS:
        leading_terms: frozenset[str] = getattr(rules, cluster.leading)
        trailing_terms: frozenset[str] = getattr(rules, cluster.trailing)

        leading_present = [token for token in metadata_tokens if token in leading_terms]
        trailing_present = [token for token in metadata_tokens if token in trailing_terms]
        if not leading_present or not trailing_present:
            continue

        combined = any(
            tokens & leading_terms and tokens & trailing_terms
            for tokens in combo_token_sets
        )
        if combined:
            continue

        example = f"{leading_present[0]} {trailing_present[0]}"
        missing_clusters.append(cluster.name)
        suggestions.append(cluster.suggestion.format(example=example))
        example_combos.append(example)

    return OpportunityReport(
        missing_clusters=missing_clusters,
        suggestions=suggestions,
        example_combos=example_combos,
        estimated_score_gain=min(MAX_SCORE_GAIN, POINTS_PER_MISSING_CLUSTER * len(missing_clusters)),
    )
