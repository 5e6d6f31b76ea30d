"""Domain types for keyword combo generation and scoring."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

ComboStrength = Literal[
    "title_consecutive",
    "title_non_consecutive",
    "title_keywords_cross",
    "title_subtitle_cross",
    "keywords_consecutive",
    "subtitle_consecutive",
    "keywords_subtitle_cross",
    "keywords_non_consecutive",
    "subtitle_non_consecutive",
    "three_way_cross",
    "missing",
]
ComboSource = Literal["title", "subtitle", "keywords", "both", "cross", "missing"]
MetadataField = Literal["title", "subtitle", "keywords"]
TailLength = Literal["short-tail", "mid-tail", "long-tail"]
IntentClass = Literal["Navigational", "Transactional", "Informational", "Noise"]
DataQuality = Literal["complete", "partial", "missing"]
RankingTrend = Literal["up", "down", "stable", "new"]

# Strongest first; "missing" is always last.
STRENGTH_ORDER: tuple[ComboStrength, ...] = (
    "title_consecutive",
    "title_non_consecutive",
    "title_keywords_cross",
    "title_subtitle_cross",
    "keywords_consecutive",
    "subtitle_consecutive",
    "keywords_subtitle_cross",
    "keywords_non_consecutive",
    "subtitle_non_consecutive",
    "three_way_cross",
    "missing",
)


@dataclass(slots=True, frozen=True)
class TokenAnalysis:
    """Partition of a token list into core and filler tokens."""

    core_tokens: list[str]
    filler_tokens: list[str]
    duplicates: list[str]
    noise_ratio: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "core_tokens": list(self.core_tokens),
            "filler_tokens": list(self.filler_tokens),
            "duplicates": list(self.duplicates),
            "noise_ratio": round(self.noise_ratio, 4),
        }


@dataclass(slots=True, frozen=True)
class NgramAnalysis:
    """All n-grams of a token list and the meaningful subset."""

    all_combos: list[str]
    meaningful_combos: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "all_combos": list(self.all_combos),
            "meaningful_combos": list(self.meaningful_combos),
        }


@dataclass(slots=True, frozen=True)
class ClassifiedCombo:
    """Combo enriched with length, intent and semantic-feature flags."""

    text: str
    keywords: list[str]
    tail_length: TailLength
    intent: IntentClass
    has_brand: bool
    has_category: bool
    has_benefit: bool
    has_verb: bool
    has_time_hint: bool
    filler_ratio: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "keywords": list(self.keywords),
            "tail_length": self.tail_length,
            "intent": self.intent,
            "has_brand": self.has_brand,
            "has_category": self.has_category,
            "has_benefit": self.has_benefit,
            "has_verb": self.has_verb,
            "has_time_hint": self.has_time_hint,
            "filler_ratio": round(self.filler_ratio, 4),
        }


@dataclass(slots=True, frozen=True)
class StrengthAssessment:
    """Result of classifying a combo against title/subtitle/keywords metadata."""

    strength: ComboStrength
    is_consecutive: bool
    source: ComboSource
    source_fields: list[MetadataField]
    can_strengthen: bool
    strengthening_suggestion: str | None = None


@dataclass(slots=True, frozen=True)
class GeneratedCombo:
    """A generated combo with presence, strength and strategic value."""

    text: str
    keywords: list[str]
    length: int
    exists: bool
    source: ComboSource
    strength: ComboStrength
    is_consecutive: bool
    can_strengthen: bool
    strategic_value: int
    strengthening_suggestion: str | None = None
    recommendation: str | None = None
    search_volume: str = "unknown"
    competition: str = "unknown"

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "keywords": list(self.keywords),
            "length": self.length,
            "exists": self.exists,
            "source": self.source,
            "strength": self.strength,
            "is_consecutive": self.is_consecutive,
            "can_strengthen": self.can_strengthen,
            "strengthening_suggestion": self.strengthening_suggestion,
            "strategic_value": self.strategic_value,
            "recommendation": self.recommendation,
            "search_volume": self.search_volume,
            "competition": self.competition,
        }


@dataclass(slots=True, frozen=True)
class ComboGenerationResult:
    """Unique combos produced by one generation call."""

    combos: list[str]
    total_generated: int
    limit_reached: bool


@dataclass(slots=True, frozen=True)
class ComboStats:
    """Aggregate coverage statistics for a combo analysis."""

    total_possible: int
    existing: int
    missing: int
    coverage: int
    by_strength: dict[str, int]
    total_generated: int
    limit_reached: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_possible": self.total_possible,
            "existing": self.existing,
            "missing": self.missing,
            "coverage": self.coverage,
            "by_strength": dict(self.by_strength),
            "total_generated": self.total_generated,
            "limit_reached": self.limit_reached,
        }


@dataclass(slots=True, frozen=True)
class ComboAnalysis:
    """Full combo analysis for one (title, subtitle, keywords) triple."""

    all_possible_combos: list[GeneratedCombo]
    existing_combos: list[GeneratedCombo]
    missing_combos: list[GeneratedCombo]
    recommended_to_add: list[GeneratedCombo]
    stats: ComboStats

    def to_dict(self) -> dict[str, Any]:
        return {
            "all_possible_combos": [combo.to_dict() for combo in self.all_possible_combos],
            "existing_combos": [combo.to_dict() for combo in self.existing_combos],
            "missing_combos": [combo.to_dict() for combo in self.missing_combos],
            "recommended_to_add": [combo.to_dict() for combo in self.recommended_to_add],
            "stats": self.stats.to_dict(),
        }


@dataclass(slots=True, frozen=True)
class ComboRankingData:
    """Ranking snapshot for a combo in App Store search."""

    position: int | None = None
    is_ranking: bool = False
    total_results: int | None = None
    trend: RankingTrend | None = None
    position_change: int | None = None
    visibility_score: float | None = None


@dataclass(slots=True, frozen=True)
class KeywordPopularityData:
    """Popularity signals for a single keyword."""

    popularity_score: float
    intent_score: float | None = None
    autocomplete_score: float | None = None
    length_prior: float | None = None


@dataclass(slots=True, frozen=True)
class ComboPriorityScore:
    """Weighted priority breakdown for a combo."""

    strength_score: int
    popularity_score: int
    opportunity_score: int
    trend_score: int
    intent_score: int
    total_score: int
    data_quality: DataQuality

    def to_dict(self) -> dict[str, Any]:
        return {
            "strength_score": self.strength_score,
            "popularity_score": self.popularity_score,
            "opportunity_score": self.opportunity_score,
            "trend_score": self.trend_score,
            "intent_score": self.intent_score,
            "total_score": self.total_score,
            "data_quality": self.data_quality,
        }


@dataclass(slots=True, frozen=True)
class PrioritizedCombo:
    """Combo paired with its priority score."""

    combo: GeneratedCombo
    priority: ComboPriorityScore

    def to_dict(self) -> dict[str, Any]:
        payload = self.combo.to_dict()
        payload["priority_score"] = self.priority.to_dict()
        return payload


@dataclass(slots=True, frozen=True)
class TopComboSelection:
    """Score-ranked slate of combos truncated to a limit."""

    top_combos: list[PrioritizedCombo]
    total_generated: int
    limit_reached: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "top_combos": [item.to_dict() for item in self.top_combos],
            "total_generated": self.total_generated,
            "limit_reached": self.limit_reached,
        }


@dataclass(slots=True, frozen=True)
class RedundantGroup:
    """Combos sharing a repeated prefix or suffix pattern."""

    pattern: str
    position: Literal["prefix", "suffix"]
    combos: list[str]
    wasted_tokens: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "pattern": self.pattern,
            "position": self.position,
            "combos": list(self.combos),
            "wasted_tokens": self.wasted_tokens,
        }


@dataclass(slots=True, frozen=True)
class RedundancyReport:
    """Redundancy groups and the aggregate redundancy score."""

    groups: list[RedundantGroup]
    redundancy_score: int
    wasted_tokens: int
    redundant_combo_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "groups": [group.to_dict() for group in self.groups],
            "redundancy_score": self.redundancy_score,
            "wasted_tokens": self.wasted_tokens,
            "redundant_combo_count": self.redundant_combo_count,
        }


@dataclass(slots=True, frozen=True)
class OpportunityReport:
    """Semantic clusters missing from existing combos."""

    missing_clusters: list[str]
    suggestions: list[str]
    example_combos: list[str]
    estimated_score_gain: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "missing_clusters": list(self.missing_clusters),
            "suggestions": list(self.suggestions),
            "example_combos": list(self.example_combos),
            "estimated_score_gain": self.estimated_score_gain,
        }


@dataclass(slots=True)
class ComboTierChange:
    """Tier movement of a combo present in both baseline and draft."""

    text: str
    baseline_tier: int
    draft_tier: int
    baseline_strength: ComboStrength
    draft_strength: ComboStrength
    improvement: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "baseline_tier": self.baseline_tier,
            "draft_tier": self.draft_tier,
            "baseline_strength": self.baseline_strength,
            "draft_strength": self.draft_strength,
            "improvement": self.improvement,
        }


@dataclass(slots=True)
class ComboDiff:
    """Difference between baseline and draft combo sets."""

    added: list[GeneratedCombo] = field(default_factory=list)
    removed: list[GeneratedCombo] = field(default_factory=list)
    tier_upgrades: list[ComboTierChange] = field(default_factory=list)
    tier_downgrades: list[ComboTierChange] = field(default_factory=list)
    unchanged: list[GeneratedCombo] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "added": [combo.to_dict() for combo in self.added],
            "removed": [combo.to_dict() for combo in self.removed],
            "tier_upgrades": [change.to_dict() for change in self.tier_upgrades],
            "tier_downgrades": [change.to_dict() for change in self.tier_downgrades],
            "unchanged": [combo.to_dict() for combo in self.unchanged],
        }
