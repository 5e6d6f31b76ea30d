"""Combo analysis schemas."""

from pydantic import BaseModel, Field

from aso_combos.services.combos.types import (
    ComboRankingData,
    KeywordPopularityData,
    RankingTrend,
)

MAX_KEYWORDS_FIELD_LENGTH = 100


class ComboRankingInput(BaseModel):
    """Observed ranking for one combo."""

    position: int | None = Field(default=None, ge=1)
    is_ranking: bool = False
    total_results: int | None = Field(default=None, ge=0)
    trend: RankingTrend | None = None
    position_change: int | None = None
    visibility_score: float | None = None

    def to_domain(self) -> ComboRankingData:
        return ComboRankingData(**self.model_dump())


class KeywordPopularityInput(BaseModel):
    """Popularity signals for one keyword."""

    popularity_score: float = Field(ge=0, le=100)
    intent_score: float | None = Field(default=None, ge=0, le=1)
    autocomplete_score: float | None = None
    length_prior: float | None = None

    def to_domain(self) -> KeywordPopularityData:
        return KeywordPopularityData(**self.model_dump())


class ComboListingInput(BaseModel):
    """Title, subtitle and keywords field of one listing."""

    title: str = Field(default="", max_length=200)
    subtitle: str = Field(default="", max_length=200)
    keywords_field: str = Field(default="", max_length=MAX_KEYWORDS_FIELD_LENGTH)


class ComboMetadataBase(ComboListingInput):
    """Base metadata triple with external ranking and popularity signals."""

    ranking_data: dict[str, ComboRankingInput] = Field(default_factory=dict)
    popularity_data: dict[str, KeywordPopularityInput] = Field(default_factory=dict)

    def ranking_domain(self) -> dict[str, ComboRankingData]:
        return {text: ranking.to_domain() for text, ranking in self.ranking_data.items()}

    def popularity_domain(self) -> dict[str, KeywordPopularityData]:
        return {
            keyword: popularity.to_domain()
            for keyword, popularity in self.popularity_data.items()
        }


class ComboAnalyzeRequest(ComboMetadataBase):
    """Schema for a full combo analysis request."""

    brand_name: str | None = None
    top_limit: int | None = Field(default=None, ge=0, le=2500)


class ComboPriorityRequest(ComboMetadataBase):
    """Schema for scoring explicit combos."""

    combos: list[str] = Field(min_length=1, max_length=2500)
    limit: int | None = Field(default=None, ge=0, le=2500)


class ComboCompareRequest(BaseModel):
    """Schema for comparing a live listing with a draft."""

    baseline: ComboListingInput
    draft: ComboListingInput
    brand_name: str | None = None


class GeneratedComboResponse(BaseModel):
    """One generated combo with its strength classification."""

    text: str
    keywords: list[str]
    length: int
    exists: bool
    source: str
    strength: str
    is_consecutive: bool
    can_strengthen: bool
    strategic_value: int
    strengthening_suggestion: str | None = None
    recommendation: str | None = None
    search_volume: str = "unknown"
    competition: str = "unknown"


class ComboStatsResponse(BaseModel):
    """Coverage statistics."""

    total_possible: int
    existing: int
    missing: int
    coverage: int
    by_strength: dict[str, int]
    total_generated: int
    limit_reached: bool


class ComboAnalysisResponse(BaseModel):
    all_possible_combos: list[GeneratedComboResponse]
    existing_combos: list[GeneratedComboResponse]
    missing_combos: list[GeneratedComboResponse]
    recommended_to_add: list[GeneratedComboResponse]
    stats: ComboStatsResponse


class ClassifiedComboResponse(BaseModel):
    """Semantic classification of a combo."""

    text: str
    keywords: list[str]
    tail_length: str
    intent: str
    has_brand: bool
    has_category: bool
    has_benefit: bool
    has_verb: bool
    has_time_hint: bool
    filler_ratio: float


class ComboPriorityScoreResponse(BaseModel):
    """Weighted priority breakdown."""

    strength_score: int
    popularity_score: int
    opportunity_score: int
    trend_score: int
    intent_score: int
    total_score: int
    data_quality: str
    priority_tier: str


class PrioritizedComboResponse(GeneratedComboResponse):
    priority_score: ComboPriorityScoreResponse


class TopComboSelectionResponse(BaseModel):
    """Priority-ranked combo slate."""

    top_combos: list[PrioritizedComboResponse]
    total_generated: int
    limit_reached: bool


class RedundantGroupResponse(BaseModel):
    pattern: str
    position: str
    combos: list[str]
    wasted_tokens: int


class RedundancyReportResponse(BaseModel):
    """Repeated prefix/suffix groups."""

    groups: list[RedundantGroupResponse]
    redundancy_score: int
    wasted_tokens: int
    redundant_combo_count: int


class OpportunityReportResponse(BaseModel):
    """Missing semantic clusters."""

    missing_clusters: list[str]
    suggestions: list[str]
    example_combos: list[str]
    estimated_score_gain: int


class TokenAnalysisResponse(BaseModel):
    core_tokens: list[str]
    filler_tokens: list[str]
    duplicates: list[str]
    noise_ratio: float


class NgramAnalysisResponse(BaseModel):
    all_combos: list[str]
    meaningful_combos: list[str]


class ComboAnalyzeResponse(BaseModel):
    """Schema for a full combo analysis response."""

    analysis: ComboAnalysisResponse
    classified_combos: list[ClassifiedComboResponse]
    top_combos: TopComboSelectionResponse
    redundancy: RedundancyReportResponse
    opportunities: OpportunityReportResponse
    token_analysis: dict[str, TokenAnalysisResponse]
    ngrams: dict[str, NgramAnalysisResponse]


class ComboTierChangeResponse(BaseModel):
    text: str
    baseline_tier: int
    draft_tier: int
    baseline_strength: str
    draft_strength: str
    improvement: int


class ComboDiffResponse(BaseModel):
    """Combos added, removed or moved between tiers."""

    added: list[GeneratedComboResponse]
    removed: list[GeneratedComboResponse]
    tier_upgrades: list[ComboTierChangeResponse]
    tier_downgrades: list[ComboTierChangeResponse]
    unchanged: list[GeneratedComboResponse]


class KeywordImpactResponse(BaseModel):
    keyword: str
    added_or_removed: str
    combo_count: int
    avg_tier: float
    sample_combos: list[str]


class StrengthenOpportunityResponse(BaseModel):
    combo: GeneratedComboResponse
    current_tier: int
    suggestion: str | None = None


class ComboCompareResponse(BaseModel):
    """Schema for a baseline vs draft comparison."""

    baseline_stats: ComboStatsResponse
    draft_stats: ComboStatsResponse
    diff: ComboDiffResponse
    tier_distribution: dict[str, dict[str, int]]
    keyword_impact: list[KeywordImpactResponse]
    strengthen_opportunities: list[StrengthenOpportunityResponse]
