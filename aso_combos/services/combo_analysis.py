"""End-to-end combo analysis for one app's metadata.

Tokenizes title, subtitle and keywords field, builds n-grams, generates and
classifies combos, then ranks them by priority and reports redundancy and
missing semantic clusters. Also compares a baseline listing with a draft.
"""

import logging
import time
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from aso_combos.config import Settings, get_settings
from aso_combos.core.exceptions import InvalidComboError
from aso_combos.services.combos.classifier import classify_combos
from aso_combos.services.combos.comparison import (
    analyze_keyword_impact,
    calculate_tier_distribution,
    diff_combos,
    extract_strengthen_opportunities,
)
from aso_combos.services.combos.generation import (
    GenerationOptions,
    analyze_all_combos,
    calculate_strategic_value,
    filter_low_value_keywords,
)
from aso_combos.services.combos.ngrams import analyze_combinations, filter_meaningful_combos
from aso_combos.services.combos.normalizer import dedupe_combos
from aso_combos.services.combos.opportunities import identify_opportunities
from aso_combos.services.combos.priority import (
    calculate_batch_combo_priorities,
    select_top_combos,
)
from aso_combos.services.combos.redundancy import find_redundant_combos
from aso_combos.services.combos.rules import ComboRuleSet, load_rule_set
from aso_combos.services.combos.strength import classify_strength
from aso_combos.services.combos.tokenizer import analyze_tokens, tokenize
from aso_combos.services.combos.types import (
    ClassifiedCombo,
    ComboAnalysis,
    ComboDiff,
    ComboRankingData,
    ComboStats,
    GeneratedCombo,
    KeywordPopularityData,
    NgramAnalysis,
    OpportunityReport,
    RedundancyReport,
    TokenAnalysis,
    TopComboSelection,
)

logger = logging.getLogger(__name__)


def normalize_ranking_keys(
    ranking_data: dict[str, ComboRankingData],
) -> dict[str, ComboRankingData]:
    """Key ranking data by tokenized combo text, matching generated combo texts."""
    return {" ".join(tokenize(text)): data for text, data in ranking_data.items()}


def normalize_popularity_keys(
    popularity_data: dict[str, KeywordPopularityData],
) -> dict[str, KeywordPopularityData]:
    return {keyword.lower(): data for keyword, data in popularity_data.items()}


@dataclass
class ComboAnalysisInput:
    """Metadata triple plus optional external ranking/popularity signals."""

    title: str
    subtitle: str
    keywords_field: str = ""
    brand_name: str | None = None
    ranking_data: dict[str, ComboRankingData] = field(default_factory=dict)
    popularity_data: dict[str, KeywordPopularityData] = field(default_factory=dict)
    top_limit: int | None = None


@dataclass
class ComboPriorityInput:
    """Explicit combos to score against a metadata triple."""

    title: str
    subtitle: str
    combos: list[str]
    keywords_field: str = ""
    ranking_data: dict[str, ComboRankingData] = field(default_factory=dict)
    popularity_data: dict[str, KeywordPopularityData] = field(default_factory=dict)
    limit: int | None = None


@dataclass
class ComboComparisonInput:
    """Live listing and an edited draft of the same app."""

    baseline: ComboAnalysisInput
    draft: ComboAnalysisInput


@dataclass
class ComboAnalysisOutput:
    """Everything derived from one metadata triple."""

    analysis: ComboAnalysis
    classified_combos: list[ClassifiedCombo]
    top_combos: TopComboSelection
    redundancy: RedundancyReport
    opportunities: OpportunityReport
    token_analysis: dict[str, TokenAnalysis] = field(default_factory=dict)
    ngrams: dict[str, NgramAnalysis] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "analysis": self.analysis.to_dict(),
            "classified_combos": [combo.to_dict() for combo in self.classified_combos],
            "top_combos": self.top_combos.to_dict(),
            "redundancy": self.redundancy.to_dict(),
            "opportunities": self.opportunities.to_dict(),
            "token_analysis": {
                field_name: analysis.to_dict()
                for field_name, analysis in self.token_analysis.items()
            },
            "ngrams": {
                field_name: ngram_analysis.to_dict()
                for field_name, ngram_analysis in self.ngrams.items()
            },
        }


@dataclass
class ComboComparisonOutput:
    """Baseline vs draft combo coverage."""

    baseline_stats: ComboStats
    draft_stats: ComboStats
    diff: ComboDiff
    tier_distribution: dict[str, dict[str, int]]
    keyword_impact: list[dict[str, Any]]
    strengthen_opportunities: list[dict[str, Any]]

    def to_dict(self) -> dict[str, Any]:
        return {
            "baseline_stats": self.baseline_stats.to_dict(),
            "draft_stats": self.draft_stats.to_dict(),
            "diff": self.diff.to_dict(),
            "tier_distribution": self.tier_distribution,
            "keyword_impact": self.keyword_impact,
            "strengthen_opportunities": [
                {**item, "combo": item["combo"].to_dict()}
                for item in self.strengthen_opportunities
            ],
        }


class ComboAnalysisService:
    """Runs the combo pipeline with an injected rule set and generation limits."""

    def __init__(
        self,
        rules: ComboRuleSet,
        options: GenerationOptions | None = None,
        recommended_limit: int = 10,
        top_limit: int = 500,
    ) -> None:
        self.rules = rules
        self.options = options or GenerationOptions()
        self.recommended_limit = recommended_limit
        self.top_limit = top_limit

    @classmethod
    def from_settings(cls, settings: Settings) -> "ComboAnalysisService":
        """Build the service from application settings, loading rules eagerly."""
        rules = (
            load_rule_set(settings.combo_rules_path)
            if settings.combo_rules_path
            else ComboRuleSet()
        )
        options = GenerationOptions(
            min_length=settings.combo_min_length,
            max_length=settings.combo_max_length,
            max_per_source=settings.combo_max_per_source,
            max_total=settings.combo_max_total,
        )
        return cls(
            rules=rules,
            options=options,
            recommended_limit=settings.recommended_limit,
            top_limit=settings.top_combo_limit,
        )

    def _analyze(self, input_data: ComboAnalysisInput) -> ComboAnalysis:
        return analyze_all_combos(
            tokenize(input_data.title),
            tokenize(input_data.subtitle),
            input_data.title,
            input_data.subtitle,
            keywords_tokens=tokenize(input_data.keywords_field),
            keywords_text=input_data.keywords_field,
            brand_name=input_data.brand_name,
            options=self.options,
            recommended_limit=self.recommended_limit,
        )

    def run(self, input_data: ComboAnalysisInput) -> ComboAnalysisOutput:
        started = time.perf_counter()
        rules = self.rules.with_brand(input_data.brand_name)

        field_tokens = {
            "title": tokenize(input_data.title),
            "subtitle": tokenize(input_data.subtitle),
            "keywords": tokenize(input_data.keywords_field),
        }
        ngrams = {
            field_name: analyze_combinations(
                tokens,
                rules.stopwords,
                self.options.min_length,
                self.options.max_length,
            )
            for field_name, tokens in field_tokens.items()
        }

        analysis = self._analyze(input_data)

        # Stopword-only combos never reach the classifier.
        meaningful = filter_meaningful_combos(
            [combo.text for combo in analysis.all_possible_combos],
            rules.stopwords,
        )
        classified = classify_combos(dedupe_combos(meaningful), rules)

        priority_scores = calculate_batch_combo_priorities(
            analysis.all_possible_combos,
            normalize_ranking_keys(input_data.ranking_data),
            normalize_popularity_keys(input_data.popularity_data),
        )
        top_limit = input_data.top_limit if input_data.top_limit is not None else self.top_limit
        top_combos = select_top_combos(analysis.all_possible_combos, priority_scores, top_limit)

        existing_texts = [combo.text for combo in analysis.existing_combos]
        redundancy = find_redundant_combos(existing_texts)
        opportunities = identify_opportunities(
            existing_texts,
            field_tokens["title"],
            field_tokens["subtitle"],
            rules,
        )

        token_analysis = {
            field_name: analyze_tokens(tokens, rules.stopwords)
            for field_name, tokens in field_tokens.items()
        }

        logger.info(
            "Combo analysis completed",
            extra={
                "total_combos": analysis.stats.total_possible,
                "existing": analysis.stats.existing,
                "missing": analysis.stats.missing,
                "coverage": analysis.stats.coverage,
                "classified": len(classified),
                "limit_reached": analysis.stats.limit_reached,
                "missing_clusters": len(opportunities.missing_clusters),
                "elapsed_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )

        return ComboAnalysisOutput(
            analysis=analysis,
            classified_combos=classified,
            top_combos=top_combos,
            redundancy=redundancy,
            opportunities=opportunities,
            token_analysis=token_analysis,
            ngrams=ngrams,
        )

    def compare(self, input_data: ComboComparisonInput) -> ComboComparisonOutput:
        """Diff combo coverage of a live listing against an edited draft."""
        baseline = self._analyze(input_data.baseline)
        draft = self._analyze(input_data.draft)

        comparison = ComboComparisonOutput(
            baseline_stats=baseline.stats,
            draft_stats=draft.stats,
            diff=diff_combos(baseline.all_possible_combos, draft.all_possible_combos),
            tier_distribution=calculate_tier_distribution(baseline.stats, draft.stats),
            keyword_impact=analyze_keyword_impact(
                _listing_keywords(input_data.baseline),
                _listing_keywords(input_data.draft),
                baseline.all_possible_combos,
                draft.all_possible_combos,
            ),
            strengthen_opportunities=extract_strengthen_opportunities(draft.all_possible_combos),
        )

        logger.info(
            "Combo comparison completed",
            extra={
                "added": len(comparison.diff.added),
                "removed": len(comparison.diff.removed),
                "upgrades": len(comparison.diff.tier_upgrades),
                "downgrades": len(comparison.diff.tier_downgrades),
            },
        )
        return comparison

    def prioritize(self, input_data: ComboPriorityInput) -> TopComboSelection:
        """Score caller-supplied combos against the given metadata."""
        title_tokens = tokenize(input_data.title)
        subtitle_tokens = tokenize(input_data.subtitle)
        keywords_tokens = tokenize(input_data.keywords_field)

        combos: list[GeneratedCombo] = []
        seen: set[str] = set()
        for raw_combo in input_data.combos:
            keywords = tokenize(raw_combo)
            if len(keywords) < 2:
                raise InvalidComboError(raw_combo, "combo needs at least two words")
            text = " ".join(keywords)
            if text in seen:
                continue
            seen.add(text)

            assessment = classify_strength(
                keywords,
                input_data.title,
                input_data.subtitle,
                input_data.keywords_field,
                title_tokens=title_tokens,
                subtitle_tokens=subtitle_tokens,
                keywords_tokens=keywords_tokens,
            )
            combos.append(
                GeneratedCombo(
                    text=text,
                    keywords=keywords,
                    length=len(keywords),
                    exists=assessment.strength != "missing",
                    source=assessment.source,
                    strength=assessment.strength,
                    is_consecutive=assessment.is_consecutive,
                    can_strengthen=assessment.can_strengthen,
                    strengthening_suggestion=assessment.strengthening_suggestion,
                    strategic_value=calculate_strategic_value(keywords),
                )
            )

        priority_scores = calculate_batch_combo_priorities(
            combos,
            normalize_ranking_keys(input_data.ranking_data),
            normalize_popularity_keys(input_data.popularity_data),
        )
        limit = input_data.limit if input_data.limit is not None else self.top_limit
        selection = select_top_combos(combos, priority_scores, limit)

        logger.debug(
            "Scored caller-supplied combos",
            extra={
                "requested": len(input_data.combos),
                "scored": len(combos),
                "returned": len(selection.top_combos),
            },
        )
        return selection


@lru_cache
def get_combo_analysis_service() -> ComboAnalysisService:
    """Get cached service built from application settings."""
    return ComboAnalysisService.from_settings(get_settings())


def _listing_keywords(input_data: ComboAnalysisInput) -> list[str]:
    return filter_low_value_keywords(
        tokenize(input_data.title)
        + tokenize(input_data.subtitle)
        + tokenize(input_data.keywords_field)
    )
