"""Combo priority scoring engine.

Priority formula (0-100):
- Strength (30%): ranking power of the combo's metadata position
- Popularity (25%): mean keyword popularity
- Opportunity (20%): ranking position vs competition
- Trend (15%): ranking momentum
- Intent (10%): mean keyword intent
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from aso_combos.services.combos.numeric import clamp_score, round_half_up
from aso_combos.services.combos.types import (
    ComboPriorityScore,
    ComboRankingData,
    ComboStrength,
    DataQuality,
    GeneratedCombo,
    KeywordPopularityData,
    PrioritizedCombo,
    TopComboSelection,
)

PRIORITY_WEIGHTS = {
    "strength": 0.30,
    "popularity": 0.25,
    "opportunity": 0.20,
    "trend": 0.15,
    "intent": 0.10,
}

STRENGTH_SCORE_MAP: dict[ComboStrength, int] = {
    "title_consecutive": 100,
    "title_non_consecutive": 85,
    "title_keywords_cross": 70,
    "title_subtitle_cross": 70,
    "keywords_consecutive": 50,
    "subtitle_consecutive": 50,
    "keywords_subtitle_cross": 35,
    "keywords_non_consecutive": 30,
    "subtitle_non_consecutive": 30,
    "three_way_cross": 20,
    "missing": 0,
}

DEFAULT_OPPORTUNITY_SCORE = 60
NEUTRAL_TREND_SCORE = 50
NEUTRAL_INTENT_SCORE = 50
DEFAULT_TOP_COMBO_LIMIT = 500

HIGH_PRIORITY_THRESHOLD = 70
MEDIUM_PRIORITY_THRESHOLD = 40


def calculate_strength_score(strength: ComboStrength) -> int:
    return STRENGTH_SCORE_MAP.get(strength, 0)


def calculate_popularity_score(
    keywords: Sequence[str],
    popularity_data: Mapping[str, KeywordPopularityData],
) -> int:
    """Average popularity across keywords that have data; 0 when none do."""
    scores = [
        popularity_data[keyword.lower()].popularity_score
        for keyword in keywords
        if keyword.lower() in popularity_data
    ]
    if not scores:
        return 0
    return round_half_up(clamp_score(sum(scores) / len(scores)))


def calculate_opportunity_score(ranking_data: ComboRankingData | None) -> int:
    """Score headroom: not ranking or mid-pack positions beat top positions."""
    if ranking_data is None:
        return DEFAULT_OPPORTUNITY_SCORE

    position = ranking_data.position
    if not ranking_data.is_ranking or not position:
        total_results = ranking_data.total_results or 0
        if total_results > 10_000:
            return 70
        if total_results > 5_000:
            return 75
        return 80

    if position <= 5:
        return 5
    if position <= 10:
        return 10
    if position <= 20:
        return 60
    if position <= 50:
        return 50
    if position <= 100:
        return 40
    return 30


def calculate_trend_score(ranking_data: ComboRankingData | None) -> int:
    """Score ranking momentum; larger moves push further from neutral."""
    if ranking_data is None:
        return NEUTRAL_TREND_SCORE

    magnitude = abs(ranking_data.position_change or 0)
    if ranking_data.trend == "up":
        if magnitude >= 10:
            return 100
        if magnitude >= 5:
            return 90
        return 80
    if ranking_data.trend == "stable":
        return 50
    if ranking_data.trend == "new":
        return 60
    if ranking_data.trend == "down":
        if magnitude >= 10:
            return 20
        if magnitude >= 5:
            return 30
        return 40
    return NEUTRAL_TREND_SCORE


def calculate_intent_score(
    keywords: Sequence[str],
    popularity_data: Mapping[str, KeywordPopularityData],
) -> int:
    intent_scores = [
        popularity_data[keyword.lower()].intent_score * 100
        for keyword in keywords
        if keyword.lower() in popularity_data
        and popularity_data[keyword.lower()].intent_score is not None
    ]
    if not intent_scores:
        return NEUTRAL_INTENT_SCORE
    return round_half_up(clamp_score(sum(intent_scores) / len(intent_scores)))


def resolve_data_quality(
    ranking_data: ComboRankingData | None,
    popularity_data: Mapping[str, KeywordPopularityData],
) -> DataQuality:
    has_ranking = ranking_data is not None
    has_popularity = len(popularity_data) > 0
    if not has_ranking and not has_popularity:
        return "missing"
    if not has_ranking or not has_popularity:
        return "partial"
    return "complete"


def calculate_combo_priority(
    combo: GeneratedCombo,
    ranking_data: ComboRankingData | None,
    popularity_data: Mapping[str, KeywordPopularityData],
) -> ComboPriorityScore:
    """Calculate the weighted priority breakdown for one combo."""
    strength_score = calculate_strength_score(combo.strength)
    popularity_score = calculate_popularity_score(combo.keywords, popularity_data)
    opportunity_score = calculate_opportunity_score(ranking_data)
    trend_score = calculate_trend_score(ranking_data)
    intent_score = calculate_intent_score(combo.keywords, popularity_data)

    weighted = (
        (strength_score * PRIORITY_WEIGHTS["strength"])
        + (popularity_score * PRIORITY_WEIGHTS["popularity"])
        + (opportunity_score * PRIORITY_WEIGHTS["opportunity"])
        + (trend_score * PRIORITY_WEIGHTS["trend"])
        + (intent_score * PRIORITY_WEIGHTS["intent"])
    )

    return ComboPriorityScore(
        strength_score=strength_score,
        popularity_score=popularity_score,
        opportunity_score=opportunity_score,
        trend_score=trend_score,
        intent_score=intent_score,
        total_score=int(clamp_score(round_half_up(weighted))),
        data_quality=resolve_data_quality(ranking_data, popularity_data),
    )


def calculate_batch_combo_priorities(
    combos: Sequence[GeneratedCombo],
    ranking_data_by_combo: Mapping[str, ComboRankingData],
    popularity_data: Mapping[str, KeywordPopularityData],
) -> dict[str, ComboPriorityScore]:
    """Score every combo; ranking data is looked up by combo text."""
    return {
        combo.text: calculate_combo_priority(
            combo,
            ranking_data_by_combo.get(combo.text),
            popularity_data,
        )
        for combo in combos
    }


def select_top_combos(
    combos: Sequence[GeneratedCombo],
    priority_scores: Mapping[str, ComboPriorityScore],
    limit: int = DEFAULT_TOP_COMBO_LIMIT,
) -> TopComboSelection:
    """Rank combos purely by total priority score and truncate to the limit."""
    empty_score = ComboPriorityScore(
        strength_score=0,
        popularity_score=0,
        opportunity_score=0,
        trend_score=0,
        intent_score=0,
        total_score=0,
        data_quality="missing",
    )
    prioritized = [
        PrioritizedCombo(combo=combo, priority=priority_scores.get(combo.text, empty_score))
        for combo in combos
    ]
    prioritized.sort(key=lambda item: -item.priority.total_score)

    return TopComboSelection(
        top_combos=prioritized[:max(0, limit)],
        total_generated=len(combos),
        limit_reached=len(combos) > limit,
    )


def get_priority_tier(total_score: int) -> str:
    if total_score >= HIGH_PRIORITY_THRESHOLD:
        return "high"
    if total_score >= MEDIUM_PRIORITY_THRESHOLD:
        return "medium"
    return "low"


def format_priority_score_breakdown(score: ComboPriorityScore) -> str:
    """Render a plain-text breakdown of the weighted components."""
    rows = [
        ("Strength", score.strength_score, PRIORITY_WEIGHTS["strength"]),
        ("Popularity", score.popularity_score, PRIORITY_WEIGHTS["popularity"]),
        ("Opportunity", score.opportunity_score, PRIORITY_WEIGHTS["opportunity"]),
        ("Trend", score.trend_score, PRIORITY_WEIGHTS["trend"]),
        ("Intent", score.intent_score, PRIORITY_WEIGHTS["intent"]),
    ]
    lines = [f"Priority Score: {score.total_score}/100", ""]
    for index, (label, value, weight) in enumerate(rows):
        branch = "└─" if index == len(rows) - 1 else "├─"
        points = round_half_up(value * weight)
        lines.append(f"{branch} {label}: {value}/100 x {weight:.2f} ({points} pts)")
    lines.extend(["", f"Data Quality: {score.data_quality}"])
    return "\n".join(lines)
