"""Unit tests for combo priority scoring."""

import pytest

from aso_combos.services.combos.numeric import round_half_up
from aso_combos.services.combos.priority import (
    PRIORITY_WEIGHTS,
    calculate_batch_combo_priorities,
    calculate_combo_priority,
    calculate_intent_score,
    calculate_opportunity_score,
    calculate_popularity_score,
    calculate_trend_score,
    format_priority_score_breakdown,
    get_priority_tier,
    resolve_data_quality,
    select_top_combos,
)
from aso_combos.services.combos.types import (
    ComboRankingData,
    ComboStrength,
    GeneratedCombo,
    KeywordPopularityData,
)


def _combo(text: str, strength: ComboStrength = "title_consecutive") -> GeneratedCombo:
    keywords = text.split(" ")
    return GeneratedCombo(
        text=text,
        keywords=keywords,
        length=len(keywords),
        exists=strength != "missing",
        source="title" if strength != "missing" else "missing",
        strength=strength,
        is_consecutive=strength == "title_consecutive",
        can_strengthen=strength != "title_consecutive",
        strategic_value=60,
    )


POPULARITY = {
    "learn": KeywordPopularityData(popularity_score=80, intent_score=0.9),
    "spanish": KeywordPopularityData(popularity_score=61, intent_score=0.6),
}


@pytest.mark.parametrize(
    ("position", "expected"),
    [
        (1, 5),
        (5, 5),
        (6, 10),
        (10, 10),
        (11, 60),
        (20, 60),
        (21, 50),
        (50, 50),
        (51, 40),
        (100, 40),
        (101, 30),
    ],
)
def test_opportunity_score_by_ranking_position(position: int, expected: int) -> None:
    ranking = ComboRankingData(position=position, is_ranking=True)

    assert calculate_opportunity_score(ranking) == expected


def test_opportunity_score_when_not_ranking_scales_with_competition() -> None:
    assert calculate_opportunity_score(None) == 60
    assert calculate_opportunity_score(ComboRankingData(total_results=20_000)) == 70
    assert calculate_opportunity_score(ComboRankingData(total_results=6_000)) == 75
    assert calculate_opportunity_score(ComboRankingData(total_results=100)) == 80


def test_trend_score_by_direction_and_magnitude() -> None:
    assert calculate_trend_score(None) == 50
    assert calculate_trend_score(ComboRankingData(trend="up", position_change=12)) == 100
    assert calculate_trend_score(ComboRankingData(trend="up", position_change=6)) == 90
    assert calculate_trend_score(ComboRankingData(trend="up", position_change=1)) == 80
    assert calculate_trend_score(ComboRankingData(trend="stable")) == 50
    assert calculate_trend_score(ComboRankingData(trend="new")) == 60
    assert calculate_trend_score(ComboRankingData(trend="down", position_change=-15)) == 20
    assert calculate_trend_score(ComboRankingData(trend="down", position_change=-5)) == 30
    assert calculate_trend_score(ComboRankingData(trend="down")) == 40


def test_popularity_and_intent_average_known_keywords() -> None:
    assert calculate_popularity_score(["learn", "spanish", "fast"], POPULARITY) == 71
    assert calculate_popularity_score(["fast"], POPULARITY) == 0
    assert calculate_intent_score(["learn", "spanish"], POPULARITY) == 75
    assert calculate_intent_score(["fast"], POPULARITY) == 50


def test_data_quality_reflects_available_inputs() -> None:
    ranking = ComboRankingData(position=3, is_ranking=True)

    assert resolve_data_quality(None, {}) == "missing"
    assert resolve_data_quality(ranking, {}) == "partial"
    assert resolve_data_quality(None, POPULARITY) == "partial"
    assert resolve_data_quality(ranking, POPULARITY) == "complete"


def test_total_score_equals_rounded_weighted_components() -> None:
    rankings = [
        None,
        ComboRankingData(position=15, is_ranking=True, trend="up", position_change=7),
        ComboRankingData(total_results=9_000, trend="down", position_change=-2),
    ]
    strengths: list[ComboStrength] = ["title_consecutive", "subtitle_non_consecutive", "missing"]
    for strength in strengths:
        for ranking in rankings:
            score = calculate_combo_priority(_combo("learn spanish", strength), ranking, POPULARITY)
            weighted = (
                score.strength_score * PRIORITY_WEIGHTS["strength"]
                + score.popularity_score * PRIORITY_WEIGHTS["popularity"]
                + score.opportunity_score * PRIORITY_WEIGHTS["opportunity"]
                + score.trend_score * PRIORITY_WEIGHTS["trend"]
                + score.intent_score * PRIORITY_WEIGHTS["intent"]
            )
            assert score.total_score == round_half_up(weighted)
            assert 0 <= score.total_score <= 100


def test_combo_priority_without_external_data() -> None:
    score = calculate_combo_priority(_combo("language learning"), None, {})

    assert score.strength_score == 100
    assert score.popularity_score == 0
    assert score.opportunity_score == 60
    assert score.trend_score == 50
    assert score.intent_score == 50
    # 30 + 0 + 12 + 7.5 + 5 = 54.5
    assert score.total_score == 55
    assert score.data_quality == "missing"


def test_select_top_combos_sorts_by_score_and_truncates() -> None:
    combos = [
        _combo("fast language", "missing"),
        _combo("language learning", "title_consecutive"),
        _combo("learn spanish", "subtitle_consecutive"),
    ]
    scores = calculate_batch_combo_priorities(combos, {}, {})

    selection = select_top_combos(combos, scores, limit=2)

    assert [item.combo.text for item in selection.top_combos] == [
        "language learning",
        "learn spanish",
    ]
    assert selection.total_generated == 3
    assert selection.limit_reached


def test_select_top_combos_is_stable_for_ties() -> None:
    combos = [_combo("alpha beta"), _combo("gamma delta"), _combo("epsilon zeta")]
    scores = calculate_batch_combo_priorities(combos, {}, {})

    selection = select_top_combos(combos, scores)

    assert [item.combo.text for item in selection.top_combos] == [
        "alpha beta",
        "gamma delta",
        "epsilon zeta",
    ]
    assert not selection.limit_reached


def test_batch_priorities_look_up_ranking_by_combo_text() -> None:
    combos = [_combo("learn spanish"), _combo("spanish fast")]
    ranking = {"learn spanish": ComboRankingData(position=2, is_ranking=True)}

    scores = calculate_batch_combo_priorities(combos, ranking, {})

    assert scores["learn spanish"].opportunity_score == 5
    assert scores["spanish fast"].opportunity_score == 60


def test_priority_tier_thresholds() -> None:
    assert get_priority_tier(70) == "high"
    assert get_priority_tier(69) == "medium"
    assert get_priority_tier(40) == "medium"
    assert get_priority_tier(39) == "low"


def test_format_priority_score_breakdown_lists_components() -> None:
    score = calculate_combo_priority(_combo("language learning"), None, {})

    text = format_priority_score_breakdown(score)

    assert text.startswith("Priority Score: 55/100")
    assert "├─ Strength: 100/100 x 0.30 (30 pts)" in text
    assert "└─ Intent: 50/100 x 0.10 (5 pts)" in text
    assert text.endswith("Data Quality: missing")
