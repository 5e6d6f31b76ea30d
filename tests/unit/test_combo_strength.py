"""Unit tests for combo strength tier classification."""

from aso_combos.services.combos.priority import STRENGTH_SCORE_MAP
from aso_combos.services.combos.strength import (
    MISSING_CONSOLIDATE_SUGGESTION,
    MISSING_REORDER_SUGGESTION,
    classify_strength,
    match_phrase,
)
from aso_combos.services.combos.types import STRENGTH_ORDER

TITLE = "Pimsleur Language Learning"
SUBTITLE = "Learn Spanish Fast"


def test_match_phrase_consecutive_and_ordered() -> None:
    tokens = ["learn", "spanish", "fast"]

    assert match_phrase(["learn", "spanish"], tokens) == (True, True)
    assert match_phrase(["learn", "fast"], tokens) == (True, False)
    assert match_phrase(["fast", "learn"], tokens) == (False, False)
    assert match_phrase(["learn", "spanish", "fast", "now"], tokens) == (False, False)


def test_exact_title_phrase_is_title_consecutive() -> None:
    assessment = classify_strength(["language", "learning"], TITLE, SUBTITLE)

    assert assessment.strength == "title_consecutive"
    assert assessment.is_consecutive
    assert assessment.source == "title"
    assert not assessment.can_strengthen
    assert assessment.strengthening_suggestion is None


def test_subtitle_only_phrase_is_subtitle_consecutive() -> None:
    assessment = classify_strength(["learn", "spanish"], TITLE, SUBTITLE)

    assert assessment.strength == "subtitle_consecutive"
    assert assessment.source == "subtitle"
    assert assessment.can_strengthen
    assert assessment.strengthening_suggestion == "Move to title to strengthen"


def test_missing_combo_can_be_consolidated_into_title() -> None:
    assessment = classify_strength(["fast", "language"], TITLE, SUBTITLE)

    assert assessment.strength == "missing"
    assert assessment.source == "missing"
    assert assessment.can_strengthen
    assert assessment.strengthening_suggestion == MISSING_CONSOLIDATE_SUGGESTION


def test_missing_combo_with_all_words_in_title_suggests_reorder() -> None:
    assessment = classify_strength(["learning", "language"], TITLE, SUBTITLE)

    assert assessment.strength == "missing"
    assert assessment.strengthening_suggestion == MISSING_REORDER_SUGGESTION


def test_missing_combo_with_unknown_words_cannot_strengthen() -> None:
    assessment = classify_strength(["chess", "puzzle"], TITLE, SUBTITLE)

    assert assessment.strength == "missing"
    assert not assessment.can_strengthen
    assert assessment.strengthening_suggestion is None


def test_title_non_consecutive_phrase() -> None:
    assessment = classify_strength(["pimsleur", "learning"], TITLE, SUBTITLE)

    assert assessment.strength == "title_non_consecutive"
    assert not assessment.is_consecutive


def test_cross_tiers_follow_listing_order() -> None:
    title_subtitle = classify_strength(["language", "spanish"], TITLE, SUBTITLE)
    title_keywords = classify_strength(["language", "audio"], TITLE, SUBTITLE, "audio,lessons")
    keywords_subtitle = classify_strength(["spanish", "audio"], TITLE, SUBTITLE, "audio,lessons")
    three_way = classify_strength(
        ["language", "spanish", "audio"], TITLE, SUBTITLE, "audio,lessons"
    )

    assert title_subtitle.strength == "title_subtitle_cross"
    assert title_subtitle.source == "cross"
    assert title_keywords.strength == "title_keywords_cross"
    assert keywords_subtitle.strength == "keywords_subtitle_cross"
    assert three_way.strength == "three_way_cross"


def test_keywords_field_tiers() -> None:
    keywords = "audio,lessons,travel"

    assert classify_strength(["audio", "lessons"], TITLE, SUBTITLE, keywords).strength == (
        "keywords_consecutive"
    )
    assert classify_strength(["audio", "travel"], TITLE, SUBTITLE, keywords).strength == (
        "keywords_non_consecutive"
    )


def test_subtitle_non_consecutive_phrase() -> None:
    assessment = classify_strength(["learn", "fast"], TITLE, SUBTITLE)

    assert assessment.strength == "subtitle_non_consecutive"


def test_phrase_in_two_fields_reports_both_source() -> None:
    assessment = classify_strength(["spanish", "fast"], "Spanish Fast", "Spanish Fast Lessons")

    assert assessment.strength == "title_consecutive"
    assert assessment.source == "both"
    assert assessment.source_fields == ["title", "subtitle"]


def test_every_combo_gets_exactly_one_known_tier() -> None:
    combos = [
        ["language", "learning"],
        ["learn", "spanish"],
        ["fast", "language"],
        ["pimsleur", "fast"],
        ["spanish", "audio"],
        ["", ""],
        [],
    ]
    for words in combos:
        assessment = classify_strength(words, TITLE, SUBTITLE, "audio")
        assert assessment.strength in STRENGTH_ORDER
        assert (assessment.strength != "missing") == (assessment.source != "missing")


def test_strength_scores_decrease_with_tier_order() -> None:
    scores = [STRENGTH_SCORE_MAP[strength] for strength in STRENGTH_ORDER]

    assert scores == sorted(scores, reverse=True)
    assert scores[0] == 100
    assert scores[-1] == 0
