"""Unit tests for redundancy detection and semantic-cluster opportunities."""

from aso_combos.services.combos.opportunities import identify_opportunities
from aso_combos.services.combos.redundancy import find_redundant_combos
from aso_combos.services.combos.rules import ComboRuleSet


def test_shared_prefix_forms_one_redundant_group() -> None:
    report = find_redundant_combos(["learn spanish fast", "learn spanish today"])

    assert len(report.groups) == 1
    group = report.groups[0]
    assert group.pattern == "learn spanish"
    assert group.position == "prefix"
    assert group.combos == ["learn spanish fast", "learn spanish today"]
    assert group.wasted_tokens == 2
    assert report.redundant_combo_count == 2
    # 1.0 * 70 + min(30, 2 * 5)
    assert report.redundancy_score == 80


def test_suffix_groups_exclude_combos_already_grouped_by_prefix() -> None:
    report = find_redundant_combos([
        "learn spanish fast",
        "learn spanish today",
        "speak spanish today",
        "practice spanish today",
        "spanish words",
    ])

    patterns = [(group.position, group.pattern, group.combos) for group in report.groups]
    assert patterns == [
        ("prefix", "learn spanish", ["learn spanish fast", "learn spanish today"]),
        ("suffix", "spanish today", ["speak spanish today", "practice spanish today"]),
    ]
    assert report.wasted_tokens == 4
    assert report.redundant_combo_count == 4
    # 0.8 * 70 + min(30, 20) = 76
    assert report.redundancy_score == 76


def test_two_word_combos_and_duplicates_are_not_redundant() -> None:
    report = find_redundant_combos(
        ["learn spanish", "learn french", "Learn Spanish Fast", "learn spanish fast"]
    )

    assert report.groups == []
    assert report.redundancy_score == 0
    assert report.wasted_tokens == 0


def test_empty_input_has_zero_redundancy() -> None:
    report = find_redundant_combos([])

    assert report.redundancy_score == 0
    assert report.redundant_combo_count == 0


def test_identify_opportunities_reports_uncombined_clusters() -> None:
    report = identify_opportunities(
        existing_combos=["language learning", "learn spanish"],
        title_tokens=["pimsleur", "language", "learning"],
        subtitle_tokens=["learn", "spanish", "fast", "daily"],
        rules=ComboRuleSet(),
    )

    assert report.missing_clusters == ["category+benefit", "time+benefit"]
    assert report.example_combos == ["fast language", "fast daily"]
    assert report.suggestions[0] == 'Pair a benefit with your category keyword (e.g. "fast language")'
    assert report.estimated_score_gain == 10


def test_identify_opportunities_skips_clusters_without_both_groups() -> None:
    report = identify_opportunities(
        existing_combos=[],
        title_tokens=["chess"],
        subtitle_tokens=["tactics"],
        rules=ComboRuleSet(),
    )

    assert report.missing_clusters == []
    assert report.estimated_score_gain == 0


def test_identify_opportunities_scores_each_missing_cluster() -> None:
    rules = ComboRuleSet()
    report = identify_opportunities(
        existing_combos=[],
        title_tokens=["learn", "spanish", "fast", "daily"],
        subtitle_tokens=[],
        rules=rules,
    )

    assert report.missing_clusters == ["category+benefit", "action+category", "time+benefit"]
    assert report.estimated_score_gain == 15
