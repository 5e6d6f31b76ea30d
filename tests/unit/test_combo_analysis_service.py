"""Unit tests for the combo analysis service."""

import json
from pathlib import Path

import pytest

from aso_combos.config import Settings
from aso_combos.core.exceptions import InvalidComboError, RuleSetLoadError
from aso_combos.services.combo_analysis import (
    ComboAnalysisInput,
    ComboAnalysisService,
    ComboComparisonInput,
    ComboPriorityInput,
)
from aso_combos.services.combos.rules import ComboRuleSet
from aso_combos.services.combos.types import ComboRankingData, KeywordPopularityData


def _service() -> ComboAnalysisService:
    return ComboAnalysisService(rules=ComboRuleSet())


def test_run_produces_full_analysis() -> None:
    output = _service().run(
        ComboAnalysisInput(
            title="Pimsleur Language Learning",
            subtitle="Learn Spanish Fast",
            brand_name="Pimsleur",
        )
    )

    texts = [combo.text for combo in output.analysis.all_possible_combos]
    assert "language learning" in texts
    assert output.analysis.stats.limit_reached is False

    classified = {combo.text: combo for combo in output.classified_combos}
    assert classified["pimsleur language"].intent == "Navigational"
    assert classified["learn spanish"].intent == "Transactional"

    top = output.top_combos.top_combos
    assert top[0].combo.strength == "title_consecutive"
    scores = [item.priority.total_score for item in top]
    assert scores == sorted(scores, reverse=True)

    assert output.opportunities.missing_clusters == []
    assert output.redundancy.redundancy_score > 0
    assert output.token_analysis["title"].core_tokens == ["pimsleur", "language", "learning"]


def test_run_uses_ranking_and_popularity_data() -> None:
    output = _service().run(
        ComboAnalysisInput(
            title="Language Learning",
            subtitle="",
            ranking_data={"language learning": ComboRankingData(position=3, is_ranking=True)},
            popularity_data={"Language": KeywordPopularityData(popularity_score=90)},
            top_limit=1,
        )
    )

    assert len(output.top_combos.top_combos) == 1
    best = output.top_combos.top_combos[0]
    assert best.combo.text == "language learning"
    assert best.priority.opportunity_score == 5
    assert best.priority.popularity_score == 90
    assert best.priority.data_quality == "complete"


def test_run_matches_ranking_keys_regardless_of_case_and_spacing() -> None:
    output = _service().run(
        ComboAnalysisInput(
            title="Language Learning",
            subtitle="",
            ranking_data={"  Language   Learning ": ComboRankingData(position=3, is_ranking=True)},
        )
    )

    best = output.top_combos.top_combos[0]
    assert best.combo.text == "language learning"
    assert best.priority.opportunity_score == 5
    assert best.priority.data_quality == "partial"


def test_run_keeps_stopword_only_combos_out_of_classification() -> None:
    output = _service().run(ComboAnalysisInput(title="It That", subtitle=""))

    assert [combo.text for combo in output.analysis.all_possible_combos] == ["it that"]
    assert output.classified_combos == []
    assert output.ngrams["title"].all_combos == ["it that"]
    assert output.ngrams["title"].meaningful_combos == []


def test_run_reports_field_ngrams() -> None:
    output = _service().run(
        ComboAnalysisInput(title="Learn the Piano", subtitle="Daily Lessons")
    )

    assert output.ngrams["title"].all_combos == ["learn the", "the piano", "learn the piano"]
    assert output.ngrams["title"].meaningful_combos == output.ngrams["title"].all_combos
    assert output.ngrams["subtitle"].all_combos == ["daily lessons"]
    assert output.ngrams["keywords"].all_combos == []


def test_run_with_empty_metadata_is_empty() -> None:
    output = _service().run(ComboAnalysisInput(title="", subtitle=""))

    assert output.analysis.all_possible_combos == []
    assert output.analysis.stats.coverage == 0
    assert output.top_combos.top_combos == []
    assert output.redundancy.redundancy_score == 0
    assert output.opportunities.missing_clusters == []


def test_output_to_dict_is_json_serialisable() -> None:
    output = _service().run(
        ComboAnalysisInput(title="Pimsleur Language Learning", subtitle="Learn Spanish Fast")
    )

    payload = json.loads(json.dumps(output.to_dict()))

    assert set(payload) == {
        "analysis",
        "classified_combos",
        "top_combos",
        "redundancy",
        "opportunities",
        "token_analysis",
        "ngrams",
    }


def test_prioritize_scores_explicit_combos() -> None:
    selection = _service().prioritize(
        ComboPriorityInput(
            title="Pimsleur Language Learning",
            subtitle="Learn Spanish Fast",
            combos=["Fast Language", "language learning", "learn spanish", "Language Learning"],
        )
    )

    texts = [item.combo.text for item in selection.top_combos]
    assert texts == ["language learning", "learn spanish", "fast language"]
    missing = selection.top_combos[-1].combo
    assert missing.strength == "missing"
    assert missing.can_strengthen


def test_prioritize_rejects_single_word_combo() -> None:
    with pytest.raises(InvalidComboError) as exc_info:
        _service().prioritize(
            ComboPriorityInput(title="Language Learning", subtitle="", combos=["language"])
        )

    assert exc_info.value.details["combo"] == "language"


def test_from_settings_applies_limits_and_rule_file(tmp_path: Path) -> None:
    rules_path = tmp_path / "rules.json"
    rules_path.write_text(json.dumps({"category_keywords": ["chess"]}), encoding="utf-8")
    settings = Settings(
        _env_file=None,
        combo_max_total=3,
        recommended_limit=2,
        combo_rules_path=str(rules_path),
    )

    service = ComboAnalysisService.from_settings(settings)
    output = service.run(ComboAnalysisInput(title="Chess Puzzle Tactics Openings", subtitle=""))

    assert service.rules.category_keywords == frozenset({"chess"})
    assert service.options.max_total == 3
    assert output.analysis.stats.total_generated == 3
    assert output.analysis.stats.limit_reached


def test_from_settings_fails_fast_on_bad_rule_file(tmp_path: Path) -> None:
    settings = Settings(_env_file=None, combo_rules_path=str(tmp_path / "missing.json"))

    with pytest.raises(RuleSetLoadError):
        ComboAnalysisService.from_settings(settings)


def test_compare_diffs_baseline_and_draft() -> None:
    comparison = _service().compare(
        ComboComparisonInput(
            baseline=ComboAnalysisInput(title="Pimsleur Language", subtitle="Learn Spanish Fast"),
            draft=ComboAnalysisInput(title="Learn Spanish Fast", subtitle="Pimsleur Audio"),
        )
    )

    upgraded = {change.text: change for change in comparison.diff.tier_upgrades}
    assert upgraded["learn spanish"].draft_strength == "title_consecutive"
    assert "pimsleur language" in [combo.text for combo in comparison.diff.removed]
    assert "pimsleur audio" in [combo.text for combo in comparison.diff.added]

    impact = {item["keyword"]: item for item in comparison.keyword_impact}
    assert impact["audio"]["added_or_removed"] == "added"
    assert impact["language"]["added_or_removed"] == "removed"

    payload = json.loads(json.dumps(comparison.to_dict()))
    assert payload["tier_distribution"]["tier1"]["delta"] == (
        payload["tier_distribution"]["tier1"]["draft"]
        - payload["tier_distribution"]["tier1"]["baseline"]
    )
