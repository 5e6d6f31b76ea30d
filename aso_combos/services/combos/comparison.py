"""Baseline vs draft comparison of combo analyses.

Pure transformations over two analyses of the same app (live metadata and
an edited draft); nothing is recomputed from raw text here.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from aso_combos.services.combos.types import (
    ComboDiff,
    ComboStats,
    ComboStrength,
    ComboTierChange,
    GeneratedCombo,
)

MISSING_TIER = 8

TIER_NUMBERS: dict[ComboStrength, int] = {
    "title_consecutive": 1,
    "title_non_consecutive": 2,
    "title_keywords_cross": 2,
    "title_subtitle_cross": 3,
    "keywords_consecutive": 4,
    "subtitle_consecutive": 4,
    "keywords_subtitle_cross": 5,
    "keywords_non_consecutive": 6,
    "subtitle_non_consecutive": 6,
    "three_way_cross": 7,
    "missing": MISSING_TIER,
}


def get_tier_number(strength: ComboStrength) -> int:
    """Collapse strength tiers into the 1-7 reporting scale (8 = missing)."""
    return TIER_NUMBERS.get(strength, MISSING_TIER)


def get_tier_label(tier: int) -> str:
    if tier == 1:
        return "Excellent"
    if tier == 2:
        return "Good"
    if tier <= 4:
        return "Medium"
    return "Poor"


def diff_combos(
    baseline_combos: Sequence[GeneratedCombo],
    draft_combos: Sequence[GeneratedCombo],
) -> ComboDiff:
    """Split combos into added, removed, upgraded, downgraded and unchanged."""
    baseline_map = {combo.text.lower(): combo for combo in baseline_combos}
    draft_map = {combo.text.lower(): combo for combo in draft_combos}

    diff = ComboDiff()
    diff.added = [combo for combo in draft_combos if combo.text.lower() not in baseline_map]
    diff.removed = [combo for combo in baseline_combos if combo.text.lower() not in draft_map]

    for baseline_combo in baseline_combos:
        draft_combo = draft_map.get(baseline_combo.text.lower())
        if draft_combo is None:
            continue

        baseline_tier = get_tier_number(baseline_combo.strength)
        draft_tier = get_tier_number(draft_combo.strength)
        if baseline_tier == draft_tier:
            diff.unchanged.append(draft_combo)
            continue

        change = ComboTierChange(
            text=draft_combo.text,
            baseline_tier=baseline_tier,
            draft_tier=draft_tier,
            baseline_strength=baseline_combo.strength,
            draft_strength=draft_combo.strength,
            # Lower tier number is stronger, so positive means improvement.
            improvement=baseline_tier - draft_tier,
        )
        if change.improvement > 0:
            diff.tier_upgrades.append(change)
        else:
            diff.tier_downgrades.append(change)

    diff.added.sort(key=lambda combo: get_tier_number(combo.strength))
    diff.removed.sort(key=lambda combo: get_tier_number(combo.strength))
    diff.tier_upgrades.sort(key=lambda change: -change.improvement)
    diff.tier_downgrades.sort(key=lambda change: change.improvement)
    return diff


def calculate_tier_distribution(
    baseline_stats: ComboStats,
    draft_stats: ComboStats,
) -> dict[str, dict[str, int]]:
    """Aggregate per-strength counts into tier 1, tier 2 and tier 3+ buckets."""

    def bucket_counts(stats: ComboStats) -> dict[str, int]:
        counts = {"tier1": 0, "tier2": 0, "tier3_plus": 0}
        for strength, count in stats.by_strength.items():
            if strength == "missing":
                continue
            tier = get_tier_number(strength)  # type: ignore[arg-type]
            if tier == 1:
                counts["tier1"] += count
            elif tier == 2:
                counts["tier2"] += count
            else:
                counts["tier3_plus"] += count
        return counts

    baseline = bucket_counts(baseline_stats)
    draft = bucket_counts(draft_stats)
    return {
        bucket: {
            "baseline": baseline[bucket],
            "draft": draft[bucket],
            "delta": draft[bucket] - baseline[bucket],
        }
        for bucket in ("tier1", "tier2", "tier3_plus")
    }


def analyze_keyword_impact(
    baseline_keywords: Sequence[str],
    draft_keywords: Sequence[str],
    baseline_combos: Sequence[GeneratedCombo],
    draft_combos: Sequence[GeneratedCombo],
) -> list[dict[str, Any]]:
    """Report combos gained or lost with each added or removed keyword."""
    baseline_set = {keyword.lower() for keyword in baseline_keywords}
    draft_set = {keyword.lower() for keyword in draft_keywords}

    impacts: list[dict[str, Any]] = []
    for direction, keywords, combos in (
        ("added", sorted(draft_set - baseline_set), draft_combos),
        ("removed", sorted(baseline_set - draft_set), baseline_combos),
    ):
        for keyword in keywords:
            matching = [
                combo
                for combo in combos
                if combo.exists and any(word.lower() == keyword for word in combo.keywords)
            ]
            if not matching:
                continue
            avg_tier = sum(get_tier_number(combo.strength) for combo in matching) / len(matching)
            impacts.append({
                "keyword": keyword,
                "added_or_removed": direction,
                "combo_count": len(matching),
                "avg_tier": round(avg_tier, 1),
                "sample_combos": [combo.text for combo in matching[:3]],
            })

    impacts.sort(key=lambda impact: -impact["combo_count"])
    return impacts


def extract_strengthen_opportunities(
    combos: Sequence[GeneratedCombo],
) -> list[dict[str, Any]]:
    """List combos that can be strengthened, weakest current tier first."""
    opportunities = [
        {
            "combo": combo,
            "current_tier": get_tier_number(combo.strength),
            "suggestion": combo.strengthening_suggestion,
        }
        for combo in combos
        if combo.can_strengthen and combo.strengthening_suggestion
    ]
    opportunities.sort(key=lambda item: -item["current_tier"])
    return opportunities
