"""Detection of combos that repeat the same prefix or suffix tokens."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

from aso_combos.services.combos.numeric import round_half_up
from aso_combos.services.combos.tokenizer import tokenize
from aso_combos.services.combos.types import RedundancyReport, RedundantGroup

PATTERN_LENGTH = 2
PROPORTION_WEIGHT = 70
WASTED_TOKEN_POINTS = 5
WASTED_TOKEN_CAP = 30


def find_redundant_combos(combos: Iterable[str]) -> RedundancyReport:
    """Group combos sharing a two-token prefix, then a two-token suffix.

    A combo joins at most one group. Every member beyond the first repeats
    the pattern, so each group wastes pattern-length tokens per extra member.
    """
    unique: list[tuple[str, list[str]]] = []
    seen: set[str] = set()
    for combo in combos:
        tokens = tokenize(combo)
        text = " ".join(tokens)
        if not tokens or text in seen:
            continue
        seen.add(text)
        unique.append((text, tokens))

    candidates = [(text, tokens) for text, tokens in unique if len(tokens) > PATTERN_LENGTH]
    grouped: set[str] = set()
    groups: list[RedundantGroup] = []

    positions: tuple[Literal["prefix", "suffix"], ...] = ("prefix", "suffix")
    for position in positions:
        buckets: dict[str, list[str]] = {}
        for text, tokens in candidates:
            if text in grouped:
                continue
            if position == "prefix":
                pattern_tokens = tokens[:PATTERN_LENGTH]
            else:
                pattern_tokens = tokens[-PATTERN_LENGTH:]
            buckets.setdefault(" ".join(pattern_tokens), []).append(text)

        for pattern, members in buckets.items():
            if len(members) < 2:
                continue
            grouped.update(members)
            groups.append(
                RedundantGroup(
                    pattern=pattern,
                    position=position,
                    combos=members,
                    wasted_tokens=PATTERN_LENGTH * (len(members) - 1),
                )
            )

    wasted_tokens = sum(group.wasted_tokens for group in groups)
    redundant_count = len(grouped)
    proportion = redundant_count / len(unique) if unique else 0.0
    score = round_half_up(
        min(
            100.0,
            proportion * PROPORTION_WEIGHT
            + min(WASTED_TOKEN_CAP, wasted_tokens * WASTED_TOKEN_POINTS),
        )
    )

    return RedundancyReport(
        groups=groups,
        redundancy_score=score,
        wasted_tokens=wasted_tokens,
        redundant_combo_count=redundant_count,
    )
