"""Canonical keys and deduplication for keyword combos."""

from __future__ import annotations

from collections.abc import Iterable

from aso_combos.services.combos.tokenizer import tokenize


def canonical_form(combo: str) -> tuple[str, ...]:
    """Return the order and case independent token key of a combo.

    Used only as an equality key; never for display.
    """
    return tuple(sorted(tokenize(combo)))


def dedupe_combos(combos: Iterable[str]) -> list[str]:
    """Keep the first-seen surface text for each canonical key."""
    seen: dict[tuple[str, ...], str] = {}
    for combo in combos:
        key = canonical_form(combo)
        if not key or key in seen:
            continue
        seen[key] = combo
    return list(seen.values())
