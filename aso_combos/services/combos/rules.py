"""Semantic keyword rule sets used by combo classification.

A rule set is an explicit, immutable object built once (from defaults or a
JSON file) and passed into each classification call.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from aso_combos.core.exceptions import RuleSetLoadError
from aso_combos.services.combos.tokenizer import DEFAULT_STOPWORDS, tokenize

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_KEYWORDS = frozenset(
    {
        "language",
        "languages",
        "spanish",
        "french",
        "german",
        "english",
        "italian",
        "vocabulary",
        "grammar",
        "fitness",
        "workout",
        "yoga",
        "meditation",
        "sleep",
        "budget",
        "finance",
        "money",
        "photo",
        "video",
        "editor",
        "music",
        "podcast",
        "recipe",
        "recipes",
        "travel",
        "puzzle",
        "game",
        "games",
        "habit",
        "tracker",
        "calendar",
        "notes",
        "weather",
        "chess",
    }
)
DEFAULT_BENEFIT_KEYWORDS = frozenset(
    {
        "fast",
        "easy",
        "free",
        "simple",
        "quick",
        "smart",
        "fun",
        "effective",
        "personalized",
        "private",
        "secure",
        "offline",
        "better",
        "healthy",
        "fluent",
    }
)
DEFAULT_CTA_VERBS = frozenset(
    {
        "learn",
        "speak",
        "practice",
        "track",
        "play",
        "edit",
        "find",
        "build",
        "create",
        "plan",
        "save",
        "book",
        "get",
        "start",
        "listen",
        "watch",
        "manage",
        "shop",
        "buy",
        "read",
        "meditate",
        "train",
    }
)
DEFAULT_TIME_KEYWORDS = frozenset(
    {
        "daily",
        "today",
        "tonight",
        "now",
        "instant",
        "minute",
        "minutes",
        "hour",
        "hours",
        "day",
        "days",
        "week",
        "weekly",
        "month",
        "year",
    }
)


class ComboRuleSet(BaseModel):
    """Keyword lists driving brand/category/benefit/verb/time detection."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    brand_tokens: frozenset[str] = frozenset()
    category_keywords: frozenset[str] = DEFAULT_CATEGORY_KEYWORDS
    benefit_keywords: frozenset[str] = DEFAULT_BENEFIT_KEYWORDS
    cta_verbs: frozenset[str] = DEFAULT_CTA_VERBS
    time_keywords: frozenset[str] = DEFAULT_TIME_KEYWORDS
    stopwords: frozenset[str] = DEFAULT_STOPWORDS

    @field_validator(
        "brand_tokens",
        "category_keywords",
        "benefit_keywords",
        "cta_verbs",
        "time_keywords",
        "stopwords",
        mode="before",
    )
    @classmethod
    def _normalize_terms(cls, value: object) -> object:
        """Lowercase and tokenize configured terms so lookups are exact."""
        if isinstance(value, str):
            return frozenset(tokenize(value))
        if not isinstance(value, list | tuple | set | frozenset):
            return value
        terms: set[str] = set()
        for item in value:
            if not isinstance(item, str):
                raise ValueError(f"Rule terms must be strings, got {type(item).__name__}.")
            terms.update(tokenize(item))
        return frozenset(terms)

    def with_brand(self, brand_name: str | None) -> ComboRuleSet:
        """Return a copy whose brand tokens come from the given brand name."""
        if not brand_name:
            return self
        return self.model_copy(
            update={"brand_tokens": self.brand_tokens | frozenset(tokenize(brand_name))},
        )


def load_rule_set(path: str | Path) -> ComboRuleSet:
    """Load a rule set from a JSON file, failing fast on malformed content."""
    source = str(path)
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise RuleSetLoadError(source, str(exc)) from exc

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RuleSetLoadError(source, f"invalid JSON: {exc.msg}") from exc

    if not isinstance(payload, dict):
        raise RuleSetLoadError(source, "top-level JSON value must be an object")

    try:
        rule_set = ComboRuleSet.model_validate(payload)
    except ValidationError as exc:
        raise RuleSetLoadError(source, str(exc)) from exc

    logger.info(
        "Loaded combo rule set",
        extra={
            "source": source,
            "category_keywords": len(rule_set.category_keywords),
            "benefit_keywords": len(rule_set.benefit_keywords),
            "cta_verbs": len(rule_set.cta_verbs),
            "time_keywords": len(rule_set.time_keywords),
        },
    )
    return rule_set
