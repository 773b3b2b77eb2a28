"""Occasion inference from calendar event titles."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Pattern

from outfit_recs.domain.models import normalize_tags


@dataclass(frozen=True, slots=True)
class OccasionRule:
    """Maps a title pattern to the occasion tags it implies."""

    pattern: Pattern[str]
    tags: frozenset[str]

    @classmethod
    def build(cls, pattern: str | Pattern[str], tags: Iterable[str]) -> "OccasionRule":
        """Compile ``pattern`` case-insensitively and normalise ``tags``."""

        if isinstance(pattern, str):
            compiled = re.compile(pattern, re.IGNORECASE)
        else:
            compiled = re.compile(pattern.pattern, pattern.flags | re.IGNORECASE)
        return cls(pattern=compiled, tags=normalize_tags(tags))

    def matches(self, title: str) -> bool:
        return self.pattern.search(title) is not None


DEFAULT_OCCASION_RULES: tuple[OccasionRule, ...] = (
    OccasionRule.build(r"interview|career\s*fair|presentation", ["business"]),
    OccasionRule.build(r"wedding|banquet|gala", ["formal"]),
    OccasionRule.build(r"gym|workout|practice", ["athleisure"]),
    OccasionRule.build(r"class|lecture|campus|meeting", ["casual"]),
    OccasionRule.build(r"date|dinner", ["smart-casual"]),
    OccasionRule.build(r"party|night\s*out", ["party"]),
)


class OccasionTagger:
    """Evaluates an ordered rule table; the first matching rule wins."""

    def __init__(self, rules: Iterable[OccasionRule] | None = None) -> None:
        self._rules = tuple(DEFAULT_OCCASION_RULES if rules is None else rules)

    @classmethod
    def from_mapping(
        cls,
        table: Iterable[tuple[str | Pattern[str], Iterable[str]]],
    ) -> "OccasionTagger":
        """Build a tagger from ``(pattern, tags)`` configuration pairs."""

        return cls(OccasionRule.build(pattern, tags) for pattern, tags in table)

    @property
    def rules(self) -> tuple[OccasionRule, ...]:
        return self._rules

    def tags_from_title(self, title: str | None) -> frozenset[str]:
        """Return the tags of the first rule matching ``title`` or an empty set."""

        if not title:
            return frozenset()
        for rule in self._rules:
            if rule.matches(title):
                return rule.tags
        return frozenset()
