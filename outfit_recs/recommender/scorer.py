"""
Outfit scoring.

An outfit's score is a fixed weighted sum of named terms. Raw term values and
their weights (``DEFAULT_WEIGHTS``):

============  ==============================================================  ======
term          raw value                                                       weight
============  ==============================================================  ======
tag_match     overlap of outfit tags with desired tags (Jaccard by default)   1.0
preference    sum of user tag weights, clamped to +/- ``PREFERENCE_CAP``      0.8
avoid         ``AVOID_PENALTY`` when the id or a tag is avoided, else 0       1.0
popularity    log(1 + usage_count)                                            0.075
recency       -0.8 (<=2 days), -0.3 (<=7), 0, +0.2 (>=21), +0.35 (>=45/never)  0.5
repeat        -0.3 per day short of ``min_repeat_days`` (at most 365 days)    0.9
diversity     minus the shared-tag count over chosen outfits, at most          0.25
              ``DIVERSITY_CAP``
feedback      mean wear feedback in [-1, 1], 0 when unknown                   0.075
============  ==============================================================  ======

Every term is a pure function of its arguments. Non-finite intermediates are
treated as 0 so a score is always a finite float.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Callable, Sequence

from outfit_recs.domain.models import (
    Outfit,
    RecContext,
    UserPreferences,
    finite_float,
    local_date,
    normalize_tags,
)

TagMatch = Callable[[frozenset[str], frozenset[str]], float]

AVOID_PENALTY = -1000.0
PREFERENCE_CAP = 10.0

RECENT_REPEAT_DAYS = 2
SHORT_REPEAT_DAYS = 7
NEGLECTED_DAYS = 21
LONG_UNWORN_DAYS = 45

RECENT_REPEAT_PENALTY = -0.8
SHORT_REPEAT_PENALTY = -0.3
NEGLECTED_BONUS = 0.2
NOVELTY_BONUS = 0.35

REPEAT_PENALTY_PER_DAY = 0.3
MAX_REPEAT_SHORTFALL_DAYS = 365

# With PREFERENCE_CAP and MAX_REPEAT_SHORTFALL_DAYS this keeps the sum of all
# non-avoid terms far below abs(AVOID_PENALTY) under the default weights.
DIVERSITY_CAP = 100.0

BOUNDED_OVERLAP_CAP = 4


def jaccard_tag_match(outfit_tags: frozenset[str], desired_tags: frozenset[str]) -> float:
    """``|A & B| / |A | B|``, 0 when both sets are empty."""

    union = outfit_tags | desired_tags
    if not union:
        return 0.0
    return len(outfit_tags & desired_tags) / len(union)


def bounded_overlap_tag_match(outfit_tags: frozenset[str], desired_tags: frozenset[str]) -> float:
    """Shared-tag count capped at ``BOUNDED_OVERLAP_CAP``, scaled to [0, 1]."""

    return min(len(outfit_tags & desired_tags), BOUNDED_OVERLAP_CAP) / BOUNDED_OVERLAP_CAP


@dataclass(frozen=True, slots=True)
class ScoreWeights:
    """Multipliers applied to each raw term."""

    tag_match: float = 1.0
    preference: float = 0.8
    avoid: float = 1.0
    popularity: float = 0.075
    recency: float = 0.5
    repeat: float = 0.9
    diversity: float = 0.25
    feedback: float = 0.075


DEFAULT_WEIGHTS = ScoreWeights()


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    """Raw term values for one outfit; ``total`` applies the weights."""

    tag_match: float = 0.0
    preference: float = 0.0
    avoid: float = 0.0
    popularity: float = 0.0
    recency: float = 0.0
    repeat: float = 0.0
    diversity: float = 0.0
    feedback: float = 0.0
    weights: ScoreWeights = DEFAULT_WEIGHTS

    def terms(self) -> dict[str, float]:
        values = asdict(self)
        values.pop("weights")
        return values

    def contributions(self) -> dict[str, float]:
        """Weighted value of every term."""

        weights = asdict(self.weights)
        return {name: _finite(value * weights[name]) for name, value in self.terms().items()}

    @property
    def total(self) -> float:
        return _finite(sum(self.contributions().values()))


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def days_since_worn(outfit: Outfit, ctx: RecContext) -> int | None:
    """Whole calendar days between the last wear and the reference date; ``None`` if never worn."""

    worn_on = local_date(outfit.last_worn, ctx.timezone)
    reference = local_date(ctx.reference_date, ctx.timezone)
    if worn_on is None or reference is None:
        return None
    return max(0, (reference - worn_on).days)


def preference_weight(tags: frozenset[str], prefs: UserPreferences) -> float:
    total = _finite(sum(prefs.weight_for(tag) for tag in sorted(tags)))
    return max(-PREFERENCE_CAP, min(PREFERENCE_CAP, total))


def avoid_penalty(outfit: Outfit, tags: frozenset[str], ctx: RecContext, prefs: UserPreferences) -> float:
    if outfit.id in ctx.avoid_outfit_ids or tags & normalize_tags(prefs.avoid_tags):
        return AVOID_PENALTY
    return 0.0


def popularity_bonus(usage_count: int) -> float:
    return math.log1p(max(0, finite_float(usage_count)))


def recency_adjustment(days: int | None) -> float:
    """Penalise fresh repeats, stay neutral mid-range and reward neglected outfits."""

    if days is None or days >= LONG_UNWORN_DAYS:
        return NOVELTY_BONUS
    if days <= RECENT_REPEAT_DAYS:
        return RECENT_REPEAT_PENALTY
    if days <= SHORT_REPEAT_DAYS:
        return SHORT_REPEAT_PENALTY
    if days >= NEGLECTED_DAYS:
        return NEGLECTED_BONUS
    return 0.0


def repeat_penalty(days: int | None, min_repeat_days: int) -> float:
    if days is None or min_repeat_days <= 0 or days >= min_repeat_days:
        return 0.0
    shortfall = min(min_repeat_days - days, MAX_REPEAT_SHORTFALL_DAYS)
    return -REPEAT_PENALTY_PER_DAY * shortfall


def diversity_penalty(tags: frozenset[str], chosen: Sequence[Outfit]) -> float:
    overlap = sum(len(tags & normalize_tags(other.tags)) for other in chosen)
    return -min(float(overlap), DIVERSITY_CAP)


def feedback_bonus(outfit: Outfit, ctx: RecContext) -> float:
    rating = finite_float(ctx.feedback_by_outfit.get(outfit.id, 0.0))
    return max(-1.0, min(1.0, rating))


class OutfitScorer:
    """Scores outfit candidates against a context, preferences and the picks so far."""

    def __init__(
        self,
        weights: ScoreWeights = DEFAULT_WEIGHTS,
        tag_match: TagMatch = jaccard_tag_match,
    ) -> None:
        self._weights = weights
        self._tag_match = tag_match

    @property
    def weights(self) -> ScoreWeights:
        return self._weights

    def breakdown(
        self,
        outfit: Outfit,
        ctx: RecContext,
        prefs: UserPreferences,
        chosen: Sequence[Outfit] = (),
    ) -> ScoreBreakdown:
        """Return every raw term for ``outfit``."""

        tags = normalize_tags(outfit.tags)
        desired = normalize_tags(ctx.desired_tags)
        days = days_since_worn(outfit, ctx)
        return ScoreBreakdown(
            tag_match=_finite(self._tag_match(tags, desired)),
            preference=preference_weight(tags, prefs),
            avoid=avoid_penalty(outfit, tags, ctx, prefs),
            popularity=_finite(popularity_bonus(outfit.usage_count)),
            recency=recency_adjustment(days),
            repeat=repeat_penalty(days, prefs.repeat_days),
            diversity=diversity_penalty(tags, chosen),
            feedback=feedback_bonus(outfit, ctx),
            weights=self._weights,
        )

    def score(
        self,
        outfit: Outfit,
        ctx: RecContext,
        prefs: UserPreferences,
        chosen: Sequence[Outfit] = (),
    ) -> float:
        """Return a numeric score where higher is better."""

        return self.breakdown(outfit, ctx, prefs, chosen).total
