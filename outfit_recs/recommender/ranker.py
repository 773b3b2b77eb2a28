"""Diversity-aware top-K selection over an outfit catalog."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

from outfit_recs.domain.models import Outfit, RecContext, UserPreferences
from outfit_recs.recommender.scorer import OutfitScorer, ScoreBreakdown

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RankedOutfit:
    """Selected outfit with the score it had when it was picked."""

    outfit: Outfit
    score: float
    breakdown: ScoreBreakdown

    @property
    def outfit_id(self) -> str:
        return self.outfit.id


class SelectionStrategy(Protocol):
    """Chooses up to ``k`` candidates in rank order."""

    def select(
        self,
        candidates: Sequence[Outfit],
        ctx: RecContext,
        prefs: UserPreferences,
        k: int,
        scorer: OutfitScorer,
    ) -> list[RankedOutfit]:
        ...


class GreedyDiversifiedSelection:
    """
    Picks the best remaining candidate one at a time.

    Every remaining candidate is rescored after each pick because the
    diversity term depends on what has been chosen so far. Ties go to the
    candidate that appears first in the catalog.
    """

    def select(
        self,
        candidates: Sequence[Outfit],
        ctx: RecContext,
        prefs: UserPreferences,
        k: int,
        scorer: OutfitScorer,
    ) -> list[RankedOutfit]:
        remaining = list(candidates)
        chosen: list[Outfit] = []
        ranked: list[RankedOutfit] = []

        while len(chosen) < k and remaining:
            picked_so_far = tuple(chosen)
            best_index = 0
            best: ScoreBreakdown | None = None
            for index, outfit in enumerate(remaining):
                current = scorer.breakdown(outfit, ctx, prefs, picked_so_far)
                if best is None or current.total > best.total:
                    best_index, best = index, current
            picked = remaining.pop(best_index)
            chosen.append(picked)
            ranked.append(RankedOutfit(outfit=picked, score=best.total, breakdown=best))
        return ranked


class StaticTopKSelection:
    """Scores every candidate once against an empty selection and keeps the top ``k``."""

    def select(
        self,
        candidates: Sequence[Outfit],
        ctx: RecContext,
        prefs: UserPreferences,
        k: int,
        scorer: OutfitScorer,
    ) -> list[RankedOutfit]:
        scored: list[RankedOutfit] = []
        for outfit in candidates:
            breakdown = scorer.breakdown(outfit, ctx, prefs, ())
            scored.append(RankedOutfit(outfit=outfit, score=breakdown.total, breakdown=breakdown))
        # sorted() is stable, so equal scores keep catalog order.
        return sorted(scored, key=lambda item: -item.score)[:k]


class Ranker:
    """Validates inputs and delegates selection to a strategy."""

    def __init__(
        self,
        scorer: OutfitScorer | None = None,
        strategy: SelectionStrategy | None = None,
    ) -> None:
        self._scorer = scorer or OutfitScorer()
        self._strategy = strategy or GreedyDiversifiedSelection()

    @property
    def scorer(self) -> OutfitScorer:
        return self._scorer

    def rank(
        self,
        catalog: Iterable[Outfit],
        ctx: RecContext,
        prefs: UserPreferences,
        k: int,
    ) -> list[RankedOutfit]:
        """Return at most ``k`` outfits in selection order with their scores."""

        if catalog is None:
            raise TypeError("catalog must be a collection of outfits, not None")
        if isinstance(k, bool) or not isinstance(k, int):
            raise TypeError(f"k must be an int, got {type(k).__name__}")
        if k < 0:
            raise ValueError(f"k must be non-negative, got {k}")

        candidates = _unique_by_id(catalog)
        if not candidates or k == 0:
            return []

        ranked = self._strategy.select(candidates, ctx, prefs, k, self._scorer)
        logger.debug(
            "Ranked %d of %d outfits for %s", len(ranked), len(candidates), sorted(ctx.desired_tags)
        )
        return ranked


def _unique_by_id(catalog: Iterable[Outfit]) -> list[Outfit]:
    seen: set[str] = set()
    unique: list[Outfit] = []
    for outfit in catalog:
        if outfit.id in seen:
            logger.warning("Dropping duplicate outfit id %s from catalog", outfit.id)
            continue
        seen.add(outfit.id)
        unique.append(outfit)
    return unique
