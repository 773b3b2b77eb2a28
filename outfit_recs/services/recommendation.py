"""End-to-end recommendation pipeline: calendar context in, ranked outfits out."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from outfit_recs.config.settings import Settings, get_settings
from outfit_recs.domain.models import CalendarEvent, Outfit, RecContext, UserPreferences, WearEvent
from outfit_recs.metrics.prometheus_exporter import (
    recommendation_duration_seconds,
    recommendation_requests_total,
    recommended_outfits_total,
)
from outfit_recs.recommender.context_builder import AvoidPredicate, ContextBuilder, worn_within_days
from outfit_recs.recommender.occasion_tagger import OccasionTagger
from outfit_recs.recommender.ranker import RankedOutfit, Ranker, SelectionStrategy
from outfit_recs.recommender.scorer import OutfitScorer

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RecommendationResult:
    """Occasion tags inferred for the day and the ranked outfits."""

    desired_tags: list[str]
    recommendations: list[RankedOutfit]

    def to_payload(self, include_breakdown: bool = False) -> dict[str, Any]:
        """Serialise to the ``{desiredTags, recommendations}`` wire shape."""

        items: list[dict[str, Any]] = []
        for ranked in self.recommendations:
            item: dict[str, Any] = {"outfitId": ranked.outfit_id, "score": ranked.score}
            if include_breakdown:
                item["breakdown"] = ranked.breakdown.terms()
            items.append(item)
        return {"desiredTags": list(self.desired_tags), "recommendations": items}


def resolve_timezone(name: str) -> ZoneInfo:
    """Return the configured zone or raise ``ValueError`` for unknown names."""

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone {name!r}") from exc


class RecommendationService:
    """Wires the context builder and the ranker together under project settings."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        tagger: OccasionTagger | None = None,
        scorer: OutfitScorer | None = None,
        strategy: SelectionStrategy | None = None,
        avoid_predicate: AvoidPredicate | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._context_builder = ContextBuilder(
            tagger,
            default_tag=self._settings.default_tag,
            tz=resolve_timezone(self._settings.timezone),
            avoid_predicate=avoid_predicate or worn_within_days(self._settings.avoid_lookback_days),
        )
        self._ranker = Ranker(scorer, strategy)

    @property
    def settings(self) -> Settings:
        return self._settings

    def build_context(
        self,
        events: Iterable[CalendarEvent] | None,
        target_date: Any,
        wear_history: Iterable[WearEvent] | None = (),
    ) -> RecContext:
        return self._context_builder.build(events, target_date, wear_history)

    def recommend(
        self,
        events: Iterable[CalendarEvent] | None,
        catalog: Iterable[Outfit],
        prefs: UserPreferences | None,
        target_date: Any,
        k: int | None = None,
        wear_history: Iterable[WearEvent] | None = (),
    ) -> RecommendationResult:
        """
        Infer the day's occasion and rank ``catalog`` for it.

        Data problems degrade to defaults; a negative ``k`` or a missing
        catalog raise ``ValueError``/``TypeError``.
        """

        limit = self._settings.default_k if k is None else k
        try:
            with recommendation_duration_seconds.time():
                ctx = self.build_context(events, target_date, wear_history)
                ranked = self._ranker.rank(catalog, ctx, prefs or UserPreferences(), limit)
        except (TypeError, ValueError):
            recommendation_requests_total.labels(outcome="error").inc()
            logger.exception("Rejected recommendation request for %r", target_date)
            raise

        outcome = "ok" if ranked else "empty"
        recommendation_requests_total.labels(outcome=outcome).inc()
        recommended_outfits_total.inc(len(ranked))
        logger.info(
            "Recommended %d outfits for %s (tags=%s, avoided=%d)",
            len(ranked),
            ctx.reference_date.isoformat(),
            sorted(ctx.desired_tags),
            len(ctx.avoid_outfit_ids),
        )
        return RecommendationResult(desired_tags=sorted(ctx.desired_tags), recommendations=ranked)
