"""Builds the recommendation context for a target date."""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from datetime import date, timedelta, timezone, tzinfo
from typing import Any, Callable, Iterable

from outfit_recs.domain.models import (
    CalendarEvent,
    RecContext,
    WearEvent,
    finite_float,
    local_date,
    normalize_tag,
)
from outfit_recs.recommender.occasion_tagger import OccasionTagger

logger = logging.getLogger(__name__)

AvoidPredicate = Callable[[date, date], bool]
"""``(worn_on, target) -> bool``; both are local calendar dates."""


def worn_previous_day(worn_on: date, target: date) -> bool:
    """Avoid outfits worn on the calendar day before ``target``."""

    return worn_on == target - timedelta(days=1)


def worn_within_days(days: int) -> AvoidPredicate:
    """Return a predicate avoiding outfits worn in the ``days`` days before ``target``."""

    if days < 0:
        raise ValueError("days must be non-negative")

    def _predicate(worn_on: date, target: date) -> bool:
        return target - timedelta(days=days) <= worn_on < target

    return _predicate


class ContextBuilder:
    """Turns calendar events and wear history into a :class:`RecContext`."""

    def __init__(
        self,
        tagger: OccasionTagger | None = None,
        *,
        default_tag: str = "casual",
        tz: tzinfo = timezone.utc,
        avoid_predicate: AvoidPredicate = worn_previous_day,
    ) -> None:
        fallback = normalize_tag(default_tag)
        if not fallback:
            raise ValueError("default_tag must be a non-empty string")
        self._tagger = tagger or OccasionTagger()
        self._default_tag = fallback
        self._tz = tz
        self._avoid_predicate = avoid_predicate

    def date_key(self, value: Any) -> date | None:
        """Return the local calendar day of ``value`` in the configured timezone."""

        return local_date(value, self._tz)

    def build(
        self,
        events: Iterable[CalendarEvent] | None,
        target_date: Any,
        wear_history: Iterable[WearEvent] | None = (),
    ) -> RecContext:
        """Collect the target day's occasion tags and the outfits to avoid."""

        target = self.date_key(target_date)
        if target is None:
            raise ValueError(f"target_date {target_date!r} is not a date")

        history = tuple(wear_history or ())
        return RecContext(
            desired_tags=self._desired_tags(events or (), target),
            avoid_outfit_ids=self._avoid_ids(history, target),
            reference_date=target,
            timezone=self._tz,
            feedback_by_outfit=self._feedback(history),
        )

    def _desired_tags(self, events: Iterable[CalendarEvent], target: date) -> frozenset[str]:
        desired: set[str] = set()
        for event in events:
            day = self.date_key(event.start)
            if day is None:
                logger.debug("Skipping event %r with unusable start %r", event.title, event.start)
                continue
            if day == target:
                desired.update(self._tagger.tags_from_title(event.title))
        if not desired:
            desired.add(self._default_tag)
        return frozenset(desired)

    def _avoid_ids(self, wear_history: Iterable[WearEvent], target: date) -> frozenset[str]:
        avoid: set[str] = set()
        for wear in wear_history:
            worn_on = self.date_key(wear.worn_on)
            if worn_on is None:
                logger.debug("Skipping wear event for %s with unusable date", wear.outfit_id)
                continue
            if self._avoid_predicate(worn_on, target):
                avoid.add(wear.outfit_id)
        return frozenset(avoid)

    @staticmethod
    def _feedback(wear_history: Iterable[WearEvent]) -> dict[str, float]:
        ratings: dict[str, list[float]] = defaultdict(list)
        for wear in wear_history:
            if wear.feedback is None:
                continue
            value = finite_float(wear.feedback, default=math.nan)
            if math.isnan(value):
                continue
            ratings[wear.outfit_id].append(max(-1.0, min(1.0, value)))
        return {outfit_id: sum(values) / len(values) for outfit_id, values in ratings.items()}
