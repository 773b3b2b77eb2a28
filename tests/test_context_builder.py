"""Tests for building the recommendation context of a target date."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from outfit_recs.domain.models import CalendarEvent, WearEvent
from outfit_recs.recommender.context_builder import (
    ContextBuilder,
    worn_previous_day,
    worn_within_days,
)
from outfit_recs.recommender.occasion_tagger import OccasionTagger

TARGET = date(2026, 10, 19)
CENTRAL = timezone(timedelta(hours=-5))


def _at(hour: int, day: date = TARGET) -> datetime:
    return datetime(day.year, day.month, day.day, hour, 0, tzinfo=timezone.utc)


def test_meeting_event_yields_casual() -> None:
    builder = ContextBuilder(OccasionTagger.from_mapping([(r"meeting", ["casual"])]))
    events = [CalendarEvent(title="Team meeting", start=_at(9))]

    ctx = builder.build(events, TARGET)

    assert ctx.desired_tags == {"casual"}
    assert ctx.reference_date == TARGET


def test_tags_from_all_events_of_the_day_are_unioned() -> None:
    builder = ContextBuilder()
    events = [
        CalendarEvent(title="Job interview", start=_at(9)),
        CalendarEvent(title="Evening workout", start=_at(18)),
        CalendarEvent(title="Wedding", start=_at(12, TARGET + timedelta(days=1))),
    ]

    ctx = builder.build(events, TARGET)

    assert ctx.desired_tags == {"business", "athleisure"}


def test_falls_back_to_default_tag() -> None:
    builder = ContextBuilder(default_tag="Lounge")
    events = [
        CalendarEvent(title="Dentist", start=_at(10)),
        CalendarEvent(title="Gala", start=_at(20, TARGET - timedelta(days=1))),
    ]

    assert builder.build(events, TARGET).desired_tags == {"lounge"}
    assert builder.build([], TARGET).desired_tags == {"lounge"}
    assert builder.build(None, TARGET).desired_tags == {"lounge"}


def test_events_with_unusable_start_are_skipped() -> None:
    builder = ContextBuilder()
    events = [
        CalendarEvent(title="Gala", start=None),
        CalendarEvent(title="Wedding", start="not a date"),
        CalendarEvent(title="Gym", start="2026-10-19T07:30:00Z"),
    ]

    ctx = builder.build(events, TARGET)

    assert ctx.desired_tags == {"athleisure"}


def test_day_boundary_follows_configured_timezone() -> None:
    late_evening = CalendarEvent(title="Banquet", start=datetime(2026, 10, 20, 2, 0, tzinfo=timezone.utc))

    utc_ctx = ContextBuilder().build([late_evening], TARGET)
    central_ctx = ContextBuilder(tz=CENTRAL).build([late_evening], TARGET)

    assert utc_ctx.desired_tags == {"casual"}
    assert central_ctx.desired_tags == {"formal"}


def test_target_datetime_is_reduced_to_its_local_day() -> None:
    builder = ContextBuilder(tz=CENTRAL)
    target = datetime(2026, 10, 20, 3, 0, tzinfo=timezone.utc)

    assert builder.build([], target).reference_date == TARGET


def test_invalid_target_date_raises() -> None:
    with pytest.raises(ValueError):
        ContextBuilder().build([], "someday")


def test_outfits_worn_the_previous_day_are_avoided() -> None:
    builder = ContextBuilder()
    history = [
        WearEvent(outfit_id="yesterday", worn_on=TARGET - timedelta(days=1)),
        WearEvent(outfit_id="last-week", worn_on=TARGET - timedelta(days=7)),
        WearEvent(outfit_id="broken", worn_on=None),
    ]

    ctx = builder.build([], TARGET, history)

    assert ctx.avoid_outfit_ids == {"yesterday"}


def test_avoid_policy_is_injectable() -> None:
    builder = ContextBuilder(avoid_predicate=worn_within_days(3))
    history = (
        WearEvent(outfit_id=str(offset), worn_on=TARGET - timedelta(days=offset)) for offset in range(5)
    )

    ctx = builder.build([], TARGET, history)

    assert ctx.avoid_outfit_ids == {"1", "2", "3"}


def test_avoid_predicates() -> None:
    assert worn_previous_day(date(2026, 10, 18), TARGET)
    assert not worn_previous_day(TARGET, TARGET)
    assert not worn_within_days(0)(date(2026, 10, 18), TARGET)
    with pytest.raises(ValueError):
        worn_within_days(-1)


def test_feedback_is_averaged_per_outfit() -> None:
    builder = ContextBuilder()
    history = [
        WearEvent(outfit_id="a", worn_on=date(2026, 9, 1), feedback=1.0),
        WearEvent(outfit_id="a", worn_on=date(2026, 9, 8), feedback=0.0),
        WearEvent(outfit_id="b", worn_on=date(2026, 9, 2), feedback=5),
        WearEvent(outfit_id="b", worn_on=date(2026, 9, 3), feedback=float("nan")),
        WearEvent(outfit_id="c", worn_on=date(2026, 9, 4)),
    ]

    ctx = builder.build([], TARGET, history)

    assert ctx.feedback_by_outfit == {"a": 0.5, "b": 1.0}


def test_empty_default_tag_is_rejected() -> None:
    with pytest.raises(ValueError):
        ContextBuilder(default_tag="  ")
