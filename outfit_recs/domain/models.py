"""Read-only records consumed by the recommendation engine."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Iterable, Mapping

logger = logging.getLogger(__name__)


def normalize_tag(value: Any) -> str | None:
    """Return the canonical form of a tag or ``None`` for unusable values."""

    if not isinstance(value, str):
        return None
    tag = value.strip().lower()
    return tag or None


def normalize_tags(values: Iterable[Any] | str | None) -> frozenset[str]:
    """Lower-case, strip and deduplicate a collection of tags."""

    if values is None:
        return frozenset()
    if isinstance(values, str):
        values = [values]
    if not isinstance(values, Iterable):
        logger.debug("Ignoring non-iterable tags %r", values)
        return frozenset()
    tags = set()
    for value in values:
        tag = normalize_tag(value)
        if tag:
            tags.add(tag)
    return frozenset(tags)


def finite_float(value: Any, default: float = 0.0) -> float:
    """Coerce ``value`` to a finite float, falling back to ``default``."""

    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def coerce_datetime(value: Any) -> datetime | date | None:
    """Return a ``datetime``/``date`` for supported inputs, ``None`` otherwise."""

    if isinstance(value, (datetime, date)):
        return value
    if isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            return None
    return None


def local_date(value: Any, tz: tzinfo = timezone.utc) -> date | None:
    """
    Return the calendar day ``value`` falls on in ``tz``.

    Aware datetimes are converted to ``tz``; naive datetimes are taken as
    already local. Plain dates are returned unchanged.
    """

    moment = coerce_datetime(value)
    if moment is None:
        return None
    if isinstance(moment, datetime):
        if moment.tzinfo is None:
            return moment.date()
        return moment.astimezone(tz).date()
    return moment


def _non_negative_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(0, value)
    number = finite_float(value)
    if not number.is_integer():
        return 0
    return max(0, int(number))


def _item_refs(value: Any) -> tuple[Any, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        return (value,)
    return tuple(value)


def _normalize_weights(value: Any) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        logger.debug("Ignoring malformed tag weights %r", value)
        return {}
    weights: dict[str, Any] = {}
    for key, weight in value.items():
        tag = normalize_tag(key)
        if tag:
            weights[tag] = weight
    return weights


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


@dataclass(frozen=True, slots=True)
class Outfit:
    """A saved outfit together with its wear history."""

    id: str
    name: str = ""
    tags: frozenset[str] = frozenset()
    item_refs: tuple[Any, ...] = ()
    thumbnail: str | None = None
    usage_count: int = 0
    last_worn: datetime | date | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Outfit":
        """Build an outfit from a loosely typed record, defaulting missing fields."""

        outfit_id = _pick(data, "id", "outfitId", "outfit_id")
        if outfit_id is None:
            raise ValueError("Outfit record is missing an id.")

        last_worn_raw = _pick(data, "lastWorn", "last_worn")
        last_worn = coerce_datetime(last_worn_raw)
        if last_worn_raw is not None and last_worn is None:
            logger.debug("Ignoring unparseable lastWorn %r for outfit %s", last_worn_raw, outfit_id)

        return cls(
            id=str(outfit_id),
            name=str(data.get("name") or ""),
            tags=normalize_tags(data.get("tags")),
            item_refs=_item_refs(_pick(data, "itemRefs", "item_refs", "itemIds")),
            thumbnail=_pick(data, "thumbnail", "thumbnailUrl"),
            usage_count=_non_negative_int(_pick(data, "usageCount", "usage_count")),
            last_worn=last_worn,
        )


@dataclass(frozen=True, slots=True)
class UserPreferences:
    """Static user configuration applied while scoring."""

    tag_weights: Mapping[str, float] = field(default_factory=dict)
    avoid_tags: frozenset[str] = frozenset()
    min_repeat_days: int = 0
    color_prefs: Mapping[str, float] | None = None

    def __post_init__(self) -> None:
        # Keys follow the same canonical form as outfit tags.
        object.__setattr__(self, "tag_weights", _normalize_weights(self.tag_weights))
        object.__setattr__(self, "avoid_tags", normalize_tags(self.avoid_tags))

    def weight_for(self, tag: str) -> float:
        """Return the weight for ``tag``; unlisted or malformed weights count as 0."""

        return finite_float(self.tag_weights.get(normalize_tag(tag), 0.0))

    @property
    def repeat_days(self) -> int:
        return _non_negative_int(self.min_repeat_days)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "UserPreferences":
        """Build preferences from a loose record (camelCase or snake_case)."""

        if not data:
            return cls()
        return cls(
            tag_weights=_pick(data, "tagWeights", "tag_weights"),
            avoid_tags=_pick(data, "avoidTags", "avoid_tags"),
            min_repeat_days=_non_negative_int(_pick(data, "minRepeatDays", "min_repeat_days")),
            color_prefs=_pick(data, "colorPrefs", "color_prefs"),
        )


@dataclass(frozen=True, slots=True)
class RecContext:
    """Everything known about the target date while ranking."""

    desired_tags: frozenset[str]
    avoid_outfit_ids: frozenset[str] = frozenset()
    reference_date: date = field(default_factory=lambda: datetime.now(timezone.utc).date())
    timezone: tzinfo = timezone.utc
    feedback_by_outfit: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class CalendarEvent:
    """Calendar entry used only for occasion inference."""

    title: str | None
    start: Any
    end: Any = None
    location: str | None = None
    notes: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CalendarEvent":
        return cls(
            title=data.get("title"),
            start=data.get("start"),
            end=data.get("end"),
            location=data.get("location"),
            notes=data.get("notes"),
        )


@dataclass(frozen=True, slots=True)
class WearEvent:
    """One logged wear of an outfit, optionally rated by the user."""

    outfit_id: str
    worn_on: Any
    feedback: float | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "WearEvent":
        outfit_id = _pick(data, "outfitId", "outfit_id")
        if outfit_id is None:
            raise ValueError("Wear event is missing an outfit id.")
        return cls(
            outfit_id=str(outfit_id),
            worn_on=_pick(data, "date", "wornOn", "worn_on"),
            feedback=data.get("feedback"),
        )
