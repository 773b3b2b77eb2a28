"""Request and response models for the HTTP surface."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from outfit_recs.domain.models import CalendarEvent, Outfit, UserPreferences, WearEvent


class CamelModel(BaseModel):
    """Accepts both the camelCase wire names and the Python field names."""

    model_config = ConfigDict(populate_by_name=True)


class PreferencesIn(CamelModel):
    tag_weights: dict[str, Any] = Field(default_factory=dict, alias="tagWeights")
    avoid_tags: list[str] = Field(default_factory=list, alias="avoidTags")
    min_repeat_days: int = Field(default=0, ge=0, alias="minRepeatDays")
    color_prefs: dict[str, Any] | None = Field(default=None, alias="colorPrefs")

    def to_domain(self) -> UserPreferences:
        return UserPreferences.from_mapping(self.model_dump())


class OutfitIn(CamelModel):
    id: str
    name: str = ""
    tags: list[str] | None = None
    item_refs: list[Any] | None = Field(default=None, alias="itemRefs")
    thumbnail: str | None = None
    usage_count: Any = Field(default=0, alias="usageCount")
    last_worn: Any = Field(default=None, alias="lastWorn")

    def to_domain(self) -> Outfit:
        return Outfit.from_mapping(self.model_dump())


class CalendarEventIn(CamelModel):
    title: str | None = None
    start: Any = None
    end: Any = None
    location: str | None = None
    notes: str | None = None

    def to_domain(self) -> CalendarEvent:
        return CalendarEvent.from_mapping(self.model_dump())


class WearEventIn(CamelModel):
    outfit_id: str = Field(alias="outfitId")
    worn_on: Any = Field(default=None, alias="date")
    feedback: float | None = None

    def to_domain(self) -> WearEvent:
        return WearEvent.from_mapping(self.model_dump())


class RecommendationRequest(CamelModel):
    # An offset-bearing timestamp must stay a datetime so it is converted to
    # the configured timezone; a bare YYYY-MM-DD parses as naive midnight.
    target_date: datetime | date = Field(alias="date", union_mode="left_to_right")
    k: int | None = Field(default=None, ge=0)
    prefs: PreferencesIn = Field(default_factory=PreferencesIn)
    events: list[CalendarEventIn] = Field(default_factory=list)
    outfits: list[OutfitIn] = Field(default_factory=list)
    wear_history: list[WearEventIn] = Field(default_factory=list, alias="wearHistory")
    include_breakdown: bool = Field(default=False, alias="includeBreakdown")


class RecommendationItem(CamelModel):
    outfit_id: str = Field(alias="outfitId")
    score: float
    breakdown: dict[str, float] | None = None


class RecommendationResponse(CamelModel):
    desired_tags: list[str] = Field(alias="desiredTags")
    recommendations: list[RecommendationItem]
