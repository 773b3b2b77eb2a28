"""Tests for loading loosely typed records into domain objects."""

from __future__ import annotations

import pytest

from outfit_recs.domain.models import Outfit, UserPreferences


@pytest.mark.parametrize("raw_weights", [["formal", 1], "formal", 3, None])
def test_malformed_tag_weights_degrade_to_no_weights(raw_weights) -> None:
    prefs = UserPreferences.from_mapping({"tagWeights": raw_weights, "minRepeatDays": 3})

    assert prefs.tag_weights == {}
    assert prefs.weight_for("formal") == 0.0
    assert prefs.repeat_days == 3


def test_non_numeric_weight_values_count_as_zero() -> None:
    prefs = UserPreferences.from_mapping({"tagWeights": {"formal": "heavy", "casual": 0.5}})

    assert prefs.weight_for("formal") == 0.0
    assert prefs.weight_for("casual") == 0.5


def test_weight_keys_are_normalised_like_outfit_tags() -> None:
    prefs = UserPreferences(tag_weights={" Formal ": 2.0}, avoid_tags=frozenset({"Wool"}))

    assert prefs.weight_for("formal") == 2.0
    assert prefs.weight_for("FORMAL") == 2.0
    assert prefs.avoid_tags == frozenset({"wool"})


def test_directly_built_preferences_tolerate_a_non_mapping() -> None:
    prefs = UserPreferences(tag_weights=["formal", 1])

    assert prefs.weight_for("formal") == 0.0


def test_outfit_with_malformed_tags_and_items_loads_with_defaults() -> None:
    outfit = Outfit.from_mapping({"id": 7, "tags": 42, "itemIds": 3, "usageCount": "lots"})

    assert outfit.id == "7"
    assert outfit.tags == frozenset()
    assert outfit.item_refs == (3,)
    assert outfit.usage_count == 0


def test_outfit_tags_are_normalised_and_deduplicated() -> None:
    outfit = Outfit.from_mapping({"id": "a", "tags": ["Casual", " casual", "", None, "Denim"], "itemRefs": ["shirt"]})

    assert outfit.tags == frozenset({"casual", "denim"})
    assert outfit.item_refs == ("shirt",)


def test_outfit_without_id_is_rejected() -> None:
    with pytest.raises(ValueError):
        Outfit.from_mapping({"name": "Nameless"})
