"""Tests for title-based occasion inference."""

import re

from outfit_recs.recommender.occasion_tagger import OccasionRule, OccasionTagger


def test_default_rules_map_titles_to_tags() -> None:
    tagger = OccasionTagger()

    assert tagger.tags_from_title("Final interview at Acme") == {"business"}
    assert tagger.tags_from_title("Cousin's WEDDING") == {"formal"}
    assert tagger.tags_from_title("Leg day at the gym") == {"athleisure"}
    assert tagger.tags_from_title("Team meeting") == {"casual"}
    assert tagger.tags_from_title("Night   out downtown") == {"party"}


def test_first_matching_rule_wins() -> None:
    tagger = OccasionTagger()

    # "dinner" rule precedes the "party" rule in the table
    assert tagger.tags_from_title("Dinner party") == {"smart-casual"}
    # "presentation" precedes "meeting"
    assert tagger.tags_from_title("Meeting: client presentation") == {"business"}


def test_unmatched_or_empty_title_yields_empty_set() -> None:
    tagger = OccasionTagger()

    assert tagger.tags_from_title("Dentist") == frozenset()
    assert tagger.tags_from_title("") == frozenset()
    assert tagger.tags_from_title(None) == frozenset()


def test_result_does_not_depend_on_call_history() -> None:
    tagger = OccasionTagger()
    first = tagger.tags_from_title("Gala dinner")

    tagger.tags_from_title("Workout")
    tagger.tags_from_title("Dentist")

    assert tagger.tags_from_title("Gala dinner") == first == {"formal"}


def test_custom_table_from_configuration() -> None:
    tagger = OccasionTagger.from_mapping(
        [
            (r"meeting", ["Casual", " casual "]),
            (re.compile(r"hike"), ["Outdoor"]),
        ],
    )

    assert tagger.tags_from_title("Team Meeting") == {"casual"}
    assert tagger.tags_from_title("Weekend HIKE") == {"outdoor"}
    assert tagger.tags_from_title("Wedding") == frozenset()


def test_rule_build_normalises_tags() -> None:
    rule = OccasionRule.build("brunch", ["Smart-Casual", "", "smart-casual"])

    assert rule.tags == {"smart-casual"}
    assert rule.matches("Sunday BRUNCH")
