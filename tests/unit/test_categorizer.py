import pytest

from listing.categorizer import (
    BUCKET_ORDER,
    CATEGORY_RULES,
    categorize_features,
    classify_feature,
)

RULE_CASES = [(bucket, keyword) for bucket, keywords in CATEGORY_RULES for keyword in keywords]


def test_rule_priority_order():
    assert BUCKET_ORDER == (
        "structural",
        "architectural",
        "exterior",
        "interior",
        "materials",
        "location",
    )


@pytest.mark.parametrize("bucket, keyword", RULE_CASES)
def test_every_keyword_lands_in_its_own_bucket(bucket, keyword):
    assert classify_feature(keyword) == bucket
    assert classify_feature(keyword.upper()) == bucket


@pytest.mark.parametrize(
    "feature, expected",
    [
        ("Living room", "structural"),
        ("Outdoor kitchen", "structural"),
        ("Bay window", "architectural"),
        ("Front door", "architectural"),
        ("Outdoor", "exterior"),
        ("Swimming pool", "exterior"),
        ("Hardwood floor", "interior"),
        ("Granite countertop", "interior"),
        ("Brick", "materials"),
        ("Hardwood", "materials"),
        ("Lake view", "location"),
        ("Neighbourhood", "location"),
    ],
)
def test_first_matching_bucket_wins(feature, expected):
    assert classify_feature(feature) == expected


@pytest.mark.parametrize("feature", ["Real estate", "Property", "Tree", "", "   "])
def test_unmatched_features_have_no_bucket(feature):
    assert classify_feature(feature) is None


def test_keywords_only_match_at_word_start():
    assert classify_feature("Townhouse") is None
    assert classify_feature("Outdoor") != "architectural"


def test_categorize_preserves_order_and_drops_unmatched():
    features = [
        "Property",
        "Kitchen",
        "Hardwood floor",
        "Bedroom",
        "Roof",
        "Real estate",
        "Marble",
        "Fireplace",
        "Street",
    ]

    categorized = categorize_features(features)

    assert categorized.structural == ["Kitchen", "Bedroom"]
    assert categorized.interior == ["Hardwood floor"]
    assert categorized.exterior == ["Roof"]
    assert categorized.materials == ["Marble"]
    assert categorized.architectural == ["Fireplace"]
    assert categorized.location == ["Street"]


def test_each_feature_in_at_most_one_bucket_and_deterministic():
    features = [keyword for _, keywords in CATEGORY_RULES for keyword in keywords]
    features += ["Outdoor kitchen", "Granite countertop", "Real estate"]

    first = categorize_features(features)
    second = categorize_features(features)

    assert first == second
    placed = [item for items in first.buckets().values() for item in items]
    assert len(placed) == len(set(placed))
    assert "Real estate" not in placed


def test_empty_input():
    categorized = categorize_features([])
    assert categorized.is_empty()
