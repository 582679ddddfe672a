"""Keyword rules that sort detected labels into listing sections.

The rule table is evaluated top to bottom; the first bucket with a keyword
starting a word in the feature claims it. Features no rule matches stay in the
flat feature list but are left out of the categorized view.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import CategorizedFeatures

CATEGORY_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (
        "structural",
        (
            "room",
            "bedroom",
            "bathroom",
            "kitchen",
            "basement",
            "attic",
            "garage",
            "stair",
            "hallway",
            "closet",
            "loft",
            "foundation",
            "storey",
            "story",
            "floor plan",
        ),
    ),
    (
        "architectural",
        (
            "architect",
            "arch",
            "column",
            "window",
            "door",
            "facade",
            "façade",
            "gable",
            "dormer",
            "molding",
            "moulding",
            "beam",
            "ceiling",
            "fireplace",
            "house",
            "building",
            "victorian",
            "colonial",
            "craftsman",
            "mid-century",
        ),
    ),
    (
        "exterior",
        (
            "exterior",
            "outdoor",
            "yard",
            "backyard",
            "garden",
            "lawn",
            "landscap",
            "patio",
            "deck",
            "porch",
            "pool",
            "roof",
            "siding",
            "driveway",
            "fence",
            "balcony",
            "terrace",
            "sky",
            "grass",
            "shrub",
        ),
    ),
    (
        "interior",
        (
            "interior",
            "floor",
            "countertop",
            "cabinet",
            "fixture",
            "lighting",
            "light fixture",
            "appliance",
            "sink",
            "bathtub",
            "shower",
            "vanity",
            "wall",
            "island",
        ),
    ),
    (
        "materials",
        (
            "wood",
            "hardwood",
            "brick",
            "stone",
            "marble",
            "granite",
            "tile",
            "concrete",
            "glass",
            "metal",
            "steel",
            "laminate",
            "quartz",
            "stucco",
            "vinyl",
            "carpet",
        ),
    ),
    (
        "location",
        (
            "neighborhood",
            "neighbourhood",
            "street",
            "city",
            "urban",
            "suburb",
            "downtown",
            "view",
            "waterfront",
            "water",
            "lake",
            "beach",
            "ocean",
            "mountain",
            "park",
            "community",
        ),
    ),
)

BUCKET_ORDER: Tuple[str, ...] = tuple(bucket for bucket, _ in CATEGORY_RULES)


def _compile(keywords: Sequence[str]) -> re.Pattern[str]:
    alternation = "|".join(re.escape(keyword) for keyword in sorted(keywords, key=len, reverse=True))
    return re.compile(rf"(?<!\w)(?:{alternation})", re.IGNORECASE)


_COMPILED_RULES: Tuple[Tuple[str, re.Pattern[str]], ...] = tuple(
    (bucket, _compile(keywords)) for bucket, keywords in CATEGORY_RULES
)


def classify_feature(feature: str) -> Optional[str]:
    """Return the first bucket whose keywords match ``feature``."""

    text = feature.strip()
    if not text:
        return None
    for bucket, pattern in _COMPILED_RULES:
        if pattern.search(text):
            return bucket
    return None


def categorize_features(features: Iterable[str]) -> CategorizedFeatures:
    """Partition features into buckets, preserving input order within each."""

    grouped: Dict[str, List[str]] = {bucket: [] for bucket in BUCKET_ORDER}
    for feature in features:
        bucket = classify_feature(feature)
        if bucket is not None:
            grouped[bucket].append(feature)
    return CategorizedFeatures(**grouped)


__all__ = ["BUCKET_ORDER", "CATEGORY_RULES", "categorize_features", "classify_feature"]
