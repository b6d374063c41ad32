"""
tests/test_standard_tables.py — Invariants of the constant tables.
"""

import pytest

from habitat_profiles import HABITAT_PROFILES, PROFILES_BY_KEY, PROFILES_BY_NAME, WATER_BODY_PROFILES
from habitat_scorer import WEIGHTS
from models import Range
from standard_scales import DEFAULT_BUCKETS, NUMERIC_SCALES, bucket


def _valid(r):
    return 0 <= r.min <= r.ideal <= r.max <= 100


@pytest.mark.parametrize('dimension', sorted(NUMERIC_SCALES))
def test_scale_buckets_are_valid(dimension):
    for name, r in NUMERIC_SCALES[dimension].items():
        assert _valid(r), f"{dimension}/{name}"


def test_default_buckets_exist():
    for dimension, name in DEFAULT_BUCKETS.items():
        assert name in NUMERIC_SCALES[dimension]


def test_unknown_bucket_uses_default():
    assert bucket('humidity', 'soggy') == NUMERIC_SCALES['humidity']['moderate']
    assert bucket('salinity', 'unknown') == NUMERIC_SCALES['salinity']['freshwater']


def test_profile_ranges_are_valid():
    for profile in HABITAT_PROFILES:
        for r in (profile.humidity, profile.light, profile.air_circulation, profile.water_needs):
            assert _valid(r), profile.name
        if profile.water_circulation is not None:
            assert _valid(profile.water_circulation), profile.name


def test_profile_keys_and_names_unique():
    assert len(PROFILES_BY_KEY) == len(HABITAT_PROFILES) == 8
    assert len(PROFILES_BY_NAME) == 8


def test_water_body_profiles_have_circulation_target():
    for profile in HABITAT_PROFILES:
        assert profile.requires_water_body == (profile.key in WATER_BODY_PROFILES)
        assert (profile.water_circulation is not None) == profile.requires_water_body


def test_every_profile_has_type_tag():
    assert all(profile.type_tag for profile in HABITAT_PROFILES)


def test_weights_sum_to_one_hundred():
    assert sum(WEIGHTS.values()) == 100


def test_range_from_bounds_clamps_and_orders():
    assert Range.from_bounds(120, -5) == Range(0, 100, 50)
    assert Range.from_bounds(10, 20, 50) == Range(10, 20, 20)


def test_range_from_dict_rejects_bad_input():
    assert Range.from_dict(None) is None
    assert Range.from_dict({'min': 'a', 'max': 2}) is None
    assert Range.from_dict({'min': 10, 'max': 30}) == Range(10, 30, 20)
