"""
standard_scales.py — Fixed bucket tables for standardized care ranges.

Every dimension is expressed on a 0-100 scale:
- humidity: relative humidity in %
- light, air circulation, water needs, water circulation: relative intensity
- temperature: 0-50 °C
- pH: 0-14
- water hardness: 0-30 dGH
- salinity: 0-40 ppt (specific gravity 1.000-1.030)

The tables are constants, not configuration: changing them is a code change.
"""

from models import Range


NUMERIC_SCALES = {
    'humidity': {
        'very-low': Range(20, 35, 25),
        'low': Range(35, 50, 40),
        'moderate': Range(50, 70, 60),
        'high': Range(70, 90, 80),
        'very-high': Range(90, 100, 95),
        'aquatic': Range(100, 100, 100),
    },
    'light': {
        'very-low': Range(0, 20, 10),
        'low': Range(20, 40, 30),
        'moderate': Range(40, 60, 50),
        'bright': Range(60, 80, 70),
        'very-bright': Range(80, 100, 90),
    },
    'airCirculation': {
        'minimal': Range(0, 20, 10),
        'low': Range(20, 40, 30),
        'moderate': Range(40, 60, 50),
        'high': Range(60, 80, 70),
        'very-high': Range(80, 100, 90),
    },
    'waterNeeds': {
        'minimal': Range(0, 20, 10),
        'low': Range(20, 40, 30),
        'moderate': Range(40, 60, 50),
        'high': Range(60, 80, 70),
        'constant': Range(80, 100, 90),
    },
    'waterCirculation': {
        'none': Range(0, 10, 5),
        'low': Range(10, 30, 20),
        'moderate': Range(30, 60, 45),
        'high': Range(60, 80, 70),
        'very-high': Range(80, 100, 90),
    },
    'difficulty': {
        'easy': Range(0, 30, 15),
        'moderate': Range(40, 60, 50),
        'hard': Range(70, 100, 85),
    },
    'waterHardness': {
        'very-soft': Range(0, 6.67, 3.33),
        'soft': Range(6.67, 20, 13.33),
        'moderate': Range(20, 40, 30),
        'hard': Range(40, 66.67, 53.33),
        'very-hard': Range(66.67, 100, 83.33),
    },
    'salinity': {
        'freshwater': Range(0, 5, 2.5),
        'brackish': Range(12.5, 75, 43.75),
        'marine': Range(75, 100, 87.5),
    },
}

# Bucket used when no keyword matches
DEFAULT_BUCKETS = {
    'humidity': 'moderate',
    'light': 'moderate',
    'airCirculation': 'moderate',
    'waterNeeds': 'moderate',
    'waterCirculation': 'moderate',
    'difficulty': 'moderate',
    'salinity': 'freshwater',
}

# Air circulation buckets are widened by this many points to reflect natural tolerance
AIR_CIRCULATION_TOLERANCE = 10

# Humidity midpoint -> air circulation bucket, checked top-down
HUMIDITY_TO_AIR_CIRCULATION = [
    (90, 'minimal'),
    (70, 'low'),
    (50, 'moderate'),
    (0, 'high'),
]

# Full-scale values for linear rescaling onto 0-100
TEMPERATURE_MAX_C = 50.0
PH_MAX = 14.0
HARDNESS_MAX_DGH = 30.0
SALINITY_MAX_PPT = 40.0
SALINITY_SG_SPAN = 0.030

# Half-width (in scale points) used when only a single value is given
TEMPERATURE_SINGLE_SPREAD = 5
PH_SINGLE_SPREAD = 3
HARDNESS_SINGLE_SPREAD = 5


def temperature_to_percent(celsius):
    return clamp_percent(celsius / TEMPERATURE_MAX_C * 100)


def ph_to_percent(ph):
    return clamp_percent(ph / PH_MAX * 100)


def hardness_to_percent(dgh):
    return clamp_percent(dgh / HARDNESS_MAX_DGH * 100)


def salinity_ppt_to_percent(ppt):
    return clamp_percent(ppt / SALINITY_MAX_PPT * 100)


def specific_gravity_to_percent(sg):
    return clamp_percent((sg - 1.0) / SALINITY_SG_SPAN * 100)


def clamp_percent(value):
    return max(0.0, min(100.0, float(value)))


# Documented fixed defaults for dimensions without a keyword table
DEFAULT_TEMPERATURE = Range.from_bounds(temperature_to_percent(20), temperature_to_percent(25))
DEFAULT_SOIL_PH = Range.from_bounds(ph_to_percent(6.0), ph_to_percent(7.0))
DEFAULT_WATER_PH = Range.from_bounds(ph_to_percent(7.0), ph_to_percent(8.0))
DEFAULT_WATER_HARDNESS = Range.from_bounds(hardness_to_percent(2), hardness_to_percent(12))


def bucket(dimension, name):
    """Look up a bucket, falling back to the dimension's default bucket."""
    table = NUMERIC_SCALES[dimension]
    return table.get(name) or table[DEFAULT_BUCKETS.get(dimension, 'moderate')]
