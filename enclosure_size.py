"""
enclosure_size.py — Minimum enclosure size from a plant's juvenile size.

Substrate takes 30% of the enclosure height, so the plant has to fit in the
remaining 70%, plus headroom of 20% of its size (at least 2 cm).
Only the first number of the size string (the juvenile size) is used.
"""

import re

USABLE_HEIGHT_FRACTION = 0.70
PADDING_FRACTION = 0.20
MIN_PADDING_CM = 2.0

# Category -> position on the 0-100 enclosure scale and the height it stands for
ENCLOSURE_SIZES = {
    'tiny': {'min': 0, 'max': 16.67, 'height': '0-5 cm'},
    'small': {'min': 16.67, 'max': 33.33, 'height': '5-15 cm'},
    'medium': {'min': 33.33, 'max': 50, 'height': '15-30 cm'},
    'large': {'min': 50, 'max': 66.67, 'height': '30-60 cm'},
    'xlarge': {'min': 66.67, 'max': 90, 'height': '60-180 cm'},
    'open': {'min': 90, 'max': 100, 'height': '180+ cm'},
}

# Upper bound (cm, inclusive) of the required enclosure height for each category
ENCLOSURE_THRESHOLDS = [
    (5, 'tiny'),
    (15, 'small'),
    (30, 'medium'),
    (60, 'large'),
    (180, 'xlarge'),
]

DEFAULT_ENCLOSURE = 'small'

_NUMBER = re.compile(r'\d+(?:\.\d+)?')


def required_enclosure_height(plant_height_cm):
    padding = max(plant_height_cm * PADDING_FRACTION, MIN_PADDING_CM)
    return plant_height_cm / USABLE_HEIGHT_FRACTION + padding


def enclosure_category(required_height_cm):
    for limit, name in ENCLOSURE_THRESHOLDS:
        if required_height_cm <= limit:
            return name
    return 'open'


def juvenile_size_cm(size_text):
    """First number of a size string in cm (metres converted), or None."""
    if not isinstance(size_text, str):
        return None
    text = size_text.lower()
    match = _NUMBER.search(text)
    if not match:
        return None
    value = float(match.group(0))
    if 'cm' in text:
        return value
    if re.search(r'\d\s*m\b', text) or 'meter' in text or 'metre' in text:
        return value * 100
    return None


def determine_minimum_enclosure_size(plant):
    """
    Minimum enclosure category for a plant record.

    Returns:
        dict with keys: size, min, max, height, requiredHeightCm
        (requiredHeightCm is None when the size could not be parsed and the
        default category was used).
    """
    size_cm = juvenile_size_cm((plant or {}).get('size'))
    if size_cm is None:
        return {'size': DEFAULT_ENCLOSURE, 'requiredHeightCm': None, **ENCLOSURE_SIZES[DEFAULT_ENCLOSURE]}

    required = required_enclosure_height(size_cm)
    category = enclosure_category(required)
    return {'size': category, 'requiredHeightCm': round(required, 1), **ENCLOSURE_SIZES[category]}
