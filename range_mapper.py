"""
range_mapper.py — Convert free-text plant care fields into standardized ranges.

This module implements:
- Explicit numeric extraction ("70-90%", "18-26°C", "pH 6.0-7.5", "4-12 dGH",
  "salinity 1.020-1.025") with linear rescaling onto the 0-100 scales
- Keyword buckets: ordered (predicate, bucket) rule tables, most specific first
- Air circulation inference from humidity when the text gives no signal
- Substrate type and special needs classification
- Aquatic-only dimensions (water pH, hardness, salinity, circulation, temperature)

Resolution order per dimension:
    numeric pattern -> keyword rules -> documented default

map_to_ranges() is pure: no I/O, no hidden state, and it never raises for
missing or malformed input.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from models import Range, StandardizedRanges
from standard_scales import (
    AIR_CIRCULATION_TOLERANCE,
    DEFAULT_SOIL_PH,
    DEFAULT_TEMPERATURE,
    DEFAULT_WATER_HARDNESS,
    DEFAULT_WATER_PH,
    HARDNESS_SINGLE_SPREAD,
    HUMIDITY_TO_AIR_CIRCULATION,
    PH_SINGLE_SPREAD,
    TEMPERATURE_SINGLE_SPREAD,
    bucket,
    hardness_to_percent,
    ph_to_percent,
    salinity_ppt_to_percent,
    specific_gravity_to_percent,
    temperature_to_percent,
)


# ========================================
# Rule helpers
# ========================================

def contains_any(*terms: str) -> Callable[[str], bool]:
    """Predicate: the (lower-cased) text contains at least one of the terms."""
    def predicate(text):
        return any(term in text for term in terms)
    return predicate


def first_match(rules: Sequence[Tuple[Callable, str]], subject, default=None):
    """Return the bucket of the first rule whose predicate accepts the subject."""
    for predicate, name in rules:
        if predicate(subject):
            return name
    return default


# "direct" light, but not the "direct" inside "indirect"
_DIRECT_SUN = re.compile(r'(?<!in)direct')


def _direct_sun(text):
    return bool(_DIRECT_SUN.search(text))


def _submerged(text):
    return 'submerged' in text or ('aquatic' in text and 'semi-aquatic' not in text)


# ========================================
# Keyword rule tables
# ========================================

HUMIDITY_RULES = [
    (contains_any('very high'), 'very-high'),
    (contains_any('high'), 'high'),
    (contains_any('moderate', 'medium', 'average'), 'moderate'),
    (contains_any('very low'), 'very-low'),
    (contains_any('low'), 'low'),
    (_submerged, 'aquatic'),
]

LIGHT_RULES = [
    (contains_any('very bright', 'full sun'), 'very-bright'),
    (_direct_sun, 'very-bright'),
    (contains_any('bright', 'high'), 'bright'),
    (contains_any('moderate', 'medium'), 'moderate'),
    (contains_any('very low', 'deep shade'), 'very-low'),
    (contains_any('low', 'shade'), 'low'),
]

# Applied to the airCirculation field itself
AIR_CIRCULATION_RULES = [
    (contains_any('very high', 'very-high', 'open air', 'outdoor'), 'very-high'),
    (contains_any('high', 'well-ventilated', 'good air flow'), 'high'),
    (contains_any('moderate', 'ventilated', 'air circulation'), 'moderate'),
    (contains_any('low', 'semi-closed', 'partially open'), 'low'),
    (contains_any('minimal', 'closed', 'sealed', 'self-contained'), 'minimal'),
]

# Applied to description + care tips when the field says nothing
AIR_CIRCULATION_TEXT_RULES = [
    (contains_any('semi-closed', 'partially open'), 'low'),
    (contains_any('closed', 'sealed', 'self-contained'), 'minimal'),
    (contains_any('open air', 'outdoor'), 'very-high'),
    (contains_any('well-ventilated', 'good air flow'), 'high'),
    (contains_any('ventilated', 'air circulation'), 'moderate'),
    (contains_any('open'), 'high'),
]

WATER_NEEDS_RULES = [
    (contains_any('constantly', 'always moist', 'always wet'), 'constant'),
    (contains_any('frequently', 'keep moist', 'high'), 'high'),
    (contains_any('moderate', 'regular'), 'moderate'),
    (contains_any('minimal', 'drought'), 'minimal'),
    (contains_any('infrequent', 'low'), 'low'),
]

WATER_CIRCULATION_RULES = [
    (contains_any('none', 'no flow'), 'none'),
    (contains_any('very high', 'strong current', 'fast flow'), 'very-high'),
    (contains_any('high', 'good flow', 'moderate current'), 'high'),
    (contains_any('moderate', 'gentle flow'), 'moderate'),
    (contains_any('low', 'still', 'stagnant'), 'low'),
]

WATER_CIRCULATION_TEXT_RULES = [
    (contains_any('strong current', 'fast flow'), 'very-high'),
    (contains_any('good flow', 'moderate current'), 'high'),
    (contains_any('gentle flow'), 'moderate'),
    (contains_any('still water', 'stagnant'), 'low'),
]

DIFFICULTY_RULES = [
    (contains_any('easy', 'beginner'), 'easy'),
    (contains_any('moderate', 'intermediate', 'medium'), 'moderate'),
    (contains_any('hard', 'difficult', 'expert', 'advanced'), 'hard'),
]

HARDNESS_RULES = [
    (contains_any('very soft', 'extremely soft'), 'very-soft'),
    (contains_any('very hard', 'extremely hard'), 'very-hard'),
    (contains_any('moderately hard', 'medium hard', 'medium-hard'), 'moderate'),
    (contains_any('soft water', 'soft, acidic', 'soft and acidic'), 'soft'),
    (contains_any('hard water', 'hard, alkaline', 'hard and alkaline'), 'hard'),
]

SALINITY_RULES = [
    (contains_any('marine', 'saltwater', 'seawater'), 'marine'),
    (contains_any('brackish'), 'brackish'),
    (contains_any('freshwater', 'fresh water'), 'freshwater'),
]


# ========================================
# Normalized plant text
# ========================================

@dataclass(frozen=True)
class PlantText:
    """Lower-cased view of the free-text fields of a plant record."""
    humidity: str = ''
    light: str = ''
    air_circulation: str = ''
    watering: str = ''
    substrate: str = ''
    water_circulation: str = ''
    temperature: str = ''
    difficulty: str = ''
    description: str = ''
    care_tips: str = ''
    growth_habit: str = ''
    name: str = ''
    scientific_name: str = ''
    category: Tuple[str, ...] = ()

    @property
    def combined(self) -> str:
        """Description and care tips, the prose the numeric fallbacks search."""
        return self.description + ' ' + self.care_tips

    @classmethod
    def from_plant(cls, plant: Optional[Dict[str, Any]]) -> 'PlantText':
        plant = plant if isinstance(plant, dict) else {}
        care_tips = plant.get('careTips')
        category = plant.get('category')
        if isinstance(category, str):
            category = [category]
        return cls(
            humidity=_text(plant.get('humidity')),
            light=_text(plant.get('lightRequirements')),
            air_circulation=_text(plant.get('airCirculation')),
            watering=_text(plant.get('watering')),
            substrate=_text(plant.get('substrate')),
            water_circulation=_text(plant.get('waterCirculation')),
            temperature=_text(plant.get('temperature')),
            difficulty=_text(plant.get('difficulty')),
            description=_text(plant.get('description')),
            care_tips=' '.join(_text(tip) for tip in care_tips) if isinstance(care_tips, list) else '',
            growth_habit=_text(plant.get('growthHabit')).strip(),
            name=_text(plant.get('name')),
            scientific_name=_text(plant.get('scientificName')),
            category=tuple(_text(c).strip() for c in category) if isinstance(category, list) else (),
        )


def _text(value) -> str:
    """Lower-cased string form of a free-text field; None and non-strings become ''."""
    if value is None or isinstance(value, (dict, list)):
        return ''
    return str(value).lower()


# ========================================
# Categorical classification
# ========================================

def _is_aquatic(pt: PlantText) -> bool:
    name_says_water_plant = 'water' in pt.name and any(
        word in pt.name for word in ('plant', 'fern', 'moss'))
    return (
        'aquatic' in pt.substrate
        or pt.growth_habit == 'aquatic'
        or 'aquatic' in pt.category
        or 'submerged' in pt.humidity
        or 'aquatic' in pt.name
        or name_says_water_plant
        or any(term in pt.description for term in
               ('fully aquatic', 'submerged', 'underwater', 'aquarium plant'))
        or 'aquatic' in pt.scientific_name
    )


def _is_epiphytic(pt: PlantText) -> bool:
    return (
        pt.growth_habit == 'epiphytic'
        or 'epiphytic' in pt.substrate
        or any(tag in pt.category for tag in ('epiphytic', 'air-plant', 'bromeliad'))
    )


def _is_dry(pt: PlantText) -> bool:
    return (
        any(term in pt.substrate for term in ('dry', 'well-draining', 'sand'))
        or any(tag in pt.category for tag in ('succulent', 'cactus'))
    )


def _is_wet(pt: PlantText) -> bool:
    return any(term in pt.substrate for term in ('wet', 'waterlogged', 'bog'))


SUBSTRATE_RULES = [
    (_is_aquatic, 'aquatic'),
    (_is_epiphytic, 'epiphytic'),
    (_is_dry, 'dry'),
    (_is_wet, 'wet'),
]

# Predicates take (plant text, substrate type)
SPECIAL_NEEDS_RULES = [
    (lambda pt, substrate: 'carnivorous' in pt.category, 'carnivorous'),
    (lambda pt, substrate: substrate != 'aquatic'
        and ('epiphytic' in pt.category or 'air-plant' in pt.category), 'epiphytic'),
    (lambda pt, substrate: 'aquatic' in pt.category or substrate == 'aquatic', 'aquatic'),
    (lambda pt, substrate: 'succulent' in pt.category or 'cactus' in pt.category, 'succulent'),
    (lambda pt, substrate: 'bromeliad' in pt.category, 'bromeliad'),
    (lambda pt, substrate: 'orchid' in pt.category, 'orchid'),
]


def classify_substrate(pt: PlantText) -> str:
    return first_match(SUBSTRATE_RULES, pt, 'moist')


def classify_special_needs(pt: PlantText, substrate_type: str) -> str:
    for predicate, name in SPECIAL_NEEDS_RULES:
        if predicate(pt, substrate_type):
            return name
    return 'none'


# ========================================
# Numeric extraction
# ========================================

_NUM = r'(\d+(?:\.\d+)?)'
_DASH = r'\s*(?:-|–|—|to)\s*'
# Not followed, within the same value, by a "(soil)" marker
_NOT_SOIL = r'(?!(?:[^a-z(]|to)*\(soil\))'

HUMIDITY_RANGE_PATTERN = re.compile(_NUM + r'\s*%?' + _DASH + _NUM)
TEMPERATURE_RANGE_PATTERN = re.compile(_NUM + r'\s*°?\s*c?' + _DASH + _NUM + r'\s*°?\s*c(?![a-z])')
TEMPERATURE_SINGLE_PATTERN = re.compile(_NUM + r'\s*°?\s*c(?![a-z])')

SOIL_PH_RANGE_PATTERNS = [
    re.compile(r'soil\s+ph\s*:?\s*' + _NUM + _DASH + _NUM),
    re.compile(r'ph\s*:?\s*' + _NUM + _DASH + _NUM + r'\s*\(soil\)'),
]
SOIL_PH_SINGLE_PATTERNS = [re.compile(r'soil\s+ph\s*:?\s*' + _NUM)]

WATER_PH_RANGE_PATTERNS = [
    re.compile(r'water\s+ph\s*:?\s*' + _NUM + _DASH + _NUM),
    re.compile(r'ph\s*:?\s*' + _NUM + _DASH + _NUM + r'\s*\(water\)'),
    re.compile(r'(?<!soil )ph\s*:?\s*' + _NUM + _DASH + _NUM + _NOT_SOIL),
]
WATER_PH_SINGLE_PATTERNS = [
    re.compile(r'water\s+ph\s*:?\s*' + _NUM),
    re.compile(r'(?<!soil )\bph\s*:?\s*' + _NUM + _NOT_SOIL),
]

HARDNESS_RANGE_PATTERNS = [
    re.compile(_NUM + _DASH + _NUM + r'\s*d?gh\b'),
    re.compile(r'hardness\s*:?\s*' + _NUM + _DASH + _NUM),
]
HARDNESS_SINGLE_PATTERNS = [
    re.compile(_NUM + r'\s*d?gh\b'),
    re.compile(r'hardness\s*:?\s*' + _NUM),
]

SALINITY_SG_PATTERNS = [
    re.compile(r'salinity\s*:?\s*(1\.\d{3})' + _DASH + r'(1\.\d{3})'),
    re.compile(r'(1\.\d{3})' + _DASH + r'(1\.\d{3})\s*(?:sg\s*)?salinity'),
]
SALINITY_PPT_PATTERNS = [
    re.compile(r'salinity\s*:?\s*' + _NUM + _DASH + _NUM + r'\s*ppt'),
    re.compile(_NUM + _DASH + _NUM + r'\s*ppt'),
]


def parse_range(text: str, patterns) -> Optional[Tuple[float, float]]:
    """First (low, high) pair matched by any pattern, or None."""
    for pattern in patterns:
        match = pattern.search(text)
        if not match:
            continue
        try:
            return float(match.group(1)), float(match.group(2))
        except (TypeError, ValueError):
            continue
    return None


def parse_single(text: str, patterns) -> Optional[float]:
    for pattern in patterns:
        match = pattern.search(text)
        if not match:
            continue
        try:
            return float(match.group(1))
        except (TypeError, ValueError):
            continue
    return None


def _scaled_range(bounds, convert) -> Range:
    low, high = bounds
    return Range.from_bounds(convert(low), convert(high))


def _scaled_point(value, convert, spread) -> Range:
    point = convert(value)
    return Range.from_bounds(point - spread, point + spread, point)


def extract_scaled(text, range_patterns, single_patterns, convert, spread) -> Optional[Range]:
    """Range from an explicit pair, else from a single value widened by `spread`, else None."""
    bounds = parse_range(text, range_patterns)
    if bounds is not None:
        return _scaled_range(bounds, convert)
    value = parse_single(text, single_patterns) if single_patterns else None
    if value is not None:
        return _scaled_point(value, convert, spread)
    return None


# ========================================
# Per-dimension mapping
# ========================================

def map_humidity(pt: PlantText) -> Range:
    bounds = parse_range(pt.humidity, [HUMIDITY_RANGE_PATTERN])
    if bounds is not None and min(bounds) <= 100:
        return Range.from_bounds(*bounds)
    return bucket('humidity', first_match(HUMIDITY_RULES, pt.humidity, 'moderate'))


def map_light(pt: PlantText) -> Range:
    return bucket('light', first_match(LIGHT_RULES, pt.light, 'moderate'))


def air_circulation_from_humidity(humidity_range: Range, humidity_text: str) -> str:
    """Air circulation bucket implied by the humidity midpoint."""
    midpoint = (humidity_range.min + humidity_range.max) / 2
    for threshold, name in HUMIDITY_TO_AIR_CIRCULATION:
        if name == 'minimal' and 'submerged' in humidity_text:
            continue
        if midpoint >= threshold:
            return name
    return 'high'


def map_air_circulation(pt: PlantText, humidity_range: Range) -> Range:
    key = first_match(AIR_CIRCULATION_RULES, pt.air_circulation)
    if key is None:
        key = first_match(AIR_CIRCULATION_TEXT_RULES, pt.combined)
    if key is None:
        key = air_circulation_from_humidity(humidity_range, pt.humidity)
    return bucket('airCirculation', key).widen(AIR_CIRCULATION_TOLERANCE)


def map_water_needs(pt: PlantText, substrate_type: str) -> Range:
    if 'semi-aquatic' in pt.watering:
        key = 'high'
    elif substrate_type == 'aquatic' and 'semi' not in pt.watering:
        key = 'constant'
    else:
        key = first_match(WATER_NEEDS_RULES, pt.watering, 'moderate')
    return bucket('waterNeeds', key)


def map_water_circulation(pt: PlantText) -> Range:
    key = first_match(WATER_CIRCULATION_RULES, pt.water_circulation)
    if key is None:
        key = first_match(WATER_CIRCULATION_TEXT_RULES, pt.combined, 'moderate')
    return bucket('waterCirculation', key)


def map_temperature(pt: PlantText) -> Range:
    found = extract_scaled(
        pt.temperature,
        [TEMPERATURE_RANGE_PATTERN],
        [TEMPERATURE_SINGLE_PATTERN],
        temperature_to_percent,
        TEMPERATURE_SINGLE_SPREAD,
    )
    return found or DEFAULT_TEMPERATURE


def map_difficulty(pt: PlantText) -> Range:
    return bucket('difficulty', first_match(DIFFICULTY_RULES, pt.difficulty, 'moderate'))


def map_soil_ph(pt: PlantText) -> Range:
    found = extract_scaled(pt.combined, SOIL_PH_RANGE_PATTERNS, SOIL_PH_SINGLE_PATTERNS,
                           ph_to_percent, PH_SINGLE_SPREAD)
    return found or DEFAULT_SOIL_PH


def map_water_ph(pt: PlantText) -> Range:
    found = extract_scaled(pt.combined, WATER_PH_RANGE_PATTERNS, WATER_PH_SINGLE_PATTERNS,
                           ph_to_percent, PH_SINGLE_SPREAD)
    return found or DEFAULT_WATER_PH


def map_water_hardness(pt: PlantText) -> Range:
    found = extract_scaled(pt.combined, HARDNESS_RANGE_PATTERNS, HARDNESS_SINGLE_PATTERNS,
                           hardness_to_percent, HARDNESS_SINGLE_SPREAD)
    if found is not None:
        return found
    key = first_match(HARDNESS_RULES, pt.combined)
    if key is not None:
        return bucket('waterHardness', key)
    return DEFAULT_WATER_HARDNESS


def map_salinity(pt: PlantText) -> Range:
    bounds = parse_range(pt.combined, SALINITY_SG_PATTERNS)
    if bounds is not None:
        return _scaled_range(bounds, specific_gravity_to_percent)
    bounds = parse_range(pt.combined, SALINITY_PPT_PATTERNS)
    if bounds is not None:
        return _scaled_range(bounds, salinity_ppt_to_percent)
    return bucket('salinity', first_match(SALINITY_RULES, pt.combined, 'freshwater'))


# ========================================
# Public entry point
# ========================================

def map_to_ranges(plant: Optional[Dict[str, Any]]) -> StandardizedRanges:
    """
    Map a plant record to its standardized ranges.

    Args:
        plant: Plant record (dict parsed from JSON). Any field may be missing.

    Returns:
        StandardizedRanges. Aquatic-only ranges are None unless the plant is
        classified aquatic (by substrate or special needs).
    """
    pt = PlantText.from_plant(plant)

    humidity_range = map_humidity(pt)
    substrate_type = classify_substrate(pt)
    special_needs = classify_special_needs(pt, substrate_type)
    temperature_range = map_temperature(pt)

    aquatic = {}
    if substrate_type == 'aquatic' or special_needs == 'aquatic':
        aquatic = {
            'water_temperature_range': temperature_range,
            'water_ph_range': map_water_ph(pt),
            'water_hardness_range': map_water_hardness(pt),
            'salinity_range': map_salinity(pt),
            'water_circulation_range': map_water_circulation(pt),
        }

    return StandardizedRanges(
        humidity_range=humidity_range,
        light_range=map_light(pt),
        air_circulation_range=map_air_circulation(pt, humidity_range),
        water_needs_range=map_water_needs(pt, substrate_type),
        temperature_range=temperature_range,
        difficulty_range=map_difficulty(pt),
        soil_ph_range=map_soil_ph(pt),
        substrate_type=substrate_type,
        special_needs=special_needs,
        **aquatic,
    )
