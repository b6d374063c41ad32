"""
habitat_scorer.py — Habitat fit scoring for standardized plant ranges.

This module implements:
- Hard filters: a profile whose category precondition fails is skipped, not scored low
- Weighted range-overlap scoring of each surviving profile (0-100%)
- Selection: every profile scoring >= 80%, or a single fallback profile

Algorithm details:
- Weights: humidity 25, light 15, air circulation 15, substrate match 20,
  water needs 10, water circulation 5, special needs 10 (total 100)
- Overlap sub-score: overlap / plant range width; >= 30% earns the full
  weight, below that the weight is scaled linearly. A penalty proportional
  to the distance between the overlap midpoint and the profile ideal is then
  subtracted, capped at a fraction of the base score
- Water circulation only counts for profiles with a water body; other
  profiles award it in full
- Special needs: 10 for a matching profile, 8 for bromeliads/orchids in
  terrariums or aerariums, flat 5 for plants without special needs
- Fallback when nothing reaches 80%:
    aquatic plants -> the best-scoring water-body profile (Aquarium if none scored)
    desert plants  -> Deserterium if >= 50%, else Indoor
    epiphytes      -> Aerarium if >= 50%, else a terrarium
    everything else -> a terrarium
  The terrarium is Closed when the air circulation ideal is at or below the
  'low' bucket ideal, Open otherwise.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from habitat_profiles import (
    AERARIUM,
    AQUARIUM,
    CLOSED_TERRARIUM,
    DESERTERIUM,
    HABITAT_PROFILES,
    INDOOR,
    OPEN_TERRARIUM,
    PALUDARIUM,
    PROFILES_BY_KEY,
    RIPARIUM,
    TERRARIUMS,
    WATER_BODY_PROFILES,
)
from models import HabitatProfile, Range, StandardizedRanges
from range_mapper import PlantText, map_to_ranges
from standard_scales import bucket

logger = logging.getLogger(__name__)


WEIGHTS = {
    'humidity': 25,
    'light': 15,
    'airCirculation': 15,
    'substrate': 20,
    'waterNeeds': 10,
    'waterCirculation': 5,
    'specialNeeds': 10,
}
MAX_SCORE = sum(WEIGHTS.values())

# dimension -> (penalty per point away from the profile ideal, cap as a fraction of the base score)
IDEAL_PENALTIES = {
    'humidity': (0.15, 0.25),
    'light': (0.10, 0.20),
    'airCirculation': (0.10, 0.20),
    'waterNeeds': (0.08, 0.15),
    'waterCirculation': (0.05, 0.15),
}

FULL_OVERLAP_RATIO = 0.3
ACCEPT_THRESHOLD = 80
FALLBACK_THRESHOLD = 50

# Riparium plants sit in the open air above the water line
RIPARIUM_MIN_AIR_CIRCULATION = 50
TERRARIUM_MAX_AIR_CIRCULATION = 70

SPECIAL_NEEDS_PARTIAL = 8
SPECIAL_NEEDS_DEFAULT = 5

SPECIAL_NEEDS_AFFINITY = {
    'aquatic': (AQUARIUM, PALUDARIUM),
    'epiphytic': (AERARIUM, OPEN_TERRARIUM, CLOSED_TERRARIUM),
    'succulent': (DESERTERIUM,),
    'carnivorous': (OPEN_TERRARIUM, CLOSED_TERRARIUM, PALUDARIUM),
}
SPECIAL_NEEDS_PARTIAL_AFFINITY = {
    'bromeliad': (OPEN_TERRARIUM, CLOSED_TERRARIUM, AERARIUM),
    'orchid': (OPEN_TERRARIUM, CLOSED_TERRARIUM, AERARIUM),
}

# Description vocabulary that qualifies a terrestrial plant for a water-body profile
PALUDARIUM_TERMS = ('marginal', 'emergent', 'semi-aquatic', 'bog', "water's edge", 'riparian')
RIPARIUM_TERMS = ('marginal', 'riparian', 'root-in-water', 'hydroponic', 'adapts to water')


class PlantTraits:
    """Category facts the hard filters check, derived once per plant."""

    def __init__(self, ranges: StandardizedRanges, plant: Optional[Dict[str, Any]] = None):
        text = PlantText.from_plant(plant)
        self.description = text.description
        self.is_aquatic = ranges.is_aquatic
        self.is_epiphytic = not self.is_aquatic and (
            ranges.substrate_type == 'epiphytic' or ranges.special_needs == 'epiphytic')
        self.is_desert = not self.is_aquatic and (
            ranges.substrate_type == 'dry'
            or ranges.special_needs == 'succulent'
            or 'succulent' in text.category
            or 'cactus' in text.category)
        self.is_wet = ranges.substrate_type == 'wet'

    def describes(self, terms: Sequence[str]) -> bool:
        return any(term in self.description for term in terms)


# ========================================
# Sub-scores
# ========================================

def overlap_score(plant_range: Optional[Range], target: Optional[Range], weight: float,
                  penalty: Optional[Tuple[float, float]] = None) -> float:
    """
    Score how much of the plant's range fits inside the profile's target range.

    Args:
        plant_range: Plant tolerance window (None scores 0).
        target: Profile target window (None scores 0).
        weight: Points available for this dimension.
        penalty: (rate, cap) for the distance-from-ideal penalty, or None.

    Returns:
        A score between 0 and weight.
    """
    if plant_range is None or target is None:
        return 0.0

    overlap_min = max(plant_range.min, target.min)
    overlap_max = min(plant_range.max, target.max)
    if overlap_min > overlap_max:
        return 0.0

    # A zero-width plant range that lies inside the target fits completely
    width = plant_range.width
    ratio = (overlap_max - overlap_min) / width if width > 0 else 1.0

    base = weight if ratio >= FULL_OVERLAP_RATIO else weight * ratio
    if penalty is None:
        return base

    rate, cap = penalty
    distance = abs((overlap_min + overlap_max) / 2 - target.ideal)
    return max(0.0, base - min(distance * rate, base * cap))


def special_needs_score(special_needs: str, profile_key: str) -> float:
    if special_needs == 'none':
        return SPECIAL_NEEDS_DEFAULT
    if profile_key in SPECIAL_NEEDS_AFFINITY.get(special_needs, ()):
        return WEIGHTS['specialNeeds']
    if profile_key in SPECIAL_NEEDS_PARTIAL_AFFINITY.get(special_needs, ()):
        return SPECIAL_NEEDS_PARTIAL
    return 0


# ========================================
# Hard filters
# ========================================

def is_eligible(profile: HabitatProfile, ranges: StandardizedRanges, traits: PlantTraits) -> bool:
    """False when the plant's category rules the profile out regardless of score."""
    air = ranges.air_circulation_range
    key = profile.key

    if key == AQUARIUM:
        return traits.is_aquatic

    if key == AERARIUM:
        return traits.is_epiphytic

    if key == PALUDARIUM:
        return traits.is_aquatic or traits.is_wet or traits.describes(PALUDARIUM_TERMS)

    if key == RIPARIUM:
        if not (traits.is_aquatic or traits.is_wet or traits.describes(RIPARIUM_TERMS)):
            return False
        return air is None or air.max >= RIPARIUM_MIN_AIR_CIRCULATION

    if key in TERRARIUMS:
        if traits.is_aquatic or traits.is_desert:
            return False
        return air is None or air.min <= TERRARIUM_MAX_AIR_CIRCULATION

    if key == DESERTERIUM:
        return traits.is_desert

    return True


# ========================================
# Scoring
# ========================================

def score_profile(profile: HabitatProfile, ranges: StandardizedRanges) -> float:
    """Percentage fit (0-100) of one plant against one profile, ignoring hard filters."""
    score = 0.0

    score += overlap_score(ranges.humidity_range, profile.humidity,
                           WEIGHTS['humidity'], IDEAL_PENALTIES['humidity'])
    score += overlap_score(ranges.light_range, profile.light,
                           WEIGHTS['light'], IDEAL_PENALTIES['light'])

    # Submerged plants don't care about air movement above the water line
    if ranges.substrate_type == 'aquatic' and profile.key in WATER_BODY_PROFILES:
        score += WEIGHTS['airCirculation']
    else:
        score += overlap_score(ranges.air_circulation_range, profile.air_circulation,
                               WEIGHTS['airCirculation'], IDEAL_PENALTIES['airCirculation'])

    if ranges.substrate_type in profile.substrates:
        score += WEIGHTS['substrate']

    score += overlap_score(ranges.water_needs_range, profile.water_needs,
                           WEIGHTS['waterNeeds'], IDEAL_PENALTIES['waterNeeds'])

    if profile.requires_water_body:
        score += overlap_score(ranges.water_circulation_range, profile.water_circulation,
                               WEIGHTS['waterCirculation'], IDEAL_PENALTIES['waterCirculation'])
    else:
        score += WEIGHTS['waterCirculation']

    score += special_needs_score(ranges.special_needs, profile.key)

    return max(0.0, min(100.0, score / MAX_SCORE * 100))


def _as_ranges(ranges: Union[StandardizedRanges, Dict[str, Any]]) -> StandardizedRanges:
    if isinstance(ranges, StandardizedRanges):
        return ranges
    return StandardizedRanges.from_dict(ranges or {})


def score_profiles(ranges: Union[StandardizedRanges, Dict[str, Any]],
                   profiles: Sequence[HabitatProfile] = HABITAT_PROFILES,
                   plant: Optional[Dict[str, Any]] = None) -> List[Tuple[str, float]]:
    """
    Score a plant against every profile that survives the hard filters.

    Args:
        ranges: StandardizedRanges, or a stored record / dict holding them.
        profiles: Profile table to score against.
        plant: Original record; its description and category tags feed the
            hard filters. Optional.

    Returns:
        list of (profile_name, percentage) tuples, best first.
    """
    ranges = _as_ranges(ranges)
    traits = PlantTraits(ranges, plant)

    scored = []
    for profile in profiles:
        if not is_eligible(profile, ranges, traits):
            continue
        scored.append((profile.name, score_profile(profile, ranges)))

    # Stable sort keeps table order on ties
    scored.sort(key=lambda x: -x[1])
    return scored


def _terrarium_for(ranges: StandardizedRanges) -> str:
    air = ranges.air_circulation_range
    if air is not None and air.ideal <= bucket('airCirculation', 'low').ideal:
        return CLOSED_TERRARIUM
    return OPEN_TERRARIUM


def select_profiles(scored: Sequence[Tuple[str, float]],
                    ranges: Union[StandardizedRanges, Dict[str, Any]],
                    plant: Optional[Dict[str, Any]] = None,
                    profiles: Sequence[HabitatProfile] = HABITAT_PROFILES) -> List[str]:
    """
    Pick the accepted profiles from scored results.

    Returns every profile at or above ACCEPT_THRESHOLD (best first). When none
    qualifies, returns exactly one profile name from the fallback ladder.
    """
    accepted = [name for name, score in scored if score >= ACCEPT_THRESHOLD]
    if accepted:
        return accepted

    ranges = _as_ranges(ranges)
    traits = PlantTraits(ranges, plant)
    names = {key: profile.name for key, profile in PROFILES_BY_KEY.items()}
    names.update({profile.key: profile.name for profile in profiles})
    scores = dict(scored)

    if traits.is_aquatic:
        water_body = {names[key] for key in WATER_BODY_PROFILES}
        candidates = [(score, name) for name, score in scored if name in water_body]
        if candidates:
            return [max(candidates, key=lambda c: c[0])[1]]
        return [names[AQUARIUM]]

    if traits.is_desert:
        if scores.get(names[DESERTERIUM], 0) >= FALLBACK_THRESHOLD:
            return [names[DESERTERIUM]]
        return [names[INDOOR]]

    if traits.is_epiphytic and scores.get(names[AERARIUM], 0) >= FALLBACK_THRESHOLD:
        return [names[AERARIUM]]

    return [names[_terrarium_for(ranges)]]


def calculate_habitat_fit(plant: Optional[Dict[str, Any]],
                          profiles: Sequence[HabitatProfile] = HABITAT_PROFILES) -> Dict[str, Any]:
    """
    Map a plant record and compute its habitat fit.

    Returns:
        {'results': [...], 'scores': {name: pct}, 'ranges': {...}} on success,
        {'results': [], 'scores': {}, 'error': message} if anything goes wrong.
    """
    try:
        ranges = map_to_ranges(plant)
        scored = score_profiles(ranges, profiles, plant)
        results = select_profiles(scored, ranges, plant, profiles)
        return {
            'results': results,
            'scores': {name: round(score, 2) for name, score in scored},
            'ranges': ranges.to_dict(),
        }
    except Exception as e:
        name = plant.get('name') if isinstance(plant, dict) else None
        logger.exception("Habitat fit failed for %s", name or '<unnamed plant>')
        return {'results': [], 'scores': {}, 'error': str(e)}
