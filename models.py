"""
models.py — Python dataclasses for the vivarium plant curator.

Plant records themselves stay plain dicts (they are owned by the JSON store);
these types describe what the range mapper and habitat scorer derive from them.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Dict, Any


def _tidy(value: float):
    """Round to 2 decimals and drop a trailing .0 so stored JSON stays readable."""
    value = round(float(value), 2)
    if value.is_integer():
        return int(value)
    return value


@dataclass(frozen=True)
class Range:
    """Tolerance window on a 0-100 scale: min <= ideal <= max."""
    min: float = 0.0
    max: float = 0.0
    ideal: float = 0.0

    @classmethod
    def from_bounds(cls, low, high, ideal=None) -> 'Range':
        """
        Build a valid range from two raw bounds.

        Bounds are clamped to 0-100 and ordered. Without an explicit ideal the
        midpoint is used; an explicit ideal is clamped into the window.
        """
        low = max(0.0, min(100.0, float(low)))
        high = max(0.0, min(100.0, float(high)))
        if low > high:
            low, high = high, low
        if ideal is None:
            ideal = (low + high) / 2
        ideal = max(low, min(high, float(ideal)))
        return cls(min=low, max=high, ideal=ideal)

    @classmethod
    def from_dict(cls, data) -> Optional['Range']:
        if not isinstance(data, dict):
            return None
        try:
            return cls.from_bounds(data['min'], data['max'], data.get('ideal'))
        except (KeyError, TypeError, ValueError):
            return None

    def widen(self, amount: float) -> 'Range':
        """Widen both bounds by `amount` points, keeping the ideal."""
        return Range.from_bounds(self.min - amount, self.max + amount, self.ideal)

    @property
    def width(self) -> float:
        return self.max - self.min

    def to_dict(self) -> Dict[str, Any]:
        return {'min': _tidy(self.min), 'max': _tidy(self.max), 'ideal': _tidy(self.ideal)}


# Dataclass field name -> JSON key used in plant records
RANGE_KEYS = {
    'humidity_range': 'humidityRange',
    'light_range': 'lightRange',
    'air_circulation_range': 'airCirculationRange',
    'water_needs_range': 'waterNeedsRange',
    'temperature_range': 'temperatureRange',
    'difficulty_range': 'difficultyRange',
    'soil_ph_range': 'soilPhRange',
    'water_temperature_range': 'waterTemperatureRange',
    'water_ph_range': 'waterPhRange',
    'water_hardness_range': 'waterHardnessRange',
    'salinity_range': 'salinityRange',
    'water_circulation_range': 'waterCirculationRange',
}

AQUATIC_ONLY_KEYS = (
    'waterTemperatureRange',
    'waterPhRange',
    'waterHardnessRange',
    'salinityRange',
    'waterCirculationRange',
)


@dataclass(frozen=True)
class StandardizedRanges:
    """Standardized care ranges derived from one plant record."""
    humidity_range: Optional[Range] = None
    light_range: Optional[Range] = None
    air_circulation_range: Optional[Range] = None
    water_needs_range: Optional[Range] = None
    temperature_range: Optional[Range] = None
    difficulty_range: Optional[Range] = None
    soil_ph_range: Optional[Range] = None
    substrate_type: str = 'moist'
    special_needs: str = 'none'
    # Aquatic plants only
    water_temperature_range: Optional[Range] = None
    water_ph_range: Optional[Range] = None
    water_hardness_range: Optional[Range] = None
    salinity_range: Optional[Range] = None
    water_circulation_range: Optional[Range] = None

    @property
    def is_aquatic(self) -> bool:
        return self.substrate_type == 'aquatic' or self.special_needs == 'aquatic'

    def populated_ranges(self) -> Dict[str, Range]:
        """All ranges that were computed, keyed by JSON name."""
        result = {}
        for attr, key in RANGE_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                result[key] = value
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys stored in plant records; absent ranges are omitted."""
        data = {key: value.to_dict() for key, value in self.populated_ranges().items()}
        data['substrateType'] = self.substrate_type
        data['specialNeeds'] = self.special_needs
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StandardizedRanges':
        """Rebuild from a stored record; missing or malformed ranges become None."""
        kwargs = {attr: Range.from_dict(data.get(key)) for attr, key in RANGE_KEYS.items()}
        kwargs['substrate_type'] = data.get('substrateType') or 'moist'
        kwargs['special_needs'] = data.get('specialNeeds') or 'none'
        return cls(**kwargs)


@dataclass(frozen=True)
class HabitatProfile:
    """Target conditions of one enclosure type."""
    key: str
    name: str
    humidity: Range
    light: Range
    air_circulation: Range
    water_needs: Range
    substrates: Tuple[str, ...]
    requires_water_body: bool = False
    water_circulation: Optional[Range] = None
    type_tag: str = ''

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'key': self.key,
            'name': self.name,
            'humidity': self.humidity.to_dict(),
            'light': self.light.to_dict(),
            'airCirculation': self.air_circulation.to_dict(),
            'waterNeeds': self.water_needs.to_dict(),
            'substrate': list(self.substrates),
            'waterBody': self.requires_water_body,
            'typeTag': self.type_tag,
        }
        if self.water_circulation is not None:
            data['waterCirculation'] = self.water_circulation.to_dict()
        return data
