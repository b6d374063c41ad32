"""
plant_batch.py — Batch jobs that write derived habitat data back into plant records.

Provides:
- apply_standardized_ranges: store StandardizedRanges fields in every record
- apply_vivarium_types: store the accepted habitat profiles (vivariumType)
  and the matching habitat tags (type)
- detect_vivarium_types: dry-run report of fit results for a set of files

Every writing job backs up the plants directory first, processes plants one at a
time, and keeps going when a single plant fails. Failures are collected and
returned, never raised.
"""

import logging
import os

from habitat_profiles import HABITAT_PROFILES, PROFILES_BY_NAME
from habitat_scorer import calculate_habitat_fit
from models import AQUATIC_ONLY_KEYS
from plant_store import find_plant_files, get_plants_dir, load_plant, save_plant
from range_mapper import map_to_ranges
from utils.backup import backup_plants

logger = logging.getLogger(__name__)


# ========================================
# Record merging
# ========================================

def merge_standardized_ranges(plant, ranges):
    """
    Return a copy of the record with its standardized range fields replaced.

    Existing field order is kept; new fields are appended. Aquatic-only fields
    are dropped from records that are no longer classified aquatic.
    """
    updated = dict(plant)
    if not ranges.is_aquatic:
        for key in AQUATIC_ONLY_KEYS:
            updated.pop(key, None)
    updated.update(ranges.to_dict())
    return updated


def habitat_tags(results):
    """`type` tags for a list of accepted profile names."""
    tags = set()
    for name in results:
        profile = PROFILES_BY_NAME.get(name)
        if profile is not None and profile.type_tag:
            tags.add(profile.type_tag)
    return tags


def merge_vivarium_types(plant, results):
    """Return a copy of the record with vivariumType set and habitat tags added to type."""
    updated = dict(plant)
    updated['vivariumType'] = list(results)

    current = plant.get('type') or []
    if isinstance(current, str):
        current = [current]
    updated['type'] = sorted(set(current) | habitat_tags(results))
    return updated


# ========================================
# Per-file updates
# ========================================

def update_plant_ranges(path):
    """
    Recompute and store the standardized ranges of one plant file.

    Returns:
        (True, None) on success, or (False, error_message) on failure.
    """
    try:
        plant = load_plant(path)
        save_plant(path, merge_standardized_ranges(plant, map_to_ranges(plant)))
        return True, None
    except Exception as e:
        return False, f"{os.path.basename(path)}: {e}"


def update_plant_vivarium_types(path, profiles=HABITAT_PROFILES):
    """
    Recompute and store the vivarium types of one plant file.

    Returns:
        (True, None) on success, or (False, error_message) on failure.
    """
    try:
        plant = load_plant(path)
        fit = calculate_habitat_fit(plant, profiles)
        if fit.get('error'):
            return False, f"{os.path.basename(path)}: {fit['error']}"
        save_plant(path, merge_vivarium_types(plant, fit['results']))
        return True, None
    except Exception as e:
        return False, f"{os.path.basename(path)}: {e}"


def _run(update, plants_dir, backup, reason, backup_dir=None):
    plants_dir = plants_dir or get_plants_dir()
    if not os.path.isdir(plants_dir):
        return 0, [f"Plants directory not found: {plants_dir}"]

    if backup:
        backup_plants(reason, plants_dir=plants_dir, backup_dir=backup_dir)

    updated = 0
    errors = []
    for path in find_plant_files(plants_dir):
        ok, error = update(path)
        if ok:
            updated += 1
        else:
            logger.warning("Skipped %s", error)
            errors.append(error)
    return updated, errors


# ========================================
# Batch jobs
# ========================================

def apply_standardized_ranges(plants_dir=None, backup=True, backup_dir=None):
    """
    Write standardized ranges into every plant record.

    Returns:
        (updated_count, errors) where errors is a list of messages.
    """
    return _run(update_plant_ranges, plants_dir, backup, 'pre_ranges', backup_dir)


def apply_vivarium_types(plants_dir=None, backup=True, backup_dir=None):
    """
    Write vivariumType and habitat tags into every plant record.

    Returns:
        (updated_count, errors) where errors is a list of messages.
    """
    return _run(update_plant_vivarium_types, plants_dir, backup, 'pre_types', backup_dir)


def detect_vivarium_types(paths):
    """
    Compute fit results for the given files without writing anything.

    Returns:
        List of report dicts: file, name, scientificName, stored, results,
        scores, substrateType, specialNeeds, humidityRange,
        airCirculationRange, error.
    """
    rows = []
    for path in paths:
        row = {'file': os.path.basename(path)}
        try:
            plant = load_plant(path)
        except (OSError, ValueError) as e:
            row['error'] = str(e)
            rows.append(row)
            continue

        fit = calculate_habitat_fit(plant)
        ranges = fit.get('ranges', {})
        row.update({
            'name': plant.get('name', ''),
            'scientificName': plant.get('scientificName', ''),
            'stored': plant.get('vivariumType') or [],
            'results': fit['results'],
            'scores': fit['scores'],
            'substrateType': ranges.get('substrateType'),
            'specialNeeds': ranges.get('specialNeeds'),
            'humidityRange': ranges.get('humidityRange'),
            'airCirculationRange': ranges.get('airCirculationRange'),
            'error': fit.get('error'),
        })
        rows.append(row)
    return rows
