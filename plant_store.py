"""
plant_store.py — JSON file store for plant records.

Each plant is one JSON file under the plants directory (subdirectories are
allowed, e.g. plants/aquarium/...). An index.json at the top level lists the
record files and is rebuilt on demand.

Files are written with 2-space indentation, UTF-8, non-ASCII kept as-is and a
trailing newline. A UTF-8 BOM left by external editors is tolerated on read.
"""

import json
import logging
import os
import re
import unicodedata
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

INDEX_FILENAME = 'index.json'


def get_plants_dir() -> str:
    """Get the plants directory from environment or default."""
    default_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data', 'plants')
    return os.environ.get('PLANTS_DIR', default_path)


# ========================================
# Naming Helper
# ========================================

def slugify(name: str) -> str:
    """
    Turn a plant name into a file-name slug.

    Rules:
    - lowercase, trimmed
    - diacritics removed
    - any run of non-alphanumeric characters becomes a single hyphen

    Examples:
        "Baby's Tears" -> "baby-s-tears"
        "Agave stricta var. nana" -> "agave-stricta-var-nana"
        "Begonia 'Émeraude'" -> "begonia-emeraude"
    """
    if not name:
        return ""

    result = unicodedata.normalize('NFD', str(name).lower().strip())
    result = ''.join(c for c in result if unicodedata.category(c) != 'Mn')
    result = re.sub(r'[^a-z0-9]+', '-', result)
    return result.strip('-')


# ========================================
# File Access
# ========================================

def find_plant_files(plants_dir: Optional[str] = None) -> List[str]:
    """Recursively list plant JSON files (index.json excluded), sorted by path."""
    plants_dir = plants_dir or get_plants_dir()
    if not os.path.isdir(plants_dir):
        return []

    files = []
    for root, dirs, filenames in os.walk(plants_dir):
        dirs.sort()
        for filename in filenames:
            if filename.endswith('.json') and filename != INDEX_FILENAME:
                files.append(os.path.join(root, filename))
    return sorted(files)


def load_plant(path: str) -> Dict[str, Any]:
    """
    Read one plant record.

    Raises:
        ValueError if the file does not hold a JSON object.
        OSError / json.JSONDecodeError are propagated to the caller.
    """
    with open(path, 'r', encoding='utf-8-sig') as f:
        plant = json.load(f)
    if not isinstance(plant, dict):
        raise ValueError(f"{os.path.basename(path)} does not contain a JSON object")
    return plant


def dump_plant(plant: Dict[str, Any]) -> str:
    """Serialized form of a record exactly as it is written to disk."""
    return json.dumps(plant, indent=2, ensure_ascii=False) + '\n'


def save_plant(path: str, plant: Dict[str, Any]) -> None:
    """Write a plant record, creating parent directories if needed."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(dump_plant(plant))


def load_all_plants(plants_dir: Optional[str] = None) -> Tuple[List[Tuple[str, Dict[str, Any]]], List[Dict[str, str]]]:
    """
    Load every plant record under the directory.

    Returns:
        (plants, errors): plants is a list of (path, record) tuples; errors is a
        list of {'file', 'error'} dicts for files that could not be read.
    """
    plants = []
    errors = []
    for path in find_plant_files(plants_dir):
        try:
            plants.append((path, load_plant(path)))
        except (OSError, ValueError) as e:
            logger.warning("Skipping unreadable plant file %s: %s", path, e)
            errors.append({'file': os.path.basename(path), 'error': str(e)})
    return plants, errors


def plant_id(path: str, plant: Dict[str, Any]) -> str:
    """Stable identifier of a record: its 'id' field, else the file stem."""
    if plant.get('id') not in (None, ''):
        return str(plant['id'])
    return os.path.splitext(os.path.basename(path))[0]


def find_plant(identifier: str, plants_dir: Optional[str] = None) -> Tuple[Optional[str], Optional[Dict[str, Any]]]:
    """
    Look up a plant by id, file stem, or name slug.

    Returns:
        (path, record), or (None, None) if no record matches.
    """
    identifier = str(identifier)
    wanted_slug = slugify(identifier)
    plants, _ = load_all_plants(plants_dir)

    for path, plant in plants:
        if plant_id(path, plant) == identifier:
            return path, plant
    for path, plant in plants:
        stem = os.path.splitext(os.path.basename(path))[0]
        if wanted_slug and wanted_slug in (slugify(stem), slugify(plant.get('name'))):
            return path, plant
    return None, None


def rebuild_index(plants_dir: Optional[str] = None) -> Dict[str, Any]:
    """
    Rewrite index.json so it lists the plant files actually present.

    Paths are relative to the plants directory, with forward slashes.
    """
    plants_dir = plants_dir or get_plants_dir()
    files = [
        os.path.relpath(path, plants_dir).replace(os.sep, '/')
        for path in find_plant_files(plants_dir)
    ]
    index = {'count': len(files), 'plants': files}
    save_plant(os.path.join(plants_dir, INDEX_FILENAME), index)
    logger.info("Rebuilt %s with %d plant files", INDEX_FILENAME, len(files))
    return index
