"""
tests/conftest.py — Shared plant records and a temporary plants directory.
"""

import json
import os

import pytest


AQUATIC_PLANT = {
    'id': 'java-fern',
    'name': 'Java Fern',
    'scientificName': 'Microsorum pteropus',
    'humidity': 'submerged',
    'substrate': 'aquatic substrate',
    'category': ['aquatic'],
}

SUCCULENT_PLANT = {
    'id': 'haworthia',
    'name': 'Zebra Haworthia',
    'scientificName': 'Haworthiopsis attenuata',
    'lightRequirements': 'bright indirect',
    'humidity': 'high (70-80%)',
    'airCirculation': '',
    'substrate': 'well-draining mix',
    'category': ['succulent'],
}

ORCHID_PLANT = {
    'id': 'moth-orchid',
    'name': 'Moth Orchid',
    'scientificName': 'Phalaenopsis amabilis',
    'humidity': 'high',
    'lightRequirements': 'bright indirect',
    'watering': 'moderate',
    'substrate': 'bark mix',
    'category': ['orchid', 'epiphytic'],
}


def write_plant(directory, filename, plant):
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, filename)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(plant, f, indent=2)
    return path


def read_json(path):
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


@pytest.fixture
def plants_dir(tmp_path):
    """Plants directory with three valid records, one in a subdirectory."""
    directory = tmp_path / 'plants'
    write_plant(str(directory / 'aquarium'), 'java-fern.json', AQUATIC_PLANT)
    write_plant(str(directory), 'zebra-haworthia.json', SUCCULENT_PLANT)
    write_plant(str(directory), 'moth-orchid.json', ORCHID_PLANT)
    return str(directory)


@pytest.fixture
def backup_dir(tmp_path):
    return str(tmp_path / 'backups')
