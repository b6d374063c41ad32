"""
tests/test_plant_store.py — Tests for the JSON plant store.

Tests cover:
- Slug generation
- Read/write format (2-space indent, UTF-8, trailing newline, BOM tolerance)
- Loading a directory with unreadable files
- Lookup by id, file stem and name
- index.json rebuild
"""

import os

import pytest

from conftest import ORCHID_PLANT, read_json, write_plant
from plant_store import (
    find_plant,
    find_plant_files,
    get_plants_dir,
    load_all_plants,
    load_plant,
    rebuild_index,
    save_plant,
    slugify,
)


# ========================================
# Naming
# ========================================

class TestSlugify:
    def test_basic(self):
        assert slugify("Baby's Tears") == 'baby-s-tears'

    def test_diacritics(self):
        assert slugify("Begonia 'Émeraude'") == 'begonia-emeraude'

    def test_punctuation_and_spaces(self):
        assert slugify('  Agave stricta var. nana ') == 'agave-stricta-var-nana'

    def test_empty(self):
        assert slugify('') == ''
        assert slugify(None) == ''


# ========================================
# File format
# ========================================

class TestFileFormat:
    def test_round_trip(self, tmp_path):
        path = str(tmp_path / 'nested' / 'fern.json')
        plant = {'name': 'Fougère', 'vivariumType': ['Closed Terrarium']}
        save_plant(path, plant)
        assert load_plant(path) == plant

    def test_two_space_indent_and_newline(self, tmp_path):
        path = str(tmp_path / 'fern.json')
        save_plant(path, {'name': 'Fougère', 'type': ['terrarium']})
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
        assert text == '{\n  "name": "Fougère",\n  "type": [\n    "terrarium"\n  ]\n}\n'

    def test_bom_is_tolerated(self, tmp_path):
        path = tmp_path / 'bom.json'
        path.write_bytes('\ufeff{"name": "Moss"}'.encode('utf-8'))
        assert load_plant(str(path)) == {'name': 'Moss'}

    def test_non_object_is_rejected(self, tmp_path):
        path = tmp_path / 'list.json'
        path.write_text('[1, 2]', encoding='utf-8')
        with pytest.raises(ValueError):
            load_plant(str(path))

    def test_plants_dir_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv('PLANTS_DIR', str(tmp_path))
        assert get_plants_dir() == str(tmp_path)


# ========================================
# Directory access
# ========================================

class TestDirectory:
    def test_find_files_recursive_without_index(self, plants_dir):
        rebuild_index(plants_dir)
        names = [os.path.basename(p) for p in find_plant_files(plants_dir)]
        assert sorted(names) == ['java-fern.json', 'moth-orchid.json', 'zebra-haworthia.json']

    def test_missing_directory(self, tmp_path):
        assert find_plant_files(str(tmp_path / 'nope')) == []
        assert load_all_plants(str(tmp_path / 'nope')) == ([], [])

    def test_unreadable_file_is_reported(self, plants_dir):
        with open(os.path.join(plants_dir, 'broken.json'), 'w', encoding='utf-8') as f:
            f.write('{"name": ')
        plants, errors = load_all_plants(plants_dir)
        assert len(plants) == 3
        assert [e['file'] for e in errors] == ['broken.json']

    def test_find_by_id(self, plants_dir):
        path, plant = find_plant('moth-orchid', plants_dir)
        assert plant['name'] == ORCHID_PLANT['name']
        assert path.endswith('moth-orchid.json')

    def test_find_by_name(self, plants_dir):
        _, plant = find_plant('Zebra Haworthia', plants_dir)
        assert plant['id'] == 'haworthia'

    def test_find_by_file_stem_without_id(self, plants_dir):
        write_plant(plants_dir, 'pilea-glauca.json', {'name': 'Silver Sparkle'})
        path, plant = find_plant('pilea-glauca', plants_dir)
        assert plant == {'name': 'Silver Sparkle'}

    def test_find_missing(self, plants_dir):
        assert find_plant('nothing-here', plants_dir) == (None, None)


class TestIndex:
    def test_rebuild_index(self, plants_dir):
        index = rebuild_index(plants_dir)
        assert index['count'] == 3
        assert 'aquarium/java-fern.json' in index['plants']
        assert read_json(os.path.join(plants_dir, 'index.json')) == index

    def test_index_tracks_removed_files(self, plants_dir):
        rebuild_index(plants_dir)
        os.remove(os.path.join(plants_dir, 'moth-orchid.json'))
        index = rebuild_index(plants_dir)
        assert index['count'] == 2
        assert 'moth-orchid.json' not in index['plants']
