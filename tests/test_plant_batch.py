"""
tests/test_plant_batch.py — Tests for the batch jobs that rewrite plant records.

Tests cover:
- Merging standardized ranges (stale aquatic fields removed)
- Merging vivarium types and habitat tags
- Directory-wide jobs: counts, error collection, backups
- Dry-run detection report
"""

import os

from conftest import AQUATIC_PLANT, ORCHID_PLANT, read_json, write_plant
from models import AQUATIC_ONLY_KEYS
from plant_batch import (
    apply_standardized_ranges,
    apply_vivarium_types,
    detect_vivarium_types,
    merge_standardized_ranges,
    merge_vivarium_types,
    update_plant_ranges,
)
from plant_store import find_plant_files
from range_mapper import map_to_ranges


# ========================================
# Record merging
# ========================================

class TestMerge:
    def test_ranges_are_added(self):
        updated = merge_standardized_ranges(ORCHID_PLANT, map_to_ranges(ORCHID_PLANT))
        assert updated['humidityRange'] == {'min': 70, 'max': 90, 'ideal': 80}
        assert updated['substrateType'] == 'epiphytic'
        assert updated['name'] == ORCHID_PLANT['name']
        assert 'humidityRange' not in ORCHID_PLANT

    def test_stale_aquatic_fields_are_removed(self):
        stale = dict(ORCHID_PLANT, waterPhRange={'min': 40, 'max': 50, 'ideal': 45},
                     salinityRange={'min': 0, 'max': 5, 'ideal': 2.5})
        updated = merge_standardized_ranges(stale, map_to_ranges(stale))
        for key in AQUATIC_ONLY_KEYS:
            assert key not in updated

    def test_aquatic_fields_are_kept_for_aquatic_plants(self):
        updated = merge_standardized_ranges(AQUATIC_PLANT, map_to_ranges(AQUATIC_PLANT))
        for key in AQUATIC_ONLY_KEYS:
            assert key in updated

    def test_vivarium_types_and_tags(self):
        plant = dict(AQUATIC_PLANT, type=['aquatic', 'aquarium'])
        updated = merge_vivarium_types(plant, ['Aquarium', 'Paludarium', 'Riparium'])
        assert updated['vivariumType'] == ['Aquarium', 'Paludarium', 'Riparium']
        assert updated['type'] == ['aquarium', 'aquatic', 'paludarium', 'riparium']

    def test_string_type_is_kept(self):
        updated = merge_vivarium_types({'type': 'fern'}, ['Closed Terrarium', 'Open Terrarium'])
        assert updated['type'] == ['fern', 'terrarium']


# ========================================
# Directory jobs
# ========================================

class TestApplyRanges:
    def test_all_plants_updated(self, plants_dir):
        updated, errors = apply_standardized_ranges(plants_dir, backup=False)
        assert updated == 3
        assert errors == []
        for path in find_plant_files(plants_dir):
            plant = read_json(path)
            assert 'humidityRange' in plant
            assert 'substrateType' in plant

    def test_corrupt_file_does_not_abort(self, plants_dir):
        with open(os.path.join(plants_dir, 'broken.json'), 'w', encoding='utf-8') as f:
            f.write('not json')
        updated, errors = apply_standardized_ranges(plants_dir, backup=False)
        assert updated == 3
        assert len(errors) == 1
        assert errors[0].startswith('broken.json')

    def test_rerun_is_stable(self, plants_dir):
        apply_standardized_ranges(plants_dir, backup=False)
        first = {p: read_json(p) for p in find_plant_files(plants_dir)}
        apply_standardized_ranges(plants_dir, backup=False)
        second = {p: read_json(p) for p in find_plant_files(plants_dir)}
        assert first == second

    def test_backup_taken_first(self, plants_dir, backup_dir):
        apply_standardized_ranges(plants_dir, backup_dir=backup_dir)
        files = os.listdir(backup_dir)
        assert len(files) == 1
        assert files[0].endswith('_pre_ranges.zip')

    def test_missing_directory(self, tmp_path):
        updated, errors = apply_standardized_ranges(str(tmp_path / 'nope'), backup=False)
        assert updated == 0
        assert len(errors) == 1

    def test_single_file(self, tmp_path):
        path = write_plant(str(tmp_path), 'orchid.json', ORCHID_PLANT)
        assert update_plant_ranges(path) == (True, None)
        ok, error = update_plant_ranges(str(tmp_path / 'missing.json'))
        assert ok is False
        assert error.startswith('missing.json')


class TestApplyVivariumTypes:
    def test_types_written(self, plants_dir):
        updated, errors = apply_vivarium_types(plants_dir, backup=False)
        assert updated == 3
        assert errors == []

        fern = read_json(os.path.join(plants_dir, 'aquarium', 'java-fern.json'))
        assert fern['vivariumType'] == ['Aquarium', 'Paludarium', 'Riparium']
        assert 'aquarium' in fern['type']

        orchid = read_json(os.path.join(plants_dir, 'moth-orchid.json'))
        assert orchid['vivariumType'] == ['Closed Terrarium', 'Open Terrarium', 'Aerarium']
        assert orchid['type'] == ['aerarium', 'terrarium']

        succulent = read_json(os.path.join(plants_dir, 'zebra-haworthia.json'))
        assert succulent['vivariumType'] == ['Indoor']
        assert succulent['type'] == ['house-plant']

    def test_fit_error_is_skipped_and_reported(self, plants_dir, monkeypatch):
        import plant_batch

        def failing_fit(plant, profiles):
            if plant.get('id') == 'moth-orchid':
                return {'results': [], 'scores': {}, 'error': 'bad record'}
            return {'results': ['Indoor'], 'scores': {'Indoor': 90}, 'ranges': {}}

        monkeypatch.setattr(plant_batch, 'calculate_habitat_fit', failing_fit)
        updated, errors = apply_vivarium_types(plants_dir, backup=False)
        assert updated == 2
        assert errors == ['moth-orchid.json: bad record']
        assert 'vivariumType' not in read_json(os.path.join(plants_dir, 'moth-orchid.json'))


class TestDetect:
    def test_report_rows(self, plants_dir):
        with open(os.path.join(plants_dir, 'broken.json'), 'w', encoding='utf-8') as f:
            f.write('{')
        rows = detect_vivarium_types(find_plant_files(plants_dir))
        by_file = {row['file']: row for row in rows}

        assert by_file['broken.json']['error']
        fern = by_file['java-fern.json']
        assert fern['results'][0] == 'Aquarium'
        assert fern['stored'] == []
        assert fern['substrateType'] == 'aquatic'
        assert fern['error'] is None

    def test_detection_does_not_write(self, plants_dir):
        before = {p: read_json(p) for p in find_plant_files(plants_dir)}
        detect_vivarium_types(find_plant_files(plants_dir))
        after = {p: read_json(p) for p in find_plant_files(plants_dir)}
        assert before == after
