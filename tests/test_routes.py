"""
tests/test_routes.py — Tests for the Flask JSON API.

Tests cover:
- Plant listing, lookup and per-plant habitat fit
- Computation endpoints for posted records
- Batch rewrite and index rebuild
- Excel download
- CSRF protection on write endpoints
"""

import os

import pytest

from app import create_app
from conftest import AQUATIC_PLANT, ORCHID_PLANT, read_json


@pytest.fixture
def app(plants_dir, backup_dir):
    return create_app({
        'TESTING': True,
        'WTF_CSRF_ENABLED': False,
        'SECRET_KEY': 'dev-key-for-testing',
        'PLANTS_DIR': plants_dir,
        'BACKUP_DIR': backup_dir,
    })


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def csrf_client(plants_dir, backup_dir):
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'dev-key-for-testing',
        'PLANTS_DIR': plants_dir,
        'BACKUP_DIR': backup_dir,
    })
    with app.test_client() as client:
        yield client


# ========================================
# Plants
# ========================================

class TestPlants:
    def test_list(self, client):
        rv = client.get('/plants/')
        data = rv.get_json()
        assert rv.status_code == 200
        assert data['success'] is True
        assert {p['id'] for p in data['plants']} == {'java-fern', 'haworthia', 'moth-orchid'}
        assert data['errors'] == []

    def test_list_filter(self, client):
        data = client.get('/plants/?q=orchid').get_json()
        assert [p['id'] for p in data['plants']] == ['moth-orchid']

    def test_count(self, client):
        assert client.get('/plants/count').get_json() == {'success': True, 'count': 3}

    def test_detail(self, client):
        data = client.get('/plants/moth-orchid').get_json()
        assert data['success'] is True
        assert data['plant']['scientificName'] == ORCHID_PLANT['scientificName']

    def test_detail_not_found(self, client):
        rv = client.get('/plants/unknown-plant')
        assert rv.status_code == 404
        assert rv.get_json()['success'] is False

    def test_habitat(self, client):
        data = client.get('/plants/java-fern/habitat').get_json()
        assert data['success'] is True
        assert data['results'][0] == 'Aquarium'
        assert data['stored'] == []
        assert data['enclosure']['size'] == 'small'

    def test_rebuild_index(self, client, plants_dir):
        data = client.post('/plants/rebuild-index').get_json()
        assert data == {'success': True, 'count': 3}
        assert read_json(os.path.join(plants_dir, 'index.json'))['count'] == 3


# ========================================
# Habitat computation
# ========================================

class TestHabitat:
    def test_profiles(self, client):
        data = client.get('/habitat/profiles').get_json()
        assert len(data['profiles']) == 8
        assert data['profiles'][0]['key'] == 'open-terrarium'

    def test_ranges(self, client):
        data = client.post('/habitat/ranges', json=ORCHID_PLANT).get_json()
        assert data['success'] is True
        assert data['ranges']['humidityRange'] == {'min': 70, 'max': 90, 'ideal': 80}
        assert 'waterPhRange' not in data['ranges']

    def test_score(self, client):
        data = client.post('/habitat/score', json=AQUATIC_PLANT).get_json()
        assert data['success'] is True
        assert data['results'] == ['Aquarium', 'Paludarium', 'Riparium']

    def test_score_with_profile_subset(self, client):
        body = {'plant': AQUATIC_PLANT, 'profiles': ['riparium']}
        data = client.post('/habitat/score', json=body).get_json()
        assert list(data['scores']) == ['Riparium']

    def test_score_unknown_profile(self, client):
        rv = client.post('/habitat/score', json={'plant': AQUATIC_PLANT, 'profiles': ['pond']})
        assert rv.status_code == 400
        assert 'pond' in rv.get_json()['error']

    @pytest.mark.parametrize('profiles', [5, 'aquarium', [['x']], ['aquarium', 3]])
    def test_score_malformed_profiles(self, client, profiles):
        rv = client.post('/habitat/score', json={'plant': AQUATIC_PLANT, 'profiles': profiles})
        assert rv.status_code == 400
        data = rv.get_json()
        assert data['success'] is False
        assert 'profiles' in data['error']

    def test_score_requires_json_object(self, client):
        rv = client.post('/habitat/score', data='plain text')
        assert rv.status_code == 400


# ========================================
# Batch rewrite and export
# ========================================

class TestApply:
    def test_apply_all(self, client, plants_dir, backup_dir):
        data = client.post('/habitat/apply', json={'job': 'all'}).get_json()
        assert data['success'] is True
        assert data['updated'] == {'ranges': 3, 'types': 3}

        orchid = read_json(os.path.join(plants_dir, 'moth-orchid.json'))
        assert orchid['substrateType'] == 'epiphytic'
        assert 'Aerarium' in orchid['vivariumType']
        assert len(os.listdir(backup_dir)) == 2

    def test_apply_ranges_only(self, client, plants_dir):
        data = client.post('/habitat/apply', data={'job': 'ranges'}).get_json()
        assert data['updated'] == {'ranges': 3}
        assert 'vivariumType' not in read_json(os.path.join(plants_dir, 'moth-orchid.json'))

    def test_apply_invalid_job(self, client):
        rv = client.post('/habitat/apply', json={'job': 'everything'})
        assert rv.status_code == 400

    def test_backups_empty(self, client):
        data = client.get('/habitat/backups').get_json()
        assert data == {'success': True, 'backups': []}

    def test_backups_listed_after_apply(self, client):
        client.post('/habitat/apply', json={'job': 'ranges'})
        data = client.get('/habitat/backups').get_json()
        assert data['success'] is True
        assert len(data['backups']) == 1
        backup = data['backups'][0]
        assert backup['reason'] == 'pre_ranges'
        assert backup['filename'].endswith('_pre_ranges.zip')
        assert backup['size_bytes'] > 0

    def test_export(self, client):
        rv = client.get('/habitat/export')
        assert rv.status_code == 200
        assert rv.mimetype == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        assert rv.data[:2] == b'PK'


# ========================================
# CSRF
# ========================================

class TestCsrf:
    def test_write_without_token_rejected(self, csrf_client, plants_dir):
        rv = csrf_client.post('/plants/rebuild-index')
        assert rv.status_code == 400
        assert not os.path.exists(os.path.join(plants_dir, 'index.json'))

    def test_apply_without_token_rejected(self, csrf_client):
        assert csrf_client.post('/habitat/apply', json={'job': 'ranges'}).status_code == 400

    def test_computation_is_exempt(self, csrf_client):
        assert csrf_client.post('/habitat/score', json=ORCHID_PLANT).status_code == 200
        assert csrf_client.post('/habitat/ranges', json=ORCHID_PLANT).status_code == 200

    def test_write_with_token_accepted(self, csrf_client):
        token = csrf_client.get('/csrf-token').get_json()['csrf_token']
        rv = csrf_client.post('/plants/rebuild-index', headers={'X-CSRFToken': token})
        assert rv.status_code == 200
