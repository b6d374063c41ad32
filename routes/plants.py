"""
routes/plants.py — Plant store API routes.

Provides:
- GET /plants/                 — List plant summaries (?q= filters by name)
- GET /plants/count            — Number of readable plant records
- GET /plants/<id>             — Full plant record
- GET /plants/<id>/habitat     — Fresh habitat fit and enclosure size for one plant
- POST /plants/rebuild-index   — Rewrite index.json
"""

import os

from flask import Blueprint, current_app, jsonify, request

from enclosure_size import determine_minimum_enclosure_size
from habitat_scorer import calculate_habitat_fit
from plant_store import find_plant, load_all_plants, plant_id, rebuild_index, slugify

plants_bp = Blueprint('plants', __name__, url_prefix='/plants')


def _plants_dir():
    return current_app.config['PLANTS_DIR']


def _summary(path, plant):
    return {
        'id': plant_id(path, plant),
        'file': os.path.relpath(path, _plants_dir()).replace(os.sep, '/'),
        'name': plant.get('name', ''),
        'scientificName': plant.get('scientificName', ''),
        'vivariumType': plant.get('vivariumType') or [],
    }


# ========================================
# Plant List and Details
# ========================================

@plants_bp.route('/')
def list_plants():
    """List plants (JSON API). Unreadable files are reported in 'errors'."""
    query = slugify(request.args.get('q', ''))
    try:
        plants, errors = load_all_plants(_plants_dir())
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500

    summaries = [_summary(path, plant) for path, plant in plants]
    if query:
        summaries = [
            s for s in summaries
            if query in slugify(s['name']) or query in slugify(s['scientificName'])
        ]
    return jsonify({'success': True, 'plants': summaries, 'errors': errors})


@plants_bp.route('/count')
def plant_count():
    """Get plant count (JSON API)."""
    try:
        plants, _ = load_all_plants(_plants_dir())
        return jsonify({'success': True, 'count': len(plants)})
    except Exception as e:
        return jsonify({'success': False, 'error': str(e)}), 500


@plants_bp.route('/<identifier>')
def get_plant_detail(identifier):
    """Get a single plant record (JSON API)."""
    path, plant = find_plant(identifier, _plants_dir())
    if plant is None:
        return jsonify({'success': False, 'error': 'Plant not found'}), 404
    return jsonify({'success': True, 'plant': plant, 'id': plant_id(path, plant)})


@plants_bp.route('/<identifier>/habitat')
def get_plant_habitat(identifier):
    """Compute habitat fit for a stored plant without writing it back."""
    path, plant = find_plant(identifier, _plants_dir())
    if plant is None:
        return jsonify({'success': False, 'error': 'Plant not found'}), 404

    fit = calculate_habitat_fit(plant)
    if fit.get('error'):
        return jsonify({'success': False, 'error': fit['error']}), 500

    return jsonify({
        'success': True,
        'id': plant_id(path, plant),
        'stored': plant.get('vivariumType') or [],
        'results': fit['results'],
        'scores': fit['scores'],
        'ranges': fit['ranges'],
        'enclosure': determine_minimum_enclosure_size(plant),
    })


# ========================================
# Maintenance
# ========================================

@plants_bp.route('/rebuild-index', methods=['POST'])
def rebuild_plant_index():
    """Rewrite index.json from the files on disk."""
    plants_dir = _plants_dir()
    if not os.path.isdir(plants_dir):
        return jsonify({'success': False, 'error': f'Plants directory not found: {plants_dir}'}), 404
    try:
        index = rebuild_index(plants_dir)
        return jsonify({'success': True, 'count': index['count']})
    except OSError as e:
        return jsonify({'success': False, 'error': str(e)}), 500
