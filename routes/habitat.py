"""
routes/habitat.py — Habitat fit API routes.

Provides:
- GET /habitat/profiles  — The habitat profiles and their target ranges
- POST /habitat/ranges   — Standardized ranges for a posted plant record
- POST /habitat/score    — Habitat fit for a posted plant record
- POST /habitat/apply    — Rewrite stored records (ranges, vivarium types, or both)
- GET /habitat/export    — Download the habitat report as Excel
- GET /habitat/backups   — Backups taken before batch rewrites, newest first

/habitat/ranges and /habitat/score only compute; they are exempt from CSRF
in app.py. /habitat/apply writes to disk and keeps CSRF protection.
"""

from flask import Blueprint, current_app, jsonify, request, send_file

from habitat_profiles import HABITAT_PROFILES, PROFILES_BY_KEY
from habitat_scorer import calculate_habitat_fit
from plant_batch import apply_standardized_ranges, apply_vivarium_types
from range_mapper import map_to_ranges
from utils.backup import list_backups
from utils.export import generate_habitat_report

habitat_bp = Blueprint('habitat', __name__, url_prefix='/habitat')

APPLY_JOBS = ('ranges', 'types', 'all')


def _posted_plant():
    """The plant record in the request body, either bare or under 'plant'."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    if isinstance(data.get('plant'), dict):
        return data['plant']
    return data


def _selected_profiles(keys):
    """
    Resolve a list of profile keys.

    Returns:
        (profiles, error): error is a message for a malformed list or
        names the unknown keys.
    """
    if keys is None:
        return HABITAT_PROFILES, None
    if not isinstance(keys, list) or not all(isinstance(k, str) for k in keys):
        return None, "'profiles' must be a list of profile keys"
    if not keys:
        return HABITAT_PROFILES, None
    unknown = [k for k in keys if k not in PROFILES_BY_KEY]
    if unknown:
        return None, f"Unknown habitat profile(s): {', '.join(map(str, unknown))}"
    return tuple(PROFILES_BY_KEY[k] for k in keys), None


# ========================================
# Profiles and Computation
# ========================================

@habitat_bp.route('/profiles')
def list_profiles():
    """List habitat profiles (JSON API)."""
    return jsonify({'success': True, 'profiles': [p.to_dict() for p in HABITAT_PROFILES]})


@habitat_bp.route('/ranges', methods=['POST'])
def compute_ranges():
    """Map a posted plant record to standardized ranges."""
    plant = _posted_plant()
    if plant is None:
        return jsonify({'success': False, 'error': 'Expected a JSON plant record'}), 400
    return jsonify({'success': True, 'ranges': map_to_ranges(plant).to_dict()})


@habitat_bp.route('/score', methods=['POST'])
def score_plant():
    """
    Compute habitat fit for a posted plant record.

    Body: a plant record, or {"plant": {...}, "profiles": ["aquarium", ...]}
    to score against a subset of profiles.
    """
    plant = _posted_plant()
    if plant is None:
        return jsonify({'success': False, 'error': 'Expected a JSON plant record'}), 400

    body = request.get_json(silent=True)
    keys = body.get('profiles') if plant is not body else None
    profiles, error = _selected_profiles(keys)
    if error:
        return jsonify({'success': False, 'error': error}), 400

    fit = calculate_habitat_fit(plant, profiles)
    if fit.get('error'):
        return jsonify({'success': False, 'error': fit['error']}), 500
    return jsonify({'success': True, **fit})


# ========================================
# Batch Rewrite and Export
# ========================================

@habitat_bp.route('/apply', methods=['POST'])
def apply_to_store():
    """
    Rewrite stored plant records.

    Form or JSON field 'job': 'ranges', 'types' or 'all' (default).
    Ranges are written before types so the stored ranges match the scores.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = request.form
    job = data.get('job', 'all')
    if job not in APPLY_JOBS:
        return jsonify({'success': False, 'error': f"Invalid job: {job}"}), 400

    plants_dir = current_app.config['PLANTS_DIR']
    backup_dir = current_app.config['BACKUP_DIR']
    updated = {}
    errors = []
    if job in ('ranges', 'all'):
        updated['ranges'], job_errors = apply_standardized_ranges(plants_dir, backup_dir=backup_dir)
        errors.extend(job_errors)
    if job in ('types', 'all'):
        updated['types'], job_errors = apply_vivarium_types(plants_dir, backup_dir=backup_dir)
        errors.extend(job_errors)

    return jsonify({'success': not errors, 'updated': updated, 'errors': errors})


@habitat_bp.route('/backups')
def list_plant_backups():
    """List plant directory backups (JSON API)."""
    return jsonify({'success': True, 'backups': list_backups(current_app.config['BACKUP_DIR'])})


@habitat_bp.route('/export')
def export_report():
    """Download the habitat report for every stored plant."""
    buffer, filename = generate_habitat_report(current_app.config['PLANTS_DIR'])
    if not buffer:
        return jsonify({'success': False, 'error': 'No plants to export'}), 404

    return send_file(
        buffer,
        as_attachment=True,
        download_name=filename,
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )
