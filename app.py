"""
app.py — Flask entry point for the vivarium plant curator.

Initializes the Flask app, points it at the plant and backup directories
and registers the route blueprints.

Run: python app.py → localhost:5000
"""

import logging
import os
from flask import Flask, jsonify
from flask_wtf.csrf import CSRFProtect, generate_csrf

from plant_store import get_plants_dir
from routes.habitat import habitat_bp, compute_ranges, score_plant
from routes.plants import plants_bp
from utils.backup import get_backup_dir

logger = logging.getLogger(__name__)


def create_app(test_config=None):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.secret_key = 'vivarium-curator-local-app-secret-key'
    app.config['WTF_CSRF_CHECK_DEFAULT'] = True
    app.config['PLANTS_DIR'] = get_plants_dir()
    app.config['BACKUP_DIR'] = get_backup_dir()

    if test_config:
        app.config.update(test_config)

    csrf = CSRFProtect(app)
    # Pure computation on a posted record; nothing is written
    csrf.exempt(compute_ranges)
    csrf.exempt(score_plant)

    if not os.path.isdir(app.config['PLANTS_DIR']):
        logger.warning("Plants directory %s does not exist; the plant API will be empty",
                       app.config['PLANTS_DIR'])
    os.makedirs(app.config['BACKUP_DIR'], exist_ok=True)

    # Register blueprints
    app.register_blueprint(plants_bp)
    app.register_blueprint(habitat_bp)

    @app.route('/csrf-token')
    def csrf_token():
        """Token for the X-CSRFToken header of write requests."""
        return jsonify({'success': True, 'csrf_token': generate_csrf()})

    return app


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    app = create_app()
    # Debug mode: enabled by default for development (auto-reload on file changes)
    # Set FLASK_DEBUG=0 to disable for production
    debug = os.environ.get('FLASK_DEBUG', '1') != '0'
    app.run(host='localhost', port=5000, debug=debug)
