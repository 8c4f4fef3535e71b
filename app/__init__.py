import logging
import os
import sys

from flask import Flask, jsonify
from .extensions import db, migrate
from .config import DevConfig, ProdConfig, DEV_JWT_SECRET


def _configure_logging(app):
    """Set up structured logging for production."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'
    ))
    level = logging.INFO if not app.debug else logging.DEBUG
    app.logger.setLevel(level)
    app.logger.addHandler(handler)
    logging.getLogger('gunicorn.error').setLevel(level)


def _check_required_settings(app):
    missing = [key for key in app.config.get('REQUIRED_SETTINGS', ()) if not app.config.get(key)]
    if missing:
        raise RuntimeError(
            'Missing required configuration: ' + ', '.join(missing)
        )


def _ensure_schema(app):
    """Create missing tables when AUTO_CREATE_SCHEMA is on.

    Deployments that manage the schema with Flask-Migrate leave it off.
    """
    if not app.config.get('AUTO_CREATE_SCHEMA'):
        return
    with app.app_context():
        db.create_all()
        app.logger.info('Schema check completed')


def create_app(config=None):
    app = Flask(__name__, static_folder=None)

    if config is None:
        config = ProdConfig if os.environ.get('FLASK_ENV') == 'production' else DevConfig
    app.config.from_object(config)

    _check_required_settings(app)
    _configure_logging(app)
    if app.config.get('JWT_SECRET_KEY') == DEV_JWT_SECRET:
        app.logger.warning('Using the development JWT secret; set JWT_SECRET_KEY')

    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so they are registered with SQLAlchemy (needed for migrations)
    from . import models  # noqa: F401

    _ensure_schema(app)

    from flask_cors import CORS
    CORS(app, expose_headers=['Authorization'])

    from .services.search import CustomSearchClient
    app.extensions['search_client'] = CustomSearchClient.from_config(app.config)

    from .errors import register_error_handlers
    register_error_handlers(app)

    from .api import register_blueprints
    register_blueprints(app)

    from .cli import bp as cli_bp
    app.register_blueprint(cli_bp)

    # Health check endpoint (used by load balancers and CI)
    @app.route('/healthz')
    def health_check():
        try:
            db.session.execute(db.text('SELECT 1'))
            return jsonify(status='healthy'), 200
        except Exception:
            app.logger.exception('Health check failed')
            return jsonify(status='unhealthy'), 503

    return app
