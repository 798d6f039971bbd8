"""Flask application factory."""

from flask import Flask

from fundpulse.config import Settings, load_settings
from fundpulse.webapp.errors import register_error_handlers
from fundpulse.webapp.services import EXTENSION_KEY, build_services


def create_app(settings: Settings = None, services=None):
    """
    Create and configure the Flask application.

    Args:
        settings: Settings to use (defaults to load_settings()).
        services: Pre-built Services, mainly for tests.
    """
    if services is None:
        if settings is None:
            settings = load_settings()
        services = build_services(settings)
    settings = services.settings

    app = Flask(__name__)
    app.json.sort_keys = False
    app.config['SHOW_ERROR_DETAIL'] = settings.is_development
    app.extensions[EXTENSION_KEY] = services

    register_error_handlers(app)

    # Register all blueprints
    from fundpulse.webapp.routes.funds import funds_bp
    from fundpulse.webapp.routes.admin import admin_bp

    app.register_blueprint(funds_bp)
    app.register_blueprint(admin_bp)

    return app
