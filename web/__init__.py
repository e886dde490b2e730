"""Flask application package."""

from __future__ import annotations

from flask import Flask, current_app

import config
from infrastructure.service_container import ServiceConfig, ServiceContainer

CONTAINER_KEY = "huay.container"


def create_app(
    container: ServiceContainer | None = None,
    admin_token: str | None = config.ADMIN_API_TOKEN,
) -> Flask:
    """Application factory.

    Args:
        container: Pre-built service container (tests inject one); by default
            a container is built from config.
        admin_token: Shared secret for admin endpoints; None disables them.

    Returns:
        Configured Flask application.
    """
    from web.error_handlers import register_error_handlers
    from web.routes.admin import admin_bp
    from web.routes.affiliates import affiliates_bp
    from web.routes.auth import auth_bp
    from web.routes.bets import bets_bp
    from web.routes.health import health_bp
    from web.routes.results import results_bp
    from web.routes.wallet import wallet_bp

    if container is None:
        container = ServiceContainer(ServiceConfig())
    container.initialize()

    app = Flask(__name__)
    app.config.update(
        SECRET_KEY=config.SECRET_KEY,
        ADMIN_API_TOKEN=admin_token,
        JSON_SORT_KEYS=False,
    )
    app.extensions[CONTAINER_KEY] = container

    register_error_handlers(app)

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(bets_bp, url_prefix="/api")
    app.register_blueprint(wallet_bp, url_prefix="/api")
    app.register_blueprint(results_bp, url_prefix="/api")
    app.register_blueprint(affiliates_bp, url_prefix="/api")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")

    return app


def get_container() -> ServiceContainer:
    """Service container bound to the running app."""

    return current_app.extensions[CONTAINER_KEY]
