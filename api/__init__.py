import logging

from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config, check_production_secrets
from .errors import register_error_handlers
from .extensions import limiter
from models.db_storage import DBStorage
from services.auth_service import AuthService
from services.text_generation import TextGenerator
from utils.security import TokenIssuer

__version__ = "1.0.0"

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Library Catalog API",
        "version": __version__,
        "description": "REST API for a library catalog: authentication, books, authors and categories.",
    },
    "basePath": "/",  # blueprints are mounted under /api/v1
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def _configure_logging(app: Flask) -> None:
    level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger().setLevel(level)


def create_app(config_name: str | None = None, overrides: dict | None = None,
               storage: DBStorage | None = None,
               text_generator: TextGenerator | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.

    The storage handle, token issuer, auth service and text generator are built
    here once and kept in app.extensions. Tests can pass overrides (config keys)
    or ready-made collaborators.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)
    check_production_secrets(app.config)

    _configure_logging(app)

    # Cross-Origin Resource Sharing: enable for dev, configurable for prod
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    limiter.init_app(app)

    # Register global error handlers that return the uniform error envelope
    register_error_handlers(app)

    # Store opened once per process: tables created, scoped session ready
    if storage is None:
        storage = DBStorage(app.config["DATABASE_URL"], echo=app.config.get("SQL_ECHO", False))
    storage.reload()
    issuer = TokenIssuer.from_config(app.config)

    app.extensions["storage"] = storage
    app.extensions["token_issuer"] = issuer
    app.extensions["auth_service"] = AuthService(storage, issuer)
    app.extensions["text_generator"] = text_generator or TextGenerator.from_config(app.config)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .books import bp as books_bp
    from .authors import bp as authors_bp
    from .categories import bp as categories_bp
    from .cli import register_commands

    app.register_blueprint(health_bp, url_prefix="/api/v1")
    app.register_blueprint(auth_bp, url_prefix="/api/v1")
    app.register_blueprint(books_bp, url_prefix="/api/v1")
    app.register_blueprint(authors_bp, url_prefix="/api/v1")
    app.register_blueprint(categories_bp, url_prefix="/api/v1")
    register_commands(app)

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        # Calls scoped_session.remove(), preventing connection leaks
        storage.remove_session()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to the Library Catalog API",
            "docs": "/apidocs/",
            "api": "/api/v1",
            "health": "/api/v1/health",
        }, 200

    return app


def shutdown_app(app: Flask) -> None:
    """Close process-wide collaborators opened by create_app()."""
    app.extensions["storage"].close()
    app.extensions["text_generator"].close()
