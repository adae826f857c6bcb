from flask import Blueprint

from api import __version__

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    """
    Health check
    ---
    tags:
      - Health
    responses:
      200:
        description: API is up
        schema:
          type: object
          properties:
            status:
              type: string
              example: ok
            version:
              type: string
              example: 1.0.0
    """
    return {"status": "ok", "version": __version__}, 200


@bp.get("")
def index():
    """
    Discovery document for API v1
    ---
    tags:
      - Health
    responses:
      200:
        description: Available resource roots
    """
    return {
        "message": "Library Catalog API v1",
        "version": __version__,
        "endpoints": {
            "auth": "/api/v1/auth",
            "books": "/api/v1/books",
            "authors": "/api/v1/authors",
            "categories": "/api/v1/categories",
        },
        "documentation": "/apidocs/",
    }, 200
