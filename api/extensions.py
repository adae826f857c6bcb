"""
Extension instances and accessors for per-app collaborators.

The storage handle, auth service and text generator are built in create_app()
and kept in app.extensions; handlers fetch them through the helpers below.
"""
from flask import current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Limits and storage come from RATELIMIT_* config keys at init_app time
limiter = Limiter(key_func=get_remote_address)


def auth_rate_limit() -> str:
    return current_app.config["AUTH_RATE_LIMIT"]


def get_storage():
    return current_app.extensions["storage"]


def get_auth_service():
    return current_app.extensions["auth_service"]


def get_token_issuer():
    return current_app.extensions["token_issuer"]


def get_text_generator():
    return current_app.extensions["text_generator"]
