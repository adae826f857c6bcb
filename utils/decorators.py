from __future__ import annotations

import logging
from functools import wraps

import jwt
from flask import request, g, current_app

from models.user import Role
from utils.errors import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)


def _bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        raise AuthenticationError("Missing or invalid Authorization header")
    token = auth.split(" ", 1)[1].strip()
    if not token:
        raise AuthenticationError("Missing or invalid Authorization header")
    return token


def authenticate(token: str) -> dict:
    """
    Verify an access token and return the identity it carries:
    {userId, email, role}. Expired and forged tokens are both a 401.
    """
    issuer = current_app.extensions["token_issuer"]
    try:
        decoded = issuer.decode_access_token(token)
    except jwt.ExpiredSignatureError:
        logger.info("Rejected access token: signature expired")
        raise AuthenticationError("Token expired")
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected access token: %s", exc.__class__.__name__)
        raise AuthenticationError("Invalid token")

    identity = {
        "userId": decoded.get("userId"),
        "email": decoded.get("email"),
        "role": decoded.get("role"),
    }
    if not identity["userId"] or not identity["role"]:
        logger.info("Rejected access token: missing identity claims")
        raise AuthenticationError("Invalid token")
    return identity


def jwt_required():
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            g.current_user = authenticate(_bearer_token())
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def roles_required(required_roles: list[str]):
    """
    Allow access if the user has ANY of the required roles.
    Deny (403) only if the token's role is not among required_roles.
    """
    req = set(required_roles or [])

    def decorator(fn):
        @wraps(fn)
        @jwt_required()
        def wrapper(*args, **kwargs):
            role = g.current_user.get("role")
            if role not in req:
                logger.info("User %s with role %s denied", g.current_user.get("userId"), role)
                raise AuthorizationError("Insufficient role")
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def admin_required():
    return roles_required([Role.ADMIN.value])
