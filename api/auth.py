"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- GET  /auth/profile
- POST /auth/logout

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived access tokens and longer-lived refresh tokens (JWTs, separate secrets)
- Stores refresh tokens in DB (RefreshToken model) so they can be revoked on logout
- Validates JWTs without flask-jwt-extended (utils.decorators)
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from api.extensions import limiter, auth_rate_limit, get_auth_service
from models.schemas.user import (
    RegisterSchema,
    LoginSchema,
    RefreshSchema,
    LogoutSchema,
    UserOutSchema,
)
from utils.decorators import jwt_required

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
logout_schema = LogoutSchema()
user_out_schema = UserOutSchema()
login_user_schema = UserOutSchema(only=("id", "email", "role"))


@bp.post("/auth/register")
@limiter.limit(auth_rate_limit)
def register():
    """
    Register a new user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email, password]
          properties:
            email: { type: string, example: user@test.com }
            password: { type: string, example: password123 }
            role: { type: string, enum: [USER, ADMIN], default: USER }
    responses:
      201:
        description: Created
      400:
        description: Missing fields or email already registered
    """
    data = register_schema.load(request.get_json(silent=True) or {})
    user = get_auth_service().register(data["email"], data["password"], data.get("role"))
    return jsonify({"user": user_out_schema.dump(user)}), 201


@bp.post("/auth/login")
@limiter.limit(auth_rate_limit)
def login():
    """
    Login: return accessToken and refreshToken
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [email, password]
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Invalid credentials
    """
    data = login_schema.load(request.get_json(silent=True) or {})
    result = get_auth_service().login(data["email"], data["password"])
    return jsonify(
        {
            "accessToken": result["access_token"],
            "refreshToken": result["refresh_token"],
            "user": login_user_schema.dump(result["user"]),
        }
    ), 200


@bp.post("/auth/refresh")
def refresh():
    """
    Exchange a stored refresh token for a new access token (no rotation)
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [refreshToken]
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: OK (returns accessToken)
      400:
        description: refreshToken missing
      403:
        description: Invalid or expired refresh token
    """
    data = refresh_schema.load(request.get_json(silent=True) or {})
    access_token = get_auth_service().refresh(data["refresh_token"])
    return jsonify({"accessToken": access_token}), 200


@bp.get("/auth/profile")
@jwt_required()
def profile():
    """
    Identity carried by the access token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return jsonify({"user": g.current_user}), 200


@bp.post("/auth/logout")
@jwt_required()
def logout():
    """
    Logout: deletes the stored refresh token if one is supplied
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: Logged out
      401:
        description: Unauthorized
    """
    data = logout_schema.load(request.get_json(silent=True) or {})
    get_auth_service().logout(data.get("refresh_token"))
    return jsonify({"message": "Logged out successfully"}), 200
