"""
Session lifecycle: register -> login -> refresh -> logout.

Refresh tokens live in the refresh_tokens table from login until logout or
until a refresh attempt finds them past their stored expiry. Refreshing never
rotates the refresh token; it only mints a new access token.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import jwt

from models.db_storage import DBStorage
from models.refresh_token import RefreshToken
from models.user import Role, User
from utils.errors import AuthenticationError, AuthorizationError, ConflictError
from utils.security import TokenIssuer, hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
INVALID_REFRESH_TOKEN = "Invalid refresh token"
EXPIRED_REFRESH_TOKEN = "Refresh token expired"


def _utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AuthService:
    def __init__(self, storage: DBStorage, issuer: TokenIssuer):
        self.storage = storage
        self.issuer = issuer

    def register(self, email: str, password: str, role: Optional[str] = None) -> User:
        if self.storage.find_by(User, email=email):
            raise ConflictError("Email already registered")

        user = User(
            email=email,
            password_hash=hash_password(password),
            role=Role(role) if role else Role.USER,
        )
        self.storage.new(user)
        # A concurrent registration for the same email loses on the unique index
        self.storage.save()
        logger.info("Registered user %s with role %s", user.id, user.role.value)
        return user

    def login(self, email: str, password: str) -> Dict[str, Any]:
        user = self.storage.find_by(User, email=email)
        if not user or not verify_password(password, user.password_hash):
            logger.info("Failed login for %s", email)
            raise AuthenticationError(INVALID_CREDENTIALS)

        access_token = self.issuer.issue_access_token(user.id, user.email, user.role.value)
        refresh_token = self.issuer.issue_refresh_token(user.id)

        self.storage.new(
            RefreshToken(
                token=refresh_token,
                user_id=user.id,
                expires_at=datetime.now(timezone.utc) + self.issuer.refresh_expires,
            )
        )
        self.storage.save()
        logger.info("User %s logged in", user.id)

        return {"access_token": access_token, "refresh_token": refresh_token, "user": user}

    def refresh(self, refresh_token: str) -> str:
        stored = self.storage.find_by(RefreshToken, token=refresh_token)
        if stored is None:
            logger.info("Refresh rejected: token not found")
            raise AuthorizationError(INVALID_REFRESH_TOKEN)

        # The stored timestamp is consulted before the signed exp claim
        if datetime.now(timezone.utc) > _utc(stored.expires_at):
            self.storage.delete_where(RefreshToken, id=stored.id)
            self.storage.save()
            logger.info("Refresh rejected: token for user %s expired", stored.user_id)
            raise AuthorizationError(EXPIRED_REFRESH_TOKEN)

        try:
            claims = self.issuer.decode_refresh_token(refresh_token)
        except jwt.InvalidTokenError as exc:
            logger.info("Refresh rejected: %s", exc.__class__.__name__)
            raise AuthorizationError(INVALID_REFRESH_TOKEN) from exc

        user = stored.user
        if user is None or claims.get("userId") != user.id:
            logger.warning("Refresh rejected: claims do not match stored owner")
            raise AuthorizationError(INVALID_REFRESH_TOKEN)

        return self.issuer.issue_access_token(user.id, user.email, user.role.value)

    def logout(self, refresh_token: Optional[str] = None) -> int:
        """Delete every stored row carrying this token value; returns how many went."""
        if not refresh_token:
            return 0
        removed = self.storage.delete_where(RefreshToken, token=refresh_token)
        self.storage.save()
        logger.info("Logout removed %d refresh token(s)", removed)
        return removed
