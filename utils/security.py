"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT (access and refresh tokens use separate secrets)
- JTI generation for token identifiers
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Mapping

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError

# Cost parameters are pinned so every stored hash is produced the same way
ph = PasswordHasher(time_cost=3, memory_cost=65536, parallelism=4)


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password against a stored Argon2 hash.
    A mismatch or an unreadable hash is a plain False, never an error.
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TokenIssuer:
    """
    Mints and verifies the two token kinds.

    - access tokens: claims {userId, email, role}, signed with JWT_SECRET
    - refresh tokens: claims {userId, jti}, signed with JWT_REFRESH_SECRET

    Issuing is a pure function of the inputs, the secrets and the clock.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_expires: timedelta = timedelta(minutes=15),
        refresh_expires: timedelta = timedelta(days=7),
        algorithm: str = "HS256",
    ):
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.access_expires = access_expires
        self.refresh_expires = refresh_expires
        self.algorithm = algorithm

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "TokenIssuer":
        return cls(
            access_secret=config["JWT_SECRET"],
            refresh_secret=config["JWT_REFRESH_SECRET"],
            access_expires=config["ACCESS_TOKEN_EXPIRES"],
            refresh_expires=config["REFRESH_TOKEN_EXPIRES"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
        )

    def _encode(self, claims: Dict[str, Any], secret: str, expires: timedelta) -> str:
        now = _now()
        payload = dict(claims)
        payload["iat"] = int(now.timestamp())
        payload["exp"] = int((now + expires).timestamp())
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def issue_access_token(self, user_id: str, email: str, role: str) -> str:
        claims = {"userId": str(user_id), "email": email, "role": role}
        return self._encode(claims, self.access_secret, self.access_expires)

    def issue_refresh_token(self, user_id: str) -> str:
        # jti keeps two tokens minted in the same second distinct
        claims = {"userId": str(user_id), "jti": generate_jti()}
        return self._encode(claims, self.refresh_secret, self.refresh_expires)

    def decode_access_token(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate an access token.
        Raises jwt.ExpiredSignatureError or jwt.InvalidTokenError.
        """
        return jwt.decode(
            token,
            self.access_secret,
            algorithms=[self.algorithm],
            options={"require": ["exp", "iat"]},
        )

    def decode_refresh_token(self, token: str) -> Dict[str, Any]:
        return jwt.decode(
            token,
            self.refresh_secret,
            algorithms=[self.algorithm],
            options={"require": ["exp", "iat"]},
        )
