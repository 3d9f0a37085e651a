# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Central security module.  All cryptographic primitives and auth guards live
here.  No other module should touch raw crypto directly.

Responsibilities
----------------
1. Secret hashing / verification            (passlib pbkdf2_sha256)
2. Bearer token issue / verification        (PyJWT / HS256)
3. FastAPI dependency guards                (get_current_user, require_admin)
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt as _jwt        # PyJWT
from passlib.exc import PasswordSizeError
from passlib.hash import pbkdf2_sha256 as _pbkdf2  # pure Python, no binary deps
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from core.config import Settings
from core.exceptions import Forbidden, InvalidToken
from database import get_db

# ---------------------------------------------------------------------------
# 1.  pbkdf2_sha256 – password and passphrase hashing
# ---------------------------------------------------------------------------
# The round count comes from Settings.password_hash_rounds (600 000 in
# production, a handful in the test-suite).  passlib embeds salt and rounds
# in the hash string, so verification needs nothing but the stored value.
# ---------------------------------------------------------------------------


def hash_secret(plain: str, rounds: int) -> str:
    """Hash *plain* with PBKDF2-SHA256 and a fresh random salt."""
    return _pbkdf2.using(rounds=rounds).hash(plain)


def verify_secret(plain: str, stored_hash: str) -> bool:
    """
    Constant-time verification of *plain* against a hash produced by
    :func:`hash_secret`.  A malformed *stored_hash* raises ``ValueError``;
    a *plain* over passlib's size limit simply does not match.
    """
    try:
        return _pbkdf2.verify(plain, stored_hash)
    except PasswordSizeError:
        return False


# ---------------------------------------------------------------------------
# 2.  JWT – bearer tokens
# ---------------------------------------------------------------------------

_ALGORITHM = "HS256"


class TokenIssuer:
    """
    Issues and verifies HS256 bearer tokens bound to a user id.

    Tokens are stateless: nothing is stored server-side, a token is valid
    as long as its signature checks out and ``exp`` is in the future.
    """

    def __init__(self, secret_key: str, expire_minutes: int):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key
        self._expire = timedelta(minutes=expire_minutes)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        return cls(settings.secret_key, settings.access_token_expire_minutes)

    def issue(self, user_id, role: str = "user", expires_delta: Optional[timedelta] = None) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "role": role,
            "iat": now,
            "exp": now + (expires_delta if expires_delta is not None else self._expire),
        }
        return _jwt.encode(claims, self._secret_key, algorithm=_ALGORITHM)

    def verify(self, token: str) -> dict:
        """
        Decode and verify *token*.  Expired, unsigned (``alg: none``),
        foreign-secret and malformed tokens all raise :class:`InvalidToken`.
        """
        try:
            return _jwt.decode(
                token,
                self._secret_key,
                algorithms=[_ALGORITHM],
                options={"require": ["sub", "exp"]},
            )
        except _jwt.InvalidTokenError as exc:
            # ExpiredSignatureError is a subclass of InvalidTokenError
            raise InvalidToken() from exc


# ---------------------------------------------------------------------------
# 3.  FastAPI dependency guards
# ---------------------------------------------------------------------------

# auto_error=False so a missing header ends up in our own 401 envelope
# instead of FastAPI's {"detail": ...} body.
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_token_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> dict:
    """Dependency: the verified claims of the request's bearer token."""
    if credentials is None or not credentials.credentials:
        raise InvalidToken("Not authorized, no token")
    return issuer.verify(credentials.credentials)


def get_current_user_id(claims: dict = Depends(get_token_claims)) -> int:
    try:
        return int(claims["sub"])
    except (TypeError, ValueError):
        raise InvalidToken()


def get_current_user(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Dependency: load the User row behind the token.  Raises 401 if the
    account has been removed since the token was issued.
    """
    # Lazy import to avoid circular dependency at module load time
    from models.user import User  # noqa: E402

    user = db.get(User, user_id)
    if user is None:
        raise InvalidToken("User not found")
    return user


def require_admin(current_user=Depends(get_current_user)):
    """
    Dependency: wraps :func:`get_current_user` and additionally asserts
    ``role == 'admin'``.  Raises 403 otherwise.
    """
    if current_user.role != "admin":
        raise Forbidden()
    return current_user
