# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Auth service – registration, two-step login and profile lookup.

Security notes
--------------
* Login raises the *same* error whether the email doesn't exist or the
  password is wrong.  A wrong passphrase is reported separately, but only
  after the password has been verified.
* The administrative account is an ordinary row with ``role = 'admin'``
  created by bin/seed_admin.py.  Its email is reserved (self-registration
  is refused) and its logins skip the passphrase step.
* The plaintext passphrase exists only in the registration response; the
  store keeps a PBKDF2 hash of its normalised form.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Tuple

from passlib.exc import PasswordSizeError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from auth.passphrase import generate_passphrase, normalize_passphrase
from core.config import Settings
from core.exceptions import (
    DuplicateIdentity,
    InvalidCredentials,
    InvalidPassphrase,
    RegistrationFailed,
    ReservedIdentity,
    ServerError,
    UserNotFound,
)
from core.logger import get_logger
from core.security import TokenIssuer, hash_secret, verify_secret
from models.user import User

log = get_logger("auth")


def normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass
class Registration:
    user: User
    passphrase: str  # plaintext – disclosed to the caller exactly once
    token: str


@dataclass
class LoginResult:
    user: User
    token: str


class AuthService:
    """
    One instance per request: it holds the request's DB session plus the
    app-wide settings and token issuer it was constructed with.
    """

    def __init__(
        self,
        db: Session,
        settings: Settings,
        tokens: TokenIssuer,
        passphrase_factory: Callable[[int], str] = generate_passphrase,
    ):
        self._db = db
        self._settings = settings
        self._tokens = tokens
        self._passphrase_factory = passphrase_factory

    # -- lookups -----------------------------------------------------------

    def _find_by_email(self, email: str) -> Optional[User]:
        return self._db.query(User).filter(User.email == email).first()

    def is_reserved(self, email: str) -> bool:
        return normalize_email(email) == normalize_email(self._settings.admin_email)

    # -- register ----------------------------------------------------------

    def register(self, name: str, email: str, phone: str, password: str) -> Registration:
        email = normalize_email(email)
        if self.is_reserved(email):
            log.warning("Registration refused for reserved email %s", email)
            raise ReservedIdentity()

        passphrase = self._passphrase_factory(self._settings.passphrase_words)
        rounds = self._settings.password_hash_rounds
        try:
            password_hash = hash_secret(password, rounds)
        except PasswordSizeError as exc:
            raise RegistrationFailed("Password is too long") from exc
        user = User(
            name=name.strip(),
            email=email,
            phone=phone.strip(),
            password_hash=password_hash,
            passphrase_hash=hash_secret(normalize_passphrase(passphrase), rounds),
            role="user",
        )
        self._db.add(user)
        try:
            self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            # The unique index fired – or some other constraint did
            if self._find_by_email(email) is not None:
                log.info("Registration refused for existing email %s", email)
                raise DuplicateIdentity() from exc
            log.error("Registration failed for %s: %s", email, exc.orig)
            raise RegistrationFailed(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            self._db.rollback()
            log.error("Registration failed for %s: %s", email, exc)
            raise RegistrationFailed(str(getattr(exc, "orig", None) or exc)) from exc

        self._db.refresh(user)
        log.info("Registered user id=%s email=%s", user.id, user.email)
        return Registration(
            user=user,
            passphrase=passphrase,
            token=self._tokens.issue(user.id, role=user.role),
        )

    # -- login -------------------------------------------------------------

    def login(self, email: str, password: str, passphrase: Optional[str] = None) -> LoginResult:
        email = normalize_email(email)
        try:
            user = self._find_by_email(email)
            # Unified failure path – no information leaks about whether the email exists
            if user is None or not verify_secret(password, user.password_hash):
                log.warning("Rejected login for %s: bad email or password", email)
                raise InvalidCredentials()

            if user.role != "admin":
                self._check_passphrase(user, passphrase)

            user.last_login = datetime.now(timezone.utc)
            self._db.commit()
        except (SQLAlchemyError, ValueError) as exc:
            # Store down, malformed hash, …: "try again", not "wrong password"
            self._db.rollback()
            log.exception("Login for %s failed unexpectedly", email)
            raise ServerError() from exc

        log.info("Login ok for user id=%s role=%s", user.id, user.role)
        return LoginResult(user=user, token=self._tokens.issue(user.id, role=user.role))

    def _check_passphrase(self, user: User, passphrase: Optional[str]) -> None:
        if not passphrase:
            if self._settings.require_passphrase:
                log.warning("Rejected login for %s: passphrase missing", user.email)
                raise InvalidPassphrase("Passphrase is required")
            return

        if user.passphrase_hash is None or not verify_secret(
            normalize_passphrase(passphrase), user.passphrase_hash
        ):
            log.warning("Rejected login for %s: bad passphrase", user.email)
            raise InvalidPassphrase()

    # -- profile -----------------------------------------------------------

    def profile(self, user_id: int) -> User:
        user = self._db.get(User, user_id)
        if user is None:
            raise UserNotFound()
        return user


# ---------------------------------------------------------------------------
# Admin bootstrap
# ---------------------------------------------------------------------------


def seed_admin(db: Session, settings: Settings) -> Tuple[Optional[User], bool]:
    """
    Create the administrative account from ``settings.admin_email`` and
    ``settings.first_admin_password`` unless it already exists.

    Returns ``(user, created)``; ``(None, False)`` when no password is
    configured.
    """
    if not settings.first_admin_password:
        return None, False

    email = normalize_email(settings.admin_email)
    existing = db.query(User).filter(User.email == email).first()
    if existing is not None:
        return existing, False

    admin = User(
        name="Admin",
        email=email,
        phone="",
        password_hash=hash_secret(settings.first_admin_password, settings.password_hash_rounds),
        passphrase_hash=None,
        role="admin",
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    log.info("Seeded admin account id=%s email=%s", admin.id, admin.email)
    return admin, True
