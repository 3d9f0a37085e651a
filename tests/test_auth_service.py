"""AuthService: registration, two-step login, admin seeding."""

from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from auth.passphrase import WORDLIST
from auth.service import AuthService, seed_admin
from core.exceptions import (
    DuplicateIdentity,
    InvalidCredentials,
    InvalidPassphrase,
    RegistrationFailed,
    ReservedIdentity,
    ServerError,
    UserNotFound,
)
from core.security import verify_secret
from models.user import User

PASSWORD = "s3cret-Pass"


def _register(service, email="jane@example.com", password=PASSWORD):
    return service.register("Jane Doe", email, "+15550100", password)


# ---------------------------------------------------------------------------
# register
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("email", ["admin@zamanix.com", "ADMIN@Zamanix.com", "  admin@zamanix.com "])
def test_reserved_email_is_refused(service, db, email):
    with pytest.raises(ReservedIdentity):
        service.register("Mallory", email, "123", "whatever")
    assert db.query(User).count() == 0


def test_reserved_email_refused_even_with_empty_fields(service):
    with pytest.raises(ReservedIdentity):
        service.register("", "admin@zamanix.com", "", "")


def test_register_returns_summary_passphrase_and_token(service, tokens, settings):
    result = _register(service)

    assert result.user.id is not None
    assert result.user.name == "Jane Doe"
    assert result.user.email == "jane@example.com"
    assert result.user.phone == "+15550100"
    assert result.user.role == "user"

    words = result.passphrase.split(" ")
    assert len(words) == settings.passphrase_words
    assert all(w in WORDLIST for w in words)

    assert tokens.verify(result.token)["sub"] == str(result.user.id)


def test_secrets_are_stored_hashed(service, db):
    result = _register(service)
    row = db.get(User, result.user.id)

    assert row.password_hash != PASSWORD
    assert row.passphrase_hash != result.passphrase
    assert verify_secret(PASSWORD, row.password_hash)
    assert verify_secret(result.passphrase, row.passphrase_hash)


def test_email_is_case_normalised(service):
    result = _register(service, email="  Jane@Example.COM ")
    assert result.user.email == "jane@example.com"


def test_duplicate_email_is_refused(service, db):
    _register(service)
    with pytest.raises(DuplicateIdentity):
        _register(service)
    with pytest.raises(DuplicateIdentity):
        _register(service, email="JANE@example.com")
    assert db.query(User).count() == 1


def test_oversized_password_fails_registration(service, db):
    with pytest.raises(RegistrationFailed):
        _register(service, password="x" * 5000)
    assert db.query(User).count() == 0


def test_each_registration_gets_a_fresh_passphrase(service):
    first = _register(service, email="a@example.com")
    second = _register(service, email="b@example.com")
    assert first.passphrase != second.passphrase


def test_store_failure_surfaces_as_registration_failed(settings, tokens):
    db = Mock()
    db.commit.side_effect = OperationalError("INSERT", {}, Exception("disk I/O error"))
    service = AuthService(db, settings, tokens)

    with pytest.raises(RegistrationFailed) as exc_info:
        _register(service)
    assert exc_info.value.message == "disk I/O error"
    db.rollback.assert_called_once()


# ---------------------------------------------------------------------------
# login
# ---------------------------------------------------------------------------


def test_login_with_password_and_passphrase(service, tokens):
    registered = _register(service)

    result = service.login("jane@example.com", PASSWORD, registered.passphrase)

    assert result.user.id == registered.user.id
    assert tokens.verify(result.token)["sub"] == str(registered.user.id)


def test_login_accepts_passphrase_with_sloppy_spacing_and_case(service):
    registered = _register(service)
    typed = "  " + registered.passphrase.upper().replace(" ", "   ") + "\n"
    service.login("jane@example.com", PASSWORD, typed)


def test_login_email_is_case_insensitive(service):
    _register(service)
    service.login("JANE@EXAMPLE.COM", PASSWORD)


def test_wrong_passphrase_is_rejected_even_with_right_password(service):
    _register(service)
    with pytest.raises(InvalidPassphrase) as exc_info:
        service.login("jane@example.com", PASSWORD, "apple " * 23 + "apple")
    assert exc_info.value.message == "Invalid passphrase"


def test_wrong_password_and_unknown_email_are_indistinguishable(service):
    registered = _register(service)

    with pytest.raises(InvalidCredentials) as wrong_password:
        service.login("jane@example.com", "nope", registered.passphrase)
    with pytest.raises(InvalidCredentials) as unknown_email:
        service.login("nobody@example.com", PASSWORD, registered.passphrase)

    assert wrong_password.value.message == unknown_email.value.message == "Invalid email or password"
    assert wrong_password.value.status_code == unknown_email.value.status_code == 401


def test_password_is_checked_before_passphrase(service):
    _register(service)
    with pytest.raises(InvalidCredentials):
        service.login("jane@example.com", "nope", "wrong passphrase")


def test_oversized_password_is_a_credential_failure(service):
    _register(service)
    with pytest.raises(InvalidCredentials):
        service.login("jane@example.com", "x" * 5000)


def test_oversized_passphrase_is_a_passphrase_failure(service):
    _register(service)
    with pytest.raises(InvalidPassphrase):
        service.login("jane@example.com", PASSWORD, "x" * 5000)


@pytest.mark.parametrize("passphrase", [None, ""])
def test_omitted_passphrase_is_skipped(service, passphrase):
    _register(service)
    result = service.login("jane@example.com", PASSWORD, passphrase)
    assert result.user.email == "jane@example.com"


def test_omitted_passphrase_rejected_when_required(db, settings, tokens):
    settings.require_passphrase = True
    service = AuthService(db, settings, tokens)
    registered = _register(service)

    with pytest.raises(InvalidPassphrase):
        service.login("jane@example.com", PASSWORD)
    service.login("jane@example.com", PASSWORD, registered.passphrase)


def test_login_records_last_login(service, db):
    registered = _register(service)
    assert registered.user.last_login is None

    service.login("jane@example.com", PASSWORD)

    db.expire_all()
    assert db.get(User, registered.user.id).last_login is not None


def test_store_failure_surfaces_as_server_error(settings, tokens):
    db = Mock()
    db.query.side_effect = OperationalError("SELECT", {}, Exception("server has gone away"))
    service = AuthService(db, settings, tokens)

    with pytest.raises(ServerError) as exc_info:
        service.login("jane@example.com", PASSWORD)
    assert exc_info.value.status_code == 500
    assert not isinstance(exc_info.value, InvalidCredentials)


def test_corrupt_stored_hash_is_a_server_error(service, db):
    registered = _register(service)
    db.get(User, registered.user.id).password_hash = "garbage"
    db.commit()

    with pytest.raises(ServerError):
        service.login("jane@example.com", PASSWORD)


# ---------------------------------------------------------------------------
# admin
# ---------------------------------------------------------------------------


def test_seed_admin_creates_account_once(db, settings):
    admin, created = seed_admin(db, settings)
    assert created
    assert admin.role == "admin"
    assert admin.email == "admin@zamanix.com"
    assert admin.passphrase_hash is None

    again, created_again = seed_admin(db, settings)
    assert not created_again
    assert again.id == admin.id
    assert db.query(User).filter(User.role == "admin").count() == 1


def test_seed_admin_without_password_does_nothing(db, settings):
    settings.first_admin_password = ""
    assert seed_admin(db, settings) == (None, False)
    assert db.query(User).count() == 0


def test_admin_login_needs_no_passphrase(service, admin, tokens):
    result = service.login("admin@zamanix.com", "zamanix_admin")

    assert result.user.id == admin.id
    claims = tokens.verify(result.token)
    assert claims["role"] == "admin"
    assert claims["sub"] == str(admin.id)


def test_admin_login_ignores_a_supplied_passphrase(service, admin):
    service.login("admin@zamanix.com", "zamanix_admin", "anything at all")


def test_admin_login_with_other_password_fails(service, admin):
    with pytest.raises(InvalidCredentials):
        service.login("admin@zamanix.com", "zamanix_admin2")


def test_admin_login_without_seeded_account_fails(service):
    with pytest.raises(InvalidCredentials):
        service.login("admin@zamanix.com", "zamanix_admin")


def test_admin_skips_passphrase_even_when_required(db, settings, tokens, admin):
    settings.require_passphrase = True
    AuthService(db, settings, tokens).login("admin@zamanix.com", "zamanix_admin")


# ---------------------------------------------------------------------------
# profile
# ---------------------------------------------------------------------------


def test_profile_returns_user(service):
    registered = _register(service)
    assert service.profile(registered.user.id).email == "jane@example.com"


def test_profile_of_unknown_user(service):
    with pytest.raises(UserNotFound):
        service.profile(9999)
