# tests/test_identity.py
from datetime import timedelta

import pytest

from saconnect import models
from saconnect.auth import get_password_hash, pwd_context, verify_password
from saconnect.errors import Conflict, InvalidOrExpired, Unauthorized, ValidationError
from saconnect.services import IdentityService


@pytest.fixture
def identity(db_session):
    return IdentityService(db_session, admin_emails={"admin@example.com"})


def test_create_account(identity):
    """
    Тест створення облікового запису.
    """
    user = identity.create_account("test@example.com", "secret123", "Test Family")
    assert user.email == "test@example.com"
    assert user.family_name == "Test Family"
    assert user.role == "user"
    assert user.password_hash != "secret123"
    assert verify_password("secret123", user.password_hash)


def test_create_account_duplicate_email(identity):
    identity.create_account("dup@example.com", "secret123", "First")
    with pytest.raises(Conflict):
        identity.create_account("dup@example.com", "other-pass", "Second")


def test_email_match_is_case_sensitive(identity):
    identity.create_account("case@example.com", "secret123", "Lower")
    user = identity.create_account("Case@example.com", "secret123", "Upper")
    assert user.email == "Case@example.com"


def test_create_account_requires_fields(identity):
    with pytest.raises(ValidationError):
        identity.create_account("x@example.com", "", "Family")
    with pytest.raises(ValidationError):
        identity.create_account("x@example.com", "secret123", "")


def test_admin_email_gets_admin_role(identity):
    user = identity.create_account("admin@example.com", "secret123", "Moderators")
    assert user.role == "admin"
    assert user.is_admin


def test_password_hash_and_verify():
    """
    Тест хешування та перевірки пароля.
    """
    password = "secret"
    hashed = get_password_hash(password)
    assert verify_password(password, hashed)
    assert not verify_password("wrong", hashed)


def test_bcrypt_cost_is_at_least_ten():
    hashed = get_password_hash("secret")
    assert pwd_context.identify(hashed) == "bcrypt"
    # $2b$<rounds>$...
    assert int(hashed.split("$")[2]) >= 10


def test_verify_credentials(identity):
    identity.create_account("login@example.com", "secret123", "Login")
    user = identity.verify_credentials("login@example.com", "secret123")
    assert user.email == "login@example.com"


def test_verify_credentials_same_error_for_both_failures(identity):
    identity.create_account("login@example.com", "secret123", "Login")
    with pytest.raises(Unauthorized) as wrong_password:
        identity.verify_credentials("login@example.com", "nope")
    with pytest.raises(Unauthorized) as unknown_email:
        identity.verify_credentials("ghost@example.com", "secret123")
    assert wrong_password.value.message == unknown_email.value.message


def test_issue_reset_token_unknown_email_is_noop(identity, db_session):
    assert identity.issue_reset_token("ghost@example.com") is None
    assert db_session.query(models.PasswordResetToken).count() == 0


def test_issue_reset_token_six_digits_and_fifteen_minutes(identity, db_session):
    identity.create_account("reset@example.com", "secret123", "Reset")
    before = models.utcnow()
    token = identity.issue_reset_token("reset@example.com")
    assert len(token) == 6 and token.isdigit()

    row = db_session.query(models.PasswordResetToken).one()
    assert row.used is False
    delta = row.expires_at - before
    assert timedelta(minutes=14, seconds=59) <= delta <= timedelta(minutes=15, seconds=5)


def test_consume_reset_token_once(identity):
    """
    Код можна використати лише один раз.
    """
    identity.create_account("reset@example.com", "secret123", "Reset")
    token = identity.issue_reset_token("reset@example.com")

    assert identity.verify_reset_token("reset@example.com", token)
    identity.consume_reset_token("reset@example.com", token, "new-password")

    assert identity.verify_credentials("reset@example.com", "new-password")
    with pytest.raises(Unauthorized):
        identity.verify_credentials("reset@example.com", "secret123")
    with pytest.raises(InvalidOrExpired):
        identity.consume_reset_token("reset@example.com", token, "another-password")
    with pytest.raises(InvalidOrExpired):
        identity.verify_reset_token("reset@example.com", token)


def test_expired_reset_token_fails(identity, db_session):
    identity.create_account("reset@example.com", "secret123", "Reset")
    token = identity.issue_reset_token("reset@example.com")

    row = db_session.query(models.PasswordResetToken).one()
    row.expires_at = models.utcnow() - timedelta(seconds=1)
    db_session.commit()

    with pytest.raises(InvalidOrExpired):
        identity.verify_reset_token("reset@example.com", token)
    with pytest.raises(InvalidOrExpired):
        identity.consume_reset_token("reset@example.com", token, "new-password")


def test_wrong_reset_token_fails(identity):
    identity.create_account("reset@example.com", "secret123", "Reset")
    token = identity.issue_reset_token("reset@example.com")
    wrong = "000000" if token != "000000" else "111111"
    with pytest.raises(InvalidOrExpired):
        identity.verify_reset_token("reset@example.com", wrong)
    with pytest.raises(InvalidOrExpired):
        identity.verify_reset_token("ghost@example.com", token)


def test_reset_requires_long_password(identity):
    identity.create_account("reset@example.com", "secret123", "Reset")
    token = identity.issue_reset_token("reset@example.com")
    with pytest.raises(ValidationError):
        identity.consume_reset_token("reset@example.com", token, "short")
    # Код не витрачено
    assert identity.verify_reset_token("reset@example.com", token)


def test_multiple_tokens_each_valid_until_used(identity, monkeypatch):
    codes = iter(["123456", "654321"])
    monkeypatch.setattr("saconnect.services.identity.generate_reset_code", lambda: next(codes))
    identity.create_account("reset@example.com", "secret123", "Reset")
    first = identity.issue_reset_token("reset@example.com")
    second = identity.issue_reset_token("reset@example.com")
    assert (first, second) == ("123456", "654321")
    identity.consume_reset_token("reset@example.com", second, "new-password")
    assert identity.verify_reset_token("reset@example.com", first)


def test_racing_signup_becomes_conflict(identity, session_factory, db_session):
    identity.create_account("race@example.com", "secret123", "First")

    other_db = session_factory()
    try:
        racing = IdentityService(other_db)
        racing.get_user_by_email = lambda email: None
        with pytest.raises(Conflict):
            racing.create_account("race@example.com", "secret123", "Second")
    finally:
        other_db.close()
    assert db_session.query(models.User).filter(models.User.email == "race@example.com").count() == 1
