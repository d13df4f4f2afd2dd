from datetime import timedelta

import pytest
from jose import jwt

from mindspace.backend.core import security
from mindspace.backend.core.config import settings
from mindspace.backend.core.tokens import (
    InvalidToken,
    create_access_token,
    decode_access_token,
    new_session_id,
    user_id_from_claims,
    verify_access_token,
)


def test_access_token_round_trip():
    token = create_access_token(42, "alice01")
    claims = verify_access_token(token)

    assert user_id_from_claims(claims) == 42
    assert claims["username"] == "alice01"
    assert claims["typ"] == "access"
    assert claims["exp"] - claims["iat"] == settings.jwt_expire_days * 24 * 3600


def test_expired_token_is_rejected():
    token = create_access_token(1, "alice01", expires_delta=timedelta(seconds=-5))

    with pytest.raises(InvalidToken):
        verify_access_token(token)
    assert decode_access_token(token) is None


def test_tampered_token_is_rejected():
    token = create_access_token(1, "alice01")
    forged = jwt.encode(
        jwt.get_unverified_claims(token) | {"sub": "2"},
        "some-other-secret",
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(InvalidToken):
        verify_access_token(forged)


def test_token_with_wrong_type_is_rejected():
    token = jwt.encode(
        {"sub": "1", "typ": "refresh"},
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(InvalidToken, match="type"):
        verify_access_token(token)


def test_garbage_token_is_rejected():
    assert decode_access_token("not-a-jwt") is None


def test_session_ids_are_unique():
    assert new_session_id() != new_session_id()


def test_password_hash_verifies_and_hides_plaintext():
    hashed = security.hash_password("Abc123")

    assert hashed != "Abc123"
    assert security.verify_password("Abc123", hashed)
    assert not security.verify_password("abc123", hashed)
    assert not security.verify_password("Abc123", "not-a-hash")


@pytest.mark.parametrize(
    ("password", "ok"),
    [
        ("Abc123", True),
        ("Ab1", False),
        ("abcdef1", False),
        ("ABCDEF1", False),
        ("Abcdefg", False),
    ],
)
def test_password_rule(password, ok):
    assert (security.password_problem(password) is None) is ok


@pytest.mark.parametrize(
    ("username", "ok"),
    [
        ("alice_01", True),
        ("ab", False),
        ("a" * 51, False),
        ("bad name", False),
        ("dash-name", False),
    ],
)
def test_username_rule(username, ok):
    assert (security.username_problem(username) is None) is ok


def test_email_rule():
    assert security.email_problem("a@x.com") is None
    assert security.email_problem("not-an-email") is not None
    assert security.email_problem("a" * 95 + "@x.com") is not None
