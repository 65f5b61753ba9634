import pytest
from datetime import datetime, timedelta, timezone

from familyhub.utils.security import (
    InvalidTokenError,
    get_password_hash,
    verify_password,
    issue_access,
    issue_refresh,
    verify_access,
    verify_refresh,
)


@pytest.mark.unit
class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = get_password_hash("secret1")

        assert hashed != "secret1"
        assert verify_password("secret1", hashed)
        assert not verify_password("secret2", hashed)

    def test_uses_bcrypt_cost_10(self):
        hashed = get_password_hash("secret1")

        assert hashed.startswith("$2b$10$")

    def test_hashes_are_salted(self):
        assert get_password_hash("secret1") != get_password_hash("secret1")


@pytest.mark.unit
class TestTokens:
    def test_access_token_carries_subject(self):
        token = issue_access(42)

        claims = verify_access(token)

        assert claims["sub"] == "42"
        assert claims["type"] == "access"

    def test_access_token_lifetime_is_15_minutes(self):
        before = datetime.now(timezone.utc)
        claims = verify_access(issue_access(1))

        expires = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
        assert timedelta(minutes=14) < expires - before <= timedelta(minutes=15, seconds=1)

    def test_refresh_token_returns_identifier_and_expiry(self):
        token, jti, expires_at = issue_refresh(7)

        claims = verify_refresh(token)

        assert claims["sub"] == "7"
        assert claims["jti"] == jti
        assert claims["exp"] == int(expires_at.timestamp())
        remaining = expires_at - datetime.now(timezone.utc)
        assert timedelta(days=6, hours=23) < remaining <= timedelta(days=7)

    def test_each_refresh_token_gets_a_new_identifier(self):
        _, first, _ = issue_refresh(1)
        _, second, _ = issue_refresh(1)

        assert first != second

    def test_refresh_token_is_not_an_access_token(self):
        token, _, _ = issue_refresh(1)

        with pytest.raises(InvalidTokenError):
            verify_access(token)

    def test_access_token_is_not_a_refresh_token(self):
        with pytest.raises(InvalidTokenError):
            verify_refresh(issue_access(1))

    def test_expired_access_token_is_rejected(self):
        token = issue_access(1, expires_delta=timedelta(seconds=-1))

        with pytest.raises(InvalidTokenError):
            verify_access(token)

    def test_expired_refresh_token_is_rejected(self):
        token, _, _ = issue_refresh(1, expires_delta=timedelta(seconds=-1))

        with pytest.raises(InvalidTokenError):
            verify_refresh(token)

    def test_tampered_token_is_rejected(self):
        header, _, signature = issue_access(1).split(".")
        _, forged_payload, _ = issue_access(2).split(".")
        tampered = ".".join([header, forged_payload, signature])

        with pytest.raises(InvalidTokenError):
            verify_access(tampered)

    def test_garbage_is_rejected(self):
        with pytest.raises(InvalidTokenError):
            verify_access("not-a-token")
