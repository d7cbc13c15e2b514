"""Tests for session token encoding."""

import base64
import json
from datetime import timedelta

import pytest
from jose import jwt

from zerah.core.modules.session.codec import ALGORITHM, SessionCodec
from zerah.core.modules.session.models import SessionPayload, TokenStatus
from zerah.utils import now

SECRET = "codec-test-secret"


@pytest.fixture
def codec():
    return SessionCodec(SECRET)


def make_payload(user_id: str = "42", expires_in: timedelta = timedelta(days=7)) -> SessionPayload:
    return SessionPayload(user_id=user_id, email="user@example.com", expires_at=now() + expires_in)


class TestEncryptDecrypt:
    """Tests for valid tokens."""

    def test_valid_token_decrypts_to_payload(self, codec):
        """Test that a fresh token yields its user id, email and expiry."""
        payload = make_payload()
        decrypted = codec.decrypt(codec.encrypt(payload))

        assert decrypted is not None
        assert decrypted.user_id == "42"
        assert decrypted.email == "user@example.com"
        assert decrypted.expires_at == payload.expires_at

    def test_encrypt_is_deterministic(self, codec):
        """Test that the same payload always produces the same token."""
        payload = make_payload()
        assert codec.encrypt(payload) == codec.encrypt(payload)

    def test_email_is_optional(self, codec):
        """Test that a payload without email round-trips with email None."""
        payload = SessionPayload(user_id="7", expires_at=now() + timedelta(hours=1))
        decrypted = codec.decrypt(codec.encrypt(payload))

        assert decrypted is not None
        assert decrypted.email is None

    def test_empty_secret_rejected(self):
        """Test that a codec cannot be built without a key."""
        with pytest.raises(ValueError, match="must not be empty"):
            SessionCodec("")


class TestRejectedTokens:
    """Tests that every bad token collapses to no session."""

    @pytest.mark.parametrize("token", [None, ""])
    def test_missing_token(self, codec, token):
        """Test that absent cookies are reported as missing, not invalid."""
        assert codec.decode(token).status == TokenStatus.MISSING
        assert codec.decrypt(token) is None

    def test_expired_token(self, codec):
        """Test that a structurally valid token expired one second ago is rejected."""
        token = codec.encrypt(make_payload(expires_in=timedelta(seconds=-1)))

        assert codec.decode(token).status == TokenStatus.EXPIRED
        assert codec.decrypt(token) is None

    def test_expires_at_claim_is_authoritative(self, codec):
        """Test that expires_at in the past wins over a future exp claim."""
        claims = {
            "sub": "42",
            "expires_at": (now() - timedelta(seconds=1)).isoformat(),
            "exp": int((now() + timedelta(days=1)).timestamp()),
        }
        token = jwt.encode(claims, SECRET, algorithm=ALGORITHM)

        assert codec.decode(token).status == TokenStatus.EXPIRED

    def test_wrong_key(self, codec):
        """Test that tokens signed with another key are rejected."""
        token = SessionCodec("another-secret").encrypt(make_payload())

        assert codec.decode(token).status == TokenStatus.INVALID
        assert codec.decrypt(token) is None

    def test_tampered_claims(self, codec):
        """Test that swapping the claims segment breaks the signature."""
        header, _, signature = codec.encrypt(make_payload(user_id="42")).split(".")
        forged_claims = {
            "sub": "1",
            "expires_at": (now() + timedelta(days=7)).isoformat(),
            "exp": int((now() + timedelta(days=7)).timestamp()),
        }
        forged = base64.urlsafe_b64encode(json.dumps(forged_claims).encode()).rstrip(b"=").decode()
        token = f"{header}.{forged}.{signature}"

        assert codec.decode(token).status == TokenStatus.INVALID
        assert codec.decrypt(token) is None

    @pytest.mark.parametrize("token", ["not-a-token", "a.b.c", "...", "eyJhbGciOiJIUzI1NiJ9"])
    def test_malformed_token(self, codec, token):
        """Test that garbage cookie values are invalid, never an exception."""
        assert codec.decode(token).status == TokenStatus.INVALID
        assert codec.decrypt(token) is None

    def test_missing_claims(self, codec):
        """Test that a correctly signed token without expires_at is invalid."""
        token = jwt.encode({"sub": "42"}, SECRET, algorithm=ALGORITHM)

        assert codec.decode(token).status == TokenStatus.INVALID

    def test_expiry_without_offset_is_invalid(self, codec):
        """Test that a signed token whose expires_at has no UTC offset is invalid, not an error."""
        token = jwt.encode({"sub": "1", "expires_at": "2999-01-01T00:00:00"}, SECRET, algorithm=ALGORITHM)

        assert codec.decode(token).status == TokenStatus.INVALID
        assert codec.decrypt(token) is None

    def test_other_algorithm_rejected(self, codec):
        """Test that tokens signed with a different HMAC algorithm are rejected."""
        claims = {"sub": "42", "expires_at": (now() + timedelta(days=1)).isoformat()}
        token = jwt.encode(claims, SECRET, algorithm="HS512")

        assert codec.decode(token).status == TokenStatus.INVALID
