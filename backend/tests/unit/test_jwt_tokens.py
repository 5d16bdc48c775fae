"""Unit tests for bearer token handling."""

from datetime import UTC, datetime

from jose import jwt

from rex_core.auth.jwt import JWTConfig, create_access_token, verify_token


class TestAccessTokens:
    """Test token creation and verification."""

    def test_round_trip(self):
        """Test that a created token verifies to the same subject."""
        config = JWTConfig(secret_key="secret")
        token = create_access_token("uid-1", config)

        data = verify_token(token, config)

        assert data is not None
        assert data.sub == "uid-1"
        assert data.type == "access"
        assert data.exp is not None
        assert data.exp > datetime.now(UTC)

    def test_wrong_secret_is_rejected(self):
        """Test that a token signed with another key is invalid."""
        token = create_access_token("uid-1", JWTConfig(secret_key="one"))

        assert verify_token(token, JWTConfig(secret_key="two")) is None

    def test_expired_token_is_rejected(self):
        """Test that expired tokens are invalid."""
        config = JWTConfig(secret_key="secret", access_token_expire_minutes=-1)
        token = create_access_token("uid-1", config)

        assert verify_token(token, config) is None

    def test_garbage_is_rejected(self):
        """Test that malformed tokens are invalid."""
        assert verify_token("not-a-jwt", JWTConfig(secret_key="secret")) is None

    def test_token_without_subject_is_rejected(self):
        """Test that tokens lacking a subject are invalid."""
        token = jwt.encode({"type": "access"}, "secret", algorithm="HS256")

        assert verify_token(token, JWTConfig(secret_key="secret")) is None

    def test_phone_verified_claim(self):
        """Test that the configured phone verification claim is read."""
        config = JWTConfig(secret_key="secret", phone_verified_claim="phone_number_verified")
        token = create_access_token("uid-1", config, extra_claims={"phone_number_verified": True})

        data = verify_token(token, config)

        assert data is not None
        assert data.phone_verified is True

    def test_issuer_and_audience_are_checked(self):
        """Test issuer and audience validation."""
        config = JWTConfig(secret_key="secret", issuer="https://id.example.com", audience="rex")
        token = create_access_token("uid-1", config)

        assert verify_token(token, config) is not None
        other_audience = JWTConfig(
            secret_key="secret", issuer="https://id.example.com", audience="other"
        )
        assert verify_token(token, other_audience) is None
