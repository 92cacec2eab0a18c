"""Unit tests for signing primitives."""

import jwt
import pytest

from speaker_tokens.core import (
    SIGNING_ALGORITHM,
    effective_secret,
    sign,
    unverified_claims,
    verify_signature,
)

SECRET = "signing-secret-long-enough-for-hs256"
OTHER_SECRET = "another-secret-long-enough-for-hs256"


class TestEffectiveSecret:
    """Tests for signing material composition."""

    def test_concatenation_order(self) -> None:
        assert effective_secret("shared", 2, "key") == "shared2key"


class TestSignAndVerify:
    """Tests for sign and verify_signature."""

    def test_round_trip(self) -> None:
        token = sign({"serviceToken": "svc", "iat": 10, "exp": 20}, SECRET)

        assert jwt.get_unverified_header(token)["alg"] == SIGNING_ALGORITHM
        assert verify_signature(token, SECRET) == {"serviceToken": "svc", "iat": 10, "exp": 20}

    def test_expired_claims_not_checked(self) -> None:
        """Expiry is left to the caller's clock."""
        token = sign({"iat": 1, "exp": 2}, SECRET)
        assert verify_signature(token, SECRET)["exp"] == 2

    def test_wrong_secret(self) -> None:
        token = sign({"iat": 1, "exp": 2}, SECRET)
        with pytest.raises(jwt.exceptions.InvalidSignatureError):
            verify_signature(token, OTHER_SECRET)

    def test_required_claims(self) -> None:
        token = sign({"serviceToken": "svc"}, SECRET)
        with pytest.raises(jwt.exceptions.MissingRequiredClaimError):
            verify_signature(token, SECRET)


class TestUnverifiedClaims:
    """Tests for diagnostic claim reading."""

    def test_reads_without_secret(self) -> None:
        token = sign({"ver": 2, "iat": 1, "exp": 2}, SECRET)
        assert unverified_claims(token) == {"ver": 2, "iat": 1, "exp": 2}

    def test_garbage_gives_none(self) -> None:
        assert unverified_claims("not.a.jwt") is None
