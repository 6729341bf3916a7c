"""Unit tests for JWTProvider."""

import jwt

from taskhub.infrastructure.auth.jwt_provider import JWTProvider

SECRET = "test-secret-that-is-long-enough-for-hs256"


def test_round_trip_user_id_claim() -> None:
    provider = JWTProvider(SECRET)
    token = provider.encode_token("abc", email="a@example.com", username="alice")
    user = provider.decode_token(token)
    assert user.user_id == "abc"
    assert user.email == "a@example.com"
    assert user.username == "alice"


def test_sub_claim_fallback() -> None:
    token = jwt.encode({"sub": "from-sub"}, SECRET, algorithm="HS256")
    assert JWTProvider(SECRET).decode_token(token).user_id == "from-sub"


def test_wrong_secret_rejected() -> None:
    token = JWTProvider("another-secret-that-is-long-enough").encode_token("abc")
    assert JWTProvider(SECRET).decode_token(token) is None


def test_missing_user_claim_rejected() -> None:
    token = jwt.encode({"email": "a@example.com"}, SECRET, algorithm="HS256")
    assert JWTProvider(SECRET).decode_token(token) is None


def test_garbage_and_empty_secret_rejected() -> None:
    assert JWTProvider(SECRET).decode_token("not.a.token") is None
    assert JWTProvider("").decode_token(JWTProvider(SECRET).encode_token("abc")) is None


def test_user_id_normalised_to_lowercase() -> None:
    token = JWTProvider(SECRET).encode_token("65A1F0C2B3D4E5F60718293A")
    assert JWTProvider(SECRET).decode_token(token).user_id == "65a1f0c2b3d4e5f60718293a"
