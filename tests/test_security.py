from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest
from jose import jws, jwt

from app.core.exceptions import (
    InvalidSignatureException,
    MalformedTokenException,
    MissingCredentialException,
    TokenExpiredException,
)
from app.core.security import (
    TokenCodec,
    extract_bearer_token,
    get_password_hash,
    resolve_principal,
    verify_password,
)
from app.models.user import UserRole

SECRET = "unit-test-secret"


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, delta):
        self.now += delta


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def codec(clock):
    return TokenCodec(secret_key=SECRET, ttl=timedelta(hours=72), clock=clock)


@pytest.mark.parametrize("user_id,role", [(1, UserRole.USER), (42, UserRole.ADMIN), (10**9, UserRole.USER)])
def test_issue_then_verify_returns_same_identity(codec, user_id, role):
    token = codec.issue(user_id, role)
    assert codec.verify(token) == (user_id, role)


def test_token_carries_expiry_at_issue_plus_ttl(codec, clock):
    token = codec.issue(7, UserRole.USER)
    claims = jwt.get_unverified_claims(token)
    assert claims["exp"] - claims["iat"] == 72 * 3600
    assert claims["iat"] == int(clock.now.timestamp())
    assert claims["role"] == "user"


@pytest.mark.parametrize("elapsed", [timedelta(hours=72), timedelta(hours=72, seconds=1), timedelta(days=365)])
def test_token_expires_after_ttl(codec, clock, elapsed):
    token = codec.issue(7, UserRole.ADMIN)
    clock.advance(elapsed)
    with pytest.raises(TokenExpiredException) as exc_info:
        codec.verify(token)
    assert exc_info.value.error_code == "token_expired"


def test_token_still_valid_just_before_expiry(codec, clock):
    token = codec.issue(7, UserRole.USER)
    clock.advance(timedelta(hours=72) - timedelta(seconds=1))
    assert codec.verify(token) == (7, UserRole.USER)


def test_foreign_signature_is_rejected(codec, clock):
    other = TokenCodec(secret_key="another-secret", clock=clock)
    with pytest.raises(InvalidSignatureException):
        codec.verify(other.issue(7, UserRole.USER))


def test_expired_token_with_foreign_signature_reports_signature(codec, clock):
    other = TokenCodec(secret_key="another-secret", clock=clock)
    token = other.issue(7, UserRole.USER)
    clock.advance(timedelta(days=10))
    with pytest.raises(InvalidSignatureException):
        codec.verify(token)


@pytest.mark.parametrize("token", ["garbage", "a.b.c", "", "...."])
def test_undecodable_token_is_malformed(codec, token):
    with pytest.raises(MalformedTokenException):
        codec.verify(token)


def _signed(claims):
    return jwt.encode(claims, SECRET, algorithm="HS256")


@pytest.mark.parametrize("claims", [
    {"role": "user", "exp": 2_000_000_000},
    {"user_id": 1, "exp": 2_000_000_000},
    {"user_id": 1, "role": "user"},
    {"user_id": "1", "role": "user", "exp": 2_000_000_000},
    {"user_id": True, "role": "user", "exp": 2_000_000_000},
    {"user_id": 0, "role": "user", "exp": 2_000_000_000},
    {"user_id": 1, "role": "superuser", "exp": 2_000_000_000},
    {"user_id": 1, "role": 5, "exp": 2_000_000_000},
])
def test_missing_or_ill_typed_claims_are_malformed(codec, claims):
    with pytest.raises(MalformedTokenException):
        codec.verify(_signed(claims))


@pytest.mark.parametrize("payload", [b"[1, 2, 3]", b"42", b"\"user\"", b"not json", b"\xff\xfe"])
def test_correctly_signed_non_object_payload_is_malformed(codec, payload):
    token = jws.sign(payload, SECRET, algorithm="HS256")
    with pytest.raises(MalformedTokenException):
        codec.verify(token)


def test_disallowed_algorithm_is_invalid_signature(codec):
    token = jwt.encode({"user_id": 1, "role": "user", "exp": 2_000_000_000}, SECRET, algorithm="HS512")
    with pytest.raises(InvalidSignatureException):
        codec.verify(token)


def test_codec_requires_secret():
    with pytest.raises(ValueError):
        TokenCodec(secret_key="")


def test_codec_rejects_non_hmac_algorithm():
    with pytest.raises(ValueError):
        TokenCodec(secret_key=SECRET, algorithm="none")


@pytest.mark.parametrize("header", [None, "", "B", "Bear", "Bearer", "Bearer ", "Bearer    ", "Basic abc", "bearer abc"])
def test_bearer_header_without_token_is_missing_credential(header):
    with pytest.raises(MissingCredentialException):
        extract_bearer_token(header)


def test_bearer_header_is_stripped():
    assert extract_bearer_token("Bearer  abc.def.ghi ") == "abc.def.ghi"


def test_resolve_principal_binds_identity(codec):
    principal = resolve_principal(f"Bearer {codec.issue(3, UserRole.ADMIN)}", codec)
    assert principal.user_id == 3
    assert principal.is_admin


def test_principal_is_immutable(codec):
    principal = resolve_principal(f"Bearer {codec.issue(3, UserRole.USER)}", codec)
    with pytest.raises(FrozenInstanceError):
        principal.role = UserRole.ADMIN


def test_password_hash_roundtrip():
    hashed = get_password_hash("Passw0rd!")
    assert hashed != "Passw0rd!"
    assert verify_password("Passw0rd!", hashed)
    assert not verify_password("wrong", hashed)
