from datetime import datetime, timedelta, timezone

from jose import jwt

from taskgate.schemas.user import TokenClaims
from taskgate.security import ALGORITHM, TokenService, get_password_hash, verify_password

SECRET = "test-secret"


def test_password_hash_roundtrip():
    hashed = get_password_hash("s3cr3tPa55!")
    assert hashed != "s3cr3tPa55!"
    assert verify_password("s3cr3tPa55!", hashed)
    assert not verify_password("wrongpassword", hashed)


def test_password_hash_is_salted():
    assert get_password_hash("same-password") != get_password_hash("same-password")


def test_verify_password_with_malformed_hash_is_false():
    assert verify_password("anything", "not-a-bcrypt-hash") is False


def _claims():
    return TokenClaims(id=7, username="alice", email="alice@example.com")


def test_issue_and_verify_token():
    tokens = TokenService(secret_key=SECRET)
    claims = tokens.verify(tokens.issue(_claims()))
    assert claims is not None
    assert (claims.id, claims.username, claims.email) == (7, "alice", "alice@example.com")


def test_token_expires_after_24_hours_by_default():
    tokens = TokenService(secret_key=SECRET, expire_minutes=24 * 60)
    payload = jwt.decode(tokens.issue(_claims()), SECRET, algorithms=[ALGORITHM])
    expected = datetime.now(timezone.utc) + timedelta(hours=24)
    assert abs(payload["exp"] - expected.timestamp()) < 5


def test_expired_token_is_invalid():
    tokens = TokenService(secret_key=SECRET)
    token = tokens.issue(_claims(), expires_delta=timedelta(seconds=-10))
    assert tokens.verify(token) is None


def test_token_signed_with_other_key_is_invalid():
    token = TokenService(secret_key="another-secret").issue(_claims())
    assert TokenService(secret_key=SECRET).verify(token) is None


def test_tampered_token_is_invalid():
    tokens = TokenService(secret_key=SECRET)
    header, payload, signature = tokens.issue(_claims()).split(".")
    forged = jwt.encode({"id": 1, "username": "root", "email": "root@example.com"}, "x", algorithm=ALGORITHM)
    tampered = ".".join([header, forged.split(".")[1], signature])
    assert tokens.verify(tampered) is None


def test_malformed_token_is_invalid():
    assert TokenService(secret_key=SECRET).verify("this.is.not.a.jwt") is None


def test_token_missing_claims_is_invalid():
    exp = datetime.now(timezone.utc) + timedelta(minutes=5)
    token = jwt.encode({"foo": "bar", "exp": exp}, SECRET, algorithm=ALGORITHM)
    assert TokenService(secret_key=SECRET).verify(token) is None


def test_token_without_expiry_is_invalid():
    token = jwt.encode({"id": 1, "username": "a", "email": "a@example.com"}, SECRET, algorithm=ALGORITHM)
    assert TokenService(secret_key=SECRET).verify(token) is None
