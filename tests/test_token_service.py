import base64
import json
from datetime import timedelta

import jwt
import pytest

from accounts_api.domain.errors import InvalidToken
from accounts_api.services.token_service import TokenService

SECRET = "unit-test-secret-with-enough-entropy"


@pytest.fixture
def tokens():
    return TokenService(secret_key=SECRET)


def test_issue_and_verify_round_trip(tokens):
    token = tokens.issue(42)
    claims = tokens.verify(token)

    assert claims.user_id == 42
    assert claims.expires_at - claims.issued_at == timedelta(hours=23)


def test_tokens_issued_back_to_back_differ(tokens):
    assert tokens.issue(1) != tokens.issue(1)


def test_expired_token_is_invalid(tokens):
    token = tokens.issue(7, ttl=timedelta(seconds=-5))

    with pytest.raises(InvalidToken):
        tokens.verify(token)


def test_token_signed_with_other_secret_is_invalid(tokens):
    other = TokenService(secret_key="another-secret-with-enough-entropy")

    with pytest.raises(InvalidToken):
        tokens.verify(other.issue(7))


def test_tampered_token_is_invalid(tokens):
    header, _, signature = tokens.issue(7).split(".")
    forged = base64.urlsafe_b64encode(json.dumps({"id": 8, "exp": 9999999999}).encode()).rstrip(b"=").decode()
    tampered = f"{header}.{forged}.{signature}"

    with pytest.raises(InvalidToken):
        tokens.verify(tampered)


def test_garbage_is_invalid(tokens):
    with pytest.raises(InvalidToken):
        tokens.verify("not.a.token")


def test_token_without_integer_id_is_invalid(tokens):
    token = jwt.encode({"id": "7", "exp": 9999999999}, SECRET, algorithm="HS256")

    with pytest.raises(InvalidToken):
        tokens.verify(token)


def test_empty_secret_is_rejected():
    with pytest.raises(RuntimeError):
        TokenService(secret_key="")
