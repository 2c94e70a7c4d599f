import pytest

from accounts_api.services.password_hasher import PasswordHasher


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


def test_hash_is_salted(hasher):
    first = hasher.hash("pw123456")
    second = hasher.hash("pw123456")

    assert first != second
    assert hasher.verify("pw123456", first)
    assert hasher.verify("pw123456", second)


def test_wrong_password_returns_false(hasher):
    digest = hasher.hash("pw123456")

    assert hasher.verify("pw1234567", digest) is False


def test_malformed_digest_returns_false(hasher):
    assert hasher.verify("pw123456", "not-a-bcrypt-hash") is False
    assert hasher.verify("pw123456", None) is False


def test_non_string_password_is_rejected(hasher):
    with pytest.raises(TypeError):
        hasher.hash(b"bytes-password")
