import pytest

from accounts_api.core.config import Settings


def test_defaults(monkeypatch):
    for key in ("JWT_SECRET", "JWT_EXPIRATION_HOURS", "BCRYPT_ROUNDS", "CORS_ALLOW_ORIGINS"):
        monkeypatch.delenv(key, raising=False)

    settings = Settings()

    assert settings.jwt_expiration_hours == 23
    assert settings.bcrypt_rounds == 10
    assert settings.cors_allow_origins == ["*"]


def test_cors_origins_are_split(monkeypatch):
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example.com, https://b.example.com,")

    assert Settings().cors_allow_origins == ["https://a.example.com", "https://b.example.com"]


def test_non_integer_value_is_rejected(monkeypatch):
    monkeypatch.setenv("BCRYPT_ROUNDS", "ten")

    with pytest.raises(RuntimeError, match="BCRYPT_ROUNDS"):
        Settings()
