"""
Shared fixtures: temp SQLite store, avatar directory, fake mail sink.
"""

import pytest

from accounts_api.application.services.account_service import AccountService, AvatarUpload
from accounts_api.infrastructure.repositories.user_repository import SQLiteUserRepository
from accounts_api.infrastructure.storage.avatar_store import AvatarStore
from accounts_api.services.notification_dispatcher import NotificationDispatcher
from accounts_api.services.password_hasher import PasswordHasher
from accounts_api.services.token_service import TokenService

TEST_SECRET = "test-secret-with-enough-entropy-for-hs256"


class FakeEmailService:
    """Records verification emails instead of sending them."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def send_verification_email(self, to_email, verification_token):
        if self.fail:
            raise ConnectionError("smtp relay unavailable")
        self.sent.append((to_email, verification_token))
        return True


@pytest.fixture
def user_repository(tmp_path):
    return SQLiteUserRepository(tmp_path / "db" / "accounts.db")


@pytest.fixture
def avatar_store(tmp_path):
    return AvatarStore(tmp_path / "public")


@pytest.fixture
def password_hasher():
    # bcrypt's minimum work factor keeps the suite fast.
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service():
    return TokenService(secret_key=TEST_SECRET)


@pytest.fixture
def email_service():
    return FakeEmailService()


@pytest.fixture
def notifier():
    dispatcher = NotificationDispatcher(max_workers=1)
    yield dispatcher
    dispatcher.shutdown()


@pytest.fixture
def account_service(user_repository, password_hasher, token_service, avatar_store, email_service, notifier):
    return AccountService(
        users=user_repository,
        password_hasher=password_hasher,
        token_service=token_service,
        avatar_store=avatar_store,
        email_service=email_service,
        notifier=notifier,
    )


@pytest.fixture
def make_upload(tmp_path):
    """Factory writing a fake image into the temp area."""
    temp_dir = tmp_path / "tmp"
    temp_dir.mkdir(exist_ok=True)

    def _make(filename="avatar.png", content=b"\x89PNG fake image"):
        path = temp_dir / filename
        path.write_bytes(content)
        return AvatarUpload(temp_path=path, filename=filename)

    return _make
