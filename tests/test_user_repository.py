import pytest

from accounts_api.domain.errors import DuplicateEmailError
from accounts_api.domain.models import Subscription


def _create(repo, email="alice@example.com", token="verify-token"):
    return repo.create(
        email=email,
        password_hash="hash",
        avatar_url="https://www.gravatar.com/avatar/abc",
        verification_token=token,
    )


def test_create_defaults(user_repository):
    user = _create(user_repository)

    stored = user_repository.get_by_id(user.id)
    assert stored.email == "alice@example.com"
    assert stored.subscription is Subscription.STARTER
    assert stored.verify is False
    assert stored.verification_token == "verify-token"
    assert stored.token is None


def test_duplicate_email_is_rejected_by_store(user_repository):
    _create(user_repository)

    with pytest.raises(DuplicateEmailError):
        _create(user_repository, token="other-token")


def test_email_lookup_is_case_sensitive(user_repository):
    _create(user_repository)

    assert user_repository.get_by_email("Alice@example.com") is None


def test_mark_verified_is_single_use(user_repository):
    user = _create(user_repository)

    assert user_repository.mark_verified("verify-token") is True
    assert user_repository.mark_verified("verify-token") is False

    stored = user_repository.get_by_id(user.id)
    assert stored.verify is True
    assert stored.verification_token is None


def test_session_token_rotation_and_clear(user_repository):
    user = _create(user_repository)

    user_repository.set_session_token(user.id, "t1")
    user_repository.set_session_token(user.id, "t2")

    assert user_repository.get_by_session_token("t1") is None
    assert user_repository.get_by_session_token("t2").id == user.id
    assert user_repository.clear_session_token("t1") is False
    assert user_repository.clear_session_token("t2") is True
    assert user_repository.get_by_id(user.id).token is None


def test_update_by_token_misses_when_token_not_current(user_repository):
    user = _create(user_repository)
    user_repository.set_session_token(user.id, "current")

    assert user_repository.update_subscription_by_token("stale", Subscription.PRO) is None
    assert user_repository.update_avatar_by_token("stale", "avatars/x.png") is None

    updated = user_repository.update_subscription_by_token("current", Subscription.BUSINESS)
    assert updated.subscription is Subscription.BUSINESS

    updated = user_repository.update_avatar_by_token("current", "avatars/x.png")
    assert updated.avatar_url == "avatars/x.png"
