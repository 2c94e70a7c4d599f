from __future__ import annotations

from typing import Optional, Protocol

from ..models import Subscription, User


class UserRepository(Protocol):
    """Abstract user directory.

    Lookups are by unique field. Mutations that depend on the caller's session
    are expressed as update-by-filter operations that report whether a record
    matched, so a concurrent sign-out turns them into a miss instead of a
    silent success.
    """

    def create(
        self,
        email: str,
        password_hash: str,
        avatar_url: str,
        verification_token: str,
    ) -> User:
        """Insert a pending user; raises ``DuplicateEmailError`` if the email exists."""
        ...

    def get_by_id(self, user_id: int) -> Optional[User]:
        ...

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def get_by_verification_token(self, token: str) -> Optional[User]:
        ...

    def get_by_session_token(self, token: str) -> Optional[User]:
        ...

    def mark_verified(self, verification_token: str) -> bool:
        """Set ``verify`` and clear the token on the record still holding it."""
        ...

    def set_session_token(self, user_id: int, token: str) -> None:
        ...

    def clear_session_token(self, token: str) -> bool:
        ...

    def update_subscription_by_token(self, token: str, subscription: Subscription) -> Optional[User]:
        ...

    def update_avatar_by_token(self, token: str, avatar_url: str) -> Optional[User]:
        ...
