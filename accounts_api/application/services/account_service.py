from __future__ import annotations

import hmac
import logging
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from ...domain.errors import Conflict, DuplicateEmailError, InvalidArgument, InvalidToken, NotFound, Unauthorized
from ...domain.models import Subscription, User
from ...domain.ports.persistence import UserRepository
from ...infrastructure.storage.avatar_store import AvatarStore
from ...services.email_service import EmailService
from ...services.gravatar import gravatar_url
from ...services.notification_dispatcher import NotificationDispatcher
from ...services.password_hasher import PasswordHasher
from ...services.token_service import TokenService
from ...services.verification_tokens import generate_verification_token

logger = logging.getLogger(__name__)

# One message for unknown email, wrong password and unverified account.
SIGN_IN_FAILED = "Email or password is wrong."
NOT_AUTHORIZED = "Not authorized"
USER_NOT_FOUND = "User is not found."


@dataclass(frozen=True, slots=True)
class AvatarUpload:
    """An uploaded avatar spooled to the temp area, not yet committed."""

    temp_path: Path
    filename: str


@dataclass(frozen=True, slots=True)
class AuthContext:
    """The caller's identity, resolved from a valid, current session token."""

    user: User
    token: str


@dataclass(frozen=True, slots=True)
class SignInResult:
    token: str
    user: User


class AccountService:
    """Registration, verification, sign-in and profile updates for accounts."""

    def __init__(
        self,
        users: UserRepository,
        password_hasher: PasswordHasher,
        token_service: TokenService,
        avatar_store: AvatarStore,
        email_service: EmailService,
        notifier: NotificationDispatcher,
    ) -> None:
        self._users = users
        self._hasher = password_hasher
        self._tokens = token_service
        self._avatars = avatar_store
        self._email = email_service
        self._notifier = notifier
        # Compared against when the email is unknown so every failed sign-in costs one bcrypt check.
        self._dummy_hash = password_hasher.hash(secrets.token_urlsafe(16))

    # ------------------------------------------------------------------
    def register(self, email: str, password: str, avatar: Optional[AvatarUpload] = None) -> User:
        """
        Create a pending account and send the verification email.

        Args:
            email: Account email, must not be registered yet
            password: Plain text password
            avatar: Optional uploaded avatar; a gravatar URL is used otherwise

        Returns:
            The created user

        Raises:
            Conflict: If the email is already in use
        """
        if self._users.get_by_email(email):
            raise Conflict(f"{email} is already in use")

        password_hash = self._hasher.hash(password)
        verification_token = generate_verification_token()

        avatar_url = gravatar_url(email)
        if avatar is not None:
            avatar_url = self._avatars.commit(avatar.temp_path, avatar.filename)

        try:
            user = self._users.create(
                email=email,
                password_hash=password_hash,
                avatar_url=avatar_url,
                verification_token=verification_token,
            )
        except DuplicateEmailError as exc:
            if avatar is not None:
                self._avatars.remove(avatar_url)
            raise Conflict(f"{email} is already in use") from exc

        logger.info("Registered user %s (%s)", user.email, user.id)
        self._send_verification(user.email, verification_token)
        return user

    def verify_email(self, verification_token: str) -> None:
        if not verification_token or not self._users.mark_verified(verification_token):
            raise NotFound(USER_NOT_FOUND)
        logger.info("Email verification succeeded")

    def resend_verification(self, email: Optional[str]) -> None:
        """Send the verification email again, reusing the stored token."""
        user = self._users.get_by_email(email) if email else None
        if user is None:
            raise InvalidArgument("Missing required field email.")
        if user.verify:
            raise InvalidArgument("Verification has already been passed.")
        self._send_verification(user.email, user.verification_token)

    def sign_in(self, email: str, password: str) -> SignInResult:
        """
        Check credentials and issue a new session token.

        The new token replaces any previous one, which stops authenticating.

        Raises:
            Unauthorized: Unknown email, wrong password or unverified email
        """
        user = self._users.get_by_email(email)
        if user is None:
            self._hasher.verify(password, self._dummy_hash)
            raise Unauthorized(SIGN_IN_FAILED)
        if not self._hasher.verify(password, user.password_hash):
            raise Unauthorized(SIGN_IN_FAILED)
        if not user.verify:
            raise Unauthorized(SIGN_IN_FAILED)

        token = self._tokens.issue(user.id)
        self._users.set_session_token(user.id, token)
        user.token = token
        logger.info("Sign in: %s (%s)", user.email, user.id)
        return SignInResult(token=token, user=user)

    def authenticate(self, token: Optional[str]) -> AuthContext:
        """Resolve a bearer token to the user it currently belongs to."""
        if not token:
            raise Unauthorized(NOT_AUTHORIZED)
        try:
            claims = self._tokens.verify(token)
        except InvalidToken as exc:
            raise Unauthorized(NOT_AUTHORIZED) from exc

        user = self._users.get_by_id(claims.user_id)
        if user is None or not user.token or not hmac.compare_digest(user.token, token):
            raise Unauthorized(NOT_AUTHORIZED)
        return AuthContext(user=user, token=token)

    def get_current(self, context: AuthContext) -> Dict[str, Any]:
        return {
            "email": context.user.email,
            "subscription": context.user.subscription.value,
        }

    def sign_out(self, context: AuthContext) -> None:
        if not self._users.clear_session_token(context.token):
            raise NotFound(USER_NOT_FOUND)
        logger.info("Sign out: %s (%s)", context.user.email, context.user.id)

    def update_subscription(self, context: AuthContext, subscription: Optional[str]) -> User:
        tier = Subscription.parse(subscription)
        if tier is None:
            raise InvalidArgument("Invalid subscription type")

        user = self._users.update_subscription_by_token(context.token, tier)
        if user is None:
            raise NotFound(USER_NOT_FOUND)
        return user

    def update_avatar(self, context: AuthContext, avatar: Optional[AvatarUpload] = None) -> str:
        """
        Replace the caller's avatar.

        The new file is committed and referenced before the previous local
        file is removed, so a failure part way through leaves at worst an
        orphaned old file.

        Returns:
            The avatar URL now stored on the record
        """
        if avatar is None:
            user = self._users.get_by_session_token(context.token)
            if user is None:
                raise NotFound(USER_NOT_FOUND)
            return user.avatar_url

        previous_url = context.user.avatar_url
        avatar_url = self._avatars.commit(avatar.temp_path, avatar.filename)

        user = self._users.update_avatar_by_token(context.token, avatar_url)
        if user is None:
            self._avatars.remove(avatar_url)
            raise NotFound(USER_NOT_FOUND)

        if previous_url and previous_url != avatar_url and self._avatars.is_local(previous_url):
            self._avatars.remove(previous_url)
        return user.avatar_url

    def _send_verification(self, email: str, verification_token: Optional[str]) -> None:
        self._notifier.dispatch(self._email.send_verification_email, email, verification_token)
