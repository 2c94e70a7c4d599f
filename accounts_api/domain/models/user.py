"""User domain model for account authentication."""

from datetime import datetime
from typing import Any, Dict, Optional

from .subscription import Subscription


class User:
    """
    User entity owned by the user directory.

    Attributes:
        id: Unique identifier assigned by the store
        email: User email address (unique, case-sensitive as stored)
        password_hash: bcrypt digest of the password
        subscription: Current subscription tier
        avatar_url: Remote gravatar URL or local public path of the avatar
        verify: Whether the email address has been verified
        verification_token: One-time email verification token, None once verified
        token: Current session token, None while signed out
        created_at: Account creation timestamp
        updated_at: Last update timestamp
    """

    def __init__(
        self,
        id: int,
        email: str,
        password_hash: str,
        subscription: Subscription = Subscription.STARTER,
        avatar_url: str = "",
        verify: bool = False,
        verification_token: Optional[str] = None,
        token: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.email = email
        self.password_hash = password_hash
        self.subscription = subscription
        self.avatar_url = avatar_url
        self.verify = verify
        self.verification_token = verification_token
        self.token = token
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()

    def to_public_dict(self) -> Dict[str, Any]:
        """Serialise the record for API responses, without the password hash."""
        return {
            "id": self.id,
            "email": self.email,
            "subscription": self.subscription.value,
            "avatarURL": self.avatar_url,
            "verify": self.verify,
            "token": self.token,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} verified={self.verify}>"
