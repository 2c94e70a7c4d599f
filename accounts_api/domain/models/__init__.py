"""Domain models for the accounts application."""

from .subscription import Subscription
from .user import User

__all__ = [
    "Subscription",
    "User",
]
