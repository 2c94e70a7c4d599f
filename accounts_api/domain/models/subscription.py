"""Subscription tiers available to accounts."""

from enum import Enum
from typing import Optional


class Subscription(str, Enum):
    """Self-service subscription tier stored on the user record."""

    STARTER = "starter"
    PRO = "pro"
    BUSINESS = "business"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Subscription"]:
        """Return the matching tier, or None when the value is not a known tier."""
        try:
            return cls(value)
        except ValueError:
            return None
