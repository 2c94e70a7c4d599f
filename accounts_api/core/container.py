from dataclasses import dataclass

from ..application.services.account_service import AccountService
from .config import Settings
from ..domain.ports.persistence import UserRepository
from ..infrastructure.storage.avatar_store import AvatarStore
from ..services.email_service import EmailService
from ..services.notification_dispatcher import NotificationDispatcher
from ..services.password_hasher import PasswordHasher
from ..services.token_service import TokenService


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    user_repository: UserRepository
    password_hasher: PasswordHasher
    token_service: TokenService
    avatar_store: AvatarStore
    email_service: EmailService
    notifier: NotificationDispatcher
    account_service: AccountService
