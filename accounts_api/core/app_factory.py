from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..application.services.account_service import AccountService
from ..domain.errors import AccountError
from ..infrastructure.repositories.user_repository import SQLiteUserRepository
from ..infrastructure.storage.avatar_store import AVATARS_DIRNAME, AvatarStore
from ..presentation.api.routers import auth as auth_router
from ..services.email_service import EmailService
from ..services.notification_dispatcher import NotificationDispatcher
from ..services.password_hasher import PasswordHasher
from ..services.token_service import TokenService

logger = logging.getLogger(__name__)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title="Accounts API", lifespan=_create_lifespan(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router.router)
    app.mount(
        f"/{AVATARS_DIRNAME}",
        StaticFiles(directory=settings.public_dir / AVATARS_DIRNAME, check_dir=False),
        name=AVATARS_DIRNAME,
    )
    _register_exception_handlers(app)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"ok": True}

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AccountError)
    async def account_error_handler(request: Request, exc: AccountError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"message": _validation_message(exc)})


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def build_container(settings: Settings) -> ApplicationContainer:
    user_repository = SQLiteUserRepository(settings.database_path)
    password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    token_service = TokenService(
        secret_key=settings.jwt_secret,
        expiration_hours=settings.jwt_expiration_hours,
    )
    avatar_store = AvatarStore(settings.public_dir)
    email_service = EmailService(
        base_url=settings.base_url,
        smtp_host=settings.smtp_host,
        smtp_port=settings.smtp_port,
        smtp_username=settings.smtp_username,
        smtp_password=settings.smtp_password,
        from_email=settings.smtp_from_email,
        from_name=settings.smtp_from_name,
    )
    notifier = NotificationDispatcher(max_workers=settings.email_worker_count)
    account_service = AccountService(
        users=user_repository,
        password_hasher=password_hasher,
        token_service=token_service,
        avatar_store=avatar_store,
        email_service=email_service,
        notifier=notifier,
    )
    return ApplicationContainer(
        settings=settings,
        user_repository=user_repository,
        password_hasher=password_hasher,
        token_service=token_service,
        avatar_store=avatar_store,
        email_service=email_service,
        notifier=notifier,
        account_service=account_service,
    )


def _create_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        settings.temp_dir.mkdir(parents=True, exist_ok=True)
        container = build_container(settings)
        app.state.container = container  # type: ignore[attr-defined]
        logger.info("Accounts API ready (database %s)", settings.database_path)

        try:
            yield
        finally:
            container.notifier.shutdown()

    return lifespan
