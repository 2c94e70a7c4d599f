"""API router for account authentication and profile management."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Request, Response, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.datastructures import UploadFile as StarletteUploadFile

from ....application.services.account_service import AccountService, AuthContext
from ....core.config import Settings
from ....core.dependencies import get_account_service, get_settings
from ...api.dependencies import require_auth_context
from ...api.schemas.auth import (
    AvatarResponse,
    CurrentUserResponse,
    MessageResponse,
    ResendVerificationPayload,
    SignInPayload,
    SignInResponse,
    SignupPayload,
    SignupResponse,
    SubscriptionPayload,
)
from ...api.uploads import discard_upload, spool_upload

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    request: Request,
    account_service: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_settings),
) -> SignupResponse:
    """Register a new account from a multipart form or a JSON body."""
    if _is_json(request):
        payload = _parse_signup(await _read_json(request))
        user = await run_in_threadpool(account_service.register, email=payload.email, password=payload.password)
    else:
        async with request.form() as form:
            payload = _parse_signup({"email": form.get("email"), "password": form.get("password")})
            avatar = form.get("avatar")
            upload = await run_in_threadpool(
                spool_upload, avatar if isinstance(avatar, StarletteUploadFile) else None, settings.temp_dir
            )
        try:
            user = await run_in_threadpool(
                account_service.register, email=payload.email, password=payload.password, avatar=upload
            )
        finally:
            discard_upload(upload)

    return SignupResponse(
        email=user.email,
        subscription=user.subscription.value,
        avatar_url=user.avatar_url,
    )


def _is_json(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower() == "application/json"


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as exc:
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ("body",), "msg": "Invalid JSON body", "input": None}]
        ) from exc


def _parse_signup(data: Any) -> SignupPayload:
    try:
        return SignupPayload.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationError(
            [{**error, "loc": ("body", *error["loc"])} for error in exc.errors()]
        ) from exc


@router.get("/verify/{verification_token}", response_model=MessageResponse)
def verify(
    verification_token: str,
    account_service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    account_service.verify_email(verification_token)
    return MessageResponse(message="Verification is successful.")


@router.post("/verify", response_model=MessageResponse)
def resend_verification(
    payload: ResendVerificationPayload,
    account_service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    account_service.resend_verification(payload.email)
    return MessageResponse(message="Verification email has been sent.")


@router.post("/signin", response_model=SignInResponse)
def signin(
    payload: SignInPayload,
    account_service: AccountService = Depends(get_account_service),
) -> SignInResponse:
    """Sign in and get a session token."""
    result = account_service.sign_in(payload.email, payload.password)
    return SignInResponse(
        token=result.token,
        email=result.user.email,
        subscription=result.user.subscription.value,
    )


@router.get("/current", response_model=CurrentUserResponse)
def current(
    context: AuthContext = Depends(require_auth_context),
    account_service: AccountService = Depends(get_account_service),
) -> CurrentUserResponse:
    return CurrentUserResponse(**account_service.get_current(context))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    context: AuthContext = Depends(require_auth_context),
    account_service: AccountService = Depends(get_account_service),
) -> Response:
    account_service.sign_out(context)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/subscription")
def update_subscription(
    payload: SubscriptionPayload,
    context: AuthContext = Depends(require_auth_context),
    account_service: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    user = account_service.update_subscription(context, payload.subscription)
    return user.to_public_dict()


@router.patch("/avatar", response_model=AvatarResponse)
def update_avatar(
    avatar: Optional[UploadFile] = File(None),
    context: AuthContext = Depends(require_auth_context),
    account_service: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_settings),
) -> AvatarResponse:
    upload = spool_upload(avatar, settings.temp_dir)
    try:
        avatar_url = account_service.update_avatar(context, upload)
    finally:
        discard_upload(upload)
    return AvatarResponse(avatar_url=avatar_url)
