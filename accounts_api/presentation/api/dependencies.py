from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...application.services.account_service import AccountService, AuthContext
from ...core.dependencies import get_account_service

_bearer_scheme = HTTPBearer(auto_error=False)


def require_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    account_service: AccountService = Depends(get_account_service),
) -> AuthContext:
    token = None
    if credentials is not None and credentials.scheme.lower() == "bearer":
        token = credentials.credentials
    return account_service.authenticate(token)
