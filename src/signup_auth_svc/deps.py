from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from signup_auth_svc.config import Settings
from signup_auth_svc.directory import UserDirectory
from signup_auth_svc.errors import AuthFailure, AuthHTTPException, FailureKind
from signup_auth_svc.models.base import get_db
from signup_auth_svc.services.auth import AuthService

_bearer = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_service(request: Request, db: Session = Depends(get_db)) -> AuthService:
    """
    Assemble an AuthService around the request's database session and the
    app-wide hasher and token service.
    """
    state = request.app.state
    directory = UserDirectory(db, state.hasher)
    return AuthService(directory, state.hasher, state.tokens)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> str:
    if credentials is None or not credentials.credentials:
        raise AuthHTTPException(
            AuthFailure(FailureKind.UNAUTHENTICATED, "Access token required"),
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials
