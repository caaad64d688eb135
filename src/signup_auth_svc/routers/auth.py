import logging

from fastapi import APIRouter, Depends, status

from signup_auth_svc.deps import get_auth_service, get_bearer_token
from signup_auth_svc.errors import AuthFailure, AuthHTTPException, InternalServerError
from signup_auth_svc.ratelimit import rate_limit
from signup_auth_svc.schemas import ApiResponse, LoginRequest, SignupRequest
from signup_auth_svc.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"], dependencies=[Depends(rate_limit("auth"))])


def _auth_envelope(result) -> ApiResponse:
    return ApiResponse(
        success=True,
        message=result.message,
        data={"token": result.token, "user": result.user.model_dump()},
    )


@router.post(
    "/signup",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("signup"))],
)
def signup(request: SignupRequest, auth: AuthService = Depends(get_auth_service)):
    """
    Register a new user and return a session token.

    Returns 201 with {token, user}, 409 when the email is already registered,
    and 400 when the body fails validation.
    """
    try:
        result = auth.signup(request.full_name, request.email, request.password)
        if isinstance(result, AuthFailure):
            raise AuthHTTPException(result)
        return _auth_envelope(result)
    except AuthHTTPException:
        raise
    except Exception as e:
        logging.error(e, exc_info=True)
        raise InternalServerError(str(e))


@router.post("/login", response_model=ApiResponse, response_model_exclude_none=True)
def login(request: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    """
    Authenticate with email and password.

    Returns 200 with {token, user}, or 401 with the same message whether the email is
    unknown or the password is wrong.
    """
    try:
        result = auth.login(request.email, request.password)
        if isinstance(result, AuthFailure):
            raise AuthHTTPException(result)
        return _auth_envelope(result)
    except AuthHTTPException:
        raise
    except Exception as e:
        logging.error(e, exc_info=True)
        raise InternalServerError(str(e))


@router.get("/verify", response_model=ApiResponse, response_model_exclude_none=True)
async def verify(token: str = Depends(get_bearer_token), auth: AuthService = Depends(get_auth_service)):
    """
    Check a bearer token and return the identity embedded in it.
    """
    result = auth.verify(token)
    if isinstance(result, AuthFailure):
        raise AuthHTTPException(result, headers={"WWW-Authenticate": "Bearer"})
    return ApiResponse(success=True, message="Token is valid", data={"user": result.model_dump()})
