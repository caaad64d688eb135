import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from signup_auth_svc.config import Settings
from signup_auth_svc.errors import AuthHTTPException, InternalServerError
from signup_auth_svc.models.base import create_db_engine, create_session_factory, init_db
from signup_auth_svc.ratelimit import default_limiters, rate_limit
from signup_auth_svc.routers.auth import router as auth_router
from signup_auth_svc.routers.health import router as health_router, utc_timestamp
from signup_auth_svc.schemas import ApiResponse
from signup_auth_svc.security.passwords import PasswordHasher
from signup_auth_svc.security.tokens import TokenService

API_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _error_body(message: str, error: Optional[str] = None) -> dict:
    return ApiResponse(success=False, message=message, error=error).model_dump(exclude_none=True)


def _validation_detail(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Validation failed"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    msg = first.get("msg", "Invalid value")
    return f"{loc[-1]}: {msg}" if loc else msg


def register_exception_handlers(app: FastAPI) -> None:
    settings: Settings = app.state.settings

    @app.exception_handler(AuthHTTPException)
    async def auth_failure_handler(request: Request, exc: AuthHTTPException):
        return JSONResponse(
            status_code=exc.failure.status_code,
            content=_error_body(exc.failure.message),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body("Validation failed", _validation_detail(exc)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(InternalServerError)
    async def internal_error_handler(request: Request, exc: InternalServerError):
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("Internal server error", exc.detail if settings.is_development else None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("Internal server error", str(exc) if settings.is_development else None),
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application and everything it owns: database engine, session factory,
    password hasher, token service and rate limiters all live on app.state.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(app.state.engine)
        logger.info("Database ready, serving API under %s", settings.api_prefix)
        yield
        app.state.engine.dispose()
        logger.info("Database connection closed")

    app = FastAPI(title="Sign-Up API", version=API_VERSION, lifespan=lifespan)

    app.state.settings = settings
    app.state.engine = create_db_engine(settings.database_url)
    app.state.session_factory = create_session_factory(app.state.engine)
    app.state.hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.tokens = TokenService(settings.jwt_secret, settings.jwt_expires_seconds)
    app.state.rate_limiters = default_limiters() if settings.rate_limit_enabled else {}
    app.state.started_at = time.monotonic()

    # Tokens travel as bearer headers, never cookies.
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.cors_origins),
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    api_router = APIRouter(prefix=settings.api_prefix, dependencies=[Depends(rate_limit("general"))])

    @api_router.get("/")
    async def api_info():
        return {
            "success": True,
            "message": "Sign-Up API",
            "version": API_VERSION,
            "endpoints": {
                "health": f"{settings.api_prefix}/health",
                "auth": f"{settings.api_prefix}/auth",
                "docs": "/docs",
            },
        }

    api_router.include_router(auth_router)
    api_router.include_router(health_router)
    app.include_router(api_router)

    @app.get("/health")
    async def liveness():
        return {"status": "OK", "timestamp": utc_timestamp()}

    return app
