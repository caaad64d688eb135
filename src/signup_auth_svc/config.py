import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv


def _env_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _env_bool(name: str, default: bool) -> bool:
    """
    Parse a boolean environment variable.

    Accepted truthy values: 1, true, yes, on. Accepted falsy values: 0, false, no, off.
    Anything else (or an unset variable) yields the default.
    """
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    return default


@dataclass(frozen=True)
class Settings:
    """
    Runtime configuration for the service.

    Secrets such as JWT_SECRET must come from the environment or a .env file.
    """
    database_url: str = "sqlite:///./signup_auth.sqlite"
    jwt_secret: str = "change-me-jwt-secret"
    jwt_expires_seconds: int = 24 * 60 * 60
    bcrypt_rounds: int = 12
    environment: str = "development"
    log_level: str = "INFO"
    api_prefix: str = "/api"
    rate_limit_enabled: bool = True
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: Tuple[str, ...] = ("*",)

    def __post_init__(self):
        if not self.jwt_secret:
            raise ValueError("JWT_SECRET must not be blank")
        if self.jwt_expires_seconds <= 0:
            raise ValueError("JWT_EXPIRES_SECONDS must be positive")

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        load_dotenv(env_file)
        return cls(
            database_url=os.environ.get("DATABASE_URL", cls.database_url),
            jwt_secret=os.environ.get("JWT_SECRET", cls.jwt_secret),
            jwt_expires_seconds=int(os.environ.get("JWT_EXPIRES_SECONDS", cls.jwt_expires_seconds)),
            bcrypt_rounds=int(os.environ.get("BCRYPT_ROUNDS", cls.bcrypt_rounds)),
            environment=os.environ.get("APP_ENV", cls.environment),
            log_level=os.environ.get("LOG_LEVEL", cls.log_level),
            api_prefix=os.environ.get("API_PREFIX", cls.api_prefix),
            rate_limit_enabled=_env_bool("RATE_LIMIT_ENABLED", cls.rate_limit_enabled),
            host=os.environ.get("API_HOST", cls.host),
            port=int(os.environ.get("API_PORT", cls.port)),
            cors_origins=_env_list("CORS_ORIGINS", cls.cors_origins),
        )
