from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import BaseModel, ValidationError

JWT_ALGORITHM = "HS256"
DEFAULT_EXPIRES_SECONDS = 24 * 60 * 60


class InvalidTokenError(Exception):
    """
    Raised when a session token fails signature, shape or expiry checks.
    """


class TokenClaims(BaseModel):
    """
    Identity carried inside a session token.
    """
    userId: str
    email: str
    iat: int
    exp: int


class TokenService:
    """
    Issues and verifies stateless HS256 session tokens.

    Verification depends only on the token, the secret and the current time, so a
    restarted process keeps accepting tokens as long as the secret is unchanged.
    """

    def __init__(self, secret: str, expires_seconds: int = DEFAULT_EXPIRES_SECONDS):
        if not secret:
            raise ValueError("jwt secret must not be blank")
        self._secret = secret
        self.expires_seconds = expires_seconds

    def issue(self, user_id: str, email: str, now: Optional[datetime] = None) -> str:
        if now is not None and now.tzinfo is None:
            raise ValueError("issue time must be timezone-aware")
        issued_at = now or datetime.now(timezone.utc)
        expires_at = issued_at + timedelta(seconds=self.expires_seconds)
        payload = {
            "userId": user_id,
            "email": email,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        if not token:
            raise InvalidTokenError("token is blank")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
            return TokenClaims(**payload)
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("token expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(str(e)) from e
        except ValidationError as e:
            raise InvalidTokenError("token claims are malformed") from e

    def decode(self, token: str) -> Optional[TokenClaims]:
        """
        Parse a token without checking its signature or expiry.

        For introspection only; never use the result to authorize a request.
        """
        try:
            payload = jwt.decode(token, options={"verify_signature": False})
            return TokenClaims(**payload)
        except (jwt.InvalidTokenError, ValidationError, TypeError):
            return None
