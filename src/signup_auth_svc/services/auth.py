import logging
from typing import Union

from signup_auth_svc.directory import UserDirectory
from signup_auth_svc.errors import AuthFailure, FailureKind
from signup_auth_svc.schemas import AuthResult, PublicUser
from signup_auth_svc.security.passwords import PasswordHasher
from signup_auth_svc.security.tokens import InvalidTokenError, TokenClaims, TokenService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
INVALID_TOKEN_MESSAGE = "Invalid or expired token"


class AuthService:
    """
    Signup, login and token verification.

    Stateless per call: every method works only from its arguments, the directory's
    session and the token secret. Unexpected database or hashing errors propagate.
    """

    def __init__(self, directory: UserDirectory, hasher: PasswordHasher, tokens: TokenService):
        self.directory = directory
        self.hasher = hasher
        self.tokens = tokens

    def signup(self, full_name: str, email: str, password: str) -> Union[AuthResult, AuthFailure]:
        created = self.directory.create(full_name, email, password)
        if isinstance(created, AuthFailure):
            return created

        token = self.tokens.issue(created.id, created.email)
        logger.info("User %s signed up", created.id)
        return AuthResult(
            message="User created successfully",
            token=token,
            user=PublicUser(id=created.id, fullName=created.full_name, email=created.email),
        )

    def login(self, email: str, password: str) -> Union[AuthResult, AuthFailure]:
        """
        Authenticate with email and password.

        An unknown email and a wrong password produce the same failure, so callers
        cannot tell which addresses are registered.
        """
        user = self.directory.find_with_credentials(email)
        if user is None:
            self.hasher.dummy_verify()
            logger.info("Rejected login attempt")
            return AuthFailure(FailureKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)

        if not self.hasher.verify(password, user.password_hash):
            logger.info("Rejected login attempt")
            return AuthFailure(FailureKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)

        token = self.tokens.issue(user.id, user.email)
        logger.info("User %s logged in", user.id)
        return AuthResult(
            message="Login successful",
            token=token,
            user=PublicUser(id=user.id, fullName=user.full_name, email=user.email),
        )

    def verify(self, token: str) -> Union[TokenClaims, AuthFailure]:
        # Claims are returned as issued; the user row is not re-read.
        try:
            return self.tokens.verify(token)
        except InvalidTokenError as e:
            logger.debug("Token rejected: %s", e)
            return AuthFailure(FailureKind.UNAUTHENTICATED, INVALID_TOKEN_MESSAGE)
