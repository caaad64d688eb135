import logging
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from signup_auth_svc.errors import AuthFailure, FailureKind
from signup_auth_svc.models.user import User
from signup_auth_svc.schemas import UserProfile
from signup_auth_svc.security.passwords import PasswordHasher

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "User with this email already exists"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserDirectory:
    """
    Lookup and creation of users keyed by normalized email.

    The unique index on users.email is what guarantees one user per address; the
    lookup in create() only avoids hashing a password for an obvious duplicate.
    """

    def __init__(self, db: Session, hasher: PasswordHasher):
        self.db = db
        self.hasher = hasher

    def find_with_credentials(self, email: str) -> Optional[User]:
        stmt = select(User).filter(User.email == normalize_email(email))
        result = self.db.execute(stmt)
        return result.scalars().first()

    def find_by_email(self, email: str) -> Optional[UserProfile]:
        user = self.find_with_credentials(email)
        return UserProfile.model_validate(user) if user else None

    def find_by_id(self, user_id: str) -> Optional[UserProfile]:
        user = self.db.get(User, user_id)
        return UserProfile.model_validate(user) if user else None

    def create(self, full_name: str, email: str, password: str) -> Union[UserProfile, AuthFailure]:
        """
        Hash the password and insert a new user.

        Returns AuthFailure(DUPLICATE_EMAIL) when the address is taken, whether that is
        seen by the lookup or by the unique constraint at commit time.
        """
        normalized = normalize_email(email)
        if self.find_with_credentials(normalized) is not None:
            return AuthFailure(FailureKind.DUPLICATE_EMAIL, DUPLICATE_EMAIL_MESSAGE)

        user = User(
            full_name=full_name,
            email=normalized,
            password_hash=self.hasher.hash(password),
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info("Signup lost a race on an existing email")
            return AuthFailure(FailureKind.DUPLICATE_EMAIL, DUPLICATE_EMAIL_MESSAGE)
        self.db.refresh(user)
        return UserProfile.model_validate(user)
