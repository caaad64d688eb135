import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String

from signup_auth_svc.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """
    SQLAlchemy model representing a registered user.
    Attributes:
        id (str): Opaque UUID assigned at creation.
        full_name (str): Display name, 2 to 50 characters.
        email (str): Lowercased email address, unique across users.
        password_hash (str): bcrypt digest of the user's password.
        created_at (datetime): Insert time (UTC).
        updated_at (datetime): Last update time (UTC).
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    full_name = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
