import pytest
from fastapi.testclient import TestClient

from signup_auth_svc.app import create_app
from signup_auth_svc.config import Settings
from signup_auth_svc.directory import UserDirectory
from signup_auth_svc.models.base import init_db
from signup_auth_svc.models.user import User
from signup_auth_svc.security.passwords import PasswordHasher
from signup_auth_svc.security.tokens import TokenService
from signup_auth_svc.services.auth import AuthService

TEST_SECRET = "test-secret"


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        environment="test",
        rate_limit_enabled=False,
    )


@pytest.fixture
def app(settings):
    app = create_app(settings)
    init_db(app.state.engine)
    yield app
    app.state.engine.dispose()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens():
    return TokenService(TEST_SECRET)


@pytest.fixture
def directory(db_session, hasher):
    return UserDirectory(db_session, hasher)


@pytest.fixture
def auth_service(directory, hasher, tokens):
    return AuthService(directory, hasher, tokens)


@pytest.fixture
def create_user(db_session, hasher):
    """
    Insert a user row directly, bypassing the signup flow.
    """

    def _create(email="test@example.com", password="Secret123", full_name="Test User"):
        user = User(full_name=full_name, email=email, password_hash=hasher.hash(password))
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create
