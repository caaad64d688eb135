import pytest
from fastapi.testclient import TestClient

from signup_auth_svc.app import create_app
from signup_auth_svc.config import Settings
from signup_auth_svc.errors import AuthHTTPException, FailureKind
from signup_auth_svc.ratelimit import RateLimiter


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class FakeRequest:
    class _Client:
        host = "10.0.0.1"

    class _URL:
        path = "/api/auth/login"

    client = _Client()
    url = _URL()


def test_limiter_blocks_after_max_requests():
    clock = FakeClock()
    limiter = RateLimiter(2, 60, "slow down", clock=clock)
    assert limiter.hit("ip") is None
    assert limiter.hit("ip") is None
    assert limiter.hit("ip") == 60


def test_limiter_window_resets():
    clock = FakeClock()
    limiter = RateLimiter(1, 60, "slow down", clock=clock)
    assert limiter.hit("ip") is None
    clock.now += 30
    assert limiter.hit("ip") == 30
    clock.now += 30
    assert limiter.hit("ip") is None


def test_limiter_counts_keys_separately():
    limiter = RateLimiter(1, 60, "slow down", clock=FakeClock())
    assert limiter.hit("a") is None
    assert limiter.hit("b") is None
    assert limiter.hit("a") is not None


@pytest.mark.asyncio
async def test_limiter_dependency_raises_rate_limited():
    limiter = RateLimiter(1, 60, "slow down", clock=FakeClock())
    await limiter(FakeRequest())

    with pytest.raises(AuthHTTPException) as exc_info:
        await limiter(FakeRequest())
    assert exc_info.value.failure.kind is FailureKind.RATE_LIMITED
    assert exc_info.value.failure.status_code == 429
    assert exc_info.value.headers == {"Retry-After": "60"}


def test_signup_route_is_rate_limited():
    settings = Settings(database_url="sqlite://", jwt_secret="test-secret", bcrypt_rounds=4, environment="test")
    app = create_app(settings)

    with TestClient(app) as client:
        statuses = [
            client.post(
                "/api/auth/signup",
                json={"fullName": "Jane Doe", "email": f"jane{i}@ex.com", "password": "Abcdef12"},
            ).status_code
            for i in range(4)
        ]
        response = client.post(
            "/api/auth/signup",
            json={"fullName": "Jane Doe", "email": "late@ex.com", "password": "Abcdef12"},
        )

    assert statuses[:3] == [201, 201, 201]
    assert statuses[3] == 429
    assert response.status_code == 429
    assert response.json() == {"success": False, "message": "Too many signup attempts, please try again later"}
    assert "Retry-After" in response.headers


def test_expired_windows_are_dropped():
    clock = FakeClock()
    limiter = RateLimiter(5, 60, "slow down", clock=clock)
    for i in range(1000):
        limiter.hit(f"10.0.{i // 256}.{i % 256}")
    assert len(limiter) == 1000

    clock.now += 60
    limiter.hit("10.9.9.9")
    assert len(limiter) == 1


def test_live_windows_survive_sweep():
    clock = FakeClock()
    limiter = RateLimiter(1, 60, "slow down", clock=clock)
    limiter.hit("old")
    clock.now += 59
    limiter.hit("recent")
    clock.now += 1
    limiter.hit("new")

    assert len(limiter) == 2
    assert limiter.hit("recent") is not None
