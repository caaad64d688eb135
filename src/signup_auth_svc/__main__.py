import uvicorn

from signup_auth_svc.config import Settings


def main() -> None:
    settings = Settings.from_env()
    uvicorn.run(
        "signup_auth_svc.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
