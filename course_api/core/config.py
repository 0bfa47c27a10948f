import os

from dotenv import load_dotenv


load_dotenv()


def _get_int(value: str | None, default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./courses.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ALLOWED_ORIGINS = _get_list(
    os.getenv("CORS_ALLOWED_ORIGINS"),
    default=["http://localhost:3000"],
)

BCRYPT_ROUNDS = _get_int(os.getenv("BCRYPT_ROUNDS"), default=12)
AUTH_REALM = os.getenv("AUTH_REALM", "course-api")


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and DATABASE_URL.startswith("sqlite"):
        raise RuntimeError("DATABASE_URL must point at a server database in production.")
