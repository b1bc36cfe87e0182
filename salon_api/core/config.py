import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError



def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int(value: str | None, default: int) -> int:
    if value is None or not value.strip():
        return default
    return int(value.strip())


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
DEBUG = _get_bool(os.getenv("DEBUG"), default=False)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./salon.db")

CORS_ALLOWED_ORIGINS = _get_list(
    os.getenv("CORS_ALLOWED_ORIGINS"),
    default=["http://localhost:5173"],
)

# IANA zone name; empty means the host's local date.
SALON_TIMEZONE = os.getenv("SALON_TIMEZONE", "")

SERIES_DEFAULT_OCCURRENCES = _get_int(os.getenv("SERIES_DEFAULT_OCCURRENCES"), default=12)
SERIES_MAX_OCCURRENCES = _get_int(os.getenv("SERIES_MAX_OCCURRENCES"), default=52)

DAILY_BUCKET_START_HOUR = _get_int(os.getenv("DAILY_BUCKET_START_HOUR"), default=8)
DAILY_BUCKET_END_HOUR = _get_int(os.getenv("DAILY_BUCKET_END_HOUR"), default=20)
DAILY_BUCKET_STEP_HOURS = _get_int(os.getenv("DAILY_BUCKET_STEP_HOURS"), default=2)

def validate_runtime_config() -> None:
    if SERIES_DEFAULT_OCCURRENCES < 1:
        raise RuntimeError("SERIES_DEFAULT_OCCURRENCES must be at least 1.")
    if SERIES_DEFAULT_OCCURRENCES > SERIES_MAX_OCCURRENCES:
        raise RuntimeError("SERIES_DEFAULT_OCCURRENCES cannot exceed SERIES_MAX_OCCURRENCES.")
    if DAILY_BUCKET_STEP_HOURS < 1:
        raise RuntimeError("DAILY_BUCKET_STEP_HOURS must be positive.")
    if not 0 <= DAILY_BUCKET_START_HOUR <= DAILY_BUCKET_END_HOUR <= 23:
        raise RuntimeError("Daily bucket hours must satisfy 0 <= start <= end <= 23.")
    if APP_ENV.lower() == "production" and DATABASE_URL.startswith("sqlite"):
        raise RuntimeError("DATABASE_URL must point to a server database in production.")
    if SALON_TIMEZONE:
        try:
            ZoneInfo(SALON_TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise RuntimeError(f"SALON_TIMEZONE {SALON_TIMEZONE!r} is not a known IANA time zone.") from exc
