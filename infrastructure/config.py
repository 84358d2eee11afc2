"""Application configuration read from the environment.

Defaults are suitable for local development only; production deployments
must at least override BOOKING_API_SECRET_KEY.
"""

import os


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


APP_TITLE = os.environ.get("BOOKING_API_TITLE", "Listing Booking API")
APP_VERSION = os.environ.get("BOOKING_API_VERSION", "1.0.0")
APP_DESCRIPTION = "Rental listings with availability windows and host-approved bookings"

# JWT
SECRET_KEY = os.environ.get("BOOKING_API_SECRET_KEY", "dev-secret-key-change-me")
ALGORITHM = os.environ.get("BOOKING_API_JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = _env_int("BOOKING_API_TOKEN_EXPIRE_MINUTES", 30)

LOG_LEVEL = os.environ.get("BOOKING_API_LOG_LEVEL", "INFO").upper()
