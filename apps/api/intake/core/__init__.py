"""Core configuration, auth, and shared infrastructure."""

from intake.core.config import Settings, get_settings
from intake.core.auth import create_access_token, decode_access_token
from intake.core.limiter import limiter

__all__ = [
    "Settings",
    "get_settings",
    "create_access_token",
    "decode_access_token",
    "limiter",
]
