# src/sneaker_vault/core/rate_limit.py
from slowapi import Limiter
from slowapi.util import get_remote_address

from sneaker_vault.core import config


def upstream_limit() -> str:
    """Limit für Routen, die den (selbst limitierten) Upstream-Provider treffen."""
    settings = config.get_settings()
    return f"{settings.rate_limit_requests}/{settings.rate_limit_window_seconds} seconds"


limiter = Limiter(key_func=get_remote_address)
