from typing import Literal

from pydantic import PositiveInt
from pydantic_settings import BaseSettings

from mt5platform.core.modules.access.models import Role


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 5000
    debug: bool = False
    redis_url: str = "redis://localhost:6379/0"
    store_backend: Literal["redis", "memory"] = "redis"  # "memory" keeps everything in-process (dev and tests)
    session_ttl_seconds: PositiveInt = 24 * 60 * 60
    bcrypt_rounds: int = 12
    cors_origins: list[str] = []
    # Seeded on startup when no users exist yet
    default_admin_username: str = "admin"
    default_admin_password: str = "admin123"
    default_admin_email: str = "admin@trading.com"
    # Per-route allow-lists, see AccessPolicy
    user_admin_roles: frozenset[Role] = frozenset({Role.ADMIN})
    account_manager_roles: frozenset[Role] = frozenset({Role.ADMIN, Role.MANAGER})

    model_config = {
        "env_file": [".env"],
        "env_prefix": "MT5PLATFORM_",
        "extra": "ignore",
    }
