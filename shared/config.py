# shared/config.py
import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    environment: str = field(default_factory=lambda: os.getenv("ENVIRONMENT", "development"))
    session_secret: str = field(
        default_factory=lambda: os.getenv("SESSION_SECRET", "your-secret-key-change-in-production")
    )
    session_max_age: int = field(default_factory=lambda: int(os.getenv("SESSION_MAX_AGE", str(24 * 60 * 60))))
    storage_backend: str = field(default_factory=lambda: os.getenv("STORAGE_BACKEND", "memory"))
    database_url: str = field(
        default_factory=lambda: os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./school.db")
    )
    database_echo: bool = field(default_factory=lambda: _env_bool("DATABASE_ECHO", "false"))
    cors_origins: List[str] = field(default_factory=lambda: _env_list("CORS_ORIGINS", "*"))
    seed_defaults: bool = field(default_factory=lambda: _env_bool("SEED_DEFAULTS", "true"))
    default_admin_email: str = field(default_factory=lambda: os.getenv("DEFAULT_ADMIN_EMAIL", "admin@ecole.com"))
    default_admin_password: str = field(default_factory=lambda: os.getenv("DEFAULT_ADMIN_PASSWORD", "admin23"))
    bcrypt_rounds: int = field(default_factory=lambda: int(os.getenv("BCRYPT_ROUNDS", "12")))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def get_settings() -> Settings:
    return Settings()
