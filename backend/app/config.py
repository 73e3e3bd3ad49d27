import os
from typing import List


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _truthy(raw: str) -> bool:
    return str(raw or "").strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    def _split_csv(self, raw: str, *, default: List[str]) -> List[str]:
        parts = [p.strip() for p in (raw or "").split(",")]
        return [p for p in parts if p] or default

    def __init__(self) -> None:
        self.env = os.getenv('APP_ENV', 'local')
        self.db_url = os.getenv('DATABASE_URL', 'postgresql://localhost/pos')
        # Pool sizing defaults are conservative for local/dev.
        self.db_pool_min = _env_int("DB_POOL_MIN_SIZE", 1)
        self.db_pool_max = _env_int("DB_POOL_MAX_SIZE", 10)
        # Applied per connection; a timed-out statement aborts its transaction.
        self.db_statement_timeout_ms = _env_int("DB_STATEMENT_TIMEOUT_MS", 15000)
        self.redis_url = os.getenv("REDIS_URL", "redis://127.0.0.1:6379/0").strip()
        self.token_key = os.getenv("TOKEN_SYMMETRIC_KEY", "")
        self.access_token_minutes = _env_int("ACCESS_TOKEN_DURATION_MINUTES", 15)
        # When false, a failed cache write after a committed mutation is logged instead of failing the call.
        self.cache_write_strict = _truthy(os.getenv("CACHE_WRITE_STRICT", "true"))
        self.cors_origins = self._split_csv(
            os.getenv("CORS_ORIGINS", "").strip(),
            default=["http://localhost:3000", "http://127.0.0.1:3000"],
        )
        self.log_level = (os.getenv("LOG_LEVEL", "info").strip().lower() or "info")
        self.api_version = os.getenv("APP_VERSION", "0.1.0").strip() or "0.1.0"

settings = Settings()
