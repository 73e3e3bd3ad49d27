#!/usr/bin/env python3
import os

import uvicorn


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    return int(raw) if raw.isdigit() else default


def main() -> int:
    uvicorn.run(
        "backend.app.main:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=_env_int("API_PORT", 8000),
        workers=_env_int("API_WORKERS", 1),
        log_level=(os.getenv("LOG_LEVEL", "info").strip().lower() or "info"),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
