#!/usr/bin/env python3
import os
import secrets
import sys

import psycopg
import redis
from psycopg.rows import dict_row

from backend.app.cache import RedisCache, cache_key
from backend.app.security import hash_password


def _truthy(v: str) -> bool:
    return (v or "").strip().lower() in {"1", "true", "yes", "y", "on"}


def _generate_password() -> str:
    # URL-safe and copy/paste friendly.
    return secrets.token_urlsafe(16)


def _drop_cached_user(user_id: int) -> None:
    # Direct writes bypass the services, so their cached copies go too.
    cache = RedisCache.from_url(os.getenv("REDIS_URL"))
    try:
        cache.delete(cache_key("user", user_id))
        cache.delete_by_prefix("users:")
    finally:
        cache.close()


def main() -> int:
    if not _truthy(os.getenv("BOOTSTRAP_ADMIN", "")):
        return 0

    db_url = os.getenv("DATABASE_URL")
    if not db_url:
        print("bootstrap_admin: missing DATABASE_URL", file=sys.stderr)
        return 2

    email = os.getenv("BOOTSTRAP_ADMIN_EMAIL", "admin@pos.local").strip().lower()
    if not email:
        print("bootstrap_admin: BOOTSTRAP_ADMIN_EMAIL is empty", file=sys.stderr)
        return 2

    name = os.getenv("BOOTSTRAP_ADMIN_NAME", "Administrator").strip() or "Administrator"

    password = os.getenv("BOOTSTRAP_ADMIN_PASSWORD")
    generated_password = False
    if not password:
        password = _generate_password()
        generated_password = True

    with psycopg.connect(db_url, row_factory=dict_row) as conn:
        with conn.transaction():
            with conn.cursor() as cur:
                cur.execute("SELECT id, role FROM users WHERE email = %s", (email,))
                row = cur.fetchone()
                if row:
                    # Idempotent: promote an existing account instead of duplicating it.
                    if row["role"] == "admin":
                        return 0
                    cur.execute(
                        "UPDATE users SET role = 'admin', updated_at = now() WHERE id = %s",
                        (row["id"],),
                    )
                    user_id = row["id"]
                    promoted = True
                else:
                    cur.execute(
                        """
                        INSERT INTO users (name, email, password, role)
                        VALUES (%s, %s, %s, 'admin')
                        RETURNING id
                        """,
                        (name, email, hash_password(password)),
                    )
                    user_id = cur.fetchone()["id"]
                    promoted = False

    try:
        _drop_cached_user(user_id)
    except redis.exceptions.RedisError as exc:
        print(f"bootstrap_admin: cache invalidation failed: {exc}", file=sys.stderr)
        return 1

    if promoted:
        print(f"BOOTSTRAP_ADMIN_PROMOTED {email}")
        return 0
    print("BOOTSTRAP_ADMIN_CREATED")
    print(f"email: {email}")
    if generated_password:
        print(f"password: {password}")
    else:
        print("password: (provided via BOOTSTRAP_ADMIN_PASSWORD)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
