"""
Cache-aside storage on Redis.

Keys are `"<entity>:<id>"` for single entities and
`"<entities>:<skip>-<limit>[-<extra>]"` for list pages. Entries never expire
on their own (ttl 0); services invalidate them explicitly after writes.
"""

from typing import Any, Optional

import redis
from pydantic import TypeAdapter

from .config import settings

SCAN_BATCH = 100


class CacheMiss(Exception):
    pass


def cache_key(prefix: str, params: Any) -> str:
    return f"{prefix}:{params}"


def cache_key_params(*params: Any) -> str:
    return "-".join("" if p is None else str(p) for p in params)


def serialize(value: Any, type_: Any = None) -> bytes:
    adapter = TypeAdapter(type_ if type_ is not None else type(value))
    return adapter.dump_json(value)


def deserialize(raw: bytes, type_: Any) -> Any:
    return TypeAdapter(type_).validate_json(raw)


class RedisCache:
    def __init__(self, client: "redis.Redis"):
        self.client = client

    @classmethod
    def from_url(cls, url: Optional[str] = None) -> "RedisCache":
        return cls(redis.Redis.from_url(url or settings.redis_url))

    def get(self, key: str) -> bytes:
        value = self.client.get(key)
        if value is None:
            raise CacheMiss(key)
        return value

    def set(self, key: str, value: bytes, ttl: int = 0) -> None:
        # ttl 0 keeps the entry until it is invalidated.
        self.client.set(key, value, ex=ttl if ttl > 0 else None)

    def delete(self, key: str) -> bool:
        return bool(self.client.delete(key))

    def delete_by_prefix(self, prefix: str) -> int:
        removed = 0
        batch = []
        for key in self.client.scan_iter(match=f"{prefix}*", count=SCAN_BATCH):
            batch.append(key)
            if len(batch) >= SCAN_BATCH:
                removed += int(self.client.delete(*batch) or 0)
                batch = []
        if batch:
            removed += int(self.client.delete(*batch) or 0)
        return removed

    def ping(self) -> None:
        self.client.ping()

    def close(self) -> None:
        self.client.close()
