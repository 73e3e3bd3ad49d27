"""
Cache-aside plumbing shared by every entity service.

Reads: a cache failure or an undecodable entry is a miss, never an error.
Writes (after the database commit): evictions and list invalidations always
escalate failures as `Internal`; population of a single entry does too
unless `CACHE_WRITE_STRICT` is off, in which case it is logged and skipped.
"""

from contextlib import contextmanager
from typing import Any, Optional

import redis
from pydantic import ValidationError

from ..cache import CacheMiss, RedisCache, deserialize, serialize
from ..config import settings
from ..errors import DomainError, Internal
from ..logs import json_log


@contextmanager
def service_errors(op: str):
    """Let domain errors through untouched; normalize everything else to `Internal`."""
    try:
        yield
    except DomainError:
        raise
    except Exception as exc:
        json_log("error", "service.internal_error", op=op, error_type=type(exc).__name__, error=str(exc))
        raise Internal() from exc


class CachedService:
    def __init__(self, cache: RedisCache, cache_write_strict: Optional[bool] = None):
        self.cache = cache
        self.cache_write_strict = settings.cache_write_strict if cache_write_strict is None else cache_write_strict

    def _cache_get(self, key: str, type_: Any):
        try:
            raw = self.cache.get(key)
        except CacheMiss:
            return None
        except redis.exceptions.RedisError as exc:
            json_log("warning", "cache.read_failed", key=key, error=str(exc))
            return None
        try:
            return deserialize(raw, type_)
        except (ValidationError, ValueError) as exc:
            json_log("warning", "cache.decode_failed", key=key, error=str(exc))
            return None

    def _cache_set(self, key: str, value: Any, type_: Any = None) -> None:
        try:
            self.cache.set(key, serialize(value, type_), 0)
        except redis.exceptions.RedisError as exc:
            if self.cache_write_strict:
                raise Internal() from exc
            json_log("warning", "cache.write_failed", key=key, error=str(exc))

    def _cache_evict(self, key: str) -> None:
        try:
            removed = self.cache.delete(key)
        except redis.exceptions.RedisError as exc:
            raise Internal() from exc
        if not removed:
            json_log("debug", "cache.evict_miss", key=key)

    def _cache_invalidate(self, prefix: str) -> None:
        try:
            self.cache.delete_by_prefix(prefix)
        except redis.exceptions.RedisError as exc:
            raise Internal() from exc
