"""
Redis cache for per-tenant pricing data.
Degrades to a no-op when Redis is disabled or unreachable.
"""

import logging
import json
from typing import Any, Optional, Callable, Dict
from datetime import datetime, date
from decimal import Decimal

import redis
from redis.exceptions import RedisError, ConnectionError, TimeoutError
from flask import Flask, current_app, has_app_context

logger = logging.getLogger(__name__)


class CacheService:
    """
    Redis-based cache with tenant-isolated keys.

    Keys pattern: {prefix}:tenant:{tenant_id}:{module}:{key}
    Shared entries (tenant_id=None): {prefix}:shared:{module}:{key}
    """

    def __init__(self, app: Optional[Flask] = None):
        self.client: Optional[redis.Redis] = None
        self._enabled: bool = False
        self._prefix: str = ""

        if app:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """Connect to Redis using the Flask app config."""
        self._enabled = app.config.get('CACHE_ENABLED', True)
        self._prefix = app.config.get('CACHE_KEY_PREFIX', 'misproductos')
        redis_url = app.config.get('REDIS_URL', 'redis://redis:6379/0')

        if not self._enabled:
            logger.info("[CACHE] Cache is DISABLED via config")
            return

        try:
            self.client = redis.from_url(
                redis_url,
                decode_responses=True,
                socket_connect_timeout=3,
                socket_timeout=3,
                retry_on_timeout=True,
                health_check_interval=30
            )
            self.client.ping()
            logger.info(f"[CACHE] Redis connected: {redis_url}")
        except (ConnectionError, TimeoutError, RedisError) as e:
            logger.warning(f"[CACHE] Redis connection failed: {e}. Cache DISABLED.")
            self._enabled = False
            self.client = None

    @property
    def enabled(self) -> bool:
        return self._enabled and self.client is not None

    def build_key(self, tenant_id: Optional[int], module: str, key: str) -> str:
        if tenant_id is None:
            return f"{self._prefix}:shared:{module}:{key}"
        return f"{self._prefix}:tenant:{tenant_id}:{module}:{key}"

    @staticmethod
    def serialize(value: Any) -> str:
        """JSON with Decimals kept exact and datetimes as ISO strings."""
        def default_handler(obj: Any) -> Any:
            if isinstance(obj, (datetime, date)):
                return obj.isoformat()
            if isinstance(obj, Decimal):
                return {"__decimal__": str(obj)}
            raise TypeError(f"Object of type {type(obj)} is not JSON serializable")
        return json.dumps(value, default=default_handler)

    @staticmethod
    def deserialize(value: str) -> Any:
        def object_hook(dct: Dict[str, Any]) -> Any:
            if "__decimal__" in dct:
                return Decimal(dct["__decimal__"])
            return dct
        return json.loads(value, object_hook=object_hook)

    def get(self, tenant_id: Optional[int], module: str, key: str) -> Optional[Any]:
        if not self.enabled:
            return None
        try:
            value = self.client.get(self.build_key(tenant_id, module, key))
            if value is None:
                return None
            return self.deserialize(value)
        except (RedisError, json.JSONDecodeError) as e:
            logger.warning(f"[CACHE] Get error: {e}")
            return None

    def set(self, tenant_id: Optional[int], module: str, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        if not self.enabled:
            return False
        try:
            if ttl is None:
                ttl = current_app.config.get('CACHE_DEFAULT_TTL', 60) if has_app_context() else 60
            self.client.setex(self.build_key(tenant_id, module, key), ttl, self.serialize(value))
            return True
        except (RedisError, TypeError) as e:
            logger.warning(f"[CACHE] Set error: {e}")
            return False

    def invalidate_module(self, tenant_id: Optional[int], module: str) -> int:
        """Delete every key of a tenant module. Returns how many were removed."""
        if not self.enabled:
            return 0
        pattern = self.build_key(tenant_id, module, "*")
        deleted_count = 0
        try:
            for key in self.client.scan_iter(match=pattern, count=100):
                self.client.delete(key)
                deleted_count += 1
        except RedisError as e:
            logger.warning(f"[CACHE] Invalidate error: {e}")
            return deleted_count
        if deleted_count:
            logger.info(f"[CACHE] INVALIDATE: {pattern} ({deleted_count} keys)")
        return deleted_count

    def memoize(self, tenant_id: Optional[int], module: str, key: str,
                loader_fn: Callable[[], Any], ttl: Optional[int] = None) -> Any:
        """Cache-aside: return the cached value or load, store and return it."""
        cached = self.get(tenant_id, module, key)
        if cached is not None:
            return cached
        value = loader_fn()
        self.set(tenant_id, module, key, value, ttl)
        return value


_cache_service: Optional[CacheService] = None


def init_cache(app: Flask) -> None:
    """Initialize cache service singleton."""
    global _cache_service
    _cache_service = CacheService(app)
    app.extensions['cache'] = _cache_service


def get_cache() -> Optional[CacheService]:
    """Cache service instance, or None before init_cache ran (scripts, unit tests)."""
    return _cache_service


def cached(tenant_id: Optional[int], module: str, key: str, loader_fn: Callable[[], Any],
           ttl: Optional[int] = None, use_cache: bool = True) -> Any:
    """memoize() through the singleton, or a plain load when caching is off."""
    cache = get_cache()
    if not use_cache or cache is None:
        return loader_fn()
    return cache.memoize(tenant_id, module, key, loader_fn, ttl)


def invalidate(tenant_id: Optional[int], module: str) -> int:
    cache = get_cache()
    if cache is None:
        return 0
    return cache.invalidate_module(tenant_id, module)
