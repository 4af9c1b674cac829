"""Redis-backed challenge store.

Challenges are stored as plain digit strings with SETEX, so entries are
readable with redis-cli and expire on their own. ``pop`` uses GETDEL, which
makes the verify lookup and its deletion a single atomic command.

Unlike the URL cache, failures are not swallowed: a captcha that cannot be
stored or checked must fail the request, so every RedisError is logged and
re-raised as StoreUnavailableError.
"""

from typing import Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from errors import StoreUnavailableError
from infrastructure.cache.protocol import StoredValue
from shared.logging import get_logger

log = get_logger(__name__)


class RedisChallengeStore:
    def __init__(self, redis_client: aioredis.Redis) -> None:
        self._redis = redis_client

    async def get(self, key: str) -> Optional[StoredValue]:
        try:
            return await self._redis.get(key)
        except RedisError as e:
            raise self._unavailable("get", key, e) from e

    async def set(self, key: str, value: str, ttl: int) -> None:
        try:
            await self._redis.setex(key, ttl, value)
        except RedisError as e:
            raise self._unavailable("set", key, e) from e

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(key)
        except RedisError as e:
            raise self._unavailable("delete", key, e) from e

    async def pop(self, key: str) -> Optional[StoredValue]:
        try:
            return await self._redis.getdel(key)
        except RedisError as e:
            raise self._unavailable("pop", key, e) from e

    async def ping(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except RedisError as e:
            log.warning("challenge_store_ping_failed", error=str(e))
            return False

    @staticmethod
    def _unavailable(op: str, key: str, exc: Exception) -> StoreUnavailableError:
        log.error(
            "challenge_store_error",
            op=op,
            store_key=key,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return StoreUnavailableError(f"challenge store {op} failed")
