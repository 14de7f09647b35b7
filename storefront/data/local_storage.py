# storefront/data/local_storage.py
import json
from datetime import datetime
from decimal import Decimal
from typing import Any

import redis
from redis.exceptions import RedisError

from storefront.domain.errors import BackendError
from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _encode(value: Any):
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Cannot serialize {type(value).__name__}")


def get_redis(url: str | None = None) -> redis.Redis:
    return redis.Redis.from_url(url or REDIS_URL, decode_responses=True)


class LocalStorage:
    """
    Key/value storage owned by one client device.
    Keys are namespaced as "{device_id}:{key}", values are plain strings
    and JSON helpers sit on top.
    """

    def __init__(self, client: redis.Redis, device_id: str):
        self.redis = client
        self.device_id = device_id

    def _key(self, key: str) -> str:
        return f"{self.device_id}:{key}"

    @redis_retry()
    def _get(self, key: str) -> str | None:
        return self.redis.get(self._key(key))

    @redis_retry()
    def _set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        self.redis.set(self._key(key), value, ex=ttl_seconds)

    @redis_retry()
    def _delete(self, key: str) -> None:
        self.redis.delete(self._key(key))

    def get_item(self, key: str) -> str | None:
        try:
            return self._get(key)
        except RedisError as e:
            logger.error(f"Local storage read {key} failed: {e}")
            raise BackendError("Local storage is unavailable") from e

    def set_item(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        try:
            self._set(key, value, ttl_seconds)
        except RedisError as e:
            logger.error(f"Local storage write {key} failed: {e}")
            raise BackendError("Local storage is unavailable") from e

    def remove_item(self, key: str) -> None:
        try:
            self._delete(key)
        except RedisError as e:
            logger.error(f"Local storage delete {key} failed: {e}")
            raise BackendError("Local storage is unavailable") from e

    def get_json(self, key: str, default: Any = None) -> Any:
        raw = self.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            # unreadable values count as missing
            logger.warning(f"Local storage value {key} is not valid JSON, ignoring it: {e}")
            return default

    def set_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value, default=_encode))
