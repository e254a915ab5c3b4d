"""Publishing the schedule into the shared key-value store.

The store is a Django cache (Redis in production).  Each schedule section is
written under its own ``<prefix>.<section>`` key with no expiry, followed by
``<prefix>.facilitators``.  Writes are independent: a failure part-way
through leaves earlier sections updated and later ones stale until the next
successful run.

To let non-Python readers consume the keys, configure the Redis cache with
:class:`JSONSerializer` and :func:`raw_key`::

    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.redis.RedisCache",
            "LOCATION": os.environ["REDIS_URL"],
            "KEY_FUNCTION": "deconf_schedule.store.raw_key",
            "OPTIONS": {"serializer": "deconf_schedule.store.JSONSerializer"},
        }
    }
"""

import json
import logging
from typing import Any

from django.core.cache import BaseCache, caches
from django.core.cache.backends.redis import RedisCache
from django.core.serializers.json import DjangoJSONEncoder

from deconf_schedule.records import ScheduleRecord
from deconf_schedule.settings import StoreConfig

logger = logging.getLogger(__name__)

FACILITATORS_SECTION = "facilitators"


def raw_key(key: str, key_prefix: str, version: int) -> str:  # noqa: ARG001
    """Cache key function that stores keys verbatim."""
    return key


class JSONSerializer:
    """Serializer for Django's Redis cache that stores plain JSON.

    Integers are passed through untouched so that ``incr``/``decr`` keep
    working, as with Django's default serializer.
    """

    def __init__(self, protocol: int | None = None) -> None:  # noqa: ARG002
        pass

    def dumps(self, obj: Any) -> bytes | int:
        """Encode *obj* as UTF-8 JSON bytes, leaving integers as they are."""
        if type(obj) is int:
            return obj
        return json.dumps(obj, cls=DjangoJSONEncoder).encode("utf-8")

    def loads(self, data: bytes | int) -> Any:
        """Decode a value written by :meth:`dumps`."""
        if isinstance(data, int):
            return data
        return json.loads(data)


class ScheduleStore:
    """Key-value access to the published schedule.

    Args:
        cache: The Django cache backing the store.
        key_prefix: Namespace prepended to every section key.
    """

    def __init__(self, cache: BaseCache, *, key_prefix: str = "schedule") -> None:
        self.cache = cache
        self.key_prefix = key_prefix

    @classmethod
    def from_config(cls, config: StoreConfig) -> "ScheduleStore":
        """Build a store on the cache alias named in *config*."""
        return cls(caches[config.cache_alias], key_prefix=config.key_prefix)

    def key(self, section: str) -> str:
        """Return the namespaced key for *section*."""
        return f"{self.key_prefix}.{section}"

    def put(self, key: str, value: Any) -> None:
        """Write *value* under *key* with no expiry, replacing any old value."""
        logger.debug("Writing %s", key)
        self.cache.set(key, value, timeout=None)

    def get(self, key: str, default: Any = None) -> Any:
        """Read the value under *key*."""
        return self.cache.get(key, default)

    def close(self) -> None:
        """Release the connection to the underlying cache.

        Django's ``RedisCache.close`` does nothing, so the Redis client's
        connection pools are disconnected and discarded here.
        """
        self.cache.close()
        if not isinstance(self.cache, RedisCache):
            return
        # The client is created lazily; no client means no open pools
        client = self.cache.__dict__.get("_cache")
        if client is None:
            return
        for pool in client._pools.values():  # noqa: SLF001
            pool.disconnect()
        client._pools.clear()  # noqa: SLF001
        logger.debug("Disconnected Redis connection pools")

    def publish(self, record: ScheduleRecord, facilitators: list[str]) -> list[str]:
        """Write every section of *record*, then the facilitator set.

        Args:
            record: The schedule to publish.
            facilitators: Email hashes of confirmed-session speakers.

        Returns:
            The keys written, in write order.
        """
        written: list[str] = []
        for section, value in record.sections().items():
            key = self.key(section)
            self.put(key, value)
            written.append(key)
        key = self.key(FACILITATORS_SECTION)
        self.put(key, list(facilitators))
        written.append(key)
        logger.info("Published %d schedule keys under %s", len(written), self.key_prefix)
        return written
