"""Non-blocking cross-process lock backed by the Django cache.

:meth:`SemaphoreService.acquire` either takes the lock immediately or
returns ``None``; it never waits.  The lock key carries a TTL, so a holder
that dies without releasing stops blocking other runs once the TTL passes.
Each lease holds a random token and only the holder of the current token
can release the key.
"""

import logging
import secrets
from dataclasses import dataclass, field
from datetime import timedelta

from django.core.cache import BaseCache

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Lease:
    """A held lock, returned by :meth:`SemaphoreService.acquire`."""

    key: str
    token: str
    service: "SemaphoreService" = field(repr=False)
    released: bool = False

    def release(self) -> bool:
        """Release the lock. See :meth:`SemaphoreService.release`."""
        return self.service.release(self)


class SemaphoreService:
    """Named mutual-exclusion locks stored in a cache.

    Args:
        cache: A cache whose ``add`` is atomic across processes (Redis, or
            the local-memory cache within one process).
    """

    def __init__(self, cache: BaseCache) -> None:
        self.cache = cache

    def acquire(self, key: str, max_duration: timedelta) -> Lease | None:
        """Try to take the lock named *key*.

        Args:
            key: Lock name.
            max_duration: How long the lock is honoured before it expires on
                its own.

        Returns:
            A :class:`Lease` when the lock was free, ``None`` otherwise.
        """
        token = secrets.token_hex(16)
        if not self.cache.add(key, token, timeout=max_duration.total_seconds()):
            logger.info("Lock %s is held by another process", key)
            return None
        logger.debug("Acquired lock %s for %s", key, max_duration)
        return Lease(key=key, token=token, service=self)

    def release(self, lease: Lease) -> bool:
        """Release *lease* if it still owns its lock.

        Returns:
            ``True`` if the lock was deleted, ``False`` if the lease had
            already been released, expired, or been taken over.
        """
        if lease.released:
            return False
        lease.released = True
        if self.cache.get(lease.key) != lease.token:
            logger.warning("Lock %s expired before release; leaving it untouched", lease.key)
            return False
        self.cache.delete(lease.key)
        logger.debug("Released lock %s", lease.key)
        return True
