"""Lock-guarded schedule synchronization from Pretalx.

Provides :class:`ScheduleSyncService`, which fetches submissions, speakers
and tags from Pretalx, maps them to the canonical schedule and publishes the
result into the shared store.  Only one run may be in flight at a time across
all processes; a run that cannot take the lock fails immediately.

Every run recomputes the whole schedule and overwrites the stored sections,
so rerunning with unchanged Pretalx data is safe.
"""

import enum
import logging
import time
from dataclasses import dataclass, field

from deconf_schedule.facilitators import collect_facilitators
from deconf_schedule.mapping import ScheduleMapper
from deconf_schedule.semaphore import SemaphoreService
from deconf_schedule.settings import ScheduleConfig, get_config
from deconf_schedule.store import ScheduleStore
from pretalx_client.client import PretalxClient

logger = logging.getLogger(__name__)

LOCK_FAILED_MESSAGE = "Failed to aquire lock"


class LockNotAcquiredError(RuntimeError):
    """Raised when another process already holds the sync lock."""

    def __init__(self, message: str = LOCK_FAILED_MESSAGE) -> None:
        super().__init__(message)


class SyncState(enum.StrEnum):
    """Lifecycle of a sync run."""

    IDLE = "idle"
    ACQUIRING = "acquiring"
    RUNNING = "running"
    RELEASING = "releasing"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SyncResult:
    """Counts of what a successful run published."""

    sessions: int
    slots: int
    speakers: int
    themes: int
    tracks: int
    types: int
    facilitators: int
    dropped: list[str] = field(default_factory=list)
    keys: list[str] = field(default_factory=list)


class ScheduleSyncService:
    """Synchronizes the Pretalx schedule into the shared store.

    Builds a :class:`~pretalx_client.client.PretalxClient`, a
    :class:`~deconf_schedule.store.ScheduleStore` and a
    :class:`~deconf_schedule.semaphore.SemaphoreService` from configuration.
    The store connection is owned by the service and closed at the end of
    :meth:`run`, so a service instance runs once.

    Args:
        config: Configuration to use. Defaults to :func:`get_config`.

    Raises:
        ValueError: If no Pretalx event slug is configured.
    """

    def __init__(self, config: ScheduleConfig | None = None) -> None:
        self.config = config or get_config()
        pretalx = self.config.pretalx
        if not pretalx.event_slug:
            msg = "DECONF_SCHEDULE['pretalx']['event_slug'] is not configured"
            raise ValueError(msg)

        self.client = PretalxClient(
            pretalx.event_slug,
            base_url=pretalx.base_url,
            api_token=pretalx.token or "",
        )
        self.store = ScheduleStore.from_config(self.config.store)
        self.semaphore = SemaphoreService(self.store.cache)
        self.mapper = ScheduleMapper(self.config)
        self.state = SyncState.IDLE

    def submission_options(self) -> list[int]:
        """Return the question IDs whose answers submissions must include."""
        return submission_questions(self.config)

    def speaker_options(self) -> list[int]:
        """Return the question IDs whose answers speakers must include."""
        return speaker_questions(self.config)

    def _transition(self, state: SyncState) -> None:
        logger.debug("Schedule sync %s -> %s", self.state, state)
        self.state = state

    def run(self) -> SyncResult:
        """Run one lock-guarded fetch, map and publish cycle.

        The lock is released and the store closed whether the run succeeds or
        fails.  Before releasing, the lock is held for
        ``lock.release_delay_seconds`` more so that near-simultaneous
        triggers find it taken and skip the redundant work.

        Returns:
            Counts of the published sections.

        Raises:
            LockNotAcquiredError: If another process holds the lock.
            RuntimeError: If the Pretalx API request fails.
        """
        lock = self.config.lock
        logger.info("Starting schedule sync for %s", self.config.pretalx.event_slug)
        try:
            self._transition(SyncState.ACQUIRING)
            lease = self.semaphore.acquire(lock.key, lock.max_duration)
            if lease is None:
                raise LockNotAcquiredError

            try:
                self._transition(SyncState.RUNNING)
                result = self._sync()
                time.sleep(lock.release_delay_seconds)
                self._transition(SyncState.RELEASING)
            finally:
                lease.release()
        except Exception:
            self._transition(SyncState.FAILED)
            raise
        finally:
            self.store.close()

        self._transition(SyncState.DONE)
        logger.info(
            "Schedule sync finished: %d sessions, %d dropped, %d facilitators",
            result.sessions,
            len(result.dropped),
            result.facilitators,
        )
        return result

    def _sync(self) -> SyncResult:
        submissions = self.client.fetch_submissions(questions=self.submission_options())
        speakers = self.client.fetch_speakers(questions=self.speaker_options())
        tags = self.client.fetch_tags()
        logger.info(
            "Fetched %d submissions, %d speakers, %d tags",
            len(submissions),
            len(speakers),
            len(tags),
        )

        record = self.mapper.build_schedule(submissions, speakers, tags)
        facilitators = collect_facilitators(record.sessions, speakers)
        keys = self.store.publish(record, facilitators)

        return SyncResult(
            sessions=len(record.sessions),
            slots=len(record.slots),
            speakers=len(record.speakers),
            themes=len(record.themes),
            tracks=len(record.tracks),
            types=len(record.types),
            facilitators=len(facilitators),
            dropped=list(record.dropped),
            keys=keys,
        )


def submission_questions(config: ScheduleConfig) -> list[int]:
    """Return the question IDs needed on submissions: recommendations and links."""
    questions = config.pretalx.questions
    ids = [questions.recommendations, *questions.links]
    return [question_id for question_id in ids if question_id is not None]


def speaker_questions(config: ScheduleConfig) -> list[int]:
    """Return the question IDs needed on speakers: photo and affiliation."""
    questions = config.pretalx.questions
    ids = [questions.pulse_photo, questions.affiliation]
    return [question_id for question_id in ids if question_id is not None]
