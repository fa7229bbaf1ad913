"""Deferred cancellation of ring-only calls."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_MISSED, JobExecutionEvent
from apscheduler.job import Job
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger
from loguru import logger

from ringgate.calls.contracts import CallService
from ringgate.errors import CancellationAbandonedError, CancellationFailedError

RING_DURATION_SECONDS = 5.0
JOB_ID_PREFIX = "ring-stop:"

FailureObserver = Callable[[str, Exception], Awaitable[None]]


class CallTerminator:
    """Schedules exactly one stop request per started call on an asyncio scheduler.

    Cancellation failures never propagate: the response for the call has
    already been returned by the time the job runs.
    """

    def __init__(
        self,
        calls: CallService,
        *,
        delay_seconds: float = RING_DURATION_SECONDS,
        misfire_grace_seconds: int = 30,
        on_failure: FailureObserver | None = None,
        scheduler: AsyncIOScheduler | None = None,
    ) -> None:
        self._calls = calls
        self._delay_seconds = delay_seconds
        self._misfire_grace_seconds = misfire_grace_seconds
        self._on_failure = on_failure
        self._in_flight: set[str] = set()
        self._scheduler = scheduler or AsyncIOScheduler(timezone=UTC)
        self._scheduler.add_listener(self._on_job_event, EVENT_JOB_ERROR | EVENT_JOB_MISSED)

    @property
    def delay_seconds(self) -> float:
        return self._delay_seconds

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self) -> None:
        if not self._scheduler.running:
            self._scheduler.start()

    def shutdown(self) -> None:
        if not self._scheduler.running:
            return
        for call_id in [*self.pending(), *self.in_flight()]:
            logger.warning("ring.cancel.abandoned call_id={}", call_id)
        self._scheduler.shutdown(wait=False)

    def pending(self) -> list[str]:
        return [str(job.args[0]) for job in self._scheduler.get_jobs() if job.id.startswith(JOB_ID_PREFIX)]

    def in_flight(self) -> list[str]:
        """Call ids whose stop request has started but not finished."""
        return sorted(self._in_flight)

    def schedule(self, call_id: str) -> Job:
        """Queue the stop request for ``call_id`` and return without waiting."""
        job_id = f"{JOB_ID_PREFIX}{call_id}"
        if self._scheduler.get_job(job_id) is not None:
            logger.warning("ring.cancel.replaced call_id={}", call_id)
        run_date = datetime.now(UTC) + timedelta(seconds=self._delay_seconds)
        job = self._scheduler.add_job(
            self._cancel,
            trigger=DateTrigger(run_date=run_date),
            args=[call_id],
            id=job_id,
            replace_existing=True,
            misfire_grace_time=self._misfire_grace_seconds,
            coalesce=True,
            max_instances=1,
        )
        logger.info("ring.cancel.scheduled call_id={} run_at={}", call_id, run_date.isoformat())
        return job

    async def _cancel(self, call_id: str) -> None:
        self._in_flight.add(call_id)
        try:
            stopped = await self._calls.stop_voice_call(call_id)
        except asyncio.CancelledError:
            logger.warning("ring.cancel.interrupted call_id={}", call_id)
            await self._report(call_id, CancellationAbandonedError(call_id))
            raise
        except Exception as exc:
            logger.opt(exception=True).warning("ring.cancel.failed call_id={}", call_id)
            await self._report(call_id, exc)
            return
        finally:
            self._in_flight.discard(call_id)

        if stopped is False:
            logger.warning("ring.cancel.refused call_id={}", call_id)
            await self._report(call_id, CancellationFailedError(call_id))
            return
        logger.info("ring.cancel.done call_id={}", call_id)

    async def _report(self, call_id: str, error: Exception) -> None:
        if self._on_failure is None:
            return
        try:
            await self._on_failure(call_id, error)
        except Exception:
            logger.opt(exception=True).warning("ring.cancel.observer_failed call_id={}", call_id)

    @staticmethod
    def _on_job_event(event: JobExecutionEvent) -> None:
        if event.code == EVENT_JOB_MISSED:
            logger.warning("ring.cancel.missed job_id={} scheduled={}", event.job_id, event.scheduled_run_time)
            return
        logger.error("ring.cancel.job_error job_id={} error={!r}", event.job_id, event.exception)
