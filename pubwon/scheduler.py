"""Scheduler — scan → digest → newsletter loops with chained triggers."""

from __future__ import annotations

import asyncio
import os
from collections.abc import Awaitable, Callable

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pubwon.engines.activity_scanner.runner import ActivityScanRunner
from pubwon.engines.digest.runner import DigestRunner
from pubwon.engines.notification.runner import NewsletterRunner

logger = structlog.get_logger(__name__)


class EngineLoop:
    """Single engine scheduling loop with trigger/timeout wake mechanism."""

    def __init__(
        self,
        name: str,
        run_fn: Callable[[], Awaitable[int]],
        interval: float,
        downstream: asyncio.Event | None = None,
    ) -> None:
        self.name = name
        self.run_fn = run_fn
        self.interval = interval
        self.trigger = asyncio.Event()
        self.downstream = downstream

    async def run_once(self) -> int:
        """One cycle; wakes the downstream loop if anything was processed."""
        processed = await self.run_fn()
        logger.info("engine.cycle", engine=self.name, processed=processed)
        if processed > 0 and self.downstream is not None:
            self.downstream.set()
        return processed

    async def loop(self) -> None:
        """Run the engine in an infinite loop, waking on trigger or timeout."""
        while True:
            try:
                await asyncio.wait_for(self.trigger.wait(), timeout=self.interval)
                self.trigger.clear()
            except asyncio.TimeoutError:
                pass

            try:
                await self.run_once()
            except Exception:
                logger.exception("engine.error", engine=self.name)


class Scheduler:
    """Manages lifecycle of all EngineLoop tasks."""

    def __init__(self, loops: list[EngineLoop]) -> None:
        self._loops = loops
        self._tasks: list[asyncio.Task[None]] = []

    @property
    def loops(self) -> list[EngineLoop]:
        return list(self._loops)

    async def start(self) -> None:
        """Start all engine loops as asyncio tasks."""
        self._tasks = [
            asyncio.create_task(loop.loop(), name=f"engine-{loop.name}") for loop in self._loops
        ]
        # Kick off the first engine immediately
        if self._loops:
            self._loops[0].trigger.set()
        logger.info("scheduler.started", engines=[loop.name for loop in self._loops])

    async def stop(self) -> None:
        """Cancel all engine loops and wait for them to exit."""
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        logger.info("scheduler.stopped")


def _env_float(key: str, default: float) -> float:
    return float(os.environ.get(key, default))


def scheduler_enabled() -> bool:
    return os.environ.get("PUBWON_SCHEDULER_ENABLED", "false").lower() in ("1", "true", "yes")


def create_scheduler(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    scan_runner: ActivityScanRunner,
    digest_runner: DigestRunner,
    newsletter_runner: NewsletterRunner,
) -> Scheduler:
    """Build a Scheduler with the three engines wired in a chain."""
    scan_interval = _env_float("PUBWON_SCAN_INTERVAL", 86400)
    digest_interval = _env_float("PUBWON_DIGEST_INTERVAL", 3600)
    newsletter_interval = _env_float("PUBWON_NEWSLETTER_INTERVAL", 3600)

    trigger_newsletter = asyncio.Event()
    trigger_digest = asyncio.Event()

    async def _scan() -> int:
        results = await scan_runner.run_all(session_factory)
        return sum(1 for r in results if r.significant)

    async def _digest() -> int:
        results = await digest_runner.run_batch(session_factory)
        return sum(1 for r in results if r.blog_post_id is not None)

    async def _newsletter() -> int:
        results = await newsletter_runner.run_batch(session_factory)
        return len(results)

    newsletter_loop = EngineLoop("newsletter", _newsletter, newsletter_interval)
    newsletter_loop.trigger = trigger_newsletter

    digest_loop = EngineLoop("digest", _digest, digest_interval, downstream=trigger_newsletter)
    digest_loop.trigger = trigger_digest

    scan_loop = EngineLoop("scanner", _scan, scan_interval, downstream=trigger_digest)

    return Scheduler([scan_loop, digest_loop, newsletter_loop])
