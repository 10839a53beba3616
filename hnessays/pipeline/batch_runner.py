"""Grouped, resumable execution of essay searches.

# ─── DESIGN ────────────────────────────────────────────────────────────
#
# BatchRunner drives every unprocessed essay through the search service:
#   - remaining() is cut into consecutive groups of ``batch_size``
#   - members of a group are searched concurrently (asyncio.gather)
#   - each member is recorded in the checkpoint store the moment its own
#     search resolves, not when the whole group finishes
#   - the next group starts only after every member of the previous one
#     has been recorded, then after ``batch_delay`` seconds
#
# A crash mid-group therefore loses only the in-flight members, and a
# resume restarts exactly at the boundary implied by remaining().
#
# Per-essay failures never abort the run: the essay is recorded with an
# empty result so it is not searched again.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

import structlog

from hnessays.models.essay import Essay
from hnessays.models.hit import HNPost
from hnessays.models.session import EssayResult
from hnessays.pipeline.checkpoint_store import CheckpointStore
from hnessays.pipeline.progress_tracker import ProgressTracker
from hnessays.services.essay_search import EssaySearchService
from hnessays.utils.logging import get_logger

_MIN_ADAPTIVE_SIZE = 2
_MAX_ADAPTIVE_SIZE = 10
_FAST_MS = 500.0
_SLOW_MS = 2000.0


def adaptive_batch_size(avg_ms: float, current: int) -> int:
    """Suggest the next group width from the average search duration.

    Grows by one (up to 10) when searches average under 500 ms and shrinks
    by one (down to 2) when they average over 2 s.
    """
    if avg_ms < _FAST_MS:
        return min(current + 1, _MAX_ADAPTIVE_SIZE)
    if avg_ms > _SLOW_MS:
        return max(current - 1, _MIN_ADAPTIVE_SIZE)
    return current


def estimate_time_remaining(remaining: int, avg_ms: float) -> str:
    """Format ``remaining * avg_ms`` as a rounded ``"42s"``, ``"7m"`` or ``"2h"``."""
    remaining_ms = remaining * avg_ms
    if remaining_ms < 60_000:
        return f"{round(remaining_ms / 1000)}s"
    if remaining_ms < 3_600_000:
        return f"{round(remaining_ms / 60_000)}m"
    return f"{round(remaining_ms / 3_600_000)}h"


@dataclass
class _ItemOutcome:
    essay: Essay
    posts: list[HNPost] = field(default_factory=list)
    duration_ms: float = 0.0
    success: bool = True
    error: str = ""


class BatchRunner:
    """Searches all remaining essays in throttled concurrent groups.

    Parameters
    ----------
    search_service:
        Resolves one essay into its ranked list of matching posts.
    store:
        Checkpoint store owning the session; the only writer of its state.
    batch_size:
        Number of essays searched concurrently per group.
    batch_delay:
        Seconds to wait between groups.  Not applied after the last group.
    sleep:
        Awaitable sleep used for the inter-group delay.
    tracker:
        Event sink; defaults to the store's tracker.
    adaptive:
        When true, the group width is re-tuned after every group with
        :func:`adaptive_batch_size`.
    """

    def __init__(
        self,
        search_service: EssaySearchService,
        store: CheckpointStore,
        batch_size: int = 5,
        batch_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        tracker: ProgressTracker | None = None,
        adaptive: bool = False,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self._search_service = search_service
        self._store = store
        self._batch_size = batch_size
        self._batch_delay = batch_delay
        self._sleep = sleep
        self._tracker = tracker or store.tracker
        self._adaptive = adaptive
        self._logger: structlog.BoundLogger = get_logger(__name__).bind(
            session_id=store.session_id
        )

    @property
    def batch_size(self) -> int:
        return self._batch_size

    async def run(self, essays: list[Essay] | None = None) -> dict[str, EssayResult]:
        """Process every essay the store reports as remaining.

        *essays* seeds the store when the session has no cached essay list
        (a new session, or a resumed one whose checkpoint was lost).  A
        resumed session keeps its own list and ignores the argument.

        Returns the store's full results mapping once nothing remains.
        """
        if not self._store.state.essays and essays:
            await self._store.seed(essays)

        remaining = self._store.remaining()
        width = self._batch_size
        started = time.perf_counter()

        self._logger.info(
            "run_started",
            total=len(self._store.state.essays),
            remaining=len(remaining),
            batch_size=width,
        )
        await self._emit(
            "run_started",
            total=len(self._store.state.essays),
            remaining=len(remaining),
            batch_size=width,
        )

        index = 0
        batch_num = 0
        while index < len(remaining):
            group = remaining[index:index + width]
            index += len(group)
            batch_num += 1

            self._logger.info("batch_started", batch=batch_num, size=len(group))
            await self._emit("batch_started", batch=batch_num, size=len(group))

            outcomes = await asyncio.gather(*(self._process(essay) for essay in group))

            successful = [o for o in outcomes if o.success]
            avg_ms = (
                sum(o.duration_ms for o in successful) / len(successful) if successful else 0.0
            )
            stats = self._store.stats()
            self._logger.info(
                "batch_completed",
                batch=batch_num,
                successful=len(successful),
                size=len(group),
                avg_ms=round(avg_ms),
                processed=stats.processed,
                total=stats.total,
                percentage=stats.percentage,
                eta=estimate_time_remaining(stats.remaining, avg_ms),
            )
            await self._emit(
                "batch_completed",
                batch=batch_num,
                successful=len(successful),
                size=len(group),
                avg_ms=round(avg_ms),
                processed=stats.processed,
                total=stats.total,
                progress=float(stats.percentage),
            )

            if self._adaptive and successful:
                new_width = adaptive_batch_size(avg_ms, width)
                if new_width != width:
                    self._logger.info("batch_size_adjusted", old=width, new=new_width)
                    width = new_width

            if index < len(remaining):
                self._logger.debug("batch_delay", seconds=self._batch_delay)
                await self._sleep(self._batch_delay)

        stats = self._store.stats()
        elapsed = round(time.perf_counter() - started, 2)
        self._logger.info(
            "run_completed",
            batches=batch_num,
            processed=stats.processed,
            total=stats.total,
            elapsed_s=elapsed,
        )
        await self._emit(
            "run_completed",
            batches=batch_num,
            processed=stats.processed,
            total=stats.total,
        )
        return self._store.results

    async def _process(self, essay: Essay) -> _ItemOutcome:
        outcome = _ItemOutcome(essay=essay)
        start = time.perf_counter()
        try:
            outcome.posts = await self._search_service.search_essay(essay)
        except Exception as exc:
            outcome.success = False
            outcome.error = str(exc)
            self._logger.warning("essay_failed", title=essay.title, error=str(exc))
            await self._emit("essay_failed", title=essay.title, error=str(exc))
        outcome.duration_ms = (time.perf_counter() - start) * 1000

        if outcome.success:
            self._logger.debug(
                "essay_searched",
                title=essay.title,
                posts=len(outcome.posts),
                duration_ms=round(outcome.duration_ms),
            )
            await self._emit(
                "essay_searched",
                title=essay.title,
                posts=len(outcome.posts),
                duration_ms=round(outcome.duration_ms),
            )

        # Failed essays are recorded empty so they are never retried.
        await self._store.record_processed(essay, outcome.posts)
        return outcome

    async def _emit(self, event: str, **fields: object) -> None:
        await self._tracker.emit(self._store.session_id, event, **fields)
