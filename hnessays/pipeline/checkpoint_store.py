"""On-disk checkpointing for resumable essay-search sessions.

Each session owns two JSON files in the checkpoint directory:

    progress-<session_id>.json   full SessionState; deleted on completion
    results-<session_id>.json    results mapping only; kept as the record

Every call to :meth:`CheckpointStore.record_processed` rewrites both files
before it returns, so a process killed at any point loses at most the essays
whose searches were still in flight.  Writes go to a temp file first and are
moved into place with ``os.replace`` so a crash mid-write never leaves a
truncated checkpoint behind.

Persistence is best-effort: a failed write is logged and emitted as a
``checkpoint_save_failed`` event, and the in-memory state stays
authoritative until the next successful write.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import os
from datetime import datetime, timezone
from pathlib import Path

import structlog
from pydantic import TypeAdapter, ValidationError

from hnessays.models.essay import Essay
from hnessays.models.hit import HNPost
from hnessays.models.session import (
    EssayResult,
    SessionState,
    SessionStats,
    to_fixed,
    utc_now_iso,
)
from hnessays.pipeline.progress_tracker import ProgressTracker
from hnessays.utils.errors import CheckpointError
from hnessays.utils.logging import get_logger

_CHECKPOINT_DIR = "data/checkpoints"
_PROGRESS_PREFIX = "progress-"
_RESULTS_PREFIX = "results-"
_SUFFIX = ".json"

_RESULTS_ADAPTER = TypeAdapter(dict[str, EssayResult])


def new_session_id(now: datetime | None = None) -> str:
    """Derive a filesystem-safe session id from a UTC timestamp.

    ``2026-10-17T05:49:12.345+00:00`` becomes ``2026-10-17T05-49-12-345Z``.
    Ids sort chronologically as plain strings.
    """
    now = now or datetime.now(tz=timezone.utc)
    return now.strftime("%Y-%m-%dT%H-%M-%S-") + f"{now.microsecond // 1000:03d}Z"


def _atomic_write(path: Path, payload: str) -> None:
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, path)
    except OSError as exc:
        with contextlib.suppress(OSError):
            tmp_path.unlink(missing_ok=True)
        raise CheckpointError(f"Could not write {path.name}: {exc}") from exc


class CheckpointStore:
    """Owns one session's state and persists every change to disk.

    Construct via :meth:`create` (new session) or :meth:`load` (resume).
    The state is never handed out for mutation: callers read it through
    :attr:`state`, :meth:`remaining`, :meth:`stats` and :attr:`results`,
    and change it only through :meth:`seed`, :meth:`record_processed`
    and :meth:`complete`.

    Parameters
    ----------
    state:
        Initial session state.
    checkpoint_dir:
        Directory holding the session's progress and results files.
    tracker:
        Event sink; a private tracker is created when omitted.
    """

    def __init__(
        self,
        state: SessionState,
        checkpoint_dir: str | Path = _CHECKPOINT_DIR,
        tracker: ProgressTracker | None = None,
    ) -> None:
        self._state = state
        self._checkpoint_dir = Path(checkpoint_dir)
        self._tracker = tracker or ProgressTracker()
        # Mirrors state.processed_essays for O(1) membership tests.
        self._processed: set[str] = set(state.processed_essays)
        self._write_lock = asyncio.Lock()
        self._logger: structlog.BoundLogger = get_logger(__name__).bind(
            session_id=state.session_id
        )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    async def create(
        cls,
        session_id: str | None = None,
        checkpoint_dir: str | Path = _CHECKPOINT_DIR,
        tracker: ProgressTracker | None = None,
    ) -> CheckpointStore:
        """Start a new, empty session.  Nothing is written until :meth:`seed`."""
        store = cls(
            SessionState(session_id=session_id or new_session_id()),
            checkpoint_dir=checkpoint_dir,
            tracker=tracker,
        )
        store._logger.info("session_created", checkpoint_dir=str(store._checkpoint_dir))
        await store._emit("session_created")
        return store

    @classmethod
    async def load(
        cls,
        session_id: str,
        checkpoint_dir: str | Path = _CHECKPOINT_DIR,
        tracker: ProgressTracker | None = None,
    ) -> CheckpointStore:
        """Resume a persisted session, or start it fresh if it cannot be read.

        Never raises for a missing or corrupt checkpoint: resuming is
        best-effort, and the fallback is an empty session under the same id.
        """
        path = Path(checkpoint_dir) / f"{_PROGRESS_PREFIX}{session_id}{_SUFFIX}"
        state: SessionState | None = None
        reason = ""

        if not path.exists():
            reason = "missing"
        else:
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
                state = _repair(SessionState.model_validate({**raw, "session_id": session_id}))
            except (OSError, ValueError, ValidationError, TypeError) as exc:
                reason = f"unreadable: {exc}"

        if state is None:
            store = cls(SessionState(session_id=session_id), checkpoint_dir, tracker)
            store._logger.warning("session_load_failed_starting_fresh", reason=reason)
            await store._emit("session_load_failed", reason=reason)
            return store

        store = cls(state, checkpoint_dir, tracker)
        stats = store.stats()
        store._logger.info(
            "session_resumed",
            processed=stats.processed,
            total=stats.total,
            percentage=stats.percentage,
        )
        await store._emit("session_loaded", processed=stats.processed, total=stats.total)
        return store

    @staticmethod
    def list_sessions(checkpoint_dir: str | Path = _CHECKPOINT_DIR) -> list[str]:
        """Return the ids of all resumable sessions, oldest first."""
        directory = Path(checkpoint_dir)
        if not directory.is_dir():
            return []
        return sorted(
            p.name[len(_PROGRESS_PREFIX):-len(_SUFFIX)]
            for p in directory.glob(f"{_PROGRESS_PREFIX}*{_SUFFIX}")
            if p.is_file()
        )

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def session_id(self) -> str:
        return self._state.session_id

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def results(self) -> dict[str, EssayResult]:
        return dict(self._state.results)

    @property
    def tracker(self) -> ProgressTracker:
        return self._tracker

    @property
    def progress_path(self) -> Path:
        return self._checkpoint_dir / f"{_PROGRESS_PREFIX}{self.session_id}{_SUFFIX}"

    @property
    def results_path(self) -> Path:
        return self._checkpoint_dir / f"{_RESULTS_PREFIX}{self.session_id}{_SUFFIX}"

    def is_processed(self, essay: Essay) -> bool:
        return essay.key in self._processed

    def remaining(self) -> list[Essay]:
        """Essays not yet processed, in original list order."""
        return [e for e in self._state.essays if e.key not in self._processed]

    def is_complete(self) -> bool:
        return len(self._processed) >= len(self._state.essays)

    def stats(self) -> SessionStats:
        processed = len(self._processed)
        total = self._state.total_essays or len(self._state.essays)
        percentage = to_fixed(processed / total * 100, 1) if total > 0 else "0.0"
        return SessionStats(
            session_id=self.session_id,
            processed=processed,
            total=total,
            percentage=percentage,
            remaining=max(total - processed, 0),
            has_results=bool(self._state.results),
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def seed(self, essays: list[Essay]) -> None:
        """Attach the full essay list to the session and persist it."""
        self._state = self._state.model_copy(
            update={"essays": list(essays), "total_essays": len(essays)}
        )
        await self._persist(results=False)
        self._logger.info("essays_seeded", total=len(essays))
        await self._emit("essays_seeded", total=len(essays))

    async def record_processed(self, essay: Essay, posts: list[HNPost]) -> EssayResult:
        """Record one essay's outcome and persist both files before returning.

        An essay that is already processed is left untouched: processing is
        append-only and the first recorded result stands.
        """
        if essay.key in self._processed:
            self._logger.warning("essay_already_processed", title=essay.title)
            return self._state.results[essay.key]

        result = EssayResult.from_posts(essay, posts)
        self._processed.add(essay.key)
        self._state = self._state.model_copy(
            update={
                "processed_essays": [*self._state.processed_essays, essay.key],
                "results": {**self._state.results, essay.key: result},
                "current_index": self._state.current_index + 1,
            }
        )

        await self._persist(results=True)

        stats = self.stats()
        self._logger.info(
            "essay_processed",
            title=essay.title,
            posts=result.total_posts,
            max_points=result.max_points,
            processed=stats.processed,
            total=stats.total,
            percentage=stats.percentage,
        )
        await self._emit(
            "essay_processed",
            title=essay.title,
            posts=result.total_posts,
            max_points=result.max_points,
            processed=stats.processed,
            total=stats.total,
            progress=float(stats.percentage),
        )
        return result

    async def complete(self) -> None:
        """Mark the session complete and delete its progress file.

        The results file is rewritten and kept as the durable outcome.
        """
        self._state = self._state.model_copy(
            update={"completed": True, "end_time": utc_now_iso()}
        )
        await self._persist(results=True)

        try:
            await asyncio.to_thread(self.progress_path.unlink)
            self._logger.info("progress_file_removed", path=str(self.progress_path))
        except OSError as exc:
            self._logger.warning(
                "progress_file_cleanup_failed",
                path=str(self.progress_path),
                error=str(exc),
            )

        self._logger.info("session_completed", processed=len(self._processed))
        await self._emit("session_completed", processed=len(self._processed), progress=100.0)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def _persist(self, results: bool) -> None:
        async with self._write_lock:
            writes = [(self.progress_path, self._state.model_dump_json(indent=2))]
            if results:
                writes.append(
                    (
                        self.results_path,
                        _RESULTS_ADAPTER.dump_json(self._state.results, indent=2).decode("utf-8"),
                    )
                )
            for path, payload in writes:
                try:
                    await asyncio.to_thread(_atomic_write, path, payload)
                except CheckpointError as exc:
                    self._logger.error("checkpoint_save_failed", path=str(path), error=str(exc))
                    await self._emit("checkpoint_save_failed", path=str(path), error=str(exc))

    async def _emit(self, event: str, **fields: object) -> None:
        await self._tracker.emit(self.session_id, event, **fields)


def _repair(state: SessionState) -> SessionState:
    """Restore the processed/results invariants of a loaded checkpoint.

    Duplicate titles and titles without a result entry are dropped from the
    processed list (they will be searched again); ``current_index`` is reset
    to match.
    """
    seen: set[str] = set()
    processed: list[str] = []
    for title in state.processed_essays:
        if title in state.results and title not in seen:
            seen.add(title)
            processed.append(title)
    results = {k: v for k, v in state.results.items() if k in seen}
    total = state.total_essays or len(state.essays)
    if (
        processed == state.processed_essays
        and len(results) == len(state.results)
        and state.current_index == len(processed)
        and total == state.total_essays
    ):
        return state
    return state.model_copy(
        update={
            "processed_essays": processed,
            "results": results,
            "current_index": len(processed),
            "total_essays": total,
        }
    )
