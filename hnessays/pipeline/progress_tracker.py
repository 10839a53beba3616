"""Structured pipeline events with callback-based listener notification.

The checkpoint store and batch runner report what they do by emitting named
events here instead of printing.  Each event is logged through structlog,
kept in a per-session history, and pushed to any listeners registered for
that session:

    CheckpointStore ──emit()──→ ProgressTracker ──callback()──→ CLI progress line
    BatchRunner     ──emit()──↗                 ──history────→ tests

Listeners are keyed by session id so concurrent sessions never see each
other's events.  A listener that raises is logged and skipped; it can
neither block the pipeline nor starve the other listeners.  Both sync and
async callbacks are accepted.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import structlog

from hnessays.models.session import utc_now_iso
from hnessays.utils.logging import get_logger


@dataclass(frozen=True)
class PipelineEvent:
    """One emitted event.  ``fields`` holds the event's keyword payload."""

    session_id: str
    event: str
    fields: dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=utc_now_iso)


@dataclass
class _SessionStatus:
    """Latest event name and progress for one session."""

    event: str = ""
    progress: float = 0.0


class ProgressTracker:
    """Records and broadcasts pipeline events via callbacks.

    A ``progress`` field on an emitted event (percentage, 0-100) updates
    the session's status snapshot; values outside the range are clamped.
    """

    def __init__(self) -> None:
        self._history: dict[str, list[PipelineEvent]] = {}
        self._statuses: dict[str, _SessionStatus] = {}
        self._listeners: dict[str, list[Callable]] = {}
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def emit(self, session_id: str, event: str, **fields: Any) -> PipelineEvent:
        """Record an event and notify all listeners registered for the session.

        Parameters
        ----------
        session_id:
            The session the event belongs to.
        event:
            Snake-case event name, e.g. ``"essay_processed"``.
        **fields:
            Structured payload.  Must be JSON-friendly scalars or lists.
        """
        record = PipelineEvent(session_id=session_id, event=event, fields=dict(fields))
        self._history.setdefault(session_id, []).append(record)

        status = self._statuses.setdefault(session_id, _SessionStatus())
        status.event = event
        if "progress" in fields:
            status.progress = max(0.0, min(100.0, float(fields["progress"])))

        self._logger.debug(event, session_id=session_id, **fields)

        await self._notify_listeners(record)
        return record

    def register_listener(self, session_id: str, callback: Callable) -> None:
        """Register a callback receiving each :class:`PipelineEvent` for a session."""
        listeners = self._listeners.setdefault(session_id, [])
        if callback not in listeners:
            listeners.append(callback)
            self._logger.debug(
                "listener_registered",
                session_id=session_id,
                total_listeners=len(listeners),
            )

    def unregister_listener(self, session_id: str, callback: Callable) -> None:
        """Remove a previously registered callback for a session."""
        listeners = self._listeners.get(session_id, [])
        if callback in listeners:
            listeners.remove(callback)

    def events(self, session_id: str, name: str | None = None) -> list[PipelineEvent]:
        """Return the recorded events for a session, optionally filtered by name."""
        history = self._history.get(session_id, [])
        if name is None:
            return list(history)
        return [e for e in history if e.event == name]

    def get_status(self, session_id: str) -> dict:
        """Return ``{"event": str, "progress": float}`` for a session.

        Zeroed defaults are returned for a session that has emitted nothing.
        """
        status = self._statuses.get(session_id)
        if status is None:
            return {"event": "", "progress": 0.0}
        return {"event": status.event, "progress": status.progress}

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _notify_listeners(self, record: PipelineEvent) -> None:
        for callback in list(self._listeners.get(record.session_id, [])):
            try:
                result = callback(record)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as exc:
                self._logger.warning(
                    "listener_callback_error",
                    session_id=record.session_id,
                    pipeline_event=record.event,
                    error=str(exc),
                    callback=getattr(callback, "__name__", repr(callback)),
                )
