"""Session state models for the resumable essay-search pipeline.

``SessionState`` is the single source of truth for one processing run and
the exact shape persisted to the checkpoint file.  Like the other models it
is frozen: the checkpoint store advances it by producing new copies via
``model_copy(update={...})`` and nothing else holds a reference to it.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field

from hnessays.models.essay import Essay
from hnessays.models.hit import HNPost


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string with a ``Z`` suffix."""
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_fixed(value: float, places: int) -> str:
    """Format *value* with *places* decimals, rounding ties away from zero."""
    return str(Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


class EssayResult(BaseModel):
    """Outcome of searching Hacker News for one essay.

    ``hn_posts`` is ordered by points, highest first.  ``total_posts`` and
    ``max_points`` are derived from it when the result is recorded so that
    reports and status output never need to recompute them.
    """

    model_config = ConfigDict(frozen=True)

    essay: Essay
    hn_posts: list[HNPost] = Field(default_factory=list)
    total_posts: int = Field(default=0, ge=0)
    max_points: int = Field(default=0, ge=0)
    processed_at: str = Field(default_factory=utc_now_iso)

    @classmethod
    def from_posts(cls, essay: Essay, posts: list[HNPost]) -> EssayResult:
        return cls(
            essay=essay,
            hn_posts=list(posts),
            total_posts=len(posts),
            max_points=max((p.points for p in posts), default=0),
        )


class SessionState(BaseModel):
    """Durable checkpoint of one processing run.

    Invariants maintained by :class:`~hnessays.pipeline.checkpoint_store.CheckpointStore`:

    - ``len(processed_essays) == current_index == len(results)``
    - every title in ``processed_essays`` is a key of ``results``
    - ``processed_essays`` is append-only and keeps insertion order
    """

    model_config = ConfigDict(frozen=True)

    session_id: str
    start_time: str = Field(default_factory=utc_now_iso)
    end_time: str | None = None
    essays: list[Essay] = Field(default_factory=list)
    total_essays: int = Field(default=0, ge=0)
    processed_essays: list[str] = Field(default_factory=list)
    results: dict[str, EssayResult] = Field(default_factory=dict)
    current_index: int = Field(default=0, ge=0)
    completed: bool = False


class SessionStats(BaseModel):
    """Progress snapshot returned by ``CheckpointStore.stats()``.

    ``percentage`` is a string with exactly one decimal place (``"66.7"``)
    so it can be printed and compared without float formatting surprises.
    """

    model_config = ConfigDict(frozen=True)

    session_id: str
    processed: int
    total: int
    percentage: str
    remaining: int
    has_results: bool
