"""hnessays domain models -- re-exports all public model classes.

    - essay.py    -- the essay reference searched for (unit of work)
    - hit.py      -- one Hacker News story returned by the search API
    - session.py  -- checkpointed session state, per-essay results, stats
    - report.py   -- aggregated statistics and rankings for the writers
"""

from __future__ import annotations

from hnessays.models.essay import Essay
from hnessays.models.hit import HNPost
from hnessays.models.report import RankedPost, Report, ReportStatistics
from hnessays.models.session import EssayResult, SessionState, SessionStats

__all__ = [
    "Essay",
    "EssayResult",
    "HNPost",
    "RankedPost",
    "Report",
    "ReportStatistics",
    "SessionState",
    "SessionStats",
]
