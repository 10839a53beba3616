"""Resumable search pipeline: checkpointing, grouped execution and events.

    - checkpoint_store.py  -- owns SessionState and persists every change
    - batch_runner.py      -- searches remaining essays in throttled groups
    - progress_tracker.py  -- structured events with per-session listeners
"""

from hnessays.pipeline.batch_runner import (
    BatchRunner,
    adaptive_batch_size,
    estimate_time_remaining,
)
from hnessays.pipeline.checkpoint_store import CheckpointStore, new_session_id
from hnessays.pipeline.progress_tracker import PipelineEvent, ProgressTracker

__all__ = [
    "BatchRunner",
    "CheckpointStore",
    "PipelineEvent",
    "ProgressTracker",
    "adaptive_batch_size",
    "estimate_time_remaining",
    "new_session_id",
]
