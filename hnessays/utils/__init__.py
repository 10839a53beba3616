"""Utility modules for hnessays.

- **errors** -- Domain exception hierarchy rooted at HNEssaysError; each
  pipeline layer raises its own subclass so callers handle failures at the
  right boundary.
- **logging** -- structlog setup with console rendering for interactive
  runs and JSON rendering for unattended ones.
"""

from hnessays.utils.errors import (
    CheckpointError,
    ConfigurationError,
    EssaySearchError,
    EssaySourceError,
    HNEssaysError,
    ReportError,
    SearchProviderError,
)
from hnessays.utils.logging import configure_logging, get_logger

__all__ = [
    "CheckpointError",
    "ConfigurationError",
    "EssaySearchError",
    "EssaySourceError",
    "HNEssaysError",
    "ReportError",
    "SearchProviderError",
    "configure_logging",
    "get_logger",
]
