"""Abstract base class for essay/hit relevance strategies.

The search service pools every hit returned by its query variants and asks
a scorer whether each one is "about" the essay.  Keeping this a single-method
strategy lets alternative heuristics (token overlap, edit distance) be
swapped in without touching the search service.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from hnessays.models.essay import Essay
from hnessays.models.hit import HNPost


# Concrete implementations: SubstringMatchScorer (default), TokenOverlapMatchScorer
# (hnessays/services/match_scorers.py)
class IMatchScorer(ABC):
    """Decides whether a search hit refers to a given essay."""

    @abstractmethod
    def is_match(self, essay: Essay, post: HNPost) -> bool:
        """Return ``True`` if *post* is judged to be about *essay*.

        Must be a pure function of its arguments: no I/O, no state.
        """
