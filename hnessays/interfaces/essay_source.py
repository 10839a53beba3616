"""Abstract base class for the essay list collaborator."""

from __future__ import annotations

from abc import ABC, abstractmethod

from hnessays.models.essay import Essay


# Concrete implementation: PaulGrahamEssaySource (hnessays/providers/essays/)
class IEssaySource(ABC):
    """Contract for fetching the full list of essays to search for."""

    @abstractmethod
    async def fetch_essays(self) -> list[Essay]:
        """Return every essay, deduplicated by URL, in page order.

        Raises
        ------
        hnessays.utils.errors.EssaySourceError
            If the list cannot be fetched.  The pipeline treats this as fatal.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for this source, e.g. ``"paulgraham.com"``."""
