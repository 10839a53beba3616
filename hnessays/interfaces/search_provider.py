"""Abstract base class for story-search providers.

Defines the contract the essay search service uses to query an external
index of Hacker News stories.  The concrete adapter wraps the HN Algolia
API; tests inject a fake that returns canned :class:`HNPost` lists.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from hnessays.models.hit import HNPost


# Concrete implementation: AlgoliaSearchProvider (hnessays/providers/search/)
class ISearchProvider(ABC):
    """Contract for free-text story search."""

    @abstractmethod
    async def search(
        self,
        query: str,
        tags: str = "story",
        hits_per_page: int = 50,
    ) -> list[HNPost]:
        """Execute one search and return the raw candidate hits.

        Parameters
        ----------
        query:
            Free-text query string.
        tags:
            Content-category filter (``"story"`` restricts to submissions).
        hits_per_page:
            Upper bound on the number of hits returned.

        Returns
        -------
        list[HNPost]
            Zero or more hits in the provider's relevance order.

        Raises
        ------
        hnessays.utils.errors.SearchProviderError
            If the request fails or the response has an unexpected shape.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for this provider, e.g. ``"algolia"``."""
