"""Per-essay Hacker News search: query fan-out, relevance filter, ranking.

For one essay the service runs a fixed list of query variants one after
another, pools every hit, keeps the ones the match scorer accepts,
deduplicates them by HN item id and ranks them by points.  A failing
variant only loses its own hits; the essay fails as a whole only when no
variant could be executed at all.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from hnessays.interfaces.match_scorer import IMatchScorer
from hnessays.interfaces.search_provider import ISearchProvider
from hnessays.models.essay import Essay
from hnessays.models.hit import HNPost
from hnessays.services.match_scorers import SubstringMatchScorer
from hnessays.utils.errors import EssaySearchError, SearchProviderError
from hnessays.utils.logging import get_logger


class EssaySearchService:
    """Resolves an :class:`Essay` into its ranked list of matching posts.

    Parameters
    ----------
    provider:
        Search backend queried once per variant.
    scorer:
        Relevance strategy; :class:`SubstringMatchScorer` when omitted.
    site_domain:
        Domain used for the ``site:`` query variant.
    tags:
        Content-category filter passed to every query.
    hits_per_page:
        Result cap passed to every query.
    query_delay:
        Seconds to wait between consecutive variants.
    sleep:
        Awaitable sleep used for the delay.
    """

    def __init__(
        self,
        provider: ISearchProvider,
        scorer: IMatchScorer | None = None,
        site_domain: str = "paulgraham.com",
        tags: str = "story",
        hits_per_page: int = 50,
        query_delay: float = 0.1,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._provider = provider
        self._scorer = scorer or SubstringMatchScorer(site_domain=site_domain)
        self._site_domain = site_domain
        self._tags = tags
        self._hits_per_page = hits_per_page
        self._query_delay = query_delay
        self._sleep = sleep
        self._logger: structlog.BoundLogger = get_logger(__name__)

    def build_queries(self, essay: Essay) -> list[str]:
        """Return the query variants for *essay*, in execution order."""
        return [
            essay.title,
            f'"{essay.title}"',
            essay.url,
            f"site:{self._site_domain} {essay.title}",
            essay.slug,
        ]

    async def search_essay(self, essay: Essay) -> list[HNPost]:
        """Search every variant and return the relevant posts, highest points first.

        An empty list means nothing relevant was found.

        Raises
        ------
        EssaySearchError
            If every query variant failed.
        """
        queries = self.build_queries(essay)
        pooled: list[HNPost] = []
        failures = 0

        for position, query in enumerate(queries):
            if position > 0:
                await self._sleep(self._query_delay)
            try:
                hits = await self._provider.search(
                    query, tags=self._tags, hits_per_page=self._hits_per_page
                )
            except SearchProviderError as exc:
                failures += 1
                self._logger.warning(
                    "search_query_failed",
                    title=essay.title,
                    query=query,
                    error=str(exc),
                )
                continue
            pooled.extend(hits)

        if failures == len(queries):
            raise EssaySearchError(
                message=f"All {failures} queries failed for '{essay.title}'",
                provider_name=self._provider.get_provider_name(),
            )

        posts = self._rank(essay, pooled)
        self._logger.debug(
            "essay_search_complete",
            title=essay.title,
            candidates=len(pooled),
            matches=len(posts),
            failed_queries=failures,
        )
        return posts

    def _rank(self, essay: Essay, hits: list[HNPost]) -> list[HNPost]:
        seen: set[str] = set()
        relevant: list[HNPost] = []
        for hit in hits:
            if hit.id in seen or not self._scorer.is_match(essay, hit):
                continue
            seen.add(hit.id)
            relevant.append(hit)
        # sorted() is stable, so equal scores keep discovery order.
        return sorted(relevant, key=lambda p: p.points, reverse=True)
