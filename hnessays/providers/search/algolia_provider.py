"""HN Algolia search provider implementing ISearchProvider.

Queries the public Algolia index of Hacker News
(``https://hn.algolia.com/api/v1/search``).  No API key is needed.  Every
failure mode of a single request (transport error, non-2xx status,
non-JSON body, unexpected payload shape) is raised as
:class:`SearchProviderError` so the caller can drop that one query.
"""

from __future__ import annotations

import httpx
import structlog

from hnessays.interfaces.search_provider import ISearchProvider
from hnessays.models.hit import HNPost
from hnessays.utils.errors import SearchProviderError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_API_URL = "https://hn.algolia.com/api/v1/search"


class AlgoliaSearchProvider(ISearchProvider):
    """Story search backed by the HN Algolia REST API.

    The ``httpx.AsyncClient`` is injected so connections are pooled across
    the whole run and tests can swap in an ``httpx.MockTransport``.
    """

    def __init__(self, http_client: httpx.AsyncClient, api_url: str = _DEFAULT_API_URL) -> None:
        self._http = http_client
        self._api_url = api_url

    async def search(
        self,
        query: str,
        tags: str = "story",
        hits_per_page: int = 50,
    ) -> list[HNPost]:
        params = {"query": query, "tags": tags, "hitsPerPage": hits_per_page}
        try:
            response = await self._http.get(self._api_url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise SearchProviderError(
                message=f"HTTP {exc.response.status_code} for query {query!r}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            raise SearchProviderError(
                message=f"Request failed for query {query!r}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise SearchProviderError(
                message=f"Non-JSON response for query {query!r}",
                provider_name=self.get_provider_name(),
            ) from exc

        if not isinstance(payload, dict):
            raise SearchProviderError(
                message=f"Unexpected payload type {type(payload).__name__}",
                provider_name=self.get_provider_name(),
            )
        hits = payload.get("hits", [])
        if not isinstance(hits, list):
            raise SearchProviderError(
                message=f"'hits' is {type(hits).__name__}, expected list",
                provider_name=self.get_provider_name(),
            )

        posts = [HNPost.from_algolia(item) for item in hits if isinstance(item, dict)]
        logger.debug("algolia_search_complete", query=query, result_count=len(posts))
        return posts

    def get_provider_name(self) -> str:
        return "algolia"
