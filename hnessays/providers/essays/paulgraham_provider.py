"""Essay list scraper for paulgraham.com, implementing IEssaySource.

Fetches the articles index page and keeps every anchor that looks like a
link to an essay on the same site.  The page has no semantic markup for
essays, so the filter is purely heuristic:

- ``href`` ends in ``.html``, is not ``index.html`` and is not absolute
- link text is longer than three characters
- link text is not a bare number and mentions neither ``gif`` nor ``Essays``
"""

from __future__ import annotations

import re

import httpx
from bs4 import BeautifulSoup

from hnessays.interfaces.essay_source import IEssaySource
from hnessays.models.essay import Essay
from hnessays.utils.errors import EssaySourceError
from hnessays.utils.logging import get_logger

_ESSAYS_URL = "https://www.paulgraham.com/articles.html"
_BASE_URL = "https://www.paulgraham.com/"
_DIGITS_RE = re.compile(r"^\d+$")


class PaulGrahamEssaySource(IEssaySource):
    """Scrapes the essay list from the paulgraham.com articles page.

    Parameters
    ----------
    http_client:
        Shared client; redirects must be followed by it or the caller.
    essays_url:
        Page listing every essay.
    base_url:
        Prefix joined with each relative ``href``.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        essays_url: str = _ESSAYS_URL,
        base_url: str = _BASE_URL,
    ) -> None:
        self._http = http_client
        self._essays_url = essays_url
        self._base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._logger = get_logger(__name__)

    async def fetch_essays(self) -> list[Essay]:
        try:
            response = await self._http.get(self._essays_url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise EssaySourceError(
                message=f"HTTP {exc.response.status_code} fetching {self._essays_url}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            raise EssaySourceError(
                message=f"Could not fetch {self._essays_url}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        essays = self.parse_essays(response.text)
        self._logger.info("essays_scraped", url=self._essays_url, count=len(essays))
        return essays

    def parse_essays(self, html: str) -> list[Essay]:
        """Extract essays from the articles page markup, deduplicated by URL."""
        soup = BeautifulSoup(html, "html.parser")
        essays: list[Essay] = []
        seen_urls: set[str] = set()

        for link in soup.find_all("a", href=True):
            href = link["href"].strip()
            text = link.get_text().strip()
            if not self._is_essay_link(href, text):
                continue

            url = f"{self._base_url}{href}"
            if url in seen_urls:
                continue
            seen_urls.add(url)
            essays.append(Essay(title=text, url=url, slug=href.removesuffix(".html")))

        return essays

    @staticmethod
    def _is_essay_link(href: str, text: str) -> bool:
        return (
            href.endswith(".html")
            and href != "index.html"
            and "http" not in href
            and len(text) > 3
            and not _DIGITS_RE.match(text)
            and "gif" not in text
            and "Essays" not in text
        )

    def get_provider_name(self) -> str:
        return "paulgraham.com"
